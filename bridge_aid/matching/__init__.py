"""Resource matching pipeline.

This module provides:
- ResourceMatcher: category, eligibility, language and distance ranking
- ZipProximity: the randomized ZIP distance heuristic
- derive_user_tags / is_eligible: the eligibility-tag rule
"""

from .distance import ZipProximity
from .eligibility import LOW_INCOME, PARENT, SENIOR, derive_user_tags, is_eligible
from .engine import MAX_RESULTS, ResourceMatcher, supports_language

__all__ = [
    "ResourceMatcher",
    "ZipProximity",
    "derive_user_tags",
    "is_eligible",
    "supports_language",
    "MAX_RESULTS",
    "LOW_INCOME",
    "SENIOR",
    "PARENT",
]
