"""Domain models for resources, criteria and match results."""

from .models import (
    DEFAULT_LANGUAGE,
    ActionPlan,
    AgeRange,
    Category,
    IncomeBracket,
    MatchResult,
    Resource,
    UserCriteria,
)

__all__ = [
    "DEFAULT_LANGUAGE",
    "ActionPlan",
    "AgeRange",
    "Category",
    "IncomeBracket",
    "MatchResult",
    "Resource",
    "UserCriteria",
]
