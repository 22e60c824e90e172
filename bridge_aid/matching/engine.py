"""Resource matching engine for ranking catalog resources against user criteria.

This module implements the matching pipeline that:
1. Keeps resources of the requested category
2. Drops resources whose eligibility tags exclude the user
3. Prefers resources supporting the user's language (never empties the list)
4. Annotates each remaining resource with an estimated distance
5. Sorts by distance, then name, and truncates to the result limit
"""

import logging
import random
from typing import Iterable, List, Optional, Sequence

from bridge_aid.domain.models import DEFAULT_LANGUAGE, MatchResult, Resource, UserCriteria
from bridge_aid.logging import get_logger

from .distance import ZipProximity
from .eligibility import derive_user_tags, is_eligible

logger = get_logger(__name__, component="matching")

MAX_RESULTS = 5


def supports_language(resource: Resource, language: str) -> bool:
    """Case-insensitive language check; an empty language list supports every language."""
    if not resource.languages_supported:
        return True
    wanted = language.casefold()
    return any(lang.casefold() == wanted for lang in resource.languages_supported)


class ResourceMatcher:
    """Ranks catalog resources for one user.

    Responsibilities:
    - Filter by category and eligibility
    - Apply the soft language preference
    - Estimate distance and rank
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_results: int = MAX_RESULTS,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize ResourceMatcher.

        Args:
            rng: Random source for distance estimates (seed it for reproducible output)
            max_results: Result limit, at most 5
            logger_instance: Optional logger instance (defaults to module logger)
        """
        if not 1 <= max_results <= MAX_RESULTS:
            raise ValueError(f"max_results must be between 1 and {MAX_RESULTS}, got: {max_results}")
        self.proximity = ZipProximity(rng)
        self.max_results = max_results
        self.logger = logger_instance or logger

    def match(self, resources: Iterable[Resource], criteria: UserCriteria) -> List[MatchResult]:
        """Run the pipeline and return at most ``max_results`` ranked matches.

        Never raises for well-formed inputs; no candidates yields an empty list.
        """
        in_category = [r for r in resources if r.category == criteria.primary_need]

        user_tags = derive_user_tags(criteria)
        eligible = [r for r in in_category if is_eligible(r.eligibility_tags, user_tags)]

        language = criteria.preferred_language or DEFAULT_LANGUAGE
        preferred = self._prefer_language(eligible, language)

        ranked = sorted(
            (
                MatchResult.from_resource(r, self.proximity.estimate(criteria.zip, r.zip))
                for r in preferred
            ),
            key=lambda m: (m.distance, m.name),
        )
        results = ranked[: self.max_results]

        self.logger.debug(
            f"Matched {len(results)} resources for {criteria.primary_need}",
            extra={
                "event": "matching.pipeline.completed",
                "primary_need": criteria.primary_need,
                "in_category": len(in_category),
                "eligible": len(eligible),
                "language_kept": len(preferred),
                "returned": len(results),
                "user_tags": sorted(user_tags),
            },
        )
        return results

    def _prefer_language(self, resources: Sequence[Resource], language: str) -> Sequence[Resource]:
        supported = [r for r in resources if supports_language(r, language)]
        if supported:
            return supported
        if resources:
            self.logger.debug(
                f"No resources support {language}; keeping all eligible resources",
                extra={
                    "event": "matching.language.relaxed",
                    "language": language,
                    "candidates": len(resources),
                },
            )
        return resources
