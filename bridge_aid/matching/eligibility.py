"""Eligibility tags derived from user criteria and the tag-overlap rule."""

from typing import FrozenSet, Iterable

from bridge_aid.domain.models import AgeRange, IncomeBracket, UserCriteria

LOW_INCOME = "low_income"
SENIOR = "senior"
PARENT = "parent"

_LOW_INCOME_BRACKETS = frozenset({IncomeBracket.LOW, IncomeBracket.VERY_LOW})


def derive_user_tags(criteria: UserCriteria) -> FrozenSet[str]:
    """Tags the user qualifies for.

    - ``low_income``: income bracket low or very_low
    - ``senior``: age 65+
    - ``parent``: household larger than one (a proxy; household members are
      not necessarily children)
    """
    tags = set()
    if criteria.income_bracket in _LOW_INCOME_BRACKETS:
        tags.add(LOW_INCOME)
    if criteria.age_range == AgeRange.AGE_65_PLUS.value:
        tags.add(SENIOR)
    if criteria.household_size > 1:
        tags.add(PARENT)
    return frozenset(tags)


def is_eligible(resource_tags: Iterable[str], user_tags: FrozenSet[str]) -> bool:
    """A resource passes unless both tag sets are non-empty and disjoint."""
    resource_tag_set = set(resource_tags)
    if not resource_tag_set or not user_tags:
        return True
    return not resource_tag_set.isdisjoint(user_tags)
