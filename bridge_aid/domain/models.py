"""Core domain models: resources, user criteria and match results.

- Resource: canonical catalog entry, immutable and shared across requests
- UserCriteria: one request's matching inputs
- ActionPlan: ordered "how to access this" steps
- MatchResult: a Resource annotated with distance and an optional ActionPlan

JSON uses camelCase keys (``eligibilityTags``, ``primaryNeed`` ...); Python code
uses the snake_case attribute names. Both spellings are accepted on input.
"""

from enum import Enum
from typing import Any, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_LANGUAGE = "English"


class Category(str, Enum):
    """Categories of need a user can ask for."""

    FOOD = "food"
    HOUSING = "housing"
    MENTAL_HEALTH = "mental_health"
    LEGAL = "legal"
    JOBS = "jobs"


class IncomeBracket(str, Enum):
    """Annual household income brackets offered by the intake form."""

    VERY_LOW = "very_low"
    LOW = "low"
    MODERATE = "moderate"
    ABOVE_MODERATE = "above_moderate"


class AgeRange(str, Enum):
    """Age brackets offered by the intake form.

    Other bracket spellings are accepted on UserCriteria; only ``65+`` affects matching.
    """

    AGE_18_24 = "18-24"
    AGE_25_34 = "25-34"
    AGE_35_44 = "35-44"
    AGE_45_54 = "45-54"
    AGE_55_64 = "55-64"
    AGE_65_PLUS = "65+"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _as_string_tuple(value: Any) -> Tuple[str, ...]:
    """Coerce None, a comma-separated string, a scalar or an iterable into a de-duplicated tuple."""
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        items = [value]

    seen = []
    for item in items:
        text = _as_text(item)
        if text and text not in seen:
            seen.append(text)
    return tuple(seen)


class Resource(BaseModel):
    """A canonical social-service resource.

    ``zip`` is always a string (empty when unknown). An empty
    ``eligibility_tags`` means open to everyone; an empty
    ``languages_supported`` means no language restriction.
    """

    id: Union[int, str] = Field(..., description="Identifier, unique within a loaded catalog")
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    address: str = ""
    zip: str = ""
    hours: str = "Contact for hours"
    phone: str = ""
    website: str = ""
    eligibility_notes: str = Field("", alias="eligibilityNotes")
    eligibility_tags: Tuple[str, ...] = Field((), alias="eligibilityTags")
    languages_supported: Tuple[str, ...] = Field((), alias="languagesSupported")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, (int, str)) and not isinstance(v, bool):
            return v
        return str(v)

    @field_validator(
        "name", "category", "address", "zip", "phone", "website", "eligibility_notes",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v)

    @field_validator("hours", mode="before")
    @classmethod
    def coerce_hours(cls, v: Any) -> str:
        return _as_text(v) or "Contact for hours"

    @field_validator("eligibility_tags", "languages_supported", mode="before")
    @classmethod
    def coerce_string_sets(cls, v: Any) -> Tuple[str, ...]:
        return _as_string_tuple(v)

    def to_json(self) -> dict:
        """Serialize with camelCase keys, the shape the web client expects."""
        return self.model_dump(mode="json", by_alias=True)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore", json_schema_extra={"example": {
        "id": 1,
        "name": "Alameda County Community Food Bank",
        "category": "food",
        "address": "7900 Edgewater Dr, Oakland, CA 94621",
        "zip": "94621",
        "hours": "Mon-Fri 9am-5pm",
        "phone": "(510) 635-3663",
        "website": "https://www.accfb.org",
        "eligibilityNotes": "Open to all Alameda County residents.",
        "eligibilityTags": [],
        "languagesSupported": ["English", "Spanish"],
    }})


class UserCriteria(BaseModel):
    """Matching inputs submitted by one user for one request.

    ``preferred_language`` stays None when the user did not pick one; the
    matcher and the plan generators apply the English default themselves.
    """

    zip: str = Field(..., description="User ZIP code")
    primary_need: str = Field(..., alias="primaryNeed")
    age_range: Optional[str] = Field(None, alias="ageRange")
    income_bracket: Optional[IncomeBracket] = Field(None, alias="incomeBracket")
    household_size: int = Field(1, ge=1, alias="householdSize")
    preferred_language: Optional[str] = Field(None, alias="preferredLanguage")

    @field_validator("zip", "primary_need", mode="before")
    @classmethod
    def require_text(cls, v: Any) -> str:
        text = _as_text(v)
        if not text:
            raise ValueError("Field cannot be empty or whitespace-only")
        return text

    @field_validator("age_range", "income_bracket", "preferred_language", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        # the intake form posts "" for untouched selects
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("household_size", mode="before")
    @classmethod
    def default_household_size(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return 1
        return v

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore", json_schema_extra={"example": {
        "zip": "94601",
        "ageRange": "25-34",
        "incomeBracket": "low",
        "householdSize": 3,
        "primaryNeed": "food",
        "preferredLanguage": "Spanish",
    }})


class ActionPlan(BaseModel):
    """Ordered, human-readable steps for accessing one resource."""

    model_config = ConfigDict(frozen=True)

    steps: Tuple[str, ...] = ()


class MatchResult(Resource):
    """A matched Resource with its proximity and, once attached, its action plan."""

    distance: int = Field(..., ge=0, description="Approximate miles from the user")
    action_plan: Optional[ActionPlan] = Field(None, alias="actionPlan")

    @classmethod
    def from_resource(cls, resource: Resource, distance: int) -> "MatchResult":
        return cls(**resource.model_dump(), distance=distance)

    def with_action_plan(self, plan: ActionPlan) -> "MatchResult":
        """Return a copy carrying ``plan``; the original is left untouched."""
        return self.model_copy(update={"action_plan": plan})

    @property
    def resource(self) -> Resource:
        """The underlying Resource without match annotations."""
        return Resource(**self.model_dump(exclude={"distance", "action_plan"}))
