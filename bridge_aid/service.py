"""Matching service: the request contract shared by the HTTP API and the CLI.

- match: validate criteria, rank catalog resources, attach action plans
- refresh: force a catalog reload
- health: catalog size, sources and cache state
"""

import random
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from bridge_aid.action_plans import (
    ActionPlanGenerator,
    TemplatePlanGenerator,
    attach_action_plans,
    get_plan_generator,
)
from bridge_aid.catalog import CatalogService, CatalogSnapshot
from bridge_aid.config.environment import EnvironmentConfig
from bridge_aid.config.models import AppConfig, DataSourceType
from bridge_aid.domain.models import MatchResult, UserCriteria
from bridge_aid.logging import get_logger, log_context
from bridge_aid.matching import ResourceMatcher
from bridge_aid.sources import CatalogUnavailableError, get_source
from bridge_aid.utils.timestamps import format_timestamp

logger = get_logger(__name__, component="service")

MISSING_FIELDS_MESSAGE = "Missing required fields: zip and primaryNeed are required"

# (canonical, python) spellings of the two mandatory criteria keys
_REQUIRED_KEYS = (("zip", "zip"), ("primaryNeed", "primary_need"))


class CriteriaValidationError(Exception):
    """Criteria are missing or malformed; raised before any matching happens.

    Attributes:
        errors: One human-readable line per failing field
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def to_json(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.errors:
            body["details"] = self.errors
        return body


@dataclass(frozen=True)
class MatchResponse:
    """Ranked matches with their action plans."""

    matches: Tuple[MatchResult, ...]
    request_id: str

    @property
    def count(self) -> int:
        return len(self.matches)

    def to_json(self) -> Dict[str, Any]:
        return {
            "matches": [match.model_dump(mode="json", by_alias=True) for match in self.matches],
            "count": self.count,
        }


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_criteria(payload: Union[UserCriteria, Mapping[str, Any], None]) -> UserCriteria:
    """Validate a raw criteria payload.

    Raises:
        CriteriaValidationError: With MISSING_FIELDS_MESSAGE when ``zip`` or
            ``primaryNeed`` is absent or blank, otherwise with one error per
            invalid field
    """
    if isinstance(payload, UserCriteria):
        return payload
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise CriteriaValidationError(
            "Request body must be a JSON object",
            errors=[f"Expected an object, got {type(payload).__name__}"],
        )

    for alias, attr in _REQUIRED_KEYS:
        if _is_blank(payload.get(alias)) and _is_blank(payload.get(attr)):
            raise CriteriaValidationError(MISSING_FIELDS_MESSAGE)

    try:
        return UserCriteria.model_validate(dict(payload))
    except ValidationError as e:
        errors = []
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            errors.append(f"{field_path}: {error['msg']}")
        raise CriteriaValidationError("Invalid criteria", errors=errors) from e


class ResourceMatchingService:
    """Serves match, refresh and health requests over one catalog."""

    def __init__(
        self,
        catalog: CatalogService,
        matcher: Optional[ResourceMatcher] = None,
        plan_generator: Optional[ActionPlanGenerator] = None,
        max_workers: int = 5,
    ):
        """Initialize ResourceMatchingService.

        Args:
            catalog: CatalogService providing the current resources
            matcher: ResourceMatcher (defaults to an unseeded one)
            plan_generator: Action-plan generator (defaults to template plans)
            max_workers: Concurrent plan generations per request
        """
        self.catalog = catalog
        self.matcher = matcher or ResourceMatcher()
        self.plan_generator = plan_generator or TemplatePlanGenerator()
        self.max_workers = max_workers

    @classmethod
    def from_config(
        cls,
        app_config: AppConfig,
        env_config: EnvironmentConfig,
        rng: Optional[random.Random] = None,
    ) -> "ResourceMatchingService":
        """Wire catalog source, matcher and plan generator from configuration."""
        catalog = CatalogService(
            get_source(env_config, app_config),
            configured_source=DataSourceType(env_config.data_source).value,
        )
        return cls(
            catalog,
            matcher=ResourceMatcher(rng=rng, max_results=app_config.advanced.max_results),
            plan_generator=get_plan_generator(env_config, app_config),
            max_workers=app_config.action_plans.max_workers,
        )

    def match(
        self,
        payload: Union[UserCriteria, Mapping[str, Any], None],
        request_id: Optional[str] = None,
    ) -> MatchResponse:
        """Validate criteria, rank resources and attach action plans.

        Raises:
            CriteriaValidationError: If the criteria are missing or invalid
        """
        request_id = request_id or uuid.uuid4().hex[:12]
        with log_context(request_id=request_id):
            criteria = parse_criteria(payload)
            resources = self.catalog.get_resources()
            ranked = self.matcher.match(resources, criteria)
            matches = attach_action_plans(
                ranked, criteria, self.plan_generator, max_workers=self.max_workers
            )

            logger.info(
                f"Returned {len(matches)} matches",
                extra={
                    "event": "service.match.completed",
                    "primary_need": criteria.primary_need,
                    "catalog_size": len(resources),
                    "matches_count": len(matches),
                },
            )
            return MatchResponse(matches=tuple(matches), request_id=request_id)

    def refresh(self) -> Dict[str, Any]:
        """Reload the catalog now.

        Raises:
            CatalogUnavailableError: If no catalog could be loaded
        """
        snapshot = self.catalog.refresh()
        if not snapshot.available:
            raise CatalogUnavailableError(snapshot.error or "Catalog unavailable")

        logger.info(
            "Catalog refreshed",
            extra={
                "event": "service.refresh.completed",
                "resources_count": len(snapshot),
                "served_by": snapshot.served_by,
            },
        )
        message = "Resources refreshed successfully"
        if snapshot.fell_back:
            message += f" (served from {snapshot.served_by} fallback)"
        return {
            "status": "success",
            "resourcesCount": len(snapshot),
            "message": message,
        }

    def health(self) -> Dict[str, Any]:
        """Catalog status; ``status`` is ``error`` when the catalog is unavailable."""
        snapshot: CatalogSnapshot = self.catalog.snapshot()
        age = self.catalog.cache_age_seconds()
        report: Dict[str, Any] = {
            "status": "ok" if snapshot.available else "error",
            "resourcesCount": len(snapshot),
            "dataSource": snapshot.configured_source,
            "servedBy": snapshot.served_by,
            "cacheStatus": self.catalog.cache_status(),
            "cacheAgeSeconds": int(age) if age is not None else None,
            "loadedAt": format_timestamp(snapshot.loaded_at),
        }
        if not snapshot.available:
            report["error"] = snapshot.error
        return report

    def close(self) -> None:
        self.catalog.close()
        self.plan_generator.close()
