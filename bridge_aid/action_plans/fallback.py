"""Composite plan generator that degrades to a local generator."""

from bridge_aid.domain.models import ActionPlan, Resource, UserCriteria
from bridge_aid.logging import get_logger

from .base import ActionPlanGenerator
from .exceptions import ActionPlanError

logger = get_logger(__name__, component="action_plans")


class FallbackPlanGenerator(ActionPlanGenerator):
    """Use ``primary``; on any failure log it and use ``fallback`` instead."""

    def __init__(self, primary: ActionPlanGenerator, fallback: ActionPlanGenerator):
        self.primary = primary
        self.fallback = fallback
        self.name = primary.name

    def generate(self, resource: Resource, criteria: UserCriteria) -> ActionPlan:
        try:
            return self.primary.generate(resource, criteria)
        except ActionPlanError as e:
            logger.warning(
                f"{self.primary.name} plan generation failed, using {self.fallback.name}: {e}",
                extra={
                    "event": "action_plans.fallback.activated",
                    "resource_id": str(resource.id),
                    "error_type": type(e).__name__,
                    "status_code": e.status_code,
                },
            )
        except Exception as e:
            logger.error(
                f"Unexpected error from {self.primary.name} plan generator",
                exc_info=True,
                extra={
                    "event": "action_plans.fallback.unexpected_error",
                    "resource_id": str(resource.id),
                    "error_type": type(e).__name__,
                },
            )
        return self.fallback.generate(resource, criteria)

    def close(self) -> None:
        self.primary.close()
        self.fallback.close()
