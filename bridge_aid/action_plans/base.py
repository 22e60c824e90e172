"""Abstract action-plan generator."""

from abc import ABC, abstractmethod

from bridge_aid.domain.models import ActionPlan, Resource, UserCriteria


class ActionPlanGenerator(ABC):
    """Produces "how to access this" steps for one resource and one user."""

    name: str = "generator"

    @abstractmethod
    def generate(self, resource: Resource, criteria: UserCriteria) -> ActionPlan:
        """Build the plan.

        Raises:
            ActionPlanError: When the plan cannot be produced
        """

    def close(self) -> None:
        """Release held resources. No-op by default."""
