"""Concurrent attachment of action plans to ranked matches."""

import contextvars
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from bridge_aid.domain.models import ActionPlan, MatchResult, UserCriteria
from bridge_aid.logging import get_logger

from .base import ActionPlanGenerator

logger = get_logger(__name__, component="action_plans")


def _generate(generator: ActionPlanGenerator, match: MatchResult, criteria: UserCriteria) -> MatchResult:
    try:
        plan = generator.generate(match.resource, criteria)
    except Exception:
        # empty plan for this match only
        logger.error(
            f"Plan generation failed for resource {match.id}",
            exc_info=True,
            extra={"event": "action_plans.attach.failed", "resource_id": str(match.id)},
        )
        plan = ActionPlan(steps=())
    return match.with_action_plan(plan)


def attach_action_plans(
    matches: Sequence[MatchResult],
    criteria: UserCriteria,
    generator: ActionPlanGenerator,
    max_workers: int = 5,
) -> List[MatchResult]:
    """Return copies of ``matches`` carrying generated plans, in the same order.

    Plans are generated concurrently, one task per match. Each task runs in a
    copy of the caller's context so log fields like ``request_id`` follow it.
    """
    if not matches:
        return []

    workers = max(1, min(max_workers, len(matches)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="action-plan") as executor:
        futures = [
            executor.submit(contextvars.copy_context().run, _generate, generator, match, criteria)
            for match in matches
        ]
        results = [future.result() for future in futures]

    logger.debug(
        f"Attached {len(results)} action plans",
        extra={
            "event": "action_plans.attach.completed",
            "plans_count": len(results),
            "generator": generator.name,
            "workers": workers,
        },
    )
    return results
