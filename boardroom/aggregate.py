"""Turn the dispatcher's raw answers into a priority-ordered Discussion."""

import logging

from boardroom.members import MemberRegistry
from boardroom.models import BoardResponse, Discussion

logger = logging.getLogger(__name__)


def sort_by_priority(responses: list[BoardResponse], members: MemberRegistry) -> list[BoardResponse]:
    """Ascending member priority; stable, unknown members last."""
    return sorted(responses, key=lambda r: members.priority_of(r.agent_id))


def total_cost(responses: list[BoardResponse], cost_per_token: float) -> float:
    """Flat per-token estimate, not real vendor billing."""
    return sum(r.usage.total_tokens * cost_per_token for r in responses)


def aggregate(
    query: str,
    mode: str,
    candidates: list[str],
    responses: list[BoardResponse],
    members: MemberRegistry,
    total_latency_ms: int,
    cost_per_token: float,
) -> Discussion:
    """Build the Discussion for one run.

    Args:
        query: The original query text.
        mode: Canonical selection mode string.
        candidates: Member ids selected before dispatch.
        responses: Successful answers in batch order.
        members: Registry used for priority lookup.
        total_latency_ms: Wall clock from dispatch start to the last batch settling.
        cost_per_token: Flat rate applied to each response's total tokens.
    """
    if len(responses) < len(candidates):
        logger.warning("Only %d/%d board members answered", len(responses), len(candidates))

    return Discussion(
        query=query,
        mode=mode,
        candidates=list(candidates),
        responses=sort_by_priority(responses, members),
        total_latency_ms=total_latency_ms,
        total_cost=total_cost(responses, cost_per_token),
    )
