"""Event status graph.

Requested -> UnderReview -> BudgetIssued -> Accepted | Declined
Accepted -> Confirmed -> Completed
Any status except Completed (and Cancelled itself) -> Cancelled
"""

from collections.abc import Mapping
from types import MappingProxyType

from bookings.domain.models import EventStatus

_FORWARD: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.REQUESTED: frozenset({EventStatus.UNDER_REVIEW}),
    EventStatus.UNDER_REVIEW: frozenset({EventStatus.BUDGET_ISSUED}),
    EventStatus.BUDGET_ISSUED: frozenset({EventStatus.ACCEPTED, EventStatus.DECLINED}),
    EventStatus.ACCEPTED: frozenset({EventStatus.CONFIRMED}),
    EventStatus.DECLINED: frozenset(),
    EventStatus.CONFIRMED: frozenset({EventStatus.COMPLETED}),
    EventStatus.COMPLETED: frozenset(),
    EventStatus.CANCELLED: frozenset(),
}

_CANCELLABLE = frozenset(EventStatus) - {EventStatus.COMPLETED, EventStatus.CANCELLED}

TRANSITIONS: Mapping[EventStatus, frozenset[EventStatus]] = MappingProxyType(
    {
        status: targets | ({EventStatus.CANCELLED} if status in _CANCELLABLE else set())
        for status, targets in _FORWARD.items()
    }
)

# Statuses in which the owning client can see the issued budget.
BUDGET_VISIBLE = frozenset(
    {
        EventStatus.BUDGET_ISSUED,
        EventStatus.ACCEPTED,
        EventStatus.DECLINED,
        EventStatus.CONFIRMED,
        EventStatus.COMPLETED,
    }
)


def successors(status: EventStatus) -> frozenset[EventStatus]:
    return TRANSITIONS[status]


def is_reachable(current: EventStatus, target: EventStatus) -> bool:
    """True when ``target`` is exactly one step away from ``current``."""
    return target in TRANSITIONS[current]
