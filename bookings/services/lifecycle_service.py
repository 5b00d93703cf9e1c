"""Event lifecycle - the show status state machine.

Guards run in order: the access policy, then graph reachability, then the
budget precondition. A failed guard writes nothing.
"""

import logging
from dataclasses import replace

from bookings.domain import Actor, Event, EventId, EventStatus
from bookings.domain.errors import (
    InvalidTransitionError,
    PreconditionFailedError,
    ValidationError,
)
from bookings.domain.lifecycle import is_reachable
from bookings.domain.policy import authorize_transition, relationship_to_event
from bookings.services.ledger_service import LedgerEngine
from bookings.services.lookups import require_event
from bookings.stores.interfaces import BookingStore

logger = logging.getLogger(__name__)


def parse_status(value: EventStatus | str) -> EventStatus:
    if isinstance(value, EventStatus):
        return value
    try:
        return EventStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown status {value!r}") from exc


class EventLifecycle:
    """Service for event status transitions."""

    def __init__(self, store: BookingStore, ledger: LedgerEngine) -> None:
        self._store = store
        self._ledger = ledger

    def transition(
        self, event_id: str | EventId, target: EventStatus | str, actor: Actor
    ) -> Event:
        """Move an event to ``target``.

        Raises:
            EventNotFoundError: If the event does not exist.
            UnauthorizedError: If the actor may not request this transition.
            InvalidTransitionError: If ``target`` is not one step from the current status.
            PreconditionFailedError: If a budget is issued with no contract value.
        """
        target = parse_status(target)
        event = require_event(self._store, event_id)
        current = event.status

        authorize_transition(actor, relationship_to_event(actor, event), current, target)
        if not is_reachable(current, target):
            raise InvalidTransitionError(current.value, target.value)
        if target is EventStatus.BUDGET_ISSUED:
            if self._ledger.current_contract_value(event.id).is_zero:
                raise PreconditionFailedError("A budget cannot be issued with no contract value")

        updated = replace(event, status=target)
        self._store.save_event(updated)
        logger.info(
            "Event %s moved %s -> %s by %s", event.id, current.value, target.value, actor.id
        )
        return updated
