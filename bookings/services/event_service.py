"""Event service - show requests and their editable fields.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from bookings.domain import Actor, ActorId, Event, EventId, EventStatus, Role, ShowType
from bookings.domain.errors import UnauthorizedError, ValidationError
from bookings.domain.policy import Operation, Relationship, authorize, relationship_to_event
from bookings.services.lookups import require_event, utcnow
from bookings.stores.interfaces import BookingStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "title",
        "show_type",
        "scheduled_date",
        "scheduled_time",
        "duration_hours",
        "venue",
        "address",
        "estimated_audience",
        "sound_included",
        "catering_included",
        "notes",
        "client_id",
    }
)


@dataclass(frozen=True)
class EventDraft:
    """Input for a new show request."""

    title: str
    show_type: ShowType
    scheduled_date: date
    venue: str
    scheduled_time: time | None = None
    duration_hours: Decimal = Decimal("0")
    address: str = ""
    estimated_audience: int = 0
    sound_included: bool = False
    catering_included: bool = False
    notes: str = ""
    client_id: ActorId | None = None


class EventService:
    """Service for show request operations."""

    def __init__(
        self, store: BookingStore, clock: Callable[[], datetime] = utcnow
    ) -> None:
        self._store = store
        self._clock = clock

    def list_events(self, actor: Actor) -> list[Event]:
        """Return the events visible to the actor."""
        if actor.role is Role.ADMIN:
            return self._store.list_events()
        if actor.role is Role.CLIENT:
            return self._store.list_events(client_id=actor.id)
        return self._store.list_events(member_id=actor.id)

    def get_event(self, event_id: str | EventId, actor: Actor) -> Event:
        """Return an event by ID.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            UnauthorizedError: If the actor may not read the event.
        """
        event = require_event(self._store, event_id)
        authorize(actor, Operation.READ_EVENT, relationship_to_event(actor, event), event.status)
        return event

    def create_event(self, draft: EventDraft, actor: Actor) -> Event:
        """Open a new request in status Requested.

        A client always requests for themselves; an admin must name the client.
        """
        authorize(actor, Operation.CREATE_EVENT, Relationship.NONE)
        if actor.role is Role.CLIENT:
            if draft.client_id is not None and draft.client_id != actor.id:
                raise UnauthorizedError(Operation.CREATE_EVENT.value)
            client_id = actor.id
        elif draft.client_id is None:
            raise ValidationError("client_id is required")
        else:
            client_id = draft.client_id
        self._require_client(client_id)

        event = Event(
            id=EventId.generate(),
            title=draft.title,
            show_type=draft.show_type,
            scheduled_date=draft.scheduled_date,
            scheduled_time=draft.scheduled_time,
            duration_hours=draft.duration_hours,
            venue=draft.venue,
            address=draft.address,
            estimated_audience=draft.estimated_audience,
            sound_included=draft.sound_included,
            catering_included=draft.catering_included,
            notes=draft.notes,
            client_id=client_id,
            status=EventStatus.REQUESTED,
            created_at=self._clock(),
        )
        _validate(event)
        self._store.save_event(event)
        logger.info("Event %s requested by %s for client %s", event.id, actor.id, client_id)
        return event

    def update_event(
        self, event_id: str | EventId, changes: Mapping[str, Any], actor: Actor
    ) -> Event:
        """Apply field changes. Status, crew and contract are never edited here.

        Raises:
            UnauthorizedError: If a client edits outside Requested or reassigns the owner.
            ValidationError: If a field is unknown or a value breaks an invariant.
        """
        event = require_event(self._store, event_id)
        authorize(actor, Operation.EDIT_EVENT, relationship_to_event(actor, event), event.status)

        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields not editable: {', '.join(sorted(unknown))}")
        if "client_id" in changes and changes["client_id"] != event.client_id:
            if actor.role is not Role.ADMIN:
                raise UnauthorizedError(Operation.EDIT_EVENT.value)
            self._require_client(changes["client_id"])

        updated = replace(event, **changes)
        _validate(updated)
        if updated != event:
            self._store.save_event(updated)
            logger.info("Event %s edited by %s: %s", event.id, actor.id, sorted(changes))
        return updated

    def _require_client(self, client_id: ActorId) -> None:
        profile = self._store.get_profile(client_id)
        if profile is None or profile.role is not Role.CLIENT:
            raise ValidationError("client_id must reference a client profile")


def _validate(event: Event) -> None:
    if not event.title.strip():
        raise ValidationError("title is required")
    if not event.venue.strip():
        raise ValidationError("venue is required")
    if event.duration_hours < 0:
        raise ValidationError("duration_hours cannot be negative")
    if event.estimated_audience < 0:
        raise ValidationError("estimated_audience cannot be negative")
