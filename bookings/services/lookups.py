"""Id parsing and required-record loading shared by the services."""

from datetime import UTC, datetime

from bookings.domain import (
    AssignmentId,
    CrewAssignment,
    Event,
    EventId,
    MovementId,
)
from bookings.domain.errors import EventNotFoundError, InvalidIdError, NotFoundError
from bookings.stores.interfaces import BookingStore


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_event_id(event_id: str | EventId) -> EventId:
    if isinstance(event_id, EventId):
        return event_id
    try:
        return EventId.from_string(event_id)
    except (ValueError, TypeError, AttributeError) as exc:
        raise InvalidIdError("event") from exc


def parse_movement_id(movement_id: str | MovementId) -> MovementId:
    if isinstance(movement_id, MovementId):
        return movement_id
    try:
        return MovementId.from_string(movement_id)
    except (ValueError, TypeError, AttributeError) as exc:
        raise InvalidIdError("movement") from exc


def parse_assignment_id(assignment_id: str | AssignmentId) -> AssignmentId:
    if isinstance(assignment_id, AssignmentId):
        return assignment_id
    try:
        return AssignmentId.from_string(assignment_id)
    except (ValueError, TypeError, AttributeError) as exc:
        raise InvalidIdError("assignment") from exc


def require_event(store: BookingStore, event_id: str | EventId) -> Event:
    """Return the event or raise.

    Raises:
        InvalidIdError: If the event_id is not a valid UUID.
        EventNotFoundError: If the event does not exist.
    """
    parsed = parse_event_id(event_id)
    event = store.get_event(parsed)
    if event is None:
        raise EventNotFoundError(str(parsed))
    return event


def require_assignment(store: BookingStore, assignment_id: str | AssignmentId) -> CrewAssignment:
    assignment = store.get_crew_assignment(parse_assignment_id(assignment_id))
    if assignment is None:
        raise NotFoundError("Crew assignment")
    return assignment
