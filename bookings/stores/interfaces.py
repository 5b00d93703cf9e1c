"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. A store is the
persistence gateway of the booking core: typed reads and writes per
collection, one atomic batch primitive, and snapshot subscriptions.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from bookings.domain import (
    ActorId,
    ActorProfile,
    AssignmentId,
    CrewAssignment,
    EquipmentAllocation,
    Event,
    EventId,
    FinanceSummary,
    Movement,
    MovementId,
)
from bookings.realtime import Subscription, Topic

Document = Event | CrewAssignment | EquipmentAllocation


class BatchAction(Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class BatchOp:
    """One write inside an atomic batch."""

    action: BatchAction
    document: Document


class BatchError(Exception):
    """Raised by a store when a batch cannot be applied. Nothing is written."""


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def list_events(
        self, client_id: ActorId | None = None, member_id: ActorId | None = None
    ) -> list[Event]:
        """Return events ordered by scheduled date ascending.

        ``client_id`` restricts to events the client owns, ``member_id`` to
        events whose crew list contains the member.
        """
        ...

    @abstractmethod
    def save_event(self, event: Event) -> None:
        """Insert or replace an event."""
        ...


class FinanceStore(ABC):
    """Interface for finance summary and movement persistence."""

    @abstractmethod
    def get_finance_summary(self, event_id: EventId) -> FinanceSummary | None:
        ...

    @abstractmethod
    def list_finance_summaries(self, event_ids: Sequence[EventId]) -> list[FinanceSummary]:
        """Return the summaries that exist for the given events."""
        ...

    @abstractmethod
    def save_finance_summary(self, summary: FinanceSummary) -> None:
        """Write every field of the summary in one atomic operation."""
        ...

    @abstractmethod
    def list_movements(self, event_id: EventId) -> list[Movement]:
        """Return movements ordered by paid_on descending."""
        ...

    @abstractmethod
    def get_movement(self, event_id: EventId, movement_id: MovementId) -> Movement | None:
        ...

    @abstractmethod
    def save_movement(self, movement: Movement) -> None:
        """Insert or replace a movement."""
        ...

    @abstractmethod
    def delete_movement(self, event_id: EventId, movement_id: MovementId) -> None:
        ...


class AllocationStore(ABC):
    """Interface for crew assignment and equipment allocation persistence."""

    @abstractmethod
    def list_crew_assignments(self, event_id: EventId) -> list[CrewAssignment]:
        ...

    @abstractmethod
    def list_assignments_for_member(self, member_id: ActorId) -> list[CrewAssignment]:
        ...

    @abstractmethod
    def get_crew_assignment(self, assignment_id: AssignmentId) -> CrewAssignment | None:
        ...

    @abstractmethod
    def save_crew_assignment(self, assignment: CrewAssignment) -> None:
        """Replace a persisted assignment."""
        ...

    @abstractmethod
    def list_equipment_allocations(self, event_id: EventId) -> list[EquipmentAllocation]:
        ...

    @abstractmethod
    def apply_batch(self, ops: Sequence[BatchOp]) -> None:
        """Apply every op or none of them.

        Raises:
            BatchError: If any op cannot be applied.
        """
        ...


class ProfileStore(ABC):
    """Interface for actor profile persistence."""

    @abstractmethod
    def get_profile(self, actor_id: ActorId) -> ActorProfile | None:
        ...

    @abstractmethod
    def get_profiles(self, actor_ids: Sequence[ActorId]) -> list[ActorProfile]:
        ...

    @abstractmethod
    def save_profile(self, profile: ActorProfile) -> None:
        ...


class BookingStore(EventStore, FinanceStore, AllocationStore, ProfileStore):
    """The full persistence gateway consumed by the services."""

    @abstractmethod
    def subscribe(self, topic: Topic) -> Subscription:
        """Stream snapshots of a topic after each committed write."""
        ...
