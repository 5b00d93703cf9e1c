"""Process-local implementation of the BookingStore.

Used by unit tests and scripts. Batches are copy-then-swap under a lock, so
a failing op leaves every collection untouched.
"""

import threading
from collections.abc import Sequence

from bookings.domain import (
    ActorId,
    ActorProfile,
    AllocationId,
    AssignmentId,
    CrewAssignment,
    EquipmentAllocation,
    Event,
    EventId,
    FinanceSummary,
    Movement,
    MovementId,
)
from bookings.realtime import Collection, SnapshotFeed, Subscription, Topic
from bookings.stores.interfaces import BatchAction, BatchError, BatchOp, BookingStore


class InMemoryBookingStore(BookingStore):
    """Dictionary-backed store that publishes a snapshot after every write."""

    def __init__(self, feed: SnapshotFeed | None = None) -> None:
        self.feed = feed or SnapshotFeed()
        self._lock = threading.RLock()
        self._events: dict[EventId, Event] = {}
        self._summaries: dict[EventId, FinanceSummary] = {}
        self._movements: dict[MovementId, Movement] = {}
        self._assignments: dict[AssignmentId, CrewAssignment] = {}
        self._allocations: dict[AllocationId, EquipmentAllocation] = {}
        self._profiles: dict[ActorId, ActorProfile] = {}

    # events

    def get_event(self, event_id: EventId) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def list_events(
        self, client_id: ActorId | None = None, member_id: ActorId | None = None
    ) -> list[Event]:
        with self._lock:
            events = list(self._events.values())
        if client_id is not None:
            events = [e for e in events if e.client_id == client_id]
        if member_id is not None:
            events = [e for e in events if member_id in e.crew_ids]
        return sorted(events, key=lambda e: (e.scheduled_date, e.created_at))

    def save_event(self, event: Event) -> None:
        with self._lock:
            self._events[event.id] = event
        self._publish_event(event.id)

    # finance

    def get_finance_summary(self, event_id: EventId) -> FinanceSummary | None:
        with self._lock:
            return self._summaries.get(event_id)

    def list_finance_summaries(self, event_ids: Sequence[EventId]) -> list[FinanceSummary]:
        with self._lock:
            return [self._summaries[i] for i in event_ids if i in self._summaries]

    def save_finance_summary(self, summary: FinanceSummary) -> None:
        with self._lock:
            self._summaries[summary.event_id] = summary
        self.feed.publish(
            Topic(Collection.FINANCE_SUMMARIES, str(summary.event_id)), (summary,)
        )

    def list_movements(self, event_id: EventId) -> list[Movement]:
        with self._lock:
            movements = [m for m in self._movements.values() if m.event_id == event_id]
        return sorted(movements, key=lambda m: (m.paid_on, m.created_at), reverse=True)

    def get_movement(self, event_id: EventId, movement_id: MovementId) -> Movement | None:
        with self._lock:
            movement = self._movements.get(movement_id)
        if movement is None or movement.event_id != event_id:
            return None
        return movement

    def save_movement(self, movement: Movement) -> None:
        with self._lock:
            self._movements[movement.id] = movement
        self._publish_movements(movement.event_id)

    def delete_movement(self, event_id: EventId, movement_id: MovementId) -> None:
        with self._lock:
            movement = self._movements.get(movement_id)
            if movement is not None and movement.event_id == event_id:
                del self._movements[movement_id]
        self._publish_movements(event_id)

    # allocations

    def list_crew_assignments(self, event_id: EventId) -> list[CrewAssignment]:
        with self._lock:
            assignments = [a for a in self._assignments.values() if a.event_id == event_id]
        return sorted(assignments, key=_created_order)

    def list_assignments_for_member(self, member_id: ActorId) -> list[CrewAssignment]:
        with self._lock:
            assignments = [a for a in self._assignments.values() if a.member_id == member_id]
        return sorted(assignments, key=_created_order)

    def get_crew_assignment(self, assignment_id: AssignmentId) -> CrewAssignment | None:
        with self._lock:
            return self._assignments.get(assignment_id)

    def save_crew_assignment(self, assignment: CrewAssignment) -> None:
        if assignment.id is None:
            raise ValueError("Assignment must be persisted before it can be saved")
        with self._lock:
            self._assignments[assignment.id] = assignment
        self._publish_allocations(assignment.event_id)

    def list_equipment_allocations(self, event_id: EventId) -> list[EquipmentAllocation]:
        with self._lock:
            allocations = [a for a in self._allocations.values() if a.event_id == event_id]
        return sorted(allocations, key=_created_order)

    def apply_batch(self, ops: Sequence[BatchOp]) -> None:
        touched: set[EventId] = set()
        with self._lock:
            events = dict(self._events)
            assignments = dict(self._assignments)
            allocations = dict(self._allocations)
            for op in ops:
                document = op.document
                if isinstance(document, Event):
                    _apply(events, document.id, op)
                    touched.add(document.id)
                elif isinstance(document, CrewAssignment):
                    _apply(assignments, document.id, op)
                    touched.add(document.event_id)
                elif isinstance(document, EquipmentAllocation):
                    _apply(allocations, document.id, op)
                    touched.add(document.event_id)
                else:
                    raise BatchError(f"Unsupported document {type(document).__name__}")
            self._events = events
            self._assignments = assignments
            self._allocations = allocations
        for event_id in touched:
            self._publish_event(event_id)
            self._publish_allocations(event_id)

    # profiles

    def get_profile(self, actor_id: ActorId) -> ActorProfile | None:
        with self._lock:
            return self._profiles.get(actor_id)

    def get_profiles(self, actor_ids: Sequence[ActorId]) -> list[ActorProfile]:
        with self._lock:
            return [self._profiles[i] for i in actor_ids if i in self._profiles]

    def save_profile(self, profile: ActorProfile) -> None:
        with self._lock:
            self._profiles[profile.id] = profile
        self.feed.publish(Topic(Collection.ACTOR_PROFILES, str(profile.id)), (profile,))

    # subscriptions

    def subscribe(self, topic: Topic) -> Subscription:
        return self.feed.subscribe(topic)

    def _publish_event(self, event_id: EventId) -> None:
        event = self.get_event(event_id)
        documents = (event,) if event is not None else ()
        self.feed.publish(Topic(Collection.EVENTS, str(event_id)), documents)

    def _publish_movements(self, event_id: EventId) -> None:
        self.feed.publish(
            Topic(Collection.MOVEMENTS, str(event_id)), tuple(self.list_movements(event_id))
        )

    def _publish_allocations(self, event_id: EventId) -> None:
        self.feed.publish(
            Topic(Collection.CREW_ASSIGNMENTS, str(event_id)),
            tuple(self.list_crew_assignments(event_id)),
        )
        self.feed.publish(
            Topic(Collection.EQUIPMENT_ALLOCATIONS, str(event_id)),
            tuple(self.list_equipment_allocations(event_id)),
        )


def _apply(collection: dict, key, op: BatchOp) -> None:
    if key is None:
        raise BatchError("Batch documents must carry an id")
    exists = key in collection
    if op.action is BatchAction.INSERT:
        if exists:
            raise BatchError(f"Document {key} already exists")
        collection[key] = op.document
    elif op.action is BatchAction.UPDATE:
        if not exists:
            raise BatchError(f"Document {key} does not exist")
        collection[key] = op.document
    else:
        if not exists:
            raise BatchError(f"Document {key} does not exist")
        del collection[key]


def _created_order(entry: CrewAssignment | EquipmentAllocation) -> tuple:
    return (entry.created_at is None, entry.created_at or 0, str(entry.id))
