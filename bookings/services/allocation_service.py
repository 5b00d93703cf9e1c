"""Allocation registry - crew and equipment scaled to a show.

``save`` takes the desired end state of both lists, diffs it against what is
persisted and commits every insert, update and delete as one batch.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime

from bookings.domain import (
    Actor,
    AllocationId,
    AssignmentId,
    CrewAssignment,
    EquipmentAllocation,
    Event,
    EventId,
    Role,
)
from bookings.domain.errors import ExternalServiceError, ValidationError
from bookings.domain.policy import (
    Operation,
    authorize,
    relationship_to_assignment,
    relationship_to_event,
)
from bookings.domain.reconcile import Reconciliation, check_unique, reconcile
from bookings.services.ledger_service import LedgerEngine
from bookings.services.lookups import require_assignment, require_event, utcnow
from bookings.stores.interfaces import BatchAction, BatchError, BatchOp, BookingStore

logger = logging.getLogger(__name__)

CREW_ROLES = frozenset({Role.MEMBER, Role.ADMIN})


@dataclass(frozen=True)
class Allocations:
    assignments: tuple[CrewAssignment, ...]
    equipment: tuple[EquipmentAllocation, ...]


@dataclass(frozen=True)
class MemberBooking:
    """A member's assignment joined with the show it belongs to."""

    assignment: CrewAssignment
    event: Event


class AllocationRegistry:
    """Service for crew assignments and equipment allocations."""

    def __init__(
        self,
        store: BookingStore,
        ledger: LedgerEngine,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._clock = clock

    def save(
        self,
        event_id: str | EventId,
        desired_assignments: Sequence[CrewAssignment],
        desired_allocations: Sequence[EquipmentAllocation],
        actor: Actor,
    ) -> Allocations:
        """Make the persisted allocations equal the desired ones.

        Raises:
            UnauthorizedError: If the actor is not an admin.
            DuplicateAllocationError: If a member or equipment repeats.
            NotFoundError: If a desired id is not persisted for this event.
            ValidationError: If an entry targets another event or an unknown member,
                or an entry with an id changes its member or equipment.
            ExternalServiceError: If the store rejects the batch. Nothing is written.
        """
        event = require_event(self._store, event_id)
        authorize(
            actor, Operation.SAVE_ALLOCATIONS, relationship_to_event(actor, event), event.status
        )
        for entry in (*desired_assignments, *desired_allocations):
            if entry.event_id != event.id:
                raise ValidationError("Allocation belongs to another event")

        crew_plan = reconcile(
            self._store.list_crew_assignments(event.id), desired_assignments, "Crew assignment"
        )
        equipment_plan = reconcile(
            self._store.list_equipment_allocations(event.id),
            desired_allocations,
            "Equipment allocation",
        )
        check_unique(crew_plan.resolved, describe=lambda a: f"member {a.member_id}")
        check_unique(equipment_plan.resolved, describe=lambda a: f"equipment {a.equipment_id}")
        self._require_crew_profiles(crew_plan.inserts)

        now = self._clock()
        crew_plan = replace(
            crew_plan,
            inserts=tuple(
                replace(a, id=AssignmentId.generate(), created_at=now, paid=False)
                for a in crew_plan.inserts
            ),
        )
        equipment_plan = replace(
            equipment_plan,
            inserts=tuple(
                replace(a, id=AllocationId.generate(), created_at=now)
                for a in equipment_plan.inserts
            ),
        )

        ops = [*_ops(crew_plan), *_ops(equipment_plan)]
        crew_ids = tuple(a.member_id for a in crew_plan.resolved)
        if crew_ids != event.crew_ids:
            ops.append(BatchOp(BatchAction.UPDATE, replace(event, crew_ids=crew_ids)))

        if ops:
            try:
                self._store.apply_batch(ops)
            except BatchError as exc:
                logger.warning("Allocation batch for %s rejected: %s", event.id, exc)
                raise ExternalServiceError("Persistence gateway") from exc
            logger.info(
                "Allocations for %s saved by %s: crew +%d ~%d -%d, equipment +%d ~%d -%d",
                event.id,
                actor.id,
                len(crew_plan.inserts),
                len(crew_plan.updates),
                len(crew_plan.deletes),
                len(equipment_plan.inserts),
                len(equipment_plan.updates),
                len(equipment_plan.deletes),
            )
        self._ledger.recompute(event.id)
        return self._current(event.id)

    def list_for_event(self, event_id: str | EventId, actor: Actor) -> Allocations:
        event = require_event(self._store, event_id)
        authorize(
            actor, Operation.READ_ALLOCATIONS, relationship_to_event(actor, event), event.status
        )
        return self._current(event.id)

    def list_for_member(self, actor: Actor) -> list[MemberBooking]:
        """The actor's own assignments, soonest show first."""
        bookings = []
        for assignment in self._store.list_assignments_for_member(actor.id):
            authorize(actor, Operation.READ_ASSIGNMENT, relationship_to_assignment(actor, assignment))
            event = self._store.get_event(assignment.event_id)
            if event is not None:
                bookings.append(MemberBooking(assignment=assignment, event=event))
        return sorted(bookings, key=lambda b: (b.event.scheduled_date, b.event.created_at))

    def toggle_confirmation(self, assignment_id: str | AssignmentId, actor: Actor) -> CrewAssignment:
        """Flip the member's attendance confirmation. Crew cost follows."""
        assignment = require_assignment(self._store, assignment_id)
        authorize(
            actor, Operation.TOGGLE_CONFIRMATION, relationship_to_assignment(actor, assignment)
        )
        updated = replace(assignment, confirmed=not assignment.confirmed)
        self._store.save_crew_assignment(updated)
        logger.info(
            "Assignment %s confirmation set to %s by %s", updated.id, updated.confirmed, actor.id
        )
        self._ledger.recompute(updated.event_id)
        return updated

    def toggle_payment_received(
        self, assignment_id: str | AssignmentId, actor: Actor
    ) -> CrewAssignment:
        """Flip the member's own cachê-received flag. Does not touch the ledger."""
        assignment = require_assignment(self._store, assignment_id)
        authorize(
            actor, Operation.TOGGLE_PAYMENT_FLAG, relationship_to_assignment(actor, assignment)
        )
        updated = replace(assignment, paid=not assignment.paid)
        self._store.save_crew_assignment(updated)
        logger.info("Assignment %s paid set to %s by %s", updated.id, updated.paid, actor.id)
        return updated

    def _current(self, event_id: EventId) -> Allocations:
        return Allocations(
            assignments=tuple(self._store.list_crew_assignments(event_id)),
            equipment=tuple(self._store.list_equipment_allocations(event_id)),
        )

    def _require_crew_profiles(self, inserts: Sequence[CrewAssignment]) -> None:
        if not inserts:
            return
        wanted = [a.member_id for a in inserts]
        found = {p.id: p for p in self._store.get_profiles(wanted)}
        for member_id in wanted:
            profile = found.get(member_id)
            if profile is None or profile.role not in CREW_ROLES:
                raise ValidationError(f"{member_id} is not a crew member")


def _ops(plan: Reconciliation) -> list[BatchOp]:
    return [
        *(BatchOp(BatchAction.DELETE, entry) for entry in plan.deletes),
        *(BatchOp(BatchAction.UPDATE, entry) for entry in plan.updates),
        *(BatchOp(BatchAction.INSERT, entry) for entry in plan.inserts),
    ]
