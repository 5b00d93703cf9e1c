"""Django ORM implementation of the BookingStore."""

from collections.abc import Sequence
from decimal import Decimal

from django.db import DatabaseError, transaction

from bookings import models
from bookings.domain import (
    ActorId,
    ActorProfile,
    AllocationId,
    AssignmentId,
    CrewAssignment,
    EquipmentAllocation,
    EquipmentId,
    Event,
    EventId,
    EventStatus,
    FinanceSummary,
    MemberKind,
    Money,
    Movement,
    MovementId,
    PaymentMethod,
    PaymentStatus,
    Role,
    ShowType,
)
from bookings.realtime import Subscription, Topic, feed
from bookings.stores.interfaces import BatchAction, BatchError, BatchOp, BookingStore


class DjangoBookingStore(BookingStore):
    """Relational store using Django ORM.

    Snapshots are published by bookings.signals once a write commits.
    """

    # events

    def get_event(self, event_id: EventId) -> Event | None:
        row = models.Event.objects.filter(pk=event_id.value).first()
        return _event_to_domain(row) if row is not None else None

    def list_events(
        self, client_id: ActorId | None = None, member_id: ActorId | None = None
    ) -> list[Event]:
        rows = models.Event.objects.all()
        if client_id is not None:
            rows = rows.filter(client_id=client_id.value)
        if member_id is not None:
            rows = rows.filter(crew_assignments__member_id=member_id.value).distinct()
        return [_event_to_domain(row) for row in rows]

    def save_event(self, event: Event) -> None:
        models.Event.objects.update_or_create(pk=event.id.value, defaults=_event_fields(event))

    # finance

    def get_finance_summary(self, event_id: EventId) -> FinanceSummary | None:
        row = models.FinanceSummary.objects.filter(pk=event_id.value).first()
        return _summary_to_domain(row) if row is not None else None

    def list_finance_summaries(self, event_ids: Sequence[EventId]) -> list[FinanceSummary]:
        rows = models.FinanceSummary.objects.filter(pk__in=[i.value for i in event_ids])
        return [_summary_to_domain(row) for row in rows]

    def save_finance_summary(self, summary: FinanceSummary) -> None:
        with transaction.atomic():
            models.FinanceSummary.objects.update_or_create(
                event_id=summary.event_id.value,
                defaults={
                    "crew_cost": summary.crew_cost.quantized(),
                    "equipment_cost": summary.equipment_cost.quantized(),
                    "food_cost": summary.food_cost.quantized(),
                    "transport_cost": summary.transport_cost.quantized(),
                    "other_cost": summary.other_cost.quantized(),
                    "contract_value": summary.contract_value.quantized(),
                    "total_paid": summary.total_paid.quantized(),
                    "pending_balance": summary.pending_balance.quantized(),
                    "payment_status": summary.payment_status.value,
                    "created_at": summary.created_at,
                },
            )

    def list_movements(self, event_id: EventId) -> list[Movement]:
        rows = models.Movement.objects.filter(event_id=event_id.value)
        return [_movement_to_domain(row) for row in rows]

    def get_movement(self, event_id: EventId, movement_id: MovementId) -> Movement | None:
        row = models.Movement.objects.filter(
            pk=movement_id.value, event_id=event_id.value
        ).first()
        return _movement_to_domain(row) if row is not None else None

    def save_movement(self, movement: Movement) -> None:
        models.Movement.objects.update_or_create(
            pk=movement.id.value,
            defaults={
                "event_id": movement.event_id.value,
                "paid_on": movement.paid_on,
                "amount": movement.amount.quantized(),
                "method": movement.method.value,
                "created_at": movement.created_at,
                "updated_at": movement.updated_at,
            },
        )

    def delete_movement(self, event_id: EventId, movement_id: MovementId) -> None:
        # Instance delete so post_delete fires for subscribers.
        row = models.Movement.objects.filter(
            pk=movement_id.value, event_id=event_id.value
        ).first()
        if row is not None:
            row.delete()

    # allocations

    def list_crew_assignments(self, event_id: EventId) -> list[CrewAssignment]:
        rows = models.CrewAssignment.objects.filter(event_id=event_id.value)
        return [_assignment_to_domain(row) for row in rows]

    def list_assignments_for_member(self, member_id: ActorId) -> list[CrewAssignment]:
        rows = models.CrewAssignment.objects.filter(member_id=member_id.value)
        return [_assignment_to_domain(row) for row in rows]

    def get_crew_assignment(self, assignment_id: AssignmentId) -> CrewAssignment | None:
        row = models.CrewAssignment.objects.filter(pk=assignment_id.value).first()
        return _assignment_to_domain(row) if row is not None else None

    def save_crew_assignment(self, assignment: CrewAssignment) -> None:
        if assignment.id is None:
            raise ValueError("Assignment must be persisted before it can be saved")
        models.CrewAssignment.objects.update_or_create(
            pk=assignment.id.value, defaults=_assignment_fields(assignment)
        )

    def list_equipment_allocations(self, event_id: EventId) -> list[EquipmentAllocation]:
        rows = models.EquipmentAllocation.objects.filter(event_id=event_id.value)
        return [_allocation_to_domain(row) for row in rows]

    def apply_batch(self, ops: Sequence[BatchOp]) -> None:
        try:
            with transaction.atomic():
                for op in ops:
                    _apply(op)
        except DatabaseError as exc:
            raise BatchError(str(exc)) from exc

    # profiles

    def get_profile(self, actor_id: ActorId) -> ActorProfile | None:
        row = models.ActorProfile.objects.filter(pk=actor_id.value).first()
        return _profile_to_domain(row) if row is not None else None

    def get_profiles(self, actor_ids: Sequence[ActorId]) -> list[ActorProfile]:
        rows = models.ActorProfile.objects.filter(pk__in=[i.value for i in actor_ids])
        return [_profile_to_domain(row) for row in rows]

    def save_profile(self, profile: ActorProfile) -> None:
        models.ActorProfile.objects.update_or_create(
            pk=profile.id.value,
            defaults={
                "role": profile.role.value,
                "display_name": profile.display_name,
                "email": profile.email,
                "phone": profile.phone,
                "document": profile.document,
                "address": profile.address,
                "member_kind": profile.member_kind.value if profile.member_kind else "",
                "function": profile.function,
            },
        )

    def subscribe(self, topic: Topic) -> Subscription:
        return feed.subscribe(topic)


def _apply(op: BatchOp) -> None:
    document = op.document
    if isinstance(document, Event):
        model, pk, fields = models.Event, document.id.value, _event_fields(document)
    elif isinstance(document, CrewAssignment):
        model, fields = models.CrewAssignment, _assignment_fields(document)
        pk = document.id.value if document.id is not None else None
    elif isinstance(document, EquipmentAllocation):
        model, fields = models.EquipmentAllocation, _allocation_fields(document)
        pk = document.id.value if document.id is not None else None
    else:
        raise BatchError(f"Unsupported document {type(document).__name__}")
    if pk is None:
        raise BatchError("Batch documents must carry an id")

    if op.action is BatchAction.INSERT:
        model.objects.create(pk=pk, **fields)
        return
    row = model.objects.select_for_update().filter(pk=pk).first()
    if row is None:
        raise BatchError(f"Document {pk} does not exist")
    if op.action is BatchAction.DELETE:
        row.delete()
        return
    for name, value in fields.items():
        setattr(row, name, value)
    row.save()


def _event_fields(event: Event) -> dict:
    return {
        "title": event.title,
        "show_type": event.show_type.value,
        "scheduled_date": event.scheduled_date,
        "scheduled_time": event.scheduled_time,
        "duration_hours": event.duration_hours,
        "venue": event.venue,
        "address": event.address,
        "estimated_audience": event.estimated_audience,
        "sound_included": event.sound_included,
        "catering_included": event.catering_included,
        "notes": event.notes,
        "client_id": event.client_id.value,
        "crew_ids": [member.value for member in event.crew_ids],
        "status": event.status.value,
        "contract_url": event.contract_url,
        "created_at": event.created_at,
    }


def _assignment_fields(assignment: CrewAssignment) -> dict:
    return {
        "event_id": assignment.event_id.value,
        "member_id": assignment.member_id.value,
        "fee": assignment.fee.quantized(),
        "confirmed": assignment.confirmed,
        "paid": assignment.paid,
        "note": assignment.note,
        "created_at": assignment.created_at,
    }


def _allocation_fields(allocation: EquipmentAllocation) -> dict:
    return {
        "event_id": allocation.event_id.value,
        "equipment_id": allocation.equipment_id.value,
        "value": allocation.value.quantized(),
        "note": allocation.note,
        "created_at": allocation.created_at,
    }


def _money(value: Decimal) -> Money:
    return Money(amount=Decimal(value))


def _event_to_domain(row: models.Event) -> Event:
    return Event(
        id=EventId(value=row.id),
        title=row.title,
        show_type=ShowType(row.show_type),
        scheduled_date=row.scheduled_date,
        scheduled_time=row.scheduled_time,
        duration_hours=Decimal(row.duration_hours),
        venue=row.venue,
        address=row.address,
        estimated_audience=row.estimated_audience,
        sound_included=row.sound_included,
        catering_included=row.catering_included,
        notes=row.notes,
        client_id=ActorId(value=row.client_id),
        status=EventStatus(row.status),
        created_at=row.created_at,
        crew_ids=tuple(ActorId(value=member) for member in row.crew_ids),
        contract_url=row.contract_url or None,
    )


def _summary_to_domain(row: models.FinanceSummary) -> FinanceSummary:
    return FinanceSummary(
        event_id=EventId(value=row.event_id),
        crew_cost=_money(row.crew_cost),
        equipment_cost=_money(row.equipment_cost),
        food_cost=_money(row.food_cost),
        transport_cost=_money(row.transport_cost),
        other_cost=_money(row.other_cost),
        contract_value=_money(row.contract_value),
        total_paid=_money(row.total_paid),
        pending_balance=_money(row.pending_balance),
        payment_status=PaymentStatus(row.payment_status),
        created_at=row.created_at,
    )


def _movement_to_domain(row: models.Movement) -> Movement:
    return Movement(
        id=MovementId(value=row.id),
        event_id=EventId(value=row.event_id),
        paid_on=row.paid_on,
        amount=_money(row.amount),
        method=PaymentMethod(row.method),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _assignment_to_domain(row: models.CrewAssignment) -> CrewAssignment:
    return CrewAssignment(
        id=AssignmentId(value=row.id),
        event_id=EventId(value=row.event_id),
        member_id=ActorId(value=row.member_id),
        fee=_money(row.fee),
        confirmed=row.confirmed,
        paid=row.paid,
        note=row.note,
        created_at=row.created_at,
    )


def _allocation_to_domain(row: models.EquipmentAllocation) -> EquipmentAllocation:
    return EquipmentAllocation(
        id=AllocationId(value=row.id),
        event_id=EventId(value=row.event_id),
        equipment_id=EquipmentId(value=row.equipment_id),
        value=_money(row.value),
        note=row.note,
        created_at=row.created_at,
    )


def _profile_to_domain(row: models.ActorProfile) -> ActorProfile:
    return ActorProfile(
        id=ActorId(value=row.id),
        role=Role(row.role),
        display_name=row.display_name,
        email=row.email,
        phone=row.phone,
        document=row.document,
        address=row.address,
        member_kind=MemberKind(row.member_kind) if row.member_kind else None,
        function=row.function,
    )
