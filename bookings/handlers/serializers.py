"""Serializers for transforming domain models to API responses and parsing input."""

from decimal import Decimal

from rest_framework import serializers

from bookings.domain import (
    ActorId,
    AssignmentId,
    AllocationId,
    CrewAssignment,
    EquipmentAllocation,
    EquipmentId,
    EventId,
    EventStatus,
    Money,
    PaymentMethod,
    ShowType,
)
from bookings.services import EventDraft

NON_NEGATIVE = {"max_digits": 12, "decimal_places": 2, "min_value": Decimal("0")}


def _choices(enum) -> list[str]:
    return [member.value for member in enum]


class MoneyField(serializers.DecimalField):
    """Renders a Money value object as a two-decimal string."""

    def __init__(self, **kwargs) -> None:
        kwargs.setdefault("max_digits", 12)
        kwargs.setdefault("decimal_places", 2)
        super().__init__(**kwargs)

    def to_representation(self, value):
        if isinstance(value, Money):
            value = value.amount
        return super().to_representation(value)


# Responses


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    show_type = serializers.CharField(source="show_type.value")
    scheduled_date = serializers.DateField()
    scheduled_time = serializers.TimeField(allow_null=True)
    duration_hours = serializers.DecimalField(max_digits=5, decimal_places=2)
    venue = serializers.CharField()
    address = serializers.CharField()
    estimated_audience = serializers.IntegerField()
    sound_included = serializers.BooleanField()
    catering_included = serializers.BooleanField()
    notes = serializers.CharField()
    client_id = serializers.CharField(source="client_id.value")
    crew_ids = serializers.SerializerMethodField()
    status = serializers.CharField(source="status.value")
    contract_url = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()

    def get_crew_ids(self, event) -> list[str]:
        return [member.value for member in event.crew_ids]


class FinanceSummarySerializer(serializers.Serializer):
    """Serializer for FinanceSummary domain model."""

    event_id = serializers.UUIDField(source="event_id.value")
    crew_cost = MoneyField()
    equipment_cost = MoneyField()
    food_cost = MoneyField()
    transport_cost = MoneyField()
    other_cost = MoneyField()
    contract_value = MoneyField()
    total_paid = MoneyField()
    pending_balance = MoneyField()
    payment_status = serializers.CharField(source="payment_status.value")


class MovementSerializer(serializers.Serializer):
    """Serializer for Movement domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    paid_on = serializers.DateField()
    amount = MoneyField()
    method = serializers.CharField(source="method.value")
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField(allow_null=True)


class CrewAssignmentSerializer(serializers.Serializer):
    """Serializer for CrewAssignment domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    member_id = serializers.CharField(source="member_id.value")
    fee = MoneyField()
    confirmed = serializers.BooleanField()
    paid = serializers.BooleanField()
    note = serializers.CharField()


class EquipmentAllocationSerializer(serializers.Serializer):
    """Serializer for EquipmentAllocation domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    equipment_id = serializers.CharField(source="equipment_id.value")
    value = MoneyField()
    note = serializers.CharField()


class AllocationsSerializer(serializers.Serializer):
    assignments = CrewAssignmentSerializer(many=True)
    allocations = EquipmentAllocationSerializer(many=True, source="equipment")


class MemberBookingSerializer(serializers.Serializer):
    assignment = CrewAssignmentSerializer()
    event = EventSerializer()


class BudgetSerializer(serializers.Serializer):
    event = EventSerializer()
    musicians = serializers.ListField(child=serializers.CharField())
    dancers = serializers.IntegerField()
    equipment = serializers.ListField(child=serializers.CharField())
    contract_value = MoneyField()


class PortfolioLineSerializer(serializers.Serializer):
    event = EventSerializer()
    summary = FinanceSummarySerializer()


class PortfolioSerializer(serializers.Serializer):
    gross = MoneyField()
    received = MoneyField()
    outstanding = MoneyField()
    lines = PortfolioLineSerializer(many=True)


# Requests


class EventInputSerializer(serializers.Serializer):
    """Fields a caller may send when requesting or editing a show."""

    title = serializers.CharField(max_length=255)
    show_type = serializers.ChoiceField(choices=_choices(ShowType))
    scheduled_date = serializers.DateField()
    scheduled_time = serializers.TimeField(required=False, allow_null=True, default=None)
    duration_hours = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, required=False, default=Decimal("0")
    )
    venue = serializers.CharField(max_length=255)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    estimated_audience = serializers.IntegerField(min_value=0, required=False, default=0)
    sound_included = serializers.BooleanField(required=False, default=False)
    catering_included = serializers.BooleanField(required=False, default=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    client_id = serializers.CharField(required=False, allow_null=True, default=None)

    def to_draft(self) -> EventDraft:
        data = dict(self.validated_data)
        data["show_type"] = ShowType(data["show_type"])
        client_id = data.pop("client_id", None)
        return EventDraft(**data, client_id=ActorId(value=client_id) if client_id else None)

    def to_changes(self) -> dict:
        """Partial update payload converted to domain values."""
        changes = dict(self.validated_data)
        if "show_type" in changes:
            changes["show_type"] = ShowType(changes["show_type"])
        if "client_id" in changes:
            if not changes["client_id"]:
                raise serializers.ValidationError({"client_id": "This field may not be null."})
            changes["client_id"] = ActorId(value=changes["client_id"])
        return changes


class TransitionSerializer(serializers.Serializer):
    target = serializers.ChoiceField(choices=_choices(EventStatus))
    signature = serializers.CharField(required=False, allow_blank=True, default="")


class ManualCostsSerializer(serializers.Serializer):
    food = serializers.DecimalField(**NON_NEGATIVE, default=Decimal("0"))
    transport = serializers.DecimalField(**NON_NEGATIVE, default=Decimal("0"))
    other = serializers.DecimalField(**NON_NEGATIVE, default=Decimal("0"))


class MovementInputSerializer(serializers.Serializer):
    paid_on = serializers.DateField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    method = serializers.ChoiceField(choices=_choices(PaymentMethod), default=PaymentMethod.PIX.value)


class AssignmentInputSerializer(serializers.Serializer):
    id = serializers.UUIDField(required=False, allow_null=True, default=None)
    member_id = serializers.CharField()
    fee = serializers.DecimalField(**NON_NEGATIVE)
    confirmed = serializers.BooleanField(required=False, default=False)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class AllocationInputSerializer(serializers.Serializer):
    id = serializers.UUIDField(required=False, allow_null=True, default=None)
    equipment_id = serializers.CharField()
    value = serializers.DecimalField(**NON_NEGATIVE)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class AllocationSaveSerializer(serializers.Serializer):
    """Desired end state of a show's crew and equipment."""

    assignments = AssignmentInputSerializer(many=True, required=False, default=list)
    allocations = AllocationInputSerializer(many=True, required=False, default=list)

    def to_domain(
        self, event_id: EventId
    ) -> tuple[list[CrewAssignment], list[EquipmentAllocation]]:
        assignments = [
            CrewAssignment(
                id=AssignmentId(value=item["id"]) if item["id"] else None,
                event_id=event_id,
                member_id=ActorId(value=item["member_id"]),
                fee=Money(amount=item["fee"]),
                confirmed=item["confirmed"],
                note=item["note"],
            )
            for item in self.validated_data["assignments"]
        ]
        allocations = [
            EquipmentAllocation(
                id=AllocationId(value=item["id"]) if item["id"] else None,
                event_id=event_id,
                equipment_id=EquipmentId(value=item["equipment_id"]),
                value=Money(amount=item["value"]),
                note=item["note"],
            )
            for item in self.validated_data["allocations"]
        ]
        return assignments, allocations


class ContractSignSerializer(serializers.Serializer):
    signature = serializers.CharField()


class ContractRecordSerializer(serializers.Serializer):
    contract_url = serializers.URLField(max_length=500)
