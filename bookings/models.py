"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
Uniqueness of (event, member) and (event, equipment) is enforced by the
allocation registry, not by the database.
"""

import uuid

from django.db import models

MONEY = {"max_digits": 12, "decimal_places": 2, "default": 0}


class ActorProfile(models.Model):
    """Persistence model for actor profiles. The id is the identity-provider subject."""

    class Role(models.TextChoices):
        ADMIN = "Admin"
        CLIENT = "Client"
        MEMBER = "Member"

    id = models.CharField(primary_key=True, max_length=128)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.CLIENT)
    display_name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=64, blank=True, default="")
    document = models.CharField(max_length=64, blank=True, default="")
    address = models.CharField(max_length=255, blank=True, default="")
    member_kind = models.CharField(max_length=16, blank=True, default="")
    function = models.CharField(max_length=100, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.display_name} ({self.role})"


class Event(models.Model):
    """Persistence model for booked shows."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    show_type = models.CharField(max_length=32)
    scheduled_date = models.DateField()
    scheduled_time = models.TimeField(null=True, blank=True)
    duration_hours = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    venue = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True, default="")
    estimated_audience = models.PositiveIntegerField(default=0)
    sound_included = models.BooleanField(default=False)
    catering_included = models.BooleanField(default=False)
    notes = models.TextField(blank=True, default="")
    client = models.ForeignKey(
        ActorProfile, on_delete=models.PROTECT, related_name="requested_events"
    )
    crew_ids = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=32, default="Requested", db_index=True)
    contract_url = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField()

    class Meta:
        ordering = ["scheduled_date", "created_at"]
        indexes = [
            models.Index(fields=["client", "scheduled_date"]),
        ]

    def __str__(self) -> str:
        return self.title


class FinanceSummary(models.Model):
    """Persistence model for the per-event financial summary."""

    event = models.OneToOneField(
        Event, on_delete=models.CASCADE, primary_key=True, related_name="finance_summary"
    )
    crew_cost = models.DecimalField(**MONEY)
    equipment_cost = models.DecimalField(**MONEY)
    food_cost = models.DecimalField(**MONEY)
    transport_cost = models.DecimalField(**MONEY)
    other_cost = models.DecimalField(**MONEY)
    contract_value = models.DecimalField(**MONEY)
    total_paid = models.DecimalField(**MONEY)
    pending_balance = models.DecimalField(**MONEY)
    payment_status = models.CharField(max_length=16, default="Open")
    created_at = models.DateTimeField()

    class Meta:
        verbose_name_plural = "finance summaries"

    def __str__(self) -> str:
        return f"{self.event_id} - {self.contract_value} ({self.payment_status})"


class Movement(models.Model):
    """Persistence model for recorded payments."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="movements")
    paid_on = models.DateField()
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=16)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-paid_on", "-created_at"]
        indexes = [
            models.Index(fields=["event", "-paid_on"]),
        ]

    def __str__(self) -> str:
        return f"{self.paid_on} - {self.amount}"


class CrewAssignment(models.Model):
    """Persistence model for crew scaled to a show."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="crew_assignments")
    member = models.ForeignKey(
        ActorProfile, on_delete=models.PROTECT, related_name="crew_assignments"
    )
    fee = models.DecimalField(**MONEY)
    confirmed = models.BooleanField(default=False)
    paid = models.BooleanField(default=False)
    note = models.TextField(blank=True, default="")
    created_at = models.DateTimeField()

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["event"]),
            models.Index(fields=["member"]),
        ]

    def __str__(self) -> str:
        return f"{self.member_id} @ {self.event_id}"


class EquipmentAllocation(models.Model):
    """Persistence model for equipment allocated to a show."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(
        Event, on_delete=models.CASCADE, related_name="equipment_allocations"
    )
    equipment_id = models.CharField(max_length=128)
    value = models.DecimalField(**MONEY)
    note = models.TextField(blank=True, default="")
    created_at = models.DateTimeField()

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["event"]),
        ]

    def __str__(self) -> str:
        return f"{self.equipment_id} @ {self.event_id}"
