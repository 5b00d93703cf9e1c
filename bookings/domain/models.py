"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in bookings/models.py (persistence layer).
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum

from bookings.domain.value_objects import (
    ActorId,
    AllocationId,
    AssignmentId,
    EquipmentId,
    EventId,
    Money,
    MovementId,
)


class Role(Enum):
    ADMIN = "Admin"
    CLIENT = "Client"
    MEMBER = "Member"


class EventStatus(Enum):
    REQUESTED = "Requested"
    UNDER_REVIEW = "UnderReview"
    BUDGET_ISSUED = "BudgetIssued"
    ACCEPTED = "Accepted"
    DECLINED = "Declined"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PaymentStatus(Enum):
    OPEN = "Open"
    SETTLED = "Settled"


class ShowType(Enum):
    WEDDING = "Wedding"
    BIRTHDAY = "Birthday"
    GRADUATION = "Graduation"
    CORPORATE = "Corporate"
    OTHER = "Other"


class PaymentMethod(Enum):
    PIX = "Pix"
    TRANSFER = "Transfer"
    CASH = "Cash"
    CARD = "Card"


class MemberKind(Enum):
    MUSICIAN = "Musician"
    DANCER = "Dancer"
    PRODUCTION = "Production"


@dataclass(frozen=True)
class Actor:
    """Who is performing an operation. Passed explicitly into every service call."""

    id: ActorId
    role: Role


@dataclass(frozen=True)
class ActorProfile:
    """Domain representation of a user profile."""

    id: ActorId
    role: Role
    display_name: str
    email: str = ""
    phone: str = ""
    document: str = ""
    address: str = ""
    member_kind: MemberKind | None = None
    function: str = ""

    def as_actor(self) -> Actor:
        return Actor(id=self.id, role=self.role)


@dataclass(frozen=True)
class Event:
    """Domain representation of a booked show."""

    id: EventId
    title: str
    show_type: ShowType
    scheduled_date: date
    scheduled_time: time | None
    duration_hours: Decimal
    venue: str
    address: str
    estimated_audience: int
    sound_included: bool
    catering_included: bool
    notes: str
    client_id: ActorId
    status: EventStatus
    created_at: datetime
    crew_ids: tuple[ActorId, ...] = ()
    contract_url: str | None = None

    @property
    def city(self) -> str:
        """City part of a ``"Venue - City"`` style venue, or the whole venue."""
        _, sep, rest = self.venue.partition("-")
        return rest.strip() if sep and rest.strip() else self.venue


@dataclass(frozen=True)
class ManualCosts:
    """The cost inputs an operator edits directly."""

    food: Money
    transport: Money
    other: Money

    @classmethod
    def zero(cls) -> "ManualCosts":
        return cls(food=Money.zero(), transport=Money.zero(), other=Money.zero())


@dataclass(frozen=True)
class FinanceSummary:
    """Financial summary of one event. Derived fields are always recomputed."""

    event_id: EventId
    crew_cost: Money
    equipment_cost: Money
    food_cost: Money
    transport_cost: Money
    other_cost: Money
    contract_value: Money
    total_paid: Money
    pending_balance: Money
    payment_status: PaymentStatus
    created_at: datetime

    @property
    def manual_costs(self) -> ManualCosts:
        return ManualCosts(
            food=self.food_cost, transport=self.transport_cost, other=self.other_cost
        )


@dataclass(frozen=True)
class Movement:
    """One recorded incoming payment against a show's contract value."""

    id: MovementId
    event_id: EventId
    paid_on: date
    amount: Money
    method: PaymentMethod
    created_at: datetime
    updated_at: datetime | None = None


@dataclass(frozen=True)
class CrewAssignment:
    """A member scaled for a show. ``id`` is None until persisted."""

    event_id: EventId
    member_id: ActorId
    fee: Money
    confirmed: bool = False
    paid: bool = False
    note: str = ""
    id: AssignmentId | None = None
    created_at: datetime | None = None

    @property
    def key(self) -> tuple[EventId, ActorId]:
        return (self.event_id, self.member_id)

    def merged_with(self, desired: "CrewAssignment") -> "CrewAssignment":
        """Apply the mutable fields of ``desired`` onto this persisted entry."""
        return replace(
            self, fee=desired.fee, confirmed=desired.confirmed, note=desired.note
        )


@dataclass(frozen=True)
class EquipmentAllocation:
    """A piece of equipment allocated to a show. ``id`` is None until persisted."""

    event_id: EventId
    equipment_id: EquipmentId
    value: Money
    note: str = ""
    id: AllocationId | None = None
    created_at: datetime | None = None

    @property
    def key(self) -> tuple[EventId, EquipmentId]:
        return (self.event_id, self.equipment_id)

    def merged_with(self, desired: "EquipmentAllocation") -> "EquipmentAllocation":
        """Apply the mutable fields of ``desired`` onto this persisted entry."""
        return replace(self, value=desired.value, note=desired.note)
