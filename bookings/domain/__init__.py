from bookings.domain.models import (
    Actor,
    ActorProfile,
    CrewAssignment,
    EquipmentAllocation,
    Event,
    EventStatus,
    FinanceSummary,
    ManualCosts,
    MemberKind,
    Movement,
    PaymentMethod,
    PaymentStatus,
    Role,
    ShowType,
)
from bookings.domain.value_objects import (
    ActorId,
    AllocationId,
    AssignmentId,
    EquipmentId,
    EventId,
    Money,
    MovementId,
)

__all__ = [
    "Actor",
    "ActorProfile",
    "CrewAssignment",
    "EquipmentAllocation",
    "Event",
    "EventStatus",
    "FinanceSummary",
    "ManualCosts",
    "MemberKind",
    "Movement",
    "PaymentMethod",
    "PaymentStatus",
    "Role",
    "ShowType",
    "ActorId",
    "AllocationId",
    "AssignmentId",
    "EquipmentId",
    "EventId",
    "Money",
    "MovementId",
]
