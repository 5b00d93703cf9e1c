"""Pure ledger math. Every summary is derived in full from its inputs."""

from collections.abc import Iterable
from datetime import datetime

from bookings.domain.models import (
    CrewAssignment,
    EquipmentAllocation,
    FinanceSummary,
    ManualCosts,
    Movement,
    PaymentStatus,
)
from bookings.domain.value_objects import EventId, Money, total


def total_paid(movements: Iterable[Movement]) -> Money:
    return total(movement.amount for movement in movements)


def crew_cost(assignments: Iterable[CrewAssignment]) -> Money:
    """Only confirmed crew count toward the contract value."""
    return total(a.fee for a in assignments if a.confirmed)


def equipment_cost(allocations: Iterable[EquipmentAllocation]) -> Money:
    return total(a.value for a in allocations)


def summarize(
    event_id: EventId,
    movements: Iterable[Movement],
    assignments: Iterable[CrewAssignment],
    allocations: Iterable[EquipmentAllocation],
    manual: ManualCosts,
    created_at: datetime,
) -> FinanceSummary:
    crew = crew_cost(assignments)
    equipment = equipment_cost(allocations)
    contract_value = total([crew, equipment, manual.food, manual.transport, manual.other])
    paid = total_paid(movements)
    pending = contract_value.minus_floored(paid)
    return FinanceSummary(
        event_id=event_id,
        crew_cost=crew,
        equipment_cost=equipment,
        food_cost=manual.food,
        transport_cost=manual.transport,
        other_cost=manual.other,
        contract_value=contract_value,
        total_paid=paid,
        pending_balance=pending,
        payment_status=PaymentStatus.SETTLED if pending.is_zero else PaymentStatus.OPEN,
        created_at=created_at,
    )


def portfolio_totals(summaries: Iterable[FinanceSummary]) -> tuple[Money, Money, Money]:
    """Gross contract value, amount received and amount outstanding."""
    gross = received = outstanding = Money.zero()
    for summary in summaries:
        gross = gross + summary.contract_value
        received = received + summary.total_paid
        outstanding = outstanding + summary.pending_balance
    return gross, received, outstanding
