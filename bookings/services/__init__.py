from bookings.services.allocation_service import AllocationRegistry, Allocations, MemberBooking
from bookings.services.contract_service import Budget, ContractService
from bookings.services.event_service import EventDraft, EventService
from bookings.services.ledger_service import LedgerEngine, Portfolio
from bookings.services.lifecycle_service import EventLifecycle
from bookings.services.profile_service import ProfileService

__all__ = [
    "AllocationRegistry",
    "Allocations",
    "Budget",
    "ContractService",
    "EventDraft",
    "EventLifecycle",
    "EventService",
    "LedgerEngine",
    "MemberBooking",
    "Portfolio",
    "ProfileService",
]
