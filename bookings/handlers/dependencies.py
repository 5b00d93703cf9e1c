"""Builds the service graph for a request from Django settings."""

from dataclasses import dataclass

from django.conf import settings

from bookings.domain import Role
from bookings.services import (
    AllocationRegistry,
    ContractService,
    EventLifecycle,
    EventService,
    LedgerEngine,
    ProfileService,
)
from bookings.stores.django_store import DjangoBookingStore
from bookings.stores.interfaces import BookingStore


@dataclass(frozen=True)
class Services:
    events: EventService
    lifecycle: EventLifecycle
    ledger: LedgerEngine
    allocations: AllocationRegistry
    contracts: ContractService
    profiles: ProfileService


def build_services(store: BookingStore | None = None) -> Services:
    store = store or DjangoBookingStore()
    ledger = LedgerEngine(store)
    return Services(
        events=EventService(store),
        lifecycle=EventLifecycle(store, ledger),
        ledger=ledger,
        allocations=AllocationRegistry(store, ledger),
        contracts=ContractService(
            store,
            ledger,
            webhook_url=settings.CONTRACT_WEBHOOK_URL,
            timeout=settings.CONTRACT_WEBHOOK_TIMEOUT,
        ),
        profiles=ProfileService(store, default_role=Role(settings.BOOKINGS_DEFAULT_ROLE)),
    )
