"""Pytest configuration and shared fixtures."""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from bookings.domain import (
    Actor,
    ActorId,
    ActorProfile,
    Event,
    EventId,
    EventStatus,
    MemberKind,
    Role,
    ShowType,
)
from bookings.services import (
    AllocationRegistry,
    ContractService,
    EventLifecycle,
    EventService,
    LedgerEngine,
)
from bookings.stores import InMemoryBookingStore

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


def clock() -> datetime:
    return NOW


@pytest.fixture
def store() -> InMemoryBookingStore:
    store = InMemoryBookingStore()
    for profile in (
        ActorProfile(id=ActorId("admin-1"), role=Role.ADMIN, display_name="Ana Admin"),
        ActorProfile(
            id=ActorId("client-1"),
            role=Role.CLIENT,
            display_name="Carla Cliente",
            document="123.456.789-00",
            address="Rua das Flores, 10",
            phone="+55 11 99999-0000",
        ),
        ActorProfile(id=ActorId("client-2"), role=Role.CLIENT, display_name="Other Client"),
        ActorProfile(
            id=ActorId("member-1"),
            role=Role.MEMBER,
            display_name="Marcos",
            member_kind=MemberKind.MUSICIAN,
            function="Guitarist",
        ),
        ActorProfile(
            id=ActorId("member-2"),
            role=Role.MEMBER,
            display_name="Dora",
            member_kind=MemberKind.DANCER,
        ),
    ):
        store.save_profile(profile)
    return store


@pytest.fixture
def admin() -> Actor:
    return Actor(id=ActorId("admin-1"), role=Role.ADMIN)


@pytest.fixture
def client_actor() -> Actor:
    return Actor(id=ActorId("client-1"), role=Role.CLIENT)


@pytest.fixture
def other_client() -> Actor:
    return Actor(id=ActorId("client-2"), role=Role.CLIENT)


@pytest.fixture
def member() -> Actor:
    return Actor(id=ActorId("member-1"), role=Role.MEMBER)


@pytest.fixture
def other_member() -> Actor:
    return Actor(id=ActorId("member-2"), role=Role.MEMBER)


@pytest.fixture
def make_event(store):
    """Persist an event for client-1 in the given status."""

    def _make(status: EventStatus = EventStatus.REQUESTED, **overrides) -> Event:
        fields = {
            "id": EventId.generate(),
            "title": "Casamento Silva",
            "show_type": ShowType.WEDDING,
            "scheduled_date": date(2026, 6, 20),
            "scheduled_time": None,
            "duration_hours": Decimal("4"),
            "venue": "Espaço Jardim - Campinas",
            "address": "Av. Brasil, 500",
            "estimated_audience": 150,
            "sound_included": True,
            "catering_included": False,
            "notes": "",
            "client_id": ActorId("client-1"),
            "status": status,
            "created_at": NOW,
        }
        fields.update(overrides)
        event = Event(**fields)
        store.save_event(event)
        return event

    return _make


@pytest.fixture
def ledger(store) -> LedgerEngine:
    return LedgerEngine(store, clock=clock)


@pytest.fixture
def registry(store, ledger) -> AllocationRegistry:
    return AllocationRegistry(store, ledger, clock=clock)


@pytest.fixture
def lifecycle(store, ledger) -> EventLifecycle:
    return EventLifecycle(store, ledger)


@pytest.fixture
def event_service(store) -> EventService:
    return EventService(store, clock=clock)


@pytest.fixture
def contracts(store, ledger) -> ContractService:
    return ContractService(store, ledger, webhook_url="https://contracts.example/hook")
