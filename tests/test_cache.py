"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

from datetime import UTC, date, datetime

import pytest
from django.core.cache import cache

from bookings import models
from bookings.cache import finance_summary_key
from bookings.domain import ActorId, EventId, ManualCosts, Money
from bookings.domain import ledger
from bookings.stores.django_store import DjangoBookingStore


@pytest.fixture
def event(db) -> models.Event:
    client = models.ActorProfile.objects.create(id="client-1", role="Client", display_name="C")
    models.ActorProfile.objects.create(id="admin-1", role="Admin", display_name="A")
    return models.Event.objects.create(
        title="Aniversário",
        show_type="Birthday",
        scheduled_date=date(2026, 8, 1),
        venue="Salão - Recife",
        client=client,
        created_at=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
    )


def save_summary(event: models.Event, food: int) -> None:
    summary = ledger.summarize(
        EventId(value=event.pk),
        [],
        [],
        [],
        ManualCosts(food=Money.of(food), transport=Money.zero(), other=Money.zero()),
        event.created_at,
    )
    DjangoBookingStore().save_finance_summary(summary)


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_summary_read_is_cached(self, event, api_client):
        """Reading a summary stores it under events:{id}:finance-summary."""
        save_summary(event, 100)
        api_client.credentials(HTTP_X_ACTOR_ID="admin-1")

        response = api_client.get(f"/api/events/{event.pk}/finance-summary")

        assert response.status_code == 200
        assert cache.get(finance_summary_key(event.pk))["contract_value"] == "100.00"

    def test_summary_save_invalidates_cache(self, event, api_client):
        """Saving a summary drops the cached copy."""
        save_summary(event, 100)
        api_client.credentials(HTTP_X_ACTOR_ID="admin-1")
        api_client.get(f"/api/events/{event.pk}/finance-summary")

        save_summary(event, 250)

        assert cache.get(finance_summary_key(event.pk)) is None
        response = api_client.get(f"/api/events/{event.pk}/finance-summary")
        assert response.data["contract_value"] == "250.00"

    def test_summary_cached_before_commit_is_dropped_on_commit(
        self, event, django_capture_on_commit_callbacks
    ):
        """A copy cached while the write is still open does not survive the commit."""
        save_summary(event, 100)
        key = finance_summary_key(event.pk)

        with django_capture_on_commit_callbacks(execute=True):
            save_summary(event, 250)
            cache.set(key, {"contract_value": "100.00"})

        assert cache.get(key) is None

    def test_cached_summary_still_checks_access(self, event, api_client):
        """A cached summary is not served to another client."""
        save_summary(event, 100)
        api_client.credentials(HTTP_X_ACTOR_ID="admin-1")
        api_client.get(f"/api/events/{event.pk}/finance-summary")

        api_client.credentials(HTTP_X_ACTOR_ID="someone-else")
        response = api_client.get(f"/api/events/{event.pk}/finance-summary")

        assert response.status_code == 403

    def test_owner_reads_cached_summary(self, event, api_client):
        """The owning client gets the same cached body."""
        save_summary(event, 100)
        api_client.credentials(HTTP_X_ACTOR_ID="admin-1")
        admin_body = api_client.get(f"/api/events/{event.pk}/finance-summary").data

        api_client.credentials(HTTP_X_ACTOR_ID=str(ActorId("client-1")))
        assert api_client.get(f"/api/events/{event.pk}/finance-summary").data == admin_body
