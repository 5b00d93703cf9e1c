"""Tests for snapshot subscriptions.

Run with: pytest tests/test_realtime.py -v
"""

from datetime import date

from bookings.domain import Money, PaymentStatus
from bookings.realtime import Collection, SnapshotFeed, Topic


class TestSnapshotFeed:
    """Tests for SnapshotFeed."""

    def test_subscriber_receives_published_snapshots(self):
        """Snapshots arrive in order with increasing sequence numbers."""
        feed = SnapshotFeed()
        topic = Topic(Collection.MOVEMENTS, "event-1")
        subscription = feed.subscribe(topic)

        feed.publish(topic, ("a",))
        feed.publish(topic, ("a", "b"))

        first, second = subscription.drain()
        assert first.documents == ("a",)
        assert second.documents == ("a", "b")
        assert first.sequence < second.sequence

    def test_other_topics_are_not_delivered(self):
        """A subscription only sees its own topic."""
        feed = SnapshotFeed()
        subscription = feed.subscribe(Topic(Collection.EVENTS, "event-1"))
        feed.publish(Topic(Collection.EVENTS, "event-2"), ("x",))
        assert subscription.drain() == []

    def test_closing_stops_delivery(self):
        """After close nothing more is queued and the topic has no subscribers."""
        feed = SnapshotFeed()
        topic = Topic(Collection.EVENTS, "event-1")
        with feed.subscribe(topic) as subscription:
            assert feed.subscriber_count(topic) == 1
        feed.publish(topic, ("x",))
        assert subscription.closed
        assert subscription.drain() == []
        assert feed.subscriber_count(topic) == 0

    def test_get_times_out_with_none(self):
        """get returns None when nothing arrives."""
        feed = SnapshotFeed()
        subscription = feed.subscribe(Topic(Collection.EVENTS, "event-1"))
        assert subscription.get(timeout=0.01) is None


class TestStoreSubscriptions:
    """Tests for snapshots published by the in-memory store."""

    def test_movement_write_publishes_movements_and_summary(
        self, store, ledger, make_event, admin
    ):
        """Adding a movement fans out the movement list and the new summary."""
        event = make_event()
        ledger.set_manual_costs(event.id, 500, 0, 0, admin)
        movements = store.subscribe(Topic(Collection.MOVEMENTS, str(event.id)))
        summaries = store.subscribe(Topic(Collection.FINANCE_SUMMARIES, str(event.id)))

        ledger.add_movement(event.id, date(2026, 4, 1), "500", "Pix", admin)

        latest_movements = movements.drain()[-1].documents
        assert [m.amount for m in latest_movements] == [Money.of(500)]
        latest_summary = summaries.drain()[-1].documents[0]
        assert latest_summary.payment_status is PaymentStatus.SETTLED
