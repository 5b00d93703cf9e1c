"""Cache keys shared by the views and the invalidation signals."""

from bookings.domain import EventId


def finance_summary_key(event_id: EventId | str) -> str:
    return f"events:{event_id}:finance-summary"
