from bookings.stores.interfaces import BatchAction, BatchError, BatchOp, BookingStore
from bookings.stores.memory_store import InMemoryBookingStore

__all__ = [
    "BatchAction",
    "BatchError",
    "BatchOp",
    "BookingStore",
    "InMemoryBookingStore",
]
