"""Snapshot fan-out for live subscribers.

A subscription yields immutable snapshots of one topic (a collection scoped
to one key, usually an event id). Consumers diff each snapshot against the
previous one instead of sharing mutable state with the writer.
"""

import itertools
import logging
import queue
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Collection(Enum):
    EVENTS = "events"
    FINANCE_SUMMARIES = "financeSummaries"
    MOVEMENTS = "movements"
    CREW_ASSIGNMENTS = "crewAssignments"
    EQUIPMENT_ALLOCATIONS = "equipmentAllocations"
    ACTOR_PROFILES = "actorProfiles"


@dataclass(frozen=True)
class Topic:
    collection: Collection
    key: str


@dataclass(frozen=True)
class Snapshot:
    topic: Topic
    sequence: int
    documents: tuple[Any, ...]


_CLOSED = object()


class Subscription:
    """Receives snapshots for one topic until closed."""

    def __init__(self, feed: "SnapshotFeed", topic: Topic) -> None:
        self.topic = topic
        self._feed = feed
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, snapshot: Snapshot) -> None:
        if not self._closed:
            self._queue.put(snapshot)

    def get(self, timeout: float | None = None) -> Snapshot | None:
        """Block for the next snapshot. Returns None on timeout or once closed."""
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        return None if item is _CLOSED else item

    def drain(self) -> list[Snapshot]:
        """Every snapshot received so far, without blocking."""
        items = []
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return items
            if item is not _CLOSED:
                items.append(item)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._feed.unsubscribe(self)
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[Snapshot]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class SnapshotFeed:
    """In-process topic registry. Publishing never blocks on subscribers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: dict[Topic, list[Subscription]] = {}
        self._sequence = itertools.count(1)

    def subscribe(self, topic: Topic) -> Subscription:
        subscription = Subscription(self, topic)
        with self._lock:
            self._subscribers.setdefault(topic, []).append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subscribers = self._subscribers.get(subscription.topic, [])
            if subscription in subscribers:
                subscribers.remove(subscription)
            if not subscribers:
                self._subscribers.pop(subscription.topic, None)

    def publish(self, topic: Topic, documents: tuple[Any, ...]) -> Snapshot:
        with self._lock:
            snapshot = Snapshot(topic=topic, sequence=next(self._sequence), documents=documents)
            subscribers = list(self._subscribers.get(topic, ()))
        for subscription in subscribers:
            subscription.deliver(snapshot)
        logger.debug(
            "Published %s/%s #%d to %d subscriber(s)",
            topic.collection.value,
            topic.key,
            snapshot.sequence,
            len(subscribers),
        )
        return snapshot

    def subscriber_count(self, topic: Topic) -> int:
        with self._lock:
            return len(self._subscribers.get(topic, ()))


feed = SnapshotFeed()
