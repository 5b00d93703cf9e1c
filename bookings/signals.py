"""Django signals for cache invalidation and snapshot fan-out.

Snapshots are published with ``transaction.on_commit`` so subscribers only
ever see committed state. A batch touching many rows of one topic publishes
one snapshot per row; each carries the full collection, so the last one wins.
"""

import logging
from uuid import UUID

from django.core.cache import cache
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from bookings import models
from bookings.cache import finance_summary_key
from bookings.domain import ActorId, EventId
from bookings.realtime import Collection, Topic, feed
from bookings.stores.django_store import DjangoBookingStore

logger = logging.getLogger(__name__)


def _publish(collection: Collection, event_uuid: UUID) -> None:
    def send() -> None:
        store = DjangoBookingStore()
        event_id = EventId(value=event_uuid)
        if collection is Collection.EVENTS:
            event = store.get_event(event_id)
            documents = (event,) if event is not None else ()
        elif collection is Collection.FINANCE_SUMMARIES:
            summary = store.get_finance_summary(event_id)
            documents = (summary,) if summary is not None else ()
        elif collection is Collection.MOVEMENTS:
            documents = tuple(store.list_movements(event_id))
        elif collection is Collection.CREW_ASSIGNMENTS:
            documents = tuple(store.list_crew_assignments(event_id))
        else:
            documents = tuple(store.list_equipment_allocations(event_id))
        feed.publish(Topic(collection, str(event_id)), documents)

    topic = Topic(collection, str(event_uuid))
    if feed.subscriber_count(topic):
        transaction.on_commit(send)


@receiver([post_save, post_delete], sender=models.Event)
def publish_event(sender, instance, **kwargs):
    """Fan out an event document after it changes."""
    _publish(Collection.EVENTS, instance.pk)


@receiver([post_save, post_delete], sender=models.FinanceSummary)
def invalidate_finance_summary(sender, instance, **kwargs):
    """Drop the cached summary and fan out the new one.

    The key is dropped again after commit so a read that re-cached the old row
    while the write was open does not outlive it.
    """
    key = finance_summary_key(instance.pk)
    cache.delete(key)
    transaction.on_commit(lambda: cache.delete(key))
    logger.debug("Invalidated finance summary cache for %s", instance.pk)
    _publish(Collection.FINANCE_SUMMARIES, instance.pk)


@receiver([post_save, post_delete], sender=models.Movement)
def publish_movements(sender, instance, **kwargs):
    _publish(Collection.MOVEMENTS, instance.event_id)


@receiver([post_save, post_delete], sender=models.CrewAssignment)
def publish_crew_assignments(sender, instance, **kwargs):
    _publish(Collection.CREW_ASSIGNMENTS, instance.event_id)


@receiver([post_save, post_delete], sender=models.EquipmentAllocation)
def publish_equipment_allocations(sender, instance, **kwargs):
    _publish(Collection.EQUIPMENT_ALLOCATIONS, instance.event_id)


@receiver(post_save, sender=models.ActorProfile)
def publish_profile(sender, instance, **kwargs):
    topic = Topic(Collection.ACTOR_PROFILES, instance.pk)
    if not feed.subscriber_count(topic):
        return

    def send() -> None:
        profile = DjangoBookingStore().get_profile(ActorId(value=instance.pk))
        feed.publish(topic, (profile,) if profile is not None else ())

    transaction.on_commit(send)
