"""Three-way reconciliation of a desired end state against persisted entries."""

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Generic, Protocol, Self, TypeVar

from bookings.domain.errors import DuplicateAllocationError, NotFoundError, ValidationError


class Reconcilable(Protocol):
    @property
    def id(self) -> Hashable | None: ...

    @property
    def key(self) -> Hashable: ...

    def merged_with(self, desired: Self) -> Self: ...


T = TypeVar("T", bound=Reconcilable)


@dataclass(frozen=True)
class Reconciliation(Generic[T]):
    resolved: tuple[T, ...] = ()
    inserts: tuple[T, ...] = ()
    updates: tuple[T, ...] = ()
    deletes: tuple[T, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.inserts or self.updates or self.deletes)


def check_unique(entries: Sequence[T], describe=str) -> None:
    """Raise DuplicateAllocationError if two entries share a key."""
    seen: set[Hashable] = set()
    for entry in entries:
        if entry.key in seen:
            raise DuplicateAllocationError(describe(entry))
        seen.add(entry.key)


def reconcile(current: Sequence[T], desired: Sequence[T], resource: str) -> Reconciliation[T]:
    """Diff ``desired`` against ``current``.

    - current entries absent from desired are deleted
    - desired entries with an id are merged onto the persisted entry and
      must keep its key
    - desired entries without an id are inserted

    Unchanged entries produce no update. ``resolved`` is the end state in
    desired order.
    """
    by_id = {entry.id: entry for entry in current}
    kept: set[Hashable] = set()
    inserts: list[T] = []
    updates: list[T] = []
    resolved: list[T] = []
    for entry in desired:
        if entry.id is None:
            inserts.append(entry)
            resolved.append(entry)
            continue
        persisted = by_id.get(entry.id)
        if persisted is None:
            raise NotFoundError(resource)
        if entry.key != persisted.key:
            raise ValidationError(f"{resource} {entry.id} cannot be reassigned")
        kept.add(entry.id)
        merged = persisted.merged_with(entry)
        resolved.append(merged)
        if merged != persisted:
            updates.append(merged)
    deletes = [entry for entry in current if entry.id not in kept]
    return Reconciliation(
        resolved=tuple(resolved),
        inserts=tuple(inserts),
        updates=tuple(updates),
        deletes=tuple(deletes),
    )
