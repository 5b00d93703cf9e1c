"""Ledger engine - the single place finance summaries are derived and written.

Every mutator that can change a show's numbers (movements, manual costs,
allocation saves, crew confirmations) ends by calling ``recompute``, which
re-derives the whole summary from the source collections and writes it in
one operation. Running it again without an intervening change yields an
equal summary.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any

from bookings.domain import (
    Actor,
    Event,
    EventId,
    FinanceSummary,
    ManualCosts,
    Money,
    Movement,
    MovementId,
    PaymentMethod,
    PaymentStatus,
    Role,
)
from bookings.domain import ledger
from bookings.domain.errors import NotFoundError, ValidationError
from bookings.domain.policy import Operation, Relationship, authorize, relationship_to_event
from bookings.services.lookups import parse_movement_id, require_event, utcnow
from bookings.stores.interfaces import BookingStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortfolioLine:
    event: Event
    summary: FinanceSummary


@dataclass(frozen=True)
class Portfolio:
    """Totals across every show visible to an actor."""

    gross: Money
    received: Money
    outstanding: Money
    lines: tuple[PortfolioLine, ...]


class LedgerEngine:
    """Service for finance summaries and payment movements."""

    def __init__(
        self, store: BookingStore, clock: Callable[[], datetime] = utcnow
    ) -> None:
        self._store = store
        self._clock = clock

    def recompute(
        self, event_id: str | EventId, manual: ManualCosts | None = None
    ) -> FinanceSummary:
        """Re-derive and persist the event's summary.

        ``manual`` replaces the stored food/transport/other inputs; otherwise
        the stored ones (or zeros for a new summary) are kept.

        Raises:
            EventNotFoundError: If the event does not exist. Nothing is written.
        """
        event = require_event(self._store, event_id)
        existing = self._store.get_finance_summary(event.id)
        if manual is None:
            manual = existing.manual_costs if existing is not None else ManualCosts.zero()
        created_at = existing.created_at if existing is not None else self._clock()

        summary = ledger.summarize(
            event.id,
            self._store.list_movements(event.id),
            self._store.list_crew_assignments(event.id),
            self._store.list_equipment_allocations(event.id),
            manual,
            created_at,
        )
        self._store.save_finance_summary(summary)
        logger.debug(
            "Recomputed %s: value=%s paid=%s pending=%s %s",
            event.id,
            summary.contract_value,
            summary.total_paid,
            summary.pending_balance,
            summary.payment_status.value,
        )
        return summary

    def current_contract_value(self, event_id: EventId) -> Money:
        summary = self._store.get_finance_summary(event_id)
        return summary.contract_value if summary is not None else Money.zero()

    def get_summary(self, event_id: str | EventId, actor: Actor) -> FinanceSummary:
        """Return the persisted summary, or an unsaved zero summary before the first write."""
        return self.summary_for(self.authorize_finance_read(event_id, actor))

    def authorize_finance_read(self, event_id: str | EventId, actor: Actor) -> Event:
        event = require_event(self._store, event_id)
        authorize(actor, Operation.READ_FINANCE, relationship_to_event(actor, event), event.status)
        return event

    def summary_for(self, event: Event) -> FinanceSummary:
        return self._store.get_finance_summary(event.id) or self._empty_summary(event)

    def set_manual_costs(
        self,
        event_id: str | EventId,
        food: Any,
        transport: Any,
        other: Any,
        actor: Actor,
    ) -> FinanceSummary:
        event = require_event(self._store, event_id)
        authorize(
            actor, Operation.WRITE_MANUAL_COSTS, relationship_to_event(actor, event), event.status
        )
        manual = ManualCosts(
            food=_cost(food, "food"),
            transport=_cost(transport, "transport"),
            other=_cost(other, "other"),
        )
        logger.info("Manual costs for %s set by %s", event.id, actor.id)
        return self.recompute(event.id, manual=manual)

    def list_movements(self, event_id: str | EventId, actor: Actor) -> list[Movement]:
        event = self.authorize_finance_read(event_id, actor)
        return self._store.list_movements(event.id)

    def add_movement(
        self,
        event_id: str | EventId,
        paid_on: date,
        amount: Any,
        method: PaymentMethod | str,
        actor: Actor,
    ) -> Movement:
        event = self._authorize_movement_write(event_id, actor)
        movement = Movement(
            id=MovementId.generate(),
            event_id=event.id,
            paid_on=_paid_on(paid_on),
            amount=_positive_amount(amount),
            method=_method(method),
            created_at=self._clock(),
        )
        self._store.save_movement(movement)
        logger.info("Movement %s of %s recorded on %s by %s", movement.id, movement.amount, event.id, actor.id)
        self.recompute(event.id)
        return movement

    def edit_movement(
        self,
        event_id: str | EventId,
        movement_id: str | MovementId,
        paid_on: date,
        amount: Any,
        method: PaymentMethod | str,
        actor: Actor,
    ) -> Movement:
        event = self._authorize_movement_write(event_id, actor)
        existing = self._require_movement(event, movement_id)
        movement = replace(
            existing,
            paid_on=_paid_on(paid_on),
            amount=_positive_amount(amount),
            method=_method(method),
            updated_at=self._clock(),
        )
        self._store.save_movement(movement)
        logger.info("Movement %s on %s edited by %s", movement.id, event.id, actor.id)
        self.recompute(event.id)
        return movement

    def delete_movement(
        self, event_id: str | EventId, movement_id: str | MovementId, actor: Actor
    ) -> FinanceSummary:
        event = self._authorize_movement_write(event_id, actor)
        existing = self._require_movement(event, movement_id)
        self._store.delete_movement(event.id, existing.id)
        logger.info("Movement %s on %s deleted by %s", existing.id, event.id, actor.id)
        return self.recompute(event.id)

    def portfolio(self, actor: Actor) -> Portfolio:
        """Gross, received and outstanding across the actor's visible shows."""
        authorize(actor, Operation.READ_PORTFOLIO, Relationship.NONE)
        if actor.role is Role.ADMIN:
            events = self._store.list_events()
        else:
            events = self._store.list_events(client_id=actor.id)
        stored = {
            s.event_id: s for s in self._store.list_finance_summaries([e.id for e in events])
        }
        lines = tuple(
            PortfolioLine(event=e, summary=stored.get(e.id) or self._empty_summary(e))
            for e in sorted(events, key=lambda e: e.scheduled_date, reverse=True)
        )
        gross, received, outstanding = ledger.portfolio_totals(line.summary for line in lines)
        return Portfolio(gross=gross, received=received, outstanding=outstanding, lines=lines)

    def _authorize_movement_write(self, event_id: str | EventId, actor: Actor) -> Event:
        event = require_event(self._store, event_id)
        summary = self._store.get_finance_summary(event.id)
        payment_status = summary.payment_status if summary is not None else PaymentStatus.OPEN
        authorize(
            actor, Operation.WRITE_MOVEMENT, relationship_to_event(actor, event), payment_status
        )
        return event

    def _require_movement(self, event: Event, movement_id: str | MovementId) -> Movement:
        movement = self._store.get_movement(event.id, parse_movement_id(movement_id))
        if movement is None:
            raise NotFoundError("Movement")
        return movement

    def _empty_summary(self, event: Event) -> FinanceSummary:
        return ledger.summarize(event.id, (), (), (), ManualCosts.zero(), event.created_at)


def _in_cents(value: Any, message: str) -> Money:
    try:
        amount = Money.of(value)
    except ValueError as exc:
        raise ValidationError(message) from exc
    if amount.amount != amount.quantized():
        raise ValidationError(f"{message} with at most two decimal places")
    return amount


def _cost(value: Any, name: str) -> Money:
    return _in_cents(value if value is not None else 0, f"{name} must be a non-negative number")


def _positive_amount(value: Any) -> Money:
    amount = _in_cents(value, "amount must be a positive number")
    if amount.is_zero:
        raise ValidationError("amount must be a positive number")
    return amount


def _paid_on(value: Any) -> date:
    if isinstance(value, datetime) or not isinstance(value, date):
        raise ValidationError("paid_on must be a date")
    return value


def _method(value: PaymentMethod | str) -> PaymentMethod:
    if isinstance(value, PaymentMethod):
        return value
    try:
        return PaymentMethod(value)
    except ValueError as exc:
        raise ValidationError("method is not a supported payment method") from exc
