"""Contract service - budget view and the contract webhook.

When a client accepts a budget with a signature, a payload describing the
show is POSTed to the contract generator. The generator answers later by
having an admin record the PDF link. A delivery failure is reported to the
caller but never rolls back the acceptance.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any

import httpx

from bookings.domain import Actor, ActorProfile, Event, EventId, EventStatus, MemberKind, Money
from bookings.domain.amount_words import amount_in_words, format_brl
from bookings.domain.errors import ExternalServiceError, PreconditionFailedError, ValidationError
from bookings.domain.policy import Operation, authorize, relationship_to_event
from bookings.services.ledger_service import LedgerEngine
from bookings.services.lookups import require_event
from bookings.stores.interfaces import BookingStore

logger = logging.getLogger(__name__)

NOT_PROVIDED = "Não informado"
TERMS_WITH_SOUND = "Entrada de 30% e o restante no dia do show"
TERMS_CASH = "À vista"


@dataclass(frozen=True)
class Budget:
    """What the client sees once a budget is issued."""

    event: Event
    musicians: tuple[str, ...]
    dancers: int
    equipment: tuple[str, ...]
    contract_value: Money


@dataclass(frozen=True)
class CrewMember:
    profile: ActorProfile

    @property
    def label(self) -> str:
        if self.profile.function:
            return f"{self.profile.display_name} ({self.profile.function})"
        return self.profile.display_name


class ContractService:
    """Service for the budget view and contract emission."""

    def __init__(
        self,
        store: BookingStore,
        ledger: LedgerEngine,
        webhook_url: str = "",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._client = client

    def budget(self, event_id: str | EventId, actor: Actor) -> Budget:
        event = require_event(self._store, event_id)
        authorize(actor, Operation.READ_BUDGET, relationship_to_event(actor, event), event.status)
        crew = self._confirmed_crew(event)
        return Budget(
            event=event,
            musicians=tuple(
                c.profile.function or "Musician"
                for c in crew
                if c.profile.member_kind is MemberKind.MUSICIAN
            ),
            dancers=sum(1 for c in crew if c.profile.member_kind is MemberKind.DANCER),
            equipment=tuple(
                str(a.equipment_id) for a in self._store.list_equipment_allocations(event.id)
            ),
            contract_value=self._ledger.current_contract_value(event.id),
        )

    def sign(self, event_id: str | EventId, signature: str, actor: Actor) -> dict[str, Any]:
        """Send the signed acceptance to the contract generator.

        Raises:
            UnauthorizedError: Unless the owning client signs an Accepted show.
            PreconditionFailedError: If a contract is already on file.
            ExternalServiceError: If the webhook cannot be reached.
        """
        event = require_event(self._store, event_id)
        authorize(actor, Operation.SIGN_CONTRACT, relationship_to_event(actor, event), event.status)
        return self.emit_acceptance(event, signature)

    def emit_acceptance(self, event: Event, signature: str) -> dict[str, Any]:
        if event.status is not EventStatus.ACCEPTED:
            raise PreconditionFailedError("Only accepted shows can be contracted")
        if event.contract_url:
            raise PreconditionFailedError("A contract is already on file")
        if not signature or not signature.strip():
            raise ValidationError("signature is required")
        payload = self.build_payload(event, signature)
        self._post(payload)
        logger.info("Contract payload for %s delivered", event.id)
        return payload

    def record_contract(self, event_id: str | EventId, contract_url: str, actor: Actor) -> Event:
        """Store the generated PDF link on the event."""
        event = require_event(self._store, event_id)
        authorize(
            actor, Operation.RECORD_CONTRACT, relationship_to_event(actor, event), event.status
        )
        if not contract_url or not contract_url.strip():
            raise ValidationError("contract_url is required")
        updated = replace(event, contract_url=contract_url.strip())
        self._store.save_event(updated)
        logger.info("Contract for %s recorded by %s", event.id, actor.id)
        return updated

    def build_payload(self, event: Event, signature: str) -> dict[str, Any]:
        client = self._store.get_profile(event.client_id)
        crew = self._confirmed_crew(event)
        value = self._ledger.current_contract_value(event.id)
        return {
            "event_id": str(event.id),
            "client_name": _or_default(client.display_name if client else ""),
            "client_document": _or_default(client.document if client else ""),
            "client_address": _or_default(client.address if client else ""),
            "client_phone": _or_default(client.phone if client else ""),
            "show_date": event.scheduled_date.isoformat(),
            "show_time": (
                event.scheduled_time.strftime("%H:%M") if event.scheduled_time else NOT_PROVIDED
            ),
            "city": event.city,
            "show_address": _or_default(event.address),
            "duration": f"{event.duration_hours.normalize():f} horas",
            "crew": ", ".join(member.label for member in crew),
            "crew_count": len(crew),
            "contract_value": str(value.quantized()),
            "contract_value_text": format_brl(value),
            "amount_in_words": amount_in_words(value),
            "payment_terms": TERMS_WITH_SOUND if event.sound_included else TERMS_CASH,
            "signature": signature,
        }

    def _confirmed_crew(self, event: Event) -> list[CrewMember]:
        confirmed = [a for a in self._store.list_crew_assignments(event.id) if a.confirmed]
        profiles = {p.id: p for p in self._store.get_profiles([a.member_id for a in confirmed])}
        return [CrewMember(profiles[a.member_id]) for a in confirmed if a.member_id in profiles]

    def _post(self, payload: dict[str, Any]) -> None:
        if not self._webhook_url:
            logger.warning("Contract webhook is not configured")
            raise ExternalServiceError("Contract webhook")
        try:
            if self._client is not None:
                response = self._client.post(self._webhook_url, json=payload, timeout=self._timeout)
            else:
                response = httpx.post(self._webhook_url, json=payload, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Contract webhook failed: %s", exc)
            raise ExternalServiceError("Contract webhook") from exc


def _or_default(value: str) -> str:
    return value.strip() or NOT_PROVIDED
