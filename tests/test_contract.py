"""Tests for the budget view and the contract webhook.

The webhook is served by an httpx.MockTransport.
Run with: pytest tests/test_contract.py -v
"""

import json

import httpx
import pytest

from bookings.domain import (
    ActorId,
    CrewAssignment,
    EquipmentAllocation,
    EquipmentId,
    EventStatus,
    Money,
)
from bookings.domain.errors import (
    ExternalServiceError,
    PreconditionFailedError,
    UnauthorizedError,
    ValidationError,
)
from bookings.services import ContractService

WEBHOOK = "https://contracts.example/hook"


class Recorder:
    """Collects webhook requests and answers with a fixed status."""

    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.payloads: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.payloads.append(json.loads(request.content))
        return httpx.Response(self.status_code, json={"ok": self.status_code < 400})


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def webhook_contracts(store, ledger, recorder) -> ContractService:
    client = httpx.Client(transport=httpx.MockTransport(recorder))
    return ContractService(store, ledger, webhook_url=WEBHOOK, client=client)


@pytest.fixture
def priced(make_event, registry, ledger, admin):
    """Build an event in the given status worth R$ 1.400,00."""

    def _priced(status: EventStatus):
        event = make_event(status)
        registry.save(
            event.id,
            [
                CrewAssignment(
                    event_id=event.id, member_id=ActorId("member-1"), fee=Money.of(500), confirmed=True
                ),
                CrewAssignment(
                    event_id=event.id, member_id=ActorId("member-2"), fee=Money.of(500), confirmed=True
                ),
            ],
            [
                EquipmentAllocation(
                    event_id=event.id, equipment_id=EquipmentId("PA-01"), value=Money.of(300)
                )
            ],
            admin,
        )
        ledger.set_manual_costs(event.id, 100, 0, 0, admin)
        return event

    return _priced


class TestBudget:
    """Tests for the client budget view."""

    def test_budget_visible_once_issued(self, contracts, priced, client_actor):
        """The owner sees crew make-up, equipment and value."""
        event = priced(EventStatus.BUDGET_ISSUED)
        budget = contracts.budget(event.id, client_actor)
        assert budget.musicians == ("Guitarist",)
        assert budget.dancers == 1
        assert budget.equipment == ("PA-01",)
        assert budget.contract_value == Money.of(1400)

    def test_budget_hidden_before_issue(self, contracts, priced, client_actor):
        """Before BudgetIssued the client cannot see the budget."""
        event = priced(EventStatus.UNDER_REVIEW)
        with pytest.raises(UnauthorizedError):
            contracts.budget(event.id, client_actor)


class TestContractWebhook:
    """Tests for contract emission."""

    def test_sign_posts_payload(self, webhook_contracts, priced, client_actor, recorder):
        """Signing an accepted show sends the contract payload."""
        event = priced(EventStatus.ACCEPTED)

        webhook_contracts.sign(event.id, "Carla Cliente", client_actor)

        assert len(recorder.payloads) == 1
        payload = recorder.payloads[0]
        assert payload["event_id"] == str(event.id)
        assert payload["client_name"] == "Carla Cliente"
        assert payload["client_document"] == "123.456.789-00"
        assert payload["city"] == "Campinas"
        assert payload["show_time"] == "Não informado"
        assert payload["duration"] == "4 horas"
        assert payload["crew_count"] == 2
        assert set(payload["crew"].split(", ")) == {"Marcos (Guitarist)", "Dora"}
        assert payload["contract_value"] == "1400.00"
        assert payload["contract_value_text"] == "R$ 1.400,00"
        assert payload["amount_in_words"] == "Mil e quatrocentos reais"
        assert payload["signature"] == "Carla Cliente"

    def test_webhook_failure_is_external_error(self, store, ledger, priced, client_actor):
        """A 5xx answer surfaces as ExternalServiceError."""
        event = priced(EventStatus.ACCEPTED)
        client = httpx.Client(transport=httpx.MockTransport(Recorder(status_code=503)))
        service = ContractService(store, ledger, webhook_url=WEBHOOK, client=client)
        with pytest.raises(ExternalServiceError):
            service.sign(event.id, "Carla", client_actor)

    def test_unconfigured_webhook_is_external_error(self, store, ledger, priced, client_actor):
        """Without a URL nothing is sent."""
        event = priced(EventStatus.ACCEPTED)
        with pytest.raises(ExternalServiceError):
            ContractService(store, ledger).sign(event.id, "Carla", client_actor)

    def test_sign_requires_accepted(self, webhook_contracts, priced, client_actor, recorder):
        """A client cannot sign before accepting."""
        event = priced(EventStatus.BUDGET_ISSUED)
        with pytest.raises(UnauthorizedError):
            webhook_contracts.sign(event.id, "Carla", client_actor)
        assert recorder.payloads == []

    def test_sign_requires_signature(self, webhook_contracts, priced, client_actor):
        """A blank signature is rejected."""
        event = priced(EventStatus.ACCEPTED)
        with pytest.raises(ValidationError):
            webhook_contracts.sign(event.id, "  ", client_actor)

    def test_recorded_contract_blocks_signing(
        self, webhook_contracts, priced, admin, client_actor, recorder
    ):
        """Once a PDF link is on file the show cannot be signed again."""
        event = priced(EventStatus.ACCEPTED)
        updated = webhook_contracts.record_contract(
            event.id, "https://files.example/contract.pdf", admin
        )
        assert updated.contract_url == "https://files.example/contract.pdf"
        with pytest.raises(PreconditionFailedError):
            webhook_contracts.sign(event.id, "Carla", client_actor)
        assert recorder.payloads == []

    def test_only_admin_records_contract(self, webhook_contracts, priced, client_actor):
        """Clients cannot attach contract links."""
        event = priced(EventStatus.ACCEPTED)
        with pytest.raises(UnauthorizedError):
            webhook_contracts.record_contract(event.id, "https://x.example/c.pdf", client_actor)
