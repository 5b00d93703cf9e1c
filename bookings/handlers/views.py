"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.conf import settings
from django.core.cache import cache
from rest_framework import serializers as drf_serializers
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.cache import finance_summary_key
from bookings.domain import Actor, EventStatus
from bookings.domain.errors import DomainError, ErrorCode
from bookings.handlers import serializers
from bookings.handlers.dependencies import Services, build_services

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.PRECONDITION_FAILED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_ALLOCATION: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EXTERNAL_SERVICE_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=ERROR_STATUS[error.code],
    )


class DomainAPIView(APIView):
    """Base view that wires services and turns domain errors into responses."""

    def initial(self, request: Request, *args, **kwargs) -> None:
        super().initial(request, *args, **kwargs)
        self.services: Services = build_services()

    @property
    def actor(self) -> Actor:
        return self.request.user.actor

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, DomainError):
            logger.info("%s %s -> %s", self.request.method, self.request.path, exc.code.value)
            return error_response(exc)
        if isinstance(exc, drf_serializers.ValidationError):
            return Response(
                {
                    "code": ErrorCode.VALIDATION_ERROR.value,
                    "message": "Invalid request body",
                    "errors": exc.detail,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        return super().handle_exception(exc)

    def parse(self, serializer_class, **kwargs):
        serializer = serializer_class(data=self.request.data, **kwargs)
        serializer.is_valid(raise_exception=True)
        return serializer


class EventListView(DomainAPIView):
    """Handler for GET|POST /api/events"""

    def get(self, request: Request) -> Response:
        events = self.services.events.list_events(self.actor)
        return Response(serializers.EventSerializer(events, many=True).data)

    def post(self, request: Request) -> Response:
        draft = self.parse(serializers.EventInputSerializer).to_draft()
        event = self.services.events.create_event(draft, self.actor)
        return Response(serializers.EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(DomainAPIView):
    """Handler for GET|PATCH /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = self.services.events.get_event(event_id, self.actor)
        return Response(serializers.EventSerializer(event).data)

    def patch(self, request: Request, event_id: str) -> Response:
        changes = self.parse(serializers.EventInputSerializer, partial=True).to_changes()
        event = self.services.events.update_event(event_id, changes, self.actor)
        return Response(serializers.EventSerializer(event).data)


class EventTransitionView(DomainAPIView):
    """Handler for POST /api/events/{event_id}/transition

    Accepting with a signature also sends the contract payload. A delivery
    failure is reported in ``contract_delivery`` and the new status stays.
    """

    def post(self, request: Request, event_id: str) -> Response:
        data = self.parse(serializers.TransitionSerializer).validated_data
        event = self.services.lifecycle.transition(event_id, data["target"], self.actor)

        delivery = None
        if event.status is EventStatus.ACCEPTED and data["signature"].strip():
            try:
                self.services.contracts.emit_acceptance(event, data["signature"])
                delivery = {"status": "sent"}
            except DomainError as exc:
                logger.warning("Contract for %s not delivered: %s", event.id, exc)
                delivery = {"status": "failed", "code": exc.code.value, "message": exc.message}

        return Response(
            {"event": serializers.EventSerializer(event).data, "contract_delivery": delivery}
        )


class BudgetView(DomainAPIView):
    """Handler for GET /api/events/{event_id}/budget"""

    def get(self, request: Request, event_id: str) -> Response:
        budget = self.services.contracts.budget(event_id, self.actor)
        return Response(serializers.BudgetSerializer(budget).data)


class FinanceSummaryView(DomainAPIView):
    """Handler for GET /api/events/{event_id}/finance-summary"""

    def get(self, request: Request, event_id: str) -> Response:
        event = self.services.ledger.authorize_finance_read(event_id, self.actor)
        key = finance_summary_key(event.id)
        data = cache.get(key)
        if data is None:
            summary = self.services.ledger.summary_for(event)
            data = dict(serializers.FinanceSummarySerializer(summary).data)
            cache.set(key, data, settings.FINANCE_SUMMARY_CACHE_SECONDS)
        return Response(data)


class ManualCostsView(DomainAPIView):
    """Handler for PUT /api/events/{event_id}/finance-summary/costs"""

    def put(self, request: Request, event_id: str) -> Response:
        data = self.parse(serializers.ManualCostsSerializer).validated_data
        summary = self.services.ledger.set_manual_costs(
            event_id, data["food"], data["transport"], data["other"], self.actor
        )
        return Response(serializers.FinanceSummarySerializer(summary).data)


class MovementListView(DomainAPIView):
    """Handler for GET|POST /api/events/{event_id}/movements"""

    def get(self, request: Request, event_id: str) -> Response:
        movements = self.services.ledger.list_movements(event_id, self.actor)
        return Response(serializers.MovementSerializer(movements, many=True).data)

    def post(self, request: Request, event_id: str) -> Response:
        data = self.parse(serializers.MovementInputSerializer).validated_data
        movement = self.services.ledger.add_movement(
            event_id, data["paid_on"], data["amount"], data["method"], self.actor
        )
        return Response(
            serializers.MovementSerializer(movement).data, status=status.HTTP_201_CREATED
        )


class MovementDetailView(DomainAPIView):
    """Handler for PUT|DELETE /api/events/{event_id}/movements/{movement_id}"""

    def put(self, request: Request, event_id: str, movement_id: str) -> Response:
        data = self.parse(serializers.MovementInputSerializer).validated_data
        movement = self.services.ledger.edit_movement(
            event_id, movement_id, data["paid_on"], data["amount"], data["method"], self.actor
        )
        return Response(serializers.MovementSerializer(movement).data)

    def delete(self, request: Request, event_id: str, movement_id: str) -> Response:
        summary = self.services.ledger.delete_movement(event_id, movement_id, self.actor)
        return Response(serializers.FinanceSummarySerializer(summary).data)


class AllocationView(DomainAPIView):
    """Handler for GET|POST /api/events/{event_id}/allocations"""

    def get(self, request: Request, event_id: str) -> Response:
        allocations = self.services.allocations.list_for_event(event_id, self.actor)
        return Response(serializers.AllocationsSerializer(allocations).data)

    def post(self, request: Request, event_id: str) -> Response:
        # Resolve the event first so a bad id is reported before the body.
        event = self.services.events.get_event(event_id, self.actor)
        assignments, allocations = self.parse(serializers.AllocationSaveSerializer).to_domain(
            event.id
        )
        saved = self.services.allocations.save(event.id, assignments, allocations, self.actor)
        return Response(serializers.AllocationsSerializer(saved).data)


class ContractSignView(DomainAPIView):
    """Handler for POST /api/events/{event_id}/contract/sign"""

    def post(self, request: Request, event_id: str) -> Response:
        data = self.parse(serializers.ContractSignSerializer).validated_data
        self.services.contracts.sign(event_id, data["signature"], self.actor)
        return Response({"status": "sent"}, status=status.HTTP_202_ACCEPTED)


class ContractRecordView(DomainAPIView):
    """Handler for PUT /api/events/{event_id}/contract"""

    def put(self, request: Request, event_id: str) -> Response:
        data = self.parse(serializers.ContractRecordSerializer).validated_data
        event = self.services.contracts.record_contract(event_id, data["contract_url"], self.actor)
        return Response(serializers.EventSerializer(event).data)


class AssignmentConfirmationView(DomainAPIView):
    """Handler for POST /api/assignments/{assignment_id}/confirmation"""

    def post(self, request: Request, assignment_id: str) -> Response:
        assignment = self.services.allocations.toggle_confirmation(assignment_id, self.actor)
        return Response(serializers.CrewAssignmentSerializer(assignment).data)


class AssignmentPaymentView(DomainAPIView):
    """Handler for POST /api/assignments/{assignment_id}/payment-received"""

    def post(self, request: Request, assignment_id: str) -> Response:
        assignment = self.services.allocations.toggle_payment_received(assignment_id, self.actor)
        return Response(serializers.CrewAssignmentSerializer(assignment).data)


class MyAssignmentsView(DomainAPIView):
    """Handler for GET /api/me/assignments"""

    def get(self, request: Request) -> Response:
        bookings = self.services.allocations.list_for_member(self.actor)
        return Response(serializers.MemberBookingSerializer(bookings, many=True).data)


class FinanceOverviewView(DomainAPIView):
    """Handler for GET /api/finance/overview"""

    def get(self, request: Request) -> Response:
        portfolio = self.services.ledger.portfolio(self.actor)
        return Response(serializers.PortfolioSerializer(portfolio).data)
