from django.urls import path

from bookings.handlers import (
    AllocationView,
    AssignmentConfirmationView,
    AssignmentPaymentView,
    BudgetView,
    ContractRecordView,
    ContractSignView,
    EventDetailView,
    EventListView,
    EventTransitionView,
    FinanceOverviewView,
    FinanceSummaryView,
    ManualCostsView,
    MovementDetailView,
    MovementListView,
    MyAssignmentsView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/transition",
        EventTransitionView.as_view(),
        name="event-transition",
    ),
    path("events/<str:event_id>/budget", BudgetView.as_view(), name="event-budget"),
    path(
        "events/<str:event_id>/finance-summary",
        FinanceSummaryView.as_view(),
        name="finance-summary",
    ),
    path(
        "events/<str:event_id>/finance-summary/costs",
        ManualCostsView.as_view(),
        name="manual-costs",
    ),
    path(
        "events/<str:event_id>/movements",
        MovementListView.as_view(),
        name="movement-list",
    ),
    path(
        "events/<str:event_id>/movements/<str:movement_id>",
        MovementDetailView.as_view(),
        name="movement-detail",
    ),
    path(
        "events/<str:event_id>/allocations",
        AllocationView.as_view(),
        name="allocations",
    ),
    path(
        "events/<str:event_id>/contract/sign",
        ContractSignView.as_view(),
        name="contract-sign",
    ),
    path("events/<str:event_id>/contract", ContractRecordView.as_view(), name="contract"),
    path(
        "assignments/<str:assignment_id>/confirmation",
        AssignmentConfirmationView.as_view(),
        name="assignment-confirmation",
    ),
    path(
        "assignments/<str:assignment_id>/payment-received",
        AssignmentPaymentView.as_view(),
        name="assignment-payment",
    ),
    path("me/assignments", MyAssignmentsView.as_view(), name="my-assignments"),
    path("finance/overview", FinanceOverviewView.as_view(), name="finance-overview"),
]
