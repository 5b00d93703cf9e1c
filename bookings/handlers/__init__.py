from bookings.handlers.views import (
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

__all__ = [
    "AllocationView",
    "AssignmentConfirmationView",
    "AssignmentPaymentView",
    "BudgetView",
    "ContractRecordView",
    "ContractSignView",
    "EventDetailView",
    "EventListView",
    "EventTransitionView",
    "FinanceOverviewView",
    "FinanceSummaryView",
    "ManualCostsView",
    "MovementDetailView",
    "MovementListView",
    "MyAssignmentsView",
]
