from django.contrib import admin

from bookings.models import (
    ActorProfile,
    CrewAssignment,
    EquipmentAllocation,
    Event,
    FinanceSummary,
    Movement,
)


class CrewAssignmentInline(admin.TabularInline):
    model = CrewAssignment
    extra = 0


class EquipmentAllocationInline(admin.TabularInline):
    model = EquipmentAllocation
    extra = 0


class MovementInline(admin.TabularInline):
    model = Movement
    extra = 0


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "client", "scheduled_date", "status"]
    list_filter = ["status", "show_type"]
    search_fields = ["title", "venue", "client__display_name"]
    inlines = [CrewAssignmentInline, EquipmentAllocationInline, MovementInline]


# Summaries are derived by the ledger; the admin only shows them.
@admin.register(FinanceSummary)
class FinanceSummaryAdmin(admin.ModelAdmin):
    list_display = ["event", "contract_value", "total_paid", "pending_balance", "payment_status"]
    list_filter = ["payment_status"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(ActorProfile)
class ActorProfileAdmin(admin.ModelAdmin):
    list_display = ["display_name", "role", "member_kind", "function", "email"]
    list_filter = ["role", "member_kind"]
    search_fields = ["display_name", "email"]


@admin.register(CrewAssignment)
class CrewAssignmentAdmin(admin.ModelAdmin):
    list_display = ["member", "event", "fee", "confirmed", "paid"]
    list_filter = ["confirmed", "paid", "event__status"]
