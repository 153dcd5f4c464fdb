import csv

from django.contrib import admin
from django.http import HttpResponse
from django.utils.html import format_html

from investments.models import AccrualPassReport, Investment
from investments.services.lifecycle import run_accrual_pass
from users.models import BalanceTransaction

# ============================================================
#  INLINE: Ledger rows linked to an investment
# ============================================================

class BalanceTransactionInline(admin.TabularInline):
    model = BalanceTransaction
    extra = 0
    can_delete = False

    readonly_fields = ("transaction_type", "amount_display", "balance_after", "description", "created_at")
    fields = ("transaction_type", "amount_display", "balance_after", "description", "created_at")
    ordering = ("-created_at",)

    def amount_display(self, obj):
        color = "green" if obj.amount > 0 else "red"
        return format_html('<span style="color:{}; font-weight:600;">${}</span>', color, f"{obj.amount:,.2f}")
    amount_display.short_description = "Amount"

    def has_add_permission(self, request, obj=None):
        return False

# ============================================================
#  INVESTMENT ADMIN
# ============================================================

@admin.register(Investment)
class InvestmentAdmin(admin.ModelAdmin):
    inlines = [BalanceTransactionInline]
    list_display = (
        "id", "owner", "plan_id", "principal_display", "current_value_display",
        "guaranteed_payout", "maturity_time", "state",
    )
    list_filter = ("state", "plan_id")
    search_fields = ("owner__username", "owner__email")
    ordering = ("-start_time",)
    actions = ["advance_selected", "export_to_csv"]

    # Investments are only ever changed by the accrual pass.
    readonly_fields = (
        "owner", "plan_id", "principal", "guaranteed_payout", "duration_days", "start_time",
        "maturity_time", "daily_accrual", "current_value", "state", "settled_at",
        "created_at", "updated_at",
    )

    def principal_display(self, obj):
        return f"${obj.principal:,.2f}"
    principal_display.short_description = "Principal"

    def current_value_display(self, obj):
        return f"${obj.current_value:,.2f}"
    current_value_display.short_description = "Current value"

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    # ----------------------------
    # Admin actions
    # ----------------------------
    def advance_selected(self, request, queryset):
        snapshots = [investment.to_snapshot() for investment in queryset]
        results = run_accrual_pass(snapshots)
        settled = sum(1 for before, after in zip(snapshots, results) if not before.is_settled and after.is_settled)
        self.message_user(request, f"Advanced {len(snapshots)} investment(s); {settled} settled.")
    advance_selected.short_description = "Advance selected investments now"

    def export_to_csv(self, request, queryset):
        response = HttpResponse(content_type="text/csv")
        response["Content-Disposition"] = "attachment; filename=investments.csv"
        writer = csv.writer(response)
        writer.writerow([
            "ID", "User ID", "Plan", "Principal", "Guaranteed Payout", "Current Value",
            "Start", "Maturity", "State",
        ])
        for obj in queryset:
            writer.writerow([
                obj.id,
                obj.owner_id,
                obj.plan_id,
                float(obj.principal),
                float(obj.guaranteed_payout),
                float(obj.current_value),
                obj.start_time,
                obj.maturity_time,
                obj.state,
            ])
        return response
    export_to_csv.short_description = "Export Selected to CSV"


@admin.register(AccrualPassReport)
class AccrualPassReportAdmin(admin.ModelAdmin):
    list_display = (
        "started_at", "trigger", "investments_processed", "investments_settled",
        "total_credited", "failures",
    )
    list_filter = ("trigger",)
    ordering = ("-started_at",)
