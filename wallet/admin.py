from django.contrib import admin, messages
from django.utils.html import format_html

from .exceptions import WalletError
from .models import WalletTransaction
from .services import review_transaction


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = ("user_link", "type", "amount_display", "currency", "status", "reviewed_by", "created_at")
    list_filter = ("type", "status", "currency", "created_at")
    search_fields = ("user__username", "wallet_address")
    ordering = ("-created_at",)
    readonly_fields = ("user", "type", "amount", "currency", "wallet_address", "status", "reviewed_by", "created_at", "updated_at")
    actions = ["approve_transactions", "reject_transactions"]

    def user_link(self, obj):
        return f"{obj.user.username} ({obj.user.role})"
    user_link.short_description = "User"

    def amount_display(self, obj):
        color = "green" if obj.type == "deposit" else "red"
        return format_html('<span style="color:{}; font-weight:600;">${}</span>', color, f"{obj.amount:,.2f}")
    amount_display.short_description = "Amount"

    def has_add_permission(self, request):
        return False

    def _review(self, request, queryset, approve):
        done = 0
        for tx in queryset.filter(status="pending"):
            try:
                review_transaction(tx.pk, request.user, approve=approve)
                done += 1
            except WalletError as e:
                self.message_user(request, f"{tx}: {e.message}", level=messages.ERROR)
        return done

    def approve_transactions(self, request, queryset):
        done = self._review(request, queryset, approve=True)
        self.message_user(request, f"{done} transaction(s) approved.")
    approve_transactions.short_description = "Approve selected transactions"

    def reject_transactions(self, request, queryset):
        done = self._review(request, queryset, approve=False)
        self.message_user(request, f"{done} transaction(s) rejected.")
    reject_transactions.short_description = "Reject selected transactions"
