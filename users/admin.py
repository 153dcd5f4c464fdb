from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.utils.html import format_html

from .models import BalanceTransaction, Notification, User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ("username", "colored_role", "email", "balance_display", "referral_bonus", "date_joined")
    list_filter = ("role", "is_active")
    search_fields = ("username", "email", "referral_code")
    readonly_fields = ("balance", "referral_code", "referral_bonus")
    fieldsets = DjangoUserAdmin.fieldsets + (
        ("Investor", {"fields": ("role", "balance", "referral_code", "referred_by", "referral_bonus")}),
    )
    actions = ["promote_to_admin", "demote_to_user"]

    def colored_role(self, obj):
        color = {"admin": "red", "user": "green"}.get(obj.role, "black")
        return format_html("<b style='color:{};'>{}</b>", color, obj.get_role_display())
    colored_role.short_description = "Role"

    def balance_display(self, obj):
        return f"${obj.balance:,.2f}"
    balance_display.short_description = "Balance"

    # -------------------------------------------------------
    # Admin Bulk Actions
    # -------------------------------------------------------
    def promote_to_admin(self, request, queryset):
        updated = queryset.update(role="admin")
        self.message_user(request, f"{updated} user(s) promoted to admin.")

    def demote_to_user(self, request, queryset):
        updated = queryset.exclude(pk=request.user.pk).update(role="user")
        self.message_user(request, f"{updated} user(s) demoted to user.")


@admin.register(BalanceTransaction)
class BalanceTransactionAdmin(admin.ModelAdmin):
    list_display = ("user", "transaction_type", "amount", "balance_after", "investment", "created_at")
    list_filter = ("transaction_type", "created_at")
    search_fields = ("user__username", "description")

    # The ledger is append-only.
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("user", "level", "message", "read", "created_at")
    list_filter = ("level", "read")
