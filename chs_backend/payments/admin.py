"""
Payments App - admin for payment records.

Status changes normally come from the payment flows. Refunds are the one
administrative transition and are only available as an admin action.
"""

from django.contrib import admin, messages
from django.utils.html import format_html

from chs_backend.core.exceptions import InvalidState
from chs_backend.payments.models import Payment


STATUS_COLORS = {
    Payment.STATUS_PENDING: "#FBBC05",
    Payment.STATUS_COMPLETED: "#34A853",
    Payment.STATUS_FAILED: "#EA4335",
    Payment.STATUS_REFUNDED: "#5F6368",
}


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "patient",
        "amount",
        "payment_method",
        "status_badge",
        "transaction_id",
        "created_at",
    )
    list_filter = ("status", "payment_method", "claim_status")
    search_fields = ("transaction_id", "mpesa_receipt_number", "claim_number", "patient__name")
    ordering = ("-created_at",)
    list_per_page = 50
    date_hierarchy = "created_at"
    list_select_related = ("patient",)
    actions = ["mark_refunded"]

    readonly_fields = (
        "id",
        "patient",
        "amount",
        "payment_method",
        "transaction_id",
        "status",
        "phone_number",
        "mpesa_receipt_number",
        "merchant_request_id",
        "result_description",
        "claim_provider",
        "claim_number",
        "claim_approved_amount",
        "claim_status",
        "recorded_by",
        "created_at",
        "updated_at",
    )

    fieldsets = (
        ("Payment", {
            "fields": ("id", "patient", "amount", "payment_method", "transaction_id", "status", "description")
        }),
        ("M-Pesa", {
            "fields": ("phone_number", "mpesa_receipt_number", "merchant_request_id", "result_description"),
            "classes": ("collapse",)
        }),
        ("Insurance claim", {
            "fields": ("claim_provider", "claim_number", "claim_approved_amount", "claim_status"),
            "classes": ("collapse",)
        }),
        ("System", {
            "fields": ("recorded_by", "created_at", "updated_at"),
            "classes": ("collapse",)
        }),
    )

    def has_add_permission(self, request):
        return False

    def status_badge(self, obj):
        return format_html(
            '<span style="background-color: {}; color: white; padding: 2px 8px; border-radius: 4px;">{}</span>',
            STATUS_COLORS.get(obj.status, "#5F6368"), obj.get_status_display(),
        )
    status_badge.short_description = "Status"

    @admin.action(description="Mark selected payments refunded")
    def mark_refunded(self, request, queryset):
        refunded = 0
        for payment in queryset:
            try:
                if payment.refund():
                    refunded += 1
            except InvalidState as exc:
                self.message_user(request, exc.message, level=messages.WARNING)
        if refunded:
            self.message_user(request, f"{refunded} payment(s) marked refunded.", level=messages.SUCCESS)
