"""
Patients App - admin for the patient registry.
"""

from django.contrib import admin
from django.utils.html import format_html

from chs_backend.patients.models import Patient, Visit


class VisitInline(admin.TabularInline):
    """Visits are append-only: shown read-only under the patient."""

    model = Visit
    extra = 0
    can_delete = False
    readonly_fields = ("date", "purpose", "diagnosis", "treatment", "cost", "attended_by")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "age",
        "gender",
        "phone_number",
        "insurance_badge",
        "status",
        "created_at",
    )
    list_filter = ("status", "insurance_provider", "insurance_status", "gender")
    search_fields = ("name", "national_id", "phone_number")
    ordering = ("-created_at",)
    list_per_page = 50
    inlines = [VisitInline]

    readonly_fields = ("id", "created_at", "updated_at")

    fieldsets = (
        ("Patient", {
            "fields": ("name", "age", "gender", "phone_number", "national_id", "address", "status")
        }),
        ("Clinical", {
            "fields": ("condition", "symptoms", "diagnosis", "medical_history", "current_medication")
        }),
        ("Insurance", {
            "fields": ("insurance_provider", "insurance_number", "insurance_status")
        }),
        ("System", {
            "fields": ("id", "assigned_worker", "created_at", "updated_at"),
            "classes": ("collapse",)
        }),
    )

    def insurance_badge(self, obj):
        color = "#34A853" if obj.has_active_insurance else "#9AA0A6"
        return format_html(
            '<span style="color: {}; font-weight: 500;">{} ({})</span>',
            color, obj.insurance_provider, obj.insurance_status,
        )
    insurance_badge.short_description = "Insurance"
