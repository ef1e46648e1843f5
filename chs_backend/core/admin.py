"""
Community Health Service - admin registrations for users, roles and the audit log.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.utils.html import format_html
from django.utils.safestring import mark_safe

from .models import AuditLog, Role, User


admin.site.site_header = "Community Health Service"
admin.site.site_title = "CHS Admin"
admin.site.index_title = "Clinic administration"


ROLE_COLORS = {
    Role.ADMIN: "#EA4335",
    Role.DOCTOR: "#1A73E8",
    Role.NURSE: "#34A853",
    Role.COMMUNITY_WORKER: "#FBBC05",
}


def _role_badge(role_name):
    if not role_name:
        return mark_safe('<span style="color: #9AA0A6; font-style: italic;">No role</span>')
    return format_html(
        '<span style="background-color: {}; color: white; padding: 2px 8px; border-radius: 4px;">{}</span>',
        ROLE_COLORS.get(role_name, "#5F6368"), role_name,
    )


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name", "label", "user_count")
    search_fields = ("name", "label")
    ordering = ("name",)

    def user_count(self, obj):
        return obj.users.count()
    user_count.short_description = "Users"


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """User admin with role badge and professional details."""

    list_display = (
        "username",
        "full_name_display",
        "email",
        "role_badge",
        "license_number",
        "is_active",
    )
    list_filter = ("role", "is_staff", "is_active", "is_superuser")
    search_fields = ("username", "email", "first_name", "last_name", "license_number")
    ordering = ("username",)
    list_per_page = 50

    fieldsets = (
        ("Authentication", {
            "fields": ("username", "password")
        }),
        ("Personal data", {
            "fields": ("first_name", "last_name", "email", "phone_number", "role")
        }),
        ("Professional", {
            "fields": ("license_number", "specialization")
        }),
        ("Permissions", {
            "fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions"),
            "classes": ("collapse",)
        }),
        ("Timestamps", {
            "fields": ("last_login", "date_joined"),
            "classes": ("collapse",)
        }),
    )

    add_fieldsets = (
        ("New user", {
            "classes": ("wide",),
            "fields": ("username", "password1", "password2", "email", "role", "first_name", "last_name"),
        }),
    )

    readonly_fields = ("last_login", "date_joined")

    def full_name_display(self, obj):
        full_name = obj.get_full_name()
        if full_name.strip():
            return format_html('<strong>{}</strong>', full_name)
        return mark_safe('<span style="color: #9AA0A6; font-style: italic;">No name</span>')
    full_name_display.short_description = "Name"

    def role_badge(self, obj):
        return _role_badge(obj.role_name)
    role_badge.short_description = "Role"


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Audit log admin (read-only)."""

    list_display = ("id", "timestamp", "user", "role_badge", "action", "patient_id")
    list_filter = ("action", "role_name", "timestamp")
    search_fields = ("user__username", "action", "patient_id")
    ordering = ("-timestamp", "-id")
    list_per_page = 100
    date_hierarchy = "timestamp"

    readonly_fields = ("id", "user", "role_name", "action", "patient_id", "timestamp", "meta")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return request.user.is_superuser

    def role_badge(self, obj):
        return _role_badge(obj.role_name)
    role_badge.short_description = "Role"
