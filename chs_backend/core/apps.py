"""
Core App Configuration
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """App configuration for users, roles, auditing and the authorization gate."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'chs_backend.core'
    verbose_name = 'Core (Users & Roles)'
