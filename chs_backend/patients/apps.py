"""
Patients App Configuration
"""

from django.apps import AppConfig


class PatientsConfig(AppConfig):
    """App configuration for patient registration and visit history."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'chs_backend.patients'
    verbose_name = 'Patients (Registry & Visits)'
