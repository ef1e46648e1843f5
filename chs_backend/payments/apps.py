"""
Payments App Configuration
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """App configuration for cash, M-Pesa and insurance payment records."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'chs_backend.payments'
    verbose_name = 'Payments (Cash, M-Pesa, Insurance)'
