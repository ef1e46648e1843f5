from django.apps import AppConfig


class InsuranceConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'chs_backend.insurance'
    verbose_name = 'Insurance'
