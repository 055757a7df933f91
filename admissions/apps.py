from django.apps import AppConfig


class AdmissionsConfig(AppConfig):
    """App configuration for batch applications and admissions analytics."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "admissions"
