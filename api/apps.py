from django.apps import AppConfig


class ApiConfig(AppConfig):
    """REST API v1: target, submission and admissions endpoints.

    Domain errors are translated to HTTP responses by
    `api.exceptions.target_exception_handler` (wired in settings).
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "api"
    verbose_name = "REST API"
