from django.apps import AppConfig


class TargetsConfig(AppConfig):
    """App configuration for targets, submissions and quizzes."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "targets"
