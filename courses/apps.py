from django.apps import AppConfig


class CoursesConfig(AppConfig):
    """App configuration for courses, teams and evaluation criteria."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "courses"

