from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """User profiles carrying the student/coach role."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"
    verbose_name = "Accounts"

    def ready(self) -> None:  # pragma: no cover (import-time hook)
        # Every new user gets a student profile; see accounts.signals
        from . import signals  # noqa: F401
