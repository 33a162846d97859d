from django.apps import AppConfig


class CommonConfig(AppConfig):
    """Configuration for the common app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "common"

    def ready(self) -> None:
        """Connect the row-change publishers once all models are loaded."""
        from common import changes

        changes.connect_model_publishers()
