from django.apps import AppConfig


class EventsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "events"

    def ready(self) -> None:
        """Connect signal receivers."""
        from events.signals import connect_change_subscribers

        connect_change_subscribers()
