import typing as t
from uuid import UUID

from common.controllers import UserAwareController
from events import models


class EventBaseController(UserAwareController):
    """Base controller for event endpoints.

    Provides common methods for retrieving event querysets and instances.
    Subclasses should be decorated with @api_controller to register routes.
    """

    def get_queryset(self) -> models.event.EventQuerySet:
        """Events visible to the requesting user."""
        return models.Event.objects.with_relations().for_user(self.user())

    def get_one(self, event_id: UUID) -> models.Event:
        """Wrapper helper."""
        return t.cast(models.Event, self.get_object_or_exception(self.get_queryset(), pk=event_id))
