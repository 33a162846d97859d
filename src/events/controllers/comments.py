from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.service import event_service

from .base import EventBaseController


@api_controller("/events", auth=JWTAuth(), tags=["Event Comments"], throttle=UserDefaultThrottle())
class EventCommentsController(EventBaseController):
    @route.get(
        "/{uuid:event_id}/comments",
        url_name="list_event_comments",
        response=PaginatedResponseSchema[schema.CommentSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_comments(self, event_id: UUID) -> QuerySet[models.EventComment]:
        """Comments on an event, oldest first."""
        return event_service.list_comments(self.get_one(event_id))

    @route.post(
        "/{uuid:event_id}/comments",
        url_name="add_event_comment",
        response={201: schema.CommentSchema},
        throttle=WriteThrottle(),
    )
    def add_comment(self, event_id: UUID, payload: schema.CommentCreateSchema) -> tuple[int, models.EventComment]:
        """Comment on an event. The creator is notified."""
        return 201, event_service.add_comment(self.get_one(event_id), self.user(), payload.body)
