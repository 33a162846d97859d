import typing as t

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.throttling import UserDefaultThrottle, WriteThrottle
from events import filters, models, schema
from events.service import dashboard_service, event_service, workflow

from .base import EventBaseController


@api_controller("/events", auth=JWTAuth(), tags=["Events"], throttle=UserDefaultThrottle())
class EventDiscoveryController(EventBaseController):
    """Listing, creation and the other routes that take no event id.

    Registered before the /{uuid:event_id} controllers.
    """

    @route.get("/", url_name="list_events", response=PaginatedResponseSchema[schema.EventInListSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_events(
        self,
        params: filters.EventFilterSchema = Query(...),  # type: ignore[type-arg]
        mine: bool = False,
        order_by: t.Literal["start", "-start", "-created_at"] = "start",
    ) -> QuerySet[models.Event]:
        """Browse events visible to the current user.

        Approved events are visible to everyone; drafts only to their creator and club officers;
        anything past draft also to reviewers. Set mine=true to list only events you created.
        """
        qs = params.filter(self.get_queryset())
        if mine:
            qs = qs.filter(created_by=self.user())
        return qs.order_by(order_by, "id")

    @route.post(
        "/",
        url_name="create_event",
        response={201: schema.EventDetailSchema},
        throttle=WriteThrottle(),
    )
    def create_event(self, payload: schema.EventCreateSchema) -> tuple[int, models.Event]:
        """Create an event for one of your clubs.

        The event starts as a draft unless submit=true, in which case it goes straight into review.
        Both policy acknowledgements are required, the expected attendance must fit the venue
        and the window must fall inside the venue's operating hours.
        """
        club = get_object_or_404(models.Club, pk=payload.club_id)
        return 201, event_service.create_event(club, self.user(), payload)

    @route.get("/review-queue", url_name="review_queue", response=list[schema.EventInListSchema])
    def review_queue(self) -> list[models.Event]:
        """Events waiting for a decision you are allowed to make, soonest first."""
        return workflow.pending_reviews_for(self.user())

    @route.get("/calendar", url_name="calendar_events", response=list[schema.EventInListSchema])
    def calendar_events(
        self,
        params: schema.CalendarQuerySchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Event]:
        """Approved events overlapping the [start, end) window, optionally for one venue or club."""
        return dashboard_service.calendar(params.start, params.end, venue_id=params.venue_id, club_id=params.club_id)
