from uuid import UUID

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import filters, models, schema
from events.service import venue_service


@api_controller("/venues", auth=JWTAuth(), tags=["Venues"], throttle=UserDefaultThrottle())
class VenueController(UserAwareController):
    def get_one(self, venue_id: UUID) -> models.Venue:
        return get_object_or_404(models.Venue, pk=venue_id)

    @route.get("/", url_name="list_venues", response=PaginatedResponseSchema[schema.VenueSchema])
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_venues(
        self,
        params: filters.VenueFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Venue]:
        """List venues. Inactive venues are listed but cannot be booked."""
        return params.filter(models.Venue.objects.all()).order_by("name")

    @route.post("/", url_name="create_venue", response={201: schema.VenueSchema}, throttle=WriteThrottle())
    def create_venue(self, payload: schema.VenueCreateSchema) -> tuple[int, models.Venue]:
        """Create a venue. Requires venue management rights."""
        return 201, venue_service.create_venue(self.user(), payload)

    @route.get("/{uuid:venue_id}", url_name="get_venue", response=schema.VenueSchema)
    def get_venue(self, venue_id: UUID) -> models.Venue:
        return self.get_one(venue_id)

    @route.patch("/{uuid:venue_id}", url_name="update_venue", response=schema.VenueSchema, throttle=WriteThrottle())
    def update_venue(self, venue_id: UUID, payload: schema.VenueUpdateSchema) -> models.Venue:
        """Update a venue. Set active=false to stop new bookings; existing events stay."""
        return venue_service.update_venue(self.user(), self.get_one(venue_id), payload)

    @route.get(
        "/{uuid:venue_id}/conflicts", url_name="venue_conflicts", response=list[schema.VenueConflictSchema]
    )
    def venue_conflicts(
        self,
        venue_id: UUID,
        params: schema.ConflictQuerySchema = Query(...),  # type: ignore[type-arg]
    ) -> list[venue_service.VenueConflict]:
        """Bookings and blackouts overlapping [start, end).

        Windows that only touch at an endpoint do not conflict. Pass exclude_event_id when
        checking an event against its own venue.
        """
        venue = self.get_one(venue_id)
        return venue_service.find_conflicts(venue, params.start, params.end, exclude_event_id=params.exclude_event_id)

    @route.get("/{uuid:venue_id}/blackouts", url_name="list_blackouts", response=list[schema.BlackoutSchema])
    def list_blackouts(self, venue_id: UUID) -> QuerySet[models.BlackoutDate]:
        return self.get_one(venue_id).blackouts.order_by("start_date")

    @route.post(
        "/{uuid:venue_id}/blackouts",
        url_name="add_blackout",
        response={201: schema.BlackoutSchema},
        throttle=WriteThrottle(),
    )
    def add_blackout(self, venue_id: UUID, payload: schema.BlackoutCreateSchema) -> tuple[int, models.BlackoutDate]:
        """Close the venue for a range of days (inclusive)."""
        return 201, venue_service.add_blackout(self.user(), self.get_one(venue_id), payload)

    @route.delete(
        "/{uuid:venue_id}/blackouts/{uuid:blackout_id}",
        url_name="remove_blackout",
        response={204: None},
        throttle=WriteThrottle(),
    )
    def remove_blackout(self, venue_id: UUID, blackout_id: UUID) -> tuple[int, None]:
        blackout = get_object_or_404(models.BlackoutDate, pk=blackout_id, venue_id=venue_id)
        venue_service.remove_blackout(self.user(), blackout)
        return 204, None
