from uuid import UUID

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.service import event_service


@api_controller("/clubs", auth=JWTAuth(), tags=["Clubs"], throttle=UserDefaultThrottle())
class ClubController(UserAwareController):
    def get_one(self, club_id: UUID) -> models.Club:
        return get_object_or_404(models.Club, pk=club_id)

    @route.get("/", url_name="list_clubs", response=list[schema.ClubSchema])
    def list_clubs(self, active: bool = True) -> QuerySet[models.Club]:
        return models.Club.objects.filter(active=active).order_by("name")

    @route.get("/{uuid:club_id}", url_name="get_club", response=schema.ClubSchema)
    def get_club(self, club_id: UUID) -> models.Club:
        return self.get_one(club_id)

    @route.get("/{uuid:club_id}/templates", url_name="list_event_templates", response=list[schema.EventTemplateSchema])
    def list_templates(self, club_id: UUID) -> QuerySet[models.EventTemplate]:
        """Saved prefills for the club's event form."""
        return event_service.list_templates(self.get_one(club_id))

    @route.post(
        "/{uuid:club_id}/templates",
        url_name="create_event_template",
        response={201: schema.EventTemplateSchema},
        throttle=WriteThrottle(),
    )
    def create_template(
        self, club_id: UUID, payload: schema.EventTemplateCreateSchema
    ) -> tuple[int, models.EventTemplate]:
        """Save a template. Requires the right to create events for the club."""
        return 201, event_service.create_template(self.get_one(club_id), self.user(), payload)

    @route.delete(
        "/{uuid:club_id}/templates/{uuid:template_id}",
        url_name="delete_event_template",
        response={204: None},
        throttle=WriteThrottle(),
    )
    def delete_template(self, club_id: UUID, template_id: UUID) -> tuple[int, None]:
        template = get_object_or_404(models.EventTemplate, pk=template_id, club_id=club_id)
        event_service.delete_template(template, self.user())
        return 204, None
