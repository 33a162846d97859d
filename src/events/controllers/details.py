from uuid import UUID

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.service import event_service, workflow

from .base import EventBaseController


@api_controller("/events", auth=JWTAuth(), tags=["Events"], throttle=UserDefaultThrottle())
class EventDetailsController(EventBaseController):
    """Retrieval, editing and the review workflow of a single event."""

    @route.get("/{uuid:event_id}", url_name="get_event", response=schema.EventDetailSchema)
    def get_event(self, event_id: UUID) -> models.Event:
        """Retrieve an event."""
        return self.get_one(event_id)

    @route.patch(
        "/{uuid:event_id}", url_name="update_event", response=schema.EventDetailSchema, throttle=WriteThrottle()
    )
    def update_event(self, event_id: UUID, payload: schema.EventEditSchema) -> models.Event:
        """Edit a draft, or an event sent back for changes. Only the creator can edit."""
        return event_service.update_event(self.get_one(event_id), self.user(), payload)

    @route.post(
        "/{uuid:event_id}/submit", url_name="submit_event", response=schema.EventDetailSchema, throttle=WriteThrottle()
    )
    def submit_event(self, event_id: UUID, expected_status: models.Event.EventStatus | None = None) -> models.Event:
        """Send the event into review.

        Fails with 409 when the venue slot is taken or the event moved on in the meantime.
        """
        return workflow.submit_event(self.get_one(event_id), self.user(), expected_status=expected_status)

    @route.post(
        "/{uuid:event_id}/review", url_name="review_event", response=schema.EventDetailSchema, throttle=WriteThrottle()
    )
    def review_event(self, event_id: UUID, payload: schema.ReviewSchema) -> models.Event:
        """Approve, reject or request changes.

        Events on the multi-level ladder accept approved and rejected only; pass `level` to
        name the level you are deciding and `role` to pick which of your roles signs.
        Pass `expected_status` to fail with 409 if someone else decided first.
        """
        event = self.get_one(event_id)
        workflow.decide(
            event,
            self.user(),
            payload.action,
            payload.comment,
            level=payload.level,
            role=payload.role,
            expected_status=payload.expected_status,
        )
        return self.get_one(event_id)

    @route.get("/{uuid:event_id}/reviews", url_name="event_reviews", response=schema.ReviewHistorySchema)
    def event_reviews(self, event_id: UUID) -> dict[str, object]:
        """Decisions taken so far and whether you can act now."""
        event = self.get_one(event_id)
        user = self.user()
        reducer = workflow.reducer_for(event)
        approvals = models.Approval.objects.filter(event=event).select_related("reviewer").order_by("created_at")
        return {
            "flow": reducer.name,
            "can_act": workflow.can_act(user, event),
            "approvals": list(approvals),
            "levels": workflow.level_overview(event, user),
        }

    @route.get("/{uuid:event_id}/levels", url_name="event_levels", response=list[schema.LevelOverviewSchema])
    def event_levels(self, event_id: UUID) -> list[dict[str, object]]:
        """The approval ladder of the event with the sign-offs collected so far."""
        event = self.get_one(event_id)
        return workflow.level_overview(event, self.user())
