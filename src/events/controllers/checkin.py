from uuid import UUID

from django.db.models import QuerySet
from django.utils.translation import gettext_lazy as _
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.authentication import OptionalAuth
from common.controllers import UserAwareController
from common.throttling import AnonDefaultThrottle, CheckInThrottle, UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.exceptions import AuthorizationError
from events.service import checkin_service

from .base import EventBaseController


@api_controller("/events", auth=JWTAuth(), tags=["Check-in"], throttle=UserDefaultThrottle())
class EventCheckInController(EventBaseController):
    """Organiser side of check-in: codes and attendance."""

    @route.post(
        "/{uuid:event_id}/check-in-tokens",
        url_name="issue_check_in_token",
        response={201: schema.CheckInTokenSchema},
        throttle=WriteThrottle(),
    )
    def issue_token(self, event_id: UUID) -> tuple[int, models.CheckInToken]:
        """Issue a new check-in code. Earlier codes keep working until they expire."""
        return 201, checkin_service.issue_token(self.get_one(event_id), self.user())

    @route.get(
        "/{uuid:event_id}/check-in-tokens/current",
        url_name="current_check_in_token",
        response={200: schema.CheckInTokenSchema, 204: None},
    )
    def current_token(self, event_id: UUID) -> tuple[int, models.CheckInToken | None]:
        """The newest unexpired check-in code, or 204 when there is none."""
        event = self.get_one(event_id)
        if not checkin_service.is_organiser(self.user(), event):
            raise AuthorizationError(_("Only the organisers of this event can see its check-in code."))
        token = checkin_service.current_token(event)
        if token is None:
            return 204, None
        return 200, token

    @route.get(
        "/{uuid:event_id}/attendance",
        url_name="list_attendance",
        response=PaginatedResponseSchema[schema.AttendanceSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=100)
    def list_attendance(self, event_id: UUID) -> QuerySet[models.Attendance]:
        """Everyone checked in so far."""
        return checkin_service.list_attendance(self.get_one(event_id), self.user())

    @route.get(
        "/{uuid:event_id}/attendance/summary",
        url_name="attendance_summary",
        response=schema.AttendanceSummarySchema,
    )
    def attendance_summary(self, event_id: UUID) -> dict[str, object]:
        """Member and guest counts against the expected attendance."""
        event = self.get_one(event_id)
        return {"event_id": event.pk, **checkin_service.attendance_summary(event, self.user())}


@api_controller(
    "/check-in",
    auth=OptionalAuth(),
    tags=["Check-in"],
    throttle=[AnonDefaultThrottle(), CheckInThrottle()],
)
class CheckInController(UserAwareController):
    """Attendee side of check-in. Guests may check in without an account."""

    @route.post(
        "/",
        url_name="check_in",
        response={200: schema.CheckInResponseSchema, 201: schema.CheckInResponseSchema},
    )
    def check_in(self, payload: schema.CheckInRequestSchema) -> tuple[int, dict[str, object]]:
        """Check in with a scanned code.

        Signed-in members are recorded once per event; repeating returns the existing record
        with created=false. Guests without an account must give a guest_label.
        """
        user = self.maybe_user()
        if user.is_authenticated:
            attendance, created = checkin_service.check_in(payload.token, user=self.user())
        else:
            attendance, created = checkin_service.check_in(payload.token, guest_label=payload.guest_label)
        return (201 if created else 200), {"attendance": attendance, "created": created}

    @route.get("/{token}", url_name="validate_check_in_token", response=schema.EventInListSchema)
    def validate_token(self, token: str) -> models.Event:
        """Show which event a code belongs to before checking in."""
        return checkin_service.validate_token(token)
