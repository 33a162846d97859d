"""QR check-in: token issuance and attendance recording."""

from datetime import timedelta

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, Q, QuerySet
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from accounts.models import ClubUser
from accounts.roles import ExportScope, capabilities_for
from events.exceptions import AuthorizationError, PreconditionError, TokenInvalidError
from events.models import Attendance, CheckInToken, Event
from events.service.workflow import is_approved_status

logger = structlog.get_logger(__name__)


def is_organiser(user: ClubUser, event: Event) -> bool:
    return event.created_by_id == user.pk or capabilities_for(user).can_create(event.club_id)


def issue_token(event: Event, issuer: ClubUser) -> CheckInToken:
    """Issue a fresh check-in token for an approved event.

    Earlier tokens stay valid until they expire. Tokens expire a grace period
    after the event ends.
    """
    if not is_organiser(issuer, event):
        raise AuthorizationError(_("Only the organisers of this event can issue check-in codes."))
    if not is_approved_status(event.status):
        raise PreconditionError(_("Check-in codes can only be issued for approved events."))

    expires_at = event.end + timedelta(minutes=settings.CHECK_IN_GRACE_PERIOD_MINUTES)
    if expires_at <= timezone.now():
        raise PreconditionError(_("This event has already ended."))

    token = CheckInToken.objects.create(event=event, issued_by=issuer, expires_at=expires_at)
    logger.info(
        "check_in_token_issued",
        event_id=str(event.pk),
        token_id=str(token.pk),
        issuer_id=str(issuer.pk),
        expires_at=expires_at.isoformat(),
    )
    return token


def current_token(event: Event) -> CheckInToken | None:
    """The newest token of ``event`` that has not expired."""
    return CheckInToken.objects.live().filter(event=event).order_by("-created_at").first()


def _resolve(token: str) -> CheckInToken:
    found = CheckInToken.objects.select_related("event").filter(token=token).first()
    if found is None:
        raise TokenInvalidError(_("This check-in code is not valid."))
    if found.is_expired():
        logger.info("check_in_token_expired", token_id=str(found.pk), event_id=str(found.event_id))
        raise TokenInvalidError(_("This check-in code has expired."))
    if not is_approved_status(found.event.status):
        raise PreconditionError(_("This event is not open for check-in."))
    return found


def validate_token(token: str) -> Event:
    """Return the event a token belongs to.

    Raises:
        TokenInvalidError: unknown or expired token.
        PreconditionError: the event is not approved.
    """
    return _resolve(token).event


def member_attendance(event: Event, user: ClubUser) -> Attendance | None:
    return Attendance.objects.filter(event=event, user=user).first()


def check_in(
    token: str, user: ClubUser | None = None, guest_label: str | None = None
) -> tuple[Attendance, bool]:
    """Record attendance through a check-in token.

    Members are recorded once per event: a repeated check-in returns the
    existing record and ``False``. Guests are recorded every time.
    """
    check_in_token = _resolve(token)
    event = check_in_token.event

    if user is None:
        if not guest_label:
            raise ValidationError({"guest_label": [_("Guests must give a name to check in.")]})
        attendance = Attendance.objects.create(event=event, guest_label=guest_label, token=check_in_token)
        logger.info("guest_checked_in", event_id=str(event.pk), attendance_id=str(attendance.pk))
        return attendance, True

    existing = member_attendance(event, user)
    if existing is not None:
        logger.info("already_checked_in", event_id=str(event.pk), user_id=str(user.pk))
        return existing, False

    try:
        with transaction.atomic():
            attendance = Attendance.objects.create(event=event, user=user, token=check_in_token)
    except IntegrityError:
        # A concurrent check-in of the same member won the insert.
        logger.info("already_checked_in", event_id=str(event.pk), user_id=str(user.pk))
        return Attendance.objects.get(event=event, user=user), False

    logger.info("member_checked_in", event_id=str(event.pk), user_id=str(user.pk), attendance_id=str(attendance.pk))
    return attendance, True


def list_attendance(event: Event, viewer: ClubUser) -> QuerySet[Attendance]:
    """Check-ins of ``event``, visible to its organisers and attendance exporters."""
    if not (is_organiser(viewer, event) or capabilities_for(viewer).can_export_attendance(ExportScope.PROJECT)):
        raise AuthorizationError(_("You cannot view the attendance of this event."))
    return Attendance.objects.filter(event=event).select_related("user").order_by("checked_in_at")


def attendance_summary(event: Event, viewer: ClubUser) -> dict[str, int]:
    """Member and guest check-in counts for an event."""
    if not capabilities_for(viewer).can_export_attendance(ExportScope.PROJECT):
        raise AuthorizationError(_("You cannot export attendance."))
    counts = Attendance.objects.filter(event=event).aggregate(
        members=Count("id", filter=Q(user__isnull=False)),
        guests=Count("id", filter=Q(user__isnull=True)),
    )
    return {
        "members": counts["members"],
        "guests": counts["guests"],
        "total": counts["members"] + counts["guests"],
        "expected_attendees": event.expected_attendees,
    }
