"""Title and body templates per notification type.

Rendered once, when the notification row is created, in the active language.
"""

import typing as t

from django.utils.translation import gettext_lazy as _

from notifications.enums import NotificationType

T = NotificationType

TEMPLATES: dict[str, tuple[t.Any, t.Any]] = {
    T.EVENT_SUBMITTED: (
        _("New event awaiting review"),
        _("%(club_name)s submitted \"%(event_title)s\" for review."),
    ),
    T.EVENT_CLUB_APPROVED: (
        _("Event approved by the club"),
        _("\"%(event_title)s\" passed club review and moves on to Student Affairs."),
    ),
    T.EVENT_SA_APPROVED: (
        _("Event approved"),
        _("\"%(event_title)s\" was approved by Student Affairs."),
    ),
    T.EVENT_LEVEL_APPROVED: (
        _("Approval level passed"),
        _("\"%(event_title)s\" passed approval level %(level)s."),
    ),
    T.EVENT_APPROVED: (
        _("Event approved"),
        _("\"%(event_title)s\" passed every approval level."),
    ),
    T.EVENT_CHANGES_REQUIRED: (
        _("Changes requested"),
        _("A reviewer asked for changes to \"%(event_title)s\"."),
    ),
    T.EVENT_REJECTED: (
        _("Event rejected"),
        _("\"%(event_title)s\" was rejected."),
    ),
    T.EVENT_REMINDER: (
        _("Upcoming event"),
        _("\"%(event_title)s\" starts at %(event_start)s."),
    ),
    T.COMMENT_ADDED: (
        _("New comment"),
        _("%(author_name)s commented on \"%(event_title)s\"."),
    ),
}


class _Default(dict[str, t.Any]):
    def __missing__(self, key: str) -> str:
        return ""


def render(notification_type: str, context: dict[str, t.Any]) -> tuple[str, str]:
    """Return ``(title, body)`` for a notification."""
    title, body = TEMPLATES[notification_type]
    text = str(body) % _Default(context)
    comment = context.get("comment")
    if comment:
        text = f"{text}\n\n{comment}"
    return str(title), text
