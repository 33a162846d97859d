"""Event status groups.

Callers ask these predicates instead of comparing status strings.
"""

from events.models import Event

Status = Event.EventStatus

EDITABLE_STATUSES = frozenset({Status.DRAFT, Status.CHANGES_REQUIRED})
SUBMITTABLE_STATUSES = EDITABLE_STATUSES
UNDER_REVIEW_STATUSES = frozenset({Status.SUBMITTED, Status.IN_REVIEW, Status.CLUB_APPROVED})
APPROVED_STATUSES = frozenset({Status.APPROVED, Status.SA_APPROVED})
TERMINAL_STATUSES = APPROVED_STATUSES | {Status.REJECTED}


def is_editable_status(status: str) -> bool:
    """Whether the creator may change the event's content."""
    return status in EDITABLE_STATUSES


def is_under_review_status(status: str) -> bool:
    return status in UNDER_REVIEW_STATUSES


def is_approved_status(status: str) -> bool:
    """Either success terminal: multi-level ``approved`` or two-stage ``sa_approved``."""
    return status in APPROVED_STATUSES


def is_terminal_status(status: str) -> bool:
    return status in TERMINAL_STATUSES
