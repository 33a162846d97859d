from .engine import (
    approve_level,
    can_act,
    can_act_on_level,
    decide,
    level_overview,
    pending_reviews_for,
    reducer_for,
    reject_level,
    review_event,
    submit_event,
)
from .multilevel import current_level, materialize_levels
from .policy import APPROVAL_POLICY, LevelPolicy
from .states import (
    APPROVED_STATUSES,
    EDITABLE_STATUSES,
    is_approved_status,
    is_editable_status,
    is_terminal_status,
    is_under_review_status,
)

__all__ = [
    "APPROVAL_POLICY",
    "APPROVED_STATUSES",
    "EDITABLE_STATUSES",
    "LevelPolicy",
    "approve_level",
    "can_act",
    "can_act_on_level",
    "current_level",
    "decide",
    "is_approved_status",
    "is_editable_status",
    "is_terminal_status",
    "is_under_review_status",
    "level_overview",
    "materialize_levels",
    "pending_reviews_for",
    "reducer_for",
    "reject_level",
    "review_event",
    "submit_event",
]
