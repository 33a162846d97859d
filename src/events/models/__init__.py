from .approval import Approval, ApprovalLevel, LevelSignoff
from .checkin import Attendance, CheckInToken, generate_check_in_token
from .club import Club
from .content import EventComment, EventTemplate
from .event import POLICY_ACK_KEYS, Event
from .venue import BlackoutDate, Venue

__all__ = [
    "POLICY_ACK_KEYS",
    "Approval",
    "ApprovalLevel",
    "Attendance",
    "BlackoutDate",
    "CheckInToken",
    "Club",
    "Event",
    "EventComment",
    "EventTemplate",
    "LevelSignoff",
    "Venue",
    "generate_check_in_token",
]
