from .checkin import CheckInController, EventCheckInController
from .clubs import ClubController
from .comments import EventCommentsController
from .dashboard import DashboardController
from .details import EventDetailsController
from .discovery import EventDiscoveryController
from .venues import VenueController

# Non-event_id routes (discovery) MUST come first so they are not matched
# by the /{uuid:event_id} patterns of the other event controllers.
EVENT_CONTROLLERS: list[type] = [
    EventDiscoveryController,
    EventDetailsController,
    EventCommentsController,
    EventCheckInController,
    CheckInController,
    ClubController,
    VenueController,
    DashboardController,
]

__all__ = [
    "CheckInController",
    "ClubController",
    "DashboardController",
    "EventCheckInController",
    "EventCommentsController",
    "EventDetailsController",
    "EventDiscoveryController",
    "VenueController",
    "EVENT_CONTROLLERS",
]
