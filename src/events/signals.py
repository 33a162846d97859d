import structlog

from common import changes
from events.models import Event
from events.service import dashboard_service

logger = structlog.get_logger(__name__)


def connect_change_subscribers() -> None:
    """Keep cached read views in step with committed event changes."""
    changes.subscribe(changes.topic_for(Event), dashboard_service.on_event_changed)
    logger.debug("change_subscribers_connected", topics=[changes.topic_for(Event)])
