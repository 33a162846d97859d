"""Row-change notifications.

Subscribers are told that a row of a given table changed so they can refetch or
drop cached views. Messages carry no payload beyond the table, primary key and
action, and are only sent once the surrounding transaction commits.
"""

import typing as t

import structlog
from django.apps import apps
from django.db import models, transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import Signal

logger = structlog.get_logger(__name__)

# Expected kwargs:
#   - topic: the table name of the changed row
#   - pk: primary key as a string
#   - action: "insert" | "update" | "delete"
row_changed = Signal()

Handler = t.Callable[[str, str, str], None]

TRACKED_MODELS = (
    "events.Event",
    "events.ApprovalLevel",
    "events.Approval",
    "events.Attendance",
    "events.EventComment",
    "events.Venue",
    "events.BlackoutDate",
    "accounts.RoleAssignment",
    "notifications.Notification",
)


def topic_for(model: type[models.Model] | models.Model) -> str:
    """Return the topic name used for rows of ``model``."""
    return model._meta.db_table


def publish(topic: str, pk: t.Any, action: str) -> None:
    """Schedule a change message for after the current transaction commits."""

    def _send() -> None:
        row_changed.send(sender=None, topic=topic, pk=str(pk), action=action)

    transaction.on_commit(_send)


def subscribe(topic: str, handler: Handler) -> t.Callable[[], None]:
    """Call ``handler(topic, pk, action)`` for every committed change on ``topic``.

    Returns a callable that removes the subscription. Handler errors are logged
    and never propagate to the publisher.
    """

    def _receiver(sender: t.Any, **kwargs: t.Any) -> None:
        if kwargs.get("topic") != topic:
            return
        try:
            handler(kwargs["topic"], kwargs["pk"], kwargs["action"])
        except Exception:
            logger.exception("change_subscriber_failed", topic=topic, pk=kwargs.get("pk"))

    row_changed.connect(_receiver, weak=False)

    def _unsubscribe() -> None:
        row_changed.disconnect(_receiver)

    return _unsubscribe


def _on_save(sender: type[models.Model], instance: models.Model, created: bool, **kwargs: t.Any) -> None:
    publish(topic_for(sender), instance.pk, "insert" if created else "update")


def _on_delete(sender: type[models.Model], instance: models.Model, **kwargs: t.Any) -> None:
    publish(topic_for(sender), instance.pk, "delete")


def connect_model_publishers() -> None:
    """Publish saves and deletes of the tracked models.

    Bulk ``update()`` calls bypass model signals; service code that uses them
    publishes explicitly.
    """
    for label in TRACKED_MODELS:
        model = apps.get_model(label)
        uid = f"changes:{label}"
        post_save.connect(_on_save, sender=model, dispatch_uid=f"{uid}:save")
        post_delete.connect(_on_delete, sender=model, dispatch_uid=f"{uid}:delete")
