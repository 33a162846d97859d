import typing as t

import structlog
from django.db import models

from common.models import AuditLog

logger = structlog.get_logger(__name__)


def record(
    *,
    actor: t.Any,
    instance: models.Model,
    action: str,
    before: dict[str, t.Any] | None = None,
    after: dict[str, t.Any] | None = None,
) -> AuditLog:
    """Write an audit entry for ``instance``.

    Must be called inside the transaction that performs the change so the entry
    rolls back together with it.
    """
    entry = AuditLog.objects.create(
        actor=actor if getattr(actor, "is_authenticated", False) else None,
        entity=instance._meta.db_table,
        entity_id=str(instance.pk),
        action=action,
        before=before,
        after=after,
    )
    logger.info(
        "audit_recorded",
        entity=entry.entity,
        entity_id=entry.entity_id,
        action=action,
        actor_id=str(entry.actor_id) if entry.actor_id else None,
    )
    return entry
