"""
Audit services - appending entries to the audit log.

Call ``record`` inside the same ``transaction.atomic()`` block as the change
it describes, so the entry commits or rolls back together with it.
"""

import json
import uuid
from typing import TYPE_CHECKING, Any

from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError, models

from apps.core.exceptions import PersistenceFaultError
from apps.core.logging import get_contextvars, get_logger
from apps.core.utils import normalize_ip
from apps.events.models import AuditLog

if TYPE_CHECKING:
    from apps.accounts.models import User

logger = get_logger(__name__)


def get_correlation_id() -> uuid.UUID | None:
    """Correlation ID bound for the current request or job, if any."""
    value = get_contextvars().get("correlation_id")
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def get_origin() -> str | None:
    """Client IP bound for the current request or job, if any."""
    return normalize_ip(get_contextvars().get("request.ip_address"))


def record(
    action: str,
    entity_type: str,
    entity_id: Any = None,
    *,
    actor: "User | None" = None,
    old_value: dict[str, Any] | None = None,
    new_value: dict[str, Any] | None = None,
    origin: str | None = None,
) -> AuditLog:
    """
    Append exactly one audit entry.

    Args:
        action: Dotted action name, e.g. 'payment.recorded'
        entity_type: Kind of entity affected, e.g. 'invoice'
        entity_id: Primary key of the affected entity
        actor: User who performed the action (None for system jobs)
        old_value: Snapshot before the change
        new_value: Snapshot after the change
        origin: Client IP; defaults to the address bound for the request

    Raises:
        PersistenceFaultError: The store rejected the write.
    """
    try:
        entry = AuditLog.objects.create(
            actor=actor,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            old_value=old_value,
            new_value=new_value,
            origin=normalize_ip(origin) if origin is not None else get_origin(),
            correlation_id=get_correlation_id(),
        )
    except DatabaseError as e:
        logger.error(
            "audit_write_failed",
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            error=str(e),
        )
        raise PersistenceFaultError("Failed to write audit log entry") from e

    logger.debug(
        "audit_recorded",
        action=action,
        entity_type=entity_type,
        entity_id=entry.entity_id,
        actor_id=actor.pk if actor else None,
    )
    return entry


def snapshot(instance: models.Model, fields: list[str] | tuple[str, ...]) -> dict[str, Any]:
    """
    JSON-safe view of selected fields of a model instance.

    Foreign keys are captured by id, Decimals as strings and dates in ISO
    format, which is how they read back from the audit log.
    """
    data: dict[str, Any] = {}
    for name in fields:
        field = instance._meta.get_field(name)
        if field.is_relation and field.many_to_one:
            data[f"{name}_id"] = getattr(instance, field.attname)
        else:
            data[name] = getattr(instance, name)
    return json.loads(json.dumps(data, cls=DjangoJSONEncoder))
