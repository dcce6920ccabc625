"""
Audit log model.

Entries are append-only: once written they are never updated or deleted,
neither through the instance nor through queryset bulk operations.
"""

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from apps.core.exceptions import InvalidStateError


class AuditLogQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise InvalidStateError("Audit log entries are immutable")

    def delete(self):
        raise InvalidStateError("Audit log entries cannot be deleted")


class AuditLog(models.Model):
    """
    Permanent record of a state-changing operation.

    ``old_value``/``new_value`` hold JSON snapshots of the entity before and
    after the change. ``origin`` is the client address of the request that
    caused it, ``correlation_id`` ties entries of one request together.
    """

    id = models.BigAutoField(primary_key=True)

    # Who did it
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )

    # What happened
    action = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Action type, e.g. 'invoice.generated'",
    )
    entity_type = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=100, null=True, blank=True)

    # Changes
    old_value = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    new_value = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)

    # Context
    origin = models.GenericIPAddressField(
        null=True,
        blank=True,
        help_text="Client IP address",
    )
    correlation_id = models.UUIDField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Request trace ID for correlation",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"], name="events_audi_entity__idx"),
            models.Index(fields=["created_at"], name="events_audi_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.action} on {self.entity_type}:{self.entity_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise InvalidStateError("Audit log entries are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise InvalidStateError("Audit log entries cannot be deleted")
