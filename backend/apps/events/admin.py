"""Admin configuration for the audit log."""

from django.contrib import admin

from apps.core.admin import ReadOnlyModelAdmin
from apps.events.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyModelAdmin):
    list_display = ["id", "action", "entity_type", "entity_id", "actor", "origin", "created_at"]
    list_filter = ["entity_type", "action"]
    search_fields = ["action", "entity_id", "actor__email"]
    ordering = ["-created_at"]
