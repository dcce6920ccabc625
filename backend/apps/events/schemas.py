"""
Audit log API schemas.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from ninja import Schema
from pydantic import Field


class AuditLogOut(Schema):
    """A single audit entry."""

    id: int
    actor_id: int | None = Field(default=None, description="User who performed the action")
    action: str = Field(description="Action type, e.g. 'invoice.generated'")
    entity_type: str
    entity_id: str | None = None
    old_value: dict[str, Any] | None = None
    new_value: dict[str, Any] | None = None
    origin: str | None = Field(default=None, description="Client IP address")
    correlation_id: UUID | None = None
    created_at: datetime


class AuditLogPage(Schema):
    items: list[AuditLogOut]
    total: int


class AuditLogListResponse(Schema):
    success: bool = True
    data: AuditLogPage
    message: str = ""
