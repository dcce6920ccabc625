"""
Audit log API endpoints. Read-only, admin only.
"""

from django.http import HttpRequest
from ninja import Router

from apps.core.schemas import ErrorResponse, api_success
from apps.core.security import BearerAuth, require_admin
from apps.events.models import AuditLog
from apps.events.schemas import AuditLogListResponse

router = Router(tags=["audit"])
bearer_auth = BearerAuth()

MAX_PAGE_SIZE = 200


@router.get(
    "",
    response={200: AuditLogListResponse, 401: ErrorResponse, 403: ErrorResponse},
    auth=bearer_auth,
    operation_id="listAuditLogs",
    summary="List audit log entries, newest first",
)
@require_admin
def list_audit_logs(
    request: HttpRequest,
    entity_type: str | None = None,
    entity_id: str | None = None,
    action: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> dict:
    qs = AuditLog.objects.all()
    if entity_type:
        qs = qs.filter(entity_type=entity_type)
    if entity_id:
        qs = qs.filter(entity_id=entity_id)
    if action:
        qs = qs.filter(action=action)

    limit = max(1, min(limit, MAX_PAGE_SIZE))
    offset = max(0, offset)
    total = qs.count()
    items = list(qs[offset : offset + limit])
    return api_success({"items": items, "total": total})
