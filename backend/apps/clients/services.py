"""
Client services - maintaining customer companies.
"""

from typing import TYPE_CHECKING, Any

from django.db import transaction

from apps.clients.models import Client
from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.logging import get_logger
from apps.events.services import record, snapshot

if TYPE_CHECKING:
    from apps.accounts.models import User

logger = get_logger(__name__)

EDITABLE_FIELDS = (
    "company_name",
    "contact_person",
    "email",
    "phone",
    "address",
    "city",
    "state",
    "country",
    "pincode",
    "gst_number",
    "pan_number",
    "industry",
    "company_size",
    "notes",
)
AUDITED_FIELDS = (*EDITABLE_FIELDS, "status", "hrms_status")


def get_client(client_id: int) -> Client:
    """Fetch a client by id or raise NotFoundError."""
    client = Client.objects.filter(pk=client_id).first()
    if client is None:
        raise NotFoundError("Client not found")
    return client


def list_clients(
    status: str | None = None, limit: int = 50, offset: int = 0
) -> tuple[list[Client], int]:
    """Clients newest first, optionally filtered by status. Returns (page, total)."""
    qs = Client.objects.all()
    if status:
        qs = qs.filter(status=status)
    return list(qs[offset : offset + limit]), qs.count()


def _check_email_free(email: str | None, exclude_id: int | None = None) -> None:
    if not email:
        return
    qs = Client.objects.filter(email__iexact=email)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise ValidationError("A client with this email already exists")


def create_client(data: dict[str, Any], actor: "User | None" = None) -> Client:
    """
    Register a new client.

    Raises:
        ValidationError: company_name missing or email already used.
    """
    if not (data.get("company_name") or "").strip():
        raise ValidationError("company_name is required")

    fields = {k: v for k, v in data.items() if k in EDITABLE_FIELDS and v is not None}
    if not fields.get("email"):
        fields.pop("email", None)
    with transaction.atomic():
        _check_email_free(fields.get("email"))
        client = Client.objects.create(created_by=actor, **fields)
        record(
            "client.created",
            "client",
            client.pk,
            actor=actor,
            new_value=snapshot(client, AUDITED_FIELDS),
        )

    logger.info("client_created", client_id=client.pk, company_name=client.company_name)
    return client


def update_client(client_id: int, changes: dict[str, Any], actor: "User | None" = None) -> Client:
    """Apply a partial update to a client's details."""
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown client fields: {', '.join(sorted(unknown))}")
    if "company_name" in changes and not (changes["company_name"] or "").strip():
        raise ValidationError("company_name cannot be blank")

    with transaction.atomic():
        client = Client.objects.select_for_update().filter(pk=client_id).first()
        if client is None:
            raise NotFoundError("Client not found")
        if changes.get("email") and changes["email"] != client.email:
            _check_email_free(changes["email"], exclude_id=client.pk)

        before = snapshot(client, AUDITED_FIELDS)
        for name, value in changes.items():
            if name == "email" and not value:
                value = None
            setattr(client, name, value)
        client.save()
        record(
            "client.updated",
            "client",
            client.pk,
            actor=actor,
            old_value=before,
            new_value=snapshot(client, AUDITED_FIELDS),
        )

    logger.info("client_updated", client_id=client.pk, fields=sorted(changes))
    return client


def set_client_status(client_id: int, status: str, actor: "User | None" = None) -> Client:
    """Move a client between active, inactive and suspended."""
    if status not in Client.Status.values:
        raise ValidationError(f"Invalid client status: {status}")

    with transaction.atomic():
        client = Client.objects.select_for_update().filter(pk=client_id).first()
        if client is None:
            raise NotFoundError("Client not found")
        old_status = client.status
        client.status = status
        client.save(update_fields=["status", "updated_at"])
        record(
            "client.status_changed",
            "client",
            client.pk,
            actor=actor,
            old_value={"status": old_status},
            new_value={"status": status},
        )

    logger.info("client_status_changed", client_id=client.pk, old_status=old_status, status=status)
    return client
