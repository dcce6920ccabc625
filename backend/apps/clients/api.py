"""
Client API endpoints.
"""

from django.http import HttpRequest
from ninja import Router

from apps.clients.schemas import (
    ClientCreateRequest,
    ClientListResponse,
    ClientResponse,
    ClientStatusRequest,
    ClientUpdateRequest,
)
from apps.clients.services import (
    create_client,
    get_client,
    list_clients,
    set_client_status,
    update_client,
)
from apps.core.schemas import ErrorResponse, api_success
from apps.core.security import BearerAuth

router = Router(tags=["clients"])
bearer_auth = BearerAuth()


@router.get(
    "",
    response={200: ClientListResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="listClients",
    summary="List clients",
)
def list_clients_endpoint(
    request: HttpRequest, status: str | None = None, limit: int = 50, offset: int = 0
) -> dict:
    items, total = list_clients(status=status, limit=max(1, min(limit, 200)), offset=max(0, offset))
    return api_success({"items": items, "total": total}, message="Clients fetched")


@router.post(
    "",
    response={201: ClientResponse, 400: ErrorResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="createClient",
    summary="Register a client",
)
def create_client_endpoint(request: HttpRequest, payload: ClientCreateRequest) -> tuple[int, dict]:
    client = create_client(payload.model_dump(), actor=request.auth)
    return 201, api_success(client, message="Client created")


@router.get(
    "/{client_id}",
    response={200: ClientResponse, 401: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="getClient",
    summary="Get a client",
)
def get_client_endpoint(request: HttpRequest, client_id: int) -> dict:
    return api_success(get_client(client_id), message="Client fetched")


@router.patch(
    "/{client_id}",
    response={200: ClientResponse, 400: ErrorResponse, 401: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="updateClient",
    summary="Update client details",
)
def update_client_endpoint(
    request: HttpRequest, client_id: int, payload: ClientUpdateRequest
) -> dict:
    client = update_client(client_id, payload.model_dump(exclude_unset=True), actor=request.auth)
    return api_success(client, message="Client updated")


@router.post(
    "/{client_id}/status",
    response={200: ClientResponse, 400: ErrorResponse, 401: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="setClientStatus",
    summary="Change client status",
)
def set_client_status_endpoint(
    request: HttpRequest, client_id: int, payload: ClientStatusRequest
) -> dict:
    client = set_client_status(client_id, payload.status, actor=request.auth)
    return api_success(client, message="Client status updated")
