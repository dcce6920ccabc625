"""
Auth API endpoints.
"""

from django.http import HttpRequest
from ninja import Router

from apps.accounts.schemas import LoginRequest, TokenResponse, UserResponse
from apps.accounts.services import authenticate_user
from apps.core.schemas import ErrorResponse, api_success
from apps.core.security import BearerAuth, issue_access_token

router = Router(tags=["auth"])
bearer_auth = BearerAuth()


@router.post(
    "/login",
    response={200: TokenResponse, 400: ErrorResponse},
    operation_id="login",
    summary="Exchange email and password for a bearer token",
)
def login(request: HttpRequest, payload: LoginRequest) -> dict:
    user = authenticate_user(payload.email, payload.password)
    token, expires_at = issue_access_token(user)
    return api_success(
        {"access_token": token, "expires_at": expires_at, "user": user},
        message="Logged in",
    )


@router.get(
    "/me",
    response={200: UserResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="getCurrentUser",
    summary="Current user",
)
def me(request: HttpRequest) -> dict:
    return api_success(request.auth)
