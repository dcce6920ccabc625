"""
Core security - bearer token authentication for the API.

Tokens are HS256 JWTs whose ``sub`` claim is the user's primary key.
The authenticated user becomes the audit actor for every mutation made
during the request.
"""

import secrets
from datetime import UTC, datetime, timedelta
from functools import wraps
from typing import TYPE_CHECKING, Any

import jwt
from django.conf import settings
from ninja.errors import HttpError
from ninja.security import APIKeyHeader, HttpBearer

from apps.core.logging import bind_contextvars, get_logger

if TYPE_CHECKING:
    from apps.accounts.models import User

logger = get_logger(__name__)


def issue_access_token(user: "User") -> tuple[str, datetime]:
    """Sign an access token for the user. Returns (token, expires_at)."""
    now = datetime.now(UTC)
    expires_at = now + timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(user.pk),
        "email": user.email,
        "role": user.role,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_at


class BearerAuth(HttpBearer):
    """
    Bearer token authentication for API endpoints.

    Returns the active User for a valid token, None otherwise (triggers 401).
    """

    def authenticate(self, request, token: str) -> "User | None":
        from apps.accounts.models import User

        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET,
                algorithms=[settings.JWT_ALGORITHM],
                options={"require": ["exp", "sub"]},
            )
        except jwt.InvalidTokenError as e:
            logger.warning("bearer_token_invalid", error=str(e))
            return None

        user = User.objects.filter(pk=payload["sub"], is_active=True).first()
        if user is None:
            logger.warning("bearer_token_unknown_user", user_id=payload["sub"])
            return None

        bind_contextvars(**{"usr.id": str(user.pk)})
        return user


class HrmsApiKeyAuth(APIKeyHeader):
    """
    Service authentication for calls made by the HRMS itself.

    The HRMS presents the shared HRMS_API_KEY in the x-api-key header. An
    unset key rejects every call.
    """

    param_name = "x-api-key"

    def authenticate(self, request, key: str | None) -> str | None:
        expected = settings.HRMS_API_KEY
        if not expected or not key or not secrets.compare_digest(key, expected):
            logger.warning("hrms_api_key_rejected")
            return None
        return "hrms"


def require_admin(func):
    """Reject the request with 403 unless the authenticated user is an admin."""

    @wraps(func)
    def wrapper(request, *args, **kwargs):
        user = getattr(request, "auth", None)
        if user is None or not user.is_admin:
            raise HttpError(403, "Admin access required")
        return func(request, *args, **kwargs)

    return wrapper
