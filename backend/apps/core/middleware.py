"""
Core middleware.
"""

import time
import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from apps.core.logging import bind_contextvars, clear_contextvars, get_logger
from apps.core.utils import get_client_ip

logger = get_logger(__name__)

CORRELATION_HEADER = "HTTP_X_CORRELATION_ID"


class RequestContextMiddleware:
    """
    Binds request context to structlog contextvars.

    The correlation ID comes from the X-Correlation-ID header when it is a
    valid UUID, otherwise a new one is generated. The client IP bound here
    is what the audit recorder stores as the entry origin.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = _parse_correlation_id(request.META.get(CORRELATION_HEADER))
        clear_contextvars()
        bind_contextvars(
            correlation_id=str(correlation_id),
            **{
                "request.ip_address": get_client_ip(request),
                "request.user_agent": request.META.get("HTTP_USER_AGENT", ""),
            },
        )

        start = time.perf_counter()
        try:
            response = self.get_response(request)
            logger.info(
                "http_request",
                **{
                    "http.method": request.method,
                    "http.url_details.path": request.path,
                    "http.status_code": response.status_code,
                },
                duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
            )
            response["X-Correlation-ID"] = str(correlation_id)
            return response
        finally:
            clear_contextvars()


def _parse_correlation_id(value: str | None) -> uuid.UUID:
    if value:
        try:
            return uuid.UUID(value)
        except ValueError:
            pass
    return uuid.uuid4()
