"""
Tests for RequestContextMiddleware.
"""

import uuid

from django.http import HttpRequest, HttpResponse

from apps.core.logging import get_contextvars
from apps.core.middleware import RequestContextMiddleware


def make_request(headers: dict[str, str] | None = None) -> HttpRequest:
    request = HttpRequest()
    request.path = "/api/v1/health"
    request.method = "GET"
    request.META = {"REMOTE_ADDR": "192.0.2.10", **(headers or {})}
    return request


class TestRequestContextMiddleware:
    def test_binds_context_during_request(self):
        seen: dict = {}

        def view(request):
            seen.update(get_contextvars())
            return HttpResponse("ok")

        RequestContextMiddleware(view)(make_request({"HTTP_USER_AGENT": "pytest"}))

        assert seen["request.ip_address"] == "192.0.2.10"
        assert seen["request.user_agent"] == "pytest"
        uuid.UUID(seen["correlation_id"])

    def test_uses_valid_correlation_header(self):
        correlation_id = str(uuid.uuid4())
        middleware = RequestContextMiddleware(lambda request: HttpResponse("ok"))

        response = middleware(make_request({"HTTP_X_CORRELATION_ID": correlation_id}))

        assert response["X-Correlation-ID"] == correlation_id

    def test_replaces_malformed_correlation_header(self):
        middleware = RequestContextMiddleware(lambda request: HttpResponse("ok"))

        response = middleware(make_request({"HTTP_X_CORRELATION_ID": "not-a-uuid"}))

        assert response["X-Correlation-ID"] != "not-a-uuid"
        uuid.UUID(response["X-Correlation-ID"])

    def test_context_is_cleared_after_request(self):
        middleware = RequestContextMiddleware(lambda request: HttpResponse("ok"))

        middleware(make_request())

        assert get_contextvars() == {}

    def test_forwarded_for_takes_first_address(self):
        seen: dict = {}

        def view(request):
            seen.update(get_contextvars())
            return HttpResponse("ok")

        RequestContextMiddleware(view)(
            make_request({"HTTP_X_FORWARDED_FOR": "203.0.113.5, 10.0.0.1"})
        )

        assert seen["request.ip_address"] == "203.0.113.5"
