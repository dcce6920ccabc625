"""
Django Ninja API configuration.

Domain errors are mapped onto the response envelope here, so services only
raise and endpoints only return ``api_success`` payloads.
"""

from django.db import DatabaseError
from django.http import Http404, HttpRequest, HttpResponse
from ninja import NinjaAPI
from ninja.errors import AuthenticationError, HttpError
from ninja.errors import ValidationError as NinjaValidationError

from apps.accounts.api import router as auth_router
from apps.billing.api import router as invoices_router
from apps.clients.api import router as clients_router
from apps.core.exceptions import BillingError
from apps.core.logging import get_logger
from apps.core.schemas import api_error, api_success
from apps.events.api import router as audit_router
from apps.plans.api import router as plans_router
from apps.subscriptions.api import hrms_router
from apps.subscriptions.api import router as subscriptions_router

logger = get_logger(__name__)

api = NinjaAPI(
    title="HRMS Billing CRM API",
    version="1.0.0",
    description="Plan catalog, subscriptions, invoicing and payments for HRMS tenants.",
    openapi_extra={
        "info": {
            "contact": {"name": "API Support"},
        },
        "tags": [
            {"name": "auth", "description": "Token issuance for CRM staff"},
            {"name": "plans", "description": "Plan catalog"},
            {"name": "clients", "description": "Customer companies"},
            {"name": "subscriptions", "description": "Subscription ledger"},
            {"name": "invoices", "description": "Invoices and payments"},
            {"name": "hrms", "description": "Access checks called by the HRMS (x-api-key)"},
            {"name": "audit", "description": "Audit trail (admin only)"},
            {"name": "health", "description": "Service health and readiness checks"},
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT",
                    "description": "Access token from /auth/login. Include as: Authorization: Bearer <token>",
                }
            }
        },
    },
)

# Register routers
api.add_router("/auth", auth_router)
api.add_router("/plans", plans_router)
api.add_router("/clients", clients_router)
api.add_router("/subscriptions", subscriptions_router)
api.add_router("/invoices", invoices_router)
api.add_router("/audit-logs", audit_router)
api.add_router("/hrms", hrms_router)


@api.exception_handler(BillingError)
def billing_error_handler(request: HttpRequest, exc: BillingError) -> HttpResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request_rejected",
        error_type=type(exc).__name__,
        message=exc.message,
        status_code=exc.status_code,
    )
    return api.create_response(request, api_error(exc.message), status=exc.status_code)


@api.exception_handler(NinjaValidationError)
def validation_error_handler(request: HttpRequest, exc: NinjaValidationError) -> HttpResponse:
    parts = []
    for error in exc.errors:
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "payload", "query", "path")]
        msg = error.get("msg", "Invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    message = "; ".join(parts) or "Invalid request"
    return api.create_response(request, api_error(message), status=400)


@api.exception_handler(AuthenticationError)
def authentication_error_handler(request: HttpRequest, exc: AuthenticationError) -> HttpResponse:
    return api.create_response(request, api_error("Authentication required"), status=401)


@api.exception_handler(HttpError)
def http_error_handler(request: HttpRequest, exc: HttpError) -> HttpResponse:
    return api.create_response(request, api_error(str(exc)), status=exc.status_code)


@api.exception_handler(Http404)
def not_found_handler(request: HttpRequest, exc: Http404) -> HttpResponse:
    return api.create_response(request, api_error("Not found"), status=404)


@api.exception_handler(DatabaseError)
def database_error_handler(request: HttpRequest, exc: DatabaseError) -> HttpResponse:
    logger.exception("database_error", error=str(exc))
    return api.create_response(request, api_error("Persistence failure"), status=500)


@api.get("/health", tags=["health"], operation_id="healthCheck", summary="Health check")
def health_check(request: HttpRequest) -> dict:
    """Health check endpoint for load balancer."""
    return api_success({"status": "ok"})
