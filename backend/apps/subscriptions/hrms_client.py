"""
HRMS provisioning API client.

The HRMS exposes tenant lifecycle endpoints under ``/api/provision``,
authenticated with an ``x-api-key`` header.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
from django.conf import settings

from apps.core.exceptions import BillingError
from apps.core.logging import get_logger

if TYPE_CHECKING:
    from apps.clients.models import Client
    from apps.plans.models import Plan

logger = get_logger(__name__)


class HrmsError(BillingError):
    """The HRMS API could not be reached or rejected the call."""

    status_code = 502


@dataclass
class ProvisionResult:
    tenant_id: str
    db_name: str


class HrmsClient:
    """Thin synchronous wrapper over the provisioning endpoints."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        if not self.base_url:
            raise HrmsError("HRMS_URL is not configured")

        url = f"{self.base_url}/api/provision/{path}"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(
                    url,
                    json=payload,
                    headers={"x-api-key": self.api_key},
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "hrms_request_rejected",
                path=path,
                status_code=e.response.status_code,
            )
            raise HrmsError(f"HRMS rejected {path}: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("hrms_request_failed", path=path, error=str(e))
            raise HrmsError(f"HRMS request failed: {e}") from e

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            logger.warning("hrms_response_unreadable", path=path, error=str(e))
            raise HrmsError(f"HRMS returned a non-JSON response for {path}") from e
        if not isinstance(data, dict):
            raise HrmsError(f"HRMS returned an unexpected response for {path}")
        return data

    def provision_tenant(self, client: "Client", plan: "Plan") -> ProvisionResult:
        data = self._post(
            "create-tenant",
            {
                "company_name": client.company_name,
                "admin_email": client.email,
                "plan": plan.name,
                "max_users": plan.max_users,
                "modules": plan.enabled_modules(),
            },
        )
        tenant_id = data.get("tenant_id") or data.get("tenantId")
        db_name = data.get("db_name") or data.get("dbName")
        if not tenant_id or not db_name:
            raise HrmsError("HRMS response is missing tenant_id or db_name")
        return ProvisionResult(tenant_id=str(tenant_id), db_name=str(db_name))

    def deactivate_tenant(self, db_name: str) -> None:
        self._post("deactivate", {"db_name": db_name})

    def reactivate_tenant(self, db_name: str, plan: "Plan") -> None:
        self._post(
            "reactivate",
            {
                "db_name": db_name,
                "max_users": plan.max_users,
                "modules": plan.enabled_modules(),
            },
        )


def get_hrms_client() -> HrmsClient:
    """Client configured from HRMS_* settings."""
    return HrmsClient(
        base_url=settings.HRMS_URL,
        api_key=settings.HRMS_API_KEY,
        timeout=settings.HRMS_TIMEOUT_SECONDS,
    )
