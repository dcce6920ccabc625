"""
Shared pytest fixtures for all tests.

Factories
---------
Import factories directly from their modules:

    from tests.accounts.factories import UserFactory
    from tests.clients.factories import ClientFactory
    from tests.plans.factories import PlanFactory
    from tests.subscriptions.factories import SubscriptionFactory
    from tests.billing.factories import InvoiceFactory

Example usage:

    @pytest.mark.django_db
    def test_something(api_client, admin_headers):
        plan = PlanFactory.create(name="Silver")
        response = api_client.get(f"/api/v1/plans/{plan.pk}", **admin_headers)
"""

from typing import Any

import pytest
import structlog
from django.test import Client

from apps.core.security import issue_access_token


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Keep structlog contextvars from leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Example:
        def test_api_returns_200(api_client):
            response = api_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    return Client()


def auth_headers(user: Any) -> dict[str, str]:
    """Request kwargs carrying a bearer token for ``user``."""
    token, _ = issue_access_token(user)
    return {"HTTP_AUTHORIZATION": f"Bearer {token}"}


@pytest.fixture
def admin_user(db):
    """A CRM user with the admin role."""
    from apps.accounts.models import User
    from tests.accounts.factories import UserFactory

    return UserFactory.create(role=User.Role.ADMIN)


@pytest.fixture
def manager_user(db):
    """A CRM user with the manager role."""
    from apps.accounts.models import User
    from tests.accounts.factories import UserFactory

    return UserFactory.create(role=User.Role.MANAGER)


@pytest.fixture
def admin_headers(admin_user) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def manager_headers(manager_user) -> dict[str, str]:
    return auth_headers(manager_user)
