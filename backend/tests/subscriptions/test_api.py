"""
Tests for subscription API endpoints.
"""

from datetime import date
from unittest.mock import patch

import pytest

from apps.billing.models import Invoice
from apps.subscriptions.models import Subscription
from tests.clients.factories import ClientFactory
from tests.plans.factories import PlanFactory

from .factories import SubscriptionFactory
from .test_tenants import FakeHrms


@pytest.mark.django_db
class TestSubscriptionApi:
    def test_create_returns_201(self, api_client, manager_headers):
        client = ClientFactory()
        plan = PlanFactory(name="Silver")

        response = api_client.post(
            "/api/v1/subscriptions",
            {
                "client_id": client.pk,
                "plan_id": plan.pk,
                "user_count": 5,
                "start_date": "2024-01-01",
            },
            content_type="application/json",
            **manager_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["expiry_date"] == "2024-04-01"
        assert data["plan_name"] == "Silver"

    def test_overage_rejected_returns_400(self, api_client, manager_headers):
        plan = PlanFactory(name="Silver", max_users=100)

        response = api_client.post(
            "/api/v1/subscriptions",
            {"client_id": ClientFactory().pk, "plan_id": plan.pk, "user_count": 150},
            content_type="application/json",
            **manager_headers,
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Maximum 100 users allowed for Silver plan",
        }

    def test_unknown_plan_returns_404(self, api_client, manager_headers):
        response = api_client.post(
            "/api/v1/subscriptions",
            {"client_id": ClientFactory().pk, "plan_id": 999999, "user_count": 5},
            content_type="application/json",
            **manager_headers,
        )

        assert response.status_code == 404

    def test_renew_issues_invoice(self, api_client, manager_headers):
        subscription = SubscriptionFactory(start_date=date(2024, 1, 1))

        response = api_client.post(
            f"/api/v1/subscriptions/{subscription.pk}/renew",
            {"as_of": "2024-04-01"},
            content_type="application/json",
            **manager_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["period_start"] == "2024-04-01"
        assert data["subscription"]["expiry_date"] == "2024-07-01"
        assert data["invoice"]["period_start"] == "2024-04-01"
        assert data["invoice"]["period_end"] == "2024-06-30"
        assert data["invoice"]["total"] == "645.00"

    def test_early_renewal_returns_409(self, api_client, manager_headers):
        subscription = SubscriptionFactory(start_date=date(2024, 1, 1))

        response = api_client.post(
            f"/api/v1/subscriptions/{subscription.pk}/renew",
            {"as_of": "2024-02-01"},
            content_type="application/json",
            **manager_headers,
        )

        assert response.status_code == 409
        assert response.json()["success"] is False
        assert Invoice.objects.count() == 0

    def test_renewal_rolls_back_when_invoicing_fails(self, api_client, manager_headers):
        plan = PlanFactory()
        subscription = SubscriptionFactory(plan=plan, start_date=date(2024, 1, 1))
        plan.is_active = False
        plan.save()

        response = api_client.post(
            f"/api/v1/subscriptions/{subscription.pk}/renew",
            {"as_of": "2024-04-01"},
            content_type="application/json",
            **manager_headers,
        )

        assert response.status_code == 400
        subscription.refresh_from_db()
        assert subscription.expiry_date == date(2024, 4, 1)

    def test_cancel(self, api_client, manager_headers):
        subscription = SubscriptionFactory()

        response = api_client.post(
            f"/api/v1/subscriptions/{subscription.pk}/cancel", **manager_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == Subscription.Status.CANCELLED

    def test_provision(self, api_client, manager_headers):
        subscription = SubscriptionFactory()

        with patch("apps.subscriptions.services.get_hrms_client", return_value=FakeHrms()):
            response = api_client.post(
                f"/api/v1/subscriptions/{subscription.pk}/provision", **manager_headers
            )

        assert response.status_code == 200
        assert response.json()["data"]["hrms_status"] == "active"
