"""
Tests for invoice and payment API endpoints.
"""

from datetime import date

import pytest

from apps.billing.models import Invoice
from tests.plans.factories import PlanFactory
from tests.subscriptions.factories import SubscriptionFactory

from .factories import InvoiceFactory


@pytest.mark.django_db
class TestInvoiceApi:
    def test_generate_returns_201(self, api_client, manager_headers):
        subscription = SubscriptionFactory(plan=PlanFactory(name="Silver"))

        response = api_client.post(
            "/api/v1/invoices",
            {"subscription_id": subscription.pk, "billing_period_start": "2024-01-01"},
            content_type="application/json",
            **manager_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["amount"] == "645.00"
        assert data["total"] == "645.00"
        assert data["status"] == "draft"
        assert data["due_date"] == "2024-01-16"

    def test_send_then_pay(self, api_client, manager_headers):
        invoice = InvoiceFactory()

        sent = api_client.post(f"/api/v1/invoices/{invoice.pk}/send", **manager_headers)
        paid = api_client.post(
            f"/api/v1/invoices/{invoice.pk}/payments",
            {"amount": "645.00", "payment_date": "2024-01-10", "method": "upi"},
            content_type="application/json",
            **manager_headers,
        )

        assert sent.json()["data"]["status"] == "sent"
        assert paid.status_code == 201
        data = paid.json()["data"]
        assert data["invoice"]["status"] == "paid"
        assert data["invoice"]["payment_id"] == data["payment"]["id"]

    def test_payment_on_draft_returns_409(self, api_client, manager_headers):
        invoice = InvoiceFactory()

        response = api_client.post(
            f"/api/v1/invoices/{invoice.pk}/payments",
            {"amount": "645.00", "payment_date": "2024-01-10"},
            content_type="application/json",
            **manager_headers,
        )

        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "Invoice has not been sent yet"}

    def test_oversized_payment_returns_400(self, api_client, manager_headers):
        invoice = InvoiceFactory(status=Invoice.Status.SENT)

        response = api_client.post(
            f"/api/v1/invoices/{invoice.pk}/payments",
            {"amount": "10000000000.00", "payment_date": "2024-01-10"},
            content_type="application/json",
            **manager_headers,
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        invoice.refresh_from_db()
        assert invoice.status == Invoice.Status.SENT

    def test_cancel_paid_returns_409(self, api_client, manager_headers):
        invoice = InvoiceFactory(status=Invoice.Status.SENT)
        api_client.post(
            f"/api/v1/invoices/{invoice.pk}/payments",
            {"amount": "645.00", "payment_date": "2024-01-10"},
            content_type="application/json",
            **manager_headers,
        )

        response = api_client.post(f"/api/v1/invoices/{invoice.pk}/cancel", **manager_headers)

        assert response.status_code == 409
        assert response.json()["message"] == "Cannot cancel a paid invoice"

    def test_mark_overdue_requires_admin(self, api_client, manager_headers):
        response = api_client.post(
            "/api/v1/invoices/mark-overdue",
            {"as_of": "2024-01-15"},
            content_type="application/json",
            **manager_headers,
        )

        assert response.status_code == 403

    def test_mark_overdue(self, api_client, admin_headers):
        invoice = InvoiceFactory(status=Invoice.Status.SENT, due_date=date(2024, 1, 10))

        response = api_client.post(
            "/api/v1/invoices/mark-overdue",
            {"as_of": "2024-01-15"},
            content_type="application/json",
            **admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"as_of": "2024-01-15", "invoice_ids": [invoice.pk]}

    def test_list_filters_by_status(self, api_client, manager_headers):
        InvoiceFactory(status=Invoice.Status.SENT)
        InvoiceFactory()

        response = api_client.get("/api/v1/invoices", {"status": "sent"}, **manager_headers)

        assert response.json()["data"]["total"] == 1

    def test_payments_listing(self, api_client, manager_headers):
        invoice = InvoiceFactory(status=Invoice.Status.SENT)
        api_client.post(
            f"/api/v1/invoices/{invoice.pk}/payments",
            {"amount": "100.00", "payment_date": "2024-01-10", "transaction_id": "UTR-1"},
            content_type="application/json",
            **manager_headers,
        )

        response = api_client.get(f"/api/v1/invoices/{invoice.pk}/payments", **manager_headers)

        payments = response.json()["data"]
        assert len(payments) == 1
        assert payments[0]["amount"] == "100.00"
        assert payments[0]["transaction_id"] == "UTR-1"
