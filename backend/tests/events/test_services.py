"""
Tests for the audit recorder.
"""

import uuid
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from apps.core.exceptions import PersistenceFaultError
from apps.events.context import audit_context
from apps.events.models import AuditLog
from apps.events.services import record, snapshot
from tests.accounts.factories import UserFactory
from tests.subscriptions.factories import SubscriptionFactory


@pytest.mark.django_db
class TestRecord:
    def test_writes_one_entry(self):
        user = UserFactory()

        entry = record(
            "plan.updated",
            "plan",
            42,
            actor=user,
            old_value={"price_per_user": "129.00"},
            new_value={"price_per_user": "139.00"},
        )

        assert AuditLog.objects.count() == 1
        assert entry.actor == user
        assert entry.entity_id == "42"
        assert entry.old_value == {"price_per_user": "129.00"}
        assert entry.new_value == {"price_per_user": "139.00"}

    def test_takes_origin_and_correlation_from_context(self):
        correlation_id = str(uuid.uuid4())

        with audit_context(correlation_id=correlation_id, ip_address="198.51.100.7"):
            entry = record("invoice.sent", "invoice", 1)

        entry.refresh_from_db()
        assert entry.origin == "198.51.100.7"
        assert entry.correlation_id == uuid.UUID(correlation_id)

    def test_without_context_fields_are_null(self):
        entry = record("invoice.sent", "invoice", 1)

        assert entry.origin is None
        assert entry.correlation_id is None

    def test_explicit_origin_wins(self):
        with audit_context(ip_address="198.51.100.7"):
            entry = record("invoice.sent", "invoice", 1, origin="203.0.113.9")

        assert entry.origin == "203.0.113.9"

    def test_non_address_origin_is_dropped(self):
        with audit_context(ip_address="unknown"):
            entry = record("invoice.sent", "invoice", 1)

        assert entry.origin is None

    def test_explicit_non_address_origin_is_dropped(self):
        entry = record("invoice.sent", "invoice", 1, origin="1.2.3.4:8080")

        assert entry.origin is None

    def test_store_failure_raises_persistence_fault(self):
        with patch.object(AuditLog.objects, "create", side_effect=DatabaseError("disk full")):
            with pytest.raises(PersistenceFaultError):
                record("invoice.sent", "invoice", 1)


@pytest.mark.django_db
class TestSnapshot:
    def test_json_safe_values(self):
        subscription = SubscriptionFactory(start_date=date(2024, 1, 1))

        data = snapshot(subscription, ("client", "user_count", "start_date", "status"))

        assert data == {
            "client_id": subscription.client_id,
            "user_count": 5,
            "start_date": "2024-01-01",
            "status": "active",
        }

    def test_decimals_become_strings(self):
        subscription = SubscriptionFactory()
        plan = subscription.plan
        plan.price_per_user = Decimal("129.00")

        assert snapshot(plan, ("price_per_user",)) == {"price_per_user": "129.00"}
