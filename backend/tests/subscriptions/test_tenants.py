"""
Tests for HRMS tenant provisioning and the tenant deactivation sweep.
"""

from datetime import date

import pytest

from apps.clients.models import Client
from apps.core.exceptions import InvalidStateError
from apps.events.models import AuditLog
from apps.subscriptions.hrms_client import HrmsError, ProvisionResult
from apps.subscriptions.models import Subscription
from apps.subscriptions.services import deactivate_expired_tenants, provision_tenant
from tests.clients.factories import ClientFactory

from .factories import SubscriptionFactory


class FakeHrms:
    """Records calls; db names listed in ``failing`` raise HrmsError."""

    def __init__(self, failing: tuple[str, ...] = ()):
        self.failing = failing
        self.deactivated: list[str] = []
        self.reactivated: list[str] = []
        self.provisioned: list[int] = []

    def deactivate_tenant(self, db_name):
        if db_name in self.failing:
            raise HrmsError("HRMS rejected deactivate: HTTP 500")
        self.deactivated.append(db_name)

    def reactivate_tenant(self, db_name, plan):
        self.reactivated.append(db_name)

    def provision_tenant(self, client, plan):
        self.provisioned.append(client.pk)
        return ProvisionResult(tenant_id=f"tenant-{client.pk}", db_name=f"hrms_{client.pk}")


def active_tenant_client(db_name: str) -> Client:
    return ClientFactory(hrms_status=Client.HrmsStatus.ACTIVE, hrms_db_name=db_name)


@pytest.mark.django_db
class TestDeactivateExpiredTenants:
    def test_switches_off_uncovered_clients(self):
        lapsed = active_tenant_client("hrms_lapsed")
        SubscriptionFactory(client=lapsed, start_date=date(2024, 1, 1))
        covered = active_tenant_client("hrms_covered")
        SubscriptionFactory(client=covered, start_date=date(2024, 3, 1))
        hrms = FakeHrms()

        result = deactivate_expired_tenants(date(2024, 4, 15), hrms=hrms)

        assert result.deactivated == [lapsed.pk]
        assert hrms.deactivated == ["hrms_lapsed"]
        lapsed.refresh_from_db()
        covered.refresh_from_db()
        assert lapsed.hrms_status == Client.HrmsStatus.INACTIVE
        assert covered.hrms_status == Client.HrmsStatus.ACTIVE
        assert AuditLog.objects.filter(action="client.hrms_deactivated").count() == 1

    def test_expiry_day_is_not_covered(self):
        client = active_tenant_client("hrms_boundary")
        SubscriptionFactory(client=client, start_date=date(2024, 1, 1))

        assert deactivate_expired_tenants(date(2024, 3, 31), hrms=FakeHrms()).deactivated == []
        result = deactivate_expired_tenants(date(2024, 4, 1), hrms=FakeHrms())

        assert result.deactivated == [client.pk]

    def test_cancelled_subscription_does_not_cover(self):
        client = active_tenant_client("hrms_cancelled")
        SubscriptionFactory(
            client=client, start_date=date(2024, 3, 1), status=Subscription.Status.CANCELLED
        )

        result = deactivate_expired_tenants(date(2024, 4, 15), hrms=FakeHrms())

        assert result.deactivated == [client.pk]

    def test_failure_is_counted_and_sweep_continues(self):
        failing = active_tenant_client("hrms_down")
        ok = active_tenant_client("hrms_ok")

        result = deactivate_expired_tenants(date(2024, 4, 15), hrms=FakeHrms(failing=("hrms_down",)))

        assert result.failed == [failing.pk]
        assert result.deactivated == [ok.pk]
        failing.refresh_from_db()
        assert failing.hrms_status == Client.HrmsStatus.ACTIVE

    def test_client_without_db_name_is_reported(self):
        client = active_tenant_client("")

        result = deactivate_expired_tenants(date(2024, 4, 15), hrms=FakeHrms())

        assert result.failed == [client.pk]


@pytest.mark.django_db
class TestProvisionTenant:
    def test_new_tenant(self):
        subscription = SubscriptionFactory()
        hrms = FakeHrms()

        client = provision_tenant(subscription.pk, hrms=hrms)

        assert hrms.provisioned == [client.pk]
        assert client.hrms_status == Client.HrmsStatus.ACTIVE
        assert client.hrms_db_name == f"hrms_{client.pk}"
        assert client.hrms_tenant_id == f"tenant-{client.pk}"
        assert client.hrms_activated_at is not None
        assert AuditLog.objects.filter(action="client.hrms_provisioned").count() == 1

    def test_existing_database_is_reactivated(self):
        client = ClientFactory(hrms_status=Client.HrmsStatus.INACTIVE, hrms_db_name="hrms_old")
        subscription = SubscriptionFactory(client=client)
        hrms = FakeHrms()

        provision_tenant(subscription.pk, hrms=hrms)

        assert hrms.reactivated == ["hrms_old"]
        assert hrms.provisioned == []
        assert AuditLog.objects.filter(action="client.hrms_reactivated").count() == 1

    def test_inactive_subscription_is_rejected(self):
        subscription = SubscriptionFactory(status=Subscription.Status.EXPIRED)

        with pytest.raises(InvalidStateError):
            provision_tenant(subscription.pk, hrms=FakeHrms())

    def test_already_active_tenant_is_rejected(self):
        subscription = SubscriptionFactory(client=active_tenant_client("hrms_live"))

        with pytest.raises(InvalidStateError):
            provision_tenant(subscription.pk, hrms=FakeHrms())
