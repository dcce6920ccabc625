"""
Tests for notification delivery.
"""

import smtplib
from datetime import date
from unittest.mock import patch

import pytest
from django.core import mail

from apps.billing.models import Invoice
from apps.billing.services import mark_overdue_sweep, send_invoice
from apps.notifications.mailer import MailError, send_email
from apps.notifications.models import Notification
from apps.notifications.services import deliver_notification, notify
from tests.billing.factories import InvoiceFactory
from tests.clients.factories import ClientFactory


@pytest.mark.django_db
class TestNotify:
    def test_delivers_after_commit(self, django_capture_on_commit_callbacks):
        client = ClientFactory(email="owner@acme.example")

        with django_capture_on_commit_callbacks(execute=True):
            notification = notify(client, Notification.Kind.GENERAL, "Hello", "Body", "<p>Body</p>")

        notification.refresh_from_db()
        assert notification.status == Notification.Status.SENT
        assert notification.sent_at is not None
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["owner@acme.example"]
        assert mail.outbox[0].alternatives[0][1] == "text/html"

    def test_nothing_sent_before_commit(self):
        notification = notify(ClientFactory(), Notification.Kind.GENERAL, "Hello", "Body")

        assert notification.status == Notification.Status.PENDING
        assert mail.outbox == []

    def test_missing_address_marks_failed(self, django_capture_on_commit_callbacks):
        client = ClientFactory(email=None)

        with django_capture_on_commit_callbacks(execute=True):
            notification = notify(client, Notification.Kind.GENERAL, "Hello", "Body")

        notification.refresh_from_db()
        assert notification.status == Notification.Status.FAILED
        assert notification.error == "No recipient address"

    def test_transport_error_marks_failed(self):
        notification = notify(ClientFactory(), Notification.Kind.GENERAL, "Hello", "Body")

        with patch(
            "django.core.mail.EmailMultiAlternatives.send",
            side_effect=smtplib.SMTPException("relay denied"),
        ):
            deliver_notification(notification.pk)

        notification.refresh_from_db()
        assert notification.status == Notification.Status.FAILED
        assert "relay denied" in notification.error

    def test_delivered_notification_is_not_resent(self, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            notification = notify(ClientFactory(), Notification.Kind.GENERAL, "Hello", "Body")

        assert deliver_notification(notification.pk) is None
        assert len(mail.outbox) == 1


class TestSendEmail:
    def test_requires_recipient(self):
        with pytest.raises(MailError):
            send_email("", "Subject", "Body")

    def test_uses_default_from_address(self, settings):
        settings.DEFAULT_FROM_EMAIL = "billing@crm.example"

        send_email("someone@example.com", "Subject", "Body")

        assert mail.outbox[-1].from_email == "billing@crm.example"


@pytest.mark.django_db
class TestBillingNotifications:
    def test_invoice_sent_email(self, django_capture_on_commit_callbacks):
        invoice = InvoiceFactory()

        with django_capture_on_commit_callbacks(execute=True):
            send_invoice(invoice.pk)

        assert mail.outbox[0].subject == f"Invoice {invoice.invoice_number}"
        assert "645.00" in mail.outbox[0].body

    def test_overdue_email(self, django_capture_on_commit_callbacks):
        invoice = InvoiceFactory(status=Invoice.Status.SENT, due_date=date(2024, 1, 10))

        with django_capture_on_commit_callbacks(execute=True):
            mark_overdue_sweep(date(2024, 1, 15))

        assert mail.outbox[0].subject == f"Invoice {invoice.invoice_number} is overdue"

    def test_mail_failure_does_not_undo_billing_change(self, django_capture_on_commit_callbacks):
        invoice = InvoiceFactory(client=ClientFactory(email=None))

        with django_capture_on_commit_callbacks(execute=True):
            send_invoice(invoice.pk)

        invoice.refresh_from_db()
        assert invoice.status == Invoice.Status.SENT
        assert Notification.objects.get().status == Notification.Status.FAILED
