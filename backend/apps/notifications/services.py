"""
Notification services.

``notify`` stores a Notification and schedules delivery for after the
surrounding transaction commits. Delivery failures are recorded on the
row and logged; they never propagate into the billing operation.
"""

from typing import TYPE_CHECKING

from django.db import transaction
from django.utils.html import format_html

from apps.core.logging import get_logger
from apps.notifications.mailer import MailError, send_email
from apps.notifications.models import Notification

if TYPE_CHECKING:
    from apps.billing.models import Invoice, Payment
    from apps.clients.models import Client
    from apps.subscriptions.models import Subscription

logger = get_logger(__name__)


def notify(
    client: "Client",
    kind: str,
    subject: str,
    body_text: str,
    body_html: str = "",
) -> Notification:
    notification = Notification.objects.create(
        client=client,
        kind=kind,
        recipient=client.email or "",
        subject=subject,
        message=body_text,
        html_message=body_html,
    )
    transaction.on_commit(lambda: deliver_notification(notification.pk))
    logger.info(
        "notification_queued",
        notification_id=notification.pk,
        client_id=client.pk,
        kind=kind,
    )
    return notification


def deliver_notification(notification_id: int) -> Notification | None:
    """Send a pending notification through the mail transport."""
    notification = Notification.objects.filter(
        pk=notification_id, status=Notification.Status.PENDING
    ).first()
    if notification is None:
        return None

    try:
        send_email(
            notification.recipient,
            notification.subject,
            notification.message,
            notification.html_message,
        )
    except MailError as e:
        notification.mark_failed(str(e))
        logger.warning(
            "notification_failed",
            notification_id=notification.pk,
            kind=notification.kind,
            error=str(e),
        )
        return notification

    notification.mark_sent()
    return notification


def notify_overage(subscription: "Subscription") -> Notification:
    plan = subscription.plan
    client = subscription.client
    subject = f"User limit exceeded on your {plan.name} plan"
    body_text = (
        f"Hello {client.contact_person or client.company_name},\n\n"
        f"Your subscription now covers {subscription.user_count} users, above the "
        f"{plan.max_users}-user limit of the {plan.name} plan. Please contact us "
        f"to move to a plan that fits your team.\n"
    )
    body_html = format_html(
        "<p>Your subscription now covers <strong>{}</strong> users, above the "
        "{}-user limit of the <strong>{}</strong> plan.</p>",
        subscription.user_count,
        plan.max_users,
        plan.name,
    )
    return notify(client, Notification.Kind.OVERAGE, subject, body_text, body_html)


def notify_invoice_sent(invoice: "Invoice") -> Notification:
    client = invoice.client
    subject = f"Invoice {invoice.invoice_number}"
    body_text = (
        f"Hello {client.contact_person or client.company_name},\n\n"
        f"Invoice {invoice.invoice_number} for {invoice.total} is due on "
        f"{invoice.due_date.isoformat()}.\n"
    )
    body_html = format_html(
        "<p>Invoice <strong>{}</strong> for <strong>{}</strong> is due on {}.</p>",
        invoice.invoice_number,
        invoice.total,
        invoice.due_date.isoformat(),
    )
    return notify(client, Notification.Kind.INVOICE_SENT, subject, body_text, body_html)


def notify_invoice_overdue(invoice: "Invoice") -> Notification:
    client = invoice.client
    subject = f"Invoice {invoice.invoice_number} is overdue"
    body_text = (
        f"Hello {client.contact_person or client.company_name},\n\n"
        f"Invoice {invoice.invoice_number} for {invoice.total} was due on "
        f"{invoice.due_date.isoformat()} and has not been settled.\n"
    )
    body_html = format_html(
        "<p>Invoice <strong>{}</strong> for <strong>{}</strong> was due on {} "
        "and has not been settled.</p>",
        invoice.invoice_number,
        invoice.total,
        invoice.due_date.isoformat(),
    )
    return notify(client, Notification.Kind.INVOICE_OVERDUE, subject, body_text, body_html)


def notify_payment_received(payment: "Payment") -> Notification:
    invoice = payment.invoice
    client = invoice.client
    subject = f"Payment received for invoice {invoice.invoice_number}"
    body_text = (
        f"Hello {client.contact_person or client.company_name},\n\n"
        f"We received {payment.amount} on {payment.payment_date.isoformat()} "
        f"against invoice {invoice.invoice_number}.\n"
    )
    body_html = format_html(
        "<p>We received <strong>{}</strong> on {} against invoice {}.</p>",
        payment.amount,
        payment.payment_date.isoformat(),
        invoice.invoice_number,
    )
    return notify(client, Notification.Kind.PAYMENT_RECEIVED, subject, body_text, body_html)
