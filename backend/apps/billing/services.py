"""
Billing services - invoice generation and payment reconciliation.

Every state change runs in one transaction together with its audit entry.
The invoice counter and the invoice row being paid are locked with
select_for_update so concurrent requests serialize on them.
"""

from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.billing.models import Invoice, InvoiceSequence, Payment
from apps.billing.tax import TaxProvider, get_tax_provider
from apps.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from apps.core.logging import get_logger
from apps.core.models import MONEY_MAX
from apps.core.utils import add_months, quantize_money
from apps.events.services import record, snapshot
from apps.notifications.services import (
    notify_invoice_overdue,
    notify_invoice_sent,
    notify_payment_received,
)
from apps.plans.models import Plan
from apps.subscriptions.models import Subscription

if TYPE_CHECKING:
    from apps.accounts.models import User

logger = get_logger(__name__)

INVOICE_SEQUENCE = "invoice"
AUDITED_FIELDS = (
    "invoice_number",
    "client",
    "subscription",
    "plan",
    "invoice_date",
    "due_date",
    "period_start",
    "period_end",
    "user_count",
    "amount",
    "tax",
    "total",
    "status",
)


def next_invoice_number() -> str:
    """
    Take the next number from the global counter.

    Must run inside the caller's transaction so the number is released if
    the invoice is not saved.
    """
    sequence, _ = InvoiceSequence.objects.select_for_update().get_or_create(
        name=INVOICE_SEQUENCE
    )
    sequence.last_value += 1
    sequence.save(update_fields=["last_value"])
    return f"{settings.INVOICE_NUMBER_PREFIX}-{sequence.last_value:06d}"


def compute_amount(plan: Plan, user_count: int) -> Decimal:
    """
    Base charge for one billing period.

    Seats up to ``max_users`` are billed at the plan rate. Under
    charge_overage, seats above it are billed at the plan's overage rate,
    which defaults to the base rate.
    """
    if plan.overage_policy == Plan.OveragePolicy.CHARGE_OVERAGE and user_count > plan.max_users:
        excess = user_count - plan.max_users
        amount = plan.price_per_user * plan.max_users + plan.overage_rate * excess
    else:
        amount = plan.price_per_user * user_count
    return quantize_money(amount)


def get_invoice(invoice_id: int) -> Invoice:
    invoice = Invoice.objects.select_related("client", "plan").filter(pk=invoice_id).first()
    if invoice is None:
        raise NotFoundError("Invoice not found")
    return invoice


def list_invoices(
    client_id: int | None = None,
    subscription_id: int | None = None,
    status: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Invoice], int]:
    qs = Invoice.objects.all()
    if client_id:
        qs = qs.filter(client_id=client_id)
    if subscription_id:
        qs = qs.filter(subscription_id=subscription_id)
    if status:
        qs = qs.filter(status=status)
    return list(qs[offset : offset + limit]), qs.count()


def _lock_invoice(invoice_id: int) -> Invoice:
    invoice = Invoice.objects.select_for_update().filter(pk=invoice_id).first()
    if invoice is None:
        raise NotFoundError("Invoice not found")
    return invoice


def generate_invoice(
    subscription: Subscription,
    plan: Plan,
    billing_period_start: date,
    *,
    tax_provider: TaxProvider | None = None,
    grace_days: int | None = None,
    invoice_date: date | None = None,
    notes: str = "",
    actor: "User | None" = None,
) -> Invoice:
    """
    Create a draft invoice for one billing period of a subscription.

    Args:
        subscription: Subscription being billed; must be active
        plan: Plan whose terms apply; must be active
        billing_period_start: First day of the billed period
        tax_provider: Tax source (default: configured flat rate)
        grace_days: Days from invoice date to due date (default: INVOICE_GRACE_DAYS)
        invoice_date: Issue date (default: the period start)
        notes: Free text printed on the invoice
        actor: User generating the invoice

    Raises:
        ValidationError: Subscription or plan inactive, negative grace period,
            or a total too large to store.
    """
    if subscription.status != Subscription.Status.ACTIVE:
        raise ValidationError("Cannot invoice an inactive subscription")
    if not plan.is_active:
        raise ValidationError(f"Plan '{plan.name}' is not active")
    if grace_days is None:
        grace_days = settings.INVOICE_GRACE_DAYS
    if grace_days < 0:
        raise ValidationError("grace_days cannot be negative")

    tax_provider = tax_provider or get_tax_provider()
    invoice_date = invoice_date or billing_period_start
    amount = compute_amount(plan, subscription.user_count)
    tax = quantize_money(tax_provider.tax_for(subscription.client, amount))
    if tax < 0:
        raise ValidationError("Tax cannot be negative")
    if amount + tax > MONEY_MAX:
        raise ValidationError(f"Invoice total exceeds {MONEY_MAX}")

    with transaction.atomic():
        invoice = Invoice.objects.create(
            invoice_number=next_invoice_number(),
            client=subscription.client,
            subscription=subscription,
            plan=plan,
            invoice_date=invoice_date,
            due_date=invoice_date + timedelta(days=grace_days),
            period_start=billing_period_start,
            period_end=add_months(billing_period_start, plan.billing_months) - timedelta(days=1),
            user_count=subscription.user_count,
            amount=amount,
            tax=tax,
            total=amount + tax,
            notes=notes,
            created_by=actor,
        )
        record(
            "invoice.generated",
            "invoice",
            invoice.pk,
            actor=actor,
            new_value=snapshot(invoice, AUDITED_FIELDS),
        )

    logger.info(
        "invoice_generated",
        invoice_id=invoice.pk,
        invoice_number=invoice.invoice_number,
        subscription_id=subscription.pk,
        amount=str(invoice.amount),
        tax=str(invoice.tax),
        total=str(invoice.total),
    )
    return invoice


def send_invoice(invoice_id: int, actor: "User | None" = None) -> Invoice:
    """Issue a draft invoice to the client."""
    with transaction.atomic():
        invoice = _lock_invoice(invoice_id)
        old_status = invoice.status
        invoice.transition_to(Invoice.Status.SENT)
        invoice.sent_at = timezone.now()
        invoice.save(update_fields=["status", "sent_at", "updated_at"])
        record(
            "invoice.sent",
            "invoice",
            invoice.pk,
            actor=actor,
            old_value={"status": old_status},
            new_value={"status": invoice.status},
        )
        notify_invoice_sent(invoice)

    logger.info("invoice_sent", invoice_id=invoice.pk, invoice_number=invoice.invoice_number)
    return invoice


def record_payment(
    invoice_id: int,
    amount: Decimal | str | int,
    payment_date: date,
    method: str,
    *,
    transaction_id: str | None = None,
    notes: str = "",
    actor: "User | None" = None,
) -> Payment:
    """
    Record funds received against an invoice.

    When the payments on the invoice add up to its total the invoice becomes
    paid and links the settling payment. A partial payment leaves the status
    as it was.

    Raises:
        NotFoundError: Unknown invoice.
        InvalidStateError: Invoice is draft, paid or cancelled.
        ValidationError: Amount not positive or above the largest storable amount,
            unknown method, or duplicate transaction id.
    """
    try:
        amount = Decimal(str(amount))
    except InvalidOperation:
        raise ValidationError("Payment amount must be a decimal amount") from None
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Payment amount must be greater than zero")
    amount = quantize_money(amount)
    if amount > MONEY_MAX:
        raise ValidationError(f"Payment amount cannot exceed {MONEY_MAX}")
    if method not in Payment.Method.values:
        raise ValidationError(f"Invalid payment method: {method}")

    with transaction.atomic():
        invoice = _lock_invoice(invoice_id)
        if invoice.status == Invoice.Status.CANCELLED:
            raise InvalidStateError("Cannot record a payment on a cancelled invoice")
        if invoice.status == Invoice.Status.PAID:
            raise InvalidStateError("Invoice is already paid")
        if invoice.status == Invoice.Status.DRAFT:
            raise InvalidStateError("Invoice has not been sent yet")

        if transaction_id and Payment.objects.filter(transaction_id=transaction_id).exists():
            raise ValidationError("A payment with this transaction id already exists")
        try:
            with transaction.atomic():
                payment = Payment.objects.create(
                    invoice=invoice,
                    amount=amount,
                    currency=settings.BILLING_CURRENCY,
                    method=method,
                    transaction_id=transaction_id or None,
                    payment_date=payment_date,
                    notes=notes,
                    created_by=actor,
                )
        except IntegrityError:
            raise ValidationError("A payment with this transaction id already exists") from None

        old_status = invoice.status
        paid_total = invoice.amount_paid()
        if paid_total >= invoice.total:
            invoice.transition_to(Invoice.Status.PAID)
            invoice.payment = payment
            invoice.paid_at = timezone.now()
            invoice.save(update_fields=["status", "payment", "paid_at", "updated_at"])

        record(
            "payment.recorded",
            "payment",
            payment.pk,
            actor=actor,
            new_value={
                **snapshot(payment, ("invoice", "amount", "method", "transaction_id", "payment_date")),
                "amount_paid": str(paid_total),
                "invoice_status": invoice.status,
                "previous_invoice_status": old_status,
            },
        )
        notify_payment_received(payment)

    logger.info(
        "payment_recorded",
        payment_id=payment.pk,
        invoice_id=invoice.pk,
        amount=str(amount),
        amount_paid=str(paid_total),
        invoice_status=invoice.status,
    )
    return payment


def mark_overdue_sweep(as_of: date, actor: "User | None" = None) -> list[Invoice]:
    """
    Move sent invoices whose due date is before ``as_of`` to overdue.

    Depends only on stored invoices and ``as_of``. Invoices already overdue
    are not touched, so repeating the sweep is a no-op.
    """
    overdue: list[Invoice] = []
    candidate_ids = list(
        Invoice.objects.filter(status=Invoice.Status.SENT, due_date__lt=as_of).values_list(
            "pk", flat=True
        )
    )
    for invoice_id in candidate_ids:
        with transaction.atomic():
            invoice = _lock_invoice(invoice_id)
            if invoice.status != Invoice.Status.SENT or invoice.due_date >= as_of:
                continue
            invoice.transition_to(Invoice.Status.OVERDUE)
            invoice.save(update_fields=["status", "updated_at"])
            record(
                "invoice.overdue",
                "invoice",
                invoice.pk,
                actor=actor,
                old_value={"status": Invoice.Status.SENT},
                new_value={"status": Invoice.Status.OVERDUE, "as_of": as_of.isoformat()},
            )
            notify_invoice_overdue(invoice)
        overdue.append(invoice)

    logger.info("overdue_sweep_completed", as_of=as_of.isoformat(), marked_overdue=len(overdue))
    return overdue


def cancel_invoice(invoice_id: int, actor: "User | None" = None) -> Invoice:
    """
    Cancel an invoice that has not been paid.

    Raises:
        NotFoundError: Unknown invoice.
        InvalidStateError: Invoice is paid or already cancelled.
    """
    with transaction.atomic():
        invoice = _lock_invoice(invoice_id)
        if invoice.status == Invoice.Status.PAID:
            raise InvalidStateError("Cannot cancel a paid invoice")
        old_status = invoice.status
        invoice.transition_to(Invoice.Status.CANCELLED)
        invoice.cancelled_at = timezone.now()
        invoice.save(update_fields=["status", "cancelled_at", "updated_at"])
        record(
            "invoice.cancelled",
            "invoice",
            invoice.pk,
            actor=actor,
            old_value={"status": old_status},
            new_value={"status": invoice.status},
        )

    logger.info("invoice_cancelled", invoice_id=invoice.pk, previous_status=old_status)
    return invoice
