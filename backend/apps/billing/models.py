"""
Billing models - invoices, payments and the invoice number counter.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Sum

from apps.core.exceptions import InvalidStateError, ValidationError
from apps.core.models import MoneyField, TimestampedModel


class InvoiceSequence(models.Model):
    """
    Global counter behind invoice numbers.

    The row is locked with select_for_update while a number is taken, so
    concurrent invoice generation never reuses one.
    """

    name = models.CharField(max_length=50, unique=True)
    last_value = models.PositiveBigIntegerField(default=0)

    def __str__(self) -> str:
        return f"{self.name}={self.last_value}"


class Invoice(TimestampedModel):
    """
    A bill for one subscription period.

    ``amount``, ``tax`` and ``total`` are fixed when the invoice is
    generated and ``total == amount + tax`` is checked on every save.
    """

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        SENT = "sent", "Sent"
        PAID = "paid", "Paid"
        OVERDUE = "overdue", "Overdue"
        CANCELLED = "cancelled", "Cancelled"

    TRANSITIONS: dict[str, frozenset[str]] = {
        Status.DRAFT: frozenset({Status.SENT, Status.CANCELLED}),
        Status.SENT: frozenset({Status.PAID, Status.OVERDUE, Status.CANCELLED}),
        Status.OVERDUE: frozenset({Status.PAID, Status.CANCELLED}),
        Status.PAID: frozenset(),
        Status.CANCELLED: frozenset(),
    }

    invoice_number = models.CharField(max_length=50, unique=True)
    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.PROTECT,
        related_name="invoices",
    )
    subscription = models.ForeignKey(
        "subscriptions.Subscription",
        on_delete=models.PROTECT,
        related_name="invoices",
    )
    plan = models.ForeignKey(
        "plans.Plan",
        on_delete=models.PROTECT,
        related_name="invoices",
    )
    payment = models.ForeignKey(
        "billing.Payment",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
        help_text="Payment that settled the invoice",
    )

    invoice_date = models.DateField()
    due_date = models.DateField(db_index=True)
    period_start = models.DateField()
    period_end = models.DateField()

    user_count = models.PositiveIntegerField()
    amount = MoneyField()
    tax = MoneyField(default=Decimal("0.00"))
    total = MoneyField()

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
    )
    notes = models.TextField(blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        ordering = ["-invoice_date", "-id"]
        indexes = [
            models.Index(fields=["status", "due_date"], name="billing_inv_status_due_idx"),
        ]

    def __str__(self) -> str:
        return self.invoice_number

    def save(self, *args, **kwargs):
        if self.total is None:
            self.total = self.amount + self.tax
        if self.total != self.amount + self.tax:
            raise ValidationError("Invoice total must equal amount plus tax")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise InvalidStateError("Invoices are financial records and cannot be deleted")

    def can_transition_to(self, status: str) -> bool:
        return status in self.TRANSITIONS[self.status]

    def transition_to(self, status: str) -> None:
        """Move to ``status`` in memory, rejecting moves the state machine forbids."""
        if not self.can_transition_to(status):
            raise InvalidStateError(f"Cannot move invoice from {self.status} to {status}")
        self.status = status

    def amount_paid(self) -> Decimal:
        return self.payments.aggregate(paid=Sum("amount"))["paid"] or Decimal("0.00")


class PaymentQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise InvalidStateError("Payments are immutable")

    def delete(self):
        raise InvalidStateError("Payments cannot be deleted")


class Payment(models.Model):
    """Funds received against an invoice. Immutable once recorded."""

    class Method(models.TextChoices):
        UPI = "upi", "UPI"
        BANK_TRANSFER = "bank_transfer", "Bank transfer"
        CARD = "card", "Card"
        CASH = "cash", "Cash"
        RAZORPAY = "razorpay", "Razorpay"

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.PROTECT,
        related_name="payments",
    )
    amount = MoneyField()
    currency = models.CharField(max_length=10, default="INR")
    method = models.CharField(max_length=20, choices=Method.choices, default=Method.UPI)
    transaction_id = models.CharField(max_length=255, unique=True, null=True, blank=True)
    payment_date = models.DateField()
    notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = PaymentQuerySet.as_manager()

    class Meta:
        ordering = ["payment_date", "id"]

    def __str__(self) -> str:
        return f"{self.amount} {self.currency} for invoice {self.invoice_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise InvalidStateError("Payments are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise InvalidStateError("Payments cannot be deleted")
