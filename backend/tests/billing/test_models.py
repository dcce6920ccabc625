"""
Tests for invoice and payment model invariants.
"""

from datetime import date
from decimal import Decimal

import pytest

from apps.billing.models import Invoice, Payment
from apps.core.exceptions import InvalidStateError, ValidationError

from .factories import InvoiceFactory


@pytest.mark.django_db
class TestInvoiceModel:
    def test_total_must_equal_amount_plus_tax(self):
        with pytest.raises(ValidationError):
            InvoiceFactory(amount=Decimal("100.00"), tax=Decimal("18.00"), total=Decimal("100.00"))

    def test_cannot_be_deleted(self):
        invoice = InvoiceFactory()

        with pytest.raises(InvalidStateError):
            invoice.delete()

    @pytest.mark.parametrize(
        ("current", "target", "allowed"),
        [
            ("draft", "sent", True),
            ("draft", "cancelled", True),
            ("draft", "paid", False),
            ("draft", "overdue", False),
            ("sent", "paid", True),
            ("sent", "overdue", True),
            ("sent", "cancelled", True),
            ("overdue", "paid", True),
            ("overdue", "cancelled", True),
            ("overdue", "sent", False),
            ("paid", "cancelled", False),
            ("paid", "overdue", False),
            ("cancelled", "sent", False),
            ("cancelled", "paid", False),
        ],
    )
    def test_transitions(self, current, target, allowed):
        invoice = Invoice(status=current)

        assert invoice.can_transition_to(target) is allowed

    def test_transition_to_rejects_illegal_move(self):
        invoice = Invoice(status=Invoice.Status.PAID)

        with pytest.raises(InvalidStateError):
            invoice.transition_to(Invoice.Status.CANCELLED)

        assert invoice.status == Invoice.Status.PAID


@pytest.mark.django_db
class TestPaymentModel:
    def make_payment(self) -> Payment:
        invoice = InvoiceFactory(status=Invoice.Status.SENT)
        return Payment.objects.create(
            invoice=invoice,
            amount=Decimal("100.00"),
            method=Payment.Method.UPI,
            payment_date=date(2024, 1, 5),
        )

    def test_cannot_be_modified(self):
        payment = self.make_payment()
        payment.amount = Decimal("1.00")

        with pytest.raises(InvalidStateError):
            payment.save()

    def test_cannot_be_deleted(self):
        payment = self.make_payment()

        with pytest.raises(InvalidStateError):
            payment.delete()

    def test_bulk_update_is_blocked(self):
        self.make_payment()

        with pytest.raises(InvalidStateError):
            Payment.objects.all().update(amount=Decimal("1.00"))
