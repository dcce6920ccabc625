"""
Factories for billing app models.
"""

from datetime import date, timedelta
from decimal import Decimal

import factory
from factory.django import DjangoModelFactory

from apps.billing.models import Invoice
from tests.subscriptions.factories import SubscriptionFactory


class InvoiceFactory(DjangoModelFactory):
    """Factory for Invoice model: a 5-user Silver quarter, 645.00 with no tax."""

    class Meta:
        model = Invoice

    subscription = factory.SubFactory(SubscriptionFactory)
    client = factory.LazyAttribute(lambda o: o.subscription.client)
    plan = factory.LazyAttribute(lambda o: o.subscription.plan)
    invoice_number = factory.Sequence(lambda n: f"TST-{n:06d}")
    invoice_date = date(2024, 1, 1)
    due_date = factory.LazyAttribute(lambda o: o.invoice_date + timedelta(days=15))
    period_start = date(2024, 1, 1)
    period_end = date(2024, 3, 31)
    user_count = 5
    amount = Decimal("645.00")
    tax = Decimal("0.00")
    total = Decimal("645.00")
    status = Invoice.Status.DRAFT
