"""
Factories for subscriptions app models.
"""

from datetime import date

import factory
from factory.django import DjangoModelFactory

from apps.core.utils import add_months
from apps.subscriptions.models import Subscription
from tests.clients.factories import ClientFactory
from tests.plans.factories import PlanFactory


class SubscriptionFactory(DjangoModelFactory):
    """Factory for Subscription model. Expiry follows the plan's billing months."""

    class Meta:
        model = Subscription

    client = factory.SubFactory(ClientFactory)
    plan = factory.SubFactory(PlanFactory)
    user_count = 5
    start_date = date(2024, 1, 1)
    expiry_date = factory.LazyAttribute(lambda o: add_months(o.start_date, o.plan.billing_months))
    status = Subscription.Status.ACTIVE
