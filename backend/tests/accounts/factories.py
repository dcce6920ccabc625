"""
Factories for accounts app models.

Used in tests to create test data.
"""

import factory
from factory.django import DjangoModelFactory

from apps.accounts.models import User

DEFAULT_PASSWORD = "correct-horse-battery"


class UserFactory(DjangoModelFactory):
    """Factory for User model."""

    class Meta:
        model = User

    email = factory.Sequence(lambda n: f"staff{n}@crm.example")
    name = factory.Faker("name")
    role = User.Role.MANAGER
    password = factory.django.Password(DEFAULT_PASSWORD)
    is_active = True
    is_staff = False
