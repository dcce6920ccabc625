"""
Factories for clients app models.
"""

import factory
from factory.django import DjangoModelFactory

from apps.clients.models import Client


class ClientFactory(DjangoModelFactory):
    """Factory for Client model."""

    class Meta:
        model = Client

    company_name = factory.Faker("company")
    contact_person = factory.Faker("name")
    email = factory.Sequence(lambda n: f"billing{n}@client.example")
    phone = "9876543210"
    city = "Pune"
    state = "Maharashtra"
    status = Client.Status.ACTIVE
