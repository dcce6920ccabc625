"""
Core models - shared base classes and utilities.
"""

from decimal import Decimal

from django.db import models

# Largest amount a MoneyField column holds.
MONEY_MAX = Decimal("9999999999.99")


class TimestampedModel(models.Model):
    """
    Abstract base model with created_at/updated_at timestamps.

    All mutable business entities inherit from this.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class MoneyField(models.DecimalField):
    """Decimal column sized for single-currency amounts."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("max_digits", 12)
        kwargs.setdefault("decimal_places", 2)
        super().__init__(*args, **kwargs)

    def deconstruct(self):
        name, path, args, kwargs = super().deconstruct()
        if kwargs.get("max_digits") == 12:
            del kwargs["max_digits"]
        if kwargs.get("decimal_places") == 2:
            del kwargs["decimal_places"]
        return name, path, args, kwargs
