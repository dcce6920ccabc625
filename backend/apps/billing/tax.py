"""
Tax providers - pluggable tax computation for invoices.

FlatRateTaxProvider: a single configured rate (BILLING_TAX_RATE)
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING

from apps.core.exceptions import ValidationError
from apps.core.utils import quantize_money

if TYPE_CHECKING:
    from apps.clients.models import Client


class TaxProvider(ABC):
    """Abstract base class for tax-rate providers."""

    @abstractmethod
    def tax_for(self, client: "Client", amount: Decimal) -> Decimal:
        """Tax due on ``amount`` for this client, rounded to cents."""
        pass


class FlatRateTaxProvider(TaxProvider):
    """Applies one rate to every client, e.g. Decimal("0.18") for 18%."""

    def __init__(self, rate: Decimal | str | int) -> None:
        rate = Decimal(str(rate))
        if rate < 0 or rate >= 1:
            raise ValidationError("Tax rate must be between 0 and 1")
        self.rate = rate

    def tax_for(self, client: "Client", amount: Decimal) -> Decimal:
        return quantize_money(amount * self.rate)


def get_tax_provider() -> TaxProvider:
    """Get the configured tax provider."""
    from django.conf import settings

    return FlatRateTaxProvider(settings.BILLING_TAX_RATE)
