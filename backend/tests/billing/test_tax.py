"""
Tests for tax providers.
"""

from decimal import Decimal

import pytest
from django.test import override_settings

from apps.billing.tax import FlatRateTaxProvider, get_tax_provider
from apps.core.exceptions import ValidationError


class TestFlatRateTaxProvider:
    def test_rounds_to_cents(self):
        provider = FlatRateTaxProvider("0.18")

        assert provider.tax_for(None, Decimal("99.99")) == Decimal("18.00")

    def test_zero_rate(self):
        assert FlatRateTaxProvider(0).tax_for(None, Decimal("645.00")) == Decimal("0.00")

    @pytest.mark.parametrize("rate", ["-0.01", "1", "1.5"])
    def test_rejects_out_of_range_rate(self, rate):
        with pytest.raises(ValidationError):
            FlatRateTaxProvider(rate)

    @override_settings(BILLING_TAX_RATE=Decimal("0.05"))
    def test_configured_provider(self):
        provider = get_tax_provider()

        assert provider.tax_for(None, Decimal("100.00")) == Decimal("5.00")
