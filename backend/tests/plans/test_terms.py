"""
Tests for PlanTerms validation.
"""

from decimal import Decimal

import pytest

from apps.core.exceptions import ValidationError
from apps.plans.terms import PlanTerms


def make_terms(**overrides) -> PlanTerms:
    values = {"name": "Silver", "price_per_user": Decimal("129"), "billing_cycle": "quarterly"}
    values.update(overrides)
    return PlanTerms(**values)


class TestPlanTerms:
    def test_months_derived_from_cycle(self):
        assert make_terms().billing_months == 3
        assert make_terms(billing_cycle="half_yearly").billing_months == 6
        assert make_terms(billing_cycle="yearly").billing_months == 12
        assert make_terms(billing_cycle="monthly").billing_months == 1

    def test_price_is_quantized(self):
        assert str(make_terms(price_per_user="129").price_per_user) == "129.00"

    def test_defaults(self):
        terms = make_terms()

        assert terms.billing_type == "prepaid"
        assert terms.min_users == 5
        assert terms.max_users == 500
        assert terms.overage_policy == "hard_stop"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": " "},
            {"price_per_user": Decimal("0")},
            {"price_per_user": Decimal("-1")},
            {"price_per_user": "abc"},
            {"billing_cycle": "weekly"},
            {"billing_cycle": "quarterly", "billing_months": 6},
            {"billing_type": "metered"},
            {"min_users": 0},
            {"min_users": 10, "max_users": 5},
            {"min_users": 2.5},
            {"overage_policy": "ignore"},
            {"overage_price_per_user": Decimal("0")},
            {"features": "Payroll"},
            {"module_access": {"payroll": "yes"}},
        ],
    )
    def test_rejects_inconsistent_terms(self, overrides):
        with pytest.raises(ValidationError):
            make_terms(**overrides)

    def test_matching_months_are_accepted(self):
        assert make_terms(billing_cycle="yearly", billing_months=12).billing_months == 12

    def test_features_are_deduplicated_in_order(self):
        terms = make_terms(features=["Payroll", "Leave", "Payroll"])

        assert terms.features == ("Payroll", "Leave")

    def test_equal_bounds_are_allowed(self):
        assert make_terms(min_users=10, max_users=10).max_users == 10
