"""
Plan terms - the validated commercial terms of a catalog plan.

``PlanTerms`` is checked when constructed, so holding an instance means the
terms are internally consistent. The Plan model is built from it and
converts back into it for edits.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from apps.core.exceptions import ValidationError
from apps.core.utils import quantize_money

BILLING_MONTHS: dict[str, int] = {
    "monthly": 1,
    "quarterly": 3,
    "half_yearly": 6,
    "yearly": 12,
}
BILLING_TYPES = ("prepaid", "postpaid")
OVERAGE_POLICIES = ("hard_stop", "charge_overage", "notify_only")


def _to_price(value: Any, label: str) -> Decimal:
    if isinstance(value, float):
        value = str(value)
    try:
        price = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{label} must be a decimal amount") from None
    if not price.is_finite() or price <= 0:
        raise ValidationError(f"{label} must be greater than zero")
    return quantize_money(price)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _ordered_features(features: Iterable[Any]) -> tuple[str, ...]:
    if isinstance(features, str):
        raise ValidationError("features must be a list of names")
    seen: dict[str, None] = {}
    for name in features:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("feature names must be non-empty strings")
        seen.setdefault(name.strip(), None)
    return tuple(seen)


@dataclass(frozen=True)
class PlanTerms:
    """
    Commercial terms of a plan.

    ``billing_months`` may be omitted and is then derived from
    ``billing_cycle``; when given it must agree with the cycle.

    Raises:
        ValidationError: on any inconsistent or out-of-range value.
    """

    name: str
    price_per_user: Decimal
    billing_cycle: str
    billing_months: int | None = None
    billing_type: str = "prepaid"
    min_users: int = 5
    max_users: int = 500
    overage_policy: str = "hard_stop"
    overage_price_per_user: Decimal | None = None
    description: str = ""
    features: tuple[str, ...] = ()
    module_access: Mapping[str, bool] = field(default_factory=dict)
    is_active: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("Plan name is required")
        object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "price_per_user", _to_price(self.price_per_user, "price_per_user"))

        if self.billing_cycle not in BILLING_MONTHS:
            raise ValidationError(f"Invalid billing cycle: {self.billing_cycle}")
        expected_months = BILLING_MONTHS[self.billing_cycle]
        if self.billing_months is None:
            object.__setattr__(self, "billing_months", expected_months)
        elif not _is_int(self.billing_months) or self.billing_months != expected_months:
            raise ValidationError(
                f"billing_months must be {expected_months} for a {self.billing_cycle} plan"
            )

        if self.billing_type not in BILLING_TYPES:
            raise ValidationError(f"Invalid billing type: {self.billing_type}")

        if not _is_int(self.min_users) or not _is_int(self.max_users):
            raise ValidationError("User bounds must be whole numbers")
        if self.min_users < 1:
            raise ValidationError("min_users must be at least 1")
        if self.min_users > self.max_users:
            raise ValidationError("min_users cannot exceed max_users")

        if self.overage_policy not in OVERAGE_POLICIES:
            raise ValidationError(f"Invalid overage policy: {self.overage_policy}")
        if self.overage_price_per_user is not None:
            object.__setattr__(
                self,
                "overage_price_per_user",
                _to_price(self.overage_price_per_user, "overage_price_per_user"),
            )

        object.__setattr__(self, "features", _ordered_features(self.features))

        if not isinstance(self.module_access, Mapping):
            raise ValidationError("module_access must map module names to booleans")
        for module, granted in self.module_access.items():
            if not isinstance(module, str) or not isinstance(granted, bool):
                raise ValidationError("module_access must map module names to booleans")
        object.__setattr__(self, "module_access", dict(self.module_access))

    def as_model_fields(self) -> dict[str, Any]:
        """Keyword arguments for ``Plan(**fields)``."""
        return {
            "name": self.name,
            "description": self.description,
            "price_per_user": self.price_per_user,
            "billing_cycle": self.billing_cycle,
            "billing_months": self.billing_months,
            "billing_type": self.billing_type,
            "min_users": self.min_users,
            "max_users": self.max_users,
            "overage_policy": self.overage_policy,
            "overage_price_per_user": self.overage_price_per_user,
            "features": list(self.features),
            "module_access": dict(self.module_access),
            "is_active": self.is_active,
        }
