"""
Plan models - the subscription catalog.
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models

from apps.core.exceptions import ValidationError
from apps.core.models import MoneyField, TimestampedModel
from apps.plans.terms import BILLING_MONTHS, PlanTerms


class Plan(TimestampedModel):
    """
    A catalog plan: per-user price, billing cycle, user bounds and the HRMS
    modules it unlocks.

    Plans are never deleted since invoices reference them; retire one by
    clearing ``is_active``.
    """

    class BillingCycle(models.TextChoices):
        MONTHLY = "monthly", "Monthly"
        QUARTERLY = "quarterly", "Quarterly"
        HALF_YEARLY = "half_yearly", "Half yearly"
        YEARLY = "yearly", "Yearly"

    class BillingType(models.TextChoices):
        PREPAID = "prepaid", "Prepaid"
        POSTPAID = "postpaid", "Postpaid"

    class OveragePolicy(models.TextChoices):
        HARD_STOP = "hard_stop", "Hard stop"
        CHARGE_OVERAGE = "charge_overage", "Charge overage"
        NOTIFY_ONLY = "notify_only", "Notify only"

    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)

    price_per_user = MoneyField()
    billing_cycle = models.CharField(max_length=20, choices=BillingCycle.choices)
    billing_months = models.PositiveSmallIntegerField()
    billing_type = models.CharField(
        max_length=20,
        choices=BillingType.choices,
        default=BillingType.PREPAID,
    )

    min_users = models.PositiveIntegerField(default=5)
    max_users = models.PositiveIntegerField(default=500)

    overage_policy = models.CharField(
        max_length=20,
        choices=OveragePolicy.choices,
        default=OveragePolicy.HARD_STOP,
    )
    overage_price_per_user = MoneyField(
        null=True,
        blank=True,
        help_text="Per-user rate for seats above max_users; base rate when empty",
    )

    features = models.JSONField(default=list, blank=True)
    module_access = models.JSONField(default=dict, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["billing_months", "name"]

    def __str__(self) -> str:
        return self.name

    def clean(self) -> None:
        if self.billing_cycle in BILLING_MONTHS:
            self.billing_months = BILLING_MONTHS[self.billing_cycle]
        try:
            self.to_terms()
        except ValidationError as e:
            raise DjangoValidationError(e.message) from e

    @classmethod
    def from_terms(cls, terms: PlanTerms) -> "Plan":
        return cls(**terms.as_model_fields())

    def to_terms(self) -> PlanTerms:
        """Re-validate the stored fields as PlanTerms."""
        return PlanTerms(
            name=self.name,
            description=self.description,
            price_per_user=self.price_per_user,
            billing_cycle=self.billing_cycle,
            billing_months=self.billing_months,
            billing_type=self.billing_type,
            min_users=self.min_users,
            max_users=self.max_users,
            overage_policy=self.overage_policy,
            overage_price_per_user=self.overage_price_per_user,
            features=tuple(self.features or ()),
            module_access=dict(self.module_access or {}),
            is_active=self.is_active,
        )

    def enabled_modules(self) -> list[str]:
        """Names of the HRMS modules this plan grants, in catalog order."""
        return [name for name, granted in (self.module_access or {}).items() if granted]

    def grants_module(self, module: str) -> bool:
        return bool((self.module_access or {}).get(module, False))

    @property
    def overage_rate(self):
        """Rate billed for seats above max_users under charge_overage."""
        return self.overage_price_per_user or self.price_per_user
