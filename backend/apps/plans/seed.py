"""
Default plan catalog.

``seed_catalog`` is idempotent: plans already present by name are left
untouched and counted as skipped.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from django.db import transaction

from apps.core.logging import get_logger
from apps.plans.models import Plan
from apps.plans.services import create_plan
from apps.plans.terms import PlanTerms

if TYPE_CHECKING:
    from apps.accounts.models import User

logger = get_logger(__name__)

HRMS_MODULES = (
    "attendance",
    "leave",
    "payroll",
    "recruitment",
    "performance",
    "analytics",
    "api_access",
)


def _modules(*granted: str) -> dict[str, bool]:
    return {module: module in granted for module in HRMS_MODULES}


DEFAULT_CATALOG: tuple[PlanTerms, ...] = (
    PlanTerms(
        name="Silver",
        description="Quarterly billing plan. Ideal for small teams getting started with HRMS.",
        price_per_user=Decimal("129"),
        billing_cycle="quarterly",
        billing_months=3,
        min_users=5,
        max_users=100,
        overage_policy="hard_stop",
        features=(
            "Attendance Management",
            "Leave Management",
            "Basic Payroll",
            "Employee Self Service",
        ),
        module_access=_modules("attendance", "leave", "payroll"),
    ),
    PlanTerms(
        name="Gold",
        description="Half yearly billing plan. Perfect for growing companies needing advanced features.",
        price_per_user=Decimal("109"),
        billing_cycle="half_yearly",
        billing_months=6,
        min_users=5,
        max_users=300,
        overage_policy="charge_overage",
        features=(
            "Attendance Management",
            "Leave Management",
            "Advanced Payroll",
            "Employee Self Service",
            "Recruitment",
            "Performance Management",
        ),
        module_access=_modules("attendance", "leave", "payroll", "recruitment", "performance"),
    ),
    PlanTerms(
        name="Platinum",
        description="Yearly billing plan. Best value for large enterprises with full feature access.",
        price_per_user=Decimal("99"),
        billing_cycle="yearly",
        billing_months=12,
        min_users=5,
        max_users=500,
        overage_policy="notify_only",
        features=(
            "Attendance Management",
            "Leave Management",
            "Advanced Payroll",
            "Employee Self Service",
            "Recruitment",
            "Performance Management",
            "Analytics & Reports",
            "API Access",
        ),
        module_access=_modules(*HRMS_MODULES),
    ),
)


@dataclass
class SeedResult:
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def seed_catalog(
    catalog: Iterable[PlanTerms] = DEFAULT_CATALOG,
    actor: "User | None" = None,
) -> SeedResult:
    """Create every catalog plan that does not exist yet."""
    result = SeedResult()
    with transaction.atomic():
        for terms in catalog:
            if Plan.objects.filter(name=terms.name).exists():
                result.skipped.append(terms.name)
                continue
            create_plan(terms, actor=actor)
            result.created.append(terms.name)

    logger.info("plan_catalog_seeded", created=result.created, skipped=result.skipped)
    return result
