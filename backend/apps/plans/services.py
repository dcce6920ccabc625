"""
Plan catalog services.

Reads are plain queries; every mutation runs in a transaction and writes
one audit entry.
"""

import dataclasses
from typing import TYPE_CHECKING, Any

from django.db import transaction

from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.logging import get_logger
from apps.events.services import record, snapshot
from apps.plans.models import Plan
from apps.plans.terms import PlanTerms

if TYPE_CHECKING:
    from apps.accounts.models import User

logger = get_logger(__name__)

AUDITED_FIELDS = (
    "name",
    "description",
    "price_per_user",
    "billing_cycle",
    "billing_months",
    "billing_type",
    "min_users",
    "max_users",
    "overage_policy",
    "overage_price_per_user",
    "features",
    "module_access",
    "is_active",
)
UPDATABLE_FIELDS = frozenset(f.name for f in dataclasses.fields(PlanTerms))


def get_plan(name: str) -> Plan:
    """Look up a plan by its unique name."""
    plan = Plan.objects.filter(name=name).first()
    if plan is None:
        raise NotFoundError(f"Plan '{name}' not found")
    return plan


def get_plan_by_id(plan_id: int) -> Plan:
    plan = Plan.objects.filter(pk=plan_id).first()
    if plan is None:
        raise NotFoundError("Plan not found")
    return plan


def list_active_plans() -> list[Plan]:
    """Active plans, shortest billing cycle first, then by name."""
    return list(Plan.objects.filter(is_active=True).order_by("billing_months", "name"))


def list_plans(include_inactive: bool = False) -> list[Plan]:
    if not include_inactive:
        return list_active_plans()
    return list(Plan.objects.order_by("billing_months", "name"))


def create_plan(terms: PlanTerms, actor: "User | None" = None) -> Plan:
    """
    Add a plan to the catalog.

    Raises:
        ValidationError: A plan with the same name exists.
    """
    with transaction.atomic():
        if Plan.objects.filter(name=terms.name).exists():
            raise ValidationError(f"Plan '{terms.name}' already exists")
        plan = Plan.from_terms(terms)
        plan.save()
        record(
            "plan.created",
            "plan",
            plan.pk,
            actor=actor,
            new_value=snapshot(plan, AUDITED_FIELDS),
        )

    logger.info(
        "plan_created",
        plan_id=plan.pk,
        name=plan.name,
        price_per_user=str(plan.price_per_user),
        billing_cycle=plan.billing_cycle,
    )
    return plan


def update_plan(plan_id: int, changes: dict[str, Any], actor: "User | None" = None) -> Plan:
    """
    Apply administrative changes to a plan.

    The merged terms are validated as a whole, so changing the cycle without
    the months re-derives the months, while an inconsistent pair is rejected.
    """
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Unknown plan fields: {', '.join(sorted(unknown))}")

    with transaction.atomic():
        plan = Plan.objects.select_for_update().filter(pk=plan_id).first()
        if plan is None:
            raise NotFoundError("Plan not found")

        merged = dict(changes)
        if "billing_cycle" in merged and "billing_months" not in merged:
            merged["billing_months"] = None
        terms = dataclasses.replace(plan.to_terms(), **merged)

        if terms.name != plan.name and Plan.objects.filter(name=terms.name).exists():
            raise ValidationError(f"Plan '{terms.name}' already exists")

        before = snapshot(plan, AUDITED_FIELDS)
        for name, value in terms.as_model_fields().items():
            setattr(plan, name, value)
        plan.save()
        record(
            "plan.updated",
            "plan",
            plan.pk,
            actor=actor,
            old_value=before,
            new_value=snapshot(plan, AUDITED_FIELDS),
        )

    logger.info("plan_updated", plan_id=plan.pk, fields=sorted(changes))
    return plan


def deactivate_plan(plan_id: int, actor: "User | None" = None) -> Plan:
    """
    Retire a plan from the catalog.

    Existing subscriptions keep referencing it; it can no longer be used
    for new subscriptions or invoices.
    """
    with transaction.atomic():
        plan = Plan.objects.select_for_update().filter(pk=plan_id).first()
        if plan is None:
            raise NotFoundError("Plan not found")
        if not plan.is_active:
            return plan

        plan.is_active = False
        plan.save(update_fields=["is_active", "updated_at"])
        record(
            "plan.deactivated",
            "plan",
            plan.pk,
            actor=actor,
            old_value={"is_active": True},
            new_value={"is_active": False},
        )

    logger.info("plan_deactivated", plan_id=plan.pk, name=plan.name)
    return plan
