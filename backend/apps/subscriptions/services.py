"""
Subscription ledger services.

Seat-count rules are shared by creation and later changes: fewer seats than
the plan minimum is always rejected, while more than the maximum is
governed by the plan's overage policy.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

from django.db import transaction
from django.utils import timezone

from apps.clients.models import Client
from apps.core.exceptions import (
    AccessDeniedError,
    AlreadyActiveError,
    InvalidStateError,
    NotFoundError,
    OverageRejectedError,
    ValidationError,
)
from apps.core.logging import get_logger
from apps.core.utils import add_months
from apps.events.services import record, snapshot
from apps.notifications.services import notify_overage
from apps.plans.models import Plan
from apps.subscriptions.hrms_client import HrmsClient, HrmsError, get_hrms_client
from apps.subscriptions.models import Subscription

if TYPE_CHECKING:
    from apps.accounts.models import User

logger = get_logger(__name__)

AUDITED_FIELDS = (
    "client",
    "plan",
    "user_count",
    "start_date",
    "expiry_date",
    "status",
    "overage_billing",
    "auto_renew",
)


@dataclass
class Renewal:
    """A renewed subscription and the first day of its new period."""

    subscription: Subscription
    period_start: date


@dataclass
class AccessGrant:
    """A client cleared to use the HRMS, with the subscription that covers it."""

    subscription: Subscription
    modules: list[str]


@dataclass
class TenantSweepResult:
    deactivated: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)


def _check_user_count(plan: Plan, user_count: int) -> bool:
    """
    Validate a seat count against the plan bounds.

    Returns True when the count is above the plan maximum and the policy
    lets it through.
    """
    if isinstance(user_count, bool) or not isinstance(user_count, int):
        raise ValidationError("user_count must be a whole number")
    if user_count < plan.min_users:
        raise ValidationError(f"Minimum {plan.min_users} users required for {plan.name} plan")
    if user_count <= plan.max_users:
        return False
    if plan.overage_policy == Plan.OveragePolicy.HARD_STOP:
        raise OverageRejectedError(
            f"Maximum {plan.max_users} users allowed for {plan.name} plan",
            details={"user_count": user_count, "max_users": plan.max_users},
        )
    return True


def _lock(subscription_id: int) -> Subscription:
    subscription = Subscription.objects.select_for_update().filter(pk=subscription_id).first()
    if subscription is None:
        raise NotFoundError("Subscription not found")
    return subscription


def get_subscription(subscription_id: int) -> Subscription:
    subscription = (
        Subscription.objects.select_related("client", "plan").filter(pk=subscription_id).first()
    )
    if subscription is None:
        raise NotFoundError("Subscription not found")
    return subscription


def list_subscriptions(
    client_id: int | None = None,
    status: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Subscription], int]:
    qs = Subscription.objects.select_related("client", "plan")
    if client_id:
        qs = qs.filter(client_id=client_id)
    if status:
        qs = qs.filter(status=status)
    return list(qs[offset : offset + limit]), qs.count()


def create_subscription(
    client: Client,
    plan: Plan,
    user_count: int,
    start_date: date,
    actor: "User | None" = None,
    *,
    auto_renew: bool = True,
    remarks: str = "",
) -> Subscription:
    """
    Put a client on a plan.

    The first period runs from ``start_date`` for the plan's billing months.

    Raises:
        ValidationError: Plan or client inactive, or too few users.
        OverageRejectedError: Too many users on a hard_stop plan.
    """
    if not plan.is_active:
        raise ValidationError(f"Plan '{plan.name}' is not active")
    if client.status != Client.Status.ACTIVE:
        raise ValidationError("Client is not active")
    over_limit = _check_user_count(plan, user_count)

    with transaction.atomic():
        subscription = Subscription.objects.create(
            client=client,
            plan=plan,
            user_count=user_count,
            start_date=start_date,
            expiry_date=add_months(start_date, plan.billing_months),
            overage_billing=over_limit and plan.overage_policy == Plan.OveragePolicy.CHARGE_OVERAGE,
            auto_renew=auto_renew,
            remarks=remarks,
            created_by=actor,
        )
        record(
            "subscription.created",
            "subscription",
            subscription.pk,
            actor=actor,
            new_value=snapshot(subscription, AUDITED_FIELDS),
        )
        if over_limit and plan.overage_policy == Plan.OveragePolicy.NOTIFY_ONLY:
            notify_overage(subscription)

    logger.info(
        "subscription_created",
        subscription_id=subscription.pk,
        client_id=client.pk,
        plan=plan.name,
        user_count=user_count,
        expiry_date=subscription.expiry_date.isoformat(),
        over_limit=over_limit,
    )
    return subscription


def renew(subscription_id: int, as_of: date, actor: "User | None" = None) -> Renewal:
    """
    Extend a lapsed subscription by one billing period.

    The new period starts at the previous expiry date, not at ``as_of``, so
    consecutive periods never drift or overlap.

    Raises:
        NotFoundError: Unknown subscription.
        InvalidStateError: The subscription was cancelled.
        AlreadyActiveError: ``as_of`` is before the current expiry date.
    """
    with transaction.atomic():
        subscription = _lock(subscription_id)
        if subscription.status == Subscription.Status.CANCELLED:
            raise InvalidStateError("Cannot renew a cancelled subscription")
        if as_of < subscription.expiry_date:
            raise AlreadyActiveError(
                f"Subscription is active until {subscription.expiry_date.isoformat()}"
            )

        old = snapshot(subscription, ("expiry_date", "status"))
        period_start = subscription.expiry_date
        subscription.expiry_date = add_months(period_start, subscription.plan.billing_months)
        subscription.status = Subscription.Status.ACTIVE
        subscription.save(update_fields=["expiry_date", "status", "updated_at"])
        record(
            "subscription.renewed",
            "subscription",
            subscription.pk,
            actor=actor,
            old_value=old,
            new_value=snapshot(subscription, ("expiry_date", "status")),
        )

    logger.info(
        "subscription_renewed",
        subscription_id=subscription.pk,
        period_start=period_start.isoformat(),
        expiry_date=subscription.expiry_date.isoformat(),
    )
    return Renewal(subscription=subscription, period_start=period_start)


def change_user_count(
    subscription_id: int, new_count: int, actor: "User | None" = None
) -> Subscription:
    """Change the billed seat count under the same rules as creation."""
    with transaction.atomic():
        subscription = _lock(subscription_id)
        if subscription.status == Subscription.Status.CANCELLED:
            raise InvalidStateError("Cannot change users on a cancelled subscription")

        plan = subscription.plan
        over_limit = _check_user_count(plan, new_count)
        old = snapshot(subscription, ("user_count", "overage_billing"))

        subscription.user_count = new_count
        subscription.overage_billing = (
            over_limit and plan.overage_policy == Plan.OveragePolicy.CHARGE_OVERAGE
        )
        subscription.save(update_fields=["user_count", "overage_billing", "updated_at"])
        record(
            "subscription.user_count_changed",
            "subscription",
            subscription.pk,
            actor=actor,
            old_value=old,
            new_value=snapshot(subscription, ("user_count", "overage_billing")),
        )
        if over_limit and plan.overage_policy == Plan.OveragePolicy.NOTIFY_ONLY:
            notify_overage(subscription)

    logger.info(
        "subscription_user_count_changed",
        subscription_id=subscription.pk,
        old_count=old["user_count"],
        user_count=new_count,
    )
    return subscription


def cancel_subscription(subscription_id: int, actor: "User | None" = None) -> Subscription:
    with transaction.atomic():
        subscription = _lock(subscription_id)
        if subscription.status == Subscription.Status.CANCELLED:
            raise InvalidStateError("Subscription is already cancelled")

        old_status = subscription.status
        subscription.status = Subscription.Status.CANCELLED
        subscription.cancelled_at = timezone.now()
        subscription.save(update_fields=["status", "cancelled_at", "updated_at"])
        record(
            "subscription.cancelled",
            "subscription",
            subscription.pk,
            actor=actor,
            old_value={"status": old_status},
            new_value={"status": subscription.status},
        )

    logger.info("subscription_cancelled", subscription_id=subscription.pk)
    return subscription


def expire_subscriptions_sweep(as_of: date, actor: "User | None" = None) -> list[Subscription]:
    """
    Mark active subscriptions whose expiry date is on or before ``as_of`` as
    expired.

    Each transition commits on its own. Running the sweep again changes
    nothing.
    """
    expired: list[Subscription] = []
    candidate_ids = list(
        Subscription.objects.filter(
            status=Subscription.Status.ACTIVE, expiry_date__lte=as_of
        ).values_list("pk", flat=True)
    )
    for subscription_id in candidate_ids:
        with transaction.atomic():
            subscription = _lock(subscription_id)
            if not subscription.is_active or subscription.expiry_date > as_of:
                continue
            subscription.status = Subscription.Status.EXPIRED
            subscription.save(update_fields=["status", "updated_at"])
            record(
                "subscription.expired",
                "subscription",
                subscription.pk,
                actor=actor,
                old_value={"status": Subscription.Status.ACTIVE},
                new_value={"status": Subscription.Status.EXPIRED},
            )
        expired.append(subscription)

    logger.info("expiry_sweep_completed", as_of=as_of.isoformat(), expired=len(expired))
    return expired


def deactivate_expired_tenants(
    as_of: date,
    hrms: HrmsClient | None = None,
    actor: "User | None" = None,
) -> TenantSweepResult:
    """
    Switch off HRMS tenants of clients with no current subscription.

    A client is covered while it holds an active subscription whose expiry
    date is after ``as_of``. An HRMS failure for one client is logged
    and counted; the sweep moves on to the next.
    """
    hrms = hrms or get_hrms_client()
    result = TenantSweepResult()

    covered = Subscription.objects.filter(
        status=Subscription.Status.ACTIVE, expiry_date__gt=as_of
    ).values("client_id")
    clients = list(
        Client.objects.filter(hrms_status=Client.HrmsStatus.ACTIVE).exclude(pk__in=covered)
    )

    for client in clients:
        if not client.hrms_db_name:
            logger.warning("tenant_deactivation_skipped", client_id=client.pk, reason="no_db_name")
            result.failed.append(client.pk)
            continue
        try:
            hrms.deactivate_tenant(client.hrms_db_name)
        except HrmsError as e:
            logger.warning("tenant_deactivation_failed", client_id=client.pk, error=e.message)
            result.failed.append(client.pk)
            continue

        with transaction.atomic():
            locked = Client.objects.select_for_update().get(pk=client.pk)
            locked.hrms_status = Client.HrmsStatus.INACTIVE
            locked.save(update_fields=["hrms_status", "updated_at"])
            record(
                "client.hrms_deactivated",
                "client",
                locked.pk,
                actor=actor,
                old_value={"hrms_status": Client.HrmsStatus.ACTIVE},
                new_value={"hrms_status": Client.HrmsStatus.INACTIVE},
            )
        result.deactivated.append(client.pk)

    logger.info(
        "tenant_sweep_completed",
        as_of=as_of.isoformat(),
        deactivated=len(result.deactivated),
        failed=len(result.failed),
    )
    return result


def provision_tenant(
    subscription_id: int,
    hrms: HrmsClient | None = None,
    actor: "User | None" = None,
) -> Client:
    """
    Create or re-enable the client's HRMS tenant for an active subscription.

    A client that already has a tenant database is reactivated with the
    plan's limits; otherwise a new tenant is created.
    """
    hrms = hrms or get_hrms_client()
    subscription = get_subscription(subscription_id)
    if not subscription.is_active:
        raise InvalidStateError("Only active subscriptions can be provisioned")

    client, plan = subscription.client, subscription.plan
    if client.hrms_status == Client.HrmsStatus.ACTIVE:
        raise InvalidStateError("HRMS tenant is already active")

    if client.hrms_db_name:
        hrms.reactivate_tenant(client.hrms_db_name, plan)
        tenant_id, db_name = client.hrms_tenant_id, client.hrms_db_name
        action = "client.hrms_reactivated"
    else:
        provisioned = hrms.provision_tenant(client, plan)
        tenant_id, db_name = provisioned.tenant_id, provisioned.db_name
        action = "client.hrms_provisioned"

    with transaction.atomic():
        locked = Client.objects.select_for_update().get(pk=client.pk)
        old_status = locked.hrms_status
        locked.hrms_tenant_id = tenant_id
        locked.hrms_db_name = db_name
        locked.hrms_status = Client.HrmsStatus.ACTIVE
        locked.hrms_activated_at = timezone.now()
        locked.save(
            update_fields=[
                "hrms_tenant_id",
                "hrms_db_name",
                "hrms_status",
                "hrms_activated_at",
                "updated_at",
            ]
        )
        record(
            action,
            "client",
            locked.pk,
            actor=actor,
            old_value={"hrms_status": old_status},
            new_value={
                "hrms_status": locked.hrms_status,
                "hrms_tenant_id": tenant_id,
                "hrms_db_name": db_name,
            },
        )

    logger.info("tenant_provisioned", client_id=locked.pk, action=action, db_name=db_name)
    return locked


def _deny(client_id: int, module: str | None, reason: str, message: str) -> AccessDeniedError:
    logger.info("hrms_access_denied", client_id=client_id, module=module, reason=reason)
    return AccessDeniedError(message, details={"reason": reason})


def validate_access(client_id: int, module: str | None, as_of: date) -> AccessGrant:
    """
    Decide whether a client's HRMS users may sign in, optionally to one module.

    Access needs an active client holding an active subscription that has
    not reached its expiry date, on a plan that grants ``module`` when one
    is named. Every decision is logged.

    Raises:
        NotFoundError: Unknown client.
        AccessDeniedError: Any of the conditions above does not hold.
    """
    client = Client.objects.filter(pk=client_id).first()
    if client is None:
        raise NotFoundError("Client not found")

    subscription = (
        Subscription.objects.select_related("plan")
        .filter(client=client, status=Subscription.Status.ACTIVE)
        .order_by("-expiry_date", "-created_at")
        .first()
    )
    if subscription is None:
        raise _deny(client_id, module, "no_subscription", "Client has no active subscription")
    if client.status != Client.Status.ACTIVE:
        raise _deny(client_id, module, "client_inactive", "Client account is not active")
    if not subscription.covers(as_of):
        raise _deny(client_id, module, "expired", "Client subscription has expired")
    if module and not subscription.plan.grants_module(module):
        raise _deny(
            client_id,
            module,
            "module_not_granted",
            f"The {subscription.plan.name} plan does not include the {module} module",
        )

    logger.info(
        "hrms_access_granted",
        client_id=client_id,
        module=module,
        subscription_id=subscription.pk,
        plan=subscription.plan.name,
    )
    return AccessGrant(subscription=subscription, modules=subscription.plan.enabled_modules())
