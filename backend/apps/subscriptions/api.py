"""
Subscription API endpoints.
"""

from django.db import transaction
from django.http import HttpRequest
from django.utils import timezone
from ninja import Router

from apps.billing.services import generate_invoice
from apps.clients.services import get_client
from apps.core.schemas import ErrorResponse, api_success
from apps.core.security import BearerAuth, HrmsApiKeyAuth
from apps.plans.services import get_plan_by_id
from apps.subscriptions.schemas import (
    AccessGrantResponse,
    AccessValidationRequest,
    ProvisionResponse,
    RenewalResponse,
    RenewRequest,
    SubscriptionCreateRequest,
    SubscriptionListResponse,
    SubscriptionResponse,
    UserCountRequest,
)
from apps.subscriptions.services import (
    cancel_subscription,
    change_user_count,
    create_subscription,
    get_subscription,
    list_subscriptions,
    provision_tenant,
    renew,
    validate_access,
)

router = Router(tags=["subscriptions"])
bearer_auth = BearerAuth()

hrms_router = Router(tags=["hrms"])


@router.get(
    "",
    response={200: SubscriptionListResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="listSubscriptions",
    summary="List subscriptions",
)
def list_subscriptions_endpoint(
    request: HttpRequest,
    client_id: int | None = None,
    status: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> dict:
    items, total = list_subscriptions(
        client_id=client_id,
        status=status,
        limit=max(1, min(limit, 200)),
        offset=max(0, offset),
    )
    return api_success({"items": items, "total": total}, message="Subscriptions fetched")


@router.post(
    "",
    response={201: SubscriptionResponse, 400: ErrorResponse, 401: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="createSubscription",
    summary="Put a client on a plan",
)
def create_subscription_endpoint(
    request: HttpRequest, payload: SubscriptionCreateRequest
) -> tuple[int, dict]:
    subscription = create_subscription(
        get_client(payload.client_id),
        get_plan_by_id(payload.plan_id),
        payload.user_count,
        payload.start_date or timezone.localdate(),
        actor=request.auth,
        auto_renew=payload.auto_renew,
        remarks=payload.remarks,
    )
    return 201, api_success(subscription, message="Subscription created")


@router.get(
    "/{subscription_id}",
    response={200: SubscriptionResponse, 401: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="getSubscription",
    summary="Get a subscription",
)
def get_subscription_endpoint(request: HttpRequest, subscription_id: int) -> dict:
    return api_success(get_subscription(subscription_id), message="Subscription fetched")


@router.post(
    "/{subscription_id}/renew",
    response={
        200: RenewalResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        404: ErrorResponse,
        409: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="renewSubscription",
    summary="Renew for another period and invoice it",
)
def renew_subscription_endpoint(
    request: HttpRequest, subscription_id: int, payload: RenewRequest
) -> dict:
    as_of = payload.as_of or timezone.localdate()
    with transaction.atomic():
        renewal = renew(subscription_id, as_of, actor=request.auth)
        subscription = renewal.subscription
        invoice = generate_invoice(
            subscription,
            subscription.plan,
            renewal.period_start,
            grace_days=payload.grace_days,
            actor=request.auth,
        )
    return api_success(
        {
            "subscription": subscription,
            "period_start": renewal.period_start,
            "invoice": invoice,
        },
        message="Subscription renewed",
    )


@router.post(
    "/{subscription_id}/user-count",
    response={
        200: SubscriptionResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        404: ErrorResponse,
        409: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="changeSubscriptionUserCount",
    summary="Change the billed user count",
)
def change_user_count_endpoint(
    request: HttpRequest, subscription_id: int, payload: UserCountRequest
) -> dict:
    subscription = change_user_count(subscription_id, payload.user_count, actor=request.auth)
    return api_success(subscription, message="User count updated")


@router.post(
    "/{subscription_id}/cancel",
    response={200: SubscriptionResponse, 401: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse},
    auth=bearer_auth,
    operation_id="cancelSubscription",
    summary="Cancel a subscription",
)
def cancel_subscription_endpoint(request: HttpRequest, subscription_id: int) -> dict:
    subscription = cancel_subscription(subscription_id, actor=request.auth)
    return api_success(subscription, message="Subscription cancelled")


@router.post(
    "/{subscription_id}/provision",
    response={
        200: ProvisionResponse,
        401: ErrorResponse,
        404: ErrorResponse,
        409: ErrorResponse,
        502: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="provisionTenant",
    summary="Create or re-enable the client's HRMS tenant",
)
def provision_tenant_endpoint(request: HttpRequest, subscription_id: int) -> dict:
    client = provision_tenant(subscription_id, actor=request.auth)
    return api_success(client, message="HRMS tenant active")


@hrms_router.post(
    "/validate-access",
    response={
        200: AccessGrantResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
    },
    auth=HrmsApiKeyAuth(),
    operation_id="validateHrmsAccess",
    summary="Check a client's HRMS access against its subscription",
)
def validate_access_endpoint(request: HttpRequest, payload: AccessValidationRequest) -> dict:
    grant = validate_access(
        payload.client_id,
        payload.module,
        payload.as_of or timezone.localdate(),
    )
    subscription = grant.subscription
    return api_success(
        {
            "subscription_id": subscription.pk,
            "plan_name": subscription.plan.name,
            "expiry_date": subscription.expiry_date,
            "max_users": subscription.plan.max_users,
            "modules": grant.modules,
        },
        message="Access granted",
    )
