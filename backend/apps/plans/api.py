"""
Plan catalog API endpoints.

Anyone authenticated can read the catalog; changing it requires the admin
role.
"""

from django.http import HttpRequest
from ninja import Router

from apps.core.schemas import ErrorResponse, api_success
from apps.core.security import BearerAuth, require_admin
from apps.plans.schemas import (
    PlanCreateRequest,
    PlanListResponse,
    PlanResponse,
    PlanUpdateRequest,
)
from apps.plans.services import (
    create_plan,
    deactivate_plan,
    get_plan_by_id,
    list_plans,
    update_plan,
)
from apps.plans.terms import PlanTerms

router = Router(tags=["plans"])
bearer_auth = BearerAuth()


@router.get(
    "",
    response={200: PlanListResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="listPlans",
    summary="List catalog plans",
)
def list_plans_endpoint(request: HttpRequest, include_inactive: bool = False) -> dict:
    return api_success(list_plans(include_inactive=include_inactive), message="Plans fetched")


@router.post(
    "",
    response={201: PlanResponse, 400: ErrorResponse, 401: ErrorResponse, 403: ErrorResponse},
    auth=bearer_auth,
    operation_id="createPlan",
    summary="Add a plan to the catalog",
)
@require_admin
def create_plan_endpoint(request: HttpRequest, payload: PlanCreateRequest) -> tuple[int, dict]:
    data = payload.model_dump()
    data["features"] = tuple(data["features"])
    plan = create_plan(PlanTerms(**data), actor=request.auth)
    return 201, api_success(plan, message="Plan created")


@router.get(
    "/{plan_id}",
    response={200: PlanResponse, 401: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="getPlan",
    summary="Get a plan",
)
def get_plan_endpoint(request: HttpRequest, plan_id: int) -> dict:
    return api_success(get_plan_by_id(plan_id), message="Plan fetched")


@router.patch(
    "/{plan_id}",
    response={
        200: PlanResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="updatePlan",
    summary="Change plan terms",
)
@require_admin
def update_plan_endpoint(request: HttpRequest, plan_id: int, payload: PlanUpdateRequest) -> dict:
    plan = update_plan(plan_id, payload.model_dump(exclude_unset=True), actor=request.auth)
    return api_success(plan, message="Plan updated")


@router.post(
    "/{plan_id}/deactivate",
    response={200: PlanResponse, 401: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="deactivatePlan",
    summary="Retire a plan",
)
@require_admin
def deactivate_plan_endpoint(request: HttpRequest, plan_id: int) -> dict:
    return api_success(deactivate_plan(plan_id, actor=request.auth), message="Plan deactivated")
