"""
Plan catalog API schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from ninja import Schema
from pydantic import Field

BillingCycle = Literal["monthly", "quarterly", "half_yearly", "yearly"]
BillingType = Literal["prepaid", "postpaid"]
OveragePolicy = Literal["hard_stop", "charge_overage", "notify_only"]


class PlanCreateRequest(Schema):
    """Terms of a new plan. billing_months is derived from the cycle when omitted."""

    name: str = Field(..., min_length=1, max_length=100, examples=["Silver"])
    description: str = ""
    price_per_user: Decimal = Field(..., examples=["129.00"])
    billing_cycle: BillingCycle
    billing_months: int | None = None
    billing_type: BillingType = "prepaid"
    min_users: int = 5
    max_users: int = 500
    overage_policy: OveragePolicy = "hard_stop"
    overage_price_per_user: Decimal | None = None
    features: list[str] = []
    module_access: dict[str, bool] = {}
    is_active: bool = True


class PlanUpdateRequest(Schema):
    """Partial update; omitted fields keep their current value."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    price_per_user: Decimal | None = None
    billing_cycle: BillingCycle | None = None
    billing_months: int | None = None
    billing_type: BillingType | None = None
    min_users: int | None = None
    max_users: int | None = None
    overage_policy: OveragePolicy | None = None
    overage_price_per_user: Decimal | None = None
    features: list[str] | None = None
    module_access: dict[str, bool] | None = None
    is_active: bool | None = None


class PlanOut(Schema):
    id: int
    name: str
    description: str
    price_per_user: Decimal
    billing_cycle: str
    billing_months: int
    billing_type: str
    min_users: int
    max_users: int
    overage_policy: str
    overage_price_per_user: Decimal | None
    features: list[str]
    module_access: dict[str, bool]
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PlanResponse(Schema):
    success: bool = True
    data: PlanOut
    message: str = ""


class PlanListResponse(Schema):
    success: bool = True
    data: list[PlanOut]
    message: str = ""
