"""
Subscription API schemas.
"""

from datetime import date, datetime

from ninja import Schema
from pydantic import Field

from apps.billing.schemas import InvoiceOut
from apps.clients.schemas import ClientOut


class SubscriptionCreateRequest(Schema):
    client_id: int
    plan_id: int
    user_count: int = Field(..., ge=1)
    start_date: date | None = Field(default=None, description="Defaults to today")
    auto_renew: bool = True
    remarks: str = ""


class RenewRequest(Schema):
    as_of: date | None = Field(default=None, description="Defaults to today")
    grace_days: int | None = Field(default=None, ge=0)


class UserCountRequest(Schema):
    user_count: int = Field(..., ge=1)


class SubscriptionOut(Schema):
    id: int
    client_id: int
    plan_id: int
    plan_name: str
    user_count: int
    start_date: date
    expiry_date: date
    status: str
    overage_billing: bool
    auto_renew: bool
    remarks: str
    cancelled_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def resolve_plan_name(obj) -> str:
        return obj.plan.name


class SubscriptionPage(Schema):
    items: list[SubscriptionOut]
    total: int


class RenewalOut(Schema):
    subscription: SubscriptionOut
    period_start: date
    invoice: InvoiceOut


class SubscriptionResponse(Schema):
    success: bool = True
    data: SubscriptionOut
    message: str = ""


class SubscriptionListResponse(Schema):
    success: bool = True
    data: SubscriptionPage
    message: str = ""


class RenewalResponse(Schema):
    success: bool = True
    data: RenewalOut
    message: str = ""


class ProvisionResponse(Schema):
    success: bool = True
    data: ClientOut
    message: str = ""


class AccessValidationRequest(Schema):
    client_id: int
    user_email: str = Field(..., min_length=1)
    module: str | None = Field(default=None, description="Module the user is opening")
    as_of: date | None = Field(default=None, description="Defaults to today")


class AccessGrantOut(Schema):
    access_granted: bool = True
    subscription_id: int
    plan_name: str
    expiry_date: date
    max_users: int
    modules: list[str]


class AccessGrantResponse(Schema):
    success: bool = True
    data: AccessGrantOut
    message: str = ""
