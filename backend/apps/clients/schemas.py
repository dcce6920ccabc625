"""
Client API schemas.
"""

from datetime import datetime
from typing import Literal

from ninja import Schema
from pydantic import EmailStr, Field

CompanySize = Literal["1-10", "11-50", "51-200", "201-500", "500+"]


class ClientCreateRequest(Schema):
    company_name: str = Field(..., min_length=1, max_length=255)
    contact_person: str = Field(default="", max_length=150)
    email: EmailStr | None = None
    phone: str = Field(default="", max_length=20)
    address: str = ""
    city: str = Field(default="", max_length=100)
    state: str = Field(default="", max_length=100)
    country: str = Field(default="India", max_length=100)
    pincode: str = Field(default="", max_length=10)
    gst_number: str = Field(default="", max_length=20)
    pan_number: str = Field(default="", max_length=15)
    industry: str = Field(default="", max_length=100)
    company_size: CompanySize | Literal[""] = ""
    notes: str = ""


class ClientUpdateRequest(Schema):
    """Partial update; omitted fields are left alone."""

    company_name: str | None = Field(default=None, min_length=1, max_length=255)
    contact_person: str | None = Field(default=None, max_length=150)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = None
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)
    pincode: str | None = Field(default=None, max_length=10)
    gst_number: str | None = Field(default=None, max_length=20)
    pan_number: str | None = Field(default=None, max_length=15)
    industry: str | None = Field(default=None, max_length=100)
    company_size: CompanySize | None = None
    notes: str | None = None


class ClientStatusRequest(Schema):
    status: Literal["active", "inactive", "suspended"]


class ClientOut(Schema):
    id: int
    company_name: str
    contact_person: str
    email: str | None
    phone: str
    address: str
    city: str
    state: str
    country: str
    pincode: str
    gst_number: str
    pan_number: str
    industry: str
    company_size: str
    status: str
    notes: str
    hrms_tenant_id: str | None
    hrms_db_name: str
    hrms_status: str
    hrms_activated_at: datetime | None
    created_at: datetime
    updated_at: datetime


class ClientPage(Schema):
    items: list[ClientOut]
    total: int


class ClientResponse(Schema):
    success: bool = True
    data: ClientOut
    message: str = ""


class ClientListResponse(Schema):
    success: bool = True
    data: ClientPage
    message: str = ""
