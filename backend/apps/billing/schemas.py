"""
Invoice and payment API schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from ninja import Schema
from pydantic import Field

PaymentMethod = Literal["upi", "bank_transfer", "card", "cash", "razorpay"]


class InvoiceGenerateRequest(Schema):
    subscription_id: int
    billing_period_start: date
    invoice_date: date | None = Field(default=None, description="Defaults to the period start")
    grace_days: int | None = Field(default=None, ge=0, description="Days until due")
    notes: str = ""


class PaymentCreateRequest(Schema):
    amount: Decimal = Field(..., gt=0, max_digits=12, examples=["645.00"])
    payment_date: date
    method: PaymentMethod = "upi"
    transaction_id: str | None = Field(default=None, max_length=255)
    notes: str = ""


class OverdueSweepRequest(Schema):
    as_of: date | None = Field(default=None, description="Defaults to today")


class InvoiceOut(Schema):
    id: int
    invoice_number: str
    client_id: int
    subscription_id: int
    plan_id: int
    payment_id: int | None
    invoice_date: date
    due_date: date
    period_start: date
    period_end: date
    user_count: int
    amount: Decimal
    tax: Decimal
    total: Decimal
    status: str
    notes: str
    sent_at: datetime | None
    paid_at: datetime | None
    cancelled_at: datetime | None
    created_at: datetime


class PaymentOut(Schema):
    id: int
    invoice_id: int
    amount: Decimal
    currency: str
    method: str
    transaction_id: str | None
    payment_date: date
    notes: str
    created_at: datetime


class InvoicePage(Schema):
    items: list[InvoiceOut]
    total: int


class PaymentReceipt(Schema):
    payment: PaymentOut
    invoice: InvoiceOut


class SweepResult(Schema):
    as_of: date
    invoice_ids: list[int]


class InvoiceResponse(Schema):
    success: bool = True
    data: InvoiceOut
    message: str = ""


class InvoiceListResponse(Schema):
    success: bool = True
    data: InvoicePage
    message: str = ""


class PaymentListResponse(Schema):
    success: bool = True
    data: list[PaymentOut]
    message: str = ""


class PaymentReceiptResponse(Schema):
    success: bool = True
    data: PaymentReceipt
    message: str = ""


class SweepResponse(Schema):
    success: bool = True
    data: SweepResult
    message: str = ""
