"""
Invoice and payment API endpoints.
"""

from django.http import HttpRequest
from django.utils import timezone
from ninja import Router

from apps.billing.schemas import (
    InvoiceGenerateRequest,
    InvoiceListResponse,
    InvoiceResponse,
    OverdueSweepRequest,
    PaymentCreateRequest,
    PaymentListResponse,
    PaymentReceiptResponse,
    SweepResponse,
)
from apps.billing.services import (
    cancel_invoice,
    generate_invoice,
    get_invoice,
    list_invoices,
    mark_overdue_sweep,
    record_payment,
    send_invoice,
)
from apps.core.schemas import ErrorResponse, api_success
from apps.core.security import BearerAuth, require_admin
from apps.subscriptions.services import get_subscription

router = Router(tags=["invoices"])
bearer_auth = BearerAuth()


@router.get(
    "",
    response={200: InvoiceListResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="listInvoices",
    summary="List invoices",
)
def list_invoices_endpoint(
    request: HttpRequest,
    client_id: int | None = None,
    subscription_id: int | None = None,
    status: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> dict:
    items, total = list_invoices(
        client_id=client_id,
        subscription_id=subscription_id,
        status=status,
        limit=max(1, min(limit, 200)),
        offset=max(0, offset),
    )
    return api_success({"items": items, "total": total}, message="Invoices fetched")


@router.post(
    "",
    response={201: InvoiceResponse, 400: ErrorResponse, 401: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="generateInvoice",
    summary="Generate a draft invoice for a subscription period",
)
def generate_invoice_endpoint(
    request: HttpRequest, payload: InvoiceGenerateRequest
) -> tuple[int, dict]:
    subscription = get_subscription(payload.subscription_id)
    invoice = generate_invoice(
        subscription,
        subscription.plan,
        payload.billing_period_start,
        grace_days=payload.grace_days,
        invoice_date=payload.invoice_date,
        notes=payload.notes,
        actor=request.auth,
    )
    return 201, api_success(invoice, message="Invoice generated")


@router.post(
    "/mark-overdue",
    response={200: SweepResponse, 401: ErrorResponse, 403: ErrorResponse},
    auth=bearer_auth,
    operation_id="markOverdueInvoices",
    summary="Run the overdue sweep",
)
@require_admin
def mark_overdue_endpoint(request: HttpRequest, payload: OverdueSweepRequest) -> dict:
    as_of = payload.as_of or timezone.localdate()
    overdue = mark_overdue_sweep(as_of, actor=request.auth)
    return api_success(
        {"as_of": as_of, "invoice_ids": [invoice.pk for invoice in overdue]},
        message=f"{len(overdue)} invoice(s) marked overdue",
    )


@router.get(
    "/{invoice_id}",
    response={200: InvoiceResponse, 401: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="getInvoice",
    summary="Get an invoice",
)
def get_invoice_endpoint(request: HttpRequest, invoice_id: int) -> dict:
    return api_success(get_invoice(invoice_id), message="Invoice fetched")


@router.post(
    "/{invoice_id}/send",
    response={200: InvoiceResponse, 401: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse},
    auth=bearer_auth,
    operation_id="sendInvoice",
    summary="Send a draft invoice to the client",
)
def send_invoice_endpoint(request: HttpRequest, invoice_id: int) -> dict:
    return api_success(send_invoice(invoice_id, actor=request.auth), message="Invoice sent")


@router.post(
    "/{invoice_id}/cancel",
    response={200: InvoiceResponse, 401: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse},
    auth=bearer_auth,
    operation_id="cancelInvoice",
    summary="Cancel an unpaid invoice",
)
def cancel_invoice_endpoint(request: HttpRequest, invoice_id: int) -> dict:
    return api_success(cancel_invoice(invoice_id, actor=request.auth), message="Invoice cancelled")


@router.get(
    "/{invoice_id}/payments",
    response={200: PaymentListResponse, 401: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="listInvoicePayments",
    summary="Payments recorded against an invoice",
)
def list_payments_endpoint(request: HttpRequest, invoice_id: int) -> dict:
    invoice = get_invoice(invoice_id)
    return api_success(list(invoice.payments.all()), message="Payments fetched")


@router.post(
    "/{invoice_id}/payments",
    response={
        201: PaymentReceiptResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        404: ErrorResponse,
        409: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="recordPayment",
    summary="Record a payment against an invoice",
)
def record_payment_endpoint(
    request: HttpRequest, invoice_id: int, payload: PaymentCreateRequest
) -> tuple[int, dict]:
    payment = record_payment(
        invoice_id,
        payload.amount,
        payload.payment_date,
        payload.method,
        transaction_id=payload.transaction_id,
        notes=payload.notes,
        actor=request.auth,
    )
    return 201, api_success(
        {"payment": payment, "invoice": get_invoice(invoice_id)},
        message="Payment recorded",
    )
