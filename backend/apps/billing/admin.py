"""Admin configuration for billing app."""

from django.contrib import admin

from apps.billing.models import Invoice, InvoiceSequence, Payment
from apps.core.admin import ReadOnlyModelAdmin


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    can_delete = False
    readonly_fields = ["amount", "method", "transaction_id", "payment_date", "created_at"]

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Invoice)
class InvoiceAdmin(ReadOnlyModelAdmin):
    list_display = ["invoice_number", "client", "total", "status", "invoice_date", "due_date"]
    list_filter = ["status"]
    search_fields = ["invoice_number", "client__company_name"]
    inlines = [PaymentInline]
    ordering = ["-invoice_date"]


@admin.register(Payment)
class PaymentAdmin(ReadOnlyModelAdmin):
    list_display = ["id", "invoice", "amount", "method", "payment_date", "created_at"]
    list_filter = ["method"]
    search_fields = ["transaction_id", "invoice__invoice_number"]


@admin.register(InvoiceSequence)
class InvoiceSequenceAdmin(ReadOnlyModelAdmin):
    list_display = ["name", "last_value"]
