"""Admin configuration for subscriptions app."""

from django.contrib import admin

from apps.core.admin import ReadOnlyModelAdmin
from apps.subscriptions.models import Subscription


@admin.register(Subscription)
class SubscriptionAdmin(ReadOnlyModelAdmin):
    list_display = ["id", "client", "plan", "user_count", "start_date", "expiry_date", "status"]
    list_filter = ["status", "plan", "overage_billing"]
    search_fields = ["client__company_name", "client__email"]
    ordering = ["-created_at"]
