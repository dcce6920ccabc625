"""Admin configuration for the plan catalog."""

from django.contrib import admin

from apps.core.admin import ReadOnlyModelAdmin
from apps.plans.models import Plan


@admin.register(Plan)
class PlanAdmin(ReadOnlyModelAdmin):
    list_display = [
        "name",
        "price_per_user",
        "billing_cycle",
        "min_users",
        "max_users",
        "overage_policy",
        "is_active",
    ]
    list_filter = ["billing_cycle", "overage_policy", "is_active"]
    search_fields = ["name"]
