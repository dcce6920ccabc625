"""Billing app configuration."""

from django.apps import AppConfig


class BillingConfig(AppConfig):
    """Configuration for billing app: invoices and payments."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.billing"
