"""Subscriptions app configuration."""

from django.apps import AppConfig


class SubscriptionsConfig(AppConfig):
    """Django app configuration for the subscription ledger."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.subscriptions"
