"""Plans app configuration."""

from django.apps import AppConfig


class PlansConfig(AppConfig):
    """Django app configuration for the plan catalog."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.plans"
    verbose_name = "Plan Catalog"
