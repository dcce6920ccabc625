"""
Management command to switch off HRMS tenants without a current subscription.

Example: ./manage.py deactivate_expired_tenants
"""

from datetime import date

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.events.context import audit_context
from apps.subscriptions.services import deactivate_expired_tenants


class Command(BaseCommand):
    help = "Deactivate HRMS tenants of clients whose subscriptions have lapsed"

    def add_arguments(self, parser):
        parser.add_argument(
            "--as-of",
            type=date.fromisoformat,
            default=None,
            help="Reference date in YYYY-MM-DD (default: today)",
        )

    def handle(self, *args, **options):
        as_of = options["as_of"] or timezone.localdate()

        with audit_context():
            result = deactivate_expired_tenants(as_of)

        if result.failed:
            self.stderr.write(
                self.style.WARNING(f"Failed to deactivate {len(result.failed)} tenant(s)")
            )
        self.stdout.write(
            self.style.SUCCESS(f"Deactivated {len(result.deactivated)} tenant(s) as of {as_of}")
        )
