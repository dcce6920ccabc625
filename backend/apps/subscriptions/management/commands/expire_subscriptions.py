"""
Management command to expire subscriptions whose period has ended.

Run daily from the scheduler. Idempotent.
Example: ./manage.py expire_subscriptions --as-of 2024-04-02
"""

from datetime import date

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.events.context import audit_context
from apps.subscriptions.services import expire_subscriptions_sweep


class Command(BaseCommand):
    help = "Mark active subscriptions past their expiry date as expired"

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
            expired = expire_subscriptions_sweep(as_of)

        self.stdout.write(
            self.style.SUCCESS(f"Marked {len(expired)} subscription(s) as expired as of {as_of}")
        )
