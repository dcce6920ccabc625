"""
Management command to mark unpaid invoices past their due date as overdue.

Run daily from the scheduler. Idempotent, so re-running is safe.
Example: ./manage.py mark_overdue_invoices --as-of 2024-01-15
"""

from datetime import date

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.billing.services import mark_overdue_sweep
from apps.events.context import audit_context


class Command(BaseCommand):
    help = "Mark sent invoices whose due date has passed as overdue"

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
            overdue = mark_overdue_sweep(as_of)

        self.stdout.write(
            self.style.SUCCESS(f"Marked {len(overdue)} invoice(s) as overdue as of {as_of}")
        )
