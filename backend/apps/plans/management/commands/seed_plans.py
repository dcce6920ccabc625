"""
Management command to seed the default plan catalog.

Safe to run repeatedly: existing plans are skipped.
Example: ./manage.py seed_plans
"""

from django.core.management.base import BaseCommand

from apps.events.context import audit_context
from apps.plans.seed import seed_catalog


class Command(BaseCommand):
    help = "Create the Silver, Gold and Platinum plans if they are missing"

    def handle(self, *args, **options):
        with audit_context():
            result = seed_catalog()

        for name in result.skipped:
            self.stdout.write(self.style.WARNING(f"Plan '{name}' already exists, skipped"))
        self.stdout.write(
            self.style.SUCCESS(
                f"Seeding complete: {len(result.created)} created, {len(result.skipped)} skipped"
            )
        )
