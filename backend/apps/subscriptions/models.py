"""
Subscription models - the ledger of which client holds which plan.
"""

from django.conf import settings
from django.db import models

from apps.core.models import TimestampedModel


class Subscription(TimestampedModel):
    """
    One client on one plan for a run of billing periods.

    ``user_count`` is the seat count billed each period. ``expiry_date`` is
    the first day not covered by the current period; renewals extend it by
    the plan's billing months.
    """

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        EXPIRED = "expired", "Expired"
        CANCELLED = "cancelled", "Cancelled"

    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.PROTECT,
        related_name="subscriptions",
    )
    plan = models.ForeignKey(
        "plans.Plan",
        on_delete=models.PROTECT,
        related_name="subscriptions",
    )

    user_count = models.PositiveIntegerField()
    start_date = models.DateField()
    expiry_date = models.DateField(db_index=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )
    overage_billing = models.BooleanField(
        default=False,
        help_text="Seats above the plan maximum are billed (charge_overage plans)",
    )
    auto_renew = models.BooleanField(default=True)
    remarks = models.TextField(blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "expiry_date"], name="subscriptio_status_expiry_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.client_id} on {self.plan_id} ({self.status})"

    @property
    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE

    def covers(self, as_of) -> bool:
        """True while the subscription is active and ``as_of`` falls before expiry."""
        return self.is_active and as_of < self.expiry_date
