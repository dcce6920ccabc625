"""
Notification models.
"""

from django.db import models
from django.utils import timezone


class Notification(models.Model):
    """
    A message sent (or attempted) to a client.

    Rows are created inside the business transaction and delivered after it
    commits, so a rolled-back operation never emails anyone.
    """

    class Kind(models.TextChoices):
        OVERAGE = "overage", "Overage"
        INVOICE_SENT = "invoice_sent", "Invoice sent"
        INVOICE_OVERDUE = "invoice_overdue", "Invoice overdue"
        PAYMENT_RECEIVED = "payment_received", "Payment received"
        GENERAL = "general", "General"

    class Channel(models.TextChoices):
        EMAIL = "email", "Email"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        SENT = "sent", "Sent"
        FAILED = "failed", "Failed"

    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    kind = models.CharField(max_length=30, choices=Kind.choices, default=Kind.GENERAL)
    channel = models.CharField(max_length=20, choices=Channel.choices, default=Channel.EMAIL)
    recipient = models.EmailField(max_length=255, blank=True)
    subject = models.CharField(max_length=255)
    message = models.TextField()
    html_message = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    sent_at = models.DateTimeField(null=True, blank=True)
    error = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.kind} to {self.recipient or self.client_id} ({self.status})"

    def mark_sent(self) -> None:
        self.status = self.Status.SENT
        self.sent_at = timezone.now()
        self.error = ""
        self.save(update_fields=["status", "sent_at", "error"])

    def mark_failed(self, error: str) -> None:
        self.status = self.Status.FAILED
        self.error = error[:2000]
        self.save(update_fields=["status", "error"])
