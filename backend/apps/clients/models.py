"""
Client models - companies subscribing to the HRMS.
"""

from django.conf import settings
from django.db import models

from apps.core.models import TimestampedModel


class Client(TimestampedModel):
    """
    A customer company.

    Besides contact and tax identifiers, a client tracks the HRMS tenant
    provisioned for it and whether that tenant is currently enabled.
    """

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        SUSPENDED = "suspended", "Suspended"

    class HrmsStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        SUSPENDED = "suspended", "Suspended"

    class CompanySize(models.TextChoices):
        MICRO = "1-10", "1-10"
        SMALL = "11-50", "11-50"
        MEDIUM = "51-200", "51-200"
        LARGE = "201-500", "201-500"
        ENTERPRISE = "500+", "500+"

    company_name = models.CharField(max_length=255)
    contact_person = models.CharField(max_length=150, blank=True)
    email = models.EmailField(max_length=255, unique=True, null=True, blank=True)
    phone = models.CharField(max_length=20, blank=True)

    # Address
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, default="India")
    pincode = models.CharField(max_length=10, blank=True)

    # Tax identifiers
    gst_number = models.CharField(max_length=20, blank=True)
    pan_number = models.CharField(max_length=15, blank=True)

    industry = models.CharField(max_length=100, blank=True)
    company_size = models.CharField(max_length=10, choices=CompanySize.choices, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    notes = models.TextField(blank=True)

    # HRMS tenant
    hrms_tenant_id = models.CharField(max_length=100, unique=True, null=True, blank=True)
    hrms_db_name = models.CharField(max_length=100, blank=True)
    hrms_status = models.CharField(
        max_length=20,
        choices=HrmsStatus.choices,
        default=HrmsStatus.PENDING,
    )
    hrms_activated_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.company_name
