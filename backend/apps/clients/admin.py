"""Admin configuration for clients app."""

from django.contrib import admin

from apps.clients.models import Client
from apps.core.admin import ReadOnlyModelAdmin


@admin.register(Client)
class ClientAdmin(ReadOnlyModelAdmin):
    list_display = ["company_name", "email", "status", "hrms_status", "created_at"]
    list_filter = ["status", "hrms_status", "company_size"]
    search_fields = ["company_name", "email", "gst_number", "hrms_tenant_id"]
    ordering = ["-created_at"]
