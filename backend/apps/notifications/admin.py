"""Admin configuration for notifications app."""

from django.contrib import admin

from apps.notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["kind", "client", "recipient", "status", "sent_at", "created_at"]
    list_filter = ["kind", "status"]
    search_fields = ["recipient", "subject", "client__company_name"]
    readonly_fields = ["sent_at", "error", "created_at"]
    ordering = ["-created_at"]
