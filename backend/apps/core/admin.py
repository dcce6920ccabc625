"""Shared admin base classes."""

from django.contrib import admin


class ReadOnlyModelAdmin(admin.ModelAdmin):
    """
    Admin that can browse records but never writes them.

    Billing records change only through the service layer, which enforces
    the plan rules and writes the audit entry for each change.
    """

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
