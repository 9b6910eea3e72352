"""Admin registration for store settings."""

from __future__ import annotations

from django.contrib import admin

from .models import StoreSettings


@admin.register(StoreSettings)
class StoreSettingsAdmin(admin.ModelAdmin):
    list_display = ("store_opening_enabled", "opening_date", "version", "last_modified")
    readonly_fields = ("version", "last_modified", "created_at")

    def has_add_permission(self, request):  # type: ignore
        return not StoreSettings.objects.exists()
