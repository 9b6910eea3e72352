"""Admin registration for revenue figures."""

from __future__ import annotations

from django.contrib import admin

from .models import MonthlyRevenue


@admin.register(MonthlyRevenue)
class MonthlyRevenueAdmin(admin.ModelAdmin):
    list_display = ("monat", "gesamteinnahmen", "anzahl_aktive_vertraege", "anzahl_probemonat_vertraege", "updated_at")
    readonly_fields = ("einnahmen_pro_mietfach", "created_at", "updated_at")
    date_hierarchy = "monat"
