"""Admin registration for rentals."""

from __future__ import annotations

from django.contrib import admin

from .models import Mietfach, PackageTracking, Vertrag, VertragService


@admin.register(Mietfach)
class MietfachAdmin(admin.ModelAdmin):
    list_display = ("bezeichnung", "typ", "preis", "verfuegbar", "standort")
    list_filter = ("typ", "verfuegbar")
    search_fields = ("bezeichnung", "standort")


class VertragServiceInline(admin.TabularInline):
    model = VertragService
    extra = 0


@admin.register(Vertrag)
class VertragAdmin(admin.ModelAdmin):
    list_display = (
        "contract_number",
        "user",
        "status",
        "scheduled_start_date",
        "contract_duration",
        "total_monthly_price",
        "ist_probemonat_buchung",
        "created_at",
    )
    list_filter = ("status", "ist_probemonat_buchung", "lagerservice", "versandservice")
    search_fields = ("user__email", "user__name")
    readonly_fields = ("created_at", "updated_at", "availability_from", "availability_to")
    inlines = [VertragServiceInline]


@admin.register(PackageTracking)
class PackageTrackingAdmin(admin.ModelAdmin):
    list_display = ("vertrag", "package_typ", "status", "tracking_nummer", "updated_at")
    list_filter = ("package_typ", "status")
    search_fields = ("tracking_nummer", "vertrag__user__email")
