"""Admin registrations for vendor accounts and pending bookings."""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import Address, CustomUser, PendingBooking, VendorProfile


class AddressInline(admin.TabularInline):
    model = Address
    extra = 0


class VendorProfileInline(admin.StackedInline):
    model = VendorProfile
    can_delete = False
    extra = 0


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    """Admin for vendor and administrator accounts."""

    inlines = (AddressInline, VendorProfileInline)
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (_("Kontakt"), {"fields": ("name", "phone", "role")}),
        (
            _("E-Mail-Bestätigung"),
            {"fields": ("contact_status", "newsletter_confirmed", "mail_newsletter", "token_expires")},
        ),
        (
            _("Registrierung"),
            {
                "fields": (
                    "is_full_account",
                    "is_publicly_visible",
                    "registration_status",
                    "registration_date",
                    "trial_start_date",
                    "trial_end_date",
                    "trial_warning_sent_at",
                )
            },
        ),
        (
            _("Sicherheit"),
            {"fields": ("failed_login_attempts", "locked_until")},
        ),
        (
            _("Berechtigungen"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        (_("Wichtige Daten"), {"fields": ("last_login", "date_joined", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "email",
                    "password1",
                    "password2",
                    "name",
                    "phone",
                    "role",
                    "is_staff",
                    "is_superuser",
                ),
            },
        ),
    )
    list_display = (
        "email",
        "name",
        "role",
        "contact_status",
        "registration_status",
        "is_full_account",
        "is_publicly_visible",
        "is_locked",
    )
    list_filter = ("role", "contact_status", "registration_status", "is_full_account", "is_publicly_visible")
    search_fields = ("email", "name", "phone")
    ordering = ("email",)
    readonly_fields = ("created_at", "updated_at", "date_joined")


@admin.register(PendingBooking)
class PendingBookingAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "status", "created_at", "processed_at", "processed_by")
    list_filter = ("status",)
    search_fields = ("user__email", "user__name")
    readonly_fields = ("price_breakdown", "created_at", "processed_at", "processed_by")
