"""Permission classes for the vendor and admin APIs."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsPlatformAdmin(permissions.BasePermission):
    """
    Only housnkuh administrators.

    An administrator is a staff/superuser account or a user with
    role='admin'.
    """

    message = "Admin-Berechtigung erforderlich."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return bool(getattr(user, "is_admin", False))


class IsVendor(permissions.BasePermission):
    """Authenticated full vendor accounts."""

    message = "Nur für registrierte Direktvermarkter."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return bool(getattr(user, "is_vendor", False) and getattr(user, "is_full_account", False))

