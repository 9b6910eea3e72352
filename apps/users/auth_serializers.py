"""Serializers for vendor registration, e-mail confirmation and login."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from rest_framework import exceptions, serializers  # type: ignore

from apps.pricing.serializers import PackageSelectionSerializer

from .validators import PLZ_VALIDATOR, is_valid_email, password_errors

User = get_user_model()

INVALID_CREDENTIALS = "Ungültige Anmeldedaten"
ACCOUNT_LOCKED = "Account vorübergehend gesperrt. Bitte versuchen Sie es später erneut."
REQUIRED = "Dieses Feld ist erforderlich."

# Felder je Schritt des Registrierungs-Assistenten
WIZARD_STEPS: dict[int, tuple[str, ...]] = {
    1: ("email", "password", "password_confirm"),
    2: ("name", "phone", "unternehmen"),
    3: ("strasse", "hausnummer", "plz", "ort"),
    4: ("package_data",),
}


def validate_password_field(value: str) -> str:
    errors = password_errors(value)
    if errors:
        raise serializers.ValidationError(errors)
    return value


def step_errors(step: int, data: dict[str, Any]) -> dict[str, Any]:
    """Server-side mirror of the wizard's per-step field checks."""

    errors: dict[str, Any] = {}

    def required(field: str) -> str:
        value = str(data.get(field) or "").strip()
        if not value:
            errors.setdefault(field, []).append(REQUIRED)
        return value

    if step == 1:
        email = required("email")
        if email and not is_valid_email(email):
            errors.setdefault("email", []).append("Bitte geben Sie eine gültige E-Mail-Adresse ein.")
        elif email and User.objects.filter(email__iexact=email, is_full_account=True).exists():
            errors.setdefault("email", []).append("Diese E-Mail-Adresse ist bereits registriert.")
        password = required("password")
        if password:
            messages = password_errors(password)
            if messages:
                errors["password"] = messages
        if "password_confirm" in data and data.get("password_confirm") != data.get("password"):
            errors.setdefault("password_confirm", []).append("Die Passwörter stimmen nicht überein.")
    elif step == 2:
        required("name")
    elif step == 3:
        for field in ("strasse", "hausnummer", "ort"):
            required(field)
        plz = required("plz")
        if plz:
            try:
                PLZ_VALIDATOR(plz)
            except DjangoValidationError as exc:
                errors.setdefault("plz", []).extend(str(message) for message in exc.messages)
    elif step == 4:
        package_serializer = PackageSelectionSerializer(data=data.get("package_data") or {})
        if not package_serializer.is_valid():
            errors["package_data"] = package_serializer.errors
        elif not any(count > 0 for count in package_serializer.validated_data["package_counts"].values()):
            errors["package_data"] = ["Bitte wählen Sie mindestens ein Paket aus."]
    return errors


class ValidateStepSerializer(serializers.Serializer):
    step = serializers.ChoiceField(choices=sorted(WIZARD_STEPS))
    data = serializers.DictField()

    def errors_for_step(self) -> dict[str, Any]:
        return step_errors(self.validated_data["step"], self.validated_data["data"])


class AddressFieldsMixin(serializers.Serializer):
    strasse = serializers.CharField(max_length=200)
    hausnummer = serializers.CharField(max_length=20)
    plz = serializers.CharField(validators=[PLZ_VALIDATOR])
    ort = serializers.CharField(max_length=100)

    def address(self) -> dict[str, str]:
        return {key: self.validated_data[key] for key in ("strasse", "hausnummer", "plz", "ort")}


class VendorRegistrationSerializer(AddressFieldsMixin):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password_field])
    password_confirm = serializers.CharField(write_only=True, required=False)
    name = serializers.CharField(max_length=200)
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    unternehmen = serializers.CharField(required=False, allow_blank=True, default="")
    comments = serializers.CharField(required=False, allow_blank=True, default="")
    package_data = PackageSelectionSerializer()

    def validate_package_data(self, value: dict[str, Any]) -> dict[str, Any]:
        if not any(count > 0 for count in value["package_counts"].values()):
            raise serializers.ValidationError("Bitte wählen Sie mindestens ein Paket aus.")
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        confirm = attrs.pop("password_confirm", None)
        if confirm is not None and confirm != attrs["password"]:
            raise serializers.ValidationError({"password_confirm": "Die Passwörter stimmen nicht überein."})
        return attrs


class PreregistrationSerializer(AddressFieldsMixin):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password_field])
    name = serializers.CharField(max_length=200)
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    unternehmen = serializers.CharField(required=False, allow_blank=True, default="")
    beschreibung = serializers.CharField(required=False, allow_blank=True, default="")


class VendorLoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def get_account(self, email: str):  # type: ignore
        return User.objects.filter(
            email__iexact=email,
            is_full_account=True,
            role=User.RoleChoices.VENDOR,
        ).first()

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        user = self.get_account(attrs["email"])
        if user is None or not user.is_active:
            raise exceptions.AuthenticationFailed(INVALID_CREDENTIALS)

        if user.is_locked:
            raise exceptions.AuthenticationFailed(ACCOUNT_LOCKED)

        if not user.check_password(attrs["password"]):
            user.register_failed_attempt(threshold=5)
            raise exceptions.AuthenticationFailed(INVALID_CREDENTIALS)

        if user.failed_login_attempts or user.locked_until:
            user.unlock()

        attrs["user"] = user
        return attrs


class AdminLoginSerializer(VendorLoginSerializer):
    """Login for administrators; vendor accounts are rejected with the same message."""

    def get_account(self, email: str):  # type: ignore
        user = User.objects.filter(email__iexact=email).first()
        if user is None or not user.is_admin:
            return None
        return user
