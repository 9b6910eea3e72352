"""Field validators shared by the registration wizard and the user models."""

from __future__ import annotations

import re

from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import RegexValidator, validate_email  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARS = "@$!%*?&"
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]+$")

PLZ_VALIDATOR = RegexValidator(
    regex=r"^\d{5}$",
    message=_("Bitte geben Sie eine gültige Postleitzahl ein (5 Ziffern)."),
)


def password_errors(password: str) -> list[str]:
    """Alle verletzten Passwortregeln, leer wenn das Passwort gültig ist."""
    errors = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Das Passwort muss mindestens {PASSWORD_MIN_LENGTH} Zeichen lang sein.")
    if not re.search(r"[a-z]", password):
        errors.append("Das Passwort muss mindestens einen Kleinbuchstaben enthalten.")
    if not re.search(r"[A-Z]", password):
        errors.append("Das Passwort muss mindestens einen Großbuchstaben enthalten.")
    if not re.search(r"\d", password):
        errors.append("Das Passwort muss mindestens eine Zahl enthalten.")
    if not any(char in PASSWORD_SPECIAL_CHARS for char in password):
        errors.append(f"Das Passwort muss mindestens ein Sonderzeichen ({PASSWORD_SPECIAL_CHARS}) enthalten.")
    if password and not errors and not PASSWORD_PATTERN.match(password):
        errors.append(f"Erlaubt sind nur Buchstaben, Zahlen und die Sonderzeichen {PASSWORD_SPECIAL_CHARS}.")
    return errors


def validate_password_complexity(password: str) -> None:
    errors = password_errors(password)
    if errors:
        raise ValidationError(errors)


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value)
    except ValidationError:
        return False
    return True


class PasswordComplexityValidator:
    """AUTH_PASSWORD_VALIDATORS hook so admin-set passwords follow the same rules."""

    def validate(self, password, user=None):  # type: ignore
        validate_password_complexity(password)

    def get_help_text(self) -> str:
        return (
            f"Mindestens {PASSWORD_MIN_LENGTH} Zeichen mit Groß- und Kleinbuchstaben, "
            f"einer Zahl und einem Sonderzeichen ({PASSWORD_SPECIAL_CHARS})."
        )
