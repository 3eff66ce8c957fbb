"""Credential validators with the messages shown on the auth forms."""

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 72


def validate_email(email: str) -> str | None:
    """Return an error message for an invalid email, or None."""
    if not email:
        return "Email jest wymagany"
    if not EMAIL_PATTERN.match(email) or len(email) > EMAIL_MAX_LENGTH:
        return "Nieprawidłowy format email"
    return None


def validate_password(password: str) -> str | None:
    """Check a new password against the length rules."""
    if not password:
        return "Hasło jest wymagane"
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"Hasło musi mieć minimum {PASSWORD_MIN_LENGTH} znaków"
    if len(password) > PASSWORD_MAX_LENGTH:
        return f"Hasło może mieć maksymalnie {PASSWORD_MAX_LENGTH} znaki"
    return None


def validate_password_required(password: str) -> str | None:
    return None if password else "Hasło jest wymagane"


def validate_password_confirm(password_confirm: str, password: str) -> str | None:
    if not password_confirm:
        return "Potwierdzenie hasła jest wymagane"
    if password_confirm != password:
        return "Hasła muszą być identyczne"
    return None


def validate_password_change(current_password: str, new_password: str) -> str | None:
    """Validate the change-password form; the new password must differ."""
    if not current_password:
        return "Aktualne hasło jest wymagane"
    error = validate_password(new_password)
    if error:
        return error
    if current_password == new_password:
        return "Nowe hasło musi być różne od obecnego"
    return None
