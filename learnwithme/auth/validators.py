"""Validation of sign-in and sign-up form input.

Runs before any request is sent, so obviously bad input never reaches
the backend.
"""

import re
from typing import NamedTuple


PASSWORD_MIN_LENGTH = 6

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ValidationResult(NamedTuple):
    """Result of a validation check."""

    valid: bool
    message: str | None = None


def validate_email(email: str) -> ValidationResult:
    """Validate an email address.

    Examples:
        >>> validate_email("ana@example.com")
        ValidationResult(valid=True, message=None)
        >>> validate_email("ana@example")
        ValidationResult(valid=False, message='Please enter a valid email address')
    """
    if not email.strip():
        return ValidationResult(False, "Email is required")
    if not _EMAIL_PATTERN.match(email):
        return ValidationResult(False, "Please enter a valid email address")
    return ValidationResult(True)


def validate_password(password: str) -> ValidationResult:
    """Validate a password (presence and minimum length)."""
    if not password:
        return ValidationResult(False, "Password is required")
    if len(password) < PASSWORD_MIN_LENGTH:
        return ValidationResult(
            False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        )
    return ValidationResult(True)


def validate_name(name: str) -> ValidationResult:
    """Validate a display name."""
    if not name.strip():
        return ValidationResult(False, "Name is required")
    return ValidationResult(True)


def first_error(*results: ValidationResult) -> str | None:
    """Return the message of the first failed check, if any."""
    for result in results:
        if not result.valid:
            return result.message
    return None
