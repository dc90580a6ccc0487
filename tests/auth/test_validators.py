"""Tests for sign-in and sign-up form validators."""

import pytest

from learnwithme.auth.validators import (
    PASSWORD_MIN_LENGTH,
    ValidationResult,
    first_error,
    validate_email,
    validate_name,
    validate_password,
)


class TestValidateEmail:
    """Tests for email validation."""

    @pytest.mark.parametrize("email", ["ana@example.com", "a.b+c@sub.example.org"])
    def test_valid_email(self, email: str) -> None:
        assert validate_email(email) == ValidationResult(True)

    @pytest.mark.parametrize(
        "email,expected_message",
        [
            ("", "Email is required"),
            ("   ", "Email is required"),
            ("ana", "Please enter a valid email address"),
            ("ana@example", "Please enter a valid email address"),
            ("ana @example.com", "Please enter a valid email address"),
        ],
    )
    def test_invalid_email(self, email: str, expected_message: str) -> None:
        result = validate_email(email)
        assert result.valid is False
        assert result.message == expected_message


class TestValidatePassword:
    """Tests for password validation."""

    def test_minimum_length(self) -> None:
        assert PASSWORD_MIN_LENGTH == 6
        assert validate_password("secret").valid is True

    @pytest.mark.parametrize(
        "password,expected_message",
        [
            ("", "Password is required"),
            ("12345", "Password must be at least 6 characters"),
        ],
    )
    def test_invalid_password(self, password: str, expected_message: str) -> None:
        assert validate_password(password).message == expected_message


class TestValidateName:
    """Tests for name validation."""

    def test_blank_name(self) -> None:
        assert validate_name("  ").message == "Name is required"

    def test_name(self) -> None:
        assert validate_name("Ada").valid is True


def test_first_error_returns_first_failure() -> None:
    message = first_error(
        validate_name("Ada"), validate_email("bad"), validate_password("")
    )
    assert message == "Please enter a valid email address"


def test_first_error_without_failures() -> None:
    assert first_error(validate_name("Ada"), validate_password("secret")) is None
