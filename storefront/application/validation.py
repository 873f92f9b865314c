"""
Input validation for account and catalogue operations.

Each function takes plain values, raises ``ValidationError`` with a message
suitable for clients, and returns a frozen dataclass holding the cleaned input.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from ..domain.errors import ValidationError

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,30}$")
PASSWORD_MIN_LENGTH = 6
# bcrypt ignores (or rejects) anything past 72 bytes.
PASSWORD_MAX_BYTES = 72
PRODUCT_NAME_MAX_LENGTH = 120


@dataclass(frozen=True, slots=True)
class RegistrationInput:
    username: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginInput:
    username: str
    password: str


@dataclass(frozen=True, slots=True)
class PasswordResetInput:
    new_password: str


@dataclass(frozen=True, slots=True)
class PasswordChangeInput:
    current_password: str
    new_password: str


@dataclass(frozen=True, slots=True)
class ProductInput:
    name: Optional[str]
    description: Optional[str]
    price: Optional[float]


def validate_email_address(email: Optional[str]) -> str:
    if not email or not email.strip():
        raise ValidationError("Email is required")
    try:
        result = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError(f"Invalid email: {exc}") from exc
    return result.normalized.lower()


def validate_password_strength(password: Optional[str]) -> str:
    if not password:
        raise ValidationError("Password is required")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes long")
    if not any(ch.isupper() for ch in password):
        raise ValidationError("Password must contain an uppercase letter")
    if not any(ch.islower() for ch in password):
        raise ValidationError("Password must contain a lowercase letter")
    if all(ch.isalnum() for ch in password):
        raise ValidationError("Password must contain a special character")
    return password


def _require_match(password: str, confirm_password: Optional[str]) -> None:
    if password != confirm_password:
        raise ValidationError("Passwords do not match")


def validate_registration(
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
    confirm_password: Optional[str],
) -> RegistrationInput:
    username_clean = (username or "").strip()
    if not USERNAME_PATTERN.match(username_clean):
        raise ValidationError(
            "Username must be 3-30 characters of letters, digits, '_', '.' or '-'"
        )
    email_clean = validate_email_address(email)
    validate_password_strength(password)
    _require_match(password, confirm_password)
    return RegistrationInput(username=username_clean, email=email_clean, password=password)


def validate_login(username: Optional[str], password: Optional[str]) -> LoginInput:
    username_clean = (username or "").strip()
    if not username_clean:
        raise ValidationError("Username is required")
    if not password:
        raise ValidationError("Password is required")
    return LoginInput(username=username_clean, password=password)


def validate_password_reset(
    new_password: Optional[str], confirm_password: Optional[str]
) -> PasswordResetInput:
    validate_password_strength(new_password)
    _require_match(new_password, confirm_password)
    return PasswordResetInput(new_password=new_password)


def validate_password_change(
    current_password: Optional[str],
    new_password: Optional[str],
    confirm_password: Optional[str],
) -> PasswordChangeInput:
    if not current_password:
        raise ValidationError("Current password is required")
    validate_password_strength(new_password)
    _require_match(new_password, confirm_password)
    return PasswordChangeInput(current_password=current_password, new_password=new_password)


def validate_product(
    name: Optional[str],
    description: Optional[str],
    price: Optional[float],
    *,
    partial: bool = False,
) -> ProductInput:
    """Validate product fields. With ``partial`` only the supplied fields are required."""
    name_clean = name.strip() if name is not None else None
    if name_clean is None and not partial:
        raise ValidationError("Product name is required")
    if name_clean is not None and not name_clean:
        raise ValidationError("Product name cannot be empty")
    if name_clean and len(name_clean) > PRODUCT_NAME_MAX_LENGTH:
        raise ValidationError(f"Product name must be at most {PRODUCT_NAME_MAX_LENGTH} characters")
    if price is None and not partial:
        raise ValidationError("Product price is required")
    if price is not None and not math.isfinite(price):
        raise ValidationError("Product price must be a finite number")
    if price is not None and price < 0:
        raise ValidationError("Product price cannot be negative")
    description_clean = description.strip() if description is not None else None
    if description_clean is None and not partial:
        description_clean = ""
    return ProductInput(name=name_clean, description=description_clean, price=price)
