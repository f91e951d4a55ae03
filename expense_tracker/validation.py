"""Pure field and business-rule checks shared by schemas and handlers.

Every ``check_*`` function returns ``None`` when the value is acceptable and
a human readable message otherwise. Messages are stable so that API error
bodies and tests can match them exactly.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from email_validator import EmailNotValidError, validate_email

PASSWORD_MIN_LENGTH = 8
CATEGORY_NAME_MAX_LENGTH = 100
FULL_NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255
ICON_MAX_LENGTH = 50
AMOUNT_PLACES = 2
AMOUNT_LIMIT = Decimal("10000000000")  # Numeric(12, 2)

_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass
class ValidationSummary:
    """Ordered collection of failed rules."""

    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def first(self) -> Optional[str]:
        return self.errors[0] if self.errors else None


def collect(*results: Optional[str]) -> ValidationSummary:
    """Gather the messages of failed checks, preserving their order."""

    return ValidationSummary(errors=[message for message in results if message])


def normalize_email(value: str) -> str:
    return value.strip().lower()


def _encodable(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def check_email(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return "Invalid email address"
    if len(value) > EMAIL_MAX_LENGTH:
        return "Invalid email address"
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return "Invalid email address"
    return None


def check_password(value: Any) -> Optional[str]:
    if not isinstance(value, str) or len(value) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    if not _encodable(value):
        return "Password must be valid UTF-8 text"
    return None


def check_required(value: Any, label: str) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return f"{label} is required"
    if not _encodable(value):
        return f"{label} must be valid UTF-8 text"
    return None


def check_length(value: Optional[str], label: str, maximum: int) -> Optional[str]:
    if value is not None and len(value) > maximum:
        return f"{label} must be at most {maximum} characters"
    if value is not None and not _encodable(value):
        return f"{label} must be valid UTF-8 text"
    return None


def check_category_name(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip() or len(value.strip()) > CATEGORY_NAME_MAX_LENGTH:
        return f"Category name must be 1-{CATEGORY_NAME_MAX_LENGTH} characters"
    if not _encodable(value):
        return "Category name must be valid UTF-8 text"
    return None


def check_color(value: Optional[str]) -> Optional[str]:
    if value is not None and not _COLOR_RE.match(value):
        return "Color must be a hex value like #1A2B3C"
    return None


def check_amount(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "Amount must be a decimal number"
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return "Amount must be a decimal number"
    if not amount.is_finite():
        return "Amount must be a decimal number"
    if amount <= 0:
        return "Amount must be greater than 0"
    if amount >= AMOUNT_LIMIT:
        return "Amount is too large"
    if amount != amount.quantize(Decimal(1).scaleb(-AMOUNT_PLACES)):
        return f"Amount must have at most {AMOUNT_PLACES} decimal places"
    return None


def check_date(value: Any) -> Optional[str]:
    if isinstance(value, date):
        return None
    if isinstance(value, str):
        try:
            date.fromisoformat(value)
        except ValueError:
            return "Date must be an ISO 8601 date (YYYY-MM-DD)"
        return None
    return "Date must be an ISO 8601 date (YYYY-MM-DD)"


__all__ = [
    "ValidationSummary",
    "check_amount",
    "check_category_name",
    "check_color",
    "check_date",
    "check_email",
    "check_length",
    "check_password",
    "check_required",
    "collect",
    "normalize_email",
]
