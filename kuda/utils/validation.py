"""Client-side validation for screen forms.

These checks exist for UX only: they stop obviously incomplete or impossible
requests before any network call is made. The external systems remain the
authority on every value.

On validation failure, raise `FormValidationError` so the API can return HTTP 422
with structured `field_errors`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

PIN_LENGTH = 4
ACCOUNT_NUMBER_LENGTH = 10

_DIGITS_RE = re.compile(r"[0-9]*")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class FormValidationError(Exception):
    """Exception raised for form validation failures.

    Attributes:
        field_errors: mapping of field name -> human-readable error message.
        message: top-level message, shown as the toast description.
    """

    field_errors: Dict[str, str]
    message: str = "Please fill in all required fields."

    def __str__(self) -> str:  # pragma: no cover
        return self.message


def _as_str(v: Any) -> str:
    return "" if v is None else str(v)


def _strip(v: Any) -> str:
    return _as_str(v).strip()


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def require_str(payload: Dict[str, Any], field: str, errors: Dict[str, str], *, label: Optional[str] = None) -> str:
    value = _strip(payload.get(field))
    if not value:
        add_error(errors, field, f"{label or field} is required")
    return value


def optional_str(payload: Dict[str, Any], field: str) -> str:
    return _strip(payload.get(field))


def parse_amount(value: Any, errors: Dict[str, str], field: str = "amount") -> Optional[Decimal]:
    """Parse a Naira amount typed into a form. Returns None when missing or invalid."""
    raw = _strip(value)
    if not raw:
        add_error(errors, field, "Amount is required")
        return None
    try:
        amount = Decimal(raw.replace(",", ""))
    except InvalidOperation:
        add_error(errors, field, "Amount must be a number")
        return None
    if not amount.is_finite():
        add_error(errors, field, "Amount must be a number")
        return None
    return amount


def check_spendable(amount: Decimal, balance: Optional[float], errors: Dict[str, str], field: str = "amount") -> None:
    if amount <= 0:
        add_error(errors, field, "Amount must be greater than zero")
    elif balance is not None and amount > Decimal(str(balance)):
        add_error(errors, field, "Insufficient balance")


def validate_email(value: str, errors: Dict[str, str], field: str = "email") -> str:
    value = _strip(value)
    if not value:
        add_error(errors, field, "Email is required")
        return value
    if not _EMAIL_RE.match(value):
        add_error(errors, field, "Email is not valid")
    return value


def validate_match(value: str, confirmation: str, errors: Dict[str, str], field: str, message: str) -> None:
    if _as_str(value) != _as_str(confirmation):
        add_error(errors, field, message)


def accepts_pin_input(value: str) -> bool:
    """Whether a keystroke-level PIN entry is allowed (at most 4 digits)."""
    return len(value) <= PIN_LENGTH and _DIGITS_RE.fullmatch(value) is not None


def validate_pin(pin: str, errors: Dict[str, str], field: str = "pin") -> str:
    pin = _as_str(pin)
    if len(pin) != PIN_LENGTH or not _DIGITS_RE.fullmatch(pin):
        add_error(errors, field, f"PIN must be {PIN_LENGTH} digits")
    return pin


def is_valid_account_number(value: Any) -> bool:
    s = _as_str(value)
    return len(s) == ACCOUNT_NUMBER_LENGTH and s.isascii() and s.isdigit()


def should_verify_account(account_number: Any, bank_code: Any) -> bool:
    """Verification is only attempted for a full 10-digit number with a bank selected."""
    return is_valid_account_number(account_number) and bool(_strip(bank_code))


def raise_if_errors(errors: Dict[str, str], message: str = "Please fill in all required fields.") -> None:
    if errors:
        raise FormValidationError(field_errors=errors, message=message)
