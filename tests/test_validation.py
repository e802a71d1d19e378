from decimal import Decimal

import pytest

from kuda.utils.validation import (
    FormValidationError,
    accepts_pin_input,
    check_spendable,
    is_valid_account_number,
    parse_amount,
    raise_if_errors,
    require_str,
    should_verify_account,
    validate_email,
    validate_pin,
)


@pytest.mark.parametrize(
    "account_number,bank_code,expected",
    [
        ("0123456789", "058", True),
        ("012345678", "058", False),
        ("01234567890", "058", False),
        ("01234abc89", "058", False),
        ("0123456789", "", False),
        ("０１２３４５６７８９", "058", False),
        ("", "", False),
    ],
)
def test_should_verify_account(account_number, bank_code, expected):
    assert should_verify_account(account_number, bank_code) is expected


def test_is_valid_account_number_accepts_only_ten_ascii_digits():
    assert is_valid_account_number("1234567890")
    assert not is_valid_account_number(None)
    assert not is_valid_account_number(" 123456789")


def test_accepts_pin_input_rejects_long_or_non_digit():
    assert accepts_pin_input("")
    assert accepts_pin_input("12")
    assert accepts_pin_input("1234")
    assert not accepts_pin_input("12345")
    assert not accepts_pin_input("12a")
    assert not accepts_pin_input("123\n")
    assert not accepts_pin_input("١٢٣٤")


def test_validate_pin():
    errors = {}
    validate_pin("123", errors)
    assert errors == {"pin": "PIN must be 4 digits"}

    errors = {}
    validate_pin("4321", errors)
    assert errors == {}

    for pin in ("123\n", "١٢٣٤", "12 4"):
        errors = {}
        validate_pin(pin, errors)
        assert errors == {"pin": "PIN must be 4 digits"}


def test_parse_amount():
    errors = {}
    assert parse_amount("1,500.25", errors) == Decimal("1500.25")
    assert errors == {}

    errors = {}
    assert parse_amount("", errors) is None
    assert errors["amount"] == "Amount is required"

    errors = {}
    assert parse_amount("abc", errors) is None
    assert errors["amount"] == "Amount must be a number"

    errors = {}
    assert parse_amount("NaN", errors) is None
    assert errors["amount"] == "Amount must be a number"


def test_check_spendable():
    errors = {}
    check_spendable(Decimal("0"), 100, errors)
    assert errors["amount"] == "Amount must be greater than zero"

    errors = {}
    check_spendable(Decimal("-5"), 100, errors)
    assert errors["amount"] == "Amount must be greater than zero"

    errors = {}
    check_spendable(Decimal("100.01"), 100, errors)
    assert errors["amount"] == "Insufficient balance"

    errors = {}
    check_spendable(Decimal("100"), 100, errors)
    assert errors == {}

    errors = {}
    check_spendable(Decimal("5000"), None, errors)
    assert errors == {}


def test_validate_email_and_required_fields():
    errors = {}
    require_str({"first_name": "  "}, "first_name", errors, label="First name")
    validate_email("not-an-email", errors)
    assert errors == {"first_name": "First name is required", "email": "Email is not valid"}


def test_raise_if_errors_raises_with_field_errors():
    with pytest.raises(FormValidationError) as exc:
        raise_if_errors({"email": "Email is required"})
    assert exc.value.field_errors == {"email": "Email is required"}
    assert exc.value.message == "Please fill in all required fields."

    raise_if_errors({})
