import re
from decimal import Decimal

from kuda.utils.money import (
    format_amount,
    generate_account_number,
    generate_reference,
    kobo_to_naira,
    naira_to_kobo,
    timestamped_reference,
)


def test_naira_kobo_round_trip_is_exact():
    assert naira_to_kobo(100) == 10000
    assert kobo_to_naira(10000) == 100
    assert kobo_to_naira(naira_to_kobo(100)) == 100


def test_naira_to_kobo_handles_fractions_and_strings():
    assert naira_to_kobo("2500.50") == 250050
    assert naira_to_kobo(0.1) == 10
    assert naira_to_kobo(Decimal("0.005")) == 1


def test_format_amount():
    assert format_amount(125450) == "₦125,450"
    assert format_amount(1234.5) == "₦1,234.5"
    assert format_amount("99.999") == "₦100"
    assert format_amount(0) == "₦0"


def test_generate_account_number_is_ten_digits_with_prefix():
    for _ in range(20):
        number = generate_account_number()
        assert len(number) == 10
        assert number.startswith("1234")
        assert number.isdigit()


def test_references():
    assert re.fullmatch(r"transfer_\d{13}_[0-9a-z]{7}", generate_reference("transfer"))
    assert re.fullmatch(r"payment_\d{13}", timestamped_reference("payment"))
