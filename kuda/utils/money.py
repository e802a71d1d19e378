"""
Money helpers.

The payments provider works in kobo (1/100 Naira); the backend and the screens
work in Naira. Conversion happens only at the provider boundary.
"""

from __future__ import annotations

import random
import string
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float, str, Decimal]

KOBO_PER_NAIRA = Decimal(100)
ACCOUNT_NUMBER_PREFIX = "1234"
_BASE36 = string.digits + string.ascii_lowercase


def _to_decimal(value: Number) -> Decimal:
    # str() first so floats like 0.1 keep their printed value
    return value if isinstance(value, Decimal) else Decimal(str(value))


def naira_to_kobo(naira: Number) -> int:
    """Convert a Naira amount to integer kobo (half-up rounding)."""
    kobo = _to_decimal(naira) * KOBO_PER_NAIRA
    return int(kobo.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def kobo_to_naira(kobo: Number) -> float:
    """Convert kobo to Naira."""
    return float(_to_decimal(kobo) / KOBO_PER_NAIRA)


def format_amount(amount: Number, currency: str = "₦") -> str:
    value = _to_decimal(amount)
    if value == value.to_integral_value():
        return f"{currency}{int(value):,}"
    rounded = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = f"{rounded:,.2f}".rstrip("0").rstrip(".")
    return f"{currency}{text}"


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_reference(prefix: str = "ref") -> str:
    suffix = "".join(random.choice(_BASE36) for _ in range(7))
    return f"{prefix}_{_now_ms()}_{suffix}"


def timestamped_reference(prefix: str) -> str:
    """Provider-style default reference, e.g. ``transfer_1718000000000``."""
    return f"{prefix}_{_now_ms()}"


def generate_account_number(prefix: str = ACCOUNT_NUMBER_PREFIX) -> str:
    """10-digit Kuda account number: fixed prefix plus random digits."""
    width = 10 - len(prefix)
    suffix = str(random.randint(0, 10**width - 1)).zfill(width)
    return prefix + suffix
