"""Money Conversion: decimal form amounts to integer minor units.

Invariants:
    - Whole-cent amounts convert exactly ("15.50" -> 1550)
    - Fractional cents round half-to-even ("10.005" -> 1000, "10.015" -> 1002)
    - Only plain ASCII decimal literals parse ("1_000", full-width digits, hex are rejected)
    - Amounts above MAX_AMOUNT never reach to_cents: cents must fit a signed 64-bit column
    - Pure functions: no IO, no floats
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN

from app.core.domain_types import AmountCents

ONE_CENT = Decimal("0.01")
MAX_AMOUNT_CENTS = 2**63 - 1
MAX_AMOUNT = Decimal(MAX_AMOUNT_CENTS).scaleb(-2)

_DECIMAL_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_amount(raw: object) -> Decimal | None:
    """Coerce a raw form value to a finite Decimal, or None if it is not a number."""
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not _DECIMAL_LITERAL.fullmatch(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def in_storable_range(amount: Decimal) -> bool:
    """True when amount is positive and its cents fit BIGINT (comparison is exact)."""
    return 0 < amount <= MAX_AMOUNT


def to_cents(amount: Decimal) -> AmountCents:
    """Convert a major-unit amount to integer cents (banker's rounding).

    Rounds at two decimal places first, then shifts the exponent, so the only
    inexact step is the single half-even rounding. Callers bound the amount
    with in_storable_range before converting.
    """
    cents = amount.quantize(ONE_CENT, rounding=ROUND_HALF_EVEN).scaleb(2)
    return AmountCents(int(cents))
