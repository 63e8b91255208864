# accounting/services/money.py

"""
MONEY HELPERS

All monetary arithmetic is Decimal, 2 decimal places, ROUND_HALF_UP.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def q2(amount) -> Decimal:
    if amount is None or amount == "":
        return ZERO
    if not isinstance(amount, Decimal):
        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise ValueError(f"Invalid money value: {amount!r}") from exc
    return amount.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
