"""Decimal helpers for money amounts."""

from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_cents(value) -> Decimal:
    """
    Quantize an amount to two decimal places.

    Accepts Decimal, int, str, or the float a SUM() comes back
    as on some drivers. None is treated as zero.
    """
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)
