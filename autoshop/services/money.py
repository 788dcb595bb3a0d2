"""
Decimal helpers for monetary amounts.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from autoshop.exceptions import ValidationError

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Convert a number to a Decimal rounded to two places (half up)."""
    if value is None:
        raise ValidationError("Amount is required")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
