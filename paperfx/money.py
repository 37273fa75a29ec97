"""Monetary input bounds and the decimal context for ledger arithmetic.

Inputs are limited to MAX_DECIMAL_PLACES fractional digits and magnitudes
below MAX_AMOUNT, so each has at most 24 significant digits and a product of
two has at most 48. LEDGER_CONTEXT carries far more precision than that, so
notional, P&L and balance arithmetic done inside it never rounds.
"""

from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    ROUND_HALF_EVEN,
)

from paperfx.errors import ValidationError

MAX_AMOUNT = Decimal("1000000000000")
MAX_DECIMAL_PLACES = 12

LEDGER_CONTEXT = Context(
    prec=100,
    rounding=ROUND_HALF_EVEN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


def decimal_places(value: Decimal) -> int:
    """Number of significant fractional digits (trailing zeros ignored)."""
    _, digits, exponent = value.as_tuple()
    trailing_zeros = len(digits) - len("".join(map(str, digits)).rstrip("0"))
    if trailing_zeros == len(digits):
        return 0
    return max(0, -(exponent + trailing_zeros))


def to_decimal(value, field: str) -> Decimal:
    """Convert a numeric input to a bounded, finite Decimal.

    Floats go through str() so 1.1 becomes Decimal("1.1"), not its binary
    expansion.

    Raises:
        ValidationError: If value is not a finite number, its magnitude is
            MAX_AMOUNT or more, or it has more than MAX_DECIMAL_PLACES places
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"{field} must be a number, got {value!r}")
    if not result.is_finite():
        raise ValidationError(f"{field} must be finite")
    if abs(result) >= MAX_AMOUNT:
        raise ValidationError(f"{field} must be less than {MAX_AMOUNT}")
    if decimal_places(result) > MAX_DECIMAL_PLACES:
        raise ValidationError(
            f"{field} has more than {MAX_DECIMAL_PLACES} decimal places"
        )
    return result
