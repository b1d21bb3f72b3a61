"""Decimal money helpers.

All amounts are carried as ``Decimal``. Intermediate products are exact
(rates have at most a few decimal places); only reported figures are
rounded, half-up, to the cent.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from .errors import InvalidInput

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")

# Largest accepted amount. Sums of a few such amounts still round to cents
# within the default 28-digit context.
MAX_AMOUNT = Decimal("1e15")


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """Convert an int, str, float or Decimal to Decimal.

    Floats go through ``str()`` so 0.1 becomes Decimal('0.1'), not the
    binary expansion.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise InvalidInput(f"{field}: expected a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidInput(f"{field}: expected a number, got {value!r}")
    if not result.is_finite():
        raise InvalidInput(f"{field}: expected a finite number, got {value!r}")
    if abs(result) > MAX_AMOUNT:
        raise InvalidInput(f"{field}: amount {value!r} exceeds the maximum of {MAX_AMOUNT:,.0f}")
    return result


def round_cents(amount: Decimal) -> Decimal:
    """Round to the nearest cent, half-up (2.345 -> 2.35)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, rate_percent: Decimal) -> Decimal:
    """Apply a percentage rate (e.g. 6.2 for 6.2%) without rounding."""
    return amount * rate_percent / HUNDRED


def rate_percent(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Ratio as a percentage rounded to two places; 0 when denominator is 0."""
    if denominator == 0:
        return ZERO.quantize(CENT)
    return round_cents(numerator / denominator * HUNDRED)
