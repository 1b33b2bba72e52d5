"""Decimal coercion helpers for values coming out of the goal store."""
import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from bson.decimal128 import Decimal128

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def to_decimal(value: Any, default: Optional[Decimal] = ZERO) -> Optional[Decimal]:
    """
    Coerce a stored numeric value to a finite Decimal.

    The store may hand back Decimal128, float, int, numeric strings or junk
    left behind by older clients. Anything that is not a finite number
    becomes ``default``.

    Args:
        value: Raw value from a document
        default: Value returned for missing or invalid input

    Returns:
        Finite Decimal, or ``default``

    Examples:
        >>> to_decimal("50.5")
        Decimal('50.5')
        >>> to_decimal(None)
        Decimal('0')
        >>> to_decimal("NaN", default=None) is None
        True
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, Decimal128):
        value = value.to_decimal()

    if isinstance(value, float):
        if not math.isfinite(value):
            return default
        # repr keeps 50.5 as 50.5 instead of the full binary expansion
        value = repr(value)

    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return default

    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return default

    if not result.is_finite():
        return default
    return result


def round_half_up(value: Decimal, exp: Decimal = CENTS) -> Decimal:
    """Round to ``exp`` places, halves away from zero."""
    return value.quantize(exp, rounding=ROUND_HALF_UP)


def percent_of(current: Decimal, target: Decimal) -> int:
    """
    Whole-number percentage of ``current`` against ``target``.

    A zero target yields 0 rather than a division error.
    """
    if target <= 0:
        return 0
    return int(round_half_up(current / target * 100, Decimal("1")))


def to_storage(value: Optional[Decimal]) -> Optional[Decimal128]:
    """Convert a Decimal into the BSON type Mongo stores losslessly."""
    if value is None:
        return None
    return Decimal128(value)
