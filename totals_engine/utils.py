"""Utility functions shared across the totals engine."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional

PENNY = Decimal("0.01")
HUNDRED = Decimal("100")
DEFAULT_CURRENCY_SYMBOL = "£"

# Wide enough that no pipeline stage or rounding step loses digits for any
# input below MAX_INPUT_MAGNITUDE.
WORKING_PRECISION = 60
# Quantities, prices, and amounts must be strictly below this.
MAX_INPUT_MAGNITUDE = Decimal("1E+15")


def safe_decimal(value: object) -> Optional[Decimal]:
    """Convert to an exact, finite Decimal if possible, else None.

    Floats go through ``str`` first so ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion. Booleans are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    if not isinstance(value, (Decimal, int, float, str)):
        return None
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not result.is_finite():
        return None
    return result


def too_large(value: Decimal) -> bool:
    return value.copy_abs() >= MAX_INPUT_MAGNITUDE


def round_money(value: Decimal) -> Decimal:
    """Round half-up to whole pennies."""
    with localcontext() as ctx:
        ctx.prec = WORKING_PRECISION
        return value.quantize(PENNY, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format amount as currency, e.g. ``£1,234.50`` or ``-£12.00``."""
    rounded = round_money(amount)
    sign = "-" if rounded < 0 else ""
    # Already at exponent -2, so plain "f" prints exactly two decimals.
    return f"{sign}{symbol}{rounded.copy_abs():,f}"


def format_percent(value: Decimal) -> str:
    """Render a percentage without trailing zeros: 20 -> ``20%``, 2.50 -> ``2.5%``."""
    normalized = value.normalize()
    if normalized == normalized.to_integral_value():
        normalized = normalized.quantize(Decimal(1))
    return f"{normalized:f}%"


def approx_equal(a: Optional[Decimal], b: Optional[Decimal], tolerance: Decimal = PENNY) -> bool:
    """Check if two money values are equal within tolerance (one penny by default)."""
    if a is None or b is None:
        return False
    return abs(a - b) <= tolerance
