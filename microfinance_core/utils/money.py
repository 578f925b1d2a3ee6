"""Decimal money helpers"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def parse_money(value: Any) -> Optional[Decimal]:
    """Parse a loosely-typed numeric input, returning None when it is missing or not a finite number"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # str() keeps 0.1 as 0.1 instead of its binary expansion
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not result.is_finite():
        return None
    return result


def to_money(value: Any) -> Decimal:
    """Same as parse_money but missing values become zero"""
    parsed = parse_money(value)
    return ZERO if parsed is None else parsed


def round_money(value: Decimal, places: int = 2) -> Decimal:
    """Round half-up to a fixed number of decimal places"""
    quantum = Decimal(1).scaleb(-places)
    return value.quantize(quantum, rounding=ROUND_HALF_UP)


def safe_ratio(numerator: Decimal, denominator: Decimal, scale: Decimal = Decimal(1)) -> Decimal:
    """numerator / denominator * scale, or zero when the denominator is zero"""
    if denominator == 0:
        return ZERO
    return Decimal(numerator) / Decimal(denominator) * scale
