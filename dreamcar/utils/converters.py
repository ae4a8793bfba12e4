"""Type conversion utilities for catalog and counter data.

This module is the single source of truth for safe type conversion.
All other modules should import from here instead of defining their own.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

_PRICE_NOISE = re.compile(r"[$,]")


def parse_price(price: str) -> Decimal:
    """Parse a display price into a Decimal.

    Strips the currency symbol and thousands separators.

    Examples:
        >>> parse_price("$899.99")
        Decimal('899.99')
        >>> parse_price("$1,299.99")
        Decimal('1299.99')
    """
    try:
        return Decimal(_PRICE_NOISE.sub("", price).strip())
    except InvalidOperation as e:
        raise ValueError(f"Unparseable price: {price!r}") from e


def safe_int(val: Any, default: int = 0) -> int:
    """Safely convert a value to int.

    Args:
        val: Value to convert (can be str, int, float, None, etc.)
        default: Value to return if conversion fails

    Returns:
        Converted int or default value
    """
    if val is None or val == "" or isinstance(val, bool):
        return default
    try:
        return int(float(val))  # Handle "3.0" -> 3
    except (ValueError, TypeError):
        return default


def safe_float(val: Any, default: float = 0.0) -> float:
    """Safely convert a value to float, returning ``default`` on failure."""
    if val is None or val == "" or isinstance(val, bool):
        return default
    try:
        return float(val)
    except (ValueError, TypeError):
        return default
