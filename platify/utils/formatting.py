"""Formatting helpers exposed to templates.

All helpers are pure and total over their inputs.
"""

from typing import Optional
from urllib.parse import quote


def format_qty(qty: Optional[str], unit: Optional[str]) -> str:
    """Join a quantity and a unit, omitting blank parts.

    >>> format_qty("2", "cups")
    '2 cups'
    >>> format_qty("", "cups")
    'cups'
    """
    qty = qty or ""
    unit = unit or ""
    if not qty:
        return unit
    if not unit:
        return qty
    return f"{qty} {unit}"


def format_float(value: float) -> str:
    """Render a float without trailing zeros: ``3.0 -> "3"``, ``3.5 -> "3.5"``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.1f}"


def inc(index: int) -> int:
    """Turn a 0-based position into a 1-based step number."""
    return index + 1


def path_segment(value: str) -> str:
    """Escape a value so it stays a single URL path segment (``/`` included)."""
    return quote(str(value), safe="")
