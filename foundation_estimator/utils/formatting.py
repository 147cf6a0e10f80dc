"""Display formatting helpers.

Used only at presentation boundaries (report rows, CLI output). Stored and
computed values keep full floating precision.
"""

from typing import Any

from foundation_estimator.utils.numbers import parse_number, try_parse_number


def fmt(value: Any) -> str:
    """Format a number with thousands separators and two decimals.

    Blank or non-numeric input renders as an empty string.
    """
    number = try_parse_number(value)
    if number is None:
        return ""
    return f"{number:,.2f}"


def fmt_currency(value: Any) -> str:
    """Format a dollar amount, e.g. ``$1,234.50``; negatives as ``-$12.00``."""
    amount = parse_number(value)
    if amount < 0:
        return f"-${abs(amount):,.2f}"
    return f"${amount:,.2f}"


def fmt_yards(value: float, places: int = 2) -> str:
    """Format a cubic-yard quantity, e.g. ``12.35 CY``."""
    return f"{value:.{places}f} CY"


def fmt_count(value: float) -> str:
    """Format a whole count with thousands separators."""
    return f"{value:,.0f}"


def fmt_quantity(value: float) -> str:
    """Format a quantity with separators and no trailing zeros (``1,294.5``)."""
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text
