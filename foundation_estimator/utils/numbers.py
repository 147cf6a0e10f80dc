"""Lenient numeric parsing for estimator-entered values.

Quantities, prices and dimensions arrive as free-form strings typed into a
form mid-edit. Anything that is not a finite number parses to 0.
"""

import math
import re
from typing import Any, Optional

_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def is_blank(value: Any) -> bool:
    """True when a form value is missing or only whitespace."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def try_parse_number(value: Any) -> Optional[float]:
    """Parse a decimal string (or number) into a finite float, or None.

    Accepts "$" prefixes and thousands separators. A leading numeric prefix
    is used when trailing text follows it ("12 LF" -> 12.0).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
        return result if math.isfinite(result) else None

    text = str(value).strip().replace(",", "")
    if text.startswith("$"):
        text = text[1:].strip()
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    result = float(match.group(0))
    return result if math.isfinite(result) else None


def parse_number(value: Any, default: float = 0.0) -> float:
    """Parse a form value into a float, ``default`` when nothing numeric is there.

    Args:
        value: Raw value from a form field or record.
        default: Value returned for blank, non-numeric, NaN or infinite input.

    Returns:
        Parsed finite float.
    """
    result = try_parse_number(value)
    return default if result is None else result


_CEIL_TOLERANCE = 1e-9


def ceil_count(value: float) -> int:
    """Round up to a whole count, ignoring floating-point dust.

    ``10 * 1.1`` is ``11.000000000000002`` in binary floating point; a plain
    ``math.ceil`` would order an extra stick or half yard.
    """
    return math.ceil(value - _CEIL_TOLERANCE)


def format_dimension(value: float) -> str:
    """Render a computed dimension without a trailing ``.0`` when integral."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
