"""Utility modules for Foundation Estimator."""

from foundation_estimator.utils.numbers import (
    is_blank,
    parse_number,
    try_parse_number,
    format_dimension,
    ceil_count,
)
from foundation_estimator.utils.formatting import (
    fmt,
    fmt_currency,
    fmt_yards,
    fmt_count,
    fmt_quantity,
)
from foundation_estimator.utils.log_config import configure_logging

__all__ = [
    "is_blank",
    "parse_number",
    "try_parse_number",
    "format_dimension",
    "ceil_count",
    "fmt",
    "fmt_currency",
    "fmt_yards",
    "fmt_count",
    "fmt_quantity",
    "configure_logging",
]
