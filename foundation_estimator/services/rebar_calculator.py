"""
Rebar Quantity Calculator for Foundation Estimator.

Derives rebar linear footage for wall-with-footings lines from the line's
rebar configuration and the wall height in its description, and converts
footage to cost.

Two costing modes exist and are kept apart:
- stick mode: footage -> 20' sticks, plus waste, times cost per stick
- per-LF mode: footage times cost per linear foot
They are not equivalent and neither is derived from the other.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

import structlog

from foundation_estimator.models.line_item import LineItem
from foundation_estimator.utils.numbers import ceil_count, parse_number

logger = structlog.get_logger(__name__)

STICK_LENGTH_FT = 20.0

# Vertical bars stop 3" short of the wall height for cover
VERTICAL_BAR_CLEARANCE_FT = 0.25

_WALL_WITH = re.compile(r"Wall\s*-\s*with", re.IGNORECASE)
_FOOT = re.compile(r"Foot", re.IGNORECASE)
_LEADING_HEIGHT = re.compile(r"^(\d+(?:\.\d+)?)'")
_REBAR_LINE = re.compile(r"^rebar", re.IGNORECASE)


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class RebarResult:
    """
    Rebar footage for one line.

    Attributes:
        footing_lf: Horizontal footing bars x run length
        wall_lf: Horizontal wall bars x run length
        vertical_lf: Vertical bar count x bar length
        total_lf: Sum of the three
        vertical_bar_count: Vertical bar positions along the run
        vertical_bar_length: Length of each vertical bar (ft)
    """

    footing_lf: float = 0.0
    wall_lf: float = 0.0
    vertical_lf: float = 0.0
    total_lf: float = 0.0
    vertical_bar_count: int = 0
    vertical_bar_length: float = 0.0

    def to_dict(self) -> dict:
        return {
            "footingLF": self.footing_lf,
            "wallLF": self.wall_lf,
            "verticalLF": self.vertical_lf,
            "totalLF": self.total_lf,
        }


NO_REBAR = RebarResult()


@dataclass(frozen=True)
class StickRebarCost:
    """Rebar cost when buying 20' sticks with a waste allowance."""

    total_lf: float
    raw_sticks: int
    adjusted_sticks: int
    waste_percent: float
    cost_per_stick: float
    cost: float


@dataclass(frozen=True)
class LinearFootRebarCost:
    """Rebar cost priced per linear foot."""

    total_lf: float
    cost_per_lf: float
    cost: float


# =============================================================================
# Description checks
# =============================================================================


def is_rebar_eligible(description: Optional[str]) -> bool:
    """True for combined wall + footing descriptions ("... Wall - with ... Footings")."""
    if not isinstance(description, str):
        return False
    return bool(_WALL_WITH.search(description)) and bool(_FOOT.search(description))


def parse_wall_height(description: Optional[str]) -> float:
    """Leading wall height in feet (``8' x 8" Wall ...`` -> 8.0), 0 if absent."""
    if not isinstance(description, str):
        return 0.0
    match = _LEADING_HEIGHT.match(description.strip())
    if not match:
        return 0.0
    return parse_number(match.group(1))


def has_rebar_configured(line: LineItem) -> bool:
    """True when an eligible line carries a non-empty rebar configuration."""
    return (
        line.rebar_config is not None
        and line.rebar_config.is_configured
        and is_rebar_eligible(line.description)
    )


# =============================================================================
# Footage
# =============================================================================


def compute_rebar(line: LineItem) -> RebarResult:
    """
    Rebar linear footage for one line item.

    Returns NO_REBAR when the line has no rebar configuration, no quantity,
    or a description that is not a wall-with-footings item.

    Example:
        100 LF of 8' wall, verticals at 32" OC:
        ceil(100 / (32/12)) = 38 bars x 7.75' = 294.5 LF

    Args:
        line: Line item with quantity (LF of wall) and rebar_config

    Returns:
        RebarResult
    """
    config = line.rebar_config
    if config is None or not line.has_quantity:
        return NO_REBAR
    if not is_rebar_eligible(line.description):
        if config.is_configured:
            logger.debug("rebar_config_ignored", line_id=line.id, description=line.description)
        return NO_REBAR

    quantity = line.quantity_value
    footing_lf = quantity * config.horizontal_footing_bars
    wall_lf = quantity * config.horizontal_wall_bars

    vertical_lf = 0.0
    bar_count = 0
    bar_length = 0.0
    if config.vertical_spacing_inches > 0:
        bar_count = ceil_count(quantity * 12 / config.vertical_spacing_inches)
        bar_length = parse_wall_height(line.description) - VERTICAL_BAR_CLEARANCE_FT
        if bar_length > 0:
            vertical_lf = bar_count * bar_length

    return RebarResult(
        footing_lf=footing_lf,
        wall_lf=wall_lf,
        vertical_lf=vertical_lf,
        total_lf=footing_lf + wall_lf + vertical_lf,
        vertical_bar_count=bar_count,
        vertical_bar_length=max(bar_length, 0.0),
    )


def total_rebar_lf(lines: Iterable[LineItem]) -> float:
    """Calculator rebar footage summed over footing/wall lines."""
    return sum((compute_rebar(line).total_lf for line in lines), 0.0)


def is_rebar_line(line: LineItem) -> bool:
    """True for a priced line that is itself rebar ("Rebar - #4 ...")."""
    return bool(_REBAR_LINE.match(line.description.strip())) and line.has_quantity


def line_item_rebar_lf(lines: Iterable[LineItem]) -> float:
    """Footage from lines whose description starts with "rebar".

    Their quantity is already in LF. Additive with calculator rebar.
    """
    return sum((line.quantity_value for line in lines if is_rebar_line(line)), 0.0)


# =============================================================================
# Cost
# =============================================================================


def stick_rebar_cost(
    total_lf: float,
    cost_per_stick: float,
    waste_percent: float = 0.0,
    stick_length_ft: float = STICK_LENGTH_FT,
) -> StickRebarCost:
    """
    Rebar cost in sticks with a waste allowance.

    raw_sticks = ceil(total_lf / 20)
    adjusted_sticks = ceil(raw_sticks x (1 + waste% / 100))
    cost = adjusted_sticks x cost_per_stick
    """
    raw_sticks = ceil_count(total_lf / stick_length_ft) if stick_length_ft > 0 else 0
    adjusted_sticks = ceil_count(raw_sticks * (1 + waste_percent / 100))
    return StickRebarCost(
        total_lf=total_lf,
        raw_sticks=raw_sticks,
        adjusted_sticks=adjusted_sticks,
        waste_percent=waste_percent,
        cost_per_stick=cost_per_stick,
        cost=adjusted_sticks * cost_per_stick,
    )


def linear_foot_rebar_cost(total_lf: float, cost_per_lf: float) -> LinearFootRebarCost:
    """Rebar cost priced per linear foot: total_lf x cost_per_lf."""
    return LinearFootRebarCost(
        total_lf=total_lf,
        cost_per_lf=cost_per_lf,
        cost=total_lf * cost_per_lf,
    )
