"""
Section / Proposal Aggregator for Foundation Estimator.

Folds line items into section revenue totals, total concrete volume and the
wall/footing/slab/other volume split. Pure functions; nothing is cached or
stored on the proposal.
"""

import math
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import structlog

from foundation_estimator.models.line_item import LineItem
from foundation_estimator.services.rebar_calculator import is_rebar_line
from foundation_estimator.services.volume_engine import infer_volume

logger = structlog.get_logger(__name__)

# Remainder volume below this is floating-point drift, not slab
SLAB_REMAINDER_EPSILON = 0.001

MANUAL_METHOD = "manual"

_PASS_THROUGH = re.compile(r"concrete\s*pump|winter\s*concrete", re.IGNORECASE)


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class SectionTotals:
    """Revenue for one section, by price column."""

    standard_total: float = 0.0
    optional_total: float = 0.0

    @property
    def total(self) -> float:
        return self.standard_total + self.optional_total


@dataclass(frozen=True)
class LineVolume:
    """
    Concrete volume of one line item.

    Attributes:
        line_id: Line item id
        description: Line description
        quantity: Parsed quantity
        wall: Wall CY
        footing: Footing CY
        slab: Remainder CY (total minus wall and footing, never negative)
        other: Manually overridden CY
        total: Line CY
        method: Rule label, "manual" when overridden, None when nothing matched
        overridden: True when volume_override replaced the computed volume
    """

    line_id: str
    description: str
    quantity: float
    wall: float = 0.0
    footing: float = 0.0
    slab: float = 0.0
    other: float = 0.0
    total: float = 0.0
    method: Optional[str] = None
    overridden: bool = False

    @property
    def needs_override(self) -> bool:
        """True for a quantified line nothing could compute a volume for."""
        return not self.overridden and self.method is None and self.quantity != 0


@dataclass(frozen=True)
class VolumeSplit:
    """Cubic yards by structural category."""

    wall: float = 0.0
    footing: float = 0.0
    slab: float = 0.0
    other: float = 0.0

    @property
    def total(self) -> float:
        return self.wall + self.footing + self.slab + self.other

    def to_dict(self) -> dict:
        return {
            "wall": self.wall,
            "ftg": self.footing,
            "slab": self.slab,
            "other": self.other,
            "total": self.total,
        }


@dataclass(frozen=True)
class RevenueSummary:
    """
    Proposal revenue.

    Attributes:
        grand_standard: Standard column, both sections
        grand_optional: Optional column, both sections
        proposal_total: grand_standard + grand_optional
        foundation_revenue: proposal_total excluding pass-through lines
        pass_through_total: proposal_total - foundation_revenue
    """

    grand_standard: float
    grand_optional: float
    proposal_total: float
    foundation_revenue: float
    pass_through_total: float


# =============================================================================
# Revenue
# =============================================================================


def _line_amount(line: LineItem, price: Optional[float]) -> float:
    if price is None or not line.has_quantity:
        return 0.0
    amount = line.quantity_value * price
    # Finite inputs can still overflow; such a line counts as 0.
    return amount if math.isfinite(amount) else 0.0


def aggregate_section(lines: Iterable[LineItem]) -> SectionTotals:
    """
    Sum quantity x unit price per price column.

    A line missing either its quantity or a column's price contributes 0 to
    that column.
    """
    standard = 0.0
    optional = 0.0
    for line in lines:
        standard += _line_amount(line, line.standard_price)
        optional += _line_amount(line, line.optional_price)
    return SectionTotals(standard_total=standard, optional_total=optional)


def is_pass_through(description: Optional[str]) -> bool:
    """True for concrete pump / winter concrete lines billed at near cost."""
    if not isinstance(description, str):
        return False
    return bool(_PASS_THROUGH.search(description))


def summarize_revenue(
    ftg_lines: Sequence[LineItem],
    slab_lines: Sequence[LineItem],
) -> RevenueSummary:
    """
    Proposal totals and foundation revenue.

    Foundation revenue is the grand total of every line except pass-through
    items, which stay in the proposal total but out of margin analysis.
    """
    ftg = aggregate_section(ftg_lines)
    slab = aggregate_section(slab_lines)
    grand_standard = ftg.standard_total + slab.standard_total
    grand_optional = ftg.optional_total + slab.optional_total
    proposal_total = grand_standard + grand_optional

    foundation = aggregate_section(
        line for line in [*ftg_lines, *slab_lines] if not is_pass_through(line.description)
    )
    foundation_revenue = foundation.total

    return RevenueSummary(
        grand_standard=grand_standard,
        grand_optional=grand_optional,
        proposal_total=proposal_total,
        foundation_revenue=foundation_revenue,
        pass_through_total=proposal_total - foundation_revenue,
    )


# =============================================================================
# Volume
# =============================================================================


def line_volume(line: LineItem) -> LineVolume:
    """
    Volume of a single line.

    An override replaces the computed volume entirely and is attributed to
    ``other``, even when the line has no quantity. Otherwise every figure is
    the description's per-unit volume scaled by quantity.
    """
    quantity = line.quantity_value

    if line.has_override:
        override = line.override_value
        return LineVolume(
            line_id=line.id,
            description=line.description,
            quantity=quantity,
            other=override,
            total=override,
            method=MANUAL_METHOD,
            overridden=True,
        )

    if not line.has_quantity:
        return LineVolume(line_id=line.id, description=line.description, quantity=0.0)

    per_unit = infer_volume(line.description)
    wall = quantity * per_unit.wall_cy_per_unit
    footing = quantity * per_unit.footing_cy_per_unit
    total = quantity * per_unit.cubic_yards_per_unit
    return LineVolume(
        line_id=line.id,
        description=line.description,
        quantity=quantity,
        wall=wall,
        footing=footing,
        slab=max(0.0, total - wall - footing),
        total=total,
        method=per_unit.method,
    )


def line_volumes(lines: Iterable[LineItem]) -> List[LineVolume]:
    return [line_volume(line) for line in lines]


def total_volume(lines: Iterable[LineItem]) -> float:
    """Total cubic yards: overrides as entered, otherwise quantity x CY per unit."""
    return sum((line_volume(line).total for line in lines), 0.0)


def volume_split(lines: Iterable[LineItem]) -> VolumeSplit:
    """
    Split total volume into wall, footing, slab and other (manual).

    Slab volume is the remainder not attributed to wall or footing, counted
    only when it exceeds SLAB_REMAINDER_EPSILON.
    """
    wall = footing = slab = other = 0.0
    unmatched = 0
    for volume in line_volumes(lines):
        if volume.overridden:
            other += volume.other
            continue
        if volume.needs_override:
            unmatched += 1
        wall += volume.wall
        footing += volume.footing
        if volume.slab > SLAB_REMAINDER_EPSILON:
            slab += volume.slab

    if unmatched:
        logger.debug("volume_split_unmatched_lines", count=unmatched)

    return VolumeSplit(wall=wall, footing=footing, slab=slab, other=other)


def needs_volume_override(line: LineItem) -> bool:
    """True for a concrete line whose description no rule recognised.

    Pass-through and rebar lines carry no concrete volume and are skipped.
    """
    if not line.description.strip():
        return False
    if is_pass_through(line.description) or is_rebar_line(line):
        return False
    return line_volume(line).needs_override


def unmatched_lines(lines: Iterable[LineItem]) -> List[LineItem]:
    """Quantified lines with no override that need a manual CY entry."""
    return [line for line in lines if needs_volume_override(line)]
