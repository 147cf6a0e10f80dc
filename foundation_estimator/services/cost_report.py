"""
Cost Analysis Report data for Foundation Estimator.

Assembles everything the cost analysis report shows: per-line concrete
volumes by section, rebar takeoff rows, the cost summary lines and the
margin analysis. Rendering (HTML/PDF/print) is left to the caller; currency
and quantity formatting happen here because this is the presentation
boundary.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

import structlog

from foundation_estimator.models.line_item import LineItem
from foundation_estimator.models.proposal import Proposal
from foundation_estimator.services.aggregator import (
    LineVolume,
    line_volume,
    total_volume,
    unmatched_lines,
)
from foundation_estimator.services.costing import CostBreakdown, compute_costs
from foundation_estimator.services.rebar_calculator import (
    RebarResult,
    compute_rebar,
    has_rebar_configured,
    is_rebar_line,
)
from foundation_estimator.utils.formatting import fmt_currency, fmt_quantity
from foundation_estimator.utils.numbers import format_dimension

logger = structlog.get_logger(__name__)

HEALTHY_MARGIN_PERCENT = 30.0
FAIR_MARGIN_PERCENT = 15.0


class MarginTier(str, Enum):
    """How the gross margin is flagged on the report."""

    HEALTHY = "healthy"
    FAIR = "fair"
    LOW = "low"


def margin_tier(gross_margin: float) -> MarginTier:
    if gross_margin >= HEALTHY_MARGIN_PERCENT:
        return MarginTier.HEALTHY
    if gross_margin >= FAIR_MARGIN_PERCENT:
        return MarginTier.FAIR
    return MarginTier.LOW


# =============================================================================
# Data Models
# =============================================================================


@dataclass
class VolumeSection:
    """Volume rows and subtotal for one proposal section."""

    name: str
    rows: List[LineVolume]
    subtotal: float


@dataclass
class CalculatorRebarRow:
    """
    Rebar takeoff for one configured wall-with-footings line.

    Attributes:
        line_id: Line item id
        description: Line description
        quantity: Run length (LF)
        footing_bars: Horizontal footing bars
        wall_bars: Horizontal wall bars
        vertical_spacing_inches: Vertical bar spacing (0 = none)
        result: Computed footage
        detail: One-line breakdown of how the footage was derived
    """

    line_id: str
    description: str
    quantity: float
    footing_bars: int
    wall_bars: int
    vertical_spacing_inches: int
    result: RebarResult
    detail: str


@dataclass
class LineItemRebarRow:
    """A proposal line that is itself rebar, quantity in LF."""

    line_id: str
    description: str
    quantity: float


@dataclass
class CostLine:
    """One labelled amount in the cost summary."""

    label: str
    amount: float

    @property
    def display_amount(self) -> str:
        return fmt_currency(self.amount)


@dataclass
class CostReport:
    """
    Everything the cost analysis report displays.

    Attributes:
        builder: Header builder name
        date: Header date
        location: Header job location
        volume_sections: Footings & Walls and Slabs volume rows
        concrete_summary: Total and order yards line
        calculator_rebar_rows: Rebar derived from rebar configurations
        line_item_rebar_rows: Rebar entered as line items
        stick_line: Footage -> sticks -> cost line, None without rebar
        cost_lines: Cost summary (concrete, labor, rebar, other)
        costs: Underlying cost breakdown
        margin_tier: Margin flag
        warnings: Lines that need a manual CY override
    """

    builder: str
    date: str
    location: str
    volume_sections: List[VolumeSection]
    concrete_summary: str
    calculator_rebar_rows: List[CalculatorRebarRow]
    line_item_rebar_rows: List[LineItemRebarRow]
    stick_line: Optional[str]
    cost_lines: List[CostLine]
    costs: CostBreakdown
    margin_tier: MarginTier
    warnings: List[str] = field(default_factory=list)

    @property
    def has_rebar(self) -> bool:
        return bool(self.calculator_rebar_rows or self.line_item_rebar_rows)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "builder": self.builder,
            "date": self.date,
            "location": self.location,
            "volumeSections": [
                {
                    "name": section.name,
                    "subtotal": section.subtotal,
                    "rows": [
                        {
                            "description": row.description,
                            "quantity": row.quantity,
                            "wall": row.wall,
                            "footing": row.footing,
                            "slab": row.slab,
                            "total": row.total,
                            "method": row.method,
                            "overridden": row.overridden,
                        }
                        for row in section.rows
                    ],
                }
                for section in self.volume_sections
            ],
            "concreteSummary": self.concrete_summary,
            "calculatorRebar": [
                {"description": row.description, "detail": row.detail, **row.result.to_dict()}
                for row in self.calculator_rebar_rows
            ],
            "lineItemRebar": [
                {"description": row.description, "quantity": row.quantity}
                for row in self.line_item_rebar_rows
            ],
            "stickLine": self.stick_line,
            "costLines": [
                {"label": line.label, "amount": line.amount} for line in self.cost_lines
            ],
            "totalCost": self.costs.total_cost,
            "foundationRevenue": self.costs.foundation_revenue,
            "grossProfit": self.costs.gross_profit,
            "grossMargin": self.costs.gross_margin,
            "marginTier": self.margin_tier.value,
            "proposalTotal": self.costs.revenue.proposal_total,
            "warnings": list(self.warnings),
        }


# =============================================================================
# Section builders
# =============================================================================


def _volume_rows(lines: Sequence[LineItem]) -> List[LineVolume]:
    """Lines with a description and a quantity or override that carry volume."""
    rows = []
    for line in lines:
        if not line.description or not (line.has_quantity or line.has_override):
            continue
        volume = line_volume(line)
        if volume.total == 0 and not volume.overridden:
            continue
        rows.append(volume)
    return rows


def build_volume_sections(
    ftg_lines: Sequence[LineItem],
    slab_lines: Sequence[LineItem],
) -> List[VolumeSection]:
    sections = []
    for name, lines in (("Footings & Walls", ftg_lines), ("Slabs", slab_lines)):
        rows = _volume_rows(lines)
        if rows:
            sections.append(VolumeSection(name=name, rows=rows, subtotal=total_volume(lines)))
    return sections


def _rebar_detail(line: LineItem, result: RebarResult) -> str:
    config = line.rebar_config
    quantity = fmt_quantity(round(line.quantity_value))
    parts = [
        f"Horiz Ftg: {config.horizontal_footing_bars} × {quantity} = {fmt_quantity(round(result.footing_lf))} LF",
        f"Horiz Wall: {config.horizontal_wall_bars} × {quantity} = {fmt_quantity(round(result.wall_lf))} LF",
    ]
    if result.vertical_lf > 0:
        parts.append(
            f"Vert: {result.vertical_bar_count} bars × {result.vertical_bar_length:.2f}' "
            f"= {fmt_quantity(round(result.vertical_lf))} LF"
        )
    return " | ".join(parts)


def build_calculator_rebar_rows(ftg_lines: Sequence[LineItem]) -> List[CalculatorRebarRow]:
    rows = []
    for line in ftg_lines:
        if not has_rebar_configured(line):
            continue
        result = compute_rebar(line)
        rows.append(
            CalculatorRebarRow(
                line_id=line.id,
                description=line.description,
                quantity=line.quantity_value,
                footing_bars=line.rebar_config.horizontal_footing_bars,
                wall_bars=line.rebar_config.horizontal_wall_bars,
                vertical_spacing_inches=line.rebar_config.vertical_spacing_inches,
                result=result,
                detail=_rebar_detail(line, result),
            )
        )
    return rows


def build_line_item_rebar_rows(lines: Sequence[LineItem]) -> List[LineItemRebarRow]:
    return [
        LineItemRebarRow(line_id=line.id, description=line.description, quantity=line.quantity_value)
        for line in lines
        if is_rebar_line(line)
    ]


# =============================================================================
# Labels
# =============================================================================


def stick_line(costs: CostBreakdown) -> str:
    """``294.5 LF → 15 sticks + 10% waste = 17 sticks × $12.00 = $204.00``"""
    rebar = costs.rebar
    lf = fmt_quantity(rebar.total_lf)
    if rebar.waste_percent > 0:
        return (
            f"{lf} LF → {fmt_quantity(rebar.raw_sticks)} sticks + "
            f"{format_dimension(rebar.waste_percent)}% waste = "
            f"{fmt_quantity(rebar.adjusted_sticks)} sticks × "
            f"{fmt_currency(rebar.cost_per_stick)} = {fmt_currency(rebar.cost)}"
        )
    return (
        f"{lf} LF → {fmt_quantity(rebar.adjusted_sticks)} sticks × "
        f"{fmt_currency(rebar.cost_per_stick)} = {fmt_currency(rebar.cost)}"
    )


def rebar_cost_label(costs: CostBreakdown, has_rebar: bool) -> str:
    if not has_rebar:
        return "Rebar"
    rebar = costs.rebar
    sticks = fmt_quantity(rebar.adjusted_sticks)
    if rebar.waste_percent > 0:
        return (
            f"Rebar ({sticks} sticks w/ {format_dimension(rebar.waste_percent)}% waste "
            f"× {fmt_currency(rebar.cost_per_stick)}/stick)"
        )
    return f"Rebar ({sticks} sticks × {fmt_currency(rebar.cost_per_stick)}/stick)"


def other_costs_label(costs: CostBreakdown) -> str:
    label = "Other Costs"
    if costs.other_costs_note:
        label += f" - {costs.other_costs_note}"
    if costs.other_costs_mode == "%" and costs.other_costs_input > 0:
        label += f" ({format_dimension(costs.other_costs_input)}%)"
    return label


def build_cost_lines(costs: CostBreakdown, has_rebar: bool) -> List[CostLine]:
    order = f"{costs.order_yards:.1f}"
    lines = [
        CostLine(
            f"Concrete ({order} yd × {fmt_currency(costs.concrete_per_yard)}/yd)",
            costs.concrete_cost,
        ),
        CostLine(
            f"Labor ({order} yd × {fmt_currency(costs.labor_per_yard)}/yd)",
            costs.labor_cost,
        ),
    ]
    if has_rebar:
        lines.append(CostLine(rebar_cost_label(costs, has_rebar), costs.rebar_cost))
    lines.append(CostLine(other_costs_label(costs), costs.other_cost))
    return lines


# =============================================================================
# Report
# =============================================================================


def build_cost_report(proposal: Proposal) -> CostReport:
    """
    Assemble the cost analysis report for a proposal.

    Args:
        proposal: Proposal to report on

    Returns:
        CostReport
    """
    ftg_lines = proposal.footing_wall_lines
    slab_lines = proposal.slab_lines
    costs = compute_costs(proposal, ftg_lines, slab_lines)

    calculator_rows = build_calculator_rebar_rows(ftg_lines)
    line_item_rows = build_line_item_rebar_rows(proposal.all_lines)
    has_rebar = bool(calculator_rows or line_item_rows)

    warnings = [
        f"No volume rule matched \"{line.description}\"; enter a CY override"
        for line in unmatched_lines(proposal.all_lines)
    ]

    report = CostReport(
        builder=proposal.builder,
        date=proposal.date,
        location=proposal.location,
        volume_sections=build_volume_sections(ftg_lines, slab_lines),
        concrete_summary=(
            f"Total Concrete: {costs.total_yards:.2f} CY → Order: {costs.order_yards:.1f} CY"
        ),
        calculator_rebar_rows=calculator_rows,
        line_item_rebar_rows=line_item_rows,
        stick_line=stick_line(costs) if has_rebar else None,
        cost_lines=build_cost_lines(costs, has_rebar),
        costs=costs,
        margin_tier=margin_tier(costs.gross_margin),
        warnings=warnings,
    )

    logger.info(
        "cost_report_built",
        proposal_id=proposal.id,
        volume_rows=sum(len(section.rows) for section in report.volume_sections),
        rebar_rows=len(calculator_rows) + len(line_item_rows),
        warnings=len(warnings),
        margin_tier=report.margin_tier.value,
    )
    return report
