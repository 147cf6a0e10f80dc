"""
Cost & Margin Calculator for Foundation Estimator.

Derives concrete order quantity, material/labor/rebar/other job costs and
gross margin for a proposal from the aggregator outputs and the proposal's
cost rates.

Pipeline (recomputed on every change, nothing persisted):
1. Auto yards = footing/wall yards + slab yards (or the proposal override)
2. Order yards = auto yards rounded up to the next half yard
3. Concrete and labor priced on order yards
4. Rebar priced in sticks with waste (calculator + line-item footage)
5. Other costs flat, or a percentage of concrete + labor + rebar
6. Margin against foundation revenue (pass-through lines excluded)
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import structlog

from foundation_estimator.models.line_item import LineItem
from foundation_estimator.models.proposal import OtherCostsMode, Proposal
from foundation_estimator.services.aggregator import (
    RevenueSummary,
    summarize_revenue,
    total_volume,
)
from foundation_estimator.services.rebar_calculator import (
    LinearFootRebarCost,
    StickRebarCost,
    line_item_rebar_lf,
    linear_foot_rebar_cost,
    stick_rebar_cost,
    total_rebar_lf,
)
from foundation_estimator.utils.numbers import ceil_count, parse_number

logger = structlog.get_logger(__name__)


# =============================================================================
# Data Models
# =============================================================================


@dataclass
class CostBreakdown:
    """
    Job costing for one proposal.

    Attributes:
        ftg_yards: Footing/wall section cubic yards
        slab_yards: Slab section cubic yards
        auto_yards: ftg_yards + slab_yards
        yards_overridden: True when the proposal's yards override was used
        total_yards: Yards the job is costed on (override or auto)
        order_yards: total_yards rounded up to the next half yard
        concrete_per_yard: Concrete rate ($/yd)
        labor_per_yard: Labor rate ($/yd)
        concrete_cost: concrete_per_yard x order_yards
        labor_cost: labor_per_yard x order_yards
        calculator_rebar_lf: Rebar footage from rebar configurations
        line_item_rebar_lf: Rebar footage from "Rebar ..." line items
        rebar: Stick-mode rebar cost (included in total_cost)
        rebar_per_lf: Per-LF rebar cost on calculator footage (reference only)
        other_costs_mode: "$" or "%"
        other_costs_input: Other costs as entered (dollars or percent)
        other_costs_note: Free-text note for other costs
        other_cost: Other costs in dollars
        total_cost: concrete + labor + rebar + other
        revenue: Proposal revenue summary
        gross_profit: foundation revenue - total_cost
        gross_margin: gross_profit as a percent of foundation revenue
        revenue_per_yard: Foundation revenue per total yard, None when no yards
        cost_per_yard: Total cost per total yard, None when no yards
        profit_per_yard: Gross profit per total yard, None when no yards
    """

    ftg_yards: float
    slab_yards: float
    auto_yards: float
    yards_overridden: bool
    total_yards: float
    order_yards: float
    concrete_per_yard: float
    labor_per_yard: float
    concrete_cost: float
    labor_cost: float
    calculator_rebar_lf: float
    line_item_rebar_lf: float
    rebar: StickRebarCost
    rebar_per_lf: LinearFootRebarCost
    other_costs_mode: str
    other_costs_input: float
    other_costs_note: str
    other_cost: float
    total_cost: float
    revenue: RevenueSummary
    gross_profit: float
    gross_margin: float
    revenue_per_yard: Optional[float]
    cost_per_yard: Optional[float]
    profit_per_yard: Optional[float]

    @property
    def total_rebar_lf(self) -> float:
        return self.calculator_rebar_lf + self.line_item_rebar_lf

    @property
    def rebar_cost(self) -> float:
        return self.rebar.cost

    @property
    def foundation_revenue(self) -> float:
        return self.revenue.foundation_revenue

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a camelCase dict for API/CLI output."""
        return {
            "ftgYards": self.ftg_yards,
            "slabYards": self.slab_yards,
            "autoYards": self.auto_yards,
            "yardsOverridden": self.yards_overridden,
            "totalYards": self.total_yards,
            "orderYards": self.order_yards,
            "concretePerYard": self.concrete_per_yard,
            "laborPerYard": self.labor_per_yard,
            "concreteCost": self.concrete_cost,
            "laborCost": self.labor_cost,
            "rebar": {
                "calculatorLF": self.calculator_rebar_lf,
                "lineItemLF": self.line_item_rebar_lf,
                "totalLF": self.total_rebar_lf,
                "rawSticks": self.rebar.raw_sticks,
                "adjustedSticks": self.rebar.adjusted_sticks,
                "wastePercent": self.rebar.waste_percent,
                "costPerStick": self.rebar.cost_per_stick,
                "cost": self.rebar.cost,
            },
            "rebarPerLF": {
                "totalLF": self.rebar_per_lf.total_lf,
                "costPerLF": self.rebar_per_lf.cost_per_lf,
                "cost": self.rebar_per_lf.cost,
            },
            "otherCostsMode": self.other_costs_mode,
            "otherCostsInput": self.other_costs_input,
            "otherCostsNote": self.other_costs_note,
            "otherCost": self.other_cost,
            "totalCost": self.total_cost,
            "grandStd": self.revenue.grand_standard,
            "grandOpt": self.revenue.grand_optional,
            "proposalTotal": self.revenue.proposal_total,
            "foundationRevenue": self.revenue.foundation_revenue,
            "passThroughTotal": self.revenue.pass_through_total,
            "grossProfit": self.gross_profit,
            "grossMargin": self.gross_margin,
            "revenuePerYard": self.revenue_per_yard,
            "costPerYard": self.cost_per_yard,
            "profitPerYard": self.profit_per_yard,
        }


# =============================================================================
# Arithmetic
# =============================================================================


def order_yards(total_yards: float) -> float:
    """Concrete is ordered in half-yard steps, always rounding up (12.3 -> 12.5)."""
    return ceil_count(total_yards * 2) / 2


def compute_margin(revenue: float, total_cost: float) -> Tuple[float, float]:
    """
    Gross profit and gross margin percent.

    Margin is 0 when there is no revenue to divide by. Profit and margin are
    both 0 when the inputs overflow to a non-finite result.

    Returns:
        (gross_profit, gross_margin)
    """
    profit = revenue - total_cost
    if not math.isfinite(profit):
        return 0.0, 0.0
    margin = (profit / revenue) * 100 if revenue > 0 else 0.0
    if not math.isfinite(margin):
        margin = 0.0
    return profit, margin


def per_yard(value: float, total_yards: float) -> Optional[float]:
    """``value / total_yards``, or None (not applicable) when there are no yards."""
    if not total_yards:
        return None
    return value / total_yards


def other_cost(mode_is_percent: bool, amount: float, base_cost: float) -> float:
    """Other job costs in dollars.

    In percent mode ``amount`` is a percentage of the cost so far
    (concrete + labor + rebar), not of revenue.
    """
    if mode_is_percent:
        return base_cost * amount / 100
    return amount


# =============================================================================
# Proposal costing
# =============================================================================


def compute_costs(
    proposal: Proposal,
    ftg_lines: Optional[Sequence[LineItem]] = None,
    slab_lines: Optional[Sequence[LineItem]] = None,
) -> CostBreakdown:
    """
    Full job costing for a proposal.

    Args:
        proposal: Proposal supplying the cost rates
        ftg_lines: Footing/wall lines (defaults to the proposal's own)
        slab_lines: Slab lines (defaults to the proposal's own)

    Returns:
        CostBreakdown
    """
    if ftg_lines is None:
        ftg_lines = proposal.footing_wall_lines
    if slab_lines is None:
        slab_lines = proposal.slab_lines
    rates = proposal.rates

    # Step 1: Yards
    ftg_yards = total_volume(ftg_lines)
    slab_yards = total_volume(slab_lines)
    auto_yards = ftg_yards + slab_yards
    yards_overridden = rates.has_yards_override
    total_yards = parse_number(rates.concrete_yards_override) if yards_overridden else auto_yards
    ordered = order_yards(total_yards)

    # Step 2: Concrete and labor on order yards
    concrete_cost = rates.concrete_rate * ordered
    labor_cost = rates.labor_rate * ordered

    # Step 3: Rebar
    calculator_lf = total_rebar_lf(ftg_lines)
    line_item_lf = line_item_rebar_lf([*ftg_lines, *slab_lines])
    rebar = stick_rebar_cost(calculator_lf + line_item_lf, rates.stick_cost, rates.waste_percent)
    rebar_per_lf = linear_foot_rebar_cost(calculator_lf, rates.rebar_lf_cost)

    # Step 4: Other costs
    base_cost = concrete_cost + labor_cost + rebar.cost
    other = other_cost(rates.is_percent_other_costs, rates.other_costs_value, base_cost)
    total_cost = base_cost + other

    # Step 5: Revenue and margin
    revenue = summarize_revenue(ftg_lines, slab_lines)
    gross_profit, gross_margin = compute_margin(revenue.foundation_revenue, total_cost)

    breakdown = CostBreakdown(
        ftg_yards=ftg_yards,
        slab_yards=slab_yards,
        auto_yards=auto_yards,
        yards_overridden=yards_overridden,
        total_yards=total_yards,
        order_yards=ordered,
        concrete_per_yard=rates.concrete_rate,
        labor_per_yard=rates.labor_rate,
        concrete_cost=concrete_cost,
        labor_cost=labor_cost,
        calculator_rebar_lf=calculator_lf,
        line_item_rebar_lf=line_item_lf,
        rebar=rebar,
        rebar_per_lf=rebar_per_lf,
        other_costs_mode=OtherCostsMode(rates.other_costs_mode).value,
        other_costs_input=rates.other_costs_value,
        other_costs_note=rates.other_costs_note,
        other_cost=other,
        total_cost=total_cost,
        revenue=revenue,
        gross_profit=gross_profit,
        gross_margin=gross_margin,
        revenue_per_yard=per_yard(revenue.foundation_revenue, total_yards),
        cost_per_yard=per_yard(total_cost, total_yards),
        profit_per_yard=per_yard(gross_profit, total_yards),
    )

    logger.info(
        "proposal_costs_computed",
        proposal_id=proposal.id,
        total_yards=round(total_yards, 2),
        order_yards=ordered,
        yards_overridden=yards_overridden,
        total_cost=round(total_cost, 2),
        foundation_revenue=round(revenue.foundation_revenue, 2),
        gross_margin=round(gross_margin, 1),
    )

    return breakdown
