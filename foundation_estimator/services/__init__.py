"""Estimating services for Foundation Estimator.

Leaves first:
- volume_engine: description -> cubic yards per unit
- rebar_calculator: rebar footage and stick/per-LF cost
- aggregator: section revenue, total volume, volume split
- costing: order yards, job costs, margin
- cost_report: cost analysis report data
- description_builder: custom item descriptions from dimensions
- price_history: quoted price history rows and trend
"""

from foundation_estimator.services.volume_engine import (
    NO_VOLUME,
    VOLUME_RULES,
    RuleMatch,
    VolumeCategory,
    VolumeResult,
    infer_volume,
    match_rule,
)
from foundation_estimator.services.rebar_calculator import (
    STICK_LENGTH_FT,
    LinearFootRebarCost,
    RebarResult,
    StickRebarCost,
    compute_rebar,
    has_rebar_configured,
    is_rebar_eligible,
    line_item_rebar_lf,
    linear_foot_rebar_cost,
    parse_wall_height,
    stick_rebar_cost,
    total_rebar_lf,
)
from foundation_estimator.services.aggregator import (
    LineVolume,
    RevenueSummary,
    SectionTotals,
    VolumeSplit,
    aggregate_section,
    is_pass_through,
    line_volume,
    summarize_revenue,
    total_volume,
    volume_split,
)
from foundation_estimator.services.costing import (
    CostBreakdown,
    compute_costs,
    compute_margin,
    order_yards,
    per_yard,
)

__all__ = [
    "NO_VOLUME",
    "VOLUME_RULES",
    "RuleMatch",
    "VolumeCategory",
    "VolumeResult",
    "infer_volume",
    "match_rule",
    "STICK_LENGTH_FT",
    "LinearFootRebarCost",
    "RebarResult",
    "StickRebarCost",
    "compute_rebar",
    "has_rebar_configured",
    "is_rebar_eligible",
    "line_item_rebar_lf",
    "linear_foot_rebar_cost",
    "parse_wall_height",
    "stick_rebar_cost",
    "total_rebar_lf",
    "LineVolume",
    "RevenueSummary",
    "SectionTotals",
    "VolumeSplit",
    "aggregate_section",
    "is_pass_through",
    "line_volume",
    "summarize_revenue",
    "total_volume",
    "volume_split",
    "CostBreakdown",
    "compute_costs",
    "compute_margin",
    "order_yards",
    "per_yard",
]
