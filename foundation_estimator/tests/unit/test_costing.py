"""
Unit Tests for the Cost & Margin Calculator.

Tests:
- Half-yard order rounding
- Margin and per-yard guards
- Full costing of the Henderson basement proposal
- Yards override, other-cost modes and the reference-only per-LF rebar cost
"""

import math

import pytest

from foundation_estimator.models.line_item import LineItem
from foundation_estimator.models.proposal import OtherCostsMode
from foundation_estimator.services.costing import (
    compute_costs,
    compute_margin,
    order_yards,
    other_cost,
    per_yard,
)
from foundation_estimator.tests.fixtures.mock_proposal_data import (
    ADJUSTED_STICKS,
    CALCULATOR_REBAR_LF,
    FOUNDATION_REVENUE,
    FTG_YARDS,
    LINE_ITEM_REBAR_LF,
    ORDER_YARDS,
    RAW_STICKS,
    SLAB_YARDS,
    TOTAL_YARDS,
)


# =============================================================================
# Arithmetic
# =============================================================================


class TestOrderYards:

    @pytest.mark.parametrize(
        "total,expected",
        [
            (12.3, 12.5),
            (12.5, 12.5),
            (12.01, 12.5),
            (12.51, 13.0),
            (12.0, 12.0),
            (0.0, 0.0),
            (0.1, 0.5),
        ],
    )
    def test_rounds_up_to_half_yard(self, total, expected):
        assert order_yards(total) == expected

    def test_float_dust_does_not_add_half_yard(self):
        assert order_yards(0.1 + 0.2 + 0.2) == 0.5


class TestMargin:

    def test_margin(self):
        profit, margin = compute_margin(10000, 7500)

        assert profit == 2500
        assert margin == 25.0

    def test_loss(self):
        profit, margin = compute_margin(1000, 1500)

        assert profit == -500
        assert margin == -50.0

    def test_zero_revenue_has_zero_margin(self):
        profit, margin = compute_margin(0, 500)

        assert profit == -500
        assert margin == 0.0

    @pytest.mark.parametrize(
        "revenue,cost",
        [(math.inf, 500), (1e308, -1e308), (math.nan, 0)],
    )
    def test_non_finite_results_are_zero(self, revenue, cost):
        assert compute_margin(revenue, cost) == (0.0, 0.0)


class TestPerYard:

    def test_per_yard(self):
        assert per_yard(1000, 40) == 25

    def test_no_yards_is_not_applicable(self):
        assert per_yard(1000, 0) is None


class TestOtherCost:

    def test_flat(self):
        assert other_cost(False, 250, 10000) == 250

    def test_percent_of_cost(self):
        assert other_cost(True, 5, 10000) == 500


# =============================================================================
# Proposal costing
# =============================================================================


class TestComputeCosts:

    def test_yards(self, sample_proposal):
        costs = compute_costs(sample_proposal)

        assert costs.ftg_yards == pytest.approx(FTG_YARDS)
        assert costs.slab_yards == pytest.approx(SLAB_YARDS)
        assert costs.auto_yards == pytest.approx(TOTAL_YARDS)
        assert costs.total_yards == pytest.approx(TOTAL_YARDS)
        assert costs.yards_overridden is False
        assert costs.order_yards == ORDER_YARDS

    def test_concrete_and_labor_priced_on_order_yards(self, sample_proposal):
        costs = compute_costs(sample_proposal)

        assert costs.concrete_cost == pytest.approx(185 * 51)
        assert costs.labor_cost == pytest.approx(60 * 51)

    def test_rebar(self, sample_proposal):
        costs = compute_costs(sample_proposal)

        assert costs.calculator_rebar_lf == pytest.approx(CALCULATOR_REBAR_LF)
        assert costs.line_item_rebar_lf == LINE_ITEM_REBAR_LF
        assert costs.total_rebar_lf == pytest.approx(CALCULATOR_REBAR_LF + LINE_ITEM_REBAR_LF)
        assert costs.rebar.raw_sticks == RAW_STICKS
        assert costs.rebar.adjusted_sticks == ADJUSTED_STICKS
        assert costs.rebar_cost == pytest.approx(ADJUSTED_STICKS * 12)

    def test_per_lf_rebar_is_reference_only(self, sample_proposal):
        costs = compute_costs(sample_proposal)

        assert costs.rebar_per_lf.total_lf == pytest.approx(CALCULATOR_REBAR_LF)
        assert costs.rebar_per_lf.cost == pytest.approx(CALCULATOR_REBAR_LF * 0.65)
        assert costs.total_cost == pytest.approx(
            costs.concrete_cost + costs.labor_cost + costs.rebar_cost + costs.other_cost
        )

    def test_other_costs_percent(self, sample_proposal):
        costs = compute_costs(sample_proposal)

        assert costs.other_costs_mode == "%"
        assert costs.other_costs_note == "Dumpster and permits"
        assert costs.other_cost == pytest.approx((9435 + 3060 + 696) * 0.05)
        assert costs.total_cost == pytest.approx(13850.55)

    def test_other_costs_flat(self, sample_proposal):
        sample_proposal.rates.other_costs_mode = OtherCostsMode.FLAT
        sample_proposal.rates.other_costs = "750"
        costs = compute_costs(sample_proposal)

        assert costs.other_costs_mode == "$"
        assert costs.other_cost == 750
        assert costs.total_cost == pytest.approx(9435 + 3060 + 696 + 750)

    def test_margin(self, sample_proposal):
        costs = compute_costs(sample_proposal)

        assert costs.foundation_revenue == pytest.approx(FOUNDATION_REVENUE)
        assert costs.gross_profit == pytest.approx(FOUNDATION_REVENUE - 13850.55)
        assert costs.gross_margin == pytest.approx(
            (FOUNDATION_REVENUE - 13850.55) / FOUNDATION_REVENUE * 100
        )

    def test_per_yard_metrics(self, sample_proposal):
        costs = compute_costs(sample_proposal)

        assert costs.revenue_per_yard == pytest.approx(FOUNDATION_REVENUE / TOTAL_YARDS)
        assert costs.cost_per_yard == pytest.approx(13850.55 / TOTAL_YARDS)
        assert costs.profit_per_yard == pytest.approx(costs.gross_profit / TOTAL_YARDS)

    def test_yards_override(self, sample_proposal):
        sample_proposal.rates.concrete_yards_override = "40"
        costs = compute_costs(sample_proposal)

        assert costs.yards_overridden is True
        assert costs.auto_yards == pytest.approx(TOTAL_YARDS)
        assert costs.total_yards == 40
        assert costs.order_yards == 40
        assert costs.concrete_cost == 185 * 40

    def test_non_numeric_yards_override_is_zero(self, sample_proposal):
        sample_proposal.rates.concrete_yards_override = "abc"
        costs = compute_costs(sample_proposal)

        assert costs.yards_overridden is True
        assert costs.total_yards == 0
        assert costs.concrete_cost == 0
        assert costs.revenue_per_yard is None

    def test_explicit_line_lists(self, sample_proposal, wall_line):
        costs = compute_costs(sample_proposal, ftg_lines=[wall_line], slab_lines=[])

        assert costs.slab_yards == 0
        assert costs.revenue.grand_standard == 7000

    def test_empty_proposal(self, empty_proposal):
        costs = compute_costs(empty_proposal)

        assert costs.total_yards == 0
        assert costs.order_yards == 0
        assert costs.total_cost == 0
        assert costs.gross_margin == 0
        assert costs.cost_per_yard is None

    def test_to_dict(self, sample_proposal):
        data = compute_costs(sample_proposal).to_dict()

        assert data["orderYards"] == ORDER_YARDS
        assert data["rebar"]["adjustedSticks"] == ADJUSTED_STICKS
        assert data["otherCostsMode"] == "%"
        assert data["foundationRevenue"] == pytest.approx(FOUNDATION_REVENUE)

    def test_overflowing_line_keeps_totals_finite(self, empty_proposal):
        empty_proposal.add_line(LineItem(quantity="1e200", unit_price_standard="1e200"))
        costs = compute_costs(empty_proposal)

        assert costs.revenue.proposal_total == 0
        assert costs.revenue.pass_through_total == 0
        assert costs.gross_profit == 0
        assert costs.gross_margin == 0
