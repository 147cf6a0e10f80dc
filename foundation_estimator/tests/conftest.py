"""Pytest configuration and shared fixtures for Foundation Estimator tests."""

import os
import sys

import pytest
import structlog


# ============================================================================
# Ensure the package is importable without an editable install
# ============================================================================
#
# Tests import `foundation_estimator...` absolutely; put the repository root
# (the directory holding the package) on sys.path.
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


from foundation_estimator.models.line_item import LineItem, RebarConfig, Section, Unit  # noqa: E402
from foundation_estimator.models.proposal import CostRates, Proposal  # noqa: E402
from foundation_estimator.tests.fixtures.mock_proposal_data import (  # noqa: E402
    WALL_8FT,
    cost_rates,
    footing_wall_lines,
    henderson_proposal,
    henderson_record,
    slab_lines,
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() calls; they bind the (captured) stderr of one test."""
    yield
    structlog.reset_defaults()


# ============================================================================
# Line Items
# ============================================================================

@pytest.fixture
def wall_line():
    """100 LF of 8' wall on footings, rebar at 2/2 horizontal, verticals 32" OC."""
    return LineItem(
        quantity="100",
        unit=Unit.LF,
        description=WALL_8FT,
        unit_price_standard="70",
        rebar_config=RebarConfig(
            horizontal_footing_bars=2,
            horizontal_wall_bars=2,
            vertical_spacing_inches=32,
        ),
    )


@pytest.fixture
def slab_line():
    return LineItem(
        quantity="1000",
        unit=Unit.SF,
        description='Basement Slab - 4"',
        unit_price_standard="5.50",
        section=Section.SLAB,
    )


@pytest.fixture
def sample_ftg_lines():
    return footing_wall_lines()


@pytest.fixture
def sample_slab_lines():
    return slab_lines()


# ============================================================================
# Proposals
# ============================================================================

@pytest.fixture
def sample_rates() -> CostRates:
    return cost_rates()


@pytest.fixture
def sample_proposal() -> Proposal:
    """Full basement proposal with rebar, pass-through items and two slabs."""
    return henderson_proposal()


@pytest.fixture
def sample_record():
    """Sample proposal as a camelCase persistence record."""
    return henderson_record()


@pytest.fixture
def empty_proposal() -> Proposal:
    return Proposal.new(rows=3, builder="Blank Builder")
