"""
Unit Tests for the Price History Summary.

Tests:
- Grouping standard/optional records into one row per quote
- Matching on description or catalog item
- Newest-first ordering and row limits
- Price trend
- Building records from a saved proposal
"""

from datetime import datetime, timedelta

import pytest

from foundation_estimator.models.line_item import LineItem
from foundation_estimator.models.price_history import PriceHistoryRecord, PricingType
from foundation_estimator.services.price_history import (
    FETCH_LIMIT,
    PriceHistoryRow,
    group_price_history,
    price_trend,
    records_from_line_items,
)
from foundation_estimator.tests.fixtures.mock_proposal_data import WALL_8FT

BASE_TIME = datetime(2025, 6, 1, 9, 30)


def record(
    price,
    pricing_type=PricingType.STANDARD,
    days=0,
    description=WALL_8FT,
    builder="Henderson Homes",
    location="412 Birch Lane",
    catalog_item_id=None,
):
    return PriceHistoryRecord(
        description=description,
        unit_price=price,
        pricing_type=pricing_type,
        builder=builder,
        location=location,
        catalog_item_id=catalog_item_id,
        recorded_at=BASE_TIME + timedelta(days=days),
    )


# =============================================================================
# Grouping
# =============================================================================


class TestGroupPriceHistory:

    def test_columns_grouped_into_one_row(self):
        records = [
            record(72.0, PricingType.STANDARD),
            record(68.0, PricingType.OPTIONAL),
        ]
        rows = group_price_history(records, WALL_8FT)

        assert len(rows) == 1
        assert rows[0].standard_price == 72.0
        assert rows[0].optional_price == 68.0

    def test_different_builders_are_separate_rows(self):
        records = [
            record(72.0, builder="Henderson Homes"),
            record(70.0, builder="Lakeside Builders"),
        ]

        assert len(group_price_history(records, WALL_8FT)) == 2

    def test_newest_first(self):
        records = [record(65.0, days=0), record(72.0, days=30), record(68.0, days=10)]
        rows = group_price_history(records, WALL_8FT)

        assert [row.standard_price for row in rows] == [72.0, 68.0, 65.0]

    def test_exact_description_match(self):
        records = [
            record(72.0),
            record(55.0, description='4\' x 8" Wall - with 8" x 16" Footings'),
            record(99.0, description=WALL_8FT.lower()),
        ]
        rows = group_price_history(records, WALL_8FT)

        assert [row.standard_price for row in rows] == [72.0]

    def test_catalog_item_match(self):
        records = [
            record(72.0, catalog_item_id="cat-1"),
            record(74.0, description="8' Wall (renamed)", catalog_item_id="cat-1", days=5),
            record(80.0, catalog_item_id="cat-2", days=7),
        ]
        rows = group_price_history(records, WALL_8FT, catalog_item_id="cat-1")

        assert [row.standard_price for row in rows] == [74.0, 72.0]

    def test_limit(self):
        records = [record(60.0 + i, days=i) for i in range(15)]
        rows = group_price_history(records, WALL_8FT, limit=5)

        assert len(rows) == 5
        assert rows[0].standard_price == 74.0

    def test_only_newest_records_considered(self):
        records = [record(1.0 + i, days=i) for i in range(FETCH_LIMIT + 10)]
        rows = group_price_history(records, WALL_8FT, limit=1000)

        assert len(rows) == FETCH_LIMIT

    def test_no_description(self):
        assert group_price_history([record(72.0)], "") == []

    def test_missing_builder_and_location_group_together(self):
        records = [
            record(72.0, builder=None, location=None),
            record(68.0, PricingType.OPTIONAL, builder=None, location=None),
        ]
        rows = group_price_history(records, WALL_8FT)

        assert len(rows) == 1
        assert rows[0].builder is None


# =============================================================================
# Trend
# =============================================================================


class TestPriceTrend:

    def test_increase(self):
        rows = [
            PriceHistoryRow(recorded_at=BASE_TIME, builder=None, location=None, standard_price=72.0),
            PriceHistoryRow(recorded_at=BASE_TIME, builder=None, location=None, standard_price=60.0),
        ]

        assert price_trend(rows) == pytest.approx(20.0)

    def test_falls_back_to_optional(self):
        rows = [
            PriceHistoryRow(recorded_at=BASE_TIME, builder=None, location=None, optional_price=45.0),
            PriceHistoryRow(recorded_at=BASE_TIME, builder=None, location=None, standard_price=50.0),
        ]

        assert price_trend(rows) == pytest.approx(-10.0)

    def test_single_row(self):
        rows = [PriceHistoryRow(recorded_at=BASE_TIME, builder=None, location=None, standard_price=72.0)]

        assert price_trend(rows) is None

    def test_zero_oldest_price(self):
        rows = [
            PriceHistoryRow(recorded_at=BASE_TIME, builder=None, location=None, standard_price=72.0),
            PriceHistoryRow(recorded_at=BASE_TIME, builder=None, location=None, standard_price=0.0),
        ]

        assert price_trend(rows) is None

    def test_missing_price(self):
        rows = [
            PriceHistoryRow(recorded_at=BASE_TIME, builder=None, location=None, standard_price=72.0),
            PriceHistoryRow(recorded_at=BASE_TIME, builder=None, location=None),
        ]

        assert price_trend(rows) is None


# =============================================================================
# Records from a saved proposal
# =============================================================================


class TestRecordsFromLineItems:

    def test_one_record_per_priced_column(self, sample_proposal):
        records = records_from_line_items(sample_proposal, recorded_at=BASE_TIME)

        # 4 priced footing/wall lines + 3 slab lines, each priced in one column
        assert len(records) == 7
        assert all(r.recorded_at == BASE_TIME for r in records)
        assert all(r.proposal_id == "prop-henderson" for r in records)
        assert all(r.builder == "Henderson Homes" for r in records)

    def test_optional_price_record(self, sample_proposal):
        records = records_from_line_items(sample_proposal, recorded_at=BASE_TIME)
        garage = [r for r in records if r.description.startswith("Garage Slab")]

        assert len(garage) == 1
        assert garage[0].pricing_type == PricingType.OPTIONAL
        assert garage[0].unit_price == 3.5
        assert garage[0].quantity == 500

    def test_both_columns(self, empty_proposal):
        empty_proposal.add_line(
            LineItem(quantity="10", description="Stoop", unit_price_standard="40", unit_price_optional="35")
        )
        records = records_from_line_items(empty_proposal)

        assert sorted(r.pricing_type for r in records) == ["optional", "standard"]

    def test_unquantified_and_blank_lines_skipped(self, empty_proposal):
        empty_proposal.add_line(LineItem(quantity="", description="Stoop", unit_price_standard="40"))
        empty_proposal.add_line(LineItem(quantity="10", description=" ", unit_price_standard="40"))

        assert records_from_line_items(empty_proposal) == []

    def test_empty_header_fields_are_none(self, empty_proposal):
        empty_proposal.add_line(LineItem(quantity="10", description="Stoop", unit_price_standard="40"))
        (only,) = records_from_line_items(empty_proposal)

        assert only.location is None
        assert only.county is None

    def test_records_group_back_into_history(self, sample_proposal):
        records = records_from_line_items(sample_proposal, recorded_at=BASE_TIME)
        rows = group_price_history(records, WALL_8FT)

        assert len(rows) == 1
        assert rows[0].standard_price == 72.0
