"""
Price History Summary for Foundation Estimator.

Groups stored unit-price records for a line item description into one row
per quoted proposal, and measures the price trend across them. Display only;
nothing here feeds back into costing.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from foundation_estimator.models.price_history import PriceHistoryRecord, PricingType
from foundation_estimator.models.proposal import Proposal

logger = structlog.get_logger(__name__)

# Raw records considered (newest first) before grouping
FETCH_LIMIT = 50
DEFAULT_ROW_LIMIT = 10


@dataclass
class PriceHistoryRow:
    """
    Prices quoted for one description on one proposal.

    Attributes:
        recorded_at: When the prices were recorded
        builder: Builder quoted
        location: Job location
        standard_price: Standard column price, None if not quoted
        optional_price: Optional column price, None if not quoted
    """

    recorded_at: datetime
    builder: Optional[str]
    location: Optional[str]
    standard_price: Optional[float] = None
    optional_price: Optional[float] = None

    @property
    def reference_price(self) -> Optional[float]:
        """Standard price, falling back to optional."""
        if self.standard_price is not None:
            return self.standard_price
        return self.optional_price


def _matches(
    record: PriceHistoryRecord,
    description: str,
    catalog_item_id: Optional[str],
) -> bool:
    if catalog_item_id:
        return record.catalog_item_id == catalog_item_id
    return record.description == description


def group_price_history(
    records: Iterable[PriceHistoryRecord],
    description: str,
    limit: int = DEFAULT_ROW_LIMIT,
    catalog_item_id: Optional[str] = None,
) -> List[PriceHistoryRow]:
    """
    Group price records for a description into rows, newest first.

    Records are matched on ``catalog_item_id`` when given, otherwise on the
    exact description. Records sharing (recorded_at, builder, location) form
    one row carrying both price columns.

    Args:
        records: Stored price history records
        description: Line item description as stored
        limit: Maximum rows returned
        catalog_item_id: Catalog item the line was created from, if any

    Returns:
        Rows sorted newest first, at most ``limit`` long
    """
    if not description and not catalog_item_id:
        return []

    matching = sorted(
        (r for r in records if _matches(r, description, catalog_item_id)),
        key=lambda r: r.recorded_at,
        reverse=True,
    )[:FETCH_LIMIT]

    grouped: Dict[Tuple[datetime, str, str], PriceHistoryRow] = {}
    for record in matching:
        key = (record.recorded_at, record.builder or "", record.location or "")
        row = grouped.get(key)
        if row is None:
            row = PriceHistoryRow(
                recorded_at=record.recorded_at,
                builder=record.builder,
                location=record.location,
            )
            grouped[key] = row
        if PricingType(record.pricing_type) == PricingType.STANDARD:
            row.standard_price = record.unit_price
        else:
            row.optional_price = record.unit_price

    rows = sorted(grouped.values(), key=lambda row: row.recorded_at, reverse=True)
    return rows[:limit]


def price_trend(rows: List[PriceHistoryRow]) -> Optional[float]:
    """
    Percent change from the oldest to the newest row.

    Uses the standard price, falling back to optional. None when there are
    fewer than two rows, either end has no price, or the oldest price is 0.
    """
    if len(rows) < 2:
        return None
    newest = rows[0].reference_price
    oldest = rows[-1].reference_price
    if newest is None or oldest is None or oldest == 0:
        return None
    return (newest - oldest) / oldest * 100


def records_from_line_items(
    proposal: Proposal,
    recorded_at: Optional[datetime] = None,
) -> List[PriceHistoryRecord]:
    """
    Price history records for a saved proposal.

    One record per priced column of every line with a description and a
    quantity. All records from one save share ``recorded_at``.
    """
    recorded_at = recorded_at or datetime.now()
    records: List[PriceHistoryRecord] = []

    for line in proposal.all_lines:
        if not line.description.strip() or not line.has_quantity:
            continue
        for pricing_type, price in (
            (PricingType.STANDARD, line.standard_price),
            (PricingType.OPTIONAL, line.optional_price),
        ):
            if price is None:
                continue
            records.append(
                PriceHistoryRecord(
                    description=line.description,
                    unit=line.unit,
                    unit_price=price,
                    pricing_type=pricing_type,
                    builder=proposal.builder or None,
                    location=proposal.location or None,
                    county=proposal.county or None,
                    quantity=line.quantity_value,
                    proposal_id=proposal.id,
                    catalog_item_id=line.catalog_item_id,
                    recorded_at=recorded_at,
                )
            )

    logger.info(
        "price_history_records_built",
        proposal_id=proposal.id,
        record_count=len(records),
    )
    return records
