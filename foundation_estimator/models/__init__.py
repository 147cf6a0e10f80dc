"""Pydantic models for Foundation Estimator records."""

from foundation_estimator.models.line_item import (
    LineItem,
    RebarConfig,
    Section,
    Unit,
    empty_line,
    empty_slab_line,
)
from foundation_estimator.models.proposal import (
    CostRates,
    OtherCostsMode,
    Proposal,
    default_unit_price,
)
from foundation_estimator.models.catalog import CatalogItem
from foundation_estimator.models.price_history import PriceHistoryRecord, PricingType

__all__ = [
    "LineItem",
    "RebarConfig",
    "Section",
    "Unit",
    "empty_line",
    "empty_slab_line",
    "CostRates",
    "OtherCostsMode",
    "Proposal",
    "default_unit_price",
    "CatalogItem",
    "PriceHistoryRecord",
    "PricingType",
]
