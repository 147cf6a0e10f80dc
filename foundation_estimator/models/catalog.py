"""Catalog item model for Foundation Estimator.

Catalog items are reusable description templates used to pre-fill line
items. They have no computational role of their own.
"""

from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from foundation_estimator.models.line_item import LineItem, Section, Unit


class CatalogItem(BaseModel):
    """Reusable line item description template."""

    id: str = Field(default_factory=lambda: uuid4().hex, description="Catalog item ID")
    description: str = Field(..., description="Description text copied onto line items")
    default_unit: Unit = Field(default=Unit.LF, alias="defaultUnit")
    section: Section = Field(default=Section.FOOTING_WALL)
    category: str = Field(default="", description="Grouping shown in the catalog picker")
    custom_data: Optional[Dict[str, Any]] = Field(
        default=None,
        alias="customData",
        description="Structured dimensions when built with the custom item builder"
    )
    is_active: bool = Field(default=True, alias="isActive")
    sort_order: Optional[int] = Field(default=None, alias="sortOrder")

    class Config:
        populate_by_name = True
        use_enum_values = True

    def to_line_item(self, quantity: str = "") -> LineItem:
        """Pre-fill a new line item from this template."""
        return LineItem(
            quantity=quantity,
            unit=self.default_unit,
            description=self.description,
            section=self.section,
            catalog_item_id=self.id,
        )

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
