"""Price history models for Foundation Estimator.

Each record is an immutable fact: the unit price quoted for a description
on a given proposal. Used for display and trends only.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from foundation_estimator.models.line_item import Unit


class PricingType(str, Enum):
    """Which price column the record was taken from."""

    STANDARD = "standard"
    OPTIONAL = "optional"


class PriceHistoryRecord(BaseModel):
    """A unit price quoted for a description."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    description: str = Field(..., description="Line item description as quoted")
    unit: Unit = Field(default=Unit.EA)
    unit_price: float = Field(..., alias="unitPrice", description="Quoted unit price ($)")
    pricing_type: PricingType = Field(..., alias="pricingType")
    builder: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None, alias="jobLocation")
    county: Optional[str] = Field(default=None)
    quantity: Optional[float] = Field(default=None)
    proposal_id: Optional[str] = Field(default=None, alias="proposalId")
    catalog_item_id: Optional[str] = Field(default=None, alias="catalogItemId")
    recorded_at: datetime = Field(default_factory=datetime.now, alias="recordedAt")

    class Config:
        populate_by_name = True
        use_enum_values = True
        frozen = True

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
