"""Line item models for Foundation Estimator.

A line item is one priced row of a proposal. Quantity, prices and the
volume override are kept as the decimal strings the estimator typed, so a
half-edited row round-trips unchanged; the services parse them leniently.
"""

from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field, field_validator

from foundation_estimator.utils.numbers import is_blank, parse_number, try_parse_number


# =============================================================================
# ENUMS
# =============================================================================


class Unit(str, Enum):
    """Unit of measure for a line item quantity."""

    LF = "LF"   # linear feet
    SF = "SF"   # square feet
    EA = "EA"   # each
    CY = "CY"   # cubic yards
    HR = "HR"   # hours
    LS = "LS"   # lump sum


class Section(str, Enum):
    """Proposal sub-table a line belongs to."""

    FOOTING_WALL = "footing_wall"
    SLAB = "slab"


# =============================================================================
# REBAR CONFIGURATION
# =============================================================================


class RebarConfig(BaseModel):
    """Rebar layout for a wall-with-footings line.

    Only meaningful when the line description is rebar-eligible.
    """

    horizontal_footing_bars: int = Field(
        default=0,
        ge=0,
        alias="horizontalFootingBars",
        description="Continuous horizontal bars in the footing"
    )
    horizontal_wall_bars: int = Field(
        default=0,
        ge=0,
        alias="horizontalWallBars",
        description="Continuous horizontal bars in the wall"
    )
    vertical_spacing_inches: int = Field(
        default=0,
        ge=0,
        alias="verticalSpacingInches",
        description="On-center spacing of vertical wall bars (0 = none)"
    )

    class Config:
        populate_by_name = True

    @property
    def is_configured(self) -> bool:
        """True when any bar count or spacing is set."""
        return (
            self.horizontal_footing_bars > 0
            or self.horizontal_wall_bars > 0
            or self.vertical_spacing_inches > 0
        )


# =============================================================================
# LINE ITEM
# =============================================================================


class LineItem(BaseModel):
    """One priced row in a proposal."""

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        description="Opaque unique identifier"
    )
    quantity: str = Field(
        default="",
        validation_alias=AliasChoices("quantity", "qty"),
        description="Decimal quantity in the line's unit; empty means 0"
    )
    unit: Unit = Field(
        default=Unit.LF,
        description="Unit of measure"
    )
    description: str = Field(
        default="",
        description="Free text; the only input to volume and rebar inference"
    )
    unit_price_standard: str = Field(
        default="",
        alias="unitPriceStandard",
        description="Standard (base bid) unit price; empty means not priced"
    )
    unit_price_optional: str = Field(
        default="",
        alias="unitPriceOptional",
        description="Optional (alternate bid) unit price; empty means not priced"
    )
    section: Section = Field(
        default=Section.FOOTING_WALL,
        description="Proposal sub-table"
    )
    volume_override: str = Field(
        default="",
        alias="volumeOverride",
        description="Manual cubic yards replacing the computed volume"
    )
    rebar_config: Optional[RebarConfig] = Field(
        default=None,
        alias="rebarConfig",
        description="Rebar layout for wall-with-footings lines"
    )
    catalog_item_id: Optional[str] = Field(
        default=None,
        alias="catalogItemId",
        description="Catalog template this line was created from"
    )

    class Config:
        populate_by_name = True
        use_enum_values = True

    @field_validator(
        "quantity",
        "unit_price_standard",
        "unit_price_optional",
        "volume_override",
        "description",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        """Accept numbers and None for the free-text/decimal fields."""
        if value is None:
            return ""
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    @field_validator("unit", mode="before")
    @classmethod
    def normalize_unit(cls, value: Any) -> Any:
        """Units are matched case-insensitively (``lf`` -> ``LF``)."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    # -------------------------------------------------------------------------
    # Parsed accessors
    # -------------------------------------------------------------------------

    @property
    def has_quantity(self) -> bool:
        return not is_blank(self.quantity)

    @property
    def quantity_value(self) -> float:
        """Quantity as a number; empty or non-numeric is 0."""
        return parse_number(self.quantity)

    @property
    def has_override(self) -> bool:
        return not is_blank(self.volume_override)

    @property
    def override_value(self) -> float:
        """Override cubic yards; a non-numeric override counts as 0."""
        return parse_number(self.volume_override)

    @property
    def standard_price(self) -> Optional[float]:
        return try_parse_number(self.unit_price_standard)

    @property
    def optional_price(self) -> Optional[float]:
        return try_parse_number(self.unit_price_optional)

    def to_record(self) -> Dict[str, Any]:
        """Convert to a camelCase dict for the persistence layer."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "LineItem":
        """Build a line item from a persisted record."""
        return cls.model_validate(data)


def empty_line() -> LineItem:
    """Blank footing/wall row (LF)."""
    return LineItem(unit=Unit.LF, section=Section.FOOTING_WALL)


def empty_slab_line() -> LineItem:
    """Blank slab row (SF)."""
    return LineItem(unit=Unit.SF, section=Section.SLAB)
