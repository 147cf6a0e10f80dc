"""
Custom Item Description Builder for Foundation Estimator.

Builds catalog-style line item descriptions from structured dimension
choices, so generated text always matches a volume rule. Volume per unit is
computed from the dimensions directly rather than by parsing the text back.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import structlog
from pydantic import BaseModel, Field

from foundation_estimator.config.errors import ErrorCode, ValidationError
from foundation_estimator.models.catalog import CatalogItem
from foundation_estimator.models.line_item import LineItem, Section, Unit
from foundation_estimator.models.price_history import PricingType
from foundation_estimator.services.volume_engine import CUBIC_FEET_PER_YARD
from foundation_estimator.utils.numbers import format_dimension, parse_number

logger = structlog.get_logger(__name__)


class ItemCategory(str, Enum):
    """Kind of custom item being built."""

    WALL = "wall"
    SLAB = "slab"
    FOOTING = "footing"
    PIER = "pier"
    OTHER = "other"


DEFAULT_UNITS: Dict[ItemCategory, Unit] = {
    ItemCategory.WALL: Unit.LF,
    ItemCategory.SLAB: Unit.SF,
    ItemCategory.FOOTING: Unit.LF,
    ItemCategory.PIER: Unit.EA,
    ItemCategory.OTHER: Unit.EA,
}

# Common choices offered for each dimension
WALL_HEIGHTS = ["4'", "8'", "9'", "10'", "12'"]
WALL_THICKNESSES = ['6"', '8"', '10"', '12"']
FOOTING_WIDTHS = ['8"', '10"', '12"', '16"', '20"', '24"']
FOOTING_DEPTHS = ['8"', '10"', '12"', '16"', '20"']
SLAB_THICKNESSES = ['4"', '5"', '6"', '8"']
PIER_SIZES = ['24"x24"', '30"x30"', '36"x36"', '42"x42"', '48"x48"']
PIER_DEPTHS = ['10"', '12"', '16"', '20"', '24"']

WALL_TAGS = ["Garage", "Porch", "Rear Extension", "Garage Over Dig", "Crawl Space"]
SLAB_TAGS = ["Structural", "Garage", "Porch", "Patio", "Basement"]
FOOTING_TAGS = ["Frost Footing", "Grade Beam", "Continuous", "Stepped"]

_TAGGED_CATEGORIES = {ItemCategory.WALL, ItemCategory.SLAB, ItemCategory.FOOTING}

_NON_NUMERIC = re.compile(r"[^0-9.]")


# =============================================================================
# Input model
# =============================================================================


class CustomItemSpec(BaseModel):
    """Structured dimension choices for a custom item."""

    category: ItemCategory = Field(default=ItemCategory.WALL)

    # Wall
    wall_height: str = Field(default="4'", alias="wallHeight")
    wall_thickness: str = Field(default='8"', alias="wallThickness")
    wall_footing_width: str = Field(default='8"', alias="wallFootingWidth")
    wall_footing_depth: str = Field(default='16"', alias="wallFootingDepth")

    # Slab
    slab_label: str = Field(default="Basement Slab", alias="slabLabel")
    slab_thickness: str = Field(default='4"', alias="slabThickness")

    # Footing
    footing_label: str = Field(default="Footings", alias="footingLabel")
    footing_width: str = Field(default='8"', alias="footingWidth")
    footing_depth: str = Field(default='16"', alias="footingDepth")

    # Pier
    pier_size: str = Field(default='24"x24"', alias="pierSize")
    pier_depth: str = Field(default='12"', alias="pierDepth")

    # Other
    misc_description: str = Field(default="", alias="miscDescription")

    tags: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        use_enum_values = True

    @property
    def item_category(self) -> ItemCategory:
        return ItemCategory(self.category)

    @property
    def default_unit(self) -> Unit:
        return DEFAULT_UNITS[self.item_category]

    def dimensions(self) -> Dict[str, str]:
        """The dimension fields relevant to this category, camelCase."""
        category = self.item_category
        if category == ItemCategory.WALL:
            return {
                "wallHeight": self.wall_height,
                "wallThickness": self.wall_thickness,
                "footingWidth": self.wall_footing_width,
                "footingDepth": self.wall_footing_depth,
            }
        if category == ItemCategory.SLAB:
            return {"slabThickness": self.slab_thickness, "customLabel": self.slab_label}
        if category == ItemCategory.FOOTING:
            return {
                "footingWidth": self.footing_width,
                "footingDepth": self.footing_depth,
                "customLabel": self.footing_label,
            }
        if category == ItemCategory.PIER:
            return {"pierSize": self.pier_size, "pierDepth": self.pier_depth}
        return {"customLabel": self.misc_description}


# =============================================================================
# Dimension parsing
# =============================================================================


def parse_dimension(text: str) -> float:
    """Numeric part of a dimension choice (``16"`` -> 16, ``8'`` -> 8); 0 if none."""
    return parse_number(_NON_NUMERIC.sub("", text or ""))


def parse_pier_size(text: str) -> Tuple[float, float]:
    """``24"x30"`` -> (24, 30)."""
    parts = (text or "").split("x")
    first = parts[0] if parts else ""
    second = parts[1] if len(parts) > 1 else ""
    return parse_dimension(first), parse_dimension(second)


# =============================================================================
# Builders
# =============================================================================


def _tags_suffix(spec: CustomItemSpec) -> str:
    if spec.item_category not in _TAGGED_CATEGORIES or not spec.tags:
        return ""
    return ", " + ", ".join(spec.tags)


def build_description(spec: CustomItemSpec) -> str:
    """
    Catalog-style description for a custom item.

    Examples:
        wall:    8' x 8" Wall - with 8" x 16" Footings, Garage
        slab:    Basement Slab - 4"
        footing: Footings: 8" x 16"
        pier:    Pier Pad: 24" x 24" x 12"
    """
    category = spec.item_category
    tags = _tags_suffix(spec)

    if category == ItemCategory.WALL:
        return (
            f"{spec.wall_height} x {spec.wall_thickness} Wall - with "
            f"{spec.wall_footing_width} x {spec.wall_footing_depth} Footings{tags}"
        )
    if category == ItemCategory.SLAB:
        return f"{spec.slab_label} - {spec.slab_thickness}{tags}"
    if category == ItemCategory.FOOTING:
        return f"{spec.footing_label}: {spec.footing_width} x {spec.footing_depth}{tags}"
    if category == ItemCategory.PIER:
        length, width = parse_pier_size(spec.pier_size)
        depth = parse_dimension(spec.pier_depth)
        return (
            f'Pier Pad: {format_dimension(length)}" x {format_dimension(width)}" '
            f'x {format_dimension(depth)}"'
        )
    return spec.misc_description


def cy_per_unit(spec: CustomItemSpec) -> float:
    """Cubic yards per unit computed from the structured dimensions."""
    category = spec.item_category

    if category == ItemCategory.WALL:
        height_ft = parse_dimension(spec.wall_height)
        thickness_ft = parse_dimension(spec.wall_thickness) / 12
        width_ft = parse_dimension(spec.wall_footing_width) / 12
        depth_ft = parse_dimension(spec.wall_footing_depth) / 12
        return (height_ft * thickness_ft + width_ft * depth_ft) / CUBIC_FEET_PER_YARD
    if category == ItemCategory.SLAB:
        return (parse_dimension(spec.slab_thickness) / 12) / CUBIC_FEET_PER_YARD
    if category == ItemCategory.FOOTING:
        width_ft = parse_dimension(spec.footing_width) / 12
        depth_ft = parse_dimension(spec.footing_depth) / 12
        return (width_ft * depth_ft) / CUBIC_FEET_PER_YARD
    if category == ItemCategory.PIER:
        length, width = parse_pier_size(spec.pier_size)
        depth = parse_dimension(spec.pier_depth)
        return (length / 12 * width / 12 * depth / 12) / CUBIC_FEET_PER_YARD
    return 0.0


@dataclass
class CustomItemResult:
    """
    A custom item ready to drop into a proposal.

    Attributes:
        description: Generated description
        unit: Default unit for the category
        cy_per_unit: Structural cubic yards per unit
        total_cy: cy_per_unit x quantity
        line_item: Line item with the price in the chosen column
        catalog_item: Catalog template, for saving when requested
    """

    description: str
    unit: Unit
    cy_per_unit: float
    total_cy: float
    line_item: LineItem
    catalog_item: CatalogItem


def _section_for(category: ItemCategory) -> Section:
    return Section.SLAB if category == ItemCategory.SLAB else Section.FOOTING_WALL


def build_custom_item(
    spec: CustomItemSpec,
    quantity: str = "",
    unit_price: str = "",
    pricing_column: PricingType = PricingType.STANDARD,
    section: Optional[Section] = None,
) -> CustomItemResult:
    """
    Build a line item (and its catalog template) from structured dimensions.

    Args:
        spec: Dimension choices
        quantity: Quantity as entered
        unit_price: Unit price as entered
        pricing_column: Which price column receives ``unit_price``
        section: Target section; slab items default to the slab section

    Returns:
        CustomItemResult

    Raises:
        ValidationError: If the spec produces an empty description
    """
    description = build_description(spec)
    if not description.strip():
        raise ValidationError(
            message="Custom item needs a description",
            field="misc_description",
            details={"category": spec.item_category.value},
            code=ErrorCode.EMPTY_DESCRIPTION,
        )

    category = spec.item_category
    unit = spec.default_unit
    target_section = Section(section) if section is not None else _section_for(category)
    per_unit = cy_per_unit(spec)

    price = "" if unit_price is None else str(unit_price)
    is_optional = PricingType(pricing_column) == PricingType.OPTIONAL

    catalog_item = CatalogItem(
        description=description,
        default_unit=unit,
        section=target_section,
        category=category.value,
        custom_data={
            "category": category.value,
            "dimensions": spec.dimensions(),
            "tags": list(spec.tags) if category in _TAGGED_CATEGORIES else [],
            "isCustom": True,
        },
    )
    line_item = LineItem(
        quantity=quantity,
        unit=unit,
        description=description,
        unit_price_standard="" if is_optional else price,
        unit_price_optional=price if is_optional else "",
        section=target_section,
        catalog_item_id=catalog_item.id,
    )

    logger.debug(
        "custom_item_built",
        category=category.value,
        description=description,
        cy_per_unit=round(per_unit, 4),
    )

    return CustomItemResult(
        description=description,
        unit=unit,
        cy_per_unit=per_unit,
        total_cy=per_unit * line_item.quantity_value,
        line_item=line_item,
        catalog_item=catalog_item,
    )


def custom_item_from_record(custom_data: Dict[str, Any]) -> CustomItemSpec:
    """Rebuild a spec from a catalog item's ``customData``."""
    raw_category = custom_data.get("category", ItemCategory.OTHER.value)
    try:
        category = ItemCategory(raw_category)
    except ValueError as e:
        raise ValidationError(
            message=f"Unknown custom item category: {raw_category!r}",
            field="category",
            code=ErrorCode.INVALID_FIELD,
        ) from e
    dims = custom_data.get("dimensions") or {}
    fields: Dict[str, Any] = {"category": category, "tags": custom_data.get("tags") or []}

    if category == ItemCategory.WALL:
        fields.update(
            wall_height=dims.get("wallHeight", "4'"),
            wall_thickness=dims.get("wallThickness", '8"'),
            wall_footing_width=dims.get("footingWidth", '8"'),
            wall_footing_depth=dims.get("footingDepth", '16"'),
        )
    elif category == ItemCategory.SLAB:
        fields.update(
            slab_label=dims.get("customLabel", "Basement Slab"),
            slab_thickness=dims.get("slabThickness", '4"'),
        )
    elif category == ItemCategory.FOOTING:
        fields.update(
            footing_label=dims.get("customLabel", "Footings"),
            footing_width=dims.get("footingWidth", '8"'),
            footing_depth=dims.get("footingDepth", '16"'),
        )
    elif category == ItemCategory.PIER:
        fields.update(
            pier_size=dims.get("pierSize", '24"x24"'),
            pier_depth=dims.get("pierDepth", '12"'),
        )
    else:
        fields["misc_description"] = dims.get("customLabel", "")

    return CustomItemSpec(**fields)
