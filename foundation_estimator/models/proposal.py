"""Proposal models for Foundation Estimator.

A proposal is a header, a cost-rate configuration and two ordered lists of
line items (footing/wall section and slab section). Totals, volumes and
margins are never stored on it; they are recomputed from these inputs.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from foundation_estimator.config.errors import ErrorCode, RecordNotFoundError
from foundation_estimator.config.settings import DefaultCosts, settings
from foundation_estimator.models.line_item import (
    LineItem,
    Section,
    empty_line,
    empty_slab_line,
)
from foundation_estimator.utils.numbers import format_dimension, is_blank, parse_number


# =============================================================================
# ENUMS
# =============================================================================


class OtherCostsMode(str, Enum):
    """How the "other costs" rate is interpreted."""

    FLAT = "$"       # flat dollar amount
    PERCENT = "%"    # percent of concrete + labor + rebar cost


# =============================================================================
# COST RATES
# =============================================================================


def _default_field(value: Optional[float]) -> str:
    """Render a configured default as the form string ("" when unset)."""
    if value is None:
        return ""
    return format_dimension(value)


# Default costs that price a line item directly, keyed by description text.
# Hot water / high early come before the generic extra concrete match.
_DEFAULT_LINE_PRICES = (
    (re.compile(r"concrete\s*pump", re.IGNORECASE), "concrete_pump_each"),
    (re.compile(r"hot\s*water", re.IGNORECASE), "winter_hot_water_per_yard"),
    (re.compile(r"high\s*early", re.IGNORECASE), "winter_high_early_per_yard"),
    (re.compile(r"extra\s*concrete", re.IGNORECASE), "extra_concrete_per_yard"),
    (re.compile(r"extra\s*labor", re.IGNORECASE), "extra_labor_per_hour"),
)


def default_unit_price(description: Optional[str], defaults: DefaultCosts) -> Optional[float]:
    """Configured default unit price for a pump, winter concrete, extra
    concrete or extra labor line; None when the line has no such default."""
    if not isinstance(description, str):
        return None
    for pattern, key in _DEFAULT_LINE_PRICES:
        if pattern.search(description):
            return getattr(defaults, key)
    return None


class CostRates(BaseModel):
    """Cost-rate configuration entered on a proposal.

    Values are decimal strings as typed; blank or non-numeric reads as 0.
    Stick-based and per-LF rebar rates are independent settings.
    """

    concrete_per_yard: str = Field(default="", alias="concretePerYard")
    labor_per_yard: str = Field(default="", alias="laborPerYard")
    rebar_cost_per_stick: str = Field(default="", alias="rebarCostPerStick")
    rebar_waste_percent: str = Field(default="", alias="rebarWastePercent")
    rebar_cost_per_lf: str = Field(default="", alias="rebarCostPerLF")
    other_costs: str = Field(default="", alias="otherCosts")
    other_costs_mode: OtherCostsMode = Field(default=OtherCostsMode.FLAT, alias="otherCostsMode")
    other_costs_note: str = Field(default="", alias="otherCostsNote")
    concrete_yards_override: str = Field(
        default="",
        alias="concreteYardsOverride",
        description="Manual total cubic yards replacing the computed total"
    )

    class Config:
        populate_by_name = True
        use_enum_values = True

    @field_validator(
        "concrete_per_yard",
        "labor_per_yard",
        "rebar_cost_per_stick",
        "rebar_waste_percent",
        "rebar_cost_per_lf",
        "other_costs",
        "other_costs_note",
        "concrete_yards_override",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return format_dimension(value)
        return str(value)

    @property
    def concrete_rate(self) -> float:
        return parse_number(self.concrete_per_yard)

    @property
    def labor_rate(self) -> float:
        return parse_number(self.labor_per_yard)

    @property
    def stick_cost(self) -> float:
        return parse_number(self.rebar_cost_per_stick)

    @property
    def waste_percent(self) -> float:
        return parse_number(self.rebar_waste_percent)

    @property
    def rebar_lf_cost(self) -> float:
        return parse_number(self.rebar_cost_per_lf)

    @property
    def other_costs_value(self) -> float:
        return parse_number(self.other_costs)

    @property
    def is_percent_other_costs(self) -> bool:
        return OtherCostsMode(self.other_costs_mode) == OtherCostsMode.PERCENT

    @property
    def has_yards_override(self) -> bool:
        return not is_blank(self.concrete_yards_override)

    @classmethod
    def from_defaults(cls, defaults: DefaultCosts) -> "CostRates":
        """Pre-fill rates from the company default costs."""
        return cls(
            concrete_per_yard=_default_field(defaults.concrete_per_yard),
            labor_per_yard=_default_field(defaults.labor_per_yard),
            rebar_cost_per_stick=_default_field(defaults.rebar_cost_per_stick),
            rebar_waste_percent=_default_field(defaults.rebar_waste_percent),
            rebar_cost_per_lf=_default_field(defaults.rebar_cost_per_lf),
        )


# =============================================================================
# PROPOSAL
# =============================================================================


class Proposal(BaseModel):
    """Proposal document: header, cost rates and both line item sections."""

    id: Optional[str] = Field(default=None, description="Document ID")

    # Header
    builder: str = Field(default="", description="Builder / customer name")
    date: str = Field(
        default_factory=lambda: datetime.now().date().isoformat(),
        description="Proposal date (YYYY-MM-DD)"
    )
    location: str = Field(default="", description="Job location")
    county: str = Field(default="", description="Job county")
    foundation_type: str = Field(default="Custom", alias="foundationType")
    foundation_size: str = Field(default="", alias="foundationSize")

    rates: CostRates = Field(default_factory=CostRates, alias="costRates")

    footing_wall_lines: List[LineItem] = Field(
        default_factory=list,
        alias="footingWallLines",
        description="Footing/wall section, in display order"
    )
    slab_lines: List[LineItem] = Field(
        default_factory=list,
        alias="slabLines",
        description="Slab section, in display order"
    )

    # Timestamps
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    class Config:
        populate_by_name = True

    @classmethod
    def new(cls, rows: Optional[int] = None, defaults: Optional[DefaultCosts] = None, **header: Any) -> "Proposal":
        """Create an empty proposal with blank rows in each section.

        Args:
            rows: Blank rows to create per section; ``settings.default_line_rows`` if omitted.
            defaults: Company default costs used to pre-fill the rates.
            **header: Header fields (builder, location, ...).

        Returns:
            New proposal.
        """
        if rows is None:
            rows = settings.default_line_rows
        rates = CostRates.from_defaults(defaults) if defaults is not None else CostRates()
        return cls(
            rates=rates,
            footing_wall_lines=[empty_line() for _ in range(rows)],
            slab_lines=[empty_slab_line() for _ in range(rows)],
            **header,
        )

    @property
    def all_lines(self) -> List[LineItem]:
        """Footing/wall lines followed by slab lines."""
        return [*self.footing_wall_lines, *self.slab_lines]

    def section_lines(self, section: Section) -> List[LineItem]:
        if Section(section) == Section.SLAB:
            return self.slab_lines
        return self.footing_wall_lines

    def add_line(self, line: LineItem) -> LineItem:
        """Append a line to the section named on the line."""
        self.section_lines(line.section).append(line)
        return line

    def get_line(self, line_id: str) -> LineItem:
        """Look up a line item by id in either section.

        Raises:
            RecordNotFoundError: If no line has that id.
        """
        for line in self.all_lines:
            if line.id == line_id:
                return line
        raise RecordNotFoundError(
            code=ErrorCode.LINE_ITEM_NOT_FOUND,
            record_id=line_id,
            details={"proposal_id": self.id}
        )

    def remove_line(self, line_id: str) -> LineItem:
        """Remove and return a line item by id.

        Raises:
            RecordNotFoundError: If no line has that id.
        """
        # Search both lists: a stored line's section flag may not match the
        # list it was saved in.
        for lines in (self.footing_wall_lines, self.slab_lines):
            for index, line in enumerate(lines):
                if line.id == line_id:
                    return lines.pop(index)
        raise RecordNotFoundError(
            code=ErrorCode.LINE_ITEM_NOT_FOUND,
            record_id=line_id,
            details={"proposal_id": self.id}
        )

    def apply_default_prices(self, defaults: Optional[DefaultCosts] = None) -> int:
        """Fill blank standard prices from the company default costs.

        Only lines with neither price column filled are touched, and only
        when a default is configured for them (see ``default_unit_price``).

        Args:
            defaults: Default costs; ``settings.default_costs`` if omitted.

        Returns:
            Number of lines priced.
        """
        if defaults is None:
            defaults = settings.default_costs
        priced = 0
        for line in self.all_lines:
            if not (is_blank(line.unit_price_standard) and is_blank(line.unit_price_optional)):
                continue
            price = default_unit_price(line.description, defaults)
            if price is None:
                continue
            line.unit_price_standard = _default_field(price)
            priced += 1
        return priced

    def to_record(self) -> Dict[str, Any]:
        """Convert to a camelCase dict for the persistence layer."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Proposal":
        """Build a proposal from a persisted record."""
        return cls.model_validate(data)
