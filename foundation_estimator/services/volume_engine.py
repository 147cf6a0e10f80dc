"""
Concrete Volume Inference Engine for Foundation Estimator.

Turns a line item description such as ``8' x 8" Wall - with 8" x 16" Footings``
into cubic yards per unit of the line's quantity, split into wall and footing
volume. Whatever is neither wall nor footing is slab (see aggregator).

Architecture:
- VOLUME_RULES is an ordered list of VolumeRule entries
- Rules are tried in order and the first match wins; order resolves the
  ambiguity between overlapping phrasings ("Wall - with ... Footings" also
  contains "Footing")
- Geometry is computed in cubic feet and divided by 27
- infer_volume never raises: no match, empty input or unreadable numbers
  give the zero result with ``method=None`` (manual override needed)
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from foundation_estimator.utils.numbers import format_dimension, parse_number

CUBIC_FEET_PER_YARD = 27.0

# Assumed dimensions for descriptions that omit them
ASSUMED_WALL_THICKNESS_IN = 8.0
ASSUMED_FROST_FOOTING_IN = 20.0
ASSUMED_SLAB_THICKNESS_IN = 4.0
THICKENED_SLAB_THICKNESS_IN = 8.0
FOOTING_JUMP_CUBIC_FEET = 2.0
AREAWAY_WALL_HEIGHT_FT = 4.0


# =============================================================================
# Data Models
# =============================================================================


class VolumeCategory(str, Enum):
    """Structural category a rule attributes its volume to."""

    WALL_FOOTING = "wall_footing"
    WALL = "wall"
    FOOTING = "footing"
    SLAB = "slab"
    UNATTRIBUTED = "unattributed"


@dataclass(frozen=True)
class VolumeResult:
    """
    Cubic yards per unit of line quantity.

    Attributes:
        cubic_yards_per_unit: Total CY per unit
        wall_cy_per_unit: Portion attributed to walls
        footing_cy_per_unit: Portion attributed to footings
        method: Label of the rule that fired and its dimensions, None on no match
    """

    cubic_yards_per_unit: float = 0.0
    wall_cy_per_unit: float = 0.0
    footing_cy_per_unit: float = 0.0
    method: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.method is not None

    @property
    def remainder_cy_per_unit(self) -> float:
        """Volume that is neither wall nor footing, never negative."""
        return max(0.0, self.cubic_yards_per_unit - self.wall_cy_per_unit - self.footing_cy_per_unit)

    def to_dict(self) -> dict:
        return {
            "cubicYardsPerUnit": self.cubic_yards_per_unit,
            "wallCYPerUnit": self.wall_cy_per_unit,
            "footingCYPerUnit": self.footing_cy_per_unit,
            "method": self.method,
        }


NO_VOLUME = VolumeResult()

Matcher = Callable[[str], Optional[Sequence[str]]]


@dataclass(frozen=True)
class VolumeRule:
    """
    One recognised phrasing.

    Attributes:
        name: Stable rule identifier
        category: Where the rule's volume is attributed
        matcher: Returns captured dimension strings on a match, None otherwise
        compute: Builds the VolumeResult from the captured strings
    """

    name: str
    category: VolumeCategory
    matcher: Matcher
    compute: Callable[[Sequence[str]], VolumeResult]

    def apply(self, description: str) -> Optional[VolumeResult]:
        groups = self.matcher(description)
        if groups is None:
            return None
        return self.compute(groups)


@dataclass(frozen=True)
class RuleMatch:
    """Which rule fired for a description, and its result."""

    rule: str
    category: VolumeCategory
    result: VolumeResult


# =============================================================================
# Helpers
# =============================================================================


def _structural(wall_cubic_feet: float, footing_cubic_feet: float, method: str) -> VolumeResult:
    """Result for wall and/or footing volume given in cubic feet."""
    wall_cy = wall_cubic_feet / CUBIC_FEET_PER_YARD
    footing_cy = footing_cubic_feet / CUBIC_FEET_PER_YARD
    return VolumeResult(
        cubic_yards_per_unit=wall_cy + footing_cy,
        wall_cy_per_unit=wall_cy,
        footing_cy_per_unit=footing_cy,
        method=method,
    )


def _slab(thickness_inches: float, method: str) -> VolumeResult:
    """Flatwork: one square foot at the given thickness, not wall or footing."""
    return VolumeResult(
        cubic_yards_per_unit=(thickness_inches / 12) / CUBIC_FEET_PER_YARD,
        method=method,
    )


def _direct(cubic_yards: float, method: str) -> VolumeResult:
    """Volume given directly in cubic yards, unattributed."""
    return VolumeResult(cubic_yards_per_unit=cubic_yards, method=method)


def _search(pattern: str, exclude: Optional[str] = None) -> Matcher:
    """Case-insensitive regex matcher, optionally vetoed by a second pattern."""
    compiled = re.compile(pattern, re.IGNORECASE)
    veto = re.compile(exclude, re.IGNORECASE) if exclude else None

    def matcher(description: str) -> Optional[Sequence[str]]:
        match = compiled.search(description)
        if not match:
            return None
        if veto is not None and veto.search(description):
            return None
        return match.groups()

    return matcher


def _inches(value: str) -> float:
    return parse_number(value) / 12


# =============================================================================
# Rule computations
# =============================================================================


def _wall_with_footing(g: Sequence[str]) -> VolumeResult:
    height, thickness, width, depth = g
    return _structural(
        parse_number(height) * _inches(thickness),
        _inches(width) * _inches(depth),
        f"Wall: {height}'x{thickness}\" + Ftg: {width}\"x{depth}\"",
    )


def _wall_ilo(g: Sequence[str]) -> VolumeResult:
    height, thickness, baseline_height, _baseline_thickness = g
    extra = parse_number(height) - parse_number(baseline_height)
    return _structural(
        extra * _inches(thickness),
        0,
        f"Extra {format_dimension(extra)}' x {thickness}\" thick",
    )


def _generic_wall_ilo(g: Sequence[str]) -> VolumeResult:
    height, baseline_height = g
    extra = parse_number(height) - parse_number(baseline_height)
    return _structural(
        extra * (ASSUMED_WALL_THICKNESS_IN / 12),
        0,
        f"Extra {format_dimension(extra)}' x 8\" (assumed)",
    )


def _walls_only(g: Sequence[str]) -> VolumeResult:
    height, thickness = g
    return _structural(
        parse_number(height) * _inches(thickness),
        0,
        f"Wall: {height}'x{thickness}\"",
    )


def _pier_pad(g: Sequence[str]) -> VolumeResult:
    length, width, depth = g
    return _structural(
        0,
        _inches(length) * _inches(width) * _inches(depth),
        f"Pad: {length}\"x{width}\"x{depth}\"",
    )


def _column(g: Sequence[str]) -> VolumeResult:
    length, width, depth = g
    return _structural(
        _inches(length) * _inches(width) * _inches(depth),
        0,
        f"Col: {length}\"x{width}\"x{depth}\"",
    )


def _grade_beam(g: Sequence[str]) -> VolumeResult:
    width, depth = g
    return _structural(0, _inches(width) * _inches(depth), f"Beam: {width}\"x{depth}\"")


def _footing_only(g: Sequence[str]) -> VolumeResult:
    width, depth = g
    return _structural(0, _inches(width) * _inches(depth), f"Ftg: {width}\"x{depth}\"")


def _frost_footing(g: Sequence[str]) -> VolumeResult:
    width, depth = g
    return _structural(0, _inches(width) * _inches(depth), f"Frost: {width}\"x{depth}\"")


def _frost_footing_assumed(_g: Sequence[str]) -> VolumeResult:
    side = ASSUMED_FROST_FOOTING_IN / 12
    return _structural(0, side * side, "Frost: 20\"x20\" (est.)")


def _slab_thickness(g: Sequence[str]) -> VolumeResult:
    (thickness,) = g
    return _slab(parse_number(thickness), f"{thickness}\" slab")


def _slab_assumed(_g: Sequence[str]) -> VolumeResult:
    return _slab(ASSUMED_SLAB_THICKNESS_IN, "4\" slab (assumed)")


def _thickened_slab(_g: Sequence[str]) -> VolumeResult:
    return _slab(THICKENED_SLAB_THICKNESS_IN, "8\" thick (est.)")


def _solid_footing_jump(_g: Sequence[str]) -> VolumeResult:
    return _structural(0, FOOTING_JUMP_CUBIC_FEET, "~2 cf each (est.)")


def _per_yard(_g: Sequence[str]) -> VolumeResult:
    return _direct(1.0, "1 CY direct")


def _areaway_landing(_g: Sequence[str]) -> VolumeResult:
    return _direct(1.0, "~1 CY (est.)")


def _areaway(_g: Sequence[str]) -> VolumeResult:
    return _structural(
        AREAWAY_WALL_HEIGHT_FT * (ASSUMED_WALL_THICKNESS_IN / 12),
        0,
        "4'x8\" wall (est.)",
    )


# =============================================================================
# Bare slab keyword matcher
# =============================================================================

_BARE_SLAB_TAIL = re.compile(
    r"(?:Basement\s*Slab|Garage\s*Slab|Front\s*Porch|Rear\s*Porch|Apron|Driveway|Leadwalk)\s*-?\s*$",
    re.IGNORECASE,
)
_AFTER_COMMA = re.compile(r",.*")
_BARE_SLAB_WHOLE = re.compile(
    r"^(?:Basement\s*Slab|Garage\s*Slab|Front\s*Porch|Rear\s*Porch)\s*$",
    re.IGNORECASE,
)


def _match_bare_slab(description: str) -> Optional[Sequence[str]]:
    """Slab keyword with no thickness; tags after the first comma are ignored."""
    head = _AFTER_COMMA.sub("", description, count=1).strip()
    if _BARE_SLAB_TAIL.search(head) or _BARE_SLAB_WHOLE.search(description.strip()):
        return ()
    return None


# =============================================================================
# Rule table (order is significant)
# =============================================================================

VOLUME_RULES: List[VolumeRule] = [
    VolumeRule(
        "wall_with_footing", VolumeCategory.WALL_FOOTING,
        _search(r"^(\d+)'\s*x\s*(\d+)\"\s*Wall\s*-\s*with\s*(\d+)\"\s*x\s*(\d+)\"\s*Foot"),
        _wall_with_footing,
    ),
    VolumeRule(
        "wall_ilo", VolumeCategory.WALL,
        _search(r"^(\d+)'\s*x\s*(\d+)\"\s*Wall\s*ILO\s*(\d+)'\s*x\s*(\d+)\""),
        _wall_ilo,
    ),
    VolumeRule(
        "generic_wall_ilo", VolumeCategory.WALL,
        _search(r"^(\d+)'\s*Walls?\s*ILO\s*(\d+)'\s*Walls?"),
        _generic_wall_ilo,
    ),
    VolumeRule(
        "walls_colon", VolumeCategory.WALL,
        _search(r"^Walls:\s*(\d+)'\s*x\s*(\d+)\""),
        _walls_only,
    ),
    VolumeRule(
        "walls_dash", VolumeCategory.WALL,
        _search(r"^(\d+)'\s*x\s*(\d+)\"\s*-\s*Walls"),
        _walls_only,
    ),
    VolumeRule(
        "pier_pad", VolumeCategory.FOOTING,
        _search(r"Pier\s*Pad:\s*(\d+)\"\s*x\s*(\d+)\"\s*x\s*(\d+)\""),
        _pier_pad,
    ),
    VolumeRule(
        "column", VolumeCategory.WALL,
        _search(r"Column:\s*(\d+)\"\s*x\s*(\d+)\"\s*x\s*(\d+)\""),
        _column,
    ),
    VolumeRule(
        "grade_beam", VolumeCategory.FOOTING,
        _search(r"Grade\s*Beam\s*-?\s*(\d+)\"\s*x\s*(\d+)\""),
        _grade_beam,
    ),
    VolumeRule(
        "footing_only", VolumeCategory.FOOTING,
        _search(r"Footings?:?\s*(\d+)\"\s*x\s*(\d+)\"", exclude=r"Wall"),
        _footing_only,
    ),
    VolumeRule(
        "frost_footing", VolumeCategory.FOOTING,
        _search(r"Frost\s*Footing\s*\(?(\d+)\"\s*x\s*(\d+)\""),
        _frost_footing,
    ),
    VolumeRule(
        "frost_footing_assumed", VolumeCategory.FOOTING,
        _search(r"Frost\s*Footing"),
        _frost_footing_assumed,
    ),
    VolumeRule(
        "slab_thickness", VolumeCategory.SLAB,
        _search(r"(?:Slab|Porch|Apron|Driveway|Leadwalk)\s*-?\s*(\d+)\""),
        _slab_thickness,
    ),
    VolumeRule(
        "slab_dash_thickness", VolumeCategory.SLAB,
        _search(r"Slab\s*-\s*(\d+)\"\s*Thickness"),
        _slab_thickness,
    ),
    VolumeRule(
        "slab_assumed", VolumeCategory.SLAB,
        _match_bare_slab,
        _slab_assumed,
    ),
    VolumeRule(
        "thickened_slab", VolumeCategory.SLAB,
        _search(r"Thickened\s*Slab"),
        _thickened_slab,
    ),
    VolumeRule(
        "solid_footing_jump", VolumeCategory.FOOTING,
        _search(r"Solid\s*Footing\s*Jump"),
        _solid_footing_jump,
    ),
    VolumeRule(
        "per_yard", VolumeCategory.UNATTRIBUTED,
        _search(r"Per\s*Yard"),
        _per_yard,
    ),
    VolumeRule(
        "areaway_landing", VolumeCategory.UNATTRIBUTED,
        _search(r"Areaway\s*Landing"),
        _areaway_landing,
    ),
    VolumeRule(
        "areaway", VolumeCategory.WALL,
        _search(r"^Areaway", exclude=r"Landing"),
        _areaway,
    ),
]


# =============================================================================
# Public API
# =============================================================================


def match_rule(description: Optional[str]) -> Optional[RuleMatch]:
    """
    Find the first rule matching a description.

    Args:
        description: Line item description (any value; non-strings never match)

    Returns:
        RuleMatch for the first rule that fires, or None
    """
    if not isinstance(description, str) or not description:
        return None
    text = description.strip()
    for rule in VOLUME_RULES:
        result = rule.apply(text)
        if result is not None:
            return RuleMatch(rule=rule.name, category=rule.category, result=result)
    return None


def infer_volume(description: Optional[str]) -> VolumeResult:
    """
    Infer cubic yards per unit from a line item description.

    Example:
        >>> r = infer_volume('8\\' x 8" Wall - with 8" x 16" Footings')
        >>> round(r.wall_cy_per_unit, 4), round(r.footing_cy_per_unit, 4)
        (0.1975, 0.0329)
        >>> infer_volume("Miscellaneous Labor") == NO_VOLUME
        True

    Args:
        description: Line item description

    Returns:
        VolumeResult; NO_VOLUME when nothing matched
    """
    found = match_rule(description)
    if found is None:
        return NO_VOLUME
    return found.result
