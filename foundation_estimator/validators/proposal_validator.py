"""Proposal record parsing and validation.

Deserializes persisted/imported proposal records into typed Pydantic models.
This is the only place the estimator raises on bad input; once a proposal
is parsed, every computation on it is total.

Beyond schema errors, validation reports warnings for data the engine will
silently treat as zero: unparseable quantities or prices, descriptions no
volume rule recognises, and rebar configured on lines it cannot apply to.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
import structlog

from foundation_estimator.config.errors import ErrorCode, ValidationError
from foundation_estimator.models.line_item import LineItem
from foundation_estimator.models.proposal import Proposal
from foundation_estimator.services.aggregator import needs_volume_override
from foundation_estimator.services.rebar_calculator import is_rebar_eligible
from foundation_estimator.utils.numbers import is_blank, try_parse_number

logger = structlog.get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of proposal validation."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    parsed: Optional[Proposal] = None


def _format_errors(exc: PydanticValidationError) -> List[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]


def parse_proposal(data: Dict[str, Any]) -> Proposal:
    """Parse a raw record into a typed Proposal.

    Args:
        data: camelCase (or snake_case) proposal record

    Returns:
        Typed Proposal object

    Raises:
        ValidationError: If the record is not a dict or fails schema validation
    """
    if not isinstance(data, dict):
        raise ValidationError(
            message="Proposal record must be a dictionary",
            details={"type": type(data).__name__},
        )
    try:
        return Proposal.model_validate(data)
    except PydanticValidationError as e:
        errors = _format_errors(e)
        raise ValidationError(
            message="Proposal record failed schema validation",
            details={"errors": errors},
            code=ErrorCode.INVALID_SCHEMA,
        ) from e


def _line_warnings(line: LineItem, position: str) -> List[str]:
    warnings = []
    label = f"{position} \"{line.description}\"" if line.description else position

    numeric_fields = (
        ("quantity", line.quantity),
        ("unitPriceStandard", line.unit_price_standard),
        ("unitPriceOptional", line.unit_price_optional),
        ("volumeOverride", line.volume_override),
    )
    for name, value in numeric_fields:
        if not is_blank(value) and try_parse_number(value) is None:
            warnings.append(f"{label}: {name} {value!r} is not a number and counts as 0")

    if needs_volume_override(line):
        warnings.append(f"{label}: no volume rule matched; enter a CY override")

    if (
        line.rebar_config is not None
        and line.rebar_config.is_configured
        and not is_rebar_eligible(line.description)
    ):
        warnings.append(f"{label}: rebar is only calculated for wall-with-footings lines")

    return warnings


def proposal_warnings(proposal: Proposal) -> List[str]:
    """Data-quality warnings for a parsed proposal."""
    warnings = []
    for section, lines in (
        ("footingWallLines", proposal.footing_wall_lines),
        ("slabLines", proposal.slab_lines),
    ):
        for index, line in enumerate(lines):
            warnings.extend(_line_warnings(line, f"{section}[{index}]"))

    rates = proposal.rates
    if rates.has_yards_override and try_parse_number(rates.concrete_yards_override) is None:
        warnings.append(
            f"concreteYardsOverride {rates.concrete_yards_override!r} is not a number and counts as 0"
        )
    return warnings


def validate_proposal(data: Dict[str, Any]) -> ValidationResult:
    """Validate a proposal record without raising.

    Args:
        data: Raw proposal record

    Returns:
        ValidationResult with is_valid, errors, warnings and the parsed proposal
    """
    try:
        parsed = parse_proposal(data)
    except ValidationError as e:
        errors = e.details.get("errors") or [e.message]
        logger.warning("proposal_validation_failed", errors=errors)
        return ValidationResult(is_valid=False, errors=errors)

    warnings = proposal_warnings(parsed)
    if warnings:
        logger.info("proposal_validation_warnings", proposal_id=parsed.id, count=len(warnings))
    return ValidationResult(is_valid=True, warnings=warnings, parsed=parsed)
