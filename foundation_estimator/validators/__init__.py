"""Record boundary validation for Foundation Estimator."""

from foundation_estimator.validators.proposal_validator import (
    ValidationResult,
    parse_proposal,
    validate_proposal,
)

__all__ = ["ValidationResult", "parse_proposal", "validate_proposal"]
