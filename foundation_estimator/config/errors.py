"""Foundation Estimator error handling.

Errors are raised only at the record boundary (parsing persisted or imported
proposals, building custom items, looking up lines). The estimating services
themselves never raise: an unreadable description or number is worth zero.
"""

from typing import Optional, Dict, Any


class ErrorCode:
    """Error codes carried in ``EstimatorError.code``."""

    # Record validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_SCHEMA = "INVALID_SCHEMA"
    INVALID_FIELD = "INVALID_FIELD"

    # Custom items
    EMPTY_DESCRIPTION = "EMPTY_DESCRIPTION"

    # Lookups
    PROPOSAL_NOT_FOUND = "PROPOSAL_NOT_FOUND"
    LINE_ITEM_NOT_FOUND = "LINE_ITEM_NOT_FOUND"


class EstimatorError(Exception):
    """Base exception for Foundation Estimator.

    Attributes:
        code: One of the ErrorCode constants
        message: Human-readable message
        details: Extra context (field names, offending values, ids)
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form, as printed by the CLI on failure."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(EstimatorError):
    """A record or input that cannot be used as given.

    ``field`` names the offending input when there is a single one; it is
    also copied into ``details``.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict] = None,
        code: str = ErrorCode.VALIDATION_ERROR,
    ):
        if field:
            details = {**(details or {}), "field": field}
        super().__init__(code=code, message=message, details=details)
        self.field = field


class RecordNotFoundError(EstimatorError):
    """No proposal or line item with the requested id."""

    def __init__(self, code: str, record_id: str, details: Optional[Dict] = None):
        super().__init__(
            code=code,
            message=f"Record not found: {record_id}",
            details={**(details or {}), "record_id": record_id}
        )
        self.record_id = record_id
