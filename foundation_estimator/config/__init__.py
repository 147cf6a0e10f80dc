"""Foundation Estimator configuration.

This package contains:
- settings: Environment variables, default cost rates
- errors: Custom exceptions and error codes
"""

from foundation_estimator.config.settings import settings, Settings, DefaultCosts
from foundation_estimator.config.errors import (
    ErrorCode,
    EstimatorError,
    ValidationError,
    RecordNotFoundError,
)

__all__ = [
    "settings",
    "Settings",
    "DefaultCosts",
    "ErrorCode",
    "EstimatorError",
    "ValidationError",
    "RecordNotFoundError",
]
