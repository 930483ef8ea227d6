"""
errors/ - Error Taxonomy

Structured error classification for the mission composer.
"""

from .taxonomy import (
    ErrorSeverity,
    ErrorCategory,
    ErrorCode,
    FleetOpsError,
    FleetOpsException,
    InvalidFieldError,
    PersistenceError,
    ReferenceDataError,
    create_validation_error,
    create_persistence_error,
    create_reference_error,
)

__all__ = [
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorCode",
    "FleetOpsError",
    "FleetOpsException",
    "InvalidFieldError",
    "PersistenceError",
    "ReferenceDataError",
    "create_validation_error",
    "create_persistence_error",
    "create_reference_error",
]
