"""
errors/taxonomy.py - Error classification system

Structured error records for persistence and reference-data failures, plus
the exception types raised at the few boundaries where the composer raises.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from enum import Enum
import uuid


class ErrorSeverity(Enum):
    """Error severity levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories."""
    # Validation errors (1xxx)
    VALIDATION = "validation"

    # Reference errors (2xxx)
    REFERENCE = "reference"

    # Persistence errors (3xxx)
    PERSISTENCE = "persistence"

    # Configuration errors (6xxx)
    CONFIGURATION = "configuration"


class ErrorCode(Enum):
    """Specific error codes."""

    # Validation (1xxx)
    VAL_FAILED = 1001
    VAL_MISSING_FIELD = 1002
    VAL_OVER_CAPACITY = 1003
    VAL_UNKNOWN_FIELD = 1004

    # Reference data (2xxx)
    REF_UNAVAILABLE = 2001
    REF_MALFORMED = 2002

    # Persistence (3xxx)
    PST_REQUEST_FAILED = 3001
    PST_NOT_FOUND = 3002
    PST_REJECTED = 3003

    # System (6xxx)
    SYS_CONFIG = 6001


@dataclass
class FleetOpsError:
    """Structured error representation."""

    error_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    code: ErrorCode = ErrorCode.VAL_FAILED
    category: ErrorCategory = ErrorCategory.VALIDATION
    severity: ErrorSeverity = ErrorSeverity.ERROR

    message: str = ""
    detail: str = ""

    # Context
    source: str = ""  # Component that reported it
    mission_id: Optional[str] = None
    status_code: Optional[int] = None

    # Recovery
    recoverable: bool = True
    recovery_options: List[str] = field(default_factory=list)

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "detail": self.detail,
            "source": self.source,
            "mission_id": self.mission_id,
            "status_code": self.status_code,
            "recoverable": self.recoverable,
            "recovery_options": list(self.recovery_options),
        }


# =============================================================================
# EXCEPTIONS
# =============================================================================

class FleetOpsException(Exception):
    """Base exception carrying a structured error record."""

    def __init__(self, message: str, error: Optional[FleetOpsError] = None):
        super().__init__(message)
        self.message = message
        self.error = error or FleetOpsError(message=message)

    def __str__(self) -> str:
        return self.message


class InvalidFieldError(FleetOpsException):
    """Raised when code addresses a mission overview field that does not exist."""

    def __init__(self, field_name: str):
        super().__init__(
            f"Unknown mission field: {field_name}",
            FleetOpsError(
                code=ErrorCode.VAL_UNKNOWN_FIELD,
                category=ErrorCategory.VALIDATION,
                severity=ErrorSeverity.ERROR,
                message=f"Unknown mission field: {field_name}",
                source="selection_store",
                recoverable=False,
            ),
        )
        self.field_name = field_name


class PersistenceError(FleetOpsException):
    """Raised when the mission persistence API rejects or fails a request."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        mission_id: Optional[str] = None,
    ):
        super().__init__(
            message,
            create_persistence_error(message, status_code=status_code, mission_id=mission_id),
        )
        self.status_code = status_code
        self.mission_id = mission_id


class ReferenceDataError(FleetOpsException):
    """Raised when a reference data source cannot be read."""

    def __init__(self, source: str, message: str):
        super().__init__(message, create_reference_error(message, source))
        self.source = source


# =============================================================================
# FACTORIES
# =============================================================================

def create_validation_error(
    message: str,
    source: str,
    code: ErrorCode = ErrorCode.VAL_FAILED,
    detail: str = "",
    mission_id: str = None,
) -> FleetOpsError:
    """Factory for validation errors."""
    return FleetOpsError(
        code=code,
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.WARNING,
        message=message,
        detail=detail,
        source=source,
        mission_id=mission_id,
    )


def create_persistence_error(
    message: str,
    status_code: int = None,
    mission_id: str = None,
    source: str = "mission_client",
) -> FleetOpsError:
    """Factory for persistence errors."""
    if status_code == 404:
        code = ErrorCode.PST_NOT_FOUND
    elif status_code is not None and 400 <= status_code < 500:
        code = ErrorCode.PST_REJECTED
    else:
        code = ErrorCode.PST_REQUEST_FAILED

    return FleetOpsError(
        code=code,
        category=ErrorCategory.PERSISTENCE,
        severity=ErrorSeverity.ERROR,
        message=message,
        source=source,
        mission_id=mission_id,
        status_code=status_code,
        recovery_options=["retry_save", "keep_editing"],
    )


def create_reference_error(message: str, source: str) -> FleetOpsError:
    """Factory for reference-data errors."""
    return FleetOpsError(
        code=ErrorCode.REF_UNAVAILABLE,
        category=ErrorCategory.REFERENCE,
        severity=ErrorSeverity.WARNING,
        message=message,
        source=source,
        recovery_options=["continue_with_empty_list"],
    )
