"""
Error Types for the Reveal Engine

The engine has no I/O, so the taxonomy is narrow: configuration errors are
rejected synchronously before a run starts, and scheduling errors report misuse
of clocks and animators. Late callbacks are not errors; they are discarded by
the panel state machine.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification."""
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    SCHEDULING = "scheduling"


class LaserPrintError(Exception):
    """Base exception class for reveal engine errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.VALIDATION,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        component: str = "",
        operation: str = "",
        metadata: Optional[Dict[str, Any]] = None,
        recoverable: bool = True
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.component = component
        self.operation = operation
        self.metadata = metadata or {}
        self.recoverable = recoverable
        self.timestamp = datetime.now()
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging or reporting to a host UI."""
        return {
            "error_id": self.error_id,
            "timestamp": self.timestamp.isoformat(),
            "error_type": type(self).__name__,
            "error_message": self.message,
            "error_category": self.category.value,
            "severity": self.severity.value,
            "component": self.component,
            "operation": self.operation,
            "recoverable": self.recoverable,
            "metadata": self.metadata,
        }


class ConfigurationError(LaserPrintError):
    """Rejected panel or orchestrator configuration."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            recoverable=False,
            **kwargs
        )


class SchedulingError(LaserPrintError):
    """Misuse of a clock or animator (double start, closed clock, no event loop)."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.SCHEDULING,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )
