# src/sanity_checks/core/exceptions/base.py
"""
Base Exception Class for the Sanity Check Library

All library exceptions inherit from AutomationException. It carries
structured context (category, severity, key/value context, recovery
suggestions) so that a failing check can be logged and reported with
more than a bare message.
"""

import json
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

from .enums import ErrorCategory, ErrorSeverity


class AutomationException(Exception):
    """
    Base exception class for all library exceptions.

    Attributes:
        message: Human-readable error description
        error_code: Identifier derived from the exception type and timestamp
        category: Error category for classification
        severity: Error severity level
        context: Additional context information
        tags: Monitoring tags derived from the category
        recovery_suggestions: List of potential recovery actions
        timestamp: When the error occurred (UTC)
        original_exception: Exception that caused this error, if any

    Example:
        >>> raise AutomationException(
        ...     "Selector set not found",
        ...     category=ErrorCategory.CONFIGURATION,
        ... ).add_context("name", "my-selectors")
    """

    def __init__(
            self,
            message: str,
            error_code: Optional[str] = None,
            category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
            severity: ErrorSeverity = ErrorSeverity.MEDIUM,
            context: Optional[Dict[str, Any]] = None,
            recovery_suggestions: Optional[List[str]] = None,
            original_exception: Optional[Exception] = None
    ):
        """
        Initialize automation exception with rich context.

        Args:
            message: Error description, reported verbatim by str()
            error_code: Unique identifier for this error type
            category: Error category for classification
            severity: Severity level
            context: Additional debugging context
            recovery_suggestions: Suggested recovery actions
            original_exception: Original exception that caused this error
        """
        super().__init__(message)

        self.message = message
        self.timestamp = datetime.now(timezone.utc)
        self.error_code = error_code or self._generate_error_code()
        self.category = category
        self.severity = severity
        self.context: Dict[str, Any] = dict(context or {})
        self.tags: Set[str] = set(category.get_monitoring_tags())
        self.recovery_suggestions = list(recovery_suggestions or [])
        self.original_exception = original_exception
        self.stack_trace = traceback.format_exc()

        if original_exception is not None:
            self.context["original_type"] = type(original_exception).__name__
            self.context["original_message"] = str(original_exception)

    def _generate_error_code(self) -> str:
        """Generate an error code based on exception type and timestamp."""
        class_name = self.__class__.__name__.replace("Exception", "").upper()
        return f"{class_name}_{self.timestamp.strftime('%Y%m%d_%H%M%S_%f')}"

    def add_context(self, key: str, value: Any) -> "AutomationException":
        """Add contextual information. Returns self for chaining."""
        self.context[key] = value
        return self

    def add_recovery_suggestion(self, suggestion: str) -> "AutomationException":
        """Add a recovery suggestion. Duplicates are ignored."""
        if suggestion and suggestion not in self.recovery_suggestions:
            self.recovery_suggestions.append(suggestion)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging/reporting.

        Returns:
            Dict containing all exception information
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": self.context,
            "tags": sorted(self.tags),
            "recovery_suggestions": self.recovery_suggestions,
            "timestamp": self.timestamp.isoformat(),
            "original_exception": str(self.original_exception) if self.original_exception else None,
        }

    def to_json(self) -> str:
        """Convert exception to a JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def to_report(self) -> str:
        """Return a multi-line description for humans reading a log."""
        lines = [
            f"{self.__class__.__name__}: {self.message}",
            f"Error Code: {self.error_code}",
            f"Category: {self.category.value}",
            f"Severity: {self.severity.value}",
        ]
        if self.context:
            lines.append(f"Context: {self.context}")
        if self.recovery_suggestions:
            lines.append("Recovery Suggestions:")
            for i, suggestion in enumerate(self.recovery_suggestions, 1):
                lines.append(f"  {i}. {suggestion}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message[:50]!r}, "
            f"category={self.category.value}, "
            f"severity={self.severity.value})"
        )


class ConfigurationException(AutomationException):
    """Raised when settings or selector sets cannot be resolved."""

    def __init__(self, message: str, setting_name: Optional[str] = None, **kwargs):
        kwargs.setdefault("category", ErrorCategory.CONFIGURATION)
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message=message, **kwargs)

        if setting_name:
            self.add_context("setting_name", setting_name)

        self.add_recovery_suggestion("Check SANITY_* environment variables and .env files")
