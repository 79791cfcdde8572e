# src/sanity_checks/core/exceptions/enums.py
"""
Exception Classification Enums

Enums used to categorize and prioritize check failures so that logs and
monitoring can group them consistently.
"""

from enum import Enum
from typing import Dict, Set


class ErrorSeverity(str, Enum):
    """
    Error severity levels for exception prioritization.

    Usage:
        >>> error = CheckAssertionException("Body is empty", severity=ErrorSeverity.HIGH)
        >>> error.severity.should_alert()
        True
    """

    LOW = "low"
    """Cosmetic or informational failures."""

    MEDIUM = "medium"
    """Failures that make the page unreliable but not unusable."""

    HIGH = "high"
    """Failures that make the page unusable (missing page, broken scripts)."""

    CRITICAL = "critical"
    """Failures of the harness itself (browser cannot launch)."""

    def should_alert(self) -> bool:
        """Determine if this severity level requires alerting."""
        return self in [ErrorSeverity.HIGH, ErrorSeverity.CRITICAL]


class ErrorCategory(str, Enum):
    """Error categories for organizing exception types by functional area."""

    BROWSER = "browser"
    """Browser launch failures and crashes."""

    NETWORK = "network"
    """HTTP status problems and failed resource requests."""

    ELEMENT = "element"
    """Elements in an unexpected state (loading indicators still visible)."""

    CONFIGURATION = "configuration"
    """Missing or invalid settings and selector sets."""

    VALIDATION = "validation"
    """Generic assertion mismatches."""

    INFRASTRUCTURE = "infrastructure"
    """Anything else."""

    def get_monitoring_tags(self) -> Set[str]:
        """Get monitoring tags for this category."""
        base_tags = {self.value, "sanity_check"}

        tag_mapping: Dict[ErrorCategory, Set[str]] = {
            ErrorCategory.BROWSER: {"browser_issue"},
            ErrorCategory.NETWORK: {"network_issue", "resource_failure"},
            ErrorCategory.ELEMENT: {"element_issue", "ui_failure"},
            ErrorCategory.CONFIGURATION: {"config_issue"},
            ErrorCategory.VALIDATION: {"assertion_failure"},
            ErrorCategory.INFRASTRUCTURE: {"infra_issue"},
        }

        return base_tags.union(tag_mapping.get(self, set()))
