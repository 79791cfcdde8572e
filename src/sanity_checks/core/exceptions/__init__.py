"""
Exception Package
"""

from .assertion import (
    CheckAssertionException,
    LoadingIndicatorException,
    NetworkFailureException,
    ResponseStatusException,
)
from .base import AutomationException, ConfigurationException
from .browser import BrowserLaunchException
from .enums import ErrorCategory, ErrorSeverity

__all__ = [
    "AutomationException",
    "BrowserLaunchException",
    "CheckAssertionException",
    "ConfigurationException",
    "ErrorCategory",
    "ErrorSeverity",
    "LoadingIndicatorException",
    "NetworkFailureException",
    "ResponseStatusException",
]
