# src/sanity_checks/core/exceptions/browser.py
"""
Browser-Related Exception Classes

Raised by the browser session harness, never by the checks themselves.
"""

from typing import Optional

from .base import AutomationException
from .enums import ErrorCategory, ErrorSeverity


class BrowserLaunchException(AutomationException):
    """The configured browser could not be launched."""

    def __init__(self, message: str, browser_name: Optional[str] = None, **kwargs):
        kwargs.setdefault("category", ErrorCategory.BROWSER)
        kwargs.setdefault("severity", ErrorSeverity.CRITICAL)
        super().__init__(message=message, **kwargs)

        self.browser_name = browser_name
        if browser_name:
            self.add_context("browser_name", browser_name)

        self.add_recovery_suggestion("Run 'playwright install' to download browser binaries")
        self.add_recovery_suggestion("Check SANITY_BROWSER__NAME is a supported browser")
