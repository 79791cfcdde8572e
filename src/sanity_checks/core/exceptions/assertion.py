# src/sanity_checks/core/exceptions/assertion.py
"""
Check Assertion Exceptions

Every failing sanity check raises a CheckAssertionException (or one of the
subclasses below). They are AssertionError subclasses too, so pytest and
other runners report them as ordinary failed assertions while the rich
context of AutomationException stays available to loggers.
"""

from typing import Any, List, Optional, Sequence

from .base import AutomationException
from .enums import ErrorCategory, ErrorSeverity


class CheckAssertionException(AutomationException, AssertionError):
    """
    A sanity check assertion failed.

    Attributes:
        check_name: Name of the check that failed
        expected: Expected value of the failing sub-assertion
        actual: Observed value of the failing sub-assertion
    """

    def __init__(
            self,
            message: str,
            check_name: Optional[str] = None,
            expected: Any = None,
            actual: Any = None,
            **kwargs
    ):
        kwargs.setdefault("category", ErrorCategory.VALIDATION)
        kwargs.setdefault("severity", ErrorSeverity.MEDIUM)
        super().__init__(message=message, **kwargs)

        self.check_name = check_name
        self.expected = expected
        self.actual = actual

        if check_name:
            self.add_context("check_name", check_name)
        self.add_context("expected", expected)
        self.add_context("actual", actual)

        self.add_recovery_suggestion("Check if application behavior has changed")


class ResponseStatusException(CheckAssertionException):
    """The primary navigation response was not a plain 200 OK."""

    def __init__(
            self,
            message: str,
            status_code: Optional[int] = None,
            url: Optional[str] = None,
            **kwargs
    ):
        kwargs.setdefault("category", ErrorCategory.NETWORK)
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message=message, **kwargs)

        self.status_code = status_code
        self.url = url

        if status_code is not None:
            self.add_context("status_code", status_code)
        if url:
            self.add_context("url", url)

        if status_code == 404:
            self.add_recovery_suggestion("Check that the page URL is correct")
        elif status_code is not None and status_code >= 500:
            self.add_recovery_suggestion("Server error - check application logs")


class LoadingIndicatorException(CheckAssertionException):
    """One or more loading indicators stayed visible past the allowed time."""

    def __init__(
            self,
            message: str,
            outcomes: Sequence[Any] = (),
            max_visible_time: Optional[int] = None,
            **kwargs
    ):
        kwargs.setdefault("category", ErrorCategory.ELEMENT)
        super().__init__(message=message, **kwargs)

        self.outcomes = list(outcomes)
        self.max_visible_time = max_visible_time

        self.add_context("selectors", self.selectors)
        if max_visible_time is not None:
            self.add_context("max_visible_time", max_visible_time)

        self.add_recovery_suggestion("Increase max_visible_time if the indicator is expected to linger")

    @property
    def selectors(self) -> List[str]:
        """Selectors whose elements were still visible."""
        return [outcome.selector for outcome in self.outcomes if not outcome.hidden]


class NetworkFailureException(CheckAssertionException):
    """Critical resource requests (stylesheets, scripts) failed."""

    def __init__(self, message: str, failures: Sequence[Any] = (), **kwargs):
        kwargs.setdefault("category", ErrorCategory.NETWORK)
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message=message, **kwargs)

        self.failures = list(failures)

        self.add_context("failed_urls", [failure.url for failure in self.failures])
        self.add_recovery_suggestion("Verify the failing resources are deployed and reachable")

    @property
    def count(self) -> int:
        return len(self.failures)
