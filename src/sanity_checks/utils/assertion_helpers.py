# src/sanity_checks/utils/assertion_helpers.py
"""
Assertion Helpers for Sanity Checks

Hard assertions (expect_*) raise immediately with a Playwright-style
"Expected / Received" message and log the result through log_assertion.
SoftAssertions collects several failures and raises them together, so
independent sub-checks (one per selector, for example) stay individually
attributable in a single failure.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from sanity_checks.core.exceptions import CheckAssertionException, ErrorSeverity
from sanity_checks.core.logger import get_logger, log_assertion


def format_value(value: Any) -> str:
    """Render a value the way Playwright's expect() prints it (JSON literals)."""
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)


def format_mismatch(message: str, expected: Any, actual: Any) -> str:
    return f"{message}\n\nExpected: {expected}\nReceived: {actual}"


def _fail(
        message: str,
        expected: str,
        actual: str,
        expected_value: Any,
        actual_value: Any,
        check_name: Optional[str],
        exception_class: Type[CheckAssertionException],
        **exception_kwargs
) -> None:
    raise exception_class(
        format_mismatch(message, expected, actual),
        check_name=check_name,
        expected=expected_value,
        actual=actual_value,
        **exception_kwargs
    )


def expect_equal(
        actual: Any,
        expected: Any,
        message: str,
        check_name: Optional[str] = None,
        exception_class: Type[CheckAssertionException] = CheckAssertionException,
        **exception_kwargs
) -> None:
    """
    Assert actual == expected.

    Raises:
        exception_class: With "Expected: <expected>" / "Received: <actual>" lines
    """
    passed = actual == expected
    log_assertion("equal", expected, actual, passed, check_name=check_name)
    if not passed:
        _fail(message, format_value(expected), format_value(actual),
              expected, actual, check_name, exception_class, **exception_kwargs)


def expect_not_equal(
        actual: Any,
        unexpected: Any,
        message: str,
        check_name: Optional[str] = None,
        exception_class: Type[CheckAssertionException] = CheckAssertionException,
        **exception_kwargs
) -> None:
    """Assert actual != unexpected."""
    passed = actual != unexpected
    log_assertion("not_equal", f"not {unexpected}", actual, passed, check_name=check_name)
    if not passed:
        _fail(message, f"not {format_value(unexpected)}", format_value(actual),
              f"not {unexpected}", actual, check_name, exception_class, **exception_kwargs)


def expect_true(
        condition: Any,
        message: str,
        check_name: Optional[str] = None,
        exception_class: Type[CheckAssertionException] = CheckAssertionException,
        **exception_kwargs
) -> None:
    """Assert condition is True (exactly, like toBe(true)); truthy values like 1 fail."""
    passed = condition is True
    log_assertion("true", True, condition, passed, check_name=check_name)
    if not passed:
        _fail(message, format_value(True), format_value(condition),
              True, condition, check_name, exception_class, **exception_kwargs)


def expect_greater_than(
        actual: Any,
        threshold: Any,
        message: str,
        check_name: Optional[str] = None,
        exception_class: Type[CheckAssertionException] = CheckAssertionException,
        **exception_kwargs
) -> None:
    """Assert actual > threshold."""
    passed = actual > threshold
    log_assertion("greater_than", f"> {threshold}", actual, passed, check_name=check_name)
    if not passed:
        _fail(message, f"> {format_value(threshold)}", format_value(actual),
              f"> {threshold}", actual, check_name, exception_class, **exception_kwargs)


@dataclass
class AssertionFailure:
    """Details about a single collected assertion failure."""

    message: str
    expected: Any = None
    actual: Any = None
    assertion_type: str = "custom"
    timestamp: float = field(default_factory=time.time)
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "expected": str(self.expected),
            "actual": str(self.actual),
            "assertion_type": self.assertion_type,
            "timestamp": self.timestamp,
            "context": self.context,
        }


class SoftAssertions:
    """
    Soft assertion collector.

    Failures are recorded instead of raised; assert_all() raises one
    exception listing every failure, in the order they were recorded.

    Example:
        >>> with SoftAssertions(check_name="check_transient_visibility") as soft:
        ...     for outcome in outcomes:
        ...         soft.assert_true(outcome.hidden, f"Element {outcome.selector} is still visible")
    """

    def __init__(
            self,
            check_name: Optional[str] = None,
            exception_class: Type[CheckAssertionException] = CheckAssertionException,
            severity: ErrorSeverity = ErrorSeverity.MEDIUM
    ):
        self.check_name = check_name
        self.exception_class = exception_class
        self.severity = severity
        self.failures: List[AssertionFailure] = []
        self.logger = get_logger("soft_assertions")

    def assert_true(self, condition: Any, message: str, **context) -> "SoftAssertions":
        """Record a failure unless condition is True."""
        passed = condition is True
        if not passed:
            self.add_failure(message, expected=True, actual=condition, assertion_type="true", **context)
        log_assertion("true", True, condition, passed, check_name=self.check_name)
        return self

    def add_failure(
            self,
            message: str,
            expected: Any = None,
            actual: Any = None,
            assertion_type: str = "custom",
            **context
    ) -> "SoftAssertions":
        self.failures.append(AssertionFailure(
            message=message,
            expected=expected,
            actual=actual,
            assertion_type=assertion_type,
            context=context,
        ))
        self.logger.warning(
            "Soft assertion failed",
            check_name=self.check_name,
            assertion_type=assertion_type,
            message=message,
        )
        return self

    def has_failures(self) -> bool:
        return len(self.failures) > 0

    def get_failures(self) -> List[AssertionFailure]:
        return self.failures.copy()

    def assert_all(self, **exception_kwargs) -> None:
        """
        Raise if any failure was recorded.

        A single failure is raised with its own message; several are
        joined one per line.
        """
        if not self.has_failures():
            return

        if len(self.failures) == 1:
            message = self.failures[0].message
        else:
            message = "\n".join(failure.message for failure in self.failures)

        exception = self.exception_class(
            message,
            check_name=self.check_name,
            expected=[f.expected for f in self.failures],
            actual=[f.actual for f in self.failures],
            severity=self.severity,
            **exception_kwargs
        )
        exception.add_context("failure_count", len(self.failures))
        exception.add_context("failure_details", [f.to_dict() for f in self.failures])
        raise exception

    def __enter__(self) -> "SoftAssertions":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.assert_all()
