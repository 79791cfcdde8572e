from .assertion_helpers import (
    AssertionFailure,
    SoftAssertions,
    expect_equal,
    expect_greater_than,
    expect_not_equal,
    expect_true,
)
from .network_monitor import NetworkFailureMonitor, watch_network_failures

__all__ = [
    "AssertionFailure",
    "NetworkFailureMonitor",
    "SoftAssertions",
    "expect_equal",
    "expect_greater_than",
    "expect_not_equal",
    "expect_true",
    "watch_network_failures",
]
