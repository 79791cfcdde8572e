# src/sanity_checks/models.py
"""
Value records produced by the checks.

SelectorOutcome is the per-selector result of a transient-visibility
wait; FailedRequest is a snapshot of a Playwright "requestfailed" event.
Both are frozen so they can be handed to callers and exceptions safely.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SelectorOutcome:
    """Result of waiting for one selector's elements to become hidden."""

    selector: str
    matched: int
    hidden: bool
    error: Optional[str] = None

    @property
    def skipped(self) -> bool:
        """No element matched, so there was nothing to wait for."""
        return self.matched == 0


@dataclass(frozen=True)
class FailedRequest:
    """A request that failed while a NetworkFailureMonitor was listening."""

    url: str
    method: str
    resource_type: str
    failure: Optional[str] = None

    @classmethod
    def from_request(cls, request: Any) -> "FailedRequest":
        """Snapshot a playwright Request; its attributes are read once, here."""
        return cls(
            url=request.url,
            method=request.method,
            resource_type=request.resource_type,
            failure=request.failure,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "method": self.method,
            "resource_type": self.resource_type,
            "failure": self.failure,
        }
