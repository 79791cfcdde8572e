# src/sanity_checks/utils/network_monitor.py
"""
Scoped Request-Failure Monitoring

NetworkFailureMonitor subscribes to a page's "requestfailed" events and
installs a pass-through route for critical resources only for as long as
it is active. Leaving the context removes both again, so the page is
returned to the caller exactly as it was borrowed.

Example:
    >>> async with watch_network_failures(page) as monitor:
    ...     await page.goto("https://example.com")
    ...     await monitor.observe(until="networkidle")
    >>> monitor.assert_no_failures()
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, List, Optional

from playwright.async_api import Page, Request, Route

from sanity_checks.config.settings import get_settings
from sanity_checks.core.exceptions import NetworkFailureException
from sanity_checks.core.logger import get_logger, log_assertion
from sanity_checks.models import FailedRequest


class NetworkFailureMonitor:
    """
    Collect failed requests of the given resource types while active.

    Args:
        page: Page to observe; borrowed, never closed
        resource_types: Resource types that count as failures
            (default: checks.critical_resource_types)
        route_pattern: Glob for the pass-through route
            (default: checks.network_route_pattern)
    """

    def __init__(
            self,
            page: Page,
            resource_types: Optional[Iterable[str]] = None,
            route_pattern: Optional[str] = None
    ):
        settings = get_settings()
        self.page = page
        self.resource_types = frozenset(
            resource_types if resource_types is not None else settings.checks.critical_resource_types
        )
        self.route_pattern = route_pattern or settings.checks.network_route_pattern
        self.logger = get_logger("network_monitor")
        self._failures: List[FailedRequest] = []
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @property
    def failures(self) -> List[FailedRequest]:
        return list(self._failures)

    async def start(self) -> "NetworkFailureMonitor":
        """Install the listener and pass-through route. No-op if already active."""
        if self._active:
            return self

        self.page.on("requestfailed", self._on_request_failed)
        try:
            await self.page.route(self.route_pattern, self._pass_through)
        except Exception:
            self.page.remove_listener("requestfailed", self._on_request_failed)
            raise

        self._active = True
        self.logger.debug(
            "Network failure monitor started",
            route_pattern=self.route_pattern,
            resource_types=sorted(self.resource_types),
        )
        return self

    async def stop(self) -> None:
        """Remove the listener and route. No-op if not active."""
        if not self._active:
            return

        self._active = False
        self.page.remove_listener("requestfailed", self._on_request_failed)
        await self.page.unroute(self.route_pattern, self._pass_through)

        self.logger.debug("Network failure monitor stopped", failure_count=len(self._failures))

    async def observe(
            self,
            until: Optional[str] = "networkidle",
            duration: int = 0,
            timeout: Optional[float] = None
    ) -> None:
        """
        Keep listening for an explicit window.

        Args:
            until: Load state to wait for first ("load", "domcontentloaded",
                "networkidle"), or None to skip
            duration: Additional time to keep listening, in ms
            timeout: Load-state wait timeout in ms (default: checks.load_state_timeout,
                then Playwright's default)
        """
        if timeout is None:
            timeout = get_settings().checks.load_state_timeout
        if until is not None:
            await self.page.wait_for_load_state(until, timeout=timeout)
        if duration > 0:
            await asyncio.sleep(duration / 1000)

    def assert_no_failures(self, check_name: str = "check_no_unhandled_network_failures") -> None:
        """
        Raises:
            NetworkFailureException: If any matching request failed
        """
        failures = self.failures
        passed = not failures
        log_assertion("equal", 0, len(failures), passed, check_name=check_name)
        if passed:
            return

        lines = [f"{len(failures)} critical resource request(s) failed", "", "Expected: 0", f"Received: {len(failures)}"]
        lines.extend(
            f"  {failure.resource_type} {failure.method} {failure.url}: {failure.failure or 'unknown error'}"
            for failure in failures
        )
        raise NetworkFailureException(
            "\n".join(lines),
            failures=failures,
            check_name=check_name,
            expected=0,
            actual=len(failures),
        )

    def _on_request_failed(self, request: Request) -> None:
        if request.resource_type not in self.resource_types:
            return

        failed = FailedRequest.from_request(request)
        self._failures.append(failed)
        self.logger.warning("Critical resource request failed", **failed.to_dict())

    async def _pass_through(self, route: Route) -> None:
        # fallback() lets routes registered by the test still handle the request
        await route.fallback()

    async def __aenter__(self) -> "NetworkFailureMonitor":
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()


@asynccontextmanager
async def watch_network_failures(page: Page, **kwargs) -> AsyncIterator[NetworkFailureMonitor]:
    """Convenience wrapper: `async with watch_network_failures(page) as monitor:`."""
    async with NetworkFailureMonitor(page, **kwargs) as monitor:
        yield monitor
