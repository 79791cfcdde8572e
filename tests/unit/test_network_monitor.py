# tests/unit/test_network_monitor.py
"""
Unit tests for the scoped request-failure monitor.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from sanity_checks.core.exceptions import NetworkFailureException
from sanity_checks.models import FailedRequest
from sanity_checks.utils.network_monitor import NetworkFailureMonitor, watch_network_failures


class TestNetworkFailureMonitorLifecycle:

    @pytest.mark.asyncio
    async def test_listener_and_route_exist_only_inside_context(self, page):
        monitor = NetworkFailureMonitor(page)
        assert not monitor.active
        page.on.assert_not_called()

        async with monitor:
            assert monitor.active
            page.on.assert_called_once_with("requestfailed", monitor._on_request_failed)
            page.route.assert_awaited_once_with("**/*.{css,js}", monitor._pass_through)
            page.remove_listener.assert_not_called()

        assert not monitor.active
        page.remove_listener.assert_called_once_with("requestfailed", monitor._on_request_failed)
        page.unroute.assert_awaited_once_with("**/*.{css,js}", monitor._pass_through)

    @pytest.mark.asyncio
    async def test_released_when_block_raises(self, page):
        with pytest.raises(RuntimeError):
            async with NetworkFailureMonitor(page):
                raise RuntimeError("navigation failed")

        page.remove_listener.assert_called_once()
        page.unroute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_start_and_stop_are_idempotent(self, page):
        monitor = NetworkFailureMonitor(page)

        await monitor.start()
        await monitor.start()
        await monitor.stop()
        await monitor.stop()

        assert page.on.call_count == 1
        assert page.route.await_count == 1
        assert page.remove_listener.call_count == 1
        assert page.unroute.await_count == 1

    @pytest.mark.asyncio
    async def test_listener_removed_if_route_fails(self, page):
        page.route.side_effect = RuntimeError("Target closed")
        monitor = NetworkFailureMonitor(page)

        with pytest.raises(RuntimeError):
            await monitor.start()

        assert not monitor.active
        page.remove_listener.assert_called_once_with("requestfailed", monitor._on_request_failed)

    @pytest.mark.asyncio
    async def test_pass_through_falls_back(self, page):
        route = MagicMock()
        route.fallback = AsyncMock()

        async with NetworkFailureMonitor(page) as monitor:
            handler = page.route.call_args[0][1]
            await handler(route)

        route.fallback.assert_awaited_once_with()
        assert monitor.failures == []

    @pytest.mark.asyncio
    async def test_custom_route_pattern(self, page):
        async with watch_network_failures(page, route_pattern="**/*.css"):
            pass

        assert page.route.call_args[0][0] == "**/*.css"
        assert page.unroute.call_args[0][0] == "**/*.css"


class TestNetworkFailureMonitorCollection:

    @pytest.mark.asyncio
    async def test_only_critical_types_are_collected(self, page, failed_request):
        async with NetworkFailureMonitor(page) as monitor:
            monitor._on_request_failed(failed_request("image", url="http://sanity.test/a.png"))
            monitor._on_request_failed(failed_request("font", url="http://sanity.test/a.woff"))
            monitor._on_request_failed(failed_request("stylesheet", url="http://sanity.test/a.css"))

        assert monitor.failures == [
            FailedRequest(
                url="http://sanity.test/a.css",
                method="GET",
                resource_type="stylesheet",
                failure="net::ERR_FAILED",
            )
        ]

    @pytest.mark.asyncio
    async def test_failures_returns_a_copy(self, page, failed_request):
        async with NetworkFailureMonitor(page) as monitor:
            monitor._on_request_failed(failed_request("script"))

        monitor.failures.clear()
        assert len(monitor.failures) == 1

    @pytest.mark.asyncio
    async def test_observe_waits_for_load_state_then_duration(self, page):
        monitor = NetworkFailureMonitor(page)

        with patch("sanity_checks.utils.network_monitor.asyncio.sleep", new=AsyncMock()) as sleep:
            await monitor.observe(until="load", duration=250)

        page.wait_for_load_state.assert_awaited_once_with("load", timeout=None)
        sleep.assert_awaited_once_with(0.25)

    @pytest.mark.asyncio
    async def test_observe_without_duration_does_not_sleep(self, page):
        monitor = NetworkFailureMonitor(page)

        with patch("sanity_checks.utils.network_monitor.asyncio.sleep", new=AsyncMock()) as sleep:
            await monitor.observe()

        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_observe_passes_timeout(self, page):
        await NetworkFailureMonitor(page).observe(until="load", timeout=1500)

        page.wait_for_load_state.assert_awaited_once_with("load", timeout=1500)

    @pytest.mark.asyncio
    async def test_assert_no_failures(self, page, failed_request):
        async with NetworkFailureMonitor(page) as monitor:
            pass
        monitor.assert_no_failures()

        async with NetworkFailureMonitor(page) as failing:
            failing._on_request_failed(failed_request("script", url="http://sanity.test/app.js", failure=None))

        with pytest.raises(NetworkFailureException) as exc_info:
            failing.assert_no_failures()

        exception = exc_info.value
        assert exception.count == 1
        assert exception.expected == 0
        assert exception.actual == 1
        assert exception.context["failed_urls"] == ["http://sanity.test/app.js"]
        assert str(exception).splitlines()[0] == "1 critical resource request(s) failed"
        assert "script GET http://sanity.test/app.js: unknown error" in str(exception)
