# src/sanity_checks/checks/load.py
"""
Page-Load Sanity Checks

Short, stateless assertions evaluated against a Playwright page (and the
response of its primary navigation). Every check borrows the page for
the duration of one call, never closes it, returns None on success and
raises a CheckAssertionException subclass on failure.

Typical use in a test:

    >>> response = await page.goto(url)
    >>> await check_page_found(page, response)
    >>> await check_page_is_loaded(page)
    >>> await check_basic_content_presence(page)
    >>> await check_no_critical_loading_indicators(page, max_visible_time=5000)
    >>> await check_no_unhandled_network_failures(page)
"""

import asyncio
from typing import Iterable, List, Optional, Sequence

from playwright.async_api import Page, Response
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from sanity_checks.config.selectors import resolve_loading_selectors
from sanity_checks.config.settings import get_settings
from sanity_checks.core.exceptions import LoadingIndicatorException, ResponseStatusException
from sanity_checks.core.logger import get_logger, get_performance_timer
from sanity_checks.models import SelectorOutcome
from sanity_checks.utils.assertion_helpers import (
    SoftAssertions,
    expect_equal,
    expect_greater_than,
    expect_not_equal,
    expect_true,
)
from sanity_checks.utils.network_monitor import NetworkFailureMonitor

READY_STATE_COMPLETE = "complete"


async def check_page_is_loaded(page: Page, timeout: Optional[float] = None) -> None:
    """
    Wait for DOMContentLoaded and load, then require document.readyState == "complete".

    Args:
        page: Page under test
        timeout: Load-state wait timeout in ms (default: checks.load_state_timeout,
            then Playwright's default)
    """
    if timeout is None:
        timeout = get_settings().checks.load_state_timeout

    with get_performance_timer("check_page_is_loaded") as timer:
        await page.wait_for_load_state("domcontentloaded", timeout=timeout)
        await page.wait_for_load_state("load", timeout=timeout)

        ready_state = await page.evaluate("() => document.readyState")
        timer.add_metric("ready_state", ready_state)

        expect_equal(
            ready_state,
            READY_STATE_COMPLETE,
            "Document has not finished loading",
            check_name="check_page_is_loaded",
        )


async def check_page_found(page: Page, response: Response) -> None:
    """
    Require the navigation response to be OK, not 404, and exactly 200.

    The three assertions run in that order and the first failure is raised,
    so a 404 is reported as such rather than as a generic non-200.
    """
    check_name = "check_page_found"
    status = response.status
    context = {"status_code": status, "url": response.url}

    with get_performance_timer(check_name) as timer:
        timer.add_metric("status_code", status)
        timer.add_metric("page_url", page.url)

        expect_true(
            response.ok,
            "Response is not OK",
            check_name=check_name,
            exception_class=ResponseStatusException,
            **context,
        )
        expect_not_equal(
            status,
            404,
            "Response status is 404",
            check_name=check_name,
            exception_class=ResponseStatusException,
            **context,
        )
        expect_equal(
            status,
            200,
            "Response status is not 200",
            check_name=check_name,
            exception_class=ResponseStatusException,
            **context,
        )


async def check_basic_content_presence(page: Page) -> None:
    """Require the body's markup to be non-empty after trimming whitespace."""
    with get_performance_timer("check_basic_content_presence") as timer:
        body_content = await page.eval_on_selector("body", "body => body.innerHTML")
        content_length = len((body_content or "").strip())
        timer.add_metric("content_length", content_length)

        expect_greater_than(
            content_length,
            0,
            "Document body is empty",
            check_name="check_basic_content_presence",
        )


async def check_transient_visibility(
        page: Page,
        selectors: Iterable[str],
        max_visible_time: int = 0
) -> None:
    """
    Require every element matching each selector to be hidden within max_visible_time.

    Selectors are waited on concurrently and independently; a selector that
    matches nothing is skipped. With max_visible_time=0 the elements must
    already be hidden. Every still-visible selector is named in the failure.

    Args:
        page: Page under test
        selectors: CSS selectors of transient elements (spinners, progress bars)
        max_visible_time: Allowed visibility in ms

    Raises:
        TypeError: If selectors is a single string
        ValueError: If max_visible_time is negative
        LoadingIndicatorException: If any selector's elements stayed visible
    """
    if max_visible_time < 0:
        raise ValueError(f"max_visible_time must be >= 0, got {max_visible_time}")

    if isinstance(selectors, str):
        raise TypeError(f"selectors must be an iterable of selectors, not a single string: {selectors!r}")

    check_name = "check_transient_visibility"
    selectors = list(selectors)

    with get_performance_timer(check_name) as timer:
        outcomes = await _collect_outcomes(page, selectors, max_visible_time)
        timer.add_metric("selector_count", len(selectors))
        timer.add_metric("skipped", sum(1 for outcome in outcomes if outcome.skipped))

        soft = SoftAssertions(check_name=check_name, exception_class=LoadingIndicatorException)
        for outcome in outcomes:
            soft.assert_true(
                outcome.hidden,
                f"Element {outcome.selector} is still visible after {max_visible_time}ms",
                selector=outcome.selector,
            )
        soft.assert_all(outcomes=outcomes, max_visible_time=max_visible_time)


async def check_no_critical_loading_indicators(
        page: Page,
        selectors: Optional[Iterable[str]] = None,
        max_visible_time: Optional[int] = None
) -> None:
    """
    check_transient_visibility with the configured loading-indicator selectors.

    Args:
        page: Page under test
        selectors: Override the selector set (default: resolve_loading_selectors())
        max_visible_time: Override the allowed time in ms (default: checks.max_visible_time)
    """
    if selectors is None:
        selectors = resolve_loading_selectors().selectors
    if max_visible_time is None:
        max_visible_time = get_settings().checks.max_visible_time

    await check_transient_visibility(page, selectors=selectors, max_visible_time=max_visible_time)


async def check_no_unhandled_network_failures(
        page: Page,
        observe_until: Optional[str] = "networkidle",
        observe_time: Optional[int] = None,
        resource_types: Optional[Iterable[str]] = None,
        timeout: Optional[float] = None
) -> None:
    """
    Require no stylesheet or script request to fail during the observation window.

    The listener and pass-through route exist only while observing. Failures
    that happen before the call or after it returns are not seen; wrap the
    navigation in watch_network_failures() to cover it.

    Args:
        page: Page under test
        observe_until: Load state to wait for while listening, or None
        observe_time: Extra listening time in ms (default: checks.network_observe_time)
        resource_types: Resource types that count (default: checks.critical_resource_types)
        timeout: Load-state wait timeout in ms (default: checks.load_state_timeout,
            then Playwright's default)
    """
    if observe_time is None:
        observe_time = get_settings().checks.network_observe_time

    with get_performance_timer("check_no_unhandled_network_failures") as timer:
        async with NetworkFailureMonitor(page, resource_types=resource_types) as monitor:
            await monitor.observe(until=observe_until, duration=observe_time, timeout=timeout)

        timer.add_metric("failure_count", len(monitor.failures))
        monitor.assert_no_failures()


async def _collect_outcomes(page: Page, selectors: Sequence[str], max_visible_time: int) -> List[SelectorOutcome]:
    """Run every selector's wait to completion; re-raise the first unexpected error."""
    results = await asyncio.gather(
        *(_wait_until_hidden(page, selector, max_visible_time) for selector in selectors),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


async def _wait_until_hidden(page: Page, selector: str, max_visible_time: int) -> SelectorOutcome:
    logger = get_logger("checks.load")
    locator = page.locator(selector)

    matched = await locator.count()
    if matched == 0:
        logger.debug("Selector matched nothing, skipping", selector=selector)
        return SelectorOutcome(selector=selector, matched=0, hidden=True)

    # Playwright treats timeout=0 as "wait forever", so zero is a snapshot
    if max_visible_time == 0:
        for index in range(matched):
            if await locator.nth(index).is_visible():
                return SelectorOutcome(selector=selector, matched=matched, hidden=False)
        return SelectorOutcome(selector=selector, matched=matched, hidden=True)

    loop = asyncio.get_running_loop()
    deadline = loop.time() + max_visible_time / 1000
    for index in range(matched):
        remaining = max((deadline - loop.time()) * 1000, 1)
        try:
            await locator.nth(index).wait_for(state="hidden", timeout=remaining)
        except PlaywrightTimeoutError as e:
            logger.debug("Element still visible at deadline", selector=selector, index=index)
            return SelectorOutcome(selector=selector, matched=matched, hidden=False, error=str(e))

    return SelectorOutcome(selector=selector, matched=matched, hidden=True)


__all__ = [
    "check_basic_content_presence",
    "check_no_critical_loading_indicators",
    "check_no_unhandled_network_failures",
    "check_page_found",
    "check_page_is_loaded",
    "check_transient_visibility",
]
