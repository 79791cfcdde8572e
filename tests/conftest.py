# tests/conftest.py
"""
Shared fixtures: isolated settings/logging state and Playwright page doubles.
"""

import asyncio
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from sanity_checks.config import selectors as selector_registry
from sanity_checks.config.settings import get_settings
from sanity_checks.core.logger import reset_logging


class FakeElement:
    """
    One element matched by a locator.

    hide_after: ms until the element becomes hidden; 0 means hidden from
    the start, None means it never hides.
    """

    def __init__(self, hide_after: Optional[int] = None):
        self.hide_after = hide_after

    async def is_visible(self) -> bool:
        return self.hide_after != 0

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        assert state == "hidden"
        if self.hide_after is not None and self.hide_after <= timeout:
            await asyncio.sleep(self.hide_after / 1000)
            return
        await asyncio.sleep(timeout / 1000)
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")


class FakeLocator:
    def __init__(self, elements: List[FakeElement]):
        self.elements = elements

    async def count(self) -> int:
        return len(self.elements)

    def nth(self, index: int) -> FakeElement:
        return self.elements[index]


def make_request(resource_type: str, url: str = "http://sanity.test/app.js",
                 method: str = "GET", failure: str = "net::ERR_FAILED") -> MagicMock:
    request = MagicMock()
    request.url = url
    request.method = method
    request.resource_type = resource_type
    request.failure = failure
    return request


def make_response(ok: bool = True, status: int = 200, url: str = "http://sanity.test/") -> MagicMock:
    response = MagicMock()
    response.ok = ok
    response.status = status
    response.url = url
    return response


def fire_request_failures(page: MagicMock, *requests) -> None:
    """Make the next load-state wait deliver the given failed requests."""

    async def wait_for_load_state(state: str = "load", **kwargs) -> None:
        event, handler = page.on.call_args[0]
        assert event == "requestfailed"
        for request in requests:
            handler(request)

    page.wait_for_load_state.side_effect = wait_for_load_state


@pytest.fixture(autouse=True)
def isolated_state():
    """Fresh settings, logging and selector registry for every test."""
    get_settings.cache_clear()
    reset_logging()
    registry = dict(selector_registry._registry)
    yield
    selector_registry._registry.clear()
    selector_registry._registry.update(registry)
    get_settings.cache_clear()
    reset_logging()


@pytest.fixture
def locators() -> Dict[str, FakeLocator]:
    """Selector -> FakeLocator; unknown selectors match nothing."""
    return {}


@pytest.fixture
def page(locators) -> MagicMock:
    page = MagicMock()
    page.url = "http://sanity.test/"
    page.wait_for_load_state = AsyncMock()
    page.evaluate = AsyncMock(return_value="complete")
    page.eval_on_selector = AsyncMock(return_value="<div>Hello</div>")
    page.route = AsyncMock()
    page.unroute = AsyncMock()
    page.on = MagicMock()
    page.remove_listener = MagicMock()
    page.locator = MagicMock(side_effect=lambda selector: locators.get(selector, FakeLocator([])))
    return page


@pytest.fixture
def add_elements(locators):
    """add_elements(".spinner", 0, None) -> two matches: hidden, never hides."""

    def _add(selector: str, *hide_after: Optional[int]) -> FakeLocator:
        locator = FakeLocator([FakeElement(value) for value in hide_after])
        locators[selector] = locator
        return locator

    return _add


@pytest.fixture
def failed_request():
    return make_request


@pytest.fixture
def response_for():
    return make_response


@pytest.fixture
def deliver_failures(page):
    def _deliver(*requests) -> None:
        fire_request_failures(page, *requests)

    return _deliver
