# src/sanity_checks/core/browser_manager.py
"""
Browser Session Harness

A small, settings-driven wrapper around async Playwright for suites that
need a browser to run the checks against (this package's own end-to-end
tests among them). The checks themselves never launch browsers: they
only borrow pages.

Example:
    >>> async with async_browser_session() as session:
    ...     page = await session.new_page()
    ...     response = await page.goto("http://localhost:8080")
    ...     await check_page_found(page, response)
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional
from uuid import uuid4

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright
)

from sanity_checks.config.settings import Settings, get_settings
from sanity_checks.core.exceptions import BrowserLaunchException
from sanity_checks.core.logger import get_logger, get_performance_timer


@dataclass
class BrowserSession:
    """An open browser plus the contexts created through it."""

    session_id: str
    browser_name: str
    browser: Browser
    factory: "BrowserFactory"
    contexts: List[BrowserContext] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    async def new_page(self, **context_overrides) -> Page:
        """Open a page in a fresh context configured from settings."""
        context = await self.browser.new_context(
            **self.factory.create_context_options(**context_overrides)
        )
        self.contexts.append(context)
        return await context.new_page()

    async def close(self) -> None:
        try:
            for context in self.contexts:
                await context.close()
        finally:
            self.contexts.clear()
            await self.browser.close()


class BrowserFactory:
    """Builds Playwright launch and context options from BrowserSettings."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.logger = get_logger("browser_factory")

    def create_launch_options(self, **overrides) -> Dict[str, Any]:
        """
        Create browser launch options from configuration.

        Args:
            **overrides: Override specific options

        Returns:
            Dictionary of launch options for BrowserType.launch()
        """
        options = self.settings.get_browser_launch_options()
        options.update(overrides)

        self.logger.debug(
            "Created launch options",
            browser=self.settings.browser.name,
            headless=options["headless"],
            args_count=len(options["args"])
        )
        return options

    def create_context_options(self, **overrides) -> Dict[str, Any]:
        """Create browser context options (viewport) from configuration."""
        options: Dict[str, Any] = {
            "viewport": {
                "width": self.settings.browser.viewport_width,
                "height": self.settings.browser.viewport_height,
            },
        }
        options.update(overrides)
        return options


class BrowserManager:
    """Owns the Playwright driver and the browser sessions launched through it."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.factory = BrowserFactory(self.settings)
        self.logger = get_logger("browser_manager")
        self._sessions: Dict[str, BrowserSession] = {}

    @asynccontextmanager
    async def async_browser_session(
            self,
            browser_name: Optional[str] = None,
            **launch_options
    ) -> AsyncIterator[BrowserSession]:
        """
        Launch a browser for the duration of the block.

        Args:
            browser_name: Browser type (uses config default if None)
            **launch_options: Override launch options

        Raises:
            BrowserLaunchException: If Playwright cannot launch the browser
        """
        browser_name = browser_name or self.settings.browser.name

        async with async_playwright() as playwright:
            session = await self._launch(playwright, browser_name, **launch_options)
            try:
                yield session
            finally:
                self._sessions.pop(session.session_id, None)
                await session.close()
                self.logger.info("Browser session closed", session_id=session.session_id)

    async def _launch(self, playwright: Playwright, browser_name: str, **launch_options) -> BrowserSession:
        if browser_name in ("chromium", "chrome"):
            launcher = playwright.chromium
            if browser_name == "chrome":
                launch_options.setdefault("channel", "chrome")
        elif browser_name == "firefox":
            launcher = playwright.firefox
        elif browser_name == "webkit":
            launcher = playwright.webkit
        else:
            raise BrowserLaunchException(f"Unsupported browser: {browser_name}", browser_name=browser_name)

        options = self.factory.create_launch_options(**launch_options)

        with get_performance_timer("launch_browser") as timer:
            timer.add_metric("browser_name", browser_name)
            try:
                browser = await launcher.launch(**options)
            except Exception as e:
                raise BrowserLaunchException(
                    f"Browser launch failed: {e}",
                    browser_name=browser_name,
                    original_exception=e
                ) from e

        session = BrowserSession(
            session_id=str(uuid4()),
            browser_name=browser_name,
            browser=browser,
            factory=self.factory,
        )
        self._sessions[session.session_id] = session

        self.logger.info("Browser launched", session_id=session.session_id, browser_name=browser_name)
        return session

    def get_session_stats(self) -> Dict[str, Any]:
        browser_counts: Dict[str, int] = {}
        for session in self._sessions.values():
            browser_counts[session.browser_name] = browser_counts.get(session.browser_name, 0) + 1
        return {"total_sessions": len(self._sessions), "browser_counts": browser_counts}


_browser_manager: Optional[BrowserManager] = None


def get_browser_manager(settings: Optional[Settings] = None) -> BrowserManager:
    """Get the global browser manager, creating it on first use."""
    global _browser_manager

    if _browser_manager is None or (settings is not None and settings is not _browser_manager.settings):
        _browser_manager = BrowserManager(settings)

    return _browser_manager


@asynccontextmanager
async def async_browser_session(browser_name: Optional[str] = None, **launch_options) -> AsyncIterator[BrowserSession]:
    """Convenience wrapper around get_browser_manager().async_browser_session()."""
    manager = get_browser_manager()
    async with manager.async_browser_session(browser_name, **launch_options) as session:
        yield session
