"""
Sanity Checks

Reusable Playwright assertions for "is this page basically working?":
the document finished loading, the navigation returned 200, the body
has content, loading indicators went away and no stylesheet or script
failed to load.

Example:
    >>> from sanity_checks import check_page_found, check_page_is_loaded
    >>> response = await page.goto(url)
    >>> await check_page_found(page, response)
    >>> await check_page_is_loaded(page)
"""

from sanity_checks.checks import (
    check_basic_content_presence,
    check_no_critical_loading_indicators,
    check_no_unhandled_network_failures,
    check_page_found,
    check_page_is_loaded,
    check_transient_visibility,
)
from sanity_checks.config import (
    DEFAULT_LOADING_SELECTORS_V1,
    LoadingSelectorSet,
    Settings,
    get_selector_set,
    get_settings,
    register_selector_set,
    reload_settings,
    resolve_loading_selectors,
)
from sanity_checks.core.exceptions import (
    AutomationException,
    CheckAssertionException,
    ConfigurationException,
    LoadingIndicatorException,
    NetworkFailureException,
    ResponseStatusException,
)
from sanity_checks.models import FailedRequest, SelectorOutcome
from sanity_checks.utils import NetworkFailureMonitor, SoftAssertions, watch_network_failures

__version__ = "1.0.0"

__all__ = [
    "AutomationException",
    "CheckAssertionException",
    "ConfigurationException",
    "DEFAULT_LOADING_SELECTORS_V1",
    "FailedRequest",
    "LoadingIndicatorException",
    "LoadingSelectorSet",
    "NetworkFailureException",
    "NetworkFailureMonitor",
    "ResponseStatusException",
    "SelectorOutcome",
    "Settings",
    "SoftAssertions",
    "check_basic_content_presence",
    "check_no_critical_loading_indicators",
    "check_no_unhandled_network_failures",
    "check_page_found",
    "check_page_is_loaded",
    "check_transient_visibility",
    "get_selector_set",
    "get_settings",
    "register_selector_set",
    "reload_settings",
    "resolve_loading_selectors",
    "watch_network_failures",
]
