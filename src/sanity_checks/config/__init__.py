"""
Configuration Package
"""

from .selectors import (
    DEFAULT_LOADING_SELECTORS_V1,
    DEFAULT_SET_NAME,
    LoadingSelectorSet,
    get_selector_set,
    register_selector_set,
    resolve_loading_selectors,
    unregister_selector_set,
)
from .settings import (
    BrowserSettings,
    CheckSettings,
    Environment,
    LoggingSettings,
    Settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "BrowserSettings",
    "CheckSettings",
    "DEFAULT_LOADING_SELECTORS_V1",
    "DEFAULT_SET_NAME",
    "Environment",
    "LoadingSelectorSet",
    "LoggingSettings",
    "Settings",
    "get_selector_set",
    "get_settings",
    "register_selector_set",
    "reload_settings",
    "resolve_loading_selectors",
    "unregister_selector_set",
]
