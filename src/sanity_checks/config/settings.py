# src/sanity_checks/config/settings.py
"""
Environment-Aware Configuration Management with Pydantic v2

Settings are loaded from (highest priority first):
1. Environment variables prefixed with SANITY_ (nested with "__")
2. .env.local
3. .env
4. Defaults below

Example:
    SANITY_ENVIRONMENT=testing
    SANITY_BROWSER__HEADLESS=true
    SANITY_CHECKS__MAX_VISIBLE_TIME=2000
    SANITY_CHECKS__EXTRA_LOADING_SELECTORS=.my-spinner,.page-loader
"""

import json
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator
)
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Playwright's Request.resource_type values
RESOURCE_TYPES = {
    "document", "stylesheet", "image", "media", "font", "script", "texttrack",
    "xhr", "fetch", "eventsource", "websocket", "manifest", "other",
}


def _split_csv(v: Any) -> Any:
    """Accept "a,b,c" from environment variables as well as real lists."""
    if isinstance(v, str):
        if v.strip().startswith("["):
            return json.loads(v)
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class Environment(str, Enum):
    """Environments with specific behaviors."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class BrowserSettings(BaseModel):
    """Browser used by the session harness and the end-to-end suite."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    name: str = Field(
        default="chromium",
        description="Browser type (chromium, firefox, webkit)"
    )

    headless: bool = Field(default=True, description="Run browser in headless mode")

    timeout: int = Field(
        default=30000,
        ge=1000,
        le=300000,
        description="Launch timeout in milliseconds (1s-5min)"
    )

    slow_mo: int = Field(default=0, ge=0, le=5000)

    viewport_width: int = Field(default=1280, ge=320, le=3840)
    viewport_height: int = Field(default=720, ge=240, le=2160)

    args: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-dev-shm-usage"],
        description="Browser command line arguments"
    )

    @field_validator("name")
    @classmethod
    def validate_browser_name(cls, v: str) -> str:
        """Validate browser name is supported."""
        supported = {"chromium", "firefox", "webkit", "chrome"}
        if v.lower() not in supported:
            raise ValueError(f"Unsupported browser: {v}. Choose from {sorted(supported)}")
        return v.lower()

    @field_validator("args", mode="before")
    @classmethod
    def parse_args(cls, v) -> List[str]:
        return _split_csv(v) or []


class LoggingSettings(BaseModel):
    """Logging configuration consumed by sanity_checks.core.logger."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    format_type: str = Field(default="json", description="Log format (json, console)")

    console_enabled: bool = Field(default=True)
    file_enabled: bool = Field(default=False)
    file_path: Path = Field(default=Path("logs/sanity_checks.log"))

    max_file_size_mb: int = Field(default=10, ge=1, le=1000)
    backup_count: int = Field(default=3, ge=1, le=30)

    correlation_id_enabled: bool = Field(default=True)

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v_upper

    @field_validator("format_type")
    @classmethod
    def validate_format_type(cls, v: str) -> str:
        valid_formats = {"json", "console"}
        if v not in valid_formats:
            raise ValueError(f"Invalid format: {v}")
        return v


class CheckSettings(BaseModel):
    """Defaults applied by the sanity checks when the caller does not override them."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    load_state_timeout: Optional[int] = Field(
        default=None,
        ge=0,
        description="Timeout for load-state waits in ms (None: Playwright default)"
    )

    max_visible_time: int = Field(
        default=0,
        ge=0,
        description="How long loading indicators may stay visible, in ms"
    )

    loading_selector_set: str = Field(default="default-loading-selectors")
    loading_selector_version: Optional[int] = Field(
        default=None,
        ge=1,
        description="Selector set version (None: latest registered)"
    )
    extra_loading_selectors: Annotated[List[str], NoDecode] = Field(default_factory=list)

    network_route_pattern: str = Field(default="**/*.{css,js}")
    critical_resource_types: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["stylesheet", "script"]
    )
    network_observe_time: int = Field(
        default=0,
        ge=0,
        description="Extra time to observe request failures after the load state, in ms"
    )

    @field_validator("extra_loading_selectors", "critical_resource_types", mode="before")
    @classmethod
    def parse_lists(cls, v) -> List[str]:
        return _split_csv(v) or []

    @field_validator("critical_resource_types")
    @classmethod
    def validate_resource_types(cls, v: List[str]) -> List[str]:
        invalid = set(v) - RESOURCE_TYPES
        if invalid:
            raise ValueError(f"Unknown resource types: {sorted(invalid)}")
        return v


class Settings(BaseSettings):
    """
    Main library settings with environment-aware loading.

    The configuration adjusts itself based on SANITY_ENVIRONMENT:
    testing and production always run headless, production never runs
    in debug mode.
    """

    model_config = SettingsConfigDict(
        env_prefix="SANITY_",
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Execution environment"
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    checks: CheckSettings = Field(default_factory=CheckSettings)

    @model_validator(mode="after")
    def configure_environment_defaults(self) -> "Settings":
        """Apply environment-specific configuration adjustments."""

        if self.environment == Environment.PRODUCTION:
            self.browser.headless = True
            self.debug = False

        elif self.environment == Environment.TESTING:
            self.browser.headless = True

        if self.debug:
            self.logging.level = "DEBUG"

        return self

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def get_browser_launch_options(self) -> Dict[str, Any]:
        """Get Playwright browser launch options."""
        return {
            "headless": self.browser.headless,
            "slow_mo": self.browser.slow_mo,
            "timeout": self.browser.timeout,
            "args": list(self.browser.args),
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    The cache can be cleared using get_settings.cache_clear() or
    reload_settings().

    Example:
        >>> settings = get_settings()
        >>> settings.checks.max_visible_time
        0
    """
    return Settings()


def reload_settings() -> Settings:
    """Force reload settings by clearing cache."""
    get_settings.cache_clear()
    return get_settings()
