# src/sanity_checks/config/selectors.py
"""
Named, Versioned Loading-Indicator Selector Sets

Loading indicators differ between UI libraries, so the selectors the
loading-indicator check looks for are kept in named, versioned sets that
embedding suites can extend or replace without forking this package:

    >>> base = get_selector_set("default-loading-selectors")
    >>> mine = base.extend(".page-loader", version=2)
    >>> register_selector_set(mine)
    >>> get_selector_set("default-loading-selectors").version
    2

Sets are immutable. extend() and without() return new sets.
"""

from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sanity_checks.config.settings import Settings, get_settings
from sanity_checks.core.exceptions import ConfigurationException

DEFAULT_SET_NAME = "default-loading-selectors"


class LoadingSelectorSet(BaseModel):
    """An immutable, ordered collection of loading-indicator CSS selectors."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    version: int = Field(default=1, ge=1)
    spinners: Tuple[str, ...] = Field(default=())
    progress_bars: Tuple[str, ...] = Field(default=())
    extra: Tuple[str, ...] = Field(default=())

    @field_validator("spinners", "progress_bars", "extra")
    @classmethod
    def validate_selectors(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        cleaned = tuple(selector.strip() for selector in v)
        if any(not selector for selector in cleaned):
            raise ValueError("Selectors must be non-empty strings")
        return cleaned

    @property
    def key(self) -> Tuple[str, int]:
        return self.name, self.version

    @property
    def selectors(self) -> Tuple[str, ...]:
        """Spinners, then progress bars, then extras; first occurrence wins."""
        return tuple(dict.fromkeys(self.spinners + self.progress_bars + self.extra))

    def _rebuild(self, **changes) -> "LoadingSelectorSet":
        return type(self)(**{**self.model_dump(), **changes})

    def extend(self, *selectors: str, version: Optional[int] = None) -> "LoadingSelectorSet":
        """Return a copy with additional selectors appended."""
        return self._rebuild(
            extra=tuple(dict.fromkeys(self.extra + tuple(selectors))),
            version=version or self.version,
        )

    def without(self, *selectors: str, version: Optional[int] = None) -> "LoadingSelectorSet":
        """Return a copy with the given selectors removed from every group."""
        removed = set(selectors)
        return self._rebuild(
            spinners=tuple(s for s in self.spinners if s not in removed),
            progress_bars=tuple(s for s in self.progress_bars if s not in removed),
            extra=tuple(s for s in self.extra if s not in removed),
            version=version or self.version,
        )


_registry: Dict[Tuple[str, int], LoadingSelectorSet] = {}


def register_selector_set(selector_set: LoadingSelectorSet, replace: bool = False) -> LoadingSelectorSet:
    """
    Register a selector set under its (name, version).

    Raises:
        ValueError: If the key is taken and replace is False
    """
    if selector_set.key in _registry and not replace:
        raise ValueError(
            f"Selector set {selector_set.name!r} v{selector_set.version} is already registered"
        )
    _registry[selector_set.key] = selector_set
    return selector_set


def unregister_selector_set(name: str, version: int) -> None:
    _registry.pop((name, version), None)


def get_selector_set(name: str = DEFAULT_SET_NAME, version: Optional[int] = None) -> LoadingSelectorSet:
    """
    Look up a registered selector set.

    Args:
        name: Set name
        version: Exact version, or None for the highest registered version

    Raises:
        ConfigurationException: If no matching set is registered
    """
    if version is not None:
        selector_set = _registry.get((name, version))
    else:
        candidates = [s for (set_name, _), s in _registry.items() if set_name == name]
        selector_set = max(candidates, key=lambda s: s.version) if candidates else None

    if selector_set is None:
        raise ConfigurationException(
            f"Unknown loading selector set {name!r}"
            + (f" v{version}" if version is not None else ""),
            setting_name="checks.loading_selector_set",
        ).add_context("registered", sorted(f"{n} v{v}" for n, v in _registry))
    return selector_set


def resolve_loading_selectors(settings: Optional[Settings] = None) -> LoadingSelectorSet:
    """Selector set named in settings, extended with checks.extra_loading_selectors."""
    checks = (settings or get_settings()).checks
    selector_set = get_selector_set(checks.loading_selector_set, checks.loading_selector_version)
    if checks.extra_loading_selectors:
        selector_set = selector_set.extend(*checks.extra_loading_selectors)
    return selector_set


DEFAULT_LOADING_SELECTORS_V1 = register_selector_set(LoadingSelectorSet(
    name=DEFAULT_SET_NAME,
    version=1,
    spinners=(
        ".spinner",
        ".loading-spinner",
        ".loading-indicator",
        ".ant-spin",  # Ant Design
        ".fa-spinner",  # Font Awesome
        ".fas.fa-spinner",
        ".v-progress-circular",  # Vuetify
        ".el-loading-spinner",  # Element UI
    ),
    progress_bars=(
        ".progress-bar",
        "[role='progressbar']",
        ".mat-progress-bar",  # Angular Material
        ".MuiCircularProgress-root",  # Material UI
    ),
))
