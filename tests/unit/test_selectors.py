# tests/unit/test_selectors.py
"""
Unit tests for named, versioned loading-indicator selector sets.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from sanity_checks.config.selectors import (
    DEFAULT_LOADING_SELECTORS_V1,
    DEFAULT_SET_NAME,
    LoadingSelectorSet,
    get_selector_set,
    register_selector_set,
    resolve_loading_selectors,
    unregister_selector_set,
)
from sanity_checks.config.settings import Settings
from sanity_checks.core.exceptions import ConfigurationException


class TestLoadingSelectorSet:

    def test_default_set_is_registered_as_v1(self):
        selector_set = get_selector_set(DEFAULT_SET_NAME, 1)

        assert selector_set is DEFAULT_LOADING_SELECTORS_V1
        assert selector_set.key == ("default-loading-selectors", 1)
        assert selector_set.selectors[0] == ".spinner"
        assert "[role='progressbar']" in selector_set.selectors
        assert ".MuiCircularProgress-root" in selector_set.selectors

    def test_selectors_keep_order_and_drop_duplicates(self):
        selector_set = LoadingSelectorSet(
            name="mine",
            spinners=(".a", ".b"),
            progress_bars=(".b", ".c"),
            extra=(".a", ".d"),
        )

        assert selector_set.selectors == (".a", ".b", ".c", ".d")

    def test_sets_are_immutable(self):
        with pytest.raises(ValidationError):
            DEFAULT_LOADING_SELECTORS_V1.spinners = (".other",)

    @pytest.mark.parametrize("bad", [("",), ("   ",)])
    def test_blank_selectors_rejected(self, bad):
        with pytest.raises(ValidationError):
            LoadingSelectorSet(name="mine", spinners=bad)

    def test_extend_returns_new_set(self):
        extended = DEFAULT_LOADING_SELECTORS_V1.extend(".page-loader", version=2)

        assert extended.version == 2
        assert extended.selectors[-1] == ".page-loader"
        assert ".page-loader" not in DEFAULT_LOADING_SELECTORS_V1.selectors
        assert extended.selectors[:-1] == DEFAULT_LOADING_SELECTORS_V1.selectors

    def test_without_removes_from_every_group(self):
        trimmed = DEFAULT_LOADING_SELECTORS_V1.without(".spinner", ".progress-bar")

        assert trimmed.version == 1
        assert ".spinner" not in trimmed.selectors
        assert ".progress-bar" not in trimmed.selectors
        assert len(trimmed.selectors) == len(DEFAULT_LOADING_SELECTORS_V1.selectors) - 2


class TestSelectorRegistry:

    def test_latest_version_wins_by_default(self):
        register_selector_set(DEFAULT_LOADING_SELECTORS_V1.extend(".page-loader", version=2))

        assert get_selector_set(DEFAULT_SET_NAME).version == 2
        assert get_selector_set(DEFAULT_SET_NAME, 1) is DEFAULT_LOADING_SELECTORS_V1

    def test_duplicate_registration_requires_replace(self):
        replacement = LoadingSelectorSet(name=DEFAULT_SET_NAME, version=1, spinners=(".only",))

        with pytest.raises(ValueError):
            register_selector_set(replacement)

        register_selector_set(replacement, replace=True)
        assert get_selector_set(DEFAULT_SET_NAME, 1).selectors == (".only",)

    def test_unknown_set_raises_configuration_exception(self):
        with pytest.raises(ConfigurationException) as exc_info:
            get_selector_set("no-such-set")

        assert "no-such-set" in str(exc_info.value)
        assert "default-loading-selectors v1" in exc_info.value.context["registered"]

    def test_unregister(self):
        register_selector_set(LoadingSelectorSet(name="temporary", spinners=(".x",)))
        unregister_selector_set("temporary", 1)

        with pytest.raises(ConfigurationException):
            get_selector_set("temporary")


class TestResolveLoadingSelectors:

    def test_defaults(self):
        assert resolve_loading_selectors() == DEFAULT_LOADING_SELECTORS_V1

    def test_settings_choose_set_and_version(self):
        register_selector_set(LoadingSelectorSet(name="admin-ui", version=1, spinners=(".old",)))
        register_selector_set(LoadingSelectorSet(name="admin-ui", version=2, spinners=(".new",)))

        settings = Settings(checks={"loading_selector_set": "admin-ui", "loading_selector_version": 1})
        assert resolve_loading_selectors(settings).selectors == (".old",)

        settings = Settings(checks={"loading_selector_set": "admin-ui"})
        assert resolve_loading_selectors(settings).selectors == (".new",)

    def test_extra_selectors_from_environment(self):
        with patch.dict(os.environ, {"SANITY_CHECKS__EXTRA_LOADING_SELECTORS": ".page-loader, .skeleton"}):
            resolved = resolve_loading_selectors(Settings())

        assert resolved.selectors[-2:] == (".page-loader", ".skeleton")
