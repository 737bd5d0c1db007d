"""Tests for perch.config — RouterConfig frozen dataclass."""

import re

import pytest

from perch.config import DEFAULT_CONFIG, RouterConfig
from perch.errors import ConfigurationError


class TestRouterConfig:
    def test_defaults(self) -> None:
        cfg = RouterConfig()

        assert cfg.default_namespace is None
        assert cfg.namespace_separator == "."
        assert cfg.callback_separator == "@"
        assert cfg.param_open == "{"
        assert cfg.param_close == "}"
        assert cfg.optional_symbol == "?"
        assert cfg.default_parameter_pattern == r"[\w-]+"
        assert cfg.escape_literals is True
        assert cfg.case_sensitive is True

    def test_default_instance(self) -> None:
        assert DEFAULT_CONFIG == RouterConfig()

    def test_override(self) -> None:
        cfg = RouterConfig(default_namespace="App\\Controllers", namespace_separator="\\")

        assert cfg.default_namespace == "App\\Controllers"
        assert cfg.namespace_separator == "\\"

    def test_frozen(self) -> None:
        cfg = RouterConfig()

        with pytest.raises(AttributeError):
            cfg.case_sensitive = False  # type: ignore[misc]

    def test_flags(self) -> None:
        assert RouterConfig().flags == re.DOTALL
        assert RouterConfig(case_sensitive=False).flags == re.IGNORECASE | re.DOTALL


class TestRouterConfigValidation:
    def test_multi_character_modifier(self) -> None:
        with pytest.raises(ConfigurationError, match="param_open"):
            RouterConfig(param_open="{{")

    def test_empty_optional_symbol(self) -> None:
        with pytest.raises(ConfigurationError, match="optional_symbol"):
            RouterConfig(optional_symbol="")

    def test_identical_modifiers(self) -> None:
        with pytest.raises(ConfigurationError, match="must differ"):
            RouterConfig(param_open="|", param_close="|")

    def test_empty_callback_separator(self) -> None:
        with pytest.raises(ConfigurationError, match="callback_separator"):
            RouterConfig(callback_separator="")

    def test_invalid_default_pattern(self) -> None:
        with pytest.raises(ConfigurationError, match="default_parameter_pattern"):
            RouterConfig(default_parameter_pattern="[a-")
