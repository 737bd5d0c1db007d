"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

import re
from dataclasses import dataclass

from perch.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Compiler and dispatch configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(default_namespace="app.controllers", case_sensitive=False)
    """

    # Dispatch
    default_namespace: str | None = None
    namespace_separator: str = "."  # "\\" reproduces backslash-qualified names
    callback_separator: str = "@"

    # Placeholder syntax
    param_open: str = "{"
    param_close: str = "}"
    optional_symbol: str = "?"

    # Matching
    default_parameter_pattern: str = r"[\w-]+"
    escape_literals: bool = True  # False keeps raw regex in literal segments (legacy)
    case_sensitive: bool = True  # False restores case-insensitive matching

    def __post_init__(self) -> None:
        for field_name in ("param_open", "param_close", "optional_symbol"):
            if len(getattr(self, field_name)) != 1:
                msg = f"RouterConfig.{field_name} must be a single character."
                raise ConfigurationError(msg)
        if self.param_open == self.param_close:
            msg = "RouterConfig.param_open and param_close must differ."
            raise ConfigurationError(msg)
        if not self.callback_separator:
            msg = "RouterConfig.callback_separator must not be empty."
            raise ConfigurationError(msg)
        try:
            re.compile(self.default_parameter_pattern)
        except re.error as exc:
            msg = f"Invalid default_parameter_pattern {self.default_parameter_pattern!r}: {exc}"
            raise ConfigurationError(msg) from exc

    @property
    def flags(self) -> re.RegexFlag:
        """Regex flags for compiled templates."""
        if self.case_sensitive:
            return re.DOTALL
        return re.IGNORECASE | re.DOTALL


DEFAULT_CONFIG = RouterConfig()
