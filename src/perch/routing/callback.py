"""Route callback references.

A route dispatches either to a callable or to a method on a class that
is looked up by name when the route is served. The two shapes are kept
as separate types instead of a delimiter-joined string::

    FunctionCallback(show_user)
    MethodCallback("UserController", "show")

``parse_callback`` accepts the authoring forms and normalizes them:

- a callable
- ``"UserController@show"``
- ``("UserController", "show")``
- ``{"controller": "UserController", "method": "show"}``
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from perch.config import DEFAULT_CONFIG, RouterConfig
from perch.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class FunctionCallback:
    """A route served by calling ``func`` with the bound parameters."""

    func: Callable[..., Any]

    @property
    def identifier(self) -> str:
        module = getattr(self.func, "__module__", None) or "<unknown>"
        qualname = getattr(self.func, "__qualname__", None) or type(self.func).__qualname__
        return f"function_{module}.{qualname}"


@dataclass(frozen=True, slots=True)
class MethodCallback:
    """A route served by ``class_name().method_name(...)``."""

    class_name: str
    method_name: str

    def __post_init__(self) -> None:
        if not self.class_name or not self.method_name:
            msg = f"Callback needs both a class and a method, got {self.class_name!r}, {self.method_name!r}"
            raise ConfigurationError(msg)

    @property
    def identifier(self) -> str:
        return f"{self.class_name}@{self.method_name}"


type Callback = FunctionCallback | MethodCallback


def parse_callback(ref: Any, config: RouterConfig = DEFAULT_CONFIG) -> Callback:
    """Normalize an authored callback reference.

    Raises:
        ConfigurationError: If *ref* is none of the accepted forms.
    """
    if isinstance(ref, FunctionCallback | MethodCallback):
        return ref

    if isinstance(ref, str):
        class_name, sep, method_name = ref.partition(config.callback_separator)
        if not sep or config.callback_separator in method_name:
            msg = (
                f"Callback {ref!r} must look like "
                f"'Class{config.callback_separator}method'."
            )
            raise ConfigurationError(msg)
        return MethodCallback(class_name.strip(), method_name.strip())

    if isinstance(ref, tuple) and len(ref) == 2 and all(isinstance(part, str) for part in ref):
        return MethodCallback(*ref)

    if isinstance(ref, Mapping):
        class_name = ref.get("controller")
        method_name = ref.get("method", ref.get("uses"))
        if isinstance(class_name, str) and isinstance(method_name, str):
            return MethodCallback(class_name, method_name)
        msg = f"Callback mapping needs 'controller' and 'method' strings, got {dict(ref)!r}"
        raise ConfigurationError(msg)

    if callable(ref):
        return FunctionCallback(ref)

    msg = f"Unsupported route callback {ref!r} ({type(ref).__name__})"
    raise ConfigurationError(msg)
