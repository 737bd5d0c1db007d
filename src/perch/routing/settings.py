"""Route settings and group-to-route inheritance.

Settings are plain values. A route inherits from its enclosing group by
a single merge at registration time; nothing keeps a pointer back to the
group afterwards.

Merge rules (the route's own values win unless stated):

- ``namespace``   adopted from the parent only when the route has none
- ``methods``     union, own methods first
- ``where``       union, own entries win on key collision
- ``parameters``  union, own entries win on key collision
- ``middleware``  parent middleware runs first, then the route's own

Every rule is idempotent: merging the same parent twice gives the same
result as merging it once.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Protocol

from perch.errors import ConfigurationError

logger = logging.getLogger("perch.routing")

REQUEST_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "OPTIONS", "DELETE")

SETTINGS_KEYS = frozenset({"namespace", "methods", "where", "parameters", "middleware"})


class SettingsSource(Protocol):
    """Anything that can hand its settings down to a child."""

    def export(self) -> dict[str, Any]: ...


type SettingsLike = RouteSettings | Mapping[str, Any] | SettingsSource


def normalize_methods(methods: Iterable[str]) -> tuple[str, ...]:
    """Uppercase and de-duplicate HTTP verbs, keeping first-seen order.

    Raises ``ConfigurationError`` for verbs outside ``REQUEST_METHODS``.
    """
    if isinstance(methods, str):
        methods = (methods,)
    result: list[str] = []
    for method in methods:
        verb = method.upper()
        if verb not in REQUEST_METHODS:
            msg = f"Unknown request method {method!r}. Expected one of: {', '.join(REQUEST_METHODS)}"
            raise ConfigurationError(msg)
        if verb not in result:
            result.append(verb)
    return tuple(result)


def _union(first: Iterable[Any], second: Iterable[Any]) -> tuple[Any, ...]:
    result = list(first)
    result.extend(item for item in second if item not in result)
    return tuple(result)


def _prepend(parent: tuple[Any, ...], own: tuple[Any, ...]) -> tuple[Any, ...]:
    # Own chain already starts with the parent chain: merged before.
    if parent and own[: len(parent)] == parent:
        return own
    return parent + own


@dataclass(frozen=True, slots=True)
class RouteSettings:
    """Configuration a route owns or inherits.

    Empty collections and ``None`` mean "not set". Instances are
    immutable; use :meth:`merge` or :meth:`replace` to derive new ones.
    """

    namespace: str | None = None
    methods: tuple[str, ...] = ()
    where: Mapping[str, str] = field(default_factory=dict)
    parameters: Mapping[str, Any] = field(default_factory=dict)
    middleware: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "methods", normalize_methods(self.methods))
        object.__setattr__(self, "where", MappingProxyType(dict(self.where)))
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))
        middleware = self.middleware
        if isinstance(middleware, str) or callable(middleware):
            middleware = (middleware,)
        object.__setattr__(self, "middleware", tuple(middleware))
        for name, pattern in self.where.items():
            if not isinstance(pattern, str):
                msg = f"Constraint for {name!r} must be a regex string, got {type(pattern).__name__}"
                raise ConfigurationError(msg)

    def __hash__(self) -> int:
        # Parameter values and middleware may be unhashable; keys are enough.
        where = frozenset(self.where.items())
        return hash((self.namespace, self.methods, where, frozenset(self.parameters)))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "RouteSettings":
        """Build settings from an exported mapping.

        Raises ``ConfigurationError`` on keys other than those
        :meth:`export` produces.
        """
        unknown = set(values) - SETTINGS_KEYS
        if unknown:
            msg = f"Unknown route settings: {', '.join(sorted(unknown))}"
            raise ConfigurationError(msg)
        return cls(**values)

    @classmethod
    def coerce(cls, value: SettingsLike | None) -> "RouteSettings":
        """Accept settings, an exported mapping, or anything with ``export()``."""
        if value is None:
            return cls()
        if isinstance(value, RouteSettings):
            return value
        if isinstance(value, Mapping):
            return cls.from_mapping(value)
        return cls.from_mapping(value.export())

    def export(self) -> dict[str, Any]:
        """Only the fields that are set, for handing down to children.

        A parent with no constraints exports no ``where`` key, so it
        contributes nothing when a child merges it.
        """
        values: dict[str, Any] = {}
        if self.namespace is not None:
            values["namespace"] = self.namespace
        if self.methods:
            values["methods"] = self.methods
        if self.where:
            values["where"] = dict(self.where)
        if self.parameters:
            values["parameters"] = dict(self.parameters)
        if self.middleware:
            values["middleware"] = self.middleware
        return values

    def merge(self, inherited: SettingsLike | None) -> "RouteSettings":
        return merge_settings(self, inherited)

    def replace(self, **changes: Any) -> "RouteSettings":
        """Explicit replacement — the only way a collection can shrink."""
        return replace(self, **changes)

    def allows(self, method: str) -> bool:
        """Whether *method* is accepted. No methods set means any method."""
        return not self.methods or method.upper() in self.methods


def merge_settings(own: RouteSettings, inherited: SettingsLike | None) -> RouteSettings:
    """Combine a route's own settings with settings inherited from its group."""
    parent = RouteSettings.coerce(inherited)
    if parent == RouteSettings():
        return own

    merged = RouteSettings(
        namespace=own.namespace if own.namespace is not None else parent.namespace,
        methods=_union(own.methods, parent.methods),
        where={**parent.where, **own.where},
        parameters={**parent.parameters, **own.parameters},
        middleware=_prepend(parent.middleware, own.middleware),
    )
    logger.debug("Merged settings %s <- %s", own.export(), parent.export())
    return merged
