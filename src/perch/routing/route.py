"""Route — a template, its callback, and its effective settings.

Routes are frozen values. Registration-time changes (constraints,
middleware, inheriting from a group) return a new Route with its pattern
recompiled, so a Route handed to request workers never changes.
"""

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from perch.config import DEFAULT_CONFIG, RouterConfig
from perch.errors import ConfigurationError
from perch.routing.callback import Callback, MethodCallback, parse_callback
from perch.routing.pattern import CompiledPattern, compile_override, compile_pattern
from perch.routing.settings import RouteSettings, SettingsLike

UUID_PATTERN = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"


@dataclass(frozen=True, slots=True)
class Route:
    """A compiled route.

    Usage::

        route = Route("/user/{id}/edit/{slug?}", "UserController@edit")
        route = route.where_number("id").with_middleware("auth")
        route.match("/user/42/edit")  # {"id": "42"}
    """

    template: str
    callback: Callback | Callable[..., Any] | str
    settings: RouteSettings = field(default_factory=RouteSettings)
    name: str | None = None
    default_namespace: str | None = None
    override: str | None = None
    config: RouterConfig = DEFAULT_CONFIG
    pattern: CompiledPattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "callback", parse_callback(self.callback, self.config))
        object.__setattr__(self, "settings", RouteSettings.coerce(self.settings))
        if self.override is not None:
            pattern = compile_override(self.template, self.override, self.config)
        else:
            pattern = compile_pattern(self.template, self.settings.where, self.config)
        object.__setattr__(self, "pattern", pattern)

    @classmethod
    def define(
        cls,
        template: str,
        callback: Any,
        *,
        methods: Iterable[str] = (),
        namespace: str | None = None,
        where: Mapping[str, str] | None = None,
        parameters: Mapping[str, Any] | None = None,
        middleware: Iterable[Any] = (),
        name: str | None = None,
        config: RouterConfig = DEFAULT_CONFIG,
    ) -> "Route":
        """Build a route from keyword settings instead of a RouteSettings."""
        settings = RouteSettings(
            namespace=namespace,
            methods=tuple(methods),
            where=where or {},
            parameters=parameters or {},
            middleware=tuple(middleware),
        )
        return cls(template, callback, settings=settings, name=name, config=config)

    # -- Matching ----------------------------------------------------------

    def match(self, path: str) -> dict[str, str] | None:
        """Parameters extracted from *path*, or ``None`` when it does not match."""
        return self.pattern.match(path)

    def allows(self, method: str) -> bool:
        return self.settings.allows(method)

    def arguments(self, matched: Mapping[str, str]) -> dict[str, Any]:
        """Values to call the target with, in template order.

        Matched values win over configured parameters. Optional
        parameters that were neither matched nor configured map to
        ``None``. Configured parameters that the template does not name
        follow the template's own.
        """
        bound = self.settings.parameters
        args: dict[str, Any] = {}
        for name in self.pattern.parameter_names:
            args[name] = matched[name] if name in matched else bound.get(name)
        for name, value in bound.items():
            args.setdefault(name, value)
        return args

    # -- Settings ----------------------------------------------------------

    @property
    def namespace(self) -> str | None:
        """Effective namespace: explicit, else the route default, else config default."""
        if self.settings.namespace is not None:
            return self.settings.namespace
        if self.default_namespace is not None:
            return self.default_namespace
        return self.config.default_namespace

    @property
    def methods(self) -> tuple[str, ...]:
        return self.settings.methods

    @property
    def middleware(self) -> tuple[Any, ...]:
        return self.settings.middleware

    def export(self) -> dict[str, Any]:
        return self.settings.export()

    def import_from(self, parent: SettingsLike | None) -> "Route":
        """Merge settings inherited from an enclosing group."""
        return replace(self, settings=self.settings.merge(parent))

    def _with_settings(self, **changes: Any) -> "Route":
        return replace(self, settings=self.settings.replace(**changes))

    def where(self, parameter: str | Mapping[str, str], pattern: str | None = None) -> "Route":
        """Add parameter constraints.

        Usage::

            route.where("id", "[0-9]+")
            route.where({"id": "[0-9]+", "slug": "[a-z-]+"})
        """
        if isinstance(parameter, Mapping):
            added = dict(parameter)
        elif pattern is not None:
            added = {parameter: pattern}
        else:
            msg = f"No constraint given for parameter {parameter!r}"
            raise ConfigurationError(msg)
        return self._with_settings(where={**self.settings.where, **added})

    def where_number(self, parameter: str) -> "Route":
        return self.where(parameter, r"[0-9]+")

    def where_alpha(self, parameter: str) -> "Route":
        return self.where(parameter, r"[a-zA-Z]+")

    def where_alpha_numeric(self, parameter: str) -> "Route":
        return self.where(parameter, r"[a-zA-Z0-9]+")

    def where_uuid(self, parameter: str) -> "Route":
        return self.where(parameter, UUID_PATTERN)

    def where_in(self, parameter: str, values: Iterable[str]) -> "Route":
        """Constrain *parameter* to one of *values*, matched literally."""
        choices = [re.escape(value) for value in values]
        if not choices:
            msg = f"where_in() needs at least one value for {parameter!r}"
            raise ConfigurationError(msg)
        alternatives = "|".join(choices)
        return self.where(parameter, f"(?:{alternatives})")

    def with_methods(self, *methods: str) -> "Route":
        return self._with_settings(methods=self.settings.methods + methods)

    def with_middleware(self, *middleware: Any) -> "Route":
        return self._with_settings(middleware=self.settings.middleware + middleware)

    def with_parameters(self, **parameters: Any) -> "Route":
        return self._with_settings(parameters={**self.settings.parameters, **parameters})

    def with_namespace(self, namespace: str | None) -> "Route":
        return self._with_settings(namespace=namespace)

    def with_default_namespace(self, namespace: str | None) -> "Route":
        return replace(self, default_namespace=namespace)

    def with_match(self, regex: str | None) -> "Route":
        """Replace the compiled template with a whole-route regex."""
        return replace(self, override=regex)

    def named(self, name: str) -> "Route":
        return replace(self, name=name)

    # -- Callback ----------------------------------------------------------

    @property
    def class_name(self) -> str | None:
        if isinstance(self.callback, MethodCallback):
            return self.callback.class_name
        return None

    @property
    def method_name(self) -> str | None:
        if isinstance(self.callback, MethodCallback):
            return self.callback.method_name
        return None

    def with_class(self, class_name: str) -> "Route":
        return replace(self, callback=MethodCallback(class_name, self.method_name or ""))

    def with_method(self, method_name: str) -> "Route":
        return replace(self, callback=MethodCallback(self.class_name or "", method_name))

    @property
    def identifier(self) -> str:
        """Stable name for the callback, e.g. for translation keys or logs."""
        return self.callback.identifier

    def __str__(self) -> str:
        methods = "|".join(self.methods) or "ANY"
        return f"[{methods}] {self.template} -> {self.identifier}"

