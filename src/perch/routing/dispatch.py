"""Dispatch — turn a matched route into a call.

Function routes are called with the route's arguments positionally, in
template order. Method routes are resolved by name through a
:class:`TargetRegistry`, instantiated, and called with keyword
arguments; arguments whose value is ``None`` are dropped first so the
method's own defaults apply.

Handlers can be ``def`` or ``async def``; :func:`invoke` awaits the
result when it is awaitable.

Usage::

    registry = MappingRegistry({"app.controllers.UserController": UserController})
    outcome = await dispatch(route, "/user/42", registry)
    outcome.result, outcome.instance
"""

import importlib
import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from perch.errors import TargetClassNotFound, TargetMethodNotFound
from perch.routing.callback import FunctionCallback
from perch.routing.route import Route

logger = logging.getLogger("perch.dispatch")


class TargetRegistry(Protocol):
    """Host-provided lookup of class-based targets by qualified name."""

    def resolve(self, name: str) -> object | None:
        """Return a ready-to-call instance for *name*, or ``None`` if unknown."""
        ...

    def has_method(self, target: object, name: str) -> bool: ...


class MappingRegistry:
    """Registry backed by a mapping of qualified name -> class or factory."""

    __slots__ = ("_factories",)

    def __init__(self, factories: Mapping[str, Callable[[], object]] | None = None) -> None:
        self._factories: dict[str, Callable[[], object]] = dict(factories or {})

    def register(self, name: str, factory: Callable[[], object]) -> None:
        self._factories[name] = factory

    def resolve(self, name: str) -> object | None:
        factory = self._factories.get(name)
        if factory is None:
            return None
        return factory()

    def has_method(self, target: object, name: str) -> bool:
        return callable(getattr(target, name, None))


class ImportRegistry:
    """Registry that imports ``package.module.ClassName`` on demand.

    Names joined with another separator (e.g. ``App\\Controllers\\Foo``)
    are translated to dotted paths first.
    """

    __slots__ = ("_separator",)

    def __init__(self, separator: str = ".") -> None:
        self._separator = separator

    def resolve(self, name: str) -> object | None:
        dotted = name.replace(self._separator, ".") if self._separator != "." else name
        module_path, _, attr_name = dotted.rpartition(".")
        if not module_path:
            return None
        try:
            module = importlib.import_module(module_path)
        except ModuleNotFoundError as exc:
            # Only a missing target module means "not found"; a broken
            # import inside the target module is a real error.
            missing = exc.name or ""
            if not missing or not (module_path == missing or module_path.startswith(f"{missing}.")):
                raise
            return None
        cls = getattr(module, attr_name, None)
        if not isinstance(cls, type):
            return None
        return cls()

    def has_method(self, target: object, name: str) -> bool:
        return callable(getattr(target, name, None))


@dataclass(frozen=True, slots=True)
class ResolvedTarget:
    """The callable a route dispatches to.

    ``instance`` is the instantiated class for method routes and
    ``None`` for function routes.
    """

    handler: Callable[..., Any]
    name: str
    instance: object | None = None

    @property
    def is_method(self) -> bool:
        return self.instance is not None


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """What :func:`dispatch` hands back to the host."""

    target: ResolvedTarget
    arguments: dict[str, Any]
    result: Any

    @property
    def instance(self) -> object | None:
        return self.target.instance


def qualified_name(route: Route) -> str:
    """Fully qualified class name for a method route.

    ``namespace + separator + class_name``, or the bare class name when
    the route has no effective namespace.
    """
    class_name = route.class_name
    if class_name is None:
        msg = f"Route {route.template!r} does not dispatch to a class"
        raise TypeError(msg)
    namespace = route.namespace
    if not namespace:
        return class_name
    return f"{namespace.rstrip(route.config.namespace_separator)}{route.config.namespace_separator}{class_name}"


def resolve_target(route: Route, registry: TargetRegistry) -> ResolvedTarget:
    """Resolve a route's callback to something callable.

    Raises:
        TargetClassNotFound: The qualified class name is unknown (500).
        TargetMethodNotFound: The class lacks the routed method (404).
    """
    callback = route.callback
    if isinstance(callback, FunctionCallback):
        return ResolvedTarget(handler=callback.func, name=callback.identifier)

    name = qualified_name(route)
    instance = registry.resolve(name)
    if instance is None:
        logger.error("Route %s: class %s not found", route.template, name)
        raise TargetClassNotFound(name)
    if not registry.has_method(instance, callback.method_name):
        logger.debug("Route %s: %s has no method %s", route.template, name, callback.method_name)
        raise TargetMethodNotFound(name, callback.method_name)

    return ResolvedTarget(
        handler=getattr(instance, callback.method_name),
        name=f"{name}{route.config.callback_separator}{callback.method_name}",
        instance=instance,
    )


def build_arguments(values: Mapping[str, Any]) -> dict[str, Any]:
    """Drop arguments that are ``None`` so target defaults apply."""
    return {name: value for name, value in values.items() if value is not None}


async def invoke(target: ResolvedTarget, arguments: Mapping[str, Any]) -> Any:
    """Call a resolved target and await the result if it's awaitable."""
    if target.is_method:
        result = target.handler(**build_arguments(arguments))
    else:
        result = target.handler(*arguments.values())
    if inspect.isawaitable(result):
        result = await result
    return result


async def dispatch(route: Route, path: str, registry: TargetRegistry) -> DispatchResult | None:
    """Match *path*, resolve the route's target and invoke it.

    Returns ``None`` when the path does not match the route.
    """
    matched = route.match(path)
    if matched is None:
        return None

    target = resolve_target(route, registry)
    arguments = route.arguments(matched)
    logger.debug("Dispatching %s to %s with %s", path, target.name, arguments)
    result = await invoke(target, arguments)
    return DispatchResult(target=target, arguments=arguments, result=result)
