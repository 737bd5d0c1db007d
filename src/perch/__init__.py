"""Perch — route templates compiled to matchers, with group settings and dispatch.

Turns ``/user/{id}/edit/{slug?}`` into an anchored matcher, merges
settings inherited from route groups, and resolves a matched route to a
function or a ``Class@method`` target.

Basic usage::

    from perch import Route

    route = Route("/user/{id}", show_user).where_number("id")
    route.match("/user/42")   # {"id": "42"}
    route.match("/user/abc")  # None

Groups and dispatch::

    from perch import MappingRegistry, RouteGroup, dispatch

    admin = RouteGroup(namespace="app.admin", middleware=("auth",))
    route = admin.route("/users/{id}", "UserController@show")
    outcome = await dispatch(route, "/users/7", MappingRegistry({...}))
"""

__version__ = "0.1.0"
__all__ = [
    "CompiledPattern",
    "ConfigurationError",
    "HTTPError",
    "MappingRegistry",
    "MissingRequiredParameter",
    "NotFound",
    "PerchError",
    "Route",
    "RouteGroup",
    "RouteSettings",
    "RouterConfig",
    "TargetClassNotFound",
    "TargetMethodNotFound",
    "compile_pattern",
    "dispatch",
    "match_pattern",
    "merge_settings",
]

# Public name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "CompiledPattern": "perch.routing.pattern",
    "compile_pattern": "perch.routing.pattern",
    "match_pattern": "perch.routing.pattern",
    "Route": "perch.routing.route",
    "RouteGroup": "perch.routing.group",
    "RouteSettings": "perch.routing.settings",
    "merge_settings": "perch.routing.settings",
    "MappingRegistry": "perch.routing.dispatch",
    "dispatch": "perch.routing.dispatch",
    "RouterConfig": "perch.config",
    "ConfigurationError": "perch.errors",
    "HTTPError": "perch.errors",
    "MissingRequiredParameter": "perch.errors",
    "NotFound": "perch.errors",
    "PerchError": "perch.errors",
    "TargetClassNotFound": "perch.errors",
    "TargetMethodNotFound": "perch.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_path), name)
