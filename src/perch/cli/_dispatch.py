"""``perch dispatch`` — match a path against a route and invoke its target.

The route is located by module and attribute or route name; class-based
targets are imported by qualified name. Async targets run on an anyio event loop.
"""

import argparse
import importlib
import sys
from functools import partial

import anyio

from perch.errors import HTTPError
from perch.routing.dispatch import ImportRegistry, dispatch
from perch.routing.route import Route


def resolve_route(import_string: str) -> Route:
    """Find the route named by ``"module:name"``.

    *name* is looked up as a module attribute first, then as the
    :attr:`Route.name` of an entry in the module's ``routes`` sequence.
    A bare ``"module"`` means the attribute ``route``.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        LookupError: If neither lookup finds *name*.
        TypeError: If the attribute holds something other than a Route.
    """
    module_path, _, name = import_string.partition(":")
    module = importlib.import_module(module_path)
    name = name or "route"

    if hasattr(module, name):
        found = getattr(module, name)
        if not isinstance(found, Route):
            msg = f"{module_path}.{name} is a {type(found).__name__}, expected a Route"
            raise TypeError(msg)
        return found

    for candidate in getattr(module, "routes", ()):
        if isinstance(candidate, Route) and candidate.name == name:
            return candidate
    msg = f"No route {name!r} in module {module_path!r}"
    raise LookupError(msg)


def run_dispatch(args: argparse.Namespace) -> None:
    """Invoke the route's target for ``args.path`` and print the result."""
    try:
        route = resolve_route(args.route)
    except (ModuleNotFoundError, LookupError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    registry = ImportRegistry(separator=route.config.namespace_separator)
    try:
        outcome = anyio.run(partial(dispatch, route, args.path, registry))
    except HTTPError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    if outcome is None:
        print(f"No match: {args.path!r} does not satisfy {route.template!r}", file=sys.stderr)
        raise SystemExit(1)
    print(repr(outcome.result))
