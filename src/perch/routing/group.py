"""Route groups — shared settings handed down to routes.

A group is a settings container, not a route table. Nested groups merge
their parent's settings once, when they are created, and routes created
through a group import the group's exported settings once, when they are
created. Neither keeps a reference to its parent afterwards.

Usage::

    admin = RouteGroup(namespace="app.admin", middleware=("auth",))
    users = admin.group(where={"id": "[0-9]+"})
    route = users.route("/users/{id}", "UserController@show", methods=["GET"])
"""

from collections.abc import Iterable, Mapping
from typing import Any

from perch.config import DEFAULT_CONFIG, RouterConfig
from perch.routing.route import Route
from perch.routing.settings import RouteSettings


class RouteGroup:
    """Settings shared by every route and sub-group created from it."""

    __slots__ = ("_config", "_settings")

    def __init__(
        self,
        settings: RouteSettings | None = None,
        *,
        config: RouterConfig = DEFAULT_CONFIG,
        **values: Any,
    ) -> None:
        own = RouteSettings.from_mapping(values)
        self._settings = own.merge(settings) if settings is not None else own
        self._config = config

    @property
    def settings(self) -> RouteSettings:
        return self._settings

    def export(self) -> dict[str, Any]:
        """Settings this group hands to its children (only those that are set)."""
        return self._settings.export()

    def group(self, **values: Any) -> "RouteGroup":
        """Create a nested group that inherits this group's settings."""
        return RouteGroup(self._settings, config=self._config, **values)

    def route(
        self,
        template: str,
        callback: Any,
        *,
        methods: Iterable[str] = (),
        namespace: str | None = None,
        where: Mapping[str, str] | None = None,
        parameters: Mapping[str, Any] | None = None,
        middleware: Iterable[Any] = (),
        name: str | None = None,
    ) -> Route:
        """Create a route whose settings are merged with this group's."""
        route = Route.define(
            template,
            callback,
            methods=methods,
            namespace=namespace,
            where=where,
            parameters=parameters,
            middleware=middleware,
            name=name,
            config=self._config,
        )
        return route.import_from(self.export())

    def __repr__(self) -> str:
        return f"RouteGroup({self.export()!r})"
