"""Tests for perch.routing.route — Route value, fluent settings, arguments."""

import pytest

from perch.config import RouterConfig
from perch.errors import ConfigurationError
from perch.routing.callback import FunctionCallback, MethodCallback
from perch.routing.route import Route
from perch.routing.settings import RouteSettings


def _handler(id: str = "", slug: str | None = None) -> str:
    return "ok"


class TestRoute:
    def test_creation(self) -> None:
        route = Route("/user/{id}", _handler)
        assert route.template == "/user/{id}"
        assert route.callback == FunctionCallback(_handler)
        assert route.settings == RouteSettings()
        assert route.name is None

    def test_string_callback_parsed(self) -> None:
        route = Route("/user/{id}", "UserController@show")
        assert route.callback == MethodCallback("UserController", "show")

    def test_settings_mapping_accepted(self) -> None:
        route = Route("/x", _handler, settings={"methods": ("get",)})  # type: ignore[arg-type]
        assert route.methods == ("GET",)

    def test_frozen(self) -> None:
        route = Route("/", _handler)
        with pytest.raises(AttributeError):
            route.template = "/other"  # type: ignore[misc]

    def test_invalid_template(self) -> None:
        with pytest.raises(ConfigurationError):
            Route("/x/{a}/{a}", _handler)

    def test_define(self) -> None:
        route = Route.define(
            "/user/{id}",
            _handler,
            methods=["get"],
            namespace="app",
            where={"id": "[0-9]+"},
            parameters={"lang": "en"},
            middleware=["auth"],
            name="user.show",
        )
        assert route.methods == ("GET",)
        assert route.namespace == "app"
        assert route.middleware == ("auth",)
        assert route.name == "user.show"
        assert route.match("/user/abc") is None

    def test_str(self) -> None:
        route = Route("/user/{id}", "UserController@show").with_methods("GET", "POST")
        assert str(route) == "[GET|POST] /user/{id} -> UserController@show"

    def test_str_any_method(self) -> None:
        assert str(Route("/", "Home@index")) == "[ANY] / -> Home@index"


class TestMatching:
    def test_match(self) -> None:
        assert Route("/user/{id}", _handler).match("/user/5") == {"id": "5"}

    def test_no_match(self) -> None:
        assert Route("/user/{id}", _handler).match("/post/5") is None

    def test_allows(self) -> None:
        route = Route("/x", _handler).with_methods("get")
        assert route.allows("GET")
        assert not route.allows("DELETE")

    def test_config_applies(self) -> None:
        route = Route("/Users", _handler, config=RouterConfig(case_sensitive=False))
        assert route.match("/users") == {}


class TestConstraints:
    def test_where_recompiles(self) -> None:
        route = Route("/item/{id}", _handler)
        assert route.match("/item/abc") == {"id": "abc"}
        constrained = route.where("id", "[0-9]+")
        assert constrained.match("/item/abc") is None
        assert constrained.match("/item/7") == {"id": "7"}

    def test_where_returns_new_route(self) -> None:
        route = Route("/item/{id}", _handler)
        route.where_number("id")
        assert route.settings.where == {}

    def test_where_mapping(self) -> None:
        route = Route("/{id}/{slug}", _handler).where({"id": "[0-9]+", "slug": "[a-z]+"})
        assert route.settings.where == {"id": "[0-9]+", "slug": "[a-z]+"}

    def test_where_without_pattern_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="No constraint given for parameter 'id'"):
            Route("/{id}", _handler).where("id")

    def test_where_number(self) -> None:
        route = Route("/item/{id}", _handler).where_number("id")
        assert route.match("/item/12") == {"id": "12"}
        assert route.match("/item/x") is None

    def test_where_alpha(self) -> None:
        route = Route("/tag/{name}", _handler).where_alpha("name")
        assert route.match("/tag/python") == {"name": "python"}
        assert route.match("/tag/42") is None

    def test_where_alpha_numeric(self) -> None:
        route = Route("/tag/{name}", _handler).where_alpha_numeric("name")
        assert route.match("/tag/py3") == {"name": "py3"}
        assert route.match("/tag/-") is None

    def test_where_uuid(self) -> None:
        route = Route("/doc/{id}", _handler).where_uuid("id")
        uuid = "123e4567-e89b-12d3-a456-426614174000"
        assert route.match(f"/doc/{uuid}") == {"id": uuid}
        assert route.match("/doc/123") is None

    def test_where_in_escapes_values(self) -> None:
        route = Route("/feed/{fmt}", _handler).where_in("fmt", ["rss.xml", "atom"])
        assert route.match("/feed/rss.xml") == {"fmt": "rss.xml"}
        assert route.match("/feed/atom") == {"fmt": "atom"}
        assert route.match("/feed/rssxxml") is None

    def test_where_in_requires_values(self) -> None:
        with pytest.raises(ConfigurationError, match="at least one value"):
            Route("/a/{x}", _handler).where_in("x", [])

    def test_where_in_generator(self) -> None:
        route = Route("/a/{x}", _handler).where_in("x", (v for v in ("on", "off")))
        assert route.match("/a/off") == {"x": "off"}
        assert route.match("/a") is None

    def test_with_match_override(self) -> None:
        route = Route("/legacy", _handler).with_match(r"^/old/(?P<page>\d+)$")
        assert route.match("/old/4") == {"page": "4"}
        assert route.match("/legacy") is None
        assert route.with_match(None).match("/legacy") == {}


class TestSettings:
    def test_settings_read_only(self) -> None:
        route = Route("/item/{id}", _handler).where("id", "[0-9]+").with_parameters(page=1)
        with pytest.raises(TypeError):
            route.settings.where["id"] = "[a-z]+"  # type: ignore[index]
        with pytest.raises(TypeError):
            route.settings.parameters["page"] = 2  # type: ignore[index]
        assert route.match("/item/abc") is None

    def test_hashable(self) -> None:
        def build() -> Route:
            return Route("/item/{id}", _handler).where_number("id").with_parameters(tags=[1])

        route = build()
        assert hash(route) == hash(build())
        assert len({route, route.named("item")}) == 2

    def test_namespace_explicit(self) -> None:
        route = Route("/", "Home@index", default_namespace="app.default").with_namespace("app.x")
        assert route.namespace == "app.x"

    def test_namespace_falls_back_to_default(self) -> None:
        route = Route("/", "Home@index").with_default_namespace("app.default")
        assert route.namespace == "app.default"

    def test_namespace_falls_back_to_config(self) -> None:
        route = Route("/", "Home@index", config=RouterConfig(default_namespace="app.cfg"))
        assert route.namespace == "app.cfg"

    def test_namespace_unset(self) -> None:
        assert Route("/", "Home@index").namespace is None

    def test_with_middleware_appends(self) -> None:
        route = Route("/", _handler).with_middleware("a").with_middleware("b", "c")
        assert route.middleware == ("a", "b", "c")

    def test_with_parameters(self) -> None:
        route = Route("/", _handler).with_parameters(lang="en").with_parameters(page=2)
        assert route.settings.parameters == {"lang": "en", "page": 2}

    def test_export(self) -> None:
        route = Route("/", _handler).with_namespace("app").with_middleware("auth")
        assert route.export() == {"namespace": "app", "middleware": ("auth",)}

    def test_import_from(self) -> None:
        route = Route("/user/{id}", _handler).with_middleware("C")
        merged = route.import_from({"middleware": ("A", "B"), "where": {"id": "[0-9]+"}})
        assert merged.middleware == ("A", "B", "C")
        assert merged.match("/user/x") is None
        assert route.middleware == ("C",)

    def test_import_from_empty(self) -> None:
        route = Route("/user/{id}", _handler).with_middleware("C")
        assert route.import_from({}) == route

    def test_named(self) -> None:
        assert Route("/", _handler).named("home").name == "home"


class TestArguments:
    def test_template_order(self) -> None:
        route = Route("/post/{id}/{slug?}", _handler)
        assert list(route.arguments({"slug": "intro", "id": "1"})) == ["id", "slug"]

    def test_missing_optional_is_none(self) -> None:
        route = Route("/post/{id}/{slug?}", _handler)
        assert route.arguments({"id": "1"}) == {"id": "1", "slug": None}

    def test_configured_parameter_fills_gap(self) -> None:
        route = Route("/post/{id}/{slug?}", _handler).with_parameters(slug="intro")
        assert route.arguments({"id": "1"}) == {"id": "1", "slug": "intro"}

    def test_matched_value_wins(self) -> None:
        route = Route("/post/{id}/{slug?}", _handler).with_parameters(slug="intro")
        assert route.arguments({"id": "1", "slug": "outro"})["slug"] == "outro"

    def test_extra_parameters_follow(self) -> None:
        route = Route("/post/{id}", _handler).with_parameters(lang="en")
        assert list(route.arguments({"id": "1"}).items()) == [("id", "1"), ("lang", "en")]


class TestCallbackAccessors:
    def test_method_route(self) -> None:
        route = Route("/", "UserController@show")
        assert route.class_name == "UserController"
        assert route.method_name == "show"
        assert route.identifier == "UserController@show"

    def test_function_route(self) -> None:
        route = Route("/", _handler)
        assert route.class_name is None
        assert route.method_name is None
        assert route.identifier.startswith("function_")

    def test_with_class(self) -> None:
        route = Route("/", "UserController@show").with_class("AdminController")
        assert route.callback == MethodCallback("AdminController", "show")

    def test_with_method(self) -> None:
        route = Route("/", "UserController@show").with_method("edit")
        assert route.callback == MethodCallback("UserController", "edit")

    def test_with_method_on_function_route(self) -> None:
        with pytest.raises(ConfigurationError):
            Route("/", _handler).with_method("edit")
