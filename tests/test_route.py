"""Tests for wren.routing: pattern compilation, parameters and the route table."""

import pytest

from wren.errors import ConfigurationError
from wren.routing.params import convert_param
from wren.routing.route import Route, RouteKind, compile_pattern, parse_pattern
from wren.routing.table import RouteTable


class TestConvertParam:
    def test_str(self) -> None:
        assert convert_param("hello", "str") == "hello"

    def test_int(self) -> None:
        assert convert_param("42", "int") == 42

    def test_float(self) -> None:
        assert convert_param("3.14", "float") == 3.14

    def test_path(self) -> None:
        assert convert_param("docs/api/v1", "path") == "docs/api/v1"

    def test_unknown_type(self) -> None:
        with pytest.raises(KeyError):
            convert_param("x", "uuid")


class TestParsePattern:
    def test_static_and_params(self) -> None:
        segments = parse_pattern("/users/{id:int}/posts/{slug}")
        assert [s.is_param for s in segments] == [False, True, False, True]
        assert segments[1].param_name == "id"
        assert segments[1].param_type == "int"
        assert segments[3].param_type == "str"

    def test_unknown_converter(self) -> None:
        with pytest.raises(ConfigurationError, match="uuid"):
            parse_pattern("/items/{id:uuid}")

    def test_catch_all_must_be_last(self) -> None:
        with pytest.raises(ConfigurationError):
            compile_pattern("/{rest:path}/edit")


class TestRoute:
    def test_root(self) -> None:
        route = Route.from_pattern("_index", "/")
        assert route.test("/")
        assert not route.test("/about")

    def test_static(self) -> None:
        route = Route.from_pattern("_about", "/about")
        assert route.test("/about")
        assert route.test("/about/")
        assert not route.test("/about/team")
        assert not route.test("/aboutx")
        assert route.exec("/about") == {}

    def test_params_converted(self) -> None:
        route = Route.from_pattern("_post", "/users/{id:int}/{slug}")
        assert route.exec("/users/7/hello") == {"id": 7, "slug": "hello"}
        assert not route.test("/users/seven/hello")

    def test_catch_all(self) -> None:
        route = Route.from_pattern("_docs", "/docs/{rest:path}")
        assert route.exec("/docs/a/b/c") == {"rest": "a/b/c"}

    def test_exec_non_matching(self) -> None:
        assert Route.from_pattern("_a", "/a/{x}").exec("/b/1") == {}

    def test_kind(self) -> None:
        assert Route.from_pattern("_p", "/p").is_page
        endpoint = Route.from_pattern("_e", "/api", "endpoint")
        assert endpoint.kind is RouteKind.ENDPOINT
        assert not endpoint.is_page
        assert endpoint.source == "/api"


class TestRouteTable:
    def test_first_match_wins(self) -> None:
        table = RouteTable(
            [
                Route.from_pattern("_slug", "/{slug}"),
                Route.from_pattern("_about", "/about"),
            ]
        )
        table.compile()
        found = table.find("/about")
        assert found is not None
        assert found.id == "_slug"

    def test_no_match(self) -> None:
        table = RouteTable([Route.from_pattern("_about", "/about")])
        assert table.find("/nope") is None

    def test_registration_order_kept(self) -> None:
        table = RouteTable()
        table.add(Route.from_pattern("_b", "/b"))
        table.add(Route.from_pattern("_a", "/a"))
        assert [r.id for r in table] == ["_b", "_a"]
        assert len(table) == 2

    def test_duplicate_id(self) -> None:
        table = RouteTable([Route.from_pattern("_a", "/a")])
        with pytest.raises(ConfigurationError, match="_a"):
            table.add(Route.from_pattern("_a", "/other"))

    def test_add_after_compile(self) -> None:
        table = RouteTable()
        table.compile()
        assert table.compiled
        with pytest.raises(RuntimeError):
            table.add(Route.from_pattern("_a", "/a"))
