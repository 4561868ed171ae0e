"""Tests for perch.routing.route — anchored, case-insensitive matching."""

import pytest

from perch.errors import ConfigurationError
from perch.http.request import HTTPRequest
from perch.routing.route import Route, compile_pattern


def _handler(request, *groups):
    return {"text": "ok"}


def _req(method: str, path: str) -> HTTPRequest:
    async def receive():
        return {"type": "http.request", "body": b"", "more_body": False}

    return HTTPRequest.from_asgi({"type": "http", "method": method, "path": path}, receive)


class TestRouteConstruction:
    def test_method_lowercased(self) -> None:
        route = Route.compile("POST", "/items", _handler)
        assert route.method == "post"

    def test_pattern_anchored(self) -> None:
        route = Route.compile("GET", "/items", _handler)
        assert route.pattern.pattern == "^(?:/items)$"

    def test_invalid_pattern(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid route pattern"):
            compile_pattern("/items/([0-9]+")

    def test_frozen(self) -> None:
        route = Route.compile("GET", "/", _handler)
        with pytest.raises(AttributeError):
            route.method = "post"  # type: ignore[misc]

    def test_name_from_handler(self) -> None:
        assert Route.compile("GET", "/", _handler).name == "_handler"


class TestRouteMatch:
    @pytest.mark.parametrize("method", ["post", "POST", "PoSt"])
    def test_method_case_insensitive(self, method: str) -> None:
        route = Route.compile("POST", "/items", _handler)
        assert route.match(_req(method, "/items")) == ()

    def test_method_mismatch(self) -> None:
        route = Route.compile("POST", "/items", _handler)
        assert route.match(_req("GET", "/items")) is None

    def test_capture_groups(self) -> None:
        route = Route.compile("GET", "/items/([0-9]+)/([a-z]+)", _handler)
        assert route.match(_req("GET", "/items/12/red")) == ("12", "red")

    def test_named_groups_are_positional(self) -> None:
        route = Route.compile("GET", "/users/(?P<uid>[0-9]+)", _handler)
        assert route.match(_req("GET", "/users/7")) == ("7",)

    def test_unmatched_optional_group_is_none(self) -> None:
        route = Route.compile("GET", "/files(/[a-z]+)?", _handler)
        assert route.match(_req("GET", "/files")) == (None,)

    @pytest.mark.parametrize("path", ["/items/12/extra", "/prefix/items/12", "/items/"])
    def test_partial_paths_never_match(self, path: str) -> None:
        route = Route.compile("GET", "/items/([0-9]+)", _handler)
        assert route.match(_req("GET", path)) is None

    def test_alternation_is_anchored_as_a_whole(self) -> None:
        route = Route.compile("GET", "/a|/b", _handler)
        assert route.match(_req("GET", "/a")) == ()
        assert route.match(_req("GET", "/bxyz")) is None
        assert route.match(_req("GET", "/xyz/a")) is None

    def test_trailing_newline_does_not_match(self) -> None:
        route = Route.compile("GET", "/items", _handler)
        assert route.match(_req("GET", "/items\n")) is None
