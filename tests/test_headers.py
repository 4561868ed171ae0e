"""Tests for perch.http.headers — immutable, case-insensitive Headers."""

import pytest

from perch.http.headers import Headers


def _h(*pairs: tuple[str, str]) -> Headers:
    """Shorthand: build Headers from string pairs."""
    raw = tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)
    return Headers(raw)


class TestHeaders:
    def test_getitem(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["Content-Type"] == "text/html"

    def test_case_insensitive(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            _h(("Accept", "*/*"))["X-Missing"]

    def test_contains(self) -> None:
        h = _h(("Accept", "*/*"))
        assert "accept" in h
        assert "Accept" in h
        assert "x-missing" not in h
        assert 42 not in h  # type: ignore[operator]

    def test_iter_yields_lowercase_unique_names(self) -> None:
        h = _h(("Accept", "a"), ("accept", "b"), ("Host", "x"))
        assert list(h) == ["accept", "host"]
        assert len(h) == 2

    def test_first_value_wins(self) -> None:
        h = _h(("Accept", "a"), ("Accept", "b"))
        assert h["accept"] == "a"
        assert h.get_list("accept") == ["a", "b"]

    def test_get_default(self) -> None:
        h = _h()
        assert h.get("x") is None
        assert h.get("x", "fallback") == "fallback"

    def test_from_mapping(self) -> None:
        h = Headers.from_mapping({"Content-Type": "application/json"})
        assert h["content-type"] == "application/json"
        assert h.raw == ((b"content-type", b"application/json"),)

    def test_immutable(self) -> None:
        h = _h(("Accept", "*/*"))
        with pytest.raises(AttributeError):
            h.anything = 1  # type: ignore[attr-defined]
