"""Immutable query string parameters."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Immutable view over a URL query string.

    Values are percent-decoded as UTF-8. ``params[key]`` returns the first
    value for a key; ``get_list`` returns all of them in order.
    """

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: bytes | str = b"") -> None:
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        data: dict[str, list[str]] = {}
        for key, value in parse_qsl(query_string, keep_blank_values=True):
            data.setdefault(key, []).append(value)
        object.__setattr__(self, "_raw", query_string)
        object.__setattr__(self, "_data", data)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "QueryParams are immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    def __str__(self) -> str:
        return self._raw

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))
