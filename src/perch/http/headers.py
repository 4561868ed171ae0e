"""Immutable, case-insensitive request headers.

Built from the raw ASGI ``(name, value)`` byte pairs. Names are
lowercased once at construction; values keep their original order.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``headers[name]`` returns the first value sent for *name*;
    ``get_list`` returns all of them (e.g. repeated ``Accept`` lines).
    """

    __slots__ = ("_raw", "_values")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        values: dict[str, list[str]] = {}
        for name, value in raw:
            values.setdefault(name.decode("latin-1").lower(), []).append(
                value.decode("latin-1")
            )
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_values", values)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Headers are immutable"
        raise AttributeError(msg)

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str]) -> Headers:
        """Build headers from a plain ``str -> str`` mapping."""
        return cls(
            tuple(
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in headers.items()
            )
        )

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._values.get(key.lower())
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return every value sent for *key*."""
        return list(self._values.get(key.lower(), []))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """The raw ASGI header byte pairs."""
        return self._raw
