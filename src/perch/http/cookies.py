"""Cookie header parsing and serialization.

``CookieJar`` is an ordinary mutable mapping built from a ``Cookie``
header string and serialized back to the same format. Keys and values
are URL-decoded on the way in and URL-encoded on the way out.
"""

from collections.abc import Iterator, MutableMapping
from urllib.parse import quote, unquote

# Characters ``encodeURIComponent`` leaves alone beyond quote()'s
# always-safe set (letters, digits, ``_.-~``).
_SAFE = "!*'()"


class CookieJar(MutableMapping[str, str | None]):
    """Cookie name -> value mapping, in header order.

    Parsing is a plain left-to-right reduction: split on ``;``, strip,
    split on the first ``=``, decode. Later duplicates overwrite earlier
    ones. A segment without ``=`` is kept with value ``None`` — this
    includes the single empty segment of an empty header, so
    ``CookieJar("")`` holds ``{"": None}``.

    Usage::

        jar = CookieJar("session=abc; theme=dark")
        jar["session"]          # "abc"
        jar["lang"] = "en"
        str(jar)                # "session=abc;theme=dark;lang=en"
    """

    __slots__ = ("_data",)

    def __init__(self, header: str = "") -> None:
        self._data: dict[str, str | None] = {}
        for segment in header.split(";"):
            key, sep, value = segment.strip().partition("=")
            self._data[unquote(key)] = unquote(value) if sep else None

    def __getitem__(self, key: str) -> str | None:
        return self._data[key]

    def __setitem__(self, key: str, value: str | None) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"CookieJar({self._data!r})"

    def __str__(self) -> str:
        return self.to_header_value()

    def to_header_value(self) -> str:
        """Serialize to a ``Cookie`` / ``Set-Cookie`` header value."""
        pairs: list[str] = []
        for key, value in self._data.items():
            name = quote(key, safe=_SAFE)
            if value is None:
                pairs.append(name)
            else:
                pairs.append(f"{name}={quote(value, safe=_SAFE)}")
        return ";".join(pairs)
