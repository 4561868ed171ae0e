"""Response descriptors and the transport-level response.

Handlers return an ``HTTPResponse`` descriptor: a status, optional
headers, and exactly one body variant (``JSON``, ``Text``, ``HTML``,
``Stream`` or ``Empty``). The application encodes it into a
``Response``, which is what gets sent over ASGI.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class JSON:
    """A body serialized with ``json.dumps``."""

    value: Any


@dataclass(frozen=True, slots=True)
class Text:
    """A plain-text body."""

    value: str


@dataclass(frozen=True, slots=True)
class HTML:
    """An HTML body."""

    value: str


@dataclass(frozen=True, slots=True)
class Stream:
    """A body sent chunk by chunk. No content type is implied."""

    chunks: Iterable[str | bytes] | AsyncIterable[str | bytes]


@dataclass(frozen=True, slots=True)
class Empty:
    """No body."""


Body: TypeAlias = JSON | Text | HTML | Stream | Empty

# Keys a mapping descriptor may use for its body, in precedence order
BODY_KEYS: dict[str, type[JSON] | type[Text] | type[HTML] | type[Stream]] = {
    "json": JSON,
    "text": Text,
    "html": HTML,
    "stream": Stream,
}


@dataclass(frozen=True, slots=True)
class HTTPResponse:
    """What a handler returns: status, headers and one body variant.

    Use the constructors for the common cases::

        HTTPResponse.json({"id": 7}, status=201)
        HTTPResponse.text("pong")
        HTTPResponse.html("<h1>Hi</h1>", headers={"cache-control": "no-store"})
        HTTPResponse.stream(chunks(), headers={"content-type": "text/csv"})

    Header values may be any object; they are stringified on encoding,
    so a ``CookieJar`` can be passed straight as ``set-cookie``.
    """

    body: Body = field(default_factory=Empty)
    status: int = 200
    headers: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def json(
        cls, value: Any, *, status: int = 200, headers: Mapping[str, Any] | None = None
    ) -> HTTPResponse:
        return cls(JSON(value), status, headers or {})

    @classmethod
    def text(
        cls, value: str, *, status: int = 200, headers: Mapping[str, Any] | None = None
    ) -> HTTPResponse:
        return cls(Text(value), status, headers or {})

    @classmethod
    def html(
        cls, value: str, *, status: int = 200, headers: Mapping[str, Any] | None = None
    ) -> HTTPResponse:
        return cls(HTML(value), status, headers or {})

    @classmethod
    def stream(
        cls,
        chunks: Iterable[str | bytes] | AsyncIterable[str | bytes],
        *,
        status: int = 200,
        headers: Mapping[str, Any] | None = None,
    ) -> HTTPResponse:
        return cls(Stream(chunks), status, headers or {})

    @classmethod
    def empty(
        cls, *, status: int = 200, headers: Mapping[str, Any] | None = None
    ) -> HTTPResponse:
        return cls(Empty(), status, headers or {})

    @classmethod
    def from_mapping(cls, descriptor: Mapping[str, Any]) -> HTTPResponse:
        """Build a descriptor from a plain dict such as ``{"text": "hi"}``.

        Recognized keys are ``status``, ``headers`` and at most one of
        ``json``, ``text``, ``html`` or ``stream``.

        Raises:
            ValueError: If more than one body key is present.
        """
        present = [key for key in BODY_KEYS if key in descriptor]
        if len(present) > 1:
            msg = f"Response descriptor has more than one body: {', '.join(present)}"
            raise ValueError(msg)

        body: Body = Empty()
        if present:
            key = present[0]
            body = BODY_KEYS[key](descriptor[key])

        status = descriptor.get("status")
        return cls(
            body=body,
            status=200 if status is None else status,
            headers=descriptor.get("headers") or {},
        )


@dataclass(frozen=True, slots=True)
class Response:
    """An encoded, transport-ready response.

    ``body`` is either complete bytes or an iterable of chunks that the
    sender streams with chunked transfer encoding.
    """

    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes | Iterable[str | bytes] | AsyncIterable[str | bytes] = b""

    @property
    def is_streaming(self) -> bool:
        return not isinstance(self.body, bytes)

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    @property
    def text(self) -> str:
        """Body as string. Only valid for non-streaming responses."""
        if not isinstance(self.body, bytes):
            msg = "Cannot read text of a streaming response"
            raise TypeError(msg)
        return self.body.decode("utf-8")

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first header named *name* (case-insensitive)."""
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return default
