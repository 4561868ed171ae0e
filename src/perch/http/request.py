"""Immutable HTTP request.

Frozen metadata computed once from the ASGI scope, plus single-use async
body readers. The body is a stream: whichever of ``form()``, ``json()``
or ``text()`` is called first consumes it.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from perch._internal.asgi import Receive, Scope
from perch.errors import BodyConsumed, PayloadTooLarge
from perch.http.cookies import CookieJar
from perch.http.forms import FormData, parse_form_data
from perch.http.headers import Headers
from perch.http.query import QueryParams
from perch.http.url import URL

_DEFAULT_MAX_BODY = 16 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class HTTPRequest:
    """An incoming HTTP request, normalized for routing and handlers.

    ``method``, ``url``, ``query``, ``headers`` and ``cookies`` are
    computed at creation. The body stays on the wire until one of the
    async readers asks for it; a second read raises ``BodyConsumed``.
    """

    method: str
    url: URL
    query: QueryParams
    headers: Headers
    cookies: CookieJar

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(repr=False, compare=False)
    _max_body: int = field(default=_DEFAULT_MAX_BODY, repr=False, compare=False)

    # Private: mutable read state (the dict is mutable even though the
    # field reference is frozen)
    _state: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def path(self) -> str:
        """The request path the router matches against."""
        return self.url.path

    @property
    def content_type(self) -> str | None:
        """The raw Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def media_type(self) -> str | None:
        """The Content-Type without parameters, lowercased."""
        content_type = self.content_type
        if content_type is None:
            return None
        return content_type.split(";")[0].strip().lower()

    @property
    def body_consumed(self) -> bool:
        return self._state.get("consumed", False)

    # -- Async body access (single use) --

    async def stream(self) -> AsyncIterator[bytes]:
        """Stream the request body in chunks, consuming it."""
        if self._state.get("consumed"):
            raise BodyConsumed
        self._state["consumed"] = True

        received = 0
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            chunk = message.get("body", b"")
            if chunk:
                received += len(chunk)
                if received > self._max_body:
                    raise PayloadTooLarge(self._max_body)
                yield chunk
            if not message.get("more_body", False):
                break

    async def body(self) -> bytes:
        """Read the full request body as bytes."""
        return b"".join([chunk async for chunk in self.stream()])

    async def text(self) -> str:
        """Read the body as UTF-8 text."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        """Read the body and parse it as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    async def form(self) -> FormData:
        """Read the body as URL-encoded or multipart form data.

        Raises:
            ValueError: If the Content-Type is not a form encoding.
        """
        content_type = self.content_type or "application/x-www-form-urlencoded"
        raw = await self.body()
        return parse_form_data(raw, content_type)

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
        *,
        max_body: int = _DEFAULT_MAX_BODY,
    ) -> HTTPRequest:
        """Create a request from an ASGI HTTP scope and receive callable."""
        headers = Headers(tuple(scope.get("headers", ())))
        url = URL.from_scope(scope, headers.get("host"))
        return cls(
            method=scope["method"],
            url=url,
            query=QueryParams(scope.get("query_string", b"")),
            headers=headers,
            cookies=CookieJar(headers.get("cookie") or ""),
            _receive=receive,
            _max_body=max_body,
        )
