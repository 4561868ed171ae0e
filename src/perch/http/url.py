"""Parsed request URL."""

from __future__ import annotations

from dataclasses import dataclass

from perch._internal.asgi import Scope

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


@dataclass(frozen=True, slots=True)
class URL:
    """The URL a request was sent to, reassembled from the ASGI scope.

    ``path`` is the path as sent on the wire, still percent-encoded, and
    is what the router matches against. ``query`` is the raw query string
    without ``?``.
    """

    scheme: str
    host: str
    port: int | None
    path: str
    query: str = ""

    @property
    def netloc(self) -> str:
        if self.port is None or _DEFAULT_PORTS.get(self.scheme) == self.port:
            return self.host
        return f"{self.host}:{self.port}"

    def __str__(self) -> str:
        url = f"{self.scheme}://{self.netloc}{self.path}"
        if self.query:
            url = f"{url}?{self.query}"
        return url

    @classmethod
    def from_scope(cls, scope: Scope, host_header: str | None = None) -> URL:
        """Build a URL from an ASGI scope and the request ``Host`` header.

        The ``Host`` header wins over ``scope["server"]``, matching what
        the client actually asked for.
        """
        scheme = scope.get("scheme", "http")
        host = "localhost"
        port: int | None = None

        if host_header:
            name, sep, port_text = host_header.rpartition(":")
            if sep and port_text.isdigit():
                host, port = name, int(port_text)
            else:
                host = host_header
        elif scope.get("server"):
            server_host, server_port = scope["server"]
            host, port = server_host, server_port

        # raw_path keeps %2F distinct from /; servers that omit it only
        # give us the decoded path
        raw_path = scope.get("raw_path")
        path = raw_path.decode("latin-1") if raw_path else scope.get("path", "/")
        query = scope.get("query_string", b"").decode("latin-1")
        return cls(scheme=scheme, host=host, port=port, path=path or "/", query=query)
