"""Route — a (method, anchored pattern) -> handler binding."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from perch.errors import ConfigurationError

if TYPE_CHECKING:
    from perch.http.request import HTTPRequest

METHODS = frozenset({"get", "post", "put", "delete", "options"})


def compile_pattern(path: str) -> re.Pattern[str]:
    """Compile a path pattern so it only ever matches a whole path.

    Raises:
        ConfigurationError: If *path* is not a valid regular expression.
    """
    try:
        return re.compile(f"^(?:{path})$")
    except re.error as exc:
        msg = f"Invalid route pattern {path!r}: {exc}"
        raise ConfigurationError(msg) from exc


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route: lowercased method, anchored pattern, bound handler.

    Created when an application instance is constructed; the handler is
    a direct reference, never looked up by name at dispatch time.
    """

    method: str
    pattern: re.Pattern[str]
    handler: Callable[..., Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.lower())

    @classmethod
    def compile(cls, method: str, path: str, handler: Callable[..., Any]) -> Route:
        return cls(method, compile_pattern(path), handler)

    @property
    def name(self) -> str:
        return getattr(self.handler, "__qualname__", repr(self.handler))

    def match(self, request: HTTPRequest) -> tuple[str | None, ...] | None:
        """Return the capture groups if *request* hits this route, else None.

        Both the method (case-insensitively) and the full path must
        match. Optional groups that did not participate are ``None``.
        """
        if request.method.lower() != self.method:
            return None
        found = self.pattern.fullmatch(request.url.path)
        if found is None:
            return None
        return found.groups()
