"""Perch exception hierarchy.

Shared across routing, request parsing, and the application so every
module raises and catches the same types.
"""


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when an application or route definition is invalid.

    Typically raised at class-creation time, when route patterns are
    compiled, or by ``Application.add_route()``.
    """


class BodyConsumed(PerchError):  # noqa: N818
    """The request body has already been read.

    ``form()``, ``json()`` and ``text()`` share one underlying stream;
    only the first call gets the body.
    """

    def __init__(self, detail: str = "Request body has already been consumed") -> None:
        super().__init__(detail)


class PayloadTooLarge(PerchError):  # noqa: N818
    """The request body exceeded ``AppConfig.max_content_length``."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Request body exceeds {limit} bytes")
