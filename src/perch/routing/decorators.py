"""Route registration decorators.

``@get``, ``@post``, ``@put``, ``@delete`` and ``@options`` mark methods
of an ``Application`` subclass. When the subclass is created, its marked
methods are collected — in definition order — into an immutable route
table keyed by that class::

    class Shop(Application):
        @get("/items")
        async def list_items(self, request):
            ...

        @get("/items/([0-9]+)")
        async def show_item(self, request, item_id):
            ...

A subclass that declares routes gets its own table; one that declares
none uses its nearest ancestor's. Tables are never merged.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from perch.errors import ConfigurationError
from perch.routing.route import METHODS, Route, compile_pattern

F = TypeVar("F", bound=Callable[..., Any])

# Attribute the decorators leave on a function: [(method, path), ...]
ROUTES_ATTR = "__perch_routes__"

_tables: dict[type, tuple[RouteDef, ...]] = {}
_tables_lock = threading.Lock()


@dataclass(frozen=True, slots=True)
class RouteDef:
    """A route declared on a class, not yet bound to an instance."""

    method: str
    path: str
    pattern: re.Pattern[str]
    func: Callable[..., Any]

    def bind(self, instance: object) -> Route:
        """Bind the handler to *instance* and return a dispatchable Route."""
        handler = self.func.__get__(instance, type(instance))
        return Route(self.method, self.pattern, handler)


def route(method: str, path: str) -> Callable[[F], F]:
    """Mark a handler method for *method* requests whose path matches *path*.

    *path* is a regular expression matched against the whole request
    path; its capture groups are passed to the handler positionally after
    the request.

    Raises:
        ConfigurationError: For an unknown method or invalid pattern.
    """
    method = method.lower()
    if method not in METHODS:
        msg = f"Unsupported HTTP method {method.upper()!r}; expected one of {sorted(METHODS)}"
        raise ConfigurationError(msg)
    compile_pattern(path)

    def decorator(func: F) -> F:
        declared = getattr(func, ROUTES_ATTR, [])
        # Stacked decorators apply bottom-up; keep top-down reading order.
        setattr(func, ROUTES_ATTR, [(method, path), *declared])
        return func

    return decorator


def get(path: str) -> Callable[[F], F]:
    return route("get", path)


def post(path: str) -> Callable[[F], F]:
    return route("post", path)


def put(path: str) -> Callable[[F], F]:
    return route("put", path)


def delete(path: str) -> Callable[[F], F]:
    return route("delete", path)


def options(path: str) -> Callable[[F], F]:
    return route("options", path)


def collect_routes(cls: type) -> tuple[RouteDef, ...]:
    """Build and store the route table for *cls* from its own namespace.

    Only attributes defined directly on *cls* are scanned. Nothing is
    stored when *cls* declares no routes, so ``route_table()`` falls
    through to the nearest ancestor.
    """
    definitions: list[RouteDef] = []
    for attr in vars(cls).values():
        for method, path in getattr(attr, ROUTES_ATTR, ()):
            definitions.append(RouteDef(method, path, compile_pattern(path), attr))

    table = tuple(definitions)
    if table:
        with _tables_lock:
            _tables[cls] = table
    return table


def route_table(cls: type) -> tuple[RouteDef, ...]:
    """Return the route table that applies to *cls*."""
    for klass in cls.__mro__:
        table = _tables.get(klass)
        if table is not None:
            return table
    return ()
