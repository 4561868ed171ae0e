"""Perch — a small class-based routing layer for ASGI.

Declare handler methods on an ``Application`` subclass with regular
expression path patterns; capture groups are passed to the handler.

Basic usage::

    from perch import Application, HTTPResponse, get

    class Hello(Application):
        @get("/hello/([a-z]+)")
        async def hello(self, request, name):
            return HTTPResponse.text(f"Hello, {name}!")

    app = Hello()  # serve with any ASGI server

GraphQL::

    class API(Application):
        @get("/graphql")
        @post("/graphql")
        async def graphql(self, request):
            return await self.handle_graphql_request(schema, request)
"""

__version__ = "0.1.0"
__all__ = [
    "URL",
    "AppConfig",
    "Application",
    "BodyConsumed",
    "ConfigurationError",
    "CookieJar",
    "GraphQLQuery",
    "HTTPRequest",
    "HTTPResponse",
    "PayloadTooLarge",
    "PerchError",
    "Response",
    "Route",
    "delete",
    "get",
    "options",
    "post",
    "put",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "Application":
        from perch.app import Application

        return Application

    if name == "AppConfig":
        from perch.config import AppConfig

        return AppConfig

    if name in ("get", "post", "put", "delete", "options"):
        from perch.routing import decorators as _decorators

        return getattr(_decorators, name)

    if name == "Route":
        from perch.routing.route import Route

        return Route

    if name == "HTTPRequest":
        from perch.http.request import HTTPRequest

        return HTTPRequest

    if name in ("HTTPResponse", "Response"):
        from perch.http import response as _resp

        return getattr(_resp, name)

    if name == "CookieJar":
        from perch.http.cookies import CookieJar

        return CookieJar

    if name == "URL":
        from perch.http.url import URL

        return URL

    if name == "GraphQLQuery":
        from perch.graphql import GraphQLQuery

        return GraphQLQuery

    if name in ("PerchError", "ConfigurationError", "BodyConsumed", "PayloadTooLarge"):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
