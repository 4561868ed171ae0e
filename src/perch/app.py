"""Perch application base class.

Concrete applications subclass ``Application`` and declare handler
methods with the routing decorators. Each instance binds its class's
route table, then freezes it on the first request.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from graphql import GraphQLSchema

from perch._internal.asgi import Receive, Scope, Send
from perch._internal.invoke import invoke
from perch.config import AppConfig
from perch.errors import ConfigurationError
from perch.graphql import GraphQLQuery, execute_graphql, get_graphql_query
from perch.http.request import HTTPRequest
from perch.http.response import HTTPResponse, Response
from perch.routing import decorators
from perch.routing.decorators import collect_routes, route_table
from perch.routing.route import METHODS, Route
from perch.server.negotiation import coerce_response, encode_response, infer_content_type
from perch.server.sender import send_response

logger = logging.getLogger("perch.server")
_log = logging.getLogger("perch.app")


class Application:
    """Base class for perch applications.

    Subclass it, declare routes, and serve the instance with any ASGI
    server::

        class Shop(Application):
            @Application.get("/items/([0-9]+)")
            async def item(self, request, item_id):
                return HTTPResponse.json({"id": int(item_id)})

        app = Shop()

    Requests are matched against routes in registration order; the first
    match wins. Handler errors never escape: they are logged and turned
    into ``handle_internal_error()``'s response. Unmatched requests get
    ``handle_not_found()``'s response. Both can be overridden.

    Thread safety:
        Routes may be added with ``add_route()`` until the first request.
        The freeze uses a Lock + double-check so exactly one thread
        publishes the final route tuple; after that it is read-only.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_pending_routes",
        "_routes",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    # Route registration decorators: ``@Application.get("/path")``
    get = staticmethod(decorators.get)
    post = staticmethod(decorators.post)
    put = staticmethod(decorators.put)
    delete = staticmethod(decorators.delete)
    options = staticmethod(decorators.options)

    encode_response = staticmethod(encode_response)
    infer_content_type = staticmethod(infer_content_type)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        collect_routes(cls)

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[Route] = [
            definition.bind(self) for definition in route_table(type(self))
        ]
        self._routes: tuple[Route, ...] = ()
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Route registration --

    @property
    def routes(self) -> tuple[Route, ...]:
        """All routes of this instance, in match order."""
        if self._frozen:
            return self._routes
        return tuple(self._pending_routes)

    def add_route(self, method: str, path: str, handler: Callable[..., Any]) -> Route:
        """Register a route on this instance, after the class-declared ones.

        *handler* is called as ``handler(request, *groups)``.

        Raises:
            ConfigurationError: For an unknown method or invalid pattern.
            RuntimeError: If the application is already serving requests.
        """
        self._check_not_frozen()
        if method.lower() not in METHODS:
            msg = f"Unsupported HTTP method {method.upper()!r}"
            raise ConfigurationError(msg)
        route = Route.compile(method, path, handler)
        self._pending_routes.append(route)
        return route

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run on ASGI ``lifespan.startup`` (sync or async)."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run on ASGI ``lifespan.shutdown`` (sync or async)."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Default handlers --

    async def handle_not_found(self, request: HTTPRequest) -> HTTPResponse:
        return HTTPResponse.text("404 not found", status=404)

    async def handle_internal_error(self, request: HTTPRequest) -> HTTPResponse:
        return HTTPResponse.text("500 internal error", status=500)

    # -- GraphQL --

    async def get_graphql_query(self, request: HTTPRequest) -> GraphQLQuery | None:
        """Extract a GraphQL query from *request* (see ``perch.graphql``)."""
        return await get_graphql_query(
            request,
            strict_content_type=self.config.strict_graphql_content_type,
        )

    async def handle_graphql_request(
        self,
        schema: GraphQLSchema,
        request: HTTPRequest,
    ) -> HTTPResponse:
        """Serve a GraphQL endpoint. Call it from a route handler::

            @post("/graphql")
            async def graphql(self, request):
                return await self.handle_graphql_request(schema, request)

        Requests that carry no usable query get a 400.
        """
        query = await self.get_graphql_query(request)
        if query is None:
            return HTTPResponse.text("400 bad request", status=400)
        return HTTPResponse.json(await execute_graphql(schema, query))

    # -- Dispatch --

    async def handle_request(self, scope: Scope, receive: Receive) -> Response:
        """Route one HTTP request and return the encoded response.

        Never raises for handler failures: any exception from the handler,
        or from encoding what it returned, is logged and replaced by the
        internal-error response.
        """
        self._ensure_frozen()
        request = HTTPRequest.from_asgi(
            scope, receive, max_body=self.config.max_content_length
        )

        for route in self._routes:
            groups = route.match(request)
            if groups is None:
                continue

            if self.config.debug:
                _log.debug("%s %s -> %s%r", request.method, request.path, route.name, groups)

            try:
                result = await invoke(route.handler, request, *groups)
                return encode_response(coerce_response(result))
            except Exception:
                logger.exception("500 %s %s", request.method, request.path)
                return encode_response(await invoke(self.handle_internal_error, request))

        if self.config.debug:
            _log.debug("%s %s -> no route", request.method, request.path)
        return encode_response(await invoke(self.handle_not_found, request))

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        response = await self.handle_request(scope, receive)
        await send_response(response, send)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the route table at startup (before the first request),
        then runs the registered hooks and signals completion back to
        the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._routes = tuple(self._pending_routes)
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the application after it has started serving requests. "
                "Register routes and hooks before the first request."
            )
            raise RuntimeError(msg)
