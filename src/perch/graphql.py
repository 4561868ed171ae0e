"""GraphQL over HTTP.

Turns a request into a ``GraphQLQuery`` following the usual conventions
(https://graphql.org/learn/serving-over-http/) and hands execution to
``graphql-core``. Parsing, validation and resolver semantics are
entirely the engine's business.
"""

from __future__ import annotations

import json as json_module
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from graphql import GraphQLSchema, graphql

if TYPE_CHECKING:
    from perch.http.request import HTTPRequest

logger = logging.getLogger("perch.graphql")

JSON_CONTENT_TYPE = "application/json"
GRAPHQL_CONTENT_TYPE = "application/graphql"


@dataclass(frozen=True, slots=True)
class GraphQLQuery:
    """A GraphQL operation extracted from an HTTP request."""

    query: str
    operation_name: str | None = None
    variables: dict[str, Any] | None = None

    @classmethod
    def from_json(cls, payload: Any) -> GraphQLQuery | None:
        """Build from a decoded ``{"query", "operationName", "variables"}`` body.

        Returns None when *payload* is not an object, has no string query,
        or carries ``variables`` that are not an object.
        """
        if not isinstance(payload, Mapping):
            return None
        query = payload.get("query")
        if not isinstance(query, str):
            return None
        variables = payload.get("variables")
        if variables is not None and not isinstance(variables, Mapping):
            return None
        return cls(
            query=query,
            operation_name=payload.get("operationName") or None,
            variables=None if variables is None else dict(variables),
        )


async def get_graphql_query(
    request: HTTPRequest,
    *,
    strict_content_type: bool = True,
) -> GraphQLQuery | None:
    """Extract a GraphQL query from *request*, or None if there isn't one.

    - ``GET``: ``query``, ``operationName`` and JSON-encoded ``variables``
      from the query string. Malformed ``variables`` yield None.
    - ``POST`` with ``application/json``: the body is
      ``{"query", "operationName"?, "variables"?}``.
    - ``POST`` with ``application/graphql``: the whole body is the query.

    Anything else yields None. With *strict_content_type* the
    Content-Type header must equal one of the two types exactly;
    otherwise parameters such as ``; charset=utf-8`` are ignored.
    """
    method = request.method.lower()

    if method == "get":
        query = request.query.get("query")
        if query is None:
            return None
        operation_name = request.query.get("operationName") or None
        raw_variables = request.query.get("variables") or None
        variables = None
        if raw_variables is not None:
            try:
                variables = json_module.loads(raw_variables)
            except ValueError:
                logger.debug("Ignoring GraphQL GET with malformed variables")
                return None
            if not isinstance(variables, dict):
                return None
        return GraphQLQuery(query, operation_name, variables)

    if method == "post":
        content_type = request.content_type if strict_content_type else request.media_type
        if content_type == JSON_CONTENT_TYPE:
            return GraphQLQuery.from_json(await request.json())
        if content_type == GRAPHQL_CONTENT_TYPE:
            return GraphQLQuery(await request.text())

    return None


async def execute_graphql(schema: GraphQLSchema, query: GraphQLQuery) -> dict[str, Any]:
    """Run *query* against *schema* and return the formatted result.

    The result has the standard ``data`` / ``errors`` shape.
    """
    result = await graphql(
        schema,
        query.query,
        None,
        None,
        query.variables,
        query.operation_name,
    )
    return result.formatted
