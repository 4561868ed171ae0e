"""Tests for perch.graphql — query extraction and execution."""

import json

import pytest

from perch.graphql import GraphQLQuery, execute_graphql, get_graphql_query
from perch.http.request import HTTPRequest


def _req(
    method: str,
    *,
    query_string: bytes = b"",
    content_type: str | None = None,
    body: bytes = b"",
) -> HTTPRequest:
    headers = []
    if content_type is not None:
        headers.append((b"content-type", content_type.encode("latin-1")))

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    scope = {
        "type": "http",
        "method": method,
        "path": "/graphql",
        "query_string": query_string,
        "headers": headers,
    }
    return HTTPRequest.from_asgi(scope, receive)


class TestGetQuery:
    async def test_get_query_only(self) -> None:
        q = await get_graphql_query(_req("GET", query_string=b"query=%7B%20hello%20%7D"))
        assert q == GraphQLQuery(query="{ hello }")

    async def test_get_with_operation_and_variables(self) -> None:
        qs = b"query=q&operationName=Op&variables=%7B%22a%22%3A1%7D"
        q = await get_graphql_query(_req("GET", query_string=qs))
        assert q == GraphQLQuery("q", "Op", {"a": 1})

    async def test_get_empty_operation_name_is_none(self) -> None:
        q = await get_graphql_query(_req("GET", query_string=b"query=q&operationName="))
        assert q is not None
        assert q.operation_name is None

    async def test_get_missing_query(self) -> None:
        assert await get_graphql_query(_req("GET", query_string=b"variables=%7B%7D")) is None

    async def test_get_malformed_variables(self) -> None:
        qs = b"query=q&variables=not-json"
        assert await get_graphql_query(_req("GET", query_string=qs)) is None

    async def test_get_non_object_variables(self) -> None:
        qs = b"query=q&variables=%5B1%5D"
        assert await get_graphql_query(_req("GET", query_string=qs)) is None

    async def test_method_is_case_insensitive(self) -> None:
        assert await get_graphql_query(_req("get", query_string=b"query=q")) is not None

    async def test_post_json(self) -> None:
        body = json.dumps({"query": "q", "operationName": "Op", "variables": {"a": 1}}).encode()
        q = await get_graphql_query(_req("POST", content_type="application/json", body=body))
        assert q == GraphQLQuery("q", "Op", {"a": 1})

    async def test_post_json_without_query(self) -> None:
        body = json.dumps({"variables": {}}).encode()
        assert await get_graphql_query(_req("POST", content_type="application/json", body=body)) is None

    @pytest.mark.parametrize("variables", [[1], "a=1", 3])
    async def test_post_json_non_object_variables(self, variables: object) -> None:
        body = json.dumps({"query": "{ hello }", "variables": variables}).encode()
        assert await get_graphql_query(_req("POST", content_type="application/json", body=body)) is None

    async def test_post_graphql(self) -> None:
        q = await get_graphql_query(
            _req("POST", content_type="application/graphql", body=b"{ hello }")
        )
        assert q == GraphQLQuery("{ hello }")

    async def test_post_other_content_type(self) -> None:
        assert await get_graphql_query(_req("POST", content_type="text/plain", body=b"x")) is None

    async def test_post_missing_content_type(self) -> None:
        assert await get_graphql_query(_req("POST", body=b"{ hello }")) is None

    async def test_post_with_charset_is_strict_by_default(self) -> None:
        req = _req("POST", content_type="application/json; charset=utf-8", body=b'{"query": "q"}')
        assert await get_graphql_query(req) is None

    async def test_post_with_charset_relaxed(self) -> None:
        req = _req("POST", content_type="application/json; charset=utf-8", body=b'{"query": "q"}')
        assert await get_graphql_query(req, strict_content_type=False) == GraphQLQuery("q")

    @pytest.mark.parametrize("method", ["PUT", "DELETE", "OPTIONS"])
    async def test_other_methods(self, method: str) -> None:
        assert await get_graphql_query(_req(method, query_string=b"query=q")) is None


class TestExecute:
    async def test_data(self, schema) -> None:
        result = await execute_graphql(schema, GraphQLQuery("{ hello }"))
        assert result == {"data": {"hello": "world"}}

    async def test_variables_and_operation_name(self, schema) -> None:
        query = GraphQLQuery(
            "query A { hello } query B($n: String!) { greet(name: $n) }",
            operation_name="B",
            variables={"n": "ada"},
        )
        assert await execute_graphql(schema, query) == {"data": {"greet": "hi ada"}}

    async def test_errors_are_in_the_result(self, schema) -> None:
        result = await execute_graphql(schema, GraphQLQuery("{ nope }"))
        assert "errors" in result
        assert result["errors"][0]["message"]
