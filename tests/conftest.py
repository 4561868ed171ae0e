"""Shared fixtures for perch tests."""

import pytest
from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLString,
)


@pytest.fixture
def schema() -> GraphQLSchema:
    """A tiny schema: ``hello`` and ``greet(name: String!)``."""
    return GraphQLSchema(
        query=GraphQLObjectType(
            "Query",
            {
                "hello": GraphQLField(GraphQLString, resolve=lambda _obj, _info: "world"),
                "greet": GraphQLField(
                    GraphQLString,
                    args={"name": GraphQLArgument(GraphQLNonNull(GraphQLString))},
                    resolve=lambda _obj, _info, name: f"hi {name}",
                ),
            },
        )
    )
