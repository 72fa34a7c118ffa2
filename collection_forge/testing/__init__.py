"""Helpers for testing projects built on collection-forge."""

from .harness import (
    CollectionGraphQLTestClient,
    SchemaHarness,
    build_context,
    build_request,
    build_schema,
)

__all__ = [
    "CollectionGraphQLTestClient",
    "SchemaHarness",
    "build_context",
    "build_request",
    "build_schema",
]
