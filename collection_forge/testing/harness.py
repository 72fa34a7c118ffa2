"""
Test helpers for projects built on collection-forge.

``build_schema`` gives each test its own collection registry and callback
registry, so schemas built in one test never see collections or callbacks
registered by another. ``CollectionGraphQLTestClient`` runs operations as a
given Django user.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory
from graphene.test import Client

from ..core.callbacks import CallbackRegistry
from ..core.collection import Collection, CollectionRegistry

GRAPHQL_PATH = "/graphql/"


@dataclass(frozen=True)
class SchemaHarness:
    schema: Any
    builder: Any
    registry: CollectionRegistry
    callbacks: CallbackRegistry

    def collection(self, collection_name: str) -> Collection:
        return self.registry.get(collection_name)


def build_request(
    *,
    user: Any = None,
    payload: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
):
    """A JSON POST to the GraphQL endpoint, authenticated as ``user``."""
    request = RequestFactory().post(
        GRAPHQL_PATH,
        data=json.dumps(dict(payload or {})),
        content_type="application/json",
        headers=dict(headers or {}),
    )
    request.user = user if user is not None else AnonymousUser()
    return request


def build_context(*, user: Any = None, request: Any = None):
    """
    The ``context_value`` resolvers receive.

    Resolvers read ``context.user``; an existing request is reused with its
    user replaced when one is given.
    """
    if request is None:
        return build_request(user=user)
    if user is not None:
        request.user = user
    return request


def build_schema(
    collections: Iterable[Collection],
    *,
    callbacks: Optional[CallbackRegistry] = None,
    settings: Any = None,
) -> SchemaHarness:
    """Build a schema over an isolated registry holding ``collections``."""
    from ..graphql.builder import CollectionSchemaBuilder

    registry = CollectionRegistry()
    for collection in collections:
        registry.register(collection)
    if callbacks is None:
        callbacks = CallbackRegistry()
    builder = CollectionSchemaBuilder(registry=registry, callbacks=callbacks, settings=settings)
    return SchemaHarness(builder.get_schema(), builder, registry, callbacks)


class CollectionGraphQLTestClient:
    """
    Runs operations against a schema and returns the raw result dict.

    The user passed to ``execute`` wins over the one given to the client;
    with neither, operations run as an anonymous guest.
    """

    def __init__(self, schema: Any, *, user: Any = None):
        self.schema = schema
        self.user = user
        self._client = Client(schema)

    def execute(
        self,
        query: str,
        *,
        variables: Optional[dict[str, Any]] = None,
        user: Any = None,
        operation_name: Optional[str] = None,
    ) -> dict[str, Any]:
        context = build_request(
            user=user or self.user,
            payload={"query": query, "variables": variables or {}},
        )
        return self._client.execute(
            query,
            variable_values=variables,
            context_value=context,
            operation_name=operation_name,
        )
