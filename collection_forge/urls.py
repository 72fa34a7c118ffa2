"""
URL configuration exposing the collection GraphQL schema.

Projects include these patterns::

    path("", include("collection_forge.urls"))
"""

from typing import Optional

from django.urls import path
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from graphene_django.views import GraphQLView

from .graphql.builder import CollectionSchemaBuilder

_schema_builder = None


def get_schema_builder() -> CollectionSchemaBuilder:
    """Return the builder for the global collection registry."""
    global _schema_builder
    if _schema_builder is None:
        _schema_builder = CollectionSchemaBuilder()
    return _schema_builder


def set_schema_builder(builder: Optional[CollectionSchemaBuilder]) -> None:
    """Serve ``builder``'s schema, e.g. one carrying the project's callbacks."""
    global _schema_builder
    _schema_builder = builder


@method_decorator(csrf_exempt, name="dispatch")
class CollectionGraphQLView(GraphQLView):
    """GraphQL view serving the collection schema, resolved on each request."""

    def __init__(self, **kwargs):
        schema = kwargs.pop("schema", None) or get_schema_builder().get_schema()
        super().__init__(schema=schema, **kwargs)


urlpatterns = [
    path("graphql/", CollectionGraphQLView.as_view(), name="graphql"),
]
