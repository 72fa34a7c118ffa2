"""GraphQL surface for collections: types, queries, mutations and a client."""

from .builder import CollectionSchemaBuilder
from .client import FETCH_POLICIES, GraphQLClient, QueryResult
from .errors import MutationError
from .types import TypeGenerator

__all__ = [
    "CollectionSchemaBuilder",
    "FETCH_POLICIES",
    "GraphQLClient",
    "QueryResult",
    "MutationError",
    "TypeGenerator",
]
