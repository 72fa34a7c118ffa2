"""
Query field generation for collections.

Both the single and the list query return documents projected through
``CollectionSchema.restrict_view`` for the requesting user.
"""

import logging
from typing import Any, Optional, Type

import graphene

from ..core.collection import Collection
from ..core.permissions import actor_for_user
from ..core.schema import iter_documents_view
from ..core.settings import GraphQLSettings

logger = logging.getLogger(__name__)


def _actor_from_info(info: Any):
    context = getattr(info, "context", None)
    return actor_for_user(getattr(context, "user", None))


def generate_single_query(
    collection: Collection, object_type: Type[graphene.ObjectType]
) -> graphene.Field:
    """
    Generate ``<type>(id: ID, slug: String)``.

    Returns null when neither selector is given or nothing matches.
    """

    def resolve_single(root, info, id=None, slug=None):
        if id:
            document = collection.find_one(id)
        elif slug:
            document = collection.find_one_by("slug", slug)
        else:
            return None
        if document is None:
            logger.debug("%s %s not found", collection.type_name, id or slug)
            return None
        return collection.schema.restrict_view(_actor_from_info(info), document)

    return graphene.Field(
        object_type,
        id=graphene.ID(),
        slug=graphene.String(),
        resolver=resolve_single,
        description=f"Retrieve a single {collection.type_name} by id",
    )


def generate_list_query(
    collection: Collection,
    object_type: Type[graphene.ObjectType],
    settings: Optional[GraphQLSettings] = None,
) -> graphene.List:
    """Generate ``<collectionName>(limit, offset)``."""
    settings = settings or GraphQLSettings()

    def resolve_list(root, info, limit=None, offset=None):
        if limit is None:
            limit = settings.default_page_size
        limit = max(0, min(int(limit), settings.max_page_size))
        offset = max(0, int(offset or 0))
        documents = collection.find(limit=limit, offset=offset)
        return iter_documents_view(collection.schema, _actor_from_info(info), documents)

    return graphene.List(
        object_type,
        limit=graphene.Int(),
        offset=graphene.Int(),
        resolver=resolve_list,
        description=f"List {collection.collection_name}",
    )


class CollectionInfo(graphene.ObjectType):
    """Metadata about a registered collection."""

    collection_name = graphene.String()
    type_name = graphene.String()
    description = graphene.String()
    field_names = graphene.List(graphene.String)
    count = graphene.Int()


def generate_collections_query(registry) -> graphene.List:
    """Generate ``collections``, listing every registered collection."""

    def resolve_collections(root, info):
        return [
            CollectionInfo(
                collection_name=collection.collection_name,
                type_name=collection.type_name,
                description=collection.description,
                field_names=collection.schema.field_names,
                count=collection.count(),
            )
            for collection in registry.all()
        ]

    return graphene.List(
        CollectionInfo,
        resolver=resolve_collections,
        description="Registered collections",
    )
