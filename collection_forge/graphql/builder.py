"""
Schema builder: turns a collection registry into a graphene schema.
"""

import logging
import threading
from typing import Any, Optional, Union

import graphene

from ..core.callbacks import CallbackRegistry
from ..core.collection import Collection, CollectionRegistry, collection_registry
from ..core.settings import GraphQLSettings
from ..mutators import PipelineBuilder
from .mutations import (
    create_mutation_factory,
    delete_mutation_factory,
    update_mutation_factory,
)
from .queries import generate_collections_query, generate_list_query, generate_single_query
from .types import TypeGenerator

logger = logging.getLogger(__name__)


class CollectionSchemaBuilder:
    """
    Builds the GraphQL schema for every collection in a registry.

    The schema is built lazily and cached; ``clear_schema`` forces a rebuild
    on next access (after registering a new collection, for instance).

    Example:
        builder = CollectionSchemaBuilder(callbacks=registry)
        schema = builder.get_schema()
    """

    def __init__(
        self,
        registry: Optional[CollectionRegistry] = None,
        callbacks: Optional[CallbackRegistry] = None,
        settings: Optional[GraphQLSettings] = None,
        pipeline_builder: Optional[PipelineBuilder] = None,
    ):
        self.registry = registry if registry is not None else collection_registry
        self.callbacks = callbacks if callbacks is not None else CallbackRegistry()
        self.settings = settings or GraphQLSettings.from_settings()
        self.pipeline_builder = pipeline_builder
        self.type_generator = TypeGenerator()
        self._schema: Optional[graphene.Schema] = None
        self._query_fields: dict[str, Union[graphene.Field, graphene.List]] = {}
        self._mutation_fields: dict[str, Any] = {}
        self._lock = threading.RLock()

    def get_schema(self) -> graphene.Schema:
        if self._schema is None:
            self.rebuild_schema()
        return self._schema

    def clear_schema(self) -> None:
        with self._lock:
            self._schema = None
            self._query_fields.clear()
            self._mutation_fields.clear()
            self.type_generator = TypeGenerator()

    def rebuild_schema(self) -> graphene.Schema:
        with self._lock:
            self._query_fields.clear()
            self._mutation_fields.clear()
            collections = self.registry.all()
            for collection in collections:
                self._add_collection(collection)

            query_attrs = dict(self._query_fields)
            query_attrs["collections"] = generate_collections_query(self.registry)
            query_type = type("Query", (graphene.ObjectType,), query_attrs)

            mutation_type = None
            if self._mutation_fields:
                mutation_type = type("Mutation", (graphene.ObjectType,), dict(self._mutation_fields))

            self._schema = graphene.Schema(
                query=query_type,
                mutation=mutation_type,
                auto_camelcase=self.settings.auto_camelcase,
            )
            logger.info("Built GraphQL schema for %d collection(s)", len(collections))
            return self._schema

    def _add_collection(self, collection: Collection) -> None:
        object_type = self.type_generator.generate_object_type(collection)

        if self.settings.enable_queries and collection.enable_queries:
            self._query_fields[collection.single_query_name] = generate_single_query(
                collection, object_type
            )
            self._query_fields[collection.multi_query_name] = generate_list_query(
                collection, object_type, self.settings
            )

        if not (self.settings.enable_mutations and collection.enable_mutations):
            return

        type_name = collection.type_name
        options = {"callbacks": self.callbacks, "pipeline_builder": self.pipeline_builder}

        create_input = self.type_generator.generate_input_type(collection, "create")
        if create_input is not None:
            mutation = create_mutation_factory(collection, object_type, create_input, **options)
            self._mutation_fields[f"create{type_name}"] = mutation.Field()

        update_input = self.type_generator.generate_input_type(collection, "update")
        if update_input is not None:
            mutation = update_mutation_factory(collection, object_type, update_input, **options)
            self._mutation_fields[f"update{type_name}"] = mutation.Field()

        mutation = delete_mutation_factory(collection, object_type, **options)
        self._mutation_fields[f"delete{type_name}"] = mutation.Field()

    def get_query_fields(self) -> dict[str, Union[graphene.Field, graphene.List]]:
        self.get_schema()
        return self._query_fields.copy()

    def get_mutation_fields(self) -> dict[str, Any]:
        self.get_schema()
        return self._mutation_fields.copy()
