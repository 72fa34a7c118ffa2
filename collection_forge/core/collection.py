"""
Collections and the collection registry.
"""

import logging
import threading
from typing import Any, Mapping, Optional, Union

from .exceptions import CollectionNotFoundError, ImproperlyConfiguredCollection
from .schema import CollectionSchema

logger = logging.getLogger(__name__)


def _lower_first(value: str) -> str:
    return value[:1].lower() + value[1:]


class Collection:
    """
    A named, schema-governed set of documents.

    The collection owns its schema and a document store; it knows nothing
    about callbacks, which belong to whoever runs the mutators.
    """

    def __init__(
        self,
        collection_name: str,
        type_name: str,
        schema: Union[CollectionSchema, Mapping[str, Any]],
        store: Any = None,
        description: str = "",
        enable_queries: bool = True,
        enable_mutations: bool = True,
    ):
        if not collection_name or not type_name:
            raise ImproperlyConfiguredCollection(
                "Collections need both a collection_name and a type_name"
            )
        if not isinstance(schema, CollectionSchema):
            schema = CollectionSchema(schema)
        if store is None:
            from ..storage import DocumentStore

            store = DocumentStore()

        self.collection_name = collection_name
        self.type_name = type_name
        self.schema = schema
        self.store = store
        self.description = description
        self.enable_queries = enable_queries
        self.enable_mutations = enable_mutations

    @property
    def callback_prefix(self) -> str:
        """Prefix of this collection's callback channels (``foo2``)."""
        return self.type_name.lower()

    @property
    def single_query_name(self) -> str:
        return _lower_first(self.type_name)

    @property
    def multi_query_name(self) -> str:
        return _lower_first(self.collection_name)

    def find_one(self, document_id: str) -> Optional[dict]:
        return self.store.get(self.collection_name, document_id)

    def find_one_by(self, field_name: str, value: Any) -> Optional[dict]:
        return self.store.get_by_field(self.collection_name, field_name, value)

    def find(self, limit: Optional[int] = None, offset: int = 0) -> list[dict]:
        return self.store.find(self.collection_name, limit=limit, offset=offset)

    def count(self) -> int:
        return self.store.count(self.collection_name)

    def __repr__(self) -> str:
        return f"<Collection {self.collection_name} type={self.type_name}>"


class CollectionRegistry:
    """Registry of collections keyed by collection name."""

    def __init__(self):
        self._collections: dict[str, Collection] = {}
        self._lock = threading.Lock()

    def register(self, collection: Collection) -> Collection:
        with self._lock:
            if collection.collection_name in self._collections:
                logger.info(
                    "Collection '%s' already registered, replacing it",
                    collection.collection_name,
                )
            self._collections[collection.collection_name] = collection
        return collection

    def unregister(self, collection_name: str) -> bool:
        with self._lock:
            return self._collections.pop(collection_name, None) is not None

    def get(self, collection_name: str) -> Collection:
        try:
            return self._collections[collection_name]
        except KeyError:
            raise CollectionNotFoundError(collection_name) from None

    def get_by_type_name(self, type_name: str) -> Collection:
        for collection in self._collections.values():
            if collection.type_name == type_name:
                return collection
        raise CollectionNotFoundError(type_name)

    def all(self) -> list[Collection]:
        return list(self._collections.values())

    def clear(self) -> None:
        with self._lock:
            self._collections.clear()

    def __contains__(self, collection_name: object) -> bool:
        return collection_name in self._collections

    def __len__(self) -> int:
        return len(self._collections)


# Global collection registry instance
collection_registry = CollectionRegistry()


def create_collection(
    collection_name: str,
    type_name: str,
    schema: Union[CollectionSchema, Mapping[str, Any]],
    registry: Optional[CollectionRegistry] = None,
    **options: Any,
) -> Collection:
    """Build a collection and register it (in the global registry by default)."""
    collection = Collection(collection_name, type_name, schema, **options)
    (registry if registry is not None else collection_registry).register(collection)
    logger.debug("Registered collection %s (%s)", collection_name, type_name)
    return collection
