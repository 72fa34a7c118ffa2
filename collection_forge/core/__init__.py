"""Core collection model: schemas, permissions, callbacks, settings and errors."""

from .callbacks import AsyncDispatcher, CallbackRegistry, callback_channel
from .collection import (
    Collection,
    CollectionRegistry,
    collection_registry,
    create_collection,
)
from .exceptions import (
    CollectionForgeError,
    CollectionNotFoundError,
    DocumentNotFoundError,
    FragmentNotFoundError,
    ImproperlyConfiguredCollection,
    ValidationError,
)
from .permissions import ADMINS, GUESTS, MEMBERS, Actor, Operation, actor_for_user
from .schema import CollectionSchema, FieldSpec, restrict_view
from .settings import FormSettings, GraphQLSettings, MutatorSettings

__all__ = [
    "AsyncDispatcher",
    "CallbackRegistry",
    "callback_channel",
    "Collection",
    "CollectionRegistry",
    "collection_registry",
    "create_collection",
    "CollectionForgeError",
    "CollectionNotFoundError",
    "DocumentNotFoundError",
    "FragmentNotFoundError",
    "ImproperlyConfiguredCollection",
    "ValidationError",
    "ADMINS",
    "GUESTS",
    "MEMBERS",
    "Actor",
    "Operation",
    "actor_for_user",
    "CollectionSchema",
    "FieldSpec",
    "restrict_view",
    "FormSettings",
    "GraphQLSettings",
    "MutatorSettings",
]
