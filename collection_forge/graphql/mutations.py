"""
GraphQL mutation factories.

Each generated mutation calls the matching mutator with the request user,
the request context and the schema builder's callback registry, and turns
library errors into ``ok: false`` plus structured ``errors``.
"""

import logging
from typing import Any, Optional, Type

import graphene

from ..core.callbacks import CallbackRegistry
from ..core.collection import Collection
from ..core.exceptions import CollectionForgeError
from ..mutators import PipelineBuilder, create_mutator, delete_mutator, update_mutator
from .errors import MutationError, build_error_list, build_mutation_error

logger = logging.getLogger(__name__)


class BaseCollectionMutation(graphene.Mutation):
    """
    Base mutation class for collection mutations.

    Subclasses are produced by the factories below, which set
    ``collection``, ``callbacks``, ``pipeline_builder`` and ``action``.
    """

    class Meta:
        abstract = True

    collection: Collection = None
    callbacks: Optional[CallbackRegistry] = None
    pipeline_builder: Optional[PipelineBuilder] = None
    action: str = None

    ok = graphene.Boolean()
    errors = graphene.List(MutationError)

    @classmethod
    def run_mutator(cls, info, **kwargs) -> Any:
        raise NotImplementedError("Subclasses must implement run_mutator")

    @classmethod
    def mutate(cls, root, info, **kwargs):
        try:
            result = cls.run_mutator(info, **kwargs)
        except CollectionForgeError as exc:
            return cls(ok=False, object=None, errors=build_error_list(exc))
        except Exception as exc:
            logger.exception(
                "%s %s mutation failed", cls.collection.type_name, cls.action
            )
            return cls(ok=False, object=None, errors=[build_mutation_error(str(exc))])
        return cls(ok=True, object=result.data, errors=[])

    @classmethod
    def mutator_options(cls, info) -> dict[str, Any]:
        context = getattr(info, "context", None)
        return {
            "current_user": getattr(context, "user", None),
            "context": context,
            "callbacks": cls.callbacks,
            "pipeline_builder": cls.pipeline_builder,
        }


def create_mutation_factory(
    collection: Collection,
    object_type: Type[graphene.ObjectType],
    input_type: Type[graphene.InputObjectType],
    callbacks: Optional[CallbackRegistry] = None,
    pipeline_builder: Optional[PipelineBuilder] = None,
) -> Type[graphene.Mutation]:
    """Build ``create<Type>(input: Create<Type>Input!)``."""
    type_name = collection.type_name

    class CreateMutation(BaseCollectionMutation):
        class Meta:
            name = f"Create{type_name}"
            description = f"Create a new {type_name} document"

        class Arguments:
            input = input_type(required=True)

        object = graphene.Field(object_type)

        @classmethod
        def run_mutator(cls, info, **kwargs):
            return create_mutator(
                cls.collection, dict(kwargs.get("input") or {}), **cls.mutator_options(info)
            )

    CreateMutation.collection = collection
    CreateMutation.callbacks = callbacks
    CreateMutation.pipeline_builder = pipeline_builder
    CreateMutation.action = "create"
    return CreateMutation


def update_mutation_factory(
    collection: Collection,
    object_type: Type[graphene.ObjectType],
    input_type: Type[graphene.InputObjectType],
    callbacks: Optional[CallbackRegistry] = None,
    pipeline_builder: Optional[PipelineBuilder] = None,
) -> Type[graphene.Mutation]:
    """Build ``update<Type>(id: ID!, input: Update<Type>Input!)``."""
    type_name = collection.type_name

    class UpdateMutation(BaseCollectionMutation):
        class Meta:
            name = f"Update{type_name}"
            description = f"Update a {type_name} document"

        class Arguments:
            id = graphene.ID(required=True)
            input = input_type(required=True)

        object = graphene.Field(object_type)

        @classmethod
        def run_mutator(cls, info, **kwargs):
            return update_mutator(
                cls.collection,
                kwargs.get("id"),
                dict(kwargs.get("input") or {}),
                **cls.mutator_options(info),
            )

    UpdateMutation.collection = collection
    UpdateMutation.callbacks = callbacks
    UpdateMutation.pipeline_builder = pipeline_builder
    UpdateMutation.action = "update"
    return UpdateMutation


def delete_mutation_factory(
    collection: Collection,
    object_type: Type[graphene.ObjectType],
    callbacks: Optional[CallbackRegistry] = None,
    pipeline_builder: Optional[PipelineBuilder] = None,
) -> Type[graphene.Mutation]:
    """Build ``delete<Type>(id: ID!)``."""
    type_name = collection.type_name

    class DeleteMutation(BaseCollectionMutation):
        class Meta:
            name = f"Delete{type_name}"
            description = f"Delete a {type_name} document"

        class Arguments:
            id = graphene.ID(required=True)

        object = graphene.Field(object_type)

        @classmethod
        def run_mutator(cls, info, **kwargs):
            return delete_mutator(cls.collection, kwargs.get("id"), **cls.mutator_options(info))

    DeleteMutation.collection = collection
    DeleteMutation.callbacks = callbacks
    DeleteMutation.pipeline_builder = pipeline_builder
    DeleteMutation.action = "delete"
    return DeleteMutation
