"""
GraphQL type generation for collections.

Object types expose every field that grants read access to at least one
group; the values a given user actually sees are decided when documents
are projected through ``CollectionSchema.restrict_view``.
"""

import logging
from typing import Any, Optional, Type

import graphene
from graphene.types.generic import GenericScalar

from ..core.collection import Collection
from ..core.permissions import Operation
from ..core.schema import ID_FIELD, FieldSpec

logger = logging.getLogger(__name__)

SCALAR_MAPPING: dict[type, Type[graphene.Scalar]] = {
    str: graphene.String,
    int: graphene.Int,
    float: graphene.Float,
    bool: graphene.Boolean,
    dict: GenericScalar,
    list: GenericScalar,
}


def scalar_for(spec: FieldSpec) -> Type[graphene.Scalar]:
    return SCALAR_MAPPING.get(spec.type, graphene.String)


class TypeGenerator:
    """Builds (and caches) the graphene types of each collection."""

    def __init__(self):
        self._object_types: dict[str, Type[graphene.ObjectType]] = {}
        self._input_types: dict[tuple[str, str], Type[graphene.InputObjectType]] = {}

    def generate_object_type(self, collection: Collection) -> Type[graphene.ObjectType]:
        cached = self._object_types.get(collection.collection_name)
        if cached is not None:
            return cached

        attrs: dict[str, Any] = {}
        for field_name in collection.schema.fields_with_rule(Operation.READ):
            spec = collection.schema[field_name]
            if field_name == ID_FIELD:
                attrs[field_name] = graphene.ID(name=ID_FIELD, description="Document id")
                continue
            attrs[field_name] = graphene.Field(
                scalar_for(spec), name=field_name, description=spec.description
            )
        if ID_FIELD not in attrs:
            attrs[ID_FIELD] = graphene.ID(name=ID_FIELD, description="Document id")

        attrs["Meta"] = type(
            "Meta",
            (),
            {
                "name": collection.type_name,
                "description": collection.description or f"{collection.type_name} document",
            },
        )
        object_type = type(collection.type_name, (graphene.ObjectType,), attrs)
        self._object_types[collection.collection_name] = object_type
        logger.debug("Generated object type %s", collection.type_name)
        return object_type

    def generate_input_type(
        self, collection: Collection, mutation_type: str = "create"
    ) -> Optional[Type[graphene.InputObjectType]]:
        """
        Build ``Create<Type>Input`` or ``Update<Type>Input``.

        Every input field is optional at the GraphQL level; required fields
        are enforced by the mutators so the client gets structured errors.
        Returns None when no field is writable for ``mutation_type``.
        """
        key = (collection.collection_name, mutation_type)
        if key in self._input_types:
            return self._input_types[key]

        operation = Operation.CREATE if mutation_type == "create" else Operation.UPDATE
        attrs: dict[str, Any] = {}
        for field_name in collection.schema.fields_with_rule(operation):
            spec = collection.schema[field_name]
            attrs[field_name] = graphene.InputField(
                scalar_for(spec), name=field_name, description=spec.description
            )
        if not attrs:
            self._input_types[key] = None
            return None

        type_name = f"{mutation_type.capitalize()}{collection.type_name}Input"
        attrs["Meta"] = type("Meta", (), {"name": type_name})
        input_type = type(type_name, (graphene.InputObjectType,), attrs)
        self._input_types[key] = input_type
        return input_type
