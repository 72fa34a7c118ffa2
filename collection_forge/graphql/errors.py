"""
Mutation error helpers.
"""

from typing import Any, Optional

import graphene

from ..core.exceptions import CollectionForgeError, ValidationError


class MutationError(graphene.ObjectType):
    """
    Structured error type for GraphQL mutations.

    Attributes:
        field: The field name where the error occurred (optional)
        message: The error message describing what went wrong
        code: Optional machine-readable error code
    """

    field = graphene.String(description="Name of the field the error relates to")
    message = graphene.String(description="What went wrong")
    code = graphene.String(description="Machine-readable error code")


def build_mutation_error(
    message: Any, field: Optional[str] = None, code: Optional[str] = None
) -> MutationError:
    return MutationError(field=field, message=str(message), code=code)


def build_validation_errors(error: ValidationError) -> list[MutationError]:
    """Convert a ValidationError into a flat list of MutationError objects."""
    return [
        build_mutation_error(item.get("message"), field=item.get("field"), code=item.get("code"))
        for item in error.errors
    ] or [build_mutation_error(error.message, code=error.code)]


def build_error_list(error: CollectionForgeError) -> list[MutationError]:
    if isinstance(error, ValidationError):
        return build_validation_errors(error)
    return [build_mutation_error(error.message, field=error.field, code=error.code)]
