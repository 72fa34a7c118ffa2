"""
Fragments generated from a collection schema for forms.
"""

from typing import Iterable, Optional

from graphql import DocumentNode, parse

from ..core.permissions import Operation
from ..core.schema import ID_FIELD, CollectionSchema

USER_ID_FIELD = "user_id"


def form_fragment_name(collection_name: str, form_type: str, kind: str) -> str:
    """``Foo2sNewFormQueryFragment``, ``Foo2sEditFormMutationFragment``..."""
    return f"{collection_name}{form_type.capitalize()}Form{kind.capitalize()}Fragment"


def build_fragment(name: str, type_name: str, field_names: Iterable[str]) -> DocumentNode:
    body = "\n".join(f"  {field_name}" for field_name in field_names)
    return parse(f"fragment {name} on {type_name} {{\n{body}\n}}")


def _select(
    candidates: list[str],
    schema: CollectionSchema,
    fields: Optional[Iterable[str]],
    add_fields: Optional[Iterable[str]],
) -> list[str]:
    if fields is not None:
        wanted = set(fields)
        candidates = [name for name in candidates if name in wanted]

    selected = [ID_FIELD]
    for name in list(candidates) + list(add_fields or []):
        if name not in selected:
            selected.append(name)
    if (
        USER_ID_FIELD in schema
        and schema[USER_ID_FIELD].rule_for(Operation.READ) is not None
        and USER_ID_FIELD not in selected
    ):
        selected.append(USER_ID_FIELD)
    return selected


def get_form_fragments(
    form_type: str,
    collection_name: str,
    type_name: str,
    schema: CollectionSchema,
    fields: Optional[Iterable[str]] = None,
    add_fields: Optional[Iterable[str]] = None,
) -> tuple[DocumentNode, DocumentNode]:
    """
    Generate the query and mutation fragments of a form.

    The query fragment loads ``_id`` plus the fields that are readable and
    writable for the form type (creatable for "new", updatable for "edit").
    The mutation fragment asks for ``_id`` plus every readable field.
    ``fields`` restricts both selections, ``add_fields`` extends both, and
    ``user_id`` is always requested when the schema declares it.

    Returns:
        (query_fragment, mutation_fragment)
    """
    if form_type not in ("new", "edit"):
        raise ValueError(f"Unknown form type '{form_type}'")

    readable = schema.fields_with_rule(Operation.READ)
    write_operation = Operation.CREATE if form_type == "new" else Operation.UPDATE
    writable = set(schema.fields_with_rule(write_operation))
    query_candidates = [name for name in readable if name in writable]

    query_fragment = build_fragment(
        form_fragment_name(collection_name, form_type, "query"),
        type_name,
        _select(query_candidates, schema, fields, add_fields),
    )
    mutation_fragment = build_fragment(
        form_fragment_name(collection_name, form_type, "mutation"),
        type_name,
        _select(readable, schema, fields, add_fields),
    )
    return query_fragment, mutation_fragment
