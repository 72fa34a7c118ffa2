"""
Form wrapper.

Picks the form type ("new" when no document is selected, "edit" otherwise),
resolves the query and mutation fragments, and wraps the form component with
the matching data-binding adapters::

    "new":  with_create(Form)
    "edit": with_single(with_update(with_delete(Loader)))

The composed component is built once, in the constructor; ``render`` only
merges props into it.
"""

import logging
from typing import Any, Iterable, Optional, Union

from graphql import DocumentNode

from ..core.collection import Collection
from ..core.schema import CollectionSchema
from ..core.settings import FormSettings
from ..fragments.generation import get_form_fragments
from ..fragments.registry import FragmentRegistry
from ..fragments.sources import (
    ExplicitFragment,
    GeneratedFragment,
    NamedFragment,
    resolve_fragment,
)
from .adapters import (
    MutationOptions,
    QueryOptions,
    compose,
    with_create,
    with_delete,
    with_single,
    with_update,
)
from .components import ComponentElement, Form, Loading, make_loader

logger = logging.getLogger(__name__)

FragmentInput = Union[str, DocumentNode, None]


class FormWrapper:
    """
    Build a form for a collection.

    Args:
        collection: Target collection
        collection_name: Defaults to ``collection.collection_name``
        type_name: Defaults to ``collection.type_name``
        document_id: Makes this an edit form
        slug: Makes this an edit form selecting by slug
        schema: Overrides the collection schema
        fields: Restricts the fields requested and shown
        add_fields: Extra fields to request and show
        query_fragment / mutation_fragment: GraphQL string or parsed document
        query_fragment_name / mutation_fragment_name: Registered fragment names
        client: ``GraphQLClient`` used by the adapters
        current_user: User the form is rendered for
        **props: Passed on to the form component (``layout``, ``hide_fields``...)
    """

    def __init__(
        self,
        collection: Collection,
        *,
        collection_name: Optional[str] = None,
        type_name: Optional[str] = None,
        document_id: Optional[str] = None,
        slug: Optional[str] = None,
        schema: Optional[CollectionSchema] = None,
        fields: Optional[Iterable[str]] = None,
        add_fields: Optional[Iterable[str]] = None,
        query_fragment: FragmentInput = None,
        query_fragment_name: Optional[str] = None,
        mutation_fragment: FragmentInput = None,
        mutation_fragment_name: Optional[str] = None,
        client: Any = None,
        current_user: Any = None,
        fragment_registry: Optional[FragmentRegistry] = None,
        settings: Optional[FormSettings] = None,
        form_component=Form,
        loading_component=Loading,
        **props: Any,
    ):
        self.collection = collection
        self.collection_name = collection_name or collection.collection_name
        self.type_name = type_name or collection.type_name
        self.document_id = document_id
        self.slug = slug
        self.schema_override = schema
        self.fields = list(fields) if fields is not None else None
        self.add_fields = list(add_fields) if add_fields is not None else None
        self.query_fragment = query_fragment
        self.query_fragment_name = query_fragment_name
        self.mutation_fragment = mutation_fragment
        self.mutation_fragment_name = mutation_fragment_name
        self.fragment_registry = fragment_registry
        self.settings = settings or FormSettings.from_settings()
        self.form_component = form_component
        self.loading_component = loading_component
        self.props = {
            "client": client,
            "current_user": current_user,
            "layout": self.settings.default_layout,
            **props,
        }

        self.component = self.get_component()

    def get_schema(self) -> CollectionSchema:
        return self.schema_override if self.schema_override is not None else self.collection.schema

    def get_form_type(self) -> str:
        return "edit" if self.document_id or self.slug else "new"

    def get_fragments(self) -> tuple[DocumentNode, DocumentNode]:
        """Return ``(query_fragment, mutation_fragment)``."""
        generated_query, generated_mutation = get_form_fragments(
            form_type=self.get_form_type(),
            collection_name=self.collection_name,
            type_name=self.type_name,
            schema=self.get_schema(),
            fields=self.fields,
            add_fields=self.add_fields,
        )
        query_fragment = resolve_fragment(
            ExplicitFragment(self.query_fragment),
            NamedFragment(self.query_fragment_name),
            GeneratedFragment(generated_query),
            registry=self.fragment_registry,
        )
        mutation_fragment = resolve_fragment(
            ExplicitFragment(self.mutation_fragment),
            NamedFragment(self.mutation_fragment_name),
            GeneratedFragment(generated_mutation),
            registry=self.fragment_registry,
        )
        return query_fragment, mutation_fragment

    def get_component(self) -> ComponentElement:
        form_type = self.get_form_type()
        prefix = f"{self.collection_name}{form_type.capitalize()}"
        query_fragment, mutation_fragment = self.get_fragments()

        child_props = {
            "form_type": form_type,
            "schema": self.get_schema(),
            "fields": self.fields,
            "add_fields": self.add_fields,
        }
        mutation_options = MutationOptions(collection=self.collection, fragment=mutation_fragment)

        if form_type == "edit":
            query_options = QueryOptions(
                collection=self.collection,
                fragment=query_fragment,
                query_name=f"{prefix}FormQuery",
                fetch_policy=self.settings.query_fetch_policy,
                poll_interval=self.settings.query_poll_interval,
                enable_cache=self.settings.enable_cache,
            )
            loader = make_loader(self.form_component, self.loading_component, child_props)
            wrapped = compose(
                with_single(query_options),
                with_update(mutation_options),
                with_delete(mutation_options),
            )(loader)
            logger.debug("Built edit form %s", prefix)
            return ComponentElement(
                wrapped,
                {"selector": {"document_id": self.document_id, "slug": self.slug}},
            )

        wrapped = compose(with_create(mutation_options))(self.form_component)
        logger.debug("Built new form %s", prefix)
        return ComponentElement(wrapped, dict(child_props))

    def render(self, **props: Any) -> dict[str, Any]:
        return self.component.clone(**self.props).render(**props)
