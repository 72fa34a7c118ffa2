"""
Data-binding adapters for form components.

Each ``with_*`` function takes options and returns a wrapper that, given a
component, returns a new component with extra props injected:

* ``with_single`` loads one document and injects ``document``, ``loading``,
  ``error`` and ``refetch``;
* ``with_create`` injects ``create_document(data)``;
* ``with_update`` injects ``update_document(data, document_id=None)``;
* ``with_delete`` injects ``delete_document(document_id=None)``.

The GraphQL client is taken from the ``client`` prop at render time.
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Optional

from graphql import DocumentNode, print_ast

from ..core.collection import Collection
from ..fragments.sources import main_fragment_name
from .components import Component

logger = logging.getLogger(__name__)

ERROR_SELECTION = "errors { field message code }"


def compose(*wrappers: Callable[[Component], Component]) -> Callable[[Component], Component]:
    """``compose(f, g, h)(component) == f(g(h(component)))``."""

    def composed(component: Component) -> Component:
        return reduce(lambda wrapped, wrapper: wrapper(wrapped), reversed(wrappers), component)

    return composed


@dataclass
class QueryOptions:
    collection: Collection
    fragment: DocumentNode
    query_name: str
    fetch_policy: str = "network-only"
    poll_interval: int = 0
    enable_cache: bool = False


@dataclass
class MutationOptions:
    collection: Collection
    fragment: DocumentNode


def _require_client(props: dict[str, Any]) -> Any:
    client = props.get("client")
    if client is None:
        raise ValueError("Form adapters need a 'client' prop")
    return client


def build_single_query(options: QueryOptions) -> str:
    collection = options.collection
    fragment_name = main_fragment_name(options.fragment)
    return (
        f"query {options.query_name}($id: ID, $slug: String) {{\n"
        f"  {collection.single_query_name}(id: $id, slug: $slug) {{ ...{fragment_name} }}\n"
        f"}}\n{print_ast(options.fragment)}"
    )


class SingleDocumentLoader:
    """
    Component that fetches one document and passes it to ``component``.

    One instance corresponds to one mounted form: it starts a single fetch
    the first time it renders and never starts another while that one is
    outstanding. ``refetch`` starts a new fetch once the previous one is done.
    """

    def __init__(self, component: Component, options: QueryOptions):
        self.component = component
        self.options = options
        self.query = build_single_query(options)
        self._future: Optional[Future] = None
        self._result: Any = None
        self.fetch_count = 0
        self.__name__ = f"with_single({getattr(component, '__name__', 'Component')})"

    @property
    def fetch_policy(self) -> str:
        if not self.options.enable_cache and self.options.fetch_policy == "network-only":
            return "no-cache"
        return self.options.fetch_policy

    @property
    def loading(self) -> bool:
        return self._future is not None and not self._future.done()

    def _start(self, props: dict[str, Any]) -> None:
        client = _require_client(props)
        selector = props.get("selector") or {}
        variables = {
            "id": selector.get("document_id") or props.get("document_id"),
            "slug": selector.get("slug") or props.get("slug"),
        }
        self.fetch_count += 1
        logger.debug("Fetching %s with %s", self.options.query_name, variables)
        if hasattr(client, "execute_async"):
            outcome = client.execute_async(self.query, variables, fetch_policy=self.fetch_policy)
        else:
            outcome = client.query(self.query, variables, fetch_policy=self.fetch_policy)
        if not isinstance(outcome, Future):
            future: Future = Future()
            future.set_result(outcome)
            outcome = future
        self._future = outcome

    def refetch(self, **props: Any) -> None:
        if self.loading:
            return
        self._future = None
        self._result = None
        self._start(props)

    def _loaded_props(self) -> dict[str, Any]:
        if self.loading:
            return {"loading": True, "document": None, "error": None}
        try:
            result = self._future.result()
        except Exception as exc:
            logger.warning("%s failed: %s", self.options.query_name, exc)
            return {"loading": False, "document": None, "error": str(exc)}
        errors = list(getattr(result, "errors", None) or [])
        data = getattr(result, "data", None) or {}
        document = data.get(self.options.collection.single_query_name)
        return {
            "loading": False,
            "document": document,
            "error": "; ".join(errors) if errors else None,
        }

    def __call__(self, **props: Any) -> dict[str, Any]:
        if self._future is None:
            self._start(props)
        injected = self._loaded_props()
        injected["refetch"] = lambda: self.refetch(**props)
        return self.component(**{**props, **injected})


def with_single(options: QueryOptions) -> Callable[[Component], Component]:
    def wrapper(component: Component) -> Component:
        return SingleDocumentLoader(component, options)

    return wrapper


def _mutation_result(result: Any, field_name: str) -> dict[str, Any]:
    errors = list(getattr(result, "errors", None) or [])
    payload = (getattr(result, "data", None) or {}).get(field_name) or {}
    return {
        "ok": bool(payload.get("ok")) and not errors,
        "document": payload.get("object"),
        "errors": list(payload.get("errors") or []) + [{"message": e} for e in errors],
    }


def _object_selection(fragment: DocumentNode) -> str:
    return f"object {{ ...{main_fragment_name(fragment)} }}"


def with_create(options: MutationOptions) -> Callable[[Component], Component]:
    type_name = options.collection.type_name
    field_name = f"create{type_name}"
    mutation = (
        f"mutation {field_name}($input: Create{type_name}Input!) {{\n"
        f"  {field_name}(input: $input) {{ ok {ERROR_SELECTION} "
        f"{_object_selection(options.fragment)} }}\n"
        f"}}\n{print_ast(options.fragment)}"
    )

    def wrapper(component: Component) -> Component:
        def CreateComponent(**props: Any) -> dict[str, Any]:
            def create_document(data: dict[str, Any]) -> dict[str, Any]:
                result = _require_client(props).mutate(mutation, {"input": data})
                return _mutation_result(result, field_name)

            return component(**{**props, "create_document": create_document})

        CreateComponent.__name__ = f"with_create({getattr(component, '__name__', 'Component')})"
        CreateComponent.mutation = mutation
        return CreateComponent

    return wrapper


def _target_id(props: dict[str, Any], document_id: Optional[str]) -> Optional[str]:
    if document_id:
        return document_id
    document = props.get("document") or {}
    selector = props.get("selector") or {}
    return document.get("_id") or selector.get("document_id") or props.get("document_id")


def with_update(options: MutationOptions) -> Callable[[Component], Component]:
    type_name = options.collection.type_name
    field_name = f"update{type_name}"
    mutation = (
        f"mutation {field_name}($id: ID!, $input: Update{type_name}Input!) {{\n"
        f"  {field_name}(id: $id, input: $input) {{ ok {ERROR_SELECTION} "
        f"{_object_selection(options.fragment)} }}\n"
        f"}}\n{print_ast(options.fragment)}"
    )

    def wrapper(component: Component) -> Component:
        def UpdateComponent(**props: Any) -> dict[str, Any]:
            def update_document(
                data: dict[str, Any], document_id: Optional[str] = None
            ) -> dict[str, Any]:
                variables = {"id": _target_id(props, document_id), "input": data}
                result = _require_client(props).mutate(mutation, variables)
                return _mutation_result(result, field_name)

            return component(**{**props, "update_document": update_document})

        UpdateComponent.__name__ = f"with_update({getattr(component, '__name__', 'Component')})"
        UpdateComponent.mutation = mutation
        return UpdateComponent

    return wrapper


def with_delete(options: MutationOptions) -> Callable[[Component], Component]:
    type_name = options.collection.type_name
    field_name = f"delete{type_name}"
    mutation = (
        f"mutation {field_name}($id: ID!) {{\n"
        f"  {field_name}(id: $id) {{ ok {ERROR_SELECTION} object {{ _id }} }}\n"
        f"}}"
    )

    def wrapper(component: Component) -> Component:
        def DeleteComponent(**props: Any) -> dict[str, Any]:
            def delete_document(document_id: Optional[str] = None) -> dict[str, Any]:
                variables = {"id": _target_id(props, document_id)}
                result = _require_client(props).mutate(mutation, variables)
                return _mutation_result(result, field_name)

            return component(**{**props, "delete_document": delete_document})

        DeleteComponent.__name__ = f"with_delete({getattr(component, '__name__', 'Component')})"
        DeleteComponent.mutation = mutation
        return DeleteComponent

    return wrapper
