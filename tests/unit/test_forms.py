"""
Unit tests for the form wrapper and its adapters, using a stub client.
"""

from concurrent.futures import Future
from unittest.mock import Mock

import pytest

from collection_forge.core import GUESTS, CollectionSchema
from collection_forge.core.settings import FormSettings
from collection_forge.forms import (
    Form,
    FormWrapper,
    QueryOptions,
    SingleDocumentLoader,
    compose,
    make_loader,
    with_single,
)
from collection_forge.fragments import FragmentRegistry, main_fragment_name
from collection_forge.graphql.client import QueryResult

pytestmark = pytest.mark.unit


class StubClient:
    """Client whose fetches resolve only when the test says so."""

    def __init__(self):
        self.futures = []
        self.calls = []
        self.mutate = Mock(
            return_value=QueryResult(
                data={"updateFoo2": {"ok": True, "errors": [], "object": {"_id": "abc"}}}
            )
        )

    def execute_async(self, source, variables=None, **kwargs):
        self.calls.append((source, variables, kwargs))
        future = Future()
        self.futures.append(future)
        return future


def _settings():
    return FormSettings()


def test_compose_applies_right_to_left():
    def tag(name):
        def wrapper(component):
            def wrapped(**props):
                return component(**{**props, "trail": props.get("trail", []) + [name]})

            return wrapped

        return wrapper

    component = compose(tag("outer"), tag("inner"))(lambda **props: props["trail"])

    assert component() == ["outer", "inner"]


def test_loader_gate():
    form = Mock(return_value={"component": "Form"})
    loading = Mock(return_value={"component": "Loading"})
    loader = make_loader(form, loading, {"form_type": "edit"})

    assert loader(loading=True) == {"component": "Loading"}
    assert loader(loading=False, document={"_id": "a"}) == {"component": "Form"}
    form.assert_called_once_with(form_type="edit", loading=False, document={"_id": "a"})


class TestFormType:
    def test_new_without_document(self, foo2s):
        assert FormWrapper(foo2s, settings=_settings()).get_form_type() == "new"

    def test_edit_with_document_id_or_slug(self, foo2s):
        assert FormWrapper(foo2s, document_id="a", settings=_settings()).get_form_type() == "edit"
        assert FormWrapper(foo2s, slug="a", settings=_settings()).get_form_type() == "edit"


class TestFragments:
    def test_generated_by_default(self, foo2s):
        query_fragment, mutation_fragment = FormWrapper(foo2s, settings=_settings()).get_fragments()

        assert main_fragment_name(query_fragment) == "Foo2sNewFormQueryFragment"
        assert main_fragment_name(mutation_fragment) == "Foo2sNewFormMutationFragment"

    def test_explicit_fragment_beats_named_fragment(self, foo2s):
        registry = FragmentRegistry()
        registry.register_fragment("fragment NamedFoo on Foo2 { _id }")

        wrapper = FormWrapper(
            foo2s,
            query_fragment="fragment ExplicitFoo on Foo2 { _id foo2 }",
            query_fragment_name="NamedFoo",
            mutation_fragment_name="NamedFoo",
            fragment_registry=registry,
            settings=_settings(),
        )
        query_fragment, mutation_fragment = wrapper.get_fragments()

        assert main_fragment_name(query_fragment) == "ExplicitFoo"
        assert main_fragment_name(mutation_fragment) == "NamedFoo"


class TestNewForm:
    def test_renders_form_with_create_action(self, foo2s):
        client = StubClient()
        wrapper = FormWrapper(foo2s, client=client, settings=_settings())

        rendered = wrapper.render()

        assert rendered["component"] == "Form"
        assert rendered["form_type"] == "new"
        assert [field["name"] for field in rendered["fields"]] == ["foo2", "publicAuto"]
        assert callable(rendered["submit"])
        assert client.calls == []

    def test_component_is_built_once(self, foo2s):
        wrapper = FormWrapper(foo2s, client=StubClient(), settings=_settings())
        component = wrapper.component

        wrapper.render()
        wrapper.render(layout="vertical")

        assert wrapper.component is component

    def test_render_props_override_stored_props(self, foo2s):
        wrapper = FormWrapper(foo2s, client=StubClient(), settings=_settings())

        assert wrapper.render()["layout"] == "horizontal"
        assert wrapper.render(layout="vertical")["layout"] == "vertical"


class TestEditForm:
    def test_shows_loading_until_fetch_resolves(self, foo2s):
        client = StubClient()
        wrapper = FormWrapper(foo2s, document_id="abc", client=client, settings=_settings())

        assert wrapper.render() == {"component": "Loading"}
        assert wrapper.render() == {"component": "Loading"}
        assert len(client.calls) == 1

        client.futures[0].set_result(QueryResult(data={"foo2": {"_id": "abc", "foo2": "bar"}}))
        rendered = wrapper.render()

        assert rendered["component"] == "Form"
        assert rendered["form_type"] == "edit"
        assert rendered["document"] == {"_id": "abc", "foo2": "bar"}
        assert rendered["fields"][0] == {
            "name": "foo2",
            "type": "str",
            "label": "foo2",
            "optional": False,
            "value": "bar",
        }
        assert len(client.calls) == 1

    def test_single_query_options(self, foo2s):
        client = StubClient()
        wrapper = FormWrapper(foo2s, document_id="abc", client=client, settings=_settings())

        wrapper.render()

        source, variables, kwargs = client.calls[0]
        assert "query Foo2sEditFormQuery($id: ID, $slug: String)" in source
        assert "...Foo2sEditFormQueryFragment" in source
        assert variables == {"id": "abc", "slug": None}
        assert kwargs == {"fetch_policy": "no-cache"}

    def test_update_uses_loaded_document_id(self, foo2s):
        client = StubClient()
        wrapper = FormWrapper(foo2s, document_id="abc", client=client, settings=_settings())
        wrapper.render()
        client.futures[0].set_result(QueryResult(data={"foo2": {"_id": "abc", "foo2": "bar"}}))

        outcome = wrapper.render()["submit"]({"foo2": "baz"})

        source, variables = client.mutate.call_args.args
        assert "updateFoo2(id: $id, input: $input)" in source
        assert variables == {"id": "abc", "input": {"foo2": "baz"}}
        assert outcome == {"ok": True, "document": {"_id": "abc"}, "errors": []}

    def test_failed_fetch_reports_error(self, foo2s):
        client = StubClient()
        wrapper = FormWrapper(foo2s, document_id="abc", client=client, settings=_settings())
        wrapper.render()
        client.futures[0].set_exception(RuntimeError("offline"))

        rendered = wrapper.render()

        assert rendered["component"] == "Form"
        assert rendered["document"] is None


class TestSingleDocumentLoader:
    def _loader(self, foo2s, enable_cache=False):
        query_fragment, _ = FormWrapper(foo2s, document_id="a", settings=_settings()).get_fragments()
        options = QueryOptions(
            collection=foo2s,
            fragment=query_fragment,
            query_name="Foo2sEditFormQuery",
            enable_cache=enable_cache,
        )
        return with_single(options)(lambda **props: props)

    def test_refetch_waits_for_outstanding_request(self, foo2s):
        client = StubClient()
        loader = self._loader(foo2s)

        props = loader(client=client, selector={"document_id": "a"})
        props["refetch"]()
        assert len(client.calls) == 1

        client.futures[0].set_result(QueryResult(data={"foo2": {"_id": "a"}}))
        loader(client=client, selector={"document_id": "a"})["refetch"]()

        assert len(client.calls) == 2
        assert isinstance(loader, SingleDocumentLoader)
        assert loader.fetch_count == 2

    def test_cache_enabled_keeps_network_only(self, foo2s):
        assert self._loader(foo2s, enable_cache=True).fetch_policy == "network-only"

    def test_synchronous_client(self, foo2s):
        client = Mock(spec=["query"])
        client.query.return_value = QueryResult(data={"foo2": {"_id": "a"}})
        loader = self._loader(foo2s)

        props = loader(client=client, selector={"document_id": "a"})

        assert props["loading"] is False
        assert props["document"] == {"_id": "a"}

    def test_missing_client(self, foo2s):
        with pytest.raises(ValueError):
            self._loader(foo2s)(selector={"document_id": "a"})


class TestFormDefaults:
    schema = CollectionSchema(
        {
            "title": {"type": str, "canCreate": [GUESTS], "canUpdate": [GUESTS]},
            "tags": {
                "type": list,
                "optional": True,
                "canCreate": [GUESTS],
                "canUpdate": [GUESTS],
                "default": ["draft"],
            },
            "status": {
                "type": str,
                "optional": True,
                "canCreate": [GUESTS],
                "canUpdate": [GUESTS],
                "default": "open",
            },
        }
    )

    def _values(self, rendered):
        return {field["name"]: field["value"] for field in rendered["fields"]}

    def test_new_form_starts_from_defaults(self):
        rendered = Form(form_type="new", schema=self.schema)

        assert self._values(rendered) == {"title": None, "tags": ["draft"], "status": "open"}

    def test_prefilled_props_override_defaults(self):
        rendered = Form(form_type="new", schema=self.schema, prefilled_props={"status": "closed"})

        assert self._values(rendered)["status"] == "closed"

    def test_defaults_are_copied(self):
        Form(form_type="new", schema=self.schema)["fields"][1]["value"].append("x")

        assert self.schema["tags"].default == ["draft"]

    def test_edit_form_ignores_defaults(self):
        rendered = Form(form_type="edit", schema=self.schema, document={"_id": "a", "title": "T"})

        assert self._values(rendered) == {"title": "T", "tags": None, "status": None}
