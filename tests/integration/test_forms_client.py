"""
Integration tests for the GraphQL client and forms running against a real schema.
"""

from unittest.mock import patch

import pytest

from collection_forge.core.settings import FormSettings
from collection_forge.forms import FormWrapper
from collection_forge.graphql import GraphQLClient
from collection_forge.mutators import create_mutator
from collection_forge.testing import build_context, build_schema

pytestmark = [pytest.mark.integration, pytest.mark.django_db]

LIST_FOO2S = "{ foo2s { foo2 } }"


@pytest.fixture
def schema(foo2s, posts, callbacks):
    return build_schema([foo2s, posts], callbacks=callbacks).schema


@pytest.fixture
def client(schema):
    return GraphQLClient(schema, context=build_context())


class TestFetchPolicies:
    def test_cache_first_reuses_result(self, client, foo2s):
        create_mutator(foo2s, {"foo2": "one"})
        first = client.query(LIST_FOO2S)
        create_mutator(foo2s, {"foo2": "two"})

        second = client.query(LIST_FOO2S, fetch_policy="cache-first")

        assert second.data == first.data == {"foo2s": [{"foo2": "one"}]}

    def test_network_only_refreshes_cache(self, client, foo2s):
        create_mutator(foo2s, {"foo2": "one"})
        client.query(LIST_FOO2S)
        create_mutator(foo2s, {"foo2": "two"})

        fresh = client.query(LIST_FOO2S, fetch_policy="network-only")
        cached = client.query(LIST_FOO2S, fetch_policy="cache-first")

        assert len(fresh.data["foo2s"]) == 2
        assert cached.data == fresh.data

    def test_no_cache_does_not_store(self, client, schema):
        with patch.object(schema, "execute", wraps=schema.execute) as execute:
            client.query(LIST_FOO2S, fetch_policy="no-cache")
            client.query(LIST_FOO2S, fetch_policy="cache-first")

        assert execute.call_count == 2

    def test_mutation_clears_cache(self, client, foo2s):
        client.query(LIST_FOO2S)

        client.mutate('mutation { createFoo2(input: {foo2: "new"}) { ok } }')

        assert client.query(LIST_FOO2S).data == {"foo2s": [{"foo2": "new"}]}

    def test_unknown_policy(self, client):
        with pytest.raises(ValueError):
            client.query(LIST_FOO2S, fetch_policy="cache-only")

    def test_errors_are_reported(self, client):
        result = client.query("{ nope }")

        assert result.ok is False
        assert result.errors

    def test_execute_async_without_executor_is_resolved(self, client):
        future = client.execute_async(LIST_FOO2S)

        assert future.done()
        assert future.result().data == {"foo2s": []}


class TestForms:
    def test_new_form_creates_document(self, client, foo2s):
        wrapper = FormWrapper(foo2s, client=client, settings=FormSettings())

        outcome = wrapper.render()["submit"]({"foo2": "from form"})

        assert outcome["ok"] is True
        assert outcome["document"]["foo2"] == "from form"
        assert outcome["document"]["publicAuto"] == "CREATED"
        assert foo2s.count() == 1

    def test_new_form_surfaces_validation_errors(self, client, foo2s):
        wrapper = FormWrapper(foo2s, client=client, settings=FormSettings())

        outcome = wrapper.render()["submit"]({})

        assert outcome["ok"] is False
        assert outcome["errors"][0]["code"] == "required"

    def test_edit_form_loads_updates_and_deletes(self, client, foo2s):
        created = create_mutator(foo2s, {"foo2": "bar"}).data
        wrapper = FormWrapper(
            foo2s, document_id=created["_id"], client=client, settings=FormSettings()
        )

        rendered = wrapper.render()
        assert rendered["component"] == "Form"
        assert rendered["document"]["foo2"] == "bar"

        updated = rendered["submit"]({"foo2": "baz"})
        assert updated["ok"] is True
        assert updated["document"]["publicAuto"] == "UPDATED"

        removed = rendered["remove"]()
        assert removed["ok"] is True
        assert foo2s.count() == 0

    def test_edit_form_by_slug(self, posts, member, schema):
        client = GraphQLClient(schema, user=member)
        create_mutator(posts, {"title": "Hello", "slug": "hello"}, current_user=member)

        rendered = FormWrapper(
            posts, slug="hello", client=client, current_user=member, settings=FormSettings()
        ).render()

        assert rendered["document"]["title"] == "Hello"
        assert [field["name"] for field in rendered["fields"]] == ["title"]
