"""
Unit tests for actors, permission rules and schema-level permission checks.
"""

from types import SimpleNamespace

import pytest
from django.contrib.auth.models import AnonymousUser

from collection_forge.core import (
    ADMINS,
    GUESTS,
    MEMBERS,
    Actor,
    CollectionSchema,
    FieldSpec,
    ImproperlyConfiguredCollection,
    Operation,
    actor_for_user,
    restrict_view,
)
from collection_forge.core.permissions import check_rule, normalize_rule

pytestmark = pytest.mark.unit


class TestActorForUser:
    def test_none_is_guest(self):
        assert actor_for_user(None).groups == frozenset({GUESTS})

    def test_anonymous_user_is_guest(self):
        actor = actor_for_user(AnonymousUser())

        assert actor.groups == frozenset({GUESTS})
        assert actor.is_authenticated is False
        assert actor.user_id is None

    @pytest.mark.django_db
    def test_member_gets_django_groups(self, editor):
        actor = actor_for_user(editor)

        assert actor.groups == frozenset({GUESTS, MEMBERS, "editors"})
        assert actor.user_id == str(editor.pk)

    @pytest.mark.django_db
    def test_superuser_is_admin(self, admin):
        assert actor_for_user(admin).is_admin is True

    def test_actor_passes_through(self):
        actor = Actor(groups=frozenset({GUESTS, "custom"}))

        assert actor_for_user(actor) is actor

    def test_user_without_groups_manager(self):
        user = SimpleNamespace(is_authenticated=True, is_superuser=False, pk=7)

        actor = actor_for_user(user)

        assert actor.groups == frozenset({GUESTS, MEMBERS})
        assert actor.user_id == "7"


class TestRules:
    def test_normalize_rule(self):
        assert normalize_rule(None) is None
        assert normalize_rule("guests") == frozenset({"guests"})
        assert normalize_rule(["guests", "members"]) == frozenset({"guests", "members"})

    def test_missing_rule_denies_everyone_but_admins(self):
        assert check_rule(None, Actor()) is False
        assert check_rule(None, Actor(groups=frozenset({ADMINS}))) is True

    def test_group_rule(self):
        rule = normalize_rule([MEMBERS])

        assert check_rule(rule, Actor()) is False
        assert check_rule(rule, Actor(groups=frozenset({GUESTS, MEMBERS}))) is True

    def test_predicate_rule_sees_document(self):
        def owner_only(actor, document):
            return document is not None and document.get("user_id") == actor.user_id

        user = SimpleNamespace(is_authenticated=True, pk=1)
        actor = Actor(groups=frozenset({GUESTS, MEMBERS}), user=user)

        assert check_rule(owner_only, actor, {"user_id": "1"}) is True
        assert check_rule(owner_only, actor, {"user_id": "2"}) is False

    def test_raising_predicate_denies(self):
        def broken(actor, document):
            raise KeyError("missing")

        assert check_rule(broken, Actor(), {}) is False


class TestSchema:
    def test_id_field_is_added(self):
        schema = CollectionSchema({"title": {"type": str, "canRead": [GUESTS]}})

        assert schema.field_names == ["_id", "title"]
        assert schema["_id"].allows(Actor(), Operation.READ)

    def test_camel_case_descriptor_keys(self):
        spec = FieldSpec.from_dict({"type": int, "canCreate": ["members"], "optional": True})

        assert spec.can_create == frozenset({"members"})
        assert spec.optional is True

    def test_unknown_descriptor_key(self):
        with pytest.raises(ImproperlyConfiguredCollection):
            FieldSpec.from_dict({"type": str, "canDelete": ["guests"]})

    def test_unsupported_type(self):
        with pytest.raises(ImproperlyConfiguredCollection):
            FieldSpec(type=bytes)

    def test_allowed_fields_per_operation(self, posts):
        guest = Actor()
        member = Actor(groups=frozenset({GUESTS, MEMBERS}))

        assert posts.schema.allowed_fields(guest, Operation.CREATE) == []
        assert posts.schema.allowed_fields(member, Operation.CREATE) == ["title", "slug"]
        assert posts.schema.allowed_fields(member, Operation.UPDATE) == ["title"]

    def test_restrict_view_drops_unreadable_fields_and_keeps_undeclared_keys(self, posts):
        document = {"_id": "a", "title": "T", "notes": "secret", "extra": 1}

        assert restrict_view(posts.schema, Actor(), document) == {
            "_id": "a",
            "title": "T",
            "extra": 1,
        }
        assert restrict_view(
            posts.schema, Actor(groups=frozenset({GUESTS, "editors"})), document
        ) == {"_id": "a", "title": "T", "notes": "secret", "extra": 1}

    def test_restrict_view_of_none(self, posts):
        assert posts.schema.restrict_view(Actor(), None) is None

    def test_required_fields_exclude_derived_and_optional(self, foo2s):
        assert foo2s.schema.required_fields() == ["foo2"]

    def test_accepts_value(self):
        assert FieldSpec(type=float).accepts_value(3) is True
        assert FieldSpec(type=int).accepts_value(True) is False
        assert FieldSpec(type=str).accepts_value("x") is True
