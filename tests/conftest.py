"""
Shared fixtures.

``foo2s`` mirrors a small collection where guests may create, read and
update ``foo2`` and ``publicAuto``, while ``privateAuto`` is admin-only.
Both auto fields are derived on create and on update.
"""

import pytest
from django.contrib.auth.models import Group, User

from collection_forge.core import (
    ADMINS,
    GUESTS,
    MEMBERS,
    AsyncDispatcher,
    CallbackRegistry,
    Collection,
    CollectionRegistry,
)


def _created(**kwargs):
    return "CREATED"


def _updated(**kwargs):
    return "UPDATED"


FOO2_SCHEMA = {
    "_id": {"type": str, "canRead": [GUESTS], "optional": True},
    "foo2": {
        "type": str,
        "canCreate": [GUESTS],
        "canRead": [GUESTS],
        "canUpdate": [GUESTS],
    },
    "publicAuto": {
        "type": str,
        "optional": True,
        "canCreate": [GUESTS],
        "canRead": [GUESTS],
        "canUpdate": [GUESTS],
        "onCreate": _created,
        "onUpdate": _updated,
    },
    "privateAuto": {
        "type": str,
        "optional": True,
        "canCreate": [ADMINS],
        "canRead": [ADMINS],
        "canUpdate": [ADMINS],
        "onCreate": _created,
        "onUpdate": _updated,
    },
}

POST_SCHEMA = {
    "title": {
        "type": str,
        "canCreate": [MEMBERS],
        "canRead": [GUESTS],
        "canUpdate": [MEMBERS],
        "label": "Title",
    },
    "slug": {
        "type": str,
        "optional": True,
        "canCreate": [MEMBERS],
        "canRead": [GUESTS],
    },
    "views": {
        "type": int,
        "optional": True,
        "canRead": [GUESTS],
        "canUpdate": [ADMINS],
    },
    "notes": {
        "type": str,
        "optional": True,
        "canCreate": ["editors"],
        "canRead": ["editors"],
        "canUpdate": ["editors"],
    },
    "user_id": {
        "type": str,
        "optional": True,
        "canRead": [GUESTS],
        "hidden": True,
    },
}


@pytest.fixture
def foo2s():
    return Collection("Foo2s", "Foo2", FOO2_SCHEMA)


@pytest.fixture
def posts():
    return Collection("Posts", "Post", POST_SCHEMA)


@pytest.fixture
def registry(foo2s, posts):
    collections = CollectionRegistry()
    collections.register(foo2s)
    collections.register(posts)
    return collections


@pytest.fixture
def callbacks():
    return CallbackRegistry(dispatcher=AsyncDispatcher(backend="sync"))


@pytest.fixture
def member(db):
    return User.objects.create_user(username="member", password="pass12345")


@pytest.fixture
def editor(db):
    user = User.objects.create_user(username="editor", password="pass12345")
    user.groups.add(Group.objects.create(name="editors"))
    return user


@pytest.fixture
def admin(db):
    return User.objects.create_superuser(
        username="admin", password="pass12345", email="admin@example.com"
    )
