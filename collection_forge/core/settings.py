"""
Typed settings for collection-forge.

Values are layered: library defaults, then environment overrides (picked
from ``settings.ENVIRONMENT`` or ``DEBUG``), then the project's
``COLLECTION_FORGE`` dict. Each dataclass only keeps the keys it declares.
"""

from dataclasses import dataclass
from typing import Any, Optional

from django.conf import settings as django_settings

from ..defaults import LIBRARY_DEFAULTS, get_environment_defaults, merge_settings


def _get_environment() -> str:
    env = getattr(django_settings, "ENVIRONMENT", None)
    if env:
        return str(env)
    return "development" if getattr(django_settings, "DEBUG", False) else "production"


def get_library_settings(overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Return the fully merged settings payload."""
    project_settings = getattr(django_settings, "COLLECTION_FORGE", {}) or {}
    return merge_settings(
        LIBRARY_DEFAULTS,
        get_environment_defaults(_get_environment()),
        project_settings,
        overrides or {},
    )


def _section(name: str, overrides: Optional[dict[str, Any]]) -> dict[str, Any]:
    return get_library_settings({name: overrides} if overrides else None).get(name, {})


@dataclass
class MutatorSettings:
    """Settings for the create/update/delete mutators."""

    async_backend: str = "thread"
    async_max_workers: int = 4
    sanitize_strings: bool = True
    id_length: int = 17

    @classmethod
    def from_settings(cls, **overrides: Any) -> "MutatorSettings":
        merged = _section("mutator_settings", overrides)
        valid_fields = set(cls.__dataclass_fields__.keys())
        return cls(**{k: v for k, v in merged.items() if k in valid_fields})


@dataclass
class FormSettings:
    """Settings for the form wrapper and its data-binding adapters."""

    default_layout: str = "horizontal"
    query_fetch_policy: str = "network-only"
    query_poll_interval: int = 0
    enable_cache: bool = False

    @classmethod
    def from_settings(cls, **overrides: Any) -> "FormSettings":
        merged = _section("form_settings", overrides)
        valid_fields = set(cls.__dataclass_fields__.keys())
        return cls(**{k: v for k, v in merged.items() if k in valid_fields})


@dataclass
class GraphQLSettings:
    """Settings for the generated GraphQL schema."""

    auto_camelcase: bool = False
    enable_queries: bool = True
    enable_mutations: bool = True
    default_page_size: int = 20
    max_page_size: int = 100

    @classmethod
    def from_settings(cls, **overrides: Any) -> "GraphQLSettings":
        merged = _section("graphql_settings", overrides)
        valid_fields = set(cls.__dataclass_fields__.keys())
        return cls(**{k: v for k, v in merged.items() if k in valid_fields})
