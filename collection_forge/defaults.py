"""
Default configuration for the collection-forge library.

This module is the single source of truth for every setting the library
consumes. Each section mirrors one of the dataclasses defined in
``collection_forge.core.settings``. Projects override values through the
``COLLECTION_FORGE`` dict in their Django settings.
"""

from __future__ import annotations

import copy
from typing import Any

LIBRARY_VERSION = "0.1.0"


# --------------------------------------------------------------------------- #
# Library-wide defaults (grouped by feature area)
# --------------------------------------------------------------------------- #
LIBRARY_DEFAULTS: dict[str, Any] = {
    "mutator_settings": {
        # "thread" dispatches async callbacks on a worker pool, "sync" runs
        # them inline after the result is built, with failures isolated.
        "async_backend": "thread",
        "async_max_workers": 4,
        "sanitize_strings": True,
        "id_length": 17,
    },
    "form_settings": {
        "default_layout": "horizontal",
        "query_fetch_policy": "network-only",
        "query_poll_interval": 0,
        "enable_cache": False,
    },
    "graphql_settings": {
        "auto_camelcase": False,
        "enable_queries": True,
        "enable_mutations": True,
        "default_page_size": 20,
        "max_page_size": 100,
    },
}


ENVIRONMENT_DEFAULTS: dict[str, dict[str, Any]] = {
    "development": {},
    "testing": {
        "mutator_settings": {
            "async_backend": "sync",
        }
    },
    "production": {},
}


# --------------------------------------------------------------------------- #
# Helper functions
# --------------------------------------------------------------------------- #
def get_default_settings() -> dict[str, Any]:
    """Return a deep copy of the library defaults."""
    return copy.deepcopy(LIBRARY_DEFAULTS)


def get_environment_defaults(environment: str) -> dict[str, Any]:
    """Return environment-specific overrides."""
    return copy.deepcopy(ENVIRONMENT_DEFAULTS.get(environment, {}))


def merge_settings(*settings_dicts: dict[str, Any]) -> dict[str, Any]:
    """
    Merge multiple settings dictionaries with deep merging for nested dicts.
    Later dictionaries override earlier ones.
    """
    result: dict[str, Any] = {}
    for settings_dict in settings_dicts:
        for key, value in (settings_dict or {}).items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = merge_settings(result[key], value)
            else:
                result[key] = value
    return result
