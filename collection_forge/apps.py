"""
Django app configuration for collection-forge.
"""

import logging

from django.apps import AppConfig as BaseAppConfig

logger = logging.getLogger(__name__)


class AppConfig(BaseAppConfig):
    """Django app configuration for collection-forge."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "collection_forge"
    verbose_name = "Collection Forge"
    label = "collection_forge"

    def ready(self):
        from .core.settings import MutatorSettings

        settings = MutatorSettings.from_settings()
        if settings.async_backend not in ("thread", "sync"):
            logger.error(
                "Unknown async_backend '%s'; expected 'thread' or 'sync'",
                settings.async_backend,
            )
        logger.debug("collection-forge ready (async_backend=%s)", settings.async_backend)
