from .framework_settings import *  # noqa: F403

ENVIRONMENT = "testing"
DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "collection-forge-tests",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Async callbacks run inline so tests observe them deterministically.
COLLECTION_FORGE = dict(COLLECTION_FORGE)  # noqa: F405
COLLECTION_FORGE["mutator_settings"] = {
    **COLLECTION_FORGE.get("mutator_settings", {}),
    "async_backend": "sync",
}
