"""
Exception types for collection-forge.

Every error raised by the library derives from ``CollectionForgeError`` so
callers can catch library failures in one place while still telling
validation problems apart from missing documents or bad configuration.
"""

from typing import Any, Optional


class CollectionForgeError(Exception):
    """Base exception for collection-forge operations."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.code = code

    def __str__(self) -> str:
        return self.message


class ValidationError(CollectionForgeError):
    """
    Raised when a mutator rejects its input.

    ``errors`` holds one dict per problem with ``field``, ``message`` and
    ``code`` keys, in the order the problems were detected.
    """

    def __init__(self, errors: list[dict[str, Any]], message: Optional[str] = None):
        self.errors = [dict(error) for error in errors]
        if message is None:
            if self.errors:
                message = "; ".join(
                    str(error.get("message") or error.get("code") or "invalid")
                    for error in self.errors
                )
            else:
                message = "Validation failed"
        first_field = self.errors[0].get("field") if self.errors else None
        super().__init__(message, field=first_field, code="VALIDATION_ERROR")


class DocumentNotFoundError(CollectionForgeError):
    """Raised when a selector does not match a stored document."""

    def __init__(self, collection_name: str, selector: Any):
        super().__init__(
            f"No document in '{collection_name}' matches {selector!r}",
            code="DOCUMENT_NOT_FOUND",
        )
        self.collection_name = collection_name
        self.selector = selector


class CollectionNotFoundError(CollectionForgeError):
    """Raised when a collection name is not registered."""

    def __init__(self, collection_name: str):
        super().__init__(
            f"Collection '{collection_name}' is not registered",
            code="COLLECTION_NOT_FOUND",
        )
        self.collection_name = collection_name


class FragmentNotFoundError(CollectionForgeError):
    """Raised when a named fragment is not registered."""

    def __init__(self, fragment_name: str):
        super().__init__(
            f"Fragment '{fragment_name}' is not registered",
            code="FRAGMENT_NOT_FOUND",
        )
        self.fragment_name = fragment_name


class ImproperlyConfiguredCollection(CollectionForgeError):
    """Raised when a collection or schema definition is inconsistent."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field, code="IMPROPERLY_CONFIGURED")
