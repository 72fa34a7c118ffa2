"""
Document storage backed by the ``StoredDocument`` model.
"""

import copy
import logging
import secrets
import string
from typing import Any, Iterable, Optional

from django.db import transaction

from .core.exceptions import DocumentNotFoundError
from .core.schema import ID_FIELD

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits


def generate_document_id(length: Optional[int] = None) -> str:
    if length is None:
        from .core.settings import MutatorSettings

        length = MutatorSettings.from_settings().id_length
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(max(8, int(length))))


class DocumentStore:
    """CRUD access to stored documents, always returning detached copies."""

    def _queryset(self, collection_name: str):
        from .models import StoredDocument

        return StoredDocument.objects.filter(collection_name=collection_name)

    def _load(self, collection_name: str, document_id: str):
        return self._queryset(collection_name).filter(document_id=str(document_id)).first()

    def insert(self, collection_name: str, document: dict[str, Any]) -> str:
        """Store a new document and return its id."""
        from .models import StoredDocument

        data = copy.deepcopy(document)
        document_id = str(data.get(ID_FIELD) or generate_document_id())
        data[ID_FIELD] = document_id
        StoredDocument.objects.create(
            collection_name=collection_name,
            document_id=document_id,
            data=data,
        )
        logger.debug("Inserted %s:%s", collection_name, document_id)
        return document_id

    def get(self, collection_name: str, document_id: str) -> Optional[dict[str, Any]]:
        stored = self._load(collection_name, document_id)
        return copy.deepcopy(stored.data) if stored is not None else None

    def get_by_field(
        self, collection_name: str, field_name: str, value: Any
    ) -> Optional[dict[str, Any]]:
        if field_name == ID_FIELD:
            return self.get(collection_name, value)
        if "__" in field_name:
            raise ValueError(f"Invalid lookup field '{field_name}'")
        stored = (
            self._queryset(collection_name)
            .filter(**{f"data__{field_name}": value})
            .first()
        )
        return copy.deepcopy(stored.data) if stored is not None else None

    def update(
        self,
        collection_name: str,
        document_id: str,
        set_fields: dict[str, Any],
        unset_fields: Iterable[str] = (),
    ) -> dict[str, Any]:
        """Apply a ``$set``/``$unset`` style patch and return the new document."""
        with transaction.atomic():
            stored = (
                self._queryset(collection_name)
                .select_for_update()
                .filter(document_id=str(document_id))
                .first()
            )
            if stored is None:
                raise DocumentNotFoundError(collection_name, {"document_id": document_id})
            data = dict(stored.data or {})
            data.update(copy.deepcopy(set_fields))
            for field_name in unset_fields:
                data.pop(field_name, None)
            data[ID_FIELD] = stored.document_id
            stored.data = data
            stored.save(update_fields=["data", "updated_at"])
        logger.debug("Updated %s:%s", collection_name, document_id)
        return copy.deepcopy(data)

    def delete(self, collection_name: str, document_id: str) -> bool:
        deleted, _ = self._queryset(collection_name).filter(document_id=str(document_id)).delete()
        if deleted:
            logger.debug("Deleted %s:%s", collection_name, document_id)
        return bool(deleted)

    def find(
        self, collection_name: str, limit: Optional[int] = None, offset: int = 0
    ) -> list[dict[str, Any]]:
        queryset = self._queryset(collection_name)
        offset = max(0, int(offset or 0))
        if limit is not None:
            queryset = queryset[offset : offset + max(0, int(limit))]
        elif offset:
            queryset = queryset[offset:]
        return [copy.deepcopy(stored.data) for stored in queryset]

    def count(self, collection_name: str) -> int:
        return self._queryset(collection_name).count()
