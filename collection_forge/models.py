"""
Persistence model for collection documents.

Every collection stores its documents in the same table, keyed by
collection name and document id. ``DocumentStore`` is the only code that
reads or writes it.
"""

from django.db import models


class StoredDocument(models.Model):
    collection_name = models.CharField(max_length=100, db_index=True)
    document_id = models.CharField(max_length=64)
    data = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "collection_forge"
        db_table = "collection_forge_stored_document"
        verbose_name = "Stored Document"
        verbose_name_plural = "Stored Documents"
        ordering = ["created_at", "id"]
        unique_together = [("collection_name", "document_id")]

    def __str__(self) -> str:
        return f"{self.collection_name}:{self.document_id}"
