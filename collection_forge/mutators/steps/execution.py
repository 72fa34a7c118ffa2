"""
Execution pipeline steps.

Handles the actual insert, update and removal of stored documents.
"""

import logging

from ..base import ActionFilteredStep
from ..context import MutatorContext

logger = logging.getLogger(__name__)


class CreateExecutionStep(ActionFilteredStep):
    """Insert the document and reload it from the store."""

    order = 60
    name = "create_execution"
    allowed_actions = ("create",)

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        collection = ctx.collection
        document_id = collection.store.insert(collection.collection_name, ctx.input_data)
        ctx.result = collection.find_one(document_id)
        ctx.selector = {"document_id": document_id}
        return ctx


class UpdateExecutionStep(ActionFilteredStep):
    """
    Apply the patch to the stored document.

    Keys whose value is ``None`` are removed from the document; every other
    key is set.
    """

    order = 60
    name = "update_execution"
    allowed_actions = ("update",)

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        collection = ctx.collection
        set_fields = {k: v for k, v in ctx.input_data.items() if v is not None}
        ctx.unset_fields = [k for k, v in ctx.input_data.items() if v is None]
        ctx.extra["previous_document"] = ctx.document
        ctx.result = collection.store.update(
            collection.collection_name,
            ctx.document["_id"],
            set_fields,
            ctx.unset_fields,
        )
        return ctx


class DeleteExecutionStep(ActionFilteredStep):
    """Remove the stored document; the removed document becomes the result."""

    order = 60
    name = "delete_execution"
    allowed_actions = ("delete",)

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        collection = ctx.collection
        collection.store.delete(collection.collection_name, ctx.document["_id"])
        ctx.result = dict(ctx.document)
        return ctx
