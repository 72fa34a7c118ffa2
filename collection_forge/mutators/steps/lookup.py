"""
Document lookup pipeline step.
"""

from ...core.exceptions import DocumentNotFoundError
from ..base import ActionFilteredStep
from ..context import MutatorContext


class DocumentLookupStep(ActionFilteredStep):
    """
    Load the stored document targeted by an update or delete.

    The selector is either ``{"document_id": ...}`` or ``{"slug": ...}``.
    A selector that matches nothing raises ``DocumentNotFoundError``.
    """

    order = 20
    name = "document_lookup"
    allowed_actions = ("update", "delete")

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        collection = ctx.collection
        document_id = ctx.selector.get("document_id")
        slug = ctx.selector.get("slug")

        document = None
        if document_id:
            document = collection.find_one(str(document_id))
        elif slug:
            document = collection.find_one_by("slug", slug)
        else:
            ctx.add_error("A document_id or slug selector is required", code="selector_required")
            return ctx

        if document is None:
            raise DocumentNotFoundError(collection.collection_name, ctx.selector)

        ctx.document = document
        return ctx
