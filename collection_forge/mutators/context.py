"""
MutatorContext - carries one mutator invocation through the pipeline.

The context is created when a mutator is called, passed through every
pipeline step and discarded once the call returns. It is never persisted.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from ..core.permissions import Actor

if TYPE_CHECKING:
    from ..core.callbacks import CallbackRegistry
    from ..core.collection import Collection


@dataclass
class MutatorContext:
    """
    Carries state through the mutator pipeline.

    Attributes:
        collection: The collection being mutated
        action: "create", "update" or "delete"
        actor: Permission identity of the current user
        current_user: The user object the actor was built from
        context: Caller-supplied request context (passed to callbacks)
        callbacks: Callback registry, or None to run no callbacks
        validate: True/False, or a callable ``(document, context) -> bool | list``
        raw_input: The caller's document or patch (never modified)
        input_data: Working deep copy of ``raw_input``
        selector: ``{"document_id": ...}`` or ``{"slug": ...}`` for update/delete
        document: Stored document targeted by update/delete
        unset_fields: Fields the update removes
        result: Stored document after execution (unfiltered)
        data: Readable projection of ``result`` returned to the caller
        errors: Validation errors, as dicts with field/message/code
        should_abort: Flag telling later steps to stop
        extra: Storage for step-specific data
    """

    collection: "Collection"
    action: str
    actor: Actor
    raw_input: dict[str, Any]
    input_data: dict[str, Any]

    current_user: Any = None
    context: Any = None
    callbacks: Optional["CallbackRegistry"] = None
    validate: Union[bool, Callable[..., Any]] = True

    selector: dict[str, Any] = field(default_factory=dict)
    document: Optional[dict[str, Any]] = None
    unset_fields: list[str] = field(default_factory=list)

    result: Optional[dict[str, Any]] = None
    data: Optional[dict[str, Any]] = None

    errors: list[dict[str, Any]] = field(default_factory=list)
    should_abort: bool = False

    extra: dict[str, Any] = field(default_factory=dict)

    def add_error(
        self,
        message: str,
        field_name: Optional[str] = None,
        code: Optional[str] = None,
    ) -> None:
        """Add an error and set the abort flag."""
        self.errors.append({"field": field_name, "message": message, "code": code})
        self.should_abort = True

    def add_errors(self, errors: list[Any]) -> None:
        """Add several errors (dicts or plain messages); abort if any were added."""
        for error in errors:
            if isinstance(error, dict):
                self.errors.append(
                    {
                        "field": error.get("field"),
                        "message": str(error.get("message") or error.get("code") or error),
                        "code": error.get("code"),
                    }
                )
            else:
                self.errors.append({"field": None, "message": str(error), "code": None})
        if errors:
            self.should_abort = True

    @property
    def schema(self):
        return self.collection.schema

    @property
    def type_name(self) -> str:
        return self.collection.type_name

    @property
    def document_id(self) -> Optional[str]:
        value = self.selector.get("document_id")
        if value is None and self.document is not None:
            value = self.document.get("_id")
        return value

    def channel(self, stage: str) -> str:
        """Callback channel for this action, e.g. ``foo2.create.before``."""
        from ..core.callbacks import callback_channel

        return callback_channel(self.type_name, self.action, stage)

    def callback_properties(self, **overrides: Any) -> dict[str, Any]:
        """Properties handed to callbacks next to the document."""
        properties = {
            "current_user": self.current_user,
            "actor": self.actor,
            "collection": self.collection,
            "context": self.context,
        }
        if self.document is not None:
            properties["document"] = self.document
        properties.update(overrides)
        return properties
