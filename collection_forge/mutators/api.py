"""
Create, update and delete mutators.

Each mutator builds a ``MutatorContext`` for one call, runs it through the
matching pipeline and returns the readable projection of the stored
document::

    result = create_mutator(Foo2s, {"foo2": "bar"}, callbacks=registry)
    result.data  # {"_id": "...", "foo2": "bar", "publicAuto": "CREATED"}
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

from ..core.callbacks import CallbackRegistry
from ..core.collection import Collection
from ..core.exceptions import ValidationError
from ..core.permissions import actor_for_user
from .builder import PipelineBuilder
from .context import MutatorContext

logger = logging.getLogger(__name__)

Validator = Union[bool, Callable[..., Any]]


@dataclass
class MutatorResult:
    """Outcome of a mutator call."""

    data: Optional[dict[str, Any]]
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _resolve_callbacks(
    callbacks: Optional[CallbackRegistry], context: Any
) -> Optional[CallbackRegistry]:
    if callbacks is not None:
        return callbacks
    if isinstance(context, Mapping):
        return context.get("callbacks")
    return getattr(context, "callbacks", None)


def _resolve_user(current_user: Any, context: Any) -> Any:
    if current_user is not None:
        return current_user
    if isinstance(context, Mapping):
        return context.get("user")
    return getattr(context, "user", None)


def _run(
    action: str,
    collection: Collection,
    payload: Optional[Mapping[str, Any]],
    selector: Optional[dict[str, Any]],
    current_user: Any,
    validate: Validator,
    context: Any,
    callbacks: Optional[CallbackRegistry],
    pipeline_builder: Optional[PipelineBuilder],
) -> MutatorResult:
    if payload is not None and not isinstance(payload, Mapping):
        raise TypeError(f"{action} payload must be a mapping, got {type(payload).__name__}")

    user = _resolve_user(current_user, context)
    ctx = MutatorContext(
        collection=collection,
        action=action,
        actor=actor_for_user(user),
        raw_input=payload or {},
        input_data=copy.deepcopy(dict(payload or {})),
        current_user=user,
        context=context,
        callbacks=_resolve_callbacks(callbacks, context),
        validate=validate,
        selector=dict(selector or {}),
    )

    pipeline = (pipeline_builder or PipelineBuilder()).build(action)
    ctx = pipeline.execute(ctx)

    if ctx.should_abort:
        raise ValidationError(ctx.errors)

    logger.info(
        "%s %s document %s",
        collection.type_name,
        action,
        ctx.document_id or (ctx.result or {}).get("_id"),
    )
    return MutatorResult(data=ctx.data)


def _build_selector(document_id: Optional[str], selector: Optional[dict[str, Any]]) -> dict[str, Any]:
    if selector:
        return {k: v for k, v in selector.items() if k in ("document_id", "slug") and v}
    return {"document_id": document_id} if document_id else {}


def create_mutator(
    collection: Collection,
    document: Mapping[str, Any],
    *,
    current_user: Any = None,
    validate: Validator = True,
    context: Any = None,
    callbacks: Optional[CallbackRegistry] = None,
    pipeline_builder: Optional[PipelineBuilder] = None,
) -> MutatorResult:
    """
    Create a document.

    Args:
        collection: Target collection
        document: Field values; never modified
        current_user: Django user (or None for a guest); falls back to ``context.user``
        validate: True/False, or a callable returning False or a list of errors
        context: Request-like object handed to callbacks and derivations
        callbacks: Callback registry; falls back to ``context.callbacks``
        pipeline_builder: Custom pipeline builder

    Raises:
        ValidationError: The input was rejected; nothing was stored
    """
    return _run(
        "create",
        collection,
        document,
        None,
        current_user,
        validate,
        context,
        callbacks,
        pipeline_builder,
    )


def update_mutator(
    collection: Collection,
    document_id: Optional[str] = None,
    data: Optional[Mapping[str, Any]] = None,
    *,
    selector: Optional[dict[str, Any]] = None,
    current_user: Any = None,
    validate: Validator = True,
    context: Any = None,
    callbacks: Optional[CallbackRegistry] = None,
    pipeline_builder: Optional[PipelineBuilder] = None,
) -> MutatorResult:
    """
    Patch a document.

    ``data`` is never modified. Keys set to ``None`` remove the field. The
    target is ``document_id`` or ``selector`` (``{"document_id": ...}`` or
    ``{"slug": ...}``).

    Raises:
        ValidationError: The patch was rejected; nothing was stored
        DocumentNotFoundError: The selector matched nothing
    """
    return _run(
        "update",
        collection,
        data or {},
        _build_selector(document_id, selector),
        current_user,
        validate,
        context,
        callbacks,
        pipeline_builder,
    )


def delete_mutator(
    collection: Collection,
    document_id: Optional[str] = None,
    *,
    selector: Optional[dict[str, Any]] = None,
    current_user: Any = None,
    validate: Validator = True,
    context: Any = None,
    callbacks: Optional[CallbackRegistry] = None,
    pipeline_builder: Optional[PipelineBuilder] = None,
) -> MutatorResult:
    """Remove a document and return its readable projection."""
    return _run(
        "delete",
        collection,
        None,
        _build_selector(document_id, selector),
        current_user,
        validate,
        context,
        callbacks,
        pipeline_builder,
    )
