"""
Lifecycle callback pipeline steps.
"""

import logging

from ..base import MutatorStep
from ..context import MutatorContext

logger = logging.getLogger(__name__)


class _CallbackStep(MutatorStep):
    def should_run(self, ctx: MutatorContext) -> bool:
        return ctx.callbacks is not None and super().should_run(ctx)


class BeforeCallbacksStep(_CallbackStep):
    """
    Run ``<type>.<action>.before`` on the pending input.

    On delete the chain receives the stored document instead.
    """

    order = 50
    name = "before_callbacks"

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        channel = ctx.channel("before")
        if ctx.action == "delete":
            ctx.document = ctx.callbacks.run(channel, ctx.document, ctx.callback_properties())
        else:
            ctx.input_data = ctx.callbacks.run(channel, ctx.input_data, ctx.callback_properties())
        return ctx


class AfterCallbacksStep(_CallbackStep):
    """
    Run ``<type>.<action>.after`` on the stored document.

    Callbacks may transform the document; the transformed value is what the
    caller receives (after read filtering).
    """

    order = 70
    name = "after_callbacks"

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        ctx.result = ctx.callbacks.run(
            ctx.channel("after"), ctx.result, ctx.callback_properties()
        )
        return ctx


class AsyncCallbacksStep(_CallbackStep):
    """
    Dispatch ``<type>.<action>.async`` fire-and-forget.

    Runs after the transaction commits. Callbacks receive the mutation
    properties (with their own copy of the stored document); their outcome
    never reaches the caller.
    """

    order = 90
    name = "async_callbacks"
    transactional = False

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        properties = ctx.callback_properties(document=ctx.result)
        if ctx.action == "update":
            properties["data"] = ctx.input_data
            properties["old_document"] = ctx.extra.get("previous_document")
        dispatched = ctx.callbacks.run_async(ctx.channel("async"), properties)
        if dispatched:
            logger.debug("Dispatched %d async callback(s) on %s", dispatched, ctx.channel("async"))
        return ctx
