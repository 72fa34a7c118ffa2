"""
Read restriction pipeline step.
"""

from ..base import MutatorStep
from ..context import MutatorContext


class ReadRestrictionStep(MutatorStep):
    """
    Project the result onto the fields the actor may read.

    This is the only place the caller's return value is built, so fields
    set by ``on_create``/``on_update`` or by ``after`` callbacks go through
    the same filter as user input.
    """

    order = 80
    name = "read_restriction"

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        ctx.data = ctx.schema.restrict_view(ctx.actor, ctx.result)
        return ctx
