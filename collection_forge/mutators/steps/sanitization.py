"""
Input sanitization pipeline step.
"""

from ..base import MutatorStep
from ..context import MutatorContext
from ..utils import sanitize_input_data


class SanitizationStep(MutatorStep):
    """
    Strip HTML tags from string input.

    Runs on the working copy only, so the caller's document or patch is
    left untouched.
    """

    order = 10
    name = "sanitization"

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def should_run(self, ctx: MutatorContext) -> bool:
        return self.enabled and super().should_run(ctx)

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        ctx.input_data = sanitize_input_data(ctx.input_data)
        return ctx
