"""
Base classes for the mutator pipeline.

Provides the MutatorStep abstract base class and the MutatorPipeline
orchestrator.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List

from django.db import transaction

from .context import MutatorContext

logger = logging.getLogger(__name__)


class MutatorStep(ABC):
    """
    Base class for mutator pipeline steps.

    Attributes:
        order: Integer determining step execution order (lower = earlier)
        name: String identifier for debugging and logging
        transactional: Steps flagged False run after the database
            transaction has been committed

    Example:
        class StampStep(MutatorStep):
            order = 57
            name = "stamp"

            def execute(self, ctx: MutatorContext) -> MutatorContext:
                ctx.input_data["stamped"] = True
                return ctx
    """

    order: int = 100
    name: str = "base"
    transactional: bool = True

    @abstractmethod
    def execute(self, ctx: MutatorContext) -> MutatorContext:
        """
        Execute this step.

        Args:
            ctx: Current mutator context

        Returns:
            Modified context (can be same instance)
        """

    def should_run(self, ctx: MutatorContext) -> bool:
        """Skip the step once a previous one has set the abort flag."""
        return not ctx.should_abort

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} order={self.order} name={self.name}>"


class ActionFilteredStep(MutatorStep):
    """A step that only runs for some actions."""

    allowed_actions: tuple = ("create", "update", "delete")

    def should_run(self, ctx: MutatorContext) -> bool:
        return super().should_run(ctx) and ctx.action in self.allowed_actions


class ConditionalStep(MutatorStep):
    """
    Wraps a step with a custom condition function.

    Example:
        step = ConditionalStep(
            SanitizationStep(),
            condition=lambda ctx: ctx.action == "create",
        )
    """

    def __init__(self, step: MutatorStep, condition: Callable[[MutatorContext], bool]):
        self._step = step
        self._condition = condition
        self.order = step.order
        self.name = f"conditional:{step.name}"
        self.transactional = step.transactional

    def should_run(self, ctx: MutatorContext) -> bool:
        return self._step.should_run(ctx) and self._condition(ctx)

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        return self._step.execute(ctx)


class MutatorPipeline:
    """
    Executes an ordered sequence of mutator steps.

    Steps are sorted by ``order``. Transactional steps run inside one
    ``transaction.atomic`` block so an exception in any of them (an ``after``
    callback, for instance) rolls back the write. Non-transactional steps
    run once the block has been committed.
    """

    def __init__(self, steps: List[MutatorStep]):
        self.steps = sorted(steps, key=lambda s: s.order)

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        in_transaction = [s for s in self.steps if s.transactional]
        after_commit = [s for s in self.steps if not s.transactional]

        with transaction.atomic():
            ctx = self._run(in_transaction, ctx)
        return self._run(after_commit, ctx)

    def _run(self, steps: List[MutatorStep], ctx: MutatorContext) -> MutatorContext:
        for step in steps:
            if step.should_run(ctx):
                logger.debug("Running step %s for %s.%s", step.name, ctx.type_name, ctx.action)
                ctx = step.execute(ctx)
        return ctx

    def get_step_names(self) -> List[str]:
        return [s.name for s in self.steps]

    def __repr__(self) -> str:
        return f"<MutatorPipeline steps={self.get_step_names()}>"
