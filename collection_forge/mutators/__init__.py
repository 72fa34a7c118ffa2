"""
Mutator pipeline.

Core components:
- create_mutator / update_mutator / delete_mutator: the public entry points
- MutatorContext: carries one call through the pipeline
- MutatorStep / MutatorPipeline: ordered, composable steps
- PipelineBuilder: builds the pipeline for each action
"""

from .api import MutatorResult, create_mutator, delete_mutator, update_mutator
from .base import ActionFilteredStep, ConditionalStep, MutatorPipeline, MutatorStep
from .builder import PipelineBuilder
from .context import MutatorContext

__all__ = [
    "MutatorResult",
    "create_mutator",
    "update_mutator",
    "delete_mutator",
    "MutatorContext",
    "MutatorStep",
    "MutatorPipeline",
    "ActionFilteredStep",
    "ConditionalStep",
    "PipelineBuilder",
]
