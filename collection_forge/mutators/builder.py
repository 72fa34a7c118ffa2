"""
Pipeline builder - builds mutator pipelines with configurable steps.
"""

from typing import List, Optional

from ..core.settings import MutatorSettings
from .base import MutatorPipeline, MutatorStep
from .steps import (
    AfterCallbacksStep,
    AsyncCallbacksStep,
    BeforeCallbacksStep,
    CallbackValidationStep,
    CreateExecutionStep,
    CustomValidatorStep,
    DeleteExecutionStep,
    DerivedFieldsStep,
    DocumentLookupStep,
    ReadRestrictionStep,
    SanitizationStep,
    SchemaValidationStep,
    UpdateExecutionStep,
)


class PipelineBuilder:
    """
    Builds mutator pipelines with configurable steps.

    Example:
        builder = PipelineBuilder(settings)
        builder.add_step(StampStep()).skip_step("sanitization")
        pipeline = builder.build_create_pipeline()
    """

    def __init__(self, settings: Optional[MutatorSettings] = None):
        self.settings = settings or MutatorSettings.from_settings()
        self._custom_steps: List[MutatorStep] = []
        self._skip_steps: List[str] = []

    def add_step(self, step: MutatorStep) -> "PipelineBuilder":
        self._custom_steps.append(step)
        return self

    def skip_step(self, step_name: str) -> "PipelineBuilder":
        self._skip_steps.append(step_name)
        return self

    def _filter_steps(self, steps: List[MutatorStep]) -> List[MutatorStep]:
        if not self._skip_steps:
            return steps
        return [s for s in steps if s.name not in self._skip_steps]

    def _validation_steps(self) -> List[MutatorStep]:
        return [
            SchemaValidationStep(),
            CallbackValidationStep(),
            CustomValidatorStep(),
        ]

    def _lifecycle_steps(self, execution_step: MutatorStep) -> List[MutatorStep]:
        return [
            BeforeCallbacksStep(),
            execution_step,
            AfterCallbacksStep(),
            ReadRestrictionStep(),
            AsyncCallbacksStep(),
        ]

    def build_create_pipeline(self) -> MutatorPipeline:
        steps = [
            SanitizationStep(self.settings.sanitize_strings),
            *self._validation_steps(),
            DerivedFieldsStep(),
            *self._lifecycle_steps(CreateExecutionStep()),
            *self._custom_steps,
        ]
        return MutatorPipeline(self._filter_steps(steps))

    def build_update_pipeline(self) -> MutatorPipeline:
        steps = [
            SanitizationStep(self.settings.sanitize_strings),
            DocumentLookupStep(),
            *self._validation_steps(),
            DerivedFieldsStep(),
            *self._lifecycle_steps(UpdateExecutionStep()),
            *self._custom_steps,
        ]
        return MutatorPipeline(self._filter_steps(steps))

    def build_delete_pipeline(self) -> MutatorPipeline:
        steps = [
            DocumentLookupStep(),
            *self._validation_steps(),
            *self._lifecycle_steps(DeleteExecutionStep()),
            *self._custom_steps,
        ]
        return MutatorPipeline(self._filter_steps(steps))

    def build(self, action: str) -> MutatorPipeline:
        builders = {
            "create": self.build_create_pipeline,
            "update": self.build_update_pipeline,
            "delete": self.build_delete_pipeline,
        }
        try:
            return builders[action]()
        except KeyError:
            raise ValueError(f"Unknown mutator action '{action}'") from None
