"""
Unit tests for the mutator pipeline: steps, ordering and the builder.
"""

from unittest.mock import Mock

import pytest

from collection_forge.core import Actor
from collection_forge.core.settings import MutatorSettings
from collection_forge.mutators import (
    ConditionalStep,
    MutatorContext,
    MutatorPipeline,
    MutatorStep,
    PipelineBuilder,
    create_mutator,
)
from collection_forge.mutators.steps import SanitizationStep
from collection_forge.mutators.utils import call_with_supported_kwargs, sanitize_value

pytestmark = pytest.mark.unit


def _context(collection, action="create", **kwargs):
    return MutatorContext(
        collection=collection,
        action=action,
        actor=Actor(),
        raw_input=kwargs.get("input_data", {}),
        input_data=dict(kwargs.get("input_data", {})),
    )


class RecordingStep(MutatorStep):
    def __init__(self, order, name, log, transactional=True):
        self.order = order
        self.name = name
        self.log = log
        self.transactional = transactional

    def execute(self, ctx):
        self.log.append(self.name)
        return ctx


@pytest.mark.django_db
class TestMutatorPipeline:
    def test_steps_run_in_order(self, foo2s):
        log = []
        pipeline = MutatorPipeline(
            [RecordingStep(20, "second", log), RecordingStep(10, "first", log)]
        )

        pipeline.execute(_context(foo2s))

        assert log == ["first", "second"]
        assert pipeline.get_step_names() == ["first", "second"]

    def test_non_transactional_steps_run_last(self, foo2s):
        log = []
        pipeline = MutatorPipeline(
            [
                RecordingStep(10, "outside", log, transactional=False),
                RecordingStep(20, "inside", log),
            ]
        )

        pipeline.execute(_context(foo2s))

        assert log == ["inside", "outside"]

    def test_abort_skips_remaining_steps(self, foo2s):
        log = []

        class AbortStep(MutatorStep):
            order = 15
            name = "abort"

            def execute(self, ctx):
                ctx.add_error("stop", code="stopped")
                return ctx

        pipeline = MutatorPipeline(
            [RecordingStep(10, "first", log), AbortStep(), RecordingStep(20, "second", log)]
        )

        ctx = pipeline.execute(_context(foo2s))

        assert log == ["first"]
        assert ctx.errors == [{"field": None, "message": "stop", "code": "stopped"}]

    def test_conditional_step(self, foo2s):
        log = []
        step = ConditionalStep(
            RecordingStep(10, "only_update", log), condition=lambda ctx: ctx.action == "update"
        )

        MutatorPipeline([step]).execute(_context(foo2s))

        assert log == []
        assert step.name == "conditional:only_update"


class TestPipelineBuilder:
    def test_create_pipeline_steps(self):
        builder = PipelineBuilder(MutatorSettings())

        assert builder.build("create").get_step_names() == [
            "sanitization",
            "schema_validation",
            "callback_validation",
            "custom_validation",
            "before_callbacks",
            "derived_fields",
            "create_execution",
            "after_callbacks",
            "read_restriction",
            "async_callbacks",
        ]

    def test_delete_pipeline_has_no_derivation(self):
        names = PipelineBuilder(MutatorSettings()).build("delete").get_step_names()

        assert "derived_fields" not in names
        assert names[0] == "document_lookup"

    def test_unknown_action(self):
        with pytest.raises(ValueError):
            PipelineBuilder(MutatorSettings()).build("upsert")

    @pytest.mark.django_db
    def test_custom_and_skipped_steps(self, foo2s):
        class StampStep(MutatorStep):
            order = 57
            name = "stamp"

            def execute(self, ctx):
                ctx.input_data["foo2"] = ctx.input_data["foo2"] + "!"
                return ctx

        builder = PipelineBuilder(MutatorSettings()).add_step(StampStep()).skip_step("sanitization")

        result = create_mutator(foo2s, {"foo2": "<i>bar</i>"}, pipeline_builder=builder)

        assert result.data["foo2"] == "<i>bar</i>!"

    def test_sanitization_can_be_disabled(self):
        assert SanitizationStep(enabled=False).should_run(Mock(should_abort=False)) is False


class TestUtils:
    def test_sanitize_value_recurses(self):
        assert sanitize_value({"a": ["<script>x</script>y", 1], "b": "<b>z</b>"}) == {
            "a": ["xy", 1],
            "b": "z",
        }

    def test_sanitize_value_keeps_entities_as_text(self):
        assert sanitize_value("<b>Tom</b> & Jerry") == "Tom & Jerry"
        assert sanitize_value("a > b") == "a > b"

    def test_call_with_supported_kwargs(self):
        def only_document(document):
            return document

        def anything(**kwargs):
            return sorted(kwargs)

        assert call_with_supported_kwargs(only_document, document=1, context=2) == 1
        assert call_with_supported_kwargs(anything, document=1, context=2) == ["context", "document"]
        assert call_with_supported_kwargs(lambda: "bare", document=1) == "bare"
