"""
Validation pipeline steps.

All of them are skipped when the mutator is called with ``validate=False``.
A failing step sets the abort flag, so nothing is persisted and no
``before``/``after``/``async`` callback runs.
"""

import logging

from ...core.permissions import Operation
from ...core.schema import ID_FIELD
from ..base import MutatorStep
from ..context import MutatorContext
from ..utils import call_with_supported_kwargs

logger = logging.getLogger(__name__)


class _ValidationStep(MutatorStep):
    def should_run(self, ctx: MutatorContext) -> bool:
        return bool(ctx.validate) and super().should_run(ctx)


class SchemaValidationStep(_ValidationStep):
    """
    Check the input against the collection schema.

    - every supplied field must exist and be writable by the actor
      (``can_create`` on create, ``can_update`` on update)
    - values must match the declared field type
    - required fields must be present on create and cannot be unset
    """

    order = 30
    name = "schema_validation"

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        if ctx.action == "delete":
            return ctx

        schema = ctx.schema
        operation = Operation.CREATE if ctx.action == "create" else Operation.UPDATE
        target = ctx.input_data if ctx.action == "create" else ctx.document
        required = set(schema.required_fields())
        errors = []

        for field_name, value in ctx.input_data.items():
            spec = schema.get(field_name)
            if spec is None:
                errors.append(
                    {
                        "field": field_name,
                        "message": f"Unknown field '{field_name}'",
                        "code": "unknown_field",
                    }
                )
                continue
            if not spec.allows(ctx.actor, operation, target):
                errors.append(
                    {
                        "field": field_name,
                        "message": f"Field '{field_name}' cannot be {operation.value}d",
                        "code": "disallowed_field",
                    }
                )
                continue
            if value is None:
                if ctx.action == "update" and field_name in required:
                    errors.append(
                        {
                            "field": field_name,
                            "message": f"Field '{field_name}' is required",
                            "code": "required",
                        }
                    )
                continue
            if not spec.accepts_value(value):
                errors.append(
                    {
                        "field": field_name,
                        "message": (
                            f"Field '{field_name}' expects {spec.type.__name__}, "
                            f"got {type(value).__name__}"
                        ),
                        "code": "invalid_type",
                    }
                )

        if ctx.action == "create":
            for field_name in sorted(required, key=schema.field_names.index):
                if field_name != ID_FIELD and ctx.input_data.get(field_name) is None:
                    errors.append(
                        {
                            "field": field_name,
                            "message": f"Field '{field_name}' is required",
                            "code": "required",
                        }
                    )

        if errors:
            logger.info(
                "Rejected %s.%s input: %d validation error(s)",
                ctx.type_name,
                ctx.action,
                len(errors),
            )
            ctx.add_errors(errors)
        return ctx


class CallbackValidationStep(_ValidationStep):
    """Run the ``<type>.<action>.validate`` callbacks."""

    order = 35
    name = "callback_validation"

    def should_run(self, ctx: MutatorContext) -> bool:
        return ctx.callbacks is not None and super().should_run(ctx)

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        subject = ctx.document if ctx.action == "delete" else ctx.input_data
        errors = ctx.callbacks.run_validators(
            ctx.channel("validate"), subject, ctx.callback_properties()
        )
        if errors:
            ctx.add_errors(errors)
        return ctx


class CustomValidatorStep(_ValidationStep):
    """
    Run the caller's ``validate`` callable.

    It may return False (rejected), a list of error messages, or anything
    else falsy/True to accept the input.
    """

    order = 40
    name = "custom_validation"

    def should_run(self, ctx: MutatorContext) -> bool:
        return callable(ctx.validate) and super().should_run(ctx)

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        subject = ctx.document if ctx.action == "delete" else ctx.input_data
        outcome = call_with_supported_kwargs(
            ctx.validate,
            document=subject,
            data=ctx.input_data,
            current_user=ctx.current_user,
            collection=ctx.collection,
            context=ctx.context,
        )
        if outcome is False:
            ctx.add_error("Validation rejected the input", code="rejected")
        elif isinstance(outcome, (list, tuple)) and outcome:
            ctx.add_errors(list(outcome))
        return ctx
