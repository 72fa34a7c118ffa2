"""
Derived field pipeline step.

Computes ``on_create`` / ``on_update`` values server-side. The values are
stored like any other field; whether the caller gets to see them is decided
later by the read filter.
"""

from ..base import ActionFilteredStep
from ..context import MutatorContext
from ..utils import call_with_supported_kwargs

USER_ID_FIELD = "user_id"


class DerivedFieldsStep(ActionFilteredStep):
    """Run ``on_create`` (create) or ``on_update`` (update) for every field that has one."""

    order = 55
    name = "derived_fields"
    allowed_actions = ("create", "update")

    def execute(self, ctx: MutatorContext) -> MutatorContext:
        if ctx.action == "create":
            self._derive_on_create(ctx)
        else:
            self._derive_on_update(ctx)
        return ctx

    def _derive_on_create(self, ctx: MutatorContext) -> None:
        schema = ctx.schema
        if (
            USER_ID_FIELD in schema
            and ctx.actor.user_id
            and ctx.input_data.get(USER_ID_FIELD) is None
        ):
            ctx.input_data[USER_ID_FIELD] = ctx.actor.user_id

        for field_name, spec in schema.items():
            if spec.on_create is None:
                continue
            value = call_with_supported_kwargs(
                spec.on_create,
                document=ctx.input_data,
                current_user=ctx.current_user,
                actor=ctx.actor,
                collection=ctx.collection,
                context=ctx.context,
            )
            if value is not None:
                ctx.input_data[field_name] = value

    def _derive_on_update(self, ctx: MutatorContext) -> None:
        for field_name, spec in ctx.schema.items():
            if spec.on_update is None:
                continue
            value = call_with_supported_kwargs(
                spec.on_update,
                data=ctx.input_data,
                document=ctx.document,
                current_user=ctx.current_user,
                actor=ctx.actor,
                collection=ctx.collection,
                context=ctx.context,
            )
            if value is not None:
                ctx.input_data[field_name] = value
