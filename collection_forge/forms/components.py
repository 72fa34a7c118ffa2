"""
Presentation components used by the form wrapper.

Components are plain callables taking keyword props and returning a render
description (a dict). ``ComponentElement`` pairs a component with its bound
props, so the wrapper can build it once and render it many times.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from ..core.permissions import Operation, actor_for_user
from ..core.schema import ID_FIELD, CollectionSchema

Component = Callable[..., dict[str, Any]]


@dataclass
class ComponentElement:
    component: Component
    props: dict[str, Any] = field(default_factory=dict)

    def clone(self, **props: Any) -> "ComponentElement":
        """Return a copy whose props are the stored ones merged with ``props``."""
        return ComponentElement(self.component, {**self.props, **props})

    def render(self, **props: Any) -> dict[str, Any]:
        return self.component(**{**self.props, **props})


def Loading(**props: Any) -> dict[str, Any]:
    return {"component": "Loading"}


def _form_fields(
    schema: CollectionSchema,
    form_type: str,
    current_user: Any,
    fields: Optional[list[str]],
    hide_fields: Optional[list[str]],
    add_fields: Optional[list[str]],
) -> list[str]:
    operation = Operation.CREATE if form_type == "new" else Operation.UPDATE
    actor = actor_for_user(current_user)
    names = [
        name
        for name in schema.allowed_fields(actor, operation)
        if name != ID_FIELD and not schema[name].hidden
    ]
    if fields is not None:
        names = [name for name in names if name in fields]
    for name in add_fields or []:
        if name in schema and name not in names:
            names.append(name)
    hidden = set(hide_fields or [])
    return [name for name in names if name not in hidden]


def Form(
    *,
    form_type: str,
    schema: CollectionSchema,
    document: Optional[dict[str, Any]] = None,
    current_user: Any = None,
    layout: str = "horizontal",
    fields: Optional[list[str]] = None,
    hide_fields: Optional[list[str]] = None,
    add_fields: Optional[list[str]] = None,
    prefilled_props: Optional[dict[str, Any]] = None,
    **props: Any,
) -> dict[str, Any]:
    """
    Describe the form to render: its editable fields, their initial values
    and the submit/remove actions injected by the mutation adapters.
    """
    field_names = _form_fields(schema, form_type, current_user, fields, hide_fields, add_fields)
    initial: dict[str, Any] = {}
    if form_type == "new":
        initial.update(
            {
                name: copy.deepcopy(schema[name].default)
                for name in field_names
                if schema[name].default is not None
            }
        )
    initial.update(prefilled_props or {})
    if document:
        initial.update({name: document[name] for name in field_names if name in document})

    if form_type == "new":
        submit = props.get("create_document")
    else:
        submit = props.get("update_document")

    return {
        "component": "Form",
        "form_type": form_type,
        "layout": layout,
        "document": document,
        "fields": [
            {
                "name": name,
                "type": schema[name].type.__name__,
                "label": schema[name].label or name,
                "optional": schema[name].optional,
                "value": initial.get(name),
            }
            for name in field_names
        ],
        "submit": submit,
        "remove": props.get("delete_document") if props.get("show_remove", True) else None,
        "loading": bool(props.get("loading", False)),
        "errors": list(props.get("errors") or []),
    }


def make_loader(
    form_component: Component,
    loading_component: Component,
    child_props: dict[str, Any],
) -> Component:
    """
    Build the loading gate of edit forms.

    It renders ``loading_component`` while the document is being fetched and
    ``form_component`` with the fetched document once it has arrived.
    """

    def Loader(**props: Any) -> dict[str, Any]:
        if props.get("loading"):
            return loading_component(**props)
        return form_component(**{**child_props, **props})

    Loader.__name__ = f"with_loader({getattr(form_component, '__name__', 'Form')})"
    return Loader
