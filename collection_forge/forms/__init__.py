"""Form composition: the form wrapper, its adapters and components."""

from .adapters import (
    MutationOptions,
    QueryOptions,
    SingleDocumentLoader,
    compose,
    with_create,
    with_delete,
    with_single,
    with_update,
)
from .components import ComponentElement, Form, Loading, make_loader
from .wrapper import FormWrapper

__all__ = [
    "MutationOptions",
    "QueryOptions",
    "SingleDocumentLoader",
    "compose",
    "with_create",
    "with_delete",
    "with_single",
    "with_update",
    "ComponentElement",
    "Form",
    "Loading",
    "make_loader",
    "FormWrapper",
]
