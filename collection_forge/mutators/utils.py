"""
Helpers shared by the mutator pipeline steps.
"""

import html
import inspect
from typing import Any, Callable

import bleach


def sanitize_value(value: Any) -> Any:
    """
    Strip HTML tags from strings, recursing into dicts and lists.

    Only tags are removed: entities bleach escapes while parsing are turned
    back into text, so "Tom & Jerry" is stored as typed.

    Non-string values are returned unchanged.
    """
    if isinstance(value, str):
        return html.unescape(bleach.clean(value, tags=set(), attributes={}, strip=True))
    if isinstance(value, dict):
        return {key: sanitize_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [sanitize_value(item) for item in value]
    return value


def sanitize_input_data(input_data: dict[str, Any]) -> dict[str, Any]:
    return {key: sanitize_value(value) for key, value in input_data.items()}


def call_with_supported_kwargs(func: Callable[..., Any], **kwargs: Any) -> Any:
    """
    Call ``func`` with the subset of ``kwargs`` its signature accepts.

    Functions taking ``**kwargs`` receive everything; functions taking no
    parameters are called bare.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return func(**kwargs)

    parameters = signature.parameters.values()
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in parameters):
        return func(**kwargs)
    accepted = {
        name: value
        for name, value in kwargs.items()
        if name in signature.parameters
        and signature.parameters[name].kind
        in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
    }
    return func(**accepted)
