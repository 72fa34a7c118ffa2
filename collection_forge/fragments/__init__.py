"""GraphQL fragments: registry, generated form fragments and source resolution."""

from .generation import build_fragment, form_fragment_name, get_form_fragments
from .registry import FragmentRegistry, fragment_registry, get_fragment, register_fragment
from .sources import (
    ExplicitFragment,
    FragmentSource,
    GeneratedFragment,
    NamedFragment,
    main_fragment_name,
    resolve_fragment,
)

__all__ = [
    "build_fragment",
    "form_fragment_name",
    "get_form_fragments",
    "FragmentRegistry",
    "fragment_registry",
    "get_fragment",
    "register_fragment",
    "ExplicitFragment",
    "FragmentSource",
    "GeneratedFragment",
    "NamedFragment",
    "main_fragment_name",
    "resolve_fragment",
]
