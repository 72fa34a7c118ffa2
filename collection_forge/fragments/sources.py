"""
Fragment sources and their resolution.

A form may get its fragments from three places. ``resolve_fragment`` picks
the one with the highest precedence that is present:

1. ``ExplicitFragment``: a GraphQL string or an already parsed document
2. ``NamedFragment``: a name looked up in a ``FragmentRegistry``
3. ``GeneratedFragment``: a document generated from the schema
"""

from dataclasses import dataclass
from typing import Optional, Union

from graphql import DocumentNode, FragmentDefinitionNode

from .registry import FragmentRegistry, fragment_registry, parse_fragment_source


@dataclass(frozen=True)
class ExplicitFragment:
    source: Union[str, DocumentNode, None]
    precedence = 0

    def is_present(self) -> bool:
        return bool(self.source)

    def resolve(self, registry: FragmentRegistry) -> DocumentNode:
        return parse_fragment_source(self.source)


@dataclass(frozen=True)
class NamedFragment:
    name: Optional[str]
    precedence = 1

    def is_present(self) -> bool:
        return bool(self.name)

    def resolve(self, registry: FragmentRegistry) -> DocumentNode:
        return registry.get_fragment(self.name)


@dataclass(frozen=True)
class GeneratedFragment:
    document: Optional[DocumentNode]
    precedence = 2

    def is_present(self) -> bool:
        return self.document is not None

    def resolve(self, registry: FragmentRegistry) -> DocumentNode:
        return self.document


FragmentSource = Union[ExplicitFragment, NamedFragment, GeneratedFragment]


def resolve_fragment(
    *sources: FragmentSource, registry: Optional[FragmentRegistry] = None
) -> Optional[DocumentNode]:
    """
    Return the document of the highest-precedence source that is present.

    The order in which ``sources`` are passed does not matter. Returns None
    when no source is present.
    """
    registry = registry if registry is not None else fragment_registry
    present = [source for source in sources if source.is_present()]
    if not present:
        return None
    winner = min(present, key=lambda source: source.precedence)
    return winner.resolve(registry)


def main_fragment_name(document: DocumentNode) -> str:
    """Name of the first fragment defined in ``document``."""
    for definition in document.definitions:
        if isinstance(definition, FragmentDefinitionNode):
            return definition.name.value
    raise ValueError("Document does not define a fragment")
