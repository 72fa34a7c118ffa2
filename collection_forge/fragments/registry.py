"""
Named GraphQL fragment registry.
"""

import logging
import threading
from typing import Iterator, Optional, Union

from graphql import (
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    SelectionSetNode,
    parse,
    print_ast,
)

from ..core.exceptions import FragmentNotFoundError, ImproperlyConfiguredCollection

logger = logging.getLogger(__name__)


def parse_fragment_source(source: Union[str, DocumentNode]) -> DocumentNode:
    """Parse ``source`` unless it already is a document."""
    if isinstance(source, DocumentNode):
        return source
    return parse(source)


def _iter_spreads(selection_set: Optional[SelectionSetNode]) -> Iterator[str]:
    if selection_set is None:
        return
    for selection in selection_set.selections:
        if isinstance(selection, FragmentSpreadNode):
            yield selection.name.value
        elif isinstance(selection, (FieldNode, InlineFragmentNode)):
            yield from _iter_spreads(selection.selection_set)


class FragmentRegistry:
    """
    Fragments stored by name.

    Example:
        registry.register_fragment('''
            fragment PostSummary on Post { _id title }
        ''')
        registry.get_fragment("PostSummary")  # DocumentNode
    """

    def __init__(self):
        self._fragments: dict[str, FragmentDefinitionNode] = {}
        self._lock = threading.Lock()

    def register_fragment(self, source: Union[str, DocumentNode]) -> list[str]:
        """Register every fragment defined in ``source`` and return their names."""
        document = parse_fragment_source(source)
        names = []
        with self._lock:
            for definition in document.definitions:
                if not isinstance(definition, FragmentDefinitionNode):
                    raise ImproperlyConfiguredCollection(
                        "Only fragment definitions can be registered"
                    )
                name = definition.name.value
                if name in self._fragments:
                    logger.debug("Replacing fragment %s", name)
                self._fragments[name] = definition
                names.append(name)
        return names

    def has_fragment(self, name: str) -> bool:
        return name in self._fragments

    def get_fragment(self, name: str) -> DocumentNode:
        """
        Return a document holding fragment ``name`` and every fragment it
        spreads, transitively.

        Raises:
            FragmentNotFoundError: ``name`` or one of its spreads is unknown
        """
        collected: dict[str, FragmentDefinitionNode] = {}
        pending = [name]
        while pending:
            current = pending.pop(0)
            if current in collected:
                continue
            definition = self._fragments.get(current)
            if definition is None:
                raise FragmentNotFoundError(current)
            collected[current] = definition
            pending.extend(_iter_spreads(definition.selection_set))
        return DocumentNode(definitions=tuple(collected.values()))

    def get_fragment_text(self, name: str) -> str:
        return print_ast(self.get_fragment(name))

    def names(self) -> list[str]:
        return sorted(self._fragments)

    def clear(self) -> None:
        with self._lock:
            self._fragments.clear()


# Global fragment registry instance
fragment_registry = FragmentRegistry()


def register_fragment(source: Union[str, DocumentNode]) -> list[str]:
    return fragment_registry.register_fragment(source)


def get_fragment(name: str) -> DocumentNode:
    return fragment_registry.get_fragment(name)
