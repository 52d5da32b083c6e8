"""Dictionary Index.

Read-only view over the mapping graph used by the mapping engine:
- segment translation between instance and dictionary form
- exact-path node lookup
- canonical-of resolution (following $is relations)
- equivalence lookup (incoming $is relations)

The index is built once from the bundled mapping definition and shared.
Usage:
    index = get_dictionary_index()
    node = index.find_node(path)
    canonical = index.canonical_of(node)
"""

import logging
from pathlib import Path
from threading import Lock
from typing import List, Optional, Set, Union

from config.mapping_config import get_mapping_config
from domain.dictionary import (
    dictionary_to_instance,
    instance_to_dictionary,
    instance_to_native_identifier,
)
from domain.exceptions import CanonicalCycleError, NoEquivalenceDeclaredError
from domain.identifiers import Identifier, Segment
from infrastructure.graph_reader import read_mapping_graph
from infrastructure.memory_graph import ContextNode, MappingGraph

logger = logging.getLogger(__name__)


class DictionaryIndex:
    """Equivalence lookups over a loaded MappingGraph.

    Safe for concurrent readers; nothing here mutates the graph.
    """

    def __init__(self, mapping_graph: MappingGraph, validate: bool = True):
        """
        Initialize the index.

        Args:
            mapping_graph: Loaded mapping graph
            validate: Check that every canonical-of walk terminates

        Raises:
            CanonicalCycleError: If validation finds a $is cycle
        """
        if validate:
            self._validate(mapping_graph)
        self._mapping_graph = mapping_graph

    @classmethod
    def from_resource(cls, path: Union[str, Path]) -> "DictionaryIndex":
        """Load a mapping definition and build a validated index.

        Raises:
            ConfigurationError: If the definition cannot be loaded or is inconsistent
        """
        return cls(read_mapping_graph(path))

    # --- Graph access ---

    @property
    def mapping_graph(self) -> MappingGraph:
        return self._mapping_graph

    def set_mapping_graph(self, mapping_graph: MappingGraph) -> None:
        """Replace the underlying graph (overrides and tests only)."""
        self._validate(mapping_graph)
        self._mapping_graph = mapping_graph
        logger.info(f"Mapping graph replaced with {mapping_graph!r}")

    # --- Segment translation ---

    def native_to_dictionary_path(self, segment: Segment) -> Segment:
        return instance_to_dictionary(segment)

    def dictionary_path_to_native(self, segment: Segment) -> Segment:
        return dictionary_to_instance(segment)

    def native_identifier(self, segment: Segment) -> str:
        return instance_to_native_identifier(segment)

    # --- Graph lookups ---

    def find_node(self, path: Identifier) -> Optional[ContextNode]:
        """Exact-path lookup; None when no node exists at the path."""
        return self._mapping_graph.find_context_node(path)

    def canonical_of(self, node: ContextNode) -> ContextNode:
        """Follow $is relations until a node without one is reached.

        Raises:
            CanonicalCycleError: If the walk revisits a node
        """
        visited: Set[int] = {id(node)}
        trail: List[ContextNode] = [node]
        current = node
        while current.canonical is not None:
            current = current.canonical
            if id(current) in visited:
                raise CanonicalCycleError(
                    str(node.path), [str(n.path) for n in trail] + [str(current.path)]
                )
            visited.add(id(current))
            trail.append(current)
        return current

    def first_equivalent_of(
        self, node: ContextNode, namespace: Optional[Identifier] = None
    ) -> ContextNode:
        """First node declared equivalent to ``node``.

        With a namespace, equivalents outside it are skipped before the first
        one is taken, so synonyms declared earlier on the canonical side do not
        hide the vendor node.

        Args:
            node: Canonical node
            namespace: Only consider equivalents whose path starts with this prefix

        Raises:
            NoEquivalenceDeclaredError: If no (matching) node declares ``node`` as its canonical form
        """
        for equivalent in node.equivalents:
            if namespace is None or equivalent.path.starts_with(namespace):
                return equivalent
        scope = f" in {namespace}" if namespace is not None else ""
        raise NoEquivalenceDeclaredError(f"No equivalent declared for {node.path}{scope}")

    def _validate(self, mapping_graph: MappingGraph) -> None:
        for node in mapping_graph.context_nodes():
            if node.canonical is not None:
                self.canonical_of(node)


# Shared instance (lazy loaded)
_index: Optional[DictionaryIndex] = None
_index_lock = Lock()


def get_dictionary_index(path: Optional[Union[str, Path]] = None) -> DictionaryIndex:
    """Get the process-wide dictionary index, loading it on first use.

    Args:
        path: Mapping definition to load; defaults to the configured one.
            Ignored once the index exists.
    """
    global _index
    if _index is None:
        with _index_lock:
            if _index is None:
                if path is None:
                    path = get_mapping_config().mapping_path
                _index = DictionaryIndex.from_resource(path)
    return _index


def reset_dictionary_index() -> None:
    """Drop the shared index so the next call reloads it."""
    global _index
    with _index_lock:
        _index = None
