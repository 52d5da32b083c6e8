"""In-memory mapping graph.

A tree of context nodes addressed by identifier paths, plus ``$is``
relations between nodes. A ``$is`` relation points from a node to the
canonical node it is a rewritten form of; seen from the target, the same
relation declares the source as one of its equivalents.

The graph is filled once by the statement reader and is only read
afterwards; it does no locking.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from domain.exceptions import ConfigurationError
from domain.identifiers import Identifier, Segment

logger = logging.getLogger(__name__)

IS_RELATION = "$is"


class ContextNode:
    """A node of the mapping graph."""

    def __init__(self, arc: Optional[Segment] = None, parent: Optional["ContextNode"] = None):
        self.arc = arc
        self.parent = parent
        self._children: Dict[Segment, "ContextNode"] = {}
        self._canonical: Optional["ContextNode"] = None
        self._equivalents: List["ContextNode"] = []

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def path(self) -> Optional[Identifier]:
        """Identifier path from the root; None for the root itself."""
        arcs: List[Segment] = []
        node = self
        while node is not None and node.arc is not None:
            arcs.append(node.arc)
            node = node.parent
        if not arcs:
            return None
        return Identifier(segments=tuple(reversed(arcs)))

    @property
    def canonical(self) -> Optional["ContextNode"]:
        """Target of the outgoing $is relation, if any."""
        return self._canonical

    @property
    def equivalents(self) -> Tuple["ContextNode", ...]:
        """Sources of incoming $is relations, in declaration order."""
        return tuple(self._equivalents)

    def get_child(self, arc: Segment) -> Optional["ContextNode"]:
        return self._children.get(arc)

    def children(self) -> Iterator["ContextNode"]:
        return iter(self._children.values())

    def _set_child(self, arc: Segment) -> "ContextNode":
        child = self._children.get(arc)
        if child is None:
            child = ContextNode(arc=arc, parent=self)
            self._children[arc] = child
        return child

    def __repr__(self) -> str:
        return f"ContextNode({self.path or '()'})"


class MappingGraph:
    """Context-node tree with exact-path lookup and $is relations."""

    def __init__(self, name: str = "mapping"):
        self.name = name
        self.root = ContextNode()
        self._relation_count = 0

    def find_context_node(self, path: Identifier) -> Optional[ContextNode]:
        """Find the node at exactly this path; no prefix matching."""
        node = self.root
        for arc in path.segments:
            node = node.get_child(arc)
            if node is None:
                return None
        return node

    def set_context_node(self, path: Identifier) -> ContextNode:
        """Find or create the node at this path, creating intermediate nodes."""
        node = self.root
        for arc in path.segments:
            node = node._set_child(arc)
        return node

    def set_is_relation(self, source: Identifier, target: Identifier) -> None:
        """Declare that the node at ``source`` is a form of the node at ``target``.

        Raises:
            ConfigurationError: If ``source`` already has a different $is target
        """
        source_node = self.set_context_node(source)
        target_node = self.set_context_node(target)

        if source_node._canonical is target_node:
            return
        if source_node._canonical is not None:
            raise ConfigurationError(
                f"{source} already has {IS_RELATION} {source_node._canonical.path}, cannot add {target}"
            )

        source_node._canonical = target_node
        target_node._equivalents.append(source_node)
        self._relation_count += 1

    def context_nodes(self) -> Iterator[ContextNode]:
        """All nodes except the root, depth first in insertion order."""
        stack = list(reversed(list(self.root.children())))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children())))

    @property
    def relation_count(self) -> int:
        return self._relation_count

    def __len__(self) -> int:
        return sum(1 for _ in self.context_nodes())

    def __repr__(self) -> str:
        return f"MappingGraph(name={self.name!r}, relations={self._relation_count})"
