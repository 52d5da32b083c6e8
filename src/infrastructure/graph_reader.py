"""Mapping graph statement reader.

Reads the line-based statement format of the bundled mapping definition
into a MappingGraph:

    # comment
    +(https://allfiled.com/)+(+(personal))+(+(person))+(+(forename))/$is/+(+first)+(+name)
    +(+first)//+(+name)

Each statement is ``subject/predicate/object``. ``$is`` declares a
canonical-of relation; an empty predicate declares that ``object`` is a
child context of ``subject``. Slashes inside parentheses (IRIs) do not
split statements.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from domain.exceptions import ConfigurationError, IdentifierParseError
from domain.identifiers import parse_identifier
from infrastructure.memory_graph import IS_RELATION, MappingGraph

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"

BUNDLED_MAPPING_PATH = Path(__file__).parent / "mappings" / "allfiled.xdi"


def split_statement(line: str) -> List[str]:
    """Split a statement on top-level slashes."""
    parts: List[str] = []
    depth = 0
    current = []
    for ch in line:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "/" and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return parts


def read_statements(lines: Iterable[str], graph: MappingGraph, source: str = "<memory>") -> MappingGraph:
    """Read statements into an existing graph.

    Args:
        lines: Statement lines
        graph: Graph to populate
        source: Name used in error messages

    Returns:
        The populated graph

    Raises:
        ConfigurationError: On any malformed statement
    """
    count = 0
    for line_no, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue

        parts = split_statement(line)
        if len(parts) != 3:
            raise ConfigurationError(f"{source}:{line_no}: expected subject/predicate/object, got {line!r}")

        subject_text, predicate, object_text = (part.strip() for part in parts)
        try:
            subject = parse_identifier(subject_text)
            obj = parse_identifier(object_text)
        except IdentifierParseError as ex:
            raise ConfigurationError(f"{source}:{line_no}: {ex}") from ex

        if predicate == IS_RELATION:
            graph.set_is_relation(subject, obj)
        elif predicate == "":
            graph.set_context_node(subject.concat(obj))
        else:
            raise ConfigurationError(f"{source}:{line_no}: unsupported predicate {predicate!r}")
        count += 1

    logger.debug(f"Read {count} statements from {source}")
    return graph


def read_mapping_graph(path: Union[str, Path], name: Optional[str] = None) -> MappingGraph:
    """Load a mapping definition file into a new graph.

    Raises:
        ConfigurationError: If the file cannot be read or is malformed
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as ex:
        raise ConfigurationError(f"Cannot read mapping definition {path}: {ex}") from ex

    graph = MappingGraph(name=name or path.stem)
    read_statements(text.splitlines(), graph, source=str(path))
    logger.info(f"Loaded mapping graph {graph.name} from {path} ({graph.relation_count} relations)")
    return graph
