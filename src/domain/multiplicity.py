"""Multiplicity decoration of identifier segments.

Decoration is surface syntax only:
- entity singleton:    ``+first``        (undecorated)
- attribute singleton: ``$!(+name)``
- collection:          ``$(+name)``

Dictionary lookups always work on the base (undecorated) form, and
reconstruction re-applies decoration positionally via ``decorate_path``.
"""

from typing import Iterable, List

from domain.exceptions import InvalidArgumentError
from domain.identifiers import Identifier, IdentifierBuilder, Segment

ATTRIBUTE_SINGLETON = "$!"
COLLECTION = "$"

def _is_decorated(segment: Segment, context: str) -> bool:
    return segment.context == context and segment.inner() is not None


def is_attribute_singleton(segment: Segment) -> bool:
    return _is_decorated(segment, ATTRIBUTE_SINGLETON)


def is_collection(segment: Segment) -> bool:
    return _is_decorated(segment, COLLECTION)


def base_form(segment: Segment) -> Segment:
    """Strip multiplicity decoration until an undecorated segment remains.

    ``$!(+name)`` -> ``+name``, ``$($!(+x))`` -> ``+x``, ``+first`` -> ``+first``.
    """
    current = segment
    while is_attribute_singleton(current) or is_collection(current):
        current = current.inner()
    return current


def entity_singleton(segment: Segment) -> Segment:
    """Render a segment as a non-terminal (entity) node."""
    return base_form(segment)


def attribute_singleton(segment: Segment) -> Segment:
    """Render a segment as a terminal (attribute) node."""
    return Segment(context=ATTRIBUTE_SINGLETON, xref=base_form(segment).render())


def decorate_path(segments: Iterable[Segment]) -> Identifier:
    """Apply the positional decoration rule to a path.

    Every segment except the last becomes an entity singleton, the last
    becomes an attribute singleton.

    Raises:
        InvalidArgumentError: If no segments are given
    """
    items: List[Segment] = list(segments)
    if not items:
        raise InvalidArgumentError("Cannot decorate an empty path")

    builder = IdentifierBuilder()
    for segment in items[:-1]:
        builder.append(entity_singleton(segment))
    builder.append(attribute_singleton(items[-1]))
    return builder.build()
