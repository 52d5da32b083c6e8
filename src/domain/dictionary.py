"""Dictionary segment translations.

Instance segments and their dictionary counterparts differ by one level of
``+( )`` wrapping:

    instance    +first          +(personal)
    dictionary  +(+first)       +(+(personal))

Native vendor identifiers are the bare text inside an instance wrapper:
``+(personal)`` <-> ``"personal"``. Segments that do not have the expected
shape pass through unchanged.
"""

from domain.exceptions import InvalidArgumentError
from domain.identifiers import Segment

DICTIONARY_CONTEXT = "+"


def _is_wrapped(segment: Segment) -> bool:
    return segment.context == DICTIONARY_CONTEXT and segment.literal is None and segment.xref is not None


def instance_to_dictionary(segment: Segment) -> Segment:
    """``+first`` -> ``+(+first)``."""
    return Segment(context=DICTIONARY_CONTEXT, xref=segment.render())


def dictionary_to_instance(segment: Segment) -> Segment:
    """``+(+first)`` -> ``+first``; anything else passes through."""
    if not _is_wrapped(segment):
        return segment
    inner = segment.inner()
    return inner if inner is not None else segment


def instance_to_native_identifier(segment: Segment) -> str:
    """``+(personal)`` -> ``"personal"``; anything else renders as-is."""
    if _is_wrapped(segment):
        return segment.xref
    return segment.render()


def native_identifier_to_instance(native_identifier: str) -> Segment:
    """``"personal"`` -> ``+(personal)``."""
    if not native_identifier:
        raise InvalidArgumentError("Native identifier is empty")
    return Segment.of(context=DICTIONARY_CONTEXT, xref=native_identifier)
