"""XDI Identifier Model.

Value types for hierarchical identifiers:
- Segment: one atomic arc, e.g. ``+first``, ``+(personal)`` or ``$!(+name)``
- Identifier: a non-empty ordered sequence of segments, e.g. ``+first$!(+name)``

Both are immutable and compare structurally. ``parse_identifier`` is the
inverse of ``Identifier.render``.

Usage:
    from domain.identifiers import parse_identifier

    xri = parse_identifier("+(personal)+(person)$!(+(forename))")
    xri.segment_count        # -> 3
    str(xri.segment_at(2))   # -> "$!(+(forename))"
"""

from typing import Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.exceptions import IdentifierParseError, InvalidArgumentError

CONTEXT_SYMBOLS = "=@+$*!"

_LITERAL_STOP = frozenset(CONTEXT_SYMBOLS + "()/")


def _is_literal_char(ch: str) -> bool:
    return ch not in _LITERAL_STOP and not ch.isspace()


def _is_balanced(text: str) -> bool:
    depth = 0
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


class Segment(BaseModel):
    """A single arc of an identifier.

    Attributes:
        context: Leading context symbols (``+``, ``$!``, ...), may be empty
        literal: Bare literal following the context symbols
        xref: Raw text between the parentheses of a cross-reference
    """

    model_config = {"frozen": True}

    context: str = Field(default="", description="Context symbols, e.g. '+' or '$!'")
    literal: Optional[str] = Field(default=None, description="Bare literal, e.g. 'first'")
    xref: Optional[str] = Field(default=None, description="Cross-reference content without parentheses")

    @field_validator("context")
    @classmethod
    def _check_context(cls, value: str) -> str:
        if any(ch not in CONTEXT_SYMBOLS for ch in value):
            raise ValueError(f"invalid context symbols: {value!r}")
        return value

    @field_validator("literal")
    @classmethod
    def _check_literal(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and (not value or not all(_is_literal_char(ch) for ch in value)):
            raise ValueError(f"invalid literal: {value!r}")
        return value

    @field_validator("xref")
    @classmethod
    def _check_xref(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _is_balanced(value):
            raise ValueError(f"unbalanced cross-reference: {value!r}")
        return value

    @model_validator(mode="after")
    def _check_not_empty(self) -> "Segment":
        if self.literal is None and self.xref is None:
            raise ValueError("segment needs a literal or a cross-reference")
        return self

    @classmethod
    def of(cls, context: str = "", literal: Optional[str] = None, xref: Optional[str] = None) -> "Segment":
        """Build a segment, raising InvalidArgumentError instead of a validation error."""
        try:
            return cls(context=context, literal=literal, xref=xref)
        except ValueError as ex:
            raise InvalidArgumentError(str(ex)) from ex

    def inner(self) -> Optional["Segment"]:
        """Return the single segment wrapped by this segment's cross-reference.

        ``$!(+name)`` -> ``+name``; ``+(+(forename))`` -> ``+(forename)``.
        Returns None when there is no cross-reference, when a literal precedes
        it, or when its content is not exactly one segment (e.g. an IRI).
        """
        if self.xref is None or self.literal is not None:
            return None
        try:
            wrapped = parse_identifier(self.xref)
        except IdentifierParseError:
            return None
        if wrapped.segment_count != 1:
            return None
        return wrapped.segment_at(0)

    def render(self) -> str:
        text = self.context + (self.literal or "")
        if self.xref is not None:
            text += f"({self.xref})"
        return text

    def __str__(self) -> str:
        return self.render()


class Identifier(BaseModel):
    """Immutable, non-empty sequence of segments."""

    model_config = {"frozen": True}

    segments: Tuple[Segment, ...] = Field(..., min_length=1, description="Ordered segments")

    @model_validator(mode="after")
    def _check_boundaries(self) -> "Identifier":
        # rendered text must split back into the same segments
        for previous, segment in zip(self.segments, self.segments[1:]):
            if not segment.context and previous.xref is None:
                raise ValueError(
                    f"segment {segment.render()!r} has no context symbol and would "
                    f"merge with the preceding literal {previous.render()!r}"
                )
        return self

    @classmethod
    def of(cls, segments: Iterable[Segment]) -> "Identifier":
        """Build an identifier from segments, validating each one."""
        return IdentifierBuilder().extend(segments).build()

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    def segment_at(self, index: int) -> Segment:
        """Get the segment at a position.

        Raises:
            InvalidArgumentError: If index is outside 0..segment_count-1
        """
        if index < 0 or index >= len(self.segments):
            raise InvalidArgumentError(
                f"Segment index {index} out of range for {self.render()} ({len(self.segments)} segments)"
            )
        return self.segments[index]

    def parent(self) -> Optional["Identifier"]:
        """Identifier without its last segment; None for a single segment."""
        if len(self.segments) == 1:
            return None
        return Identifier(segments=self.segments[:-1])

    def concat(self, *others: Union["Identifier", Segment]) -> "Identifier":
        """Concatenate segment sequences."""
        builder = IdentifierBuilder().extend(self.segments)
        for other in others:
            if isinstance(other, Identifier):
                builder.extend(other.segments)
            else:
                builder.append(other)
        return builder.build()

    def starts_with(self, prefix: "Identifier") -> bool:
        n = len(prefix.segments)
        return self.segments[:n] == prefix.segments

    def render(self) -> str:
        return "".join(segment.render() for segment in self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return self.render()


class IdentifierBuilder:
    """Accumulates segments and builds an Identifier.

    Every appended value must be a Segment; building an empty builder fails.
    """

    def __init__(self):
        self._segments: List[Segment] = []

    def append(self, segment: Segment) -> "IdentifierBuilder":
        if not isinstance(segment, Segment):
            raise InvalidArgumentError(f"Expected a Segment, got {type(segment).__name__}")
        self._segments.append(segment)
        return self

    def extend(self, segments: Iterable[Segment]) -> "IdentifierBuilder":
        for segment in segments:
            self.append(segment)
        return self

    def __len__(self) -> int:
        return len(self._segments)

    def build(self) -> Identifier:
        if not self._segments:
            raise InvalidArgumentError("Cannot build an identifier without segments")
        try:
            return Identifier(segments=tuple(self._segments))
        except ValueError as ex:
            raise InvalidArgumentError(str(ex)) from ex


# ========================================
# Parsing
# ========================================

def _scan_xref(text: str, pos: int) -> Tuple[str, int]:
    """Scan a parenthesised cross-reference starting at text[pos] == '('."""
    depth = 0
    start = pos
    while pos < len(text):
        ch = text[pos]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return text[start + 1:pos], pos + 1
        pos += 1
    raise IdentifierParseError(text, start, "unterminated cross-reference")


def _scan_segment(text: str, pos: int) -> Tuple[Segment, int]:
    start = pos
    while pos < len(text) and text[pos] in CONTEXT_SYMBOLS:
        pos += 1
    context = text[start:pos]

    literal_start = pos
    while pos < len(text) and _is_literal_char(text[pos]):
        pos += 1
    literal = text[literal_start:pos] or None

    xref = None
    if pos < len(text) and text[pos] == "(":
        xref, pos = _scan_xref(text, pos)

    if literal is None and xref is None:
        raise IdentifierParseError(text, pos, "expected a literal or a cross-reference")

    return Segment(context=context, literal=literal, xref=xref), pos


def parse_segment(text: str) -> Segment:
    """Parse text that must contain exactly one segment."""
    identifier = parse_identifier(text)
    if identifier.segment_count != 1:
        raise IdentifierParseError(text, 0, f"expected one segment, found {identifier.segment_count}")
    return identifier.segment_at(0)


def parse_identifier(text: str) -> Identifier:
    """Parse the textual form of an identifier.

    Args:
        text: Identifier text, e.g. "+first$!(+name)"

    Returns:
        Parsed Identifier

    Raises:
        IdentifierParseError: If the text is empty or malformed
    """
    if text is None:
        raise InvalidArgumentError("Identifier text is None")
    if not text:
        raise IdentifierParseError(text, 0, "empty identifier")

    segments: List[Segment] = []
    pos = 0
    while pos < len(text):
        segment, pos = _scan_segment(text, pos)
        segments.append(segment)

    return Identifier(segments=tuple(segments))


def as_identifier(value: Union[Identifier, Segment, str, None]) -> Identifier:
    """Coerce a caller-supplied value into an Identifier.

    Raises:
        InvalidArgumentError: If value is None, empty or of an unsupported type
    """
    if value is None:
        raise InvalidArgumentError("Identifier is None")
    if isinstance(value, Identifier):
        return value
    if isinstance(value, Segment):
        return Identifier(segments=(value,))
    if isinstance(value, str):
        return parse_identifier(value.strip())
    raise InvalidArgumentError(f"Unsupported identifier type: {type(value).__name__}")
