"""Mapping Error Taxonomy.

Errors raised by the identifier model, the dictionary index and the
mapping engine. "No mapping" is not an error: conversions return ``None``
for identifiers without a declared equivalence.
"""

from typing import Optional


class MappingError(Exception):
    """Base class for all mapping errors."""


class InvalidArgumentError(MappingError, ValueError):
    """Caller passed a null, empty or wrong-arity identifier."""


class IdentifierParseError(InvalidArgumentError):
    """Textual identifier could not be parsed."""

    def __init__(self, text: str, position: int, reason: str):
        self.text = text
        self.position = position
        self.reason = reason
        super().__init__(f"Cannot parse identifier {text!r} at position {position}: {reason}")


class ConfigurationError(MappingError):
    """The mapping graph definition failed to load or is inconsistent."""


class CanonicalCycleError(ConfigurationError):
    """Following canonical-of ($is) relations never reaches a canonical node."""

    def __init__(self, start: str, cycle: Optional[list] = None):
        self.start = start
        self.cycle = cycle or []
        path = " -> ".join(self.cycle) if self.cycle else start
        super().__init__(f"Canonical-of cycle starting at {start}: {path}")


class NoEquivalenceDeclaredError(MappingError, LookupError):
    """A dictionary node has no declared equivalent node."""
