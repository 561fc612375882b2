"""Exception hierarchy for equivalence-matcher.

Mismatches are never exceptions: a failed comparison is reported through the
boolean result of ``matches()`` and the recorded ``MismatchReport``.  The
exceptions below signal conditions that interrupt the whole comparison:

- ``PatternSyntaxError``   -- malformed exclusion-pattern text (raised at
  compile / ``exclude()`` time, never deferred to comparison time).
- ``EmptyPathError``       -- ``ObjectPath.pop()`` on an empty path; an
  unbalanced push/pop inside the matcher itself.
- ``ShapeResolutionError`` -- the comparable properties of a value cannot be
  determined.
"""

from __future__ import annotations

__all__ = [
    "EmptyPathError",
    "MatcherError",
    "PatternSyntaxError",
    "ShapeResolutionError",
]


class MatcherError(Exception):
    """Base class for every error raised by equivalence-matcher."""


class PatternSyntaxError(MatcherError, ValueError):
    """Raised when exclusion-pattern text cannot be parsed.

    Attributes:
        pattern:  The full pattern text that was being compiled.
        position: Offset into ``pattern`` where scanning failed.
    """

    def __init__(self, message: str, pattern: str, position: int) -> None:
        super().__init__(f"{message} at offset {position} in pattern {pattern!r}")
        self.pattern = pattern
        self.position = position


class EmptyPathError(MatcherError, RuntimeError):
    """Raised when popping a segment from an empty ObjectPath."""


class ShapeResolutionError(MatcherError, TypeError):
    """Raised when a value's comparable property set cannot be resolved."""

    def __init__(self, value_type: type) -> None:
        super().__init__(
            f"cannot enumerate comparable properties of {value_type.__qualname__!r}: "
            "it declares no members, has no instance __dict__ and no __eq__"
        )
        self.value_type = value_type
