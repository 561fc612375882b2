"""MatcherConfig: behaviour switches for one matching session.

MatcherConfig is a frozen (immutable) dataclass.  The property cache bound
is not part of it: that is an infrastructure parameter of
``DeclaredMemberEnumerator``.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["MatcherConfig"]


@dataclass(frozen=True, slots=True)
class MatcherConfig:
    """Immutable configuration for a MatchingContext.

    Attributes:
        root_name: Label of the comparison root in descriptions, e.g.
            ``"object"`` renders ``object.elapsedMillis is 5``.
        strict_keys: When True, keys present in the actual mapping but absent
            from the expected one are reported as mismatches.  Default False:
            the expected mapping's keys are checked as a subset.
        detect_cycles: When True, a pair of container nodes already being
            compared higher up the traversal is treated as matching, so
            self-referencing structures terminate.  Default True.
    """

    root_name: str = "object"
    strict_keys: bool = False
    detect_cycles: bool = True

    def __post_init__(self) -> None:
        if not self.root_name:
            msg = "root_name must be a non-empty string"
            raise ValueError(msg)
        if "." in self.root_name or "[" in self.root_name:
            msg = f"root_name must not contain '.' or '[', got {self.root_name!r}"
            raise ValueError(msg)
