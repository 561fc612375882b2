"""MismatchReport dataclass: the recorded first mismatch of a matching session.

The report holds an immutable snapshot of the path at failure time, so
later traversal of the live ObjectPath cannot alter it.
"""

from __future__ import annotations

from dataclasses import dataclass

from equivalence_matcher.path.object_path import PathElement

__all__ = ["MismatchReport"]


@dataclass(frozen=True, slots=True)
class MismatchReport:
    """Where and how the comparison failed.

    Attributes:
        path:     Segments from the root to the mismatching node.
        expected: Expectation half of the message, e.g. ``"is 5"``.
        actual:   Mismatch half of the message, e.g. ``"is 9000"``.
    """

    path: tuple[PathElement, ...]
    expected: str
    actual: str

    @property
    def location(self) -> str:
        """The rendered path, e.g. ``".wordCounts['hello']"`` (empty at the root)."""
        return "".join(str(element) for element in self.path)

    def describe_expectation(self, root_name: str = "object") -> str:
        return f"{root_name}{self.location} {self.expected}"

    def describe_mismatch(self, root_name: str = "object") -> str:
        return f"{root_name}{self.location} {self.actual}"
