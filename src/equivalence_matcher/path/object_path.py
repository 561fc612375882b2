"""ObjectPath: the live locator of the node currently being compared.

An ObjectPath is a stack of ``PathElement`` segments from the comparison root
down to the current node.  Its string form is the same grammar that
``PathPattern.compile`` parses (minus the root name):

- PROPERTY -> ".name"
- INDEX    -> "[N]"
- KEY      -> "['key']", with "\\" and "'" inside the key escaped by a
  backslash
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import Any

from equivalence_matcher.errors import EmptyPathError

__all__ = ["ElementKind", "ObjectPath", "PathElement"]


class ElementKind(StrEnum):
    """How a path segment was reached from its parent."""

    PROPERTY = auto()
    INDEX = auto()
    KEY = auto()


@dataclass(frozen=True, slots=True)
class PathElement:
    """One navigation step: a property name, a sequence index or a mapping key.

    Attributes:
        kind: Which kind of step this is (see ElementKind).
        name: The property name, the index digits, or ``str(key)``.
    """

    kind: ElementKind
    name: str

    @classmethod
    def property(cls, name: str) -> PathElement:
        return cls(ElementKind.PROPERTY, name)

    @classmethod
    def index(cls, index: int) -> PathElement:
        return cls(ElementKind.INDEX, str(index))

    @classmethod
    def key(cls, key: Any) -> PathElement:
        return cls(ElementKind.KEY, str(key))

    def __str__(self) -> str:
        if self.kind is ElementKind.PROPERTY:
            return f".{self.name}"
        if self.kind is ElementKind.INDEX:
            return f"[{self.name}]"
        escaped = self.name.replace("\\", "\\\\").replace("'", "\\'")
        return f"['{escaped}']"


@dataclass(slots=True)
class ObjectPath:
    """Mutable stack of PathElement segments.

    One instance lives for a whole matching session and is mutated in place
    during traversal.  Code that needs to keep the current location past the
    next push/pop must take a ``snapshot()``.
    """

    _elements: list[PathElement] = field(default_factory=list)

    def push(self, element: PathElement) -> None:
        self._elements.append(element)

    def pop(self) -> PathElement:
        """Remove and return the last segment.

        Raises:
            EmptyPathError: If the path has no segments.
        """
        if not self._elements:
            msg = "pop() from an empty ObjectPath"
            raise EmptyPathError(msg)
        return self._elements.pop()

    @contextmanager
    def descend(self, element: PathElement) -> Iterator[ObjectPath]:
        """Push ``element`` for the duration of the block, popping it on exit."""
        self.push(element)
        try:
            yield self
        finally:
            self.pop()

    def snapshot(self) -> tuple[PathElement, ...]:
        """Return an immutable copy of the current segments."""
        return tuple(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[PathElement]:
        return iter(self._elements)

    def __str__(self) -> str:
        return "".join(str(element) for element in self._elements)
