"""PathPattern: parsed exclusion rules matched structurally against ObjectPaths.

Grammar (text before the first ``.`` or ``[`` names the root and is ignored)::

    pattern   := root segment+
    segment   := "." identifier | "[" index "]"
    identifier:= [A-Za-z_$][A-Za-z0-9_$]* | "*"
    index     := "0" | [1-9][0-9]* | "*" | "'" quoted "'"
    quoted    := ( [^'\\] | "\\" any )*

``*`` (quoted or not) is a single-level wildcard: it stands for any literal
at its position, never for any number of levels.

Inside a quoted key, a backslash escapes the next character, so the key
``it's`` is written ``['it\\'s']``.

Example::

    pattern = PathPattern.compile("object.items[*]['updatedAt']")
    str(pattern)       # "object.items[*]['updatedAt']"
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum, auto

from equivalence_matcher.errors import PatternSyntaxError
from equivalence_matcher.path.object_path import ElementKind, PathElement

__all__ = ["WILDCARD", "PathPattern", "PatternElement", "PatternKind"]

WILDCARD = "*"

# Matched right after the "." of a property segment
_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*|\*")

# Matched from the "[" of an indexed segment; group 1 is the literal
_INDEXED = re.compile(r"\[(0|[1-9][0-9]*|\*|'(?:[^'\\]|\\.)*')\]")

# A backslash escape inside a quoted key
_ESCAPE = re.compile(r"\\(.)")

_SEGMENT_START = re.compile(r"[.\[]")


class PatternKind(StrEnum):
    """Kind of a pattern segment.

    - PROPERTY_VALUE -> ".name"  : matches PROPERTY path segments only
    - INDEXED_VALUE  -> "[...]"  : matches INDEX and KEY path segments
    """

    PROPERTY_VALUE = auto()
    INDEXED_VALUE = auto()


@dataclass(frozen=True, slots=True)
class PatternElement:
    """One parsed pattern segment.

    Attributes:
        kind:    PROPERTY_VALUE or INDEXED_VALUE.
        literal: The segment text as written (quotes kept for quoted keys).
    """

    kind: PatternKind
    literal: str

    @property
    def value(self) -> str:
        """The literal with surrounding quotes removed and escapes resolved."""
        if len(self.literal) >= 2 and self.literal[0] == self.literal[-1] == "'":
            return _ESCAPE.sub(r"\1", self.literal[1:-1])
        return self.literal

    @property
    def is_wildcard(self) -> bool:
        return self.value == WILDCARD

    def accepts(self, element: PathElement) -> bool:
        if self.kind is PatternKind.PROPERTY_VALUE:
            if element.kind is not ElementKind.PROPERTY:
                return False
        elif element.kind not in (ElementKind.INDEX, ElementKind.KEY):
            return False

        return self.is_wildcard or self.value == element.name

    def __str__(self) -> str:
        if self.kind is PatternKind.PROPERTY_VALUE:
            return f".{self.literal}"
        return f"[{self.literal}]"


@dataclass(frozen=True, slots=True)
class PathPattern:
    """An immutable exclusion pattern.

    Use ``PathPattern.compile(text)`` rather than the constructor.

    Attributes:
        source:   The original pattern text, root name included.
        elements: Parsed segments, root discarded.
    """

    source: str = field(compare=False)
    elements: tuple[PatternElement, ...]

    @classmethod
    def compile(cls, text: str) -> PathPattern:
        """Parse ``text`` into a PathPattern in a single scanning pass.

        Raises:
            PatternSyntaxError: If the text has no segment, or any character at
                a segment boundary does not start a valid segment.
        """
        start = _SEGMENT_START.search(text)
        if start is None:
            msg = "expected '.' or '[' after the root name"
            raise PatternSyntaxError(msg, text, len(text))

        elements: list[PatternElement] = []
        pos = start.start()
        while pos < len(text):
            ch = text[pos]
            if ch == ".":
                match = _IDENTIFIER.match(text, pos + 1)
                if match is None:
                    msg = "expected an identifier or '*'"
                    raise PatternSyntaxError(msg, text, pos + 1)
                kind, literal = PatternKind.PROPERTY_VALUE, match.group()
            elif ch == "[":
                match = _INDEXED.match(text, pos)
                if match is None:
                    msg = "expected an index, '*' or a quoted key inside '[...]'"
                    raise PatternSyntaxError(msg, text, pos)
                kind, literal = PatternKind.INDEXED_VALUE, match.group(1)
            else:
                raise PatternSyntaxError(f"unexpected character {ch!r}", text, pos)
            elements.append(PatternElement(kind, literal))
            pos = match.end()

        return cls(source=text, elements=tuple(elements))

    def is_acceptable(self, path: Iterable[PathElement]) -> bool:
        """Return True if ``path`` matches this pattern exactly.

        Segment counts must be equal; every pattern segment must accept the
        path segment at the same position.
        """
        segments = tuple(path)
        if len(segments) != len(self.elements):
            return False
        return all(
            element.accepts(segment)
            for element, segment in zip(self.elements, segments, strict=True)
        )

    def __len__(self) -> int:
        return len(self.elements)

    def __str__(self) -> str:
        return self.source
