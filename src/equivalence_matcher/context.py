"""MatchingContext: one comparison session and its per-shape internal matchers.

Architecture:
- ``MatchingContext.matches(expected, actual)`` classifies ``expected`` (see
  ``shape.classify``) and hands ``actual`` to the InternalMatcher for that
  shape.
- Container matchers (sequence, mapping, structureless object) walk the
  children of ``expected`` through ``verified()``, a lazy generator that
  pushes each candidate segment onto the live ObjectPath, tests it against
  every exclusion pattern and pops it again.  Excluded children are skipped
  without being compared.
- ``forward()`` pushes the child segment, compares the child with a fresh
  InternalMatcher and pops the segment in a ``finally``, so the live path is
  balanced on every exit, mismatch or exception.
- The first mismatch wins: it is frozen into a ``MismatchReport`` (with an
  immutable path snapshot) and ``False`` propagates straight up the call
  chain.  Nothing else is recorded after it.

A MatchingContext holds one mutable path and one mismatch slot, so it must
not be shared by overlapping comparisons.  Each session owns its context.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

import numpy as np

from equivalence_matcher.config import MatcherConfig
from equivalence_matcher.path.object_path import ObjectPath, PathElement
from equivalence_matcher.path.pattern import PathPattern
from equivalence_matcher.properties import default_enumerator
from equivalence_matcher.result import MismatchReport
from equivalence_matcher.shape import Shape, classify, is_keyed, is_sequence

if TYPE_CHECKING:
    from equivalence_matcher.protocols import PropertyEnumerator

__all__ = ["InternalMatcher", "MatchingContext", "PatternSource"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

PatternSource = PathPattern | str

# Shapes whose matchers recurse, and so can revisit a node in a cyclic graph
_CONTAINER_SHAPES = frozenset({Shape.SEQUENCE, Shape.KEYED, Shape.STRUCTURELESS})


class MatchingContext:
    """Orchestrates one comparison session.

    Args:
        config: Session behaviour.  Defaults to ``MatcherConfig()``.
        enumerator: A PropertyEnumerator-conformant object used for
            STRUCTURELESS values.  Defaults to the shared
            ``DeclaredMemberEnumerator``.
    """

    def __init__(
        self,
        config: MatcherConfig | None = None,
        enumerator: PropertyEnumerator | None = None,
    ) -> None:
        self._config: MatcherConfig = config if config is not None else MatcherConfig()
        self._enumerator: PropertyEnumerator = (
            enumerator if enumerator is not None else default_enumerator
        )
        # dict as an insertion-ordered set
        self._exclusions: dict[PathPattern, None] = {}
        self._path = ObjectPath()
        self._mismatch: MismatchReport | None = None
        self._active: set[tuple[int, int]] = set()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> MatcherConfig:
        return self._config

    @property
    def enumerator(self) -> PropertyEnumerator:
        return self._enumerator

    @property
    def exclusions(self) -> tuple[PathPattern, ...]:
        return tuple(self._exclusions)

    @property
    def current_path(self) -> ObjectPath:
        """The live traversal path (empty between comparisons)."""
        return self._path

    @property
    def mismatch(self) -> MismatchReport | None:
        """The first mismatch of the last ``matches()`` call, or None."""
        return self._mismatch

    # ------------------------------------------------------------------
    # Session API
    # ------------------------------------------------------------------

    def add_exclusions(self, *patterns: PatternSource) -> None:
        """Register exclusion patterns, compiling any given as text.

        Raises:
            PatternSyntaxError: If a text pattern is malformed.  No pattern
                from the call is registered in that case.
        """
        compiled = [
            p if isinstance(p, PathPattern) else PathPattern.compile(p)
            for p in patterns
        ]
        for pattern in compiled:
            self._exclusions[pattern] = None
            logger.debug("excluding %s", pattern)

    def matches(self, expected: Any, actual: Any) -> bool:
        """Return True if ``actual`` is deeply equivalent to ``expected``.

        Clears the mismatch left by any previous call first.

        Raises:
            ShapeResolutionError: If a STRUCTURELESS value's properties cannot
                be enumerated.
        """
        self._mismatch = None
        self._active.clear()
        return self.match_node(expected, actual)

    # ------------------------------------------------------------------
    # Used by the internal matchers
    # ------------------------------------------------------------------

    def new_internal_matcher(self, expected: Any) -> InternalMatcher:
        return _MATCHERS[classify(expected)](self, expected)

    def match_node(self, expected: Any, actual: Any) -> bool:
        """Compare one node at the current path."""
        matcher = self.new_internal_matcher(expected)
        if not self._config.detect_cycles or matcher.shape not in _CONTAINER_SHAPES:
            return matcher.matches(actual)

        pair = (id(expected), id(actual))
        if pair in self._active:
            logger.debug("cycle at object%s; revisited pair matches", self._path)
            return True
        self._active.add(pair)
        try:
            return matcher.matches(actual)
        finally:
            self._active.discard(pair)

    def need_verification(self, element: PathElement) -> bool:
        """Return False if the child reached through ``element`` is excluded."""
        with self._path.descend(element):
            for pattern in self._exclusions:
                if pattern.is_acceptable(self._path):
                    logger.debug("skipping object%s (%s)", self._path, pattern)
                    return False
        return True

    def verified(
        self, children: Iterable[tuple[PathElement, T]]
    ) -> Iterator[tuple[PathElement, T]]:
        """Yield only the children that no exclusion pattern accepts.

        Each child is tested when it is reached, not up front.
        """
        for element, payload in children:
            if self.need_verification(element):
                yield element, payload

    def forward(self, element: PathElement, expected: Any, actual: Any) -> bool:
        """Compare a child node under ``element``."""
        with self._path.descend(element):
            return self.match_node(expected, actual)

    def record_mismatch(self, expected_message: str, actual_message: str) -> bool:
        """Freeze the current path into a MismatchReport.  Always returns False."""
        self._mismatch = MismatchReport(
            path=self._path.snapshot(),
            expected=expected_message,
            actual=actual_message,
        )
        logger.debug(
            "mismatch at object%s: expected %s, actual %s",
            self._mismatch.location,
            expected_message,
            actual_message,
        )
        return False

    def record_mismatch_at(
        self, element: PathElement, expected_message: str, actual_message: str
    ) -> bool:
        with self._path.descend(element):
            return self.record_mismatch(expected_message, actual_message)


# ----------------------------------------------------------------------
# Internal matchers
# ----------------------------------------------------------------------


class InternalMatcher(ABC):
    """Comparison strategy for one expected value."""

    shape: Shape

    def __init__(self, context: MatchingContext, expected: Any) -> None:
        self.context = context
        self.expected = expected

    @abstractmethod
    def matches(self, actual: Any) -> bool: ...


class AbsentMatcher(InternalMatcher):
    shape = Shape.ABSENT

    def matches(self, actual: Any) -> bool:
        if actual is not None:
            return self.context.record_mismatch("is None", f"is not None ({actual!r})")
        return True


def _values_equal(expected: Any, actual: Any) -> bool:
    """Apply ``expected == actual`` and reduce the result to a single bool.

    numpy comparisons broadcast and return arrays; only a 0-d result can
    stand for a single verdict, anything larger is a mismatch.
    """
    result = expected == actual
    if isinstance(result, np.ndarray):
        return result.shape == () and bool(result)
    return bool(result)


class EquatableMatcher(InternalMatcher):
    """Compares with the expected value's own ``__eq__``."""

    shape = Shape.EQUATABLE

    def matches(self, actual: Any) -> bool:
        expected_message = f"is {self.expected!r}"
        if actual is None:
            return self.context.record_mismatch(expected_message, "is None")
        if not _values_equal(self.expected, actual):
            return self.context.record_mismatch(expected_message, f"is {actual!r}")
        return True


class StructurelessMatcher(InternalMatcher):
    """Compares property by property, via the context's PropertyEnumerator.

    The actual value must have the same shape (same type, same property set).
    An expected value with no properties matches any same-shaped value.
    Property values are read only for the properties that pass the exclusion
    gate.
    """

    shape = Shape.STRUCTURELESS

    def matches(self, actual: Any) -> bool:
        ctx = self.context
        type_name = type(self.expected).__qualname__
        expected_message = f"is a {type_name} object {self.expected!r}"
        if actual is None:
            return ctx.record_mismatch(expected_message, "is None")

        enumerator = ctx.enumerator
        if not enumerator.same_shape(self.expected, actual):
            if type(actual) is not type(self.expected):
                actual_type = type(actual).__qualname__
                return ctx.record_mismatch(
                    expected_message,
                    f"is not a {type_name} object ({actual_type}, {actual!r})",
                )
            expected_names = list(enumerator.property_names(self.expected))
            actual_names = list(enumerator.property_names(actual))
            return ctx.record_mismatch(
                f"is a {type_name} object with properties {expected_names!r}",
                f"has properties {actual_names!r}",
            )

        children = (
            (PathElement.property(name), name)
            for name in enumerator.property_names(self.expected)
        )
        for element, name in ctx.verified(children):
            expected_value = enumerator.get(self.expected, name)
            actual_value = enumerator.get(actual, name)
            if not ctx.forward(element, expected_value, actual_value):
                return False
        return True


class SequenceMatcher(InternalMatcher):
    """Order-sensitive, index-by-index comparison of equal-length sequences."""

    shape = Shape.SEQUENCE

    def matches(self, actual: Any) -> bool:
        ctx = self.context
        expected: Sequence[Any] = self.expected
        expected_message = f"is a sequence {expected!r}"
        if actual is None:
            return ctx.record_mismatch(expected_message, "is None")
        if not is_sequence(actual):
            return ctx.record_mismatch(
                expected_message,
                f"is not a sequence ({type(actual).__qualname__}, {actual!r})",
            )
        if len(expected) != len(actual):
            return ctx.record_mismatch(
                f"is a sequence of length {len(expected)}", f"has length {len(actual)}"
            )

        pairs = zip(expected, actual, strict=True)
        children = ((PathElement.index(i), pair) for i, pair in enumerate(pairs))
        for element, (expected_item, actual_item) in ctx.verified(children):
            if not ctx.forward(element, expected_item, actual_item):
                return False
        return True


class KeyedMatcher(InternalMatcher):
    """Key-count check, then per-key comparison of the expected mapping's keys.

    Keys only present in ``actual`` are reported only when the session's
    config has ``strict_keys`` set.
    """

    shape = Shape.KEYED

    def matches(self, actual: Any) -> bool:
        ctx = self.context
        expected: Mapping[Any, Any] = self.expected
        expected_message = f"is a mapping {expected!r}"
        if actual is None:
            return ctx.record_mismatch(expected_message, "is None")
        if not is_keyed(actual):
            return ctx.record_mismatch(
                expected_message,
                f"is not a mapping ({type(actual).__qualname__}, {actual!r})",
            )
        if len(expected) != len(actual):
            return ctx.record_mismatch(
                f"is a mapping of size {len(expected)}", f"has size {len(actual)}"
            )

        children = ((PathElement.key(k), (k, v)) for k, v in expected.items())
        for element, (key, value) in ctx.verified(children):
            if key not in actual:
                return ctx.record_mismatch_at(
                    element, f"is {value!r}", "does not exist"
                )
            if not ctx.forward(element, value, actual[key]):
                return False

        if ctx.config.strict_keys:
            extra = ((PathElement.key(k), k) for k in actual if k not in expected)
            for element, key in ctx.verified(extra):
                return ctx.record_mismatch_at(
                    element, "does not exist", f"is {actual[key]!r}"
                )
        return True


_MATCHERS: dict[Shape, type[InternalMatcher]] = {
    Shape.ABSENT: AbsentMatcher,
    Shape.EQUATABLE: EquatableMatcher,
    Shape.STRUCTURELESS: StructurelessMatcher,
    Shape.SEQUENCE: SequenceMatcher,
    Shape.KEYED: KeyedMatcher,
}
