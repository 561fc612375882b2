"""Public API functions for equivalence-matcher.

This module provides the user-facing entry points: equivalent_to,
path_pattern, is_equivalent and find_mismatch.  Each call creates a fresh
EquivalenceMatcher (and so a fresh MatchingContext) to guarantee no session
state is shared between calls.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from equivalence_matcher.config import MatcherConfig
from equivalence_matcher.context import PatternSource
from equivalence_matcher.matcher import EquivalenceMatcher
from equivalence_matcher.path.pattern import PathPattern
from equivalence_matcher.result import MismatchReport

__all__ = ["equivalent_to", "find_mismatch", "is_equivalent", "path_pattern"]


def equivalent_to(
    expected: Any,
    *exclude: PatternSource,
    config: MatcherConfig | None = None,
) -> EquivalenceMatcher:
    """Build a matcher checking deep equivalence with ``expected``.

    Args:
        expected: The expected value (any nesting of mappings, sequences,
                  objects and plain values).
        *exclude: Exclusion patterns, compiled or as text
                  (e.g. ``"object.elapsedMillis"``).
        config:   Session behaviour.  Defaults to ``MatcherConfig()`` when None.

    Returns:
        An ``EquivalenceMatcher``; further exclusions can be chained with
        ``.exclude(...)``.

    Raises:
        PatternSyntaxError: If an exclusion pattern is malformed.
    """
    return EquivalenceMatcher(expected, config=config).exclude(*exclude)


def path_pattern(text: str) -> PathPattern:
    """Compile exclusion-pattern text, e.g. ``"object.items[*].updatedAt"``.

    Raises:
        PatternSyntaxError: If the text is malformed.
    """
    return PathPattern.compile(text)


def is_equivalent(
    expected: Any,
    actual: Any,
    exclude: Iterable[PatternSource] = (),
    config: MatcherConfig | None = None,
) -> bool:
    """Return True if ``actual`` is deeply equivalent to ``expected``.

    Args:
        expected: The expected value.
        actual:   The value under test.
        exclude:  Exclusion patterns, compiled or as text.
        config:   Session behaviour.  Defaults to ``MatcherConfig()`` when None.
    """
    return equivalent_to(expected, *exclude, config=config).matches(actual)


def find_mismatch(
    expected: Any,
    actual: Any,
    exclude: Iterable[PatternSource] = (),
    config: MatcherConfig | None = None,
) -> MismatchReport | None:
    """Return the first mismatch between ``expected`` and ``actual``, or None.

    Args:
        expected: The expected value.
        actual:   The value under test.
        exclude:  Exclusion patterns, compiled or as text.
        config:   Session behaviour.  Defaults to ``MatcherConfig()`` when None.

    Returns:
        A ``MismatchReport`` locating the first difference, or None when the
        values are equivalent.
    """
    matcher = equivalent_to(expected, *exclude, config=config)
    if matcher.matches(actual):
        return None
    return matcher.mismatch
