"""EquivalenceMatcher: public facade over a MatchingContext.

Each EquivalenceMatcher owns one MatchingContext, so it describes the last
comparison it ran.  Do not share one matcher between threads; build one per
comparison instead (``equivalent_to()`` is cheap).

Example::

    from equivalence_matcher import equivalent_to

    matcher = equivalent_to({"text": "hi", "elapsedMillis": 5}).exclude(
        "object['elapsedMillis']"
    )
    matcher.matches({"text": "hi", "elapsedMillis": 9000})   # True
    matcher.matches({"text": "ho", "elapsedMillis": 9000})   # False
    matcher.describe_expectation()   # "object['text'] is 'hi'"
    matcher.describe_mismatch()      # "object['text'] is 'ho'"
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from equivalence_matcher.config import MatcherConfig
from equivalence_matcher.context import MatchingContext, PatternSource

if TYPE_CHECKING:
    from equivalence_matcher.path.pattern import PathPattern
    from equivalence_matcher.protocols import PropertyEnumerator
    from equivalence_matcher.result import MismatchReport

__all__ = ["EquivalenceMatcher"]


class EquivalenceMatcher:
    """Deep structural equivalence check against one expected value.

    Args:
        expected:   The value actual values are compared against.
        config:     Session behaviour.  Defaults to ``MatcherConfig()``.
        enumerator: PropertyEnumerator for objects compared property by
            property.  Defaults to the shared ``DeclaredMemberEnumerator``.
    """

    def __init__(
        self,
        expected: Any,
        *,
        config: MatcherConfig | None = None,
        enumerator: PropertyEnumerator | None = None,
    ) -> None:
        self._expected = expected
        self._context = MatchingContext(config=config, enumerator=enumerator)

    @property
    def expected(self) -> Any:
        return self._expected

    @property
    def excluded(self) -> tuple[PathPattern, ...]:
        return self._context.exclusions

    @property
    def mismatch(self) -> MismatchReport | None:
        """The first mismatch found by the last ``matches()`` call, if any."""
        return self._context.mismatch

    def exclude(self, *patterns: PatternSource) -> EquivalenceMatcher:
        """Skip every path matched by ``patterns``; returns ``self`` for chaining.

        Text patterns are compiled here, so a malformed one raises
        ``PatternSyntaxError`` immediately.
        """
        self._context.add_exclusions(*patterns)
        return self

    def matches(self, actual: Any) -> bool:
        return self._context.matches(self._expected, actual)

    def describe_expectation(self) -> str:
        """Describe what was expected at the mismatching location.

        Meaningful after ``matches()`` returned False; otherwise describes the
        expected value as a whole.
        """
        root = self._context.config.root_name
        mismatch = self._context.mismatch
        if mismatch is None:
            return f"{root} equivalent to {self._expected!r}"
        return mismatch.describe_expectation(root)

    def describe_mismatch(self) -> str:
        """Describe what was found at the mismatching location."""
        root = self._context.config.root_name
        mismatch = self._context.mismatch
        if mismatch is None:
            return f"{root} is equal"
        return mismatch.describe_mismatch(root)

    def __repr__(self) -> str:
        excluded = ", ".join(repr(str(p)) for p in self._context.exclusions)
        return f"EquivalenceMatcher({self._expected!r}, exclude=[{excluded}])"
