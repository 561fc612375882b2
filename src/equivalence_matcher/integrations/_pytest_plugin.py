"""pytest plugin for equivalence-matcher.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest

from equivalence_matcher import MatcherConfig, equivalent_to
from equivalence_matcher.context import PatternSource


@pytest.fixture(scope="session")
def assert_equivalent() -> Any:
    """Fixture that returns a callable deep-equivalence asserter.

    The fixture is session-scoped because the returned callable is stateless
    (it builds a fresh EquivalenceMatcher per call).

    Usage in tests::

        def test_word_count(assert_equivalent):
            assert_equivalent(
                count_words("Hello world WORLD"),
                expected,
                exclude=["object.elapsedMillis"],
            )

    Returns:
        A callable ``_assert(actual, expected, exclude=(), config=None) -> None``
        that raises ``AssertionError`` locating the first mismatch.
    """

    def _assert(
        actual: Any,
        expected: Any,
        exclude: Iterable[PatternSource] = (),
        config: MatcherConfig | None = None,
    ) -> None:
        """Assert that ``actual`` is deeply equivalent to ``expected``.

        Args:
            actual:   The value produced by the code under test.
            expected: The expected value.
            exclude:  Exclusion patterns, compiled or as text.
            config:   Optional MatcherConfig.

        Raises:
            AssertionError: When the values differ, with ``Expected:`` and
                ``but:`` lines naming the mismatching path.
            PatternSyntaxError: When an exclusion pattern is malformed.
        """
        matcher = equivalent_to(expected, *exclude, config=config)
        if not matcher.matches(actual):
            raise AssertionError(
                f"\nExpected: {matcher.describe_expectation()}\n"
                f"     but: {matcher.describe_mismatch()}"
            )

    return _assert
