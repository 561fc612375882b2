"""Integration tests for the equivalence-matcher pytest plugin.

These tests verify that the assert_equivalent fixture is auto-discovered
via the pytest11 entry point and behaves correctly.

NOTE: These tests require equivalence-matcher to be installed (even in editable
mode via ``pip install -e .``). The pytest11 entry point is only registered at
install time -- running from a raw source checkout without installing will not
discover the fixture.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

from equivalence_matcher import MatcherConfig, PatternSyntaxError


def test_fixture_passes_equivalent_values(assert_equivalent: Any) -> None:
    assert_equivalent({"a": [1, 2]}, {"a": [1, 2]})


def test_fixture_fails_with_located_message(assert_equivalent: Any) -> None:
    with pytest.raises(AssertionError) as exc_info:
        assert_equivalent({"a": [1, 3]}, {"a": [1, 2]})

    message = str(exc_info.value)
    assert "Expected: object['a'][1] is 2" in message
    assert "but: object['a'][1] is 3" in message


def test_fixture_exclusions(assert_equivalent: Any) -> None:
    assert_equivalent(
        {"at": 9000, "v": 1}, {"at": 5, "v": 1}, exclude=["object['at']"]
    )


def test_fixture_custom_config(assert_equivalent: Any) -> None:
    with pytest.raises(AssertionError, match=r"actual\['x'\] is 1"):
        assert_equivalent({"x": 1}, {"x": 2}, config=MatcherConfig(root_name="actual"))


def test_fixture_malformed_pattern(assert_equivalent: Any) -> None:
    with pytest.raises(PatternSyntaxError):
        assert_equivalent({}, {}, exclude=["object["])


def test_fixture_returns_callable(assert_equivalent: Any) -> None:
    assert callable(assert_equivalent)


def test_plugin_discovery() -> None:
    """Verify assert_equivalent appears in pytest --fixtures output."""
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "--fixtures", "-q"],
        capture_output=True,
        text=True,
        cwd=str(Path(__file__).resolve().parents[2]),
    )
    assert "assert_equivalent" in result.stdout, (
        f"assert_equivalent not found in pytest --fixtures output.\n"
        f"stdout:\n{result.stdout}\n"
        f"stderr:\n{result.stderr}"
    )
