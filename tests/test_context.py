"""Tests for MatchingContext dispatch, messages and exclusion handling.

Verifies:
- Each shape's matcher records the documented expected/actual messages
- The mismatch path locates the first failing node
- The live ObjectPath is empty after every comparison
- Exclusions skip children lazily and only at exact depth
- Excluded accessors are never read
- numpy values report mismatches instead of raising
- strict_keys and cycle detection switches
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pytest

from equivalence_matcher.config import MatcherConfig
from equivalence_matcher.context import MatchingContext
from equivalence_matcher.errors import PatternSyntaxError, ShapeResolutionError
from equivalence_matcher.path import PathElement, PathPattern


@dataclass
class Inner:
    value: int


@dataclass
class Outer:
    name: str
    inner: Inner
    tags: list[str]


@dataclass
class Empty:
    pass


class Opaque:
    __slots__ = ()



class Bag:
    def __init__(self, **attrs: Any) -> None:
        self.__dict__.update(attrs)


class Stamped:
    count: int
    _stamp: float

    def __init__(self, count: int) -> None:
        self.count = count
        self._stamp = 0.0

    @property
    def stamp(self) -> float:
        raise RuntimeError("stamp was read")


def _mismatch(ctx: MatchingContext) -> tuple[str, str, str]:
    assert ctx.mismatch is not None
    return ctx.mismatch.location, ctx.mismatch.expected, ctx.mismatch.actual


class TestAbsent:
    def test_none_matches_none(self) -> None:
        ctx = MatchingContext()
        assert ctx.matches(None, None)
        assert ctx.mismatch is None

    def test_none_against_value(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches(None, 3)
        assert _mismatch(ctx) == ("", "is None", "is not None (3)")


class TestEquatable:
    def test_equal_values(self) -> None:
        assert MatchingContext().matches("text", "text")

    def test_value_equality_contract_is_used(self) -> None:
        assert MatchingContext().matches(1, 1.0)

    def test_unequal_values(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches(5, 9000)
        assert _mismatch(ctx) == ("", "is 5", "is 9000")

    def test_actual_none(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches("a", None)
        assert _mismatch(ctx) == ("", "is 'a'", "is None")

    def test_numpy_scalar_against_array_is_a_mismatch(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches(np.float64(1.0), np.array([1.0, 2.0]))
        assert _mismatch(ctx)[0] == ""

    def test_zero_dim_arrays(self) -> None:
        assert MatchingContext().matches(np.array(5), np.array(5))
        assert not MatchingContext().matches(np.array(5), np.array(6))


class TestStructureless:
    def test_same_dataclass_values(self) -> None:
        value = Outer("n", Inner(1), ["a"])
        assert MatchingContext().matches(value, Outer("n", Inner(1), ["a"]))

    def test_nested_property_mismatch(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches(
            Outer("n", Inner(1), ["a"]), Outer("n", Inner(2), ["a"])
        )
        assert _mismatch(ctx) == (".inner.value", "is 1", "is 2")

    def test_different_type(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches(Inner(1), Empty())
        location, expected, actual = _mismatch(ctx)
        assert location == ""
        assert expected == "is a Inner object Inner(value=1)"
        assert actual == "is not a Inner object (Empty, Empty())"

    def test_same_type_different_properties(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches(Bag(a=1), Bag(b=1))
        location, expected, actual = _mismatch(ctx)
        assert location == ""
        assert expected == "is a Bag object with properties ['a']"
        assert actual == "has properties ['b']"

    def test_actual_none(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches(Inner(1), None)
        assert _mismatch(ctx)[2] == "is None"

    def test_no_properties_matches_same_shape(self) -> None:
        assert MatchingContext().matches(Empty(), Empty())
        assert MatchingContext().matches(Opaque(), Opaque())

    def test_unresolvable_shape_raises(self) -> None:
        with pytest.raises(ShapeResolutionError):
            MatchingContext().matches(object(), object())


class TestSequence:
    def test_ndarrays_compared_element_by_element(self) -> None:
        expected = np.array([[1, 2], [3, 4]])
        ctx = MatchingContext()
        assert ctx.matches(expected, np.array([[1, 2], [3, 4]]))
        assert not ctx.matches(expected, np.array([[1, 2], [3, 5]]))
        assert _mismatch(ctx)[0] == "[1][1]"

    def test_ndarray_against_deeper_ndarray(self) -> None:
        ctx = MatchingContext()
        actual = np.array([[1.0, 2.0], [3.0, 4.0]])
        assert not ctx.matches(np.array([1.0, 2.0]), actual)
        assert _mismatch(ctx)[0] == "[0]"

    def test_equal_lists(self) -> None:
        assert MatchingContext().matches([1, [2, 3]], [1, [2, 3]])

    def test_list_matches_tuple(self) -> None:
        assert MatchingContext().matches([1, 2], (1, 2))

    def test_order_sensitive(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches([1, 2], [2, 1])
        assert _mismatch(ctx) == ("[0]", "is 1", "is 2")

    def test_length_mismatch_reported_before_elements(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches([1, 2], [9])
        assert _mismatch(ctx) == ("", "is a sequence of length 2", "has length 1")

    def test_not_a_sequence(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches([1], "1")
        assert _mismatch(ctx)[2] == "is not a sequence (str, '1')"

    def test_actual_none(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches([1], None)
        assert _mismatch(ctx) == ("", "is a sequence [1]", "is None")


class TestKeyed:
    def test_equal_mappings(self) -> None:
        assert MatchingContext().matches({"a": 1, "b": [1]}, {"b": [1], "a": 1})

    def test_missing_key(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches({"a": 1, "b": 2}, {"a": 1, "c": 2})
        assert _mismatch(ctx) == ("['b']", "is 2", "does not exist")

    def test_missing_key_with_none_value(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches({"a": 1, "b": None}, {"a": 1, "c": None})
        assert _mismatch(ctx) == ("['b']", "is None", "does not exist")

    def test_size_mismatch_reported_before_keys(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches({"a": 1, "b": 2}, {"a": 1})
        assert _mismatch(ctx) == ("", "is a mapping of size 2", "has size 1")

    def test_value_mismatch(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches({"a": {"b": [1, 2]}}, {"a": {"b": [1, 3]}})
        assert _mismatch(ctx) == ("['a']['b'][1]", "is 2", "is 3")

    def test_not_a_mapping(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches({"a": 1}, [("a", 1)])
        assert _mismatch(ctx)[2].startswith("is not a mapping (list,")


class TestPathDiscipline:
    """The live path is restored; recorded reports are frozen."""

    @pytest.mark.parametrize(
        ("expected", "actual"),
        [
            ({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]}),
            ({"a": [1, {"b": 2}]}, {"a": [1, {"b": 3}]}),
            ({"a": [1, {"b": 2}]}, {"a": [1, {"c": 2}]}),
            (Outer("n", Inner(1), ["x"]), Outer("n", Inner(1), ["y"])),
        ],
    )
    def test_path_is_empty_after_matches(self, expected: Any, actual: Any) -> None:
        ctx = MatchingContext()
        ctx.matches(expected, actual)
        assert len(ctx.current_path) == 0

    def test_report_survives_later_traversal(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches({"a": {"b": 1}}, {"a": {"b": 2}})
        report = ctx.mismatch
        ctx.current_path.push(PathElement.property("zzz"))
        assert report is not None
        assert report.location == "['a']['b']"

    def test_stale_mismatch_is_cleared(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches([1], [2])
        assert ctx.matches([1], [1])
        assert ctx.mismatch is None

    def test_first_mismatch_wins(self) -> None:
        ctx = MatchingContext()
        assert not ctx.matches([1, 2, 3], [9, 9, 9])
        assert _mismatch(ctx)[0] == "[0]"


class TestExclusions:
    def test_text_patterns_are_compiled(self) -> None:
        ctx = MatchingContext()
        ctx.add_exclusions("object.a", PathPattern.compile("object[0]"))
        assert ctx.exclusions == (
            PathPattern.compile("object.a"),
            PathPattern.compile("object[0]"),
        )

    def test_duplicates_are_registered_once(self) -> None:
        ctx = MatchingContext()
        ctx.add_exclusions("object.a", "root.a")
        assert len(ctx.exclusions) == 1

    def test_malformed_pattern_registers_nothing(self) -> None:
        ctx = MatchingContext()
        with pytest.raises(PatternSyntaxError):
            ctx.add_exclusions("object.a", "object[")
        assert ctx.exclusions == ()

    def test_excluded_property_is_not_compared(self) -> None:
        ctx = MatchingContext()
        ctx.add_exclusions("object.inner")
        assert ctx.matches(Outer("n", Inner(1), []), Outer("n", Inner(2), []))

    def test_excluded_index(self) -> None:
        ctx = MatchingContext()
        ctx.add_exclusions("object[1]")
        assert ctx.matches([1, 2, 3], [1, 99, 3])

    def test_wildcard_below_sequence(self) -> None:
        ctx = MatchingContext()
        ctx.add_exclusions("object[*]['at']")
        expected = [{"id": 1, "at": 10}, {"id": 2, "at": 20}]
        assert ctx.matches(expected, [{"id": 1, "at": 11}, {"id": 2, "at": 22}])
        assert not ctx.matches(expected, [{"id": 1, "at": 11}, {"id": 3, "at": 22}])
        assert _mismatch(ctx)[0] == "[1]['id']"

    def test_excluded_key_may_be_missing(self) -> None:
        ctx = MatchingContext()
        ctx.add_exclusions("object['b']")
        assert ctx.matches({"a": 1, "b": 2}, {"a": 1, "c": 2})

    def test_excluded_child_is_never_compared(self) -> None:
        class Exploding:
            def __eq__(self, other: object) -> bool:
                raise AssertionError("compared an excluded child")

            __hash__ = object.__hash__

        ctx = MatchingContext()
        ctx.add_exclusions("object[0]")
        assert ctx.matches([Exploding(), 1], [object(), 1])

    def test_excluded_accessor_is_never_read(self) -> None:
        ctx = MatchingContext()
        ctx.add_exclusions("object.stamp")
        assert ctx.matches(Stamped(1), Stamped(1))
        assert not ctx.matches(Stamped(1), Stamped(2))
        assert _mismatch(ctx)[0] == ".count"

    def test_included_accessor_error_propagates(self) -> None:
        with pytest.raises(RuntimeError, match="stamp was read"):
            MatchingContext().matches(Stamped(1), Stamped(1))

    def test_unrelated_exclusion_changes_nothing(self) -> None:
        ctx = MatchingContext()
        ctx.add_exclusions("object.other", "object['a'][5]")
        assert not ctx.matches({"a": [1, 2]}, {"a": [1, 3]})
        assert _mismatch(ctx)[0] == "['a'][1]"

    def test_size_check_still_applies_with_exclusions(self) -> None:
        ctx = MatchingContext()
        ctx.add_exclusions("object[*]")
        assert not ctx.matches([1, 2], [1])


class TestStrictKeys:
    def test_extra_key_ignored_by_default(self) -> None:
        ctx = MatchingContext()
        ctx.add_exclusions("object['b']")
        assert ctx.matches({"a": 1, "b": 2}, {"a": 1, "extra": 2})

    def test_extra_key_reported_when_strict(self) -> None:
        ctx = MatchingContext(config=MatcherConfig(strict_keys=True))
        ctx.add_exclusions("object['b']")
        assert not ctx.matches({"a": 1, "b": 2}, {"a": 1, "extra": 2})
        assert _mismatch(ctx) == ("['extra']", "does not exist", "is 2")

    def test_excluded_extra_key_is_ignored_when_strict(self) -> None:
        ctx = MatchingContext(config=MatcherConfig(strict_keys=True))
        ctx.add_exclusions("object['b']", "object['extra']")
        assert ctx.matches({"a": 1, "b": 2}, {"a": 1, "extra": 2})


class TestCycles:
    def test_self_referencing_lists_terminate(self) -> None:
        expected: list[Any] = [1]
        expected.append(expected)
        actual: list[Any] = [1]
        actual.append(actual)
        assert MatchingContext().matches(expected, actual)

    def test_mismatch_inside_cycle_is_found(self) -> None:
        expected: dict[str, Any] = {"v": 1}
        expected["self"] = expected
        actual: dict[str, Any] = {"v": 2}
        actual["self"] = actual
        ctx = MatchingContext()
        assert not ctx.matches(expected, actual)
        assert _mismatch(ctx)[0] == "['v']"

    def test_shared_subtrees_are_compared_each_time(self) -> None:
        shared = {"x": 1}
        ctx = MatchingContext()
        assert not ctx.matches([shared, shared], [{"x": 1}, {"x": 2}])
        assert _mismatch(ctx)[0] == "[1]['x']"
