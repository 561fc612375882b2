"""Shape classification: which comparison strategy applies to a value.

``classify()`` is a pure function over capabilities, not over inheritance
from particular classes.  The dispatch order matters:

1. ``None``                                   -> ABSENT
2. length + index contract (not text / bytes) -> SEQUENCE
3. key-iteration contract                     -> KEYED
4. class or enum member                       -> EQUATABLE
5. dataclass instance                         -> STRUCTURELESS
6. custom ``__eq__``                          -> EQUATABLE
7. anything else                              -> STRUCTURELESS

Sequence and mapping detection come before the ``__eq__`` check because
lists, tuples and dicts all define value equality; walking them gives a
located mismatch and lets exclusions apply below them.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from enum import Enum, StrEnum, auto
from typing import Any

import numpy as np

__all__ = ["Shape", "classify", "has_custom_eq", "is_keyed", "is_sequence"]

# Sequences compared as opaque values rather than element by element
_TEXT_TYPES = (str, bytes, bytearray)


class Shape(StrEnum):
    """Closed set of comparison strategies."""

    ABSENT = auto()
    SEQUENCE = auto()
    KEYED = auto()
    EQUATABLE = auto()
    STRUCTURELESS = auto()


def has_custom_eq(value: Any) -> bool:
    """Return True if the value's type overrides ``object.__eq__``."""
    return type(value).__eq__ is not object.__eq__


def is_sequence(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.ndim > 0
    return isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES)


def is_keyed(value: Any) -> bool:
    return isinstance(value, Mapping)


def classify(value: Any) -> Shape:
    """Resolve the comparison strategy for ``value``.

    Every value resolves to exactly one Shape.
    """
    if value is None:
        return Shape.ABSENT
    if is_sequence(value):
        return Shape.SEQUENCE
    if is_keyed(value):
        return Shape.KEYED
    # Classes and enum members compare by identity
    if isinstance(value, (type, Enum)):
        return Shape.EQUATABLE
    if dataclasses.is_dataclass(value):
        return Shape.STRUCTURELESS
    if has_custom_eq(value):
        return Shape.EQUATABLE
    return Shape.STRUCTURELESS
