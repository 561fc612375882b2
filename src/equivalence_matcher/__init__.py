"""Equivalence matcher - deep structural comparison with path exclusions."""

from __future__ import annotations

from equivalence_matcher.api import (
    equivalent_to,
    find_mismatch,
    is_equivalent,
    path_pattern,
)
from equivalence_matcher.config import MatcherConfig
from equivalence_matcher.context import MatchingContext
from equivalence_matcher.errors import (
    EmptyPathError,
    MatcherError,
    PatternSyntaxError,
    ShapeResolutionError,
)
from equivalence_matcher.matcher import EquivalenceMatcher
from equivalence_matcher.path import ObjectPath, PathElement, PathPattern
from equivalence_matcher.properties import DeclaredMemberEnumerator
from equivalence_matcher.protocols import PropertyEnumerator
from equivalence_matcher.result import MismatchReport
from equivalence_matcher.shape import Shape, classify

__version__: str = "0.1.0"
__all__: list[str] = [
    "DeclaredMemberEnumerator",
    "EmptyPathError",
    "EquivalenceMatcher",
    "MatcherConfig",
    "MatcherError",
    "MatchingContext",
    "MismatchReport",
    "ObjectPath",
    "PathElement",
    "PathPattern",
    "PatternSyntaxError",
    "PropertyEnumerator",
    "Shape",
    "ShapeResolutionError",
    "classify",
    "equivalent_to",
    "find_mismatch",
    "is_equivalent",
    "path_pattern",
]
