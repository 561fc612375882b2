"""Path subpackage: locating nodes and describing which ones to exclude.

Re-exports the public API for the path module:
- ObjectPath: mutable stack of segments for the node currently being compared
- PathElement / ElementKind: one ObjectPath segment (property, index or key)
- PathPattern: parsed exclusion pattern matched against ObjectPaths
- PatternElement / PatternKind: one PathPattern segment
"""

from equivalence_matcher.path.object_path import ElementKind, ObjectPath, PathElement
from equivalence_matcher.path.pattern import (
    WILDCARD,
    PathPattern,
    PatternElement,
    PatternKind,
)

__all__ = [
    "WILDCARD",
    "ElementKind",
    "ObjectPath",
    "PathElement",
    "PathPattern",
    "PatternElement",
    "PatternKind",
]
