"""DeclaredMemberEnumerator: default PropertyEnumerator backed by an LRU cache.

A value's comparable properties are its class's declared data members:

- dataclass fields (``compare=True`` only), or otherwise
- annotated class attributes (``ClassVar`` excluded) and ``__slots__``
  entries, collected over the MRO.

Public members are properties.  A private member ``_x`` is exposed as ``x``
only when the class also defines an accessor (``property``) named ``x``;
other private members are skipped.  Values are read one at a time with
``getattr``, so the accessor is honoured and only runs when the property is
actually compared.

Classes with no declaration information fall back to the instance
``__dict__`` (same public/accessor rule, resolved per instance).  A value
with neither raises ``ShapeResolutionError``.

Resolving a class's member list walks its MRO, so results are kept in a
``cachetools.LRUCache`` bounded to ``max_size`` classes.  The cache is
guarded by a lock; a single instance may be shared across threads.

Example::

    from dataclasses import dataclass
    from equivalence_matcher.properties import DeclaredMemberEnumerator

    @dataclass
    class Point:
        x: int
        y: int

    enumerator = DeclaredMemberEnumerator(max_size=256)
    enumerator.enumerate(Point(1, 2))   # [("x", 1), ("y", 2)]
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import threading
import typing
from collections.abc import Iterable
from typing import Any, ClassVar

from cachetools import LRUCache

from equivalence_matcher.errors import ShapeResolutionError

__all__ = ["DeclaredMemberEnumerator", "default_enumerator"]

logger = logging.getLogger(__name__)

_IGNORED_SLOTS = frozenset({"__dict__", "__weakref__"})


def _is_classvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or typing.get_origin(annotation) is ClassVar


def _slot_names(klass: type) -> list[str]:
    slots = klass.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return [name for name in slots if name not in _IGNORED_SLOTS]


def _property_names(names: Iterable[str], klass: type) -> tuple[str, ...]:
    """Apply the public/accessor rule to raw member names, keeping order."""
    result: list[str] = []
    for name in names:
        if not name.startswith("_"):
            exposed = name
        else:
            # "_x" with an accessor "x"; "__x" is name-mangled, never exposed
            exposed = name[1:]
            if not exposed or exposed.startswith("_"):
                continue
            if not isinstance(inspect.getattr_static(klass, exposed, None), property):
                continue
        if exposed not in result:
            result.append(exposed)
    return tuple(result)


def _declared_members(klass: type) -> tuple[str, ...] | None:
    """Return the declared property names of ``klass``.

    Returns None when the class carries no declaration information at all
    (no dataclass fields, annotations or slots anywhere in its MRO).
    """
    if dataclasses.is_dataclass(klass):
        names = [f.name for f in dataclasses.fields(klass) if f.compare]
        return _property_names(names, klass)

    declared = False
    names = []
    for base in reversed(klass.__mro__):
        if base is object:
            continue
        if "__slots__" in base.__dict__:
            declared = True
            names.extend(_slot_names(base))
        annotations = inspect.get_annotations(base)
        if annotations:
            declared = True
            names.extend(n for n, a in annotations.items() if not _is_classvar(a))

    if not declared:
        return None
    return _property_names(names, klass)


class DeclaredMemberEnumerator:
    """PropertyEnumerator over declared data members, with a bounded shape cache.

    Satisfies the ``PropertyEnumerator`` Protocol structurally.

    Args:
        max_size: Maximum number of classes whose member lists are cached.
            Defaults to 256.  When exceeded, the least-recently-used class is
            silently evicted and re-resolved on next use.
    """

    def __init__(self, max_size: int = 256) -> None:
        self._cache: LRUCache[type, tuple[str, ...] | None] = LRUCache(maxsize=max_size)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of classes this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of classes stored in the cache."""
        return int(self._cache.currsize)

    # ------------------------------------------------------------------
    # PropertyEnumerator Protocol surface
    # ------------------------------------------------------------------

    def get(self, value: Any, name: str) -> Any:
        """Read one property; an unset slot or attribute reads as None."""
        return getattr(value, name, None)

    def same_shape(self, a: Any, b: Any) -> bool:
        if type(a) is not type(b):
            return False
        return set(self.property_names(a)) == set(self.property_names(b))

    def enumerate(self, value: Any) -> list[tuple[str, Any]]:
        """Return ``(name, value)`` for every comparable property of ``value``.

        Reads every property.  The matcher itself goes through
        ``property_names`` and ``get`` so excluded properties are never read.

        Raises:
            ShapeResolutionError: If ``value`` declares no members and has no
                instance ``__dict__``.
        """
        return [(name, self.get(value, name)) for name in self.property_names(value)]

    # ------------------------------------------------------------------
    # Member resolution
    # ------------------------------------------------------------------

    def property_names(self, value: Any) -> tuple[str, ...]:
        """Return the comparable property names of ``value`` in order."""
        names = self._class_members(type(value))
        if names is not None:
            return names

        try:
            instance_dict = vars(value)
        except TypeError:
            raise ShapeResolutionError(type(value)) from None
        return _property_names(instance_dict, type(value))

    def _class_members(self, klass: type) -> tuple[str, ...] | None:
        with self._lock:
            if klass in self._cache:
                return self._cache[klass]

        # Resolved outside the lock; a concurrent miss only duplicates work.
        names = _declared_members(klass)
        logger.debug("resolved declared members of %s: %s", klass.__qualname__, names)

        with self._lock:
            self._cache[klass] = names
        return names

    def clear(self) -> None:
        """Drop every cached class."""
        with self._lock:
            self._cache.clear()


default_enumerator = DeclaredMemberEnumerator()
