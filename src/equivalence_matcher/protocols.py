"""PropertyEnumerator Protocol: the matcher's property-enumeration extension point.

The matching engine never inspects objects itself.  Whatever walks the
properties of a STRUCTURELESS value is injected as an object satisfying this
Protocol -- no inheritance required.

Names and values are separate calls: the engine lists the names, passes
each one through the exclusion gate, and reads only the values it compares.

Example::

    from typing import Any
    from equivalence_matcher.protocols import PropertyEnumerator

    class RegisteredFields:
        def __init__(self, fields: dict[type, list[str]]) -> None:
            self._fields = fields

        def property_names(self, value: Any) -> list[str]:
            return self._fields[type(value)]

        def get(self, value: Any, name: str) -> Any:
            return getattr(value, name)

        def same_shape(self, a: Any, b: Any) -> bool:
            return type(a) is type(b)

    assert isinstance(RegisteredFields({}), PropertyEnumerator)  # True
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PropertyEnumerator(Protocol):
    """Structural protocol for property enumeration.

    ``property_names`` must:
    - Return the name of every comparable property of ``value``, in a
      stable, deterministic order, without reading any property value.
    - Raise ``ShapeResolutionError`` when the comparable shape of the value
      cannot be determined.

    ``get`` reads one property.  It is only called for properties that are
    actually compared.

    ``same_shape`` must return True only when both values expose the same
    property set.
    """

    def property_names(self, value: Any) -> Sequence[str]: ...

    def get(self, value: Any, name: str) -> Any: ...

    def same_shape(self, a: Any, b: Any) -> bool: ...
