"""Declarative nullability markers.

The markers are inert: they only record intent on interface declarations and
are read once, when the interface is validated.

* `null_safe` opts an interface into contract enforcement.
* `NeverNull` and `CanBeNull` mark a position as forbidding or permitting
  ``None``. They work both as decorators (on methods, properties and property
  accessors) and as `typing.Annotated` metadata (on parameters and return
  annotations)::

      @null_safe
      class Catalog(abc.ABC):
          @NeverNull
          @property
          @abc.abstractmethod
          def name(self) -> str: ...

          @abc.abstractmethod
          def find(
              self, key: Annotated[str, NeverNull], errors: Out[list[str]]
          ) -> Annotated[Item | None, CanBeNull]: ...

* `Out` and `Ref` are argument holders standing in for output and in/out
  parameters. A parameter annotated ``Out[T]`` is checked after the call only;
  ``Ref[T]`` is checked both before and after.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")

MARKERS_ATTR = "__nullguard_markers__"

# Own-class registry; subclasses of a null-safe interface must opt in themselves.
_NULL_SAFE_TYPES: weakref.WeakSet[type] = weakref.WeakSet()


class Nullability(Enum):
    """Declared nullability of a single position."""

    NEVER_NULL = "never_null"
    CAN_BE_NULL = "can_be_null"
    UNSPECIFIED = "unspecified"

    @property
    def allows_none(self) -> bool:
        """Whether ``None`` is permitted once defaults are applied."""
        return self is Nullability.CAN_BE_NULL


@dataclass(frozen=True)
class NullabilityMarker:
    """A nullability declaration attachable to an interface position."""

    nullability: Nullability
    label: str

    def __repr__(self) -> str:
        return self.label

    def __call__(self, target):
        """Attach this marker to a function or property and return it."""
        if isinstance(target, property):
            return MarkedProperty.from_property(target, (self,))
        if isinstance(target, (staticmethod, classmethod)) or not callable(target):
            raise TypeError(
                f"{self.label} can only decorate instance methods and properties, "
                f"not {target!r}"
            )
        setattr(target, MARKERS_ATTR, getattr(target, MARKERS_ATTR, ()) + (self,))
        return target


NeverNull = NullabilityMarker(Nullability.NEVER_NULL, "NeverNull")
CanBeNull = NullabilityMarker(Nullability.CAN_BE_NULL, "CanBeNull")


class MarkedProperty(property):
    """A `property` carrying property-level nullability markers.

    Plain `property` objects do not accept attributes, and
    ``property.setter`` rebuilds the descriptor from its type, so the markers
    are carried across `getter`, `setter` and `deleter` explicitly.
    """

    def __init__(self, fget=None, fset=None, fdel=None, doc=None, markers=()):
        super().__init__(fget, fset, fdel, doc)
        setattr(self, MARKERS_ATTR, tuple(markers))

    @classmethod
    def from_property(
        cls, prop: property, markers: tuple[NullabilityMarker, ...]
    ) -> MarkedProperty:
        """Build a marked copy of ``prop`` with ``markers`` appended."""
        existing = getattr(prop, MARKERS_ATTR, ())
        return cls(prop.fget, prop.fset, prop.fdel, prop.__doc__, existing + markers)

    def _copy(self, **accessors) -> MarkedProperty:
        fget = accessors.get("fget", self.fget)
        fset = accessors.get("fset", self.fset)
        fdel = accessors.get("fdel", self.fdel)
        return type(self)(
            fget, fset, fdel, self.__doc__, getattr(self, MARKERS_ATTR, ())
        )

    def getter(self, fget, /) -> MarkedProperty:
        return self._copy(fget=fget)

    def setter(self, fset, /) -> MarkedProperty:
        return self._copy(fset=fset)

    def deleter(self, fdel, /) -> MarkedProperty:
        return self._copy(fdel=fdel)


def null_safe(cls: type[T]) -> type[T]:
    """Opt an interface into null safety contract enforcement.

    The marker belongs to the decorated class only; it is not inherited by
    subclasses.
    """
    if not isinstance(cls, type):
        raise TypeError(f"@null_safe can only decorate classes, not {cls!r}")
    _NULL_SAFE_TYPES.add(cls)
    return cls


def is_null_safe(cls: type) -> bool:
    """Return True if ``cls`` itself was decorated with `null_safe`."""
    try:
        return cls in _NULL_SAFE_TYPES
    except TypeError:
        return False


# ============================================================================
#                           Argument holders
# ============================================================================


class Out(Generic[T]):
    """Holder for an output argument, filled in by the callee.

    The value is undefined (``None``) before the call; a guard only inspects
    it once the call has returned.
    """

    __slots__ = ("value",)

    def __init__(self) -> None:
        self.value: T | None = None

    def __repr__(self) -> str:
        return f"Out({self.value!r})"


class Ref(Generic[T]):
    """Holder for an argument passed by reference (read and written by the callee)."""

    __slots__ = ("value",)

    def __init__(self, value: T | None = None) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"
