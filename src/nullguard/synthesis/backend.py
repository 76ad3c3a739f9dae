"""Type synthesis backend.

`TypeBuilder` is the only place that creates classes at run time. The
synthesizer issues it commands (define a method, define a property) and
finally asks it for the class; every synthesized class derives from
`GuardedInstance` and the interface it implements.
"""

from __future__ import annotations

import re
import types
from collections.abc import Callable
from typing import Any

INNER_ATTR = "_nullguard_inner"

# pylint: disable=too-few-public-methods


class GuardedInstance:
    """Base of every synthesized guard class.

    A guard owns exactly one inner instance, received at construction and
    delegated to on every call. It holds no other state.
    """

    __slots__ = (INNER_ATTR,)

    __nullguard_interface__: type
    __nullguard_contract__: Any

    def __init__(self, inner: object) -> None:
        object.__setattr__(self, INNER_ATTR, inner)

    def __repr__(self) -> str:
        interface = type(self).__nullguard_interface__
        return f"<{interface.__qualname__} guard of {getattr(self, INNER_ATTR)!r}>"


def type_name_for(interface: type) -> str:
    """Identifier-safe name for the guard class of ``interface``."""
    module = re.sub(r"[^0-9a-zA-Z_]", "_", interface.__module__)
    name = re.sub(r"[^0-9a-zA-Z_]", "_", interface.__qualname__)
    return f"NullGuard_{module}_{name}"


class TypeBuilder:
    """Accumulates member definitions and creates the guard class.

    Args:
        interface: The interface the new class implements.
        name: Class name; defaults to `type_name_for`.
    """

    def __init__(self, interface: type, name: str | None = None) -> None:
        self.interface = interface
        self.name = name or type_name_for(interface)
        self._namespace: dict[str, Any] = {
            "__slots__": (),
            "__module__": __name__,
            "__qualname__": self.name,
            "__doc__": f"Null safety guard for {interface.__qualname__}.",
        }

    def define_attribute(self, name: str, value: Any) -> None:
        self._namespace[name] = value

    def define_method(
        self, name: str, body: Callable[..., Any], doc: str | None = None
    ) -> None:
        """Define an instance method called ``name`` with the given body."""
        body.__name__ = name
        body.__qualname__ = f"{self.name}.{name}"
        body.__doc__ = doc
        self._namespace[name] = body

    def define_property(
        self,
        name: str,
        fget: Callable[[Any], Any] | None = None,
        fset: Callable[[Any, Any], None] | None = None,
        fdel: Callable[[Any], None] | None = None,
        doc: str | None = None,
    ) -> None:
        """Define a property called ``name`` from the given accessor bodies."""
        for accessor in (fget, fset, fdel):
            if accessor is not None:
                accessor.__name__ = name
                accessor.__qualname__ = f"{self.name}.{name}"
        self._namespace[name] = property(fget, fset, fdel, doc)

    def create_type(self) -> type[GuardedInstance]:
        """Create the class; it implements the interface and `GuardedInstance`."""
        namespace = dict(self._namespace)
        return types.new_class(
            self.name,
            (GuardedInstance, self.interface),
            exec_body=lambda ns: ns.update(namespace),
        )
