"""Proxy synthesis.

`synthesize` turns a validated `InterfaceContract` into a guard class. Each
member gets its own forwarding body, built as a closure over the member's
contract so that no nullability decision is taken at call time:

* input checks run in declaration order before the inner call, and the first
  failure aborts before the inner implementation is invoked;
* output checks, then the return check, run after the inner call returns.

The bodies raise `NullSafetyViolationError` and nothing else; exceptions from
the inner implementation propagate untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from nullguard.contracts import (
    IndexerContract,
    InterfaceContract,
    MethodContract,
    ParameterContract,
    ParameterKind,
    PropertyContract,
)
from nullguard.errors import NullSafetyViolationError, ViolationKind

from .backend import INNER_ATTR, GuardedInstance, TypeBuilder

logger = logging.getLogger(__name__)

type WrapperFactory = type[GuardedInstance]

_MISSING = object()


def synthesize(contract: InterfaceContract) -> WrapperFactory:
    """Build the guard class for an interface contract.

    Args:
        contract: The validated contract of the interface.

    Returns:
        WrapperFactory: A class implementing the interface; calling it with an
        inner instance returns a new guard around that instance.
    """
    builder = TypeBuilder(contract.interface)
    builder.define_attribute("__nullguard_interface__", contract.interface)
    builder.define_attribute("__nullguard_contract__", contract)

    for prop in contract.properties:
        _define_property(builder, contract, prop)
    for method in contract.methods:
        _define_method(builder, contract, method)
    if contract.indexer is not None:
        _define_indexer(builder, contract, contract.indexer)

    factory = builder.create_type()
    logger.debug(
        "Synthesized %s for %s (%d members)",
        factory.__name__,
        contract.name,
        contract.member_count,
    )
    return factory


def _doc_of(contract: InterfaceContract, name: str) -> str | None:
    return getattr(getattr(contract.interface, name, None), "__doc__", None)


# ============================================================================
#                               Properties
# ============================================================================


def _define_property(
    builder: TypeBuilder, contract: InterfaceContract, prop: PropertyContract
) -> None:
    interface, name = contract.name, prop.name
    fget = fset = fdel = None

    if prop.readable:
        check_result = not prop.getter_allows_none

        def fget(self):
            value = getattr(getattr(self, INNER_ATTR), name)
            if check_result and value is None:
                raise NullSafetyViolationError(interface, name, ViolationKind.GETTER)
            return value

    if prop.writable:
        check_value = not prop.setter_allows_none

        def fset(self, value):
            if check_value and value is None:
                raise NullSafetyViolationError(interface, name, ViolationKind.SETTER)
            setattr(getattr(self, INNER_ATTR), name, value)

    if prop.deletable:

        def fdel(self):
            delattr(getattr(self, INNER_ATTR), name)

    builder.define_property(name, fget, fset, fdel, doc=_doc_of(contract, name))


# ============================================================================
#                                Indexers
# ============================================================================


def _key_checker(
    interface: str, member: str, indexer: IndexerContract
) -> Callable[[Any], None]:
    key, elements = indexer.key, indexer.elements
    checked_elements = [e for e in elements if not e.allows_none]

    def check_key(value: Any) -> None:
        if value is None:
            if not key.allows_none:
                raise NullSafetyViolationError(
                    interface, member, ViolationKind.ARGUMENT, key.label
                )
            return
        if isinstance(value, tuple) and len(value) == len(elements):
            for element in checked_elements:
                if value[element.index] is None:
                    raise NullSafetyViolationError(
                        interface, member, ViolationKind.ARGUMENT, element.label
                    )

    return check_key


def _define_indexer(
    builder: TypeBuilder, contract: InterfaceContract, indexer: IndexerContract
) -> None:
    interface = contract.name

    if indexer.readable:
        check_get_key = _key_checker(interface, "__getitem__", indexer)
        check_result = not indexer.getter_allows_none

        def getitem(self, key):
            check_get_key(key)
            value = getattr(self, INNER_ATTR)[key]
            if check_result and value is None:
                raise NullSafetyViolationError(
                    interface, "__getitem__", ViolationKind.GETTER
                )
            return value

        builder.define_method(
            "__getitem__", getitem, _doc_of(contract, "__getitem__")
        )

    if indexer.writable:
        check_set_key = _key_checker(interface, "__setitem__", indexer)
        check_value = not indexer.setter_allows_none

        def setitem(self, key, value):
            check_set_key(key)
            if check_value and value is None:
                raise NullSafetyViolationError(
                    interface, "__setitem__", ViolationKind.SETTER
                )
            getattr(self, INNER_ATTR)[key] = value

        builder.define_method(
            "__setitem__", setitem, _doc_of(contract, "__setitem__")
        )

    if indexer.deletable:
        check_del_key = _key_checker(interface, "__delitem__", indexer)

        def delitem(self, key):
            check_del_key(key)
            del getattr(self, INNER_ATTR)[key]

        builder.define_method(
            "__delitem__", delitem, _doc_of(contract, "__delitem__")
        )


# ============================================================================
#                                Methods
# ============================================================================


def _holder_is_empty(holder: Any) -> bool:
    return holder is None or getattr(holder, "value", _MISSING) is None


def _input_violation(param: ParameterContract, value: Any) -> str | None:
    """Label of the first forbidden ``None`` in an input value, if any."""
    match param.kind:
        case ParameterKind.VAR_POSITIONAL:
            for i, item in enumerate(value):
                if item is None:
                    return f"{param.name}[{i}]"
        case ParameterKind.VAR_KEYWORD:
            for key, item in value.items():
                if item is None:
                    return key
        case ParameterKind.REF:
            if _holder_is_empty(value):
                return param.name
        case _:
            if value is None:
                return param.name
    return None


def _define_method(
    builder: TypeBuilder, contract: InterfaceContract, method: MethodContract
) -> None:
    interface, name, signature = contract.name, method.name, method.signature
    inputs = [
        p for p in method.parameters
        if not p.allows_none and p.kind.checked_before_call
    ]
    outputs = [
        p for p in method.parameters
        if not p.allows_none and p.kind.checked_after_call
    ]
    check_result = method.returns_value and not method.return_allows_none

    def forward(self, *args, **kwargs):
        inner = getattr(self, INNER_ATTR)
        arguments: dict[str, Any] = {}
        if inputs or outputs:
            try:
                arguments = signature.bind(self, *args, **kwargs).arguments
            except TypeError:
                # Let the inner implementation report the bad call itself.
                arguments = {}

        for param in inputs:
            value = arguments.get(param.name, _MISSING)
            if value is _MISSING:
                continue
            if (label := _input_violation(param, value)) is not None:
                raise NullSafetyViolationError(
                    interface, name, ViolationKind.ARGUMENT, label
                )

        result = getattr(inner, name)(*args, **kwargs)

        for param in outputs:
            holder = arguments.get(param.name, _MISSING)
            if holder is _MISSING:
                continue
            if _holder_is_empty(holder):
                raise NullSafetyViolationError(
                    interface, name, ViolationKind.OUTPUT, param.name
                )

        if check_result and result is None:
            raise NullSafetyViolationError(interface, name, ViolationKind.RETURN)
        return result

    builder.define_method(name, forward, _doc_of(contract, name))
