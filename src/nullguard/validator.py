"""Interface schema validation.

`validate` walks a null-safe interface and produces its `InterfaceContract`.
All nullability decisions are made here, exhaustively and once; synthesis
trusts the contract completely.

An interface is a class built on `abc.ABC` (or a `typing.Protocol` class)
whose members are all abstract. Its bases must be interfaces too.
"""

from __future__ import annotations

import abc
import inspect
import logging
import typing
from typing import Any, Generic, Never, NoReturn, Protocol

from .contracts import (
    IndexerContract,
    InterfaceContract,
    MethodContract,
    ParameterContract,
    ParameterKind,
    PropertyContract,
)
from .errors import (
    DefinitionError,
    DuplicateNullabilityError,
    IneligibleNullabilityError,
    NotAnInterfaceError,
    NotNullSafeError,
)
from .markers import Out, Ref, is_null_safe
from .resolver import (
    annotation_markers,
    ensure_unmarked,
    markers_of,
    resolve_nullability,
    strip_annotated,
)

logger = logging.getLogger(__name__)

_INTERFACE_ROOTS: frozenset[type] = frozenset({object, abc.ABC, Protocol, Generic})
_INDEXER_ACCESSORS = ("__getitem__", "__setitem__", "__delitem__")
_NO_VALUE_TYPES = (type(None), NoReturn, Never)
_EMPTY = inspect.Parameter.empty


def qualified_name(cls: type) -> str:
    """Module-qualified name of a class, as used in messages."""
    return f"{cls.__module__}.{cls.__qualname__}"


def validate(interface: type) -> InterfaceContract:
    """Build the contract of a null-safe interface.

    Args:
        interface: The interface class to describe.

    Returns:
        InterfaceContract: The immutable description of every member.

    Raises:
        NotAnInterfaceError: If ``interface`` is not a pure interface.
        NotNullSafeError: If ``interface`` is not marked with ``@null_safe``.
        DuplicateNullabilityError: If a position carries more than one marker.
        IneligibleNullabilityError: If a marker sits on a position that can
            never hold a value.
        DefinitionError: If a member cannot be described (e.g. unresolvable
            annotations).
    """
    if not isinstance(interface, type):
        raise NotAnInterfaceError(repr(interface), "is not a class")
    name = qualified_name(interface)
    _check_is_interface(interface, name)
    members = _collect_members(interface, name)
    if not is_null_safe(interface):
        raise NotNullSafeError(name)

    properties: list[PropertyContract] = []
    methods: list[MethodContract] = []
    for member_name, member in members.items():
        if member_name in _INDEXER_ACCESSORS:
            continue
        if isinstance(member, property):
            properties.append(_property_contract(name, member_name, member))
        else:
            methods.append(_method_contract(name, member_name, member))

    accessors = {k: members[k] for k in _INDEXER_ACCESSORS if k in members}
    indexer = _indexer_contract(name, accessors) if accessors else None

    contract = InterfaceContract(
        interface=interface,
        name=name,
        properties=tuple(properties),
        methods=tuple(methods),
        indexer=indexer,
    )
    logger.debug(
        "Validated %s: %d properties, %d methods, indexer=%s",
        name,
        len(properties),
        len(methods),
        indexer is not None,
    )
    return contract


# ============================================================================
#                           Interface eligibility
# ============================================================================


def _is_protocol(cls: type) -> bool:
    return bool(cls.__dict__.get("_is_protocol", False))


def _check_is_interface(interface: type, name: str) -> None:
    for cls in interface.__mro__:
        if cls in _INTERFACE_ROOTS:
            continue
        if not (_is_protocol(cls) or isinstance(cls, abc.ABCMeta)):
            if cls is interface:
                raise NotAnInterfaceError(
                    name, "is not an abstract base class or protocol"
                )
            raise NotAnInterfaceError(
                name, f"inherits from the concrete class {qualified_name(cls)}"
            )


def _is_member(value: object) -> bool:
    return inspect.isfunction(value) or isinstance(value, property)


def _collect_members(interface: type, name: str) -> dict[str, Any]:
    """Gather interface members from the MRO; subclass definitions win."""
    members: dict[str, Any] = {}
    for cls in reversed(interface.__mro__):
        if cls in _INTERFACE_ROOTS:
            continue
        protocol = _is_protocol(cls)
        for attr, value in vars(cls).items():
            abstract = getattr(value, "__isabstractmethod__", False)
            if isinstance(value, (staticmethod, classmethod)):
                if abstract:
                    raise NotAnInterfaceError(
                        name, f"declares the abstract static member {attr!r}"
                    )
                continue
            if not _is_member(value):
                continue
            if abstract:
                members[attr] = value
            elif attr.startswith("_"):
                members.pop(attr, None)
            elif protocol:
                members[attr] = value
            else:
                raise NotAnInterfaceError(
                    name, f"defines the concrete member {attr!r}"
                )
    return members


# ============================================================================
#                              Annotations
# ============================================================================


def _type_hints(interface: str, member: str, fn: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(fn, include_extras=True)
    except (NameError, TypeError, AttributeError, SyntaxError) as e:
        raise DefinitionError(
            interface,
            f"Cannot resolve the annotations of {interface}.{member}: {e}",
        ) from e


def _holds_no_value(annotation: Any) -> bool:
    base = strip_annotated(annotation)
    return base is None or base in _NO_VALUE_TYPES


def _parameter_kind(parameter: inspect.Parameter, annotation: Any) -> ParameterKind:
    if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
        return ParameterKind.VAR_POSITIONAL
    if parameter.kind is inspect.Parameter.VAR_KEYWORD:
        return ParameterKind.VAR_KEYWORD
    base = strip_annotated(annotation)
    if base is Out or typing.get_origin(base) is Out:
        return ParameterKind.OUTPUT
    if base is Ref or typing.get_origin(base) is Ref:
        return ParameterKind.REF
    return ParameterKind.INPUT


def _value_parameters(
    interface: str, member: str, fn: Any
) -> list[inspect.Parameter]:
    """Parameters of an instance member, ``self`` excluded."""
    parameters = list(inspect.signature(fn).parameters.values())
    if not parameters or parameters[0].kind not in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        raise DefinitionError(
            interface, f"{interface}.{member} does not accept an instance argument."
        )
    return parameters[1:]


# ============================================================================
#                               Properties
# ============================================================================


def _accessor_allows_none(
    interface: str,
    position: str,
    markers: tuple,
    annotation: Any,
    property_level: bool | None,
) -> bool:
    if property_level is not None:
        ensure_unmarked(markers, interface=interface, position=position)
        return property_level
    allows = resolve_nullability(markers, interface=interface, position=position)
    if _holds_no_value(annotation):
        if allows is not None:
            raise IneligibleNullabilityError(
                interface, position, "the type cannot hold a value"
            )
        return True
    return bool(allows)


def _property_contract(interface: str, name: str, prop: property) -> PropertyContract:
    property_level = resolve_nullability(
        markers_of(prop), interface=interface, position=f"property '{name}'"
    )
    getter_allows = setter_allows = True

    if prop.fget is not None:
        hints = _type_hints(interface, name, prop.fget)
        annotation = hints.get("return", _EMPTY)
        getter_allows = _accessor_allows_none(
            interface,
            f"getter of '{name}'",
            markers_of(prop.fget) + annotation_markers(annotation),
            annotation,
            property_level,
        )

    if prop.fset is not None:
        hints = _type_hints(interface, name, prop.fset)
        parameters = _value_parameters(interface, name, prop.fset)
        annotation = hints.get(parameters[0].name, _EMPTY) if parameters else _EMPTY
        setter_allows = _accessor_allows_none(
            interface,
            f"setter of '{name}'",
            markers_of(prop.fset) + annotation_markers(annotation),
            annotation,
            property_level,
        )

    return PropertyContract(
        name=name,
        readable=prop.fget is not None,
        writable=prop.fset is not None,
        deletable=prop.fdel is not None,
        getter_allows_none=getter_allows,
        setter_allows_none=setter_allows,
    )


# ============================================================================
#                                Indexers
# ============================================================================


def _resolve_shared(interface: str, position: str, per_accessor: list[tuple]) -> bool:
    """Resolve a position declared once per accessor; declarations must agree."""
    decided = {
        resolve_nullability(markers, interface=interface, position=position)
        for markers in per_accessor
    } - {None}
    if len(decided) > 1:
        raise DuplicateNullabilityError(interface, position)
    return decided.pop() if decided else False


def _key_contracts(
    interface: str, accessors: dict[str, Any]
) -> tuple[ParameterContract, ...]:
    """Resolve key contracts shared by every indexer accessor."""
    key_names: list[str] = []
    key_markers: list[tuple] = []
    element_markers: dict[int, list[tuple]] = {}
    for accessor, fn in accessors.items():
        parameters = _value_parameters(interface, accessor, fn)
        if accessor == "__setitem__":
            parameters = parameters[:-1]
        if len(parameters) != 1:
            raise DefinitionError(
                interface,
                f"{interface}.{accessor} must take exactly one key argument.",
            )
        key = parameters[0]
        annotation = _type_hints(interface, accessor, fn).get(key.name, _EMPTY)
        key_names.append(key.name)
        key_markers.append(annotation_markers(annotation))
        base = strip_annotated(annotation)
        if typing.get_origin(base) is tuple:
            elements = typing.get_args(base)
            if elements and elements[-1] is not Ellipsis:
                for i, element in enumerate(elements):
                    element_markers.setdefault(i, []).append(
                        annotation_markers(element)
                    )

    key_name = key_names[0]
    keys = [
        ParameterContract(
            key_name,
            ParameterKind.INPUT,
            _resolve_shared(interface, f"indexer key '{key_name}'", key_markers),
        )
    ]
    for i, markers in sorted(element_markers.items()):
        allows = _resolve_shared(
            interface, f"indexer key '{key_name}[{i}]'", markers
        )
        keys.append(ParameterContract(key_name, ParameterKind.INPUT, allows, index=i))
    return tuple(keys)


def _indexer_contract(interface: str, accessors: dict[str, Any]) -> IndexerContract:
    getter = accessors.get("__getitem__")
    setter = accessors.get("__setitem__")
    getter_allows = setter_allows = True

    if getter is not None:
        annotation = _type_hints(interface, "__getitem__", getter).get("return", _EMPTY)
        getter_allows = _accessor_allows_none(
            interface,
            "getter of the indexer",
            markers_of(getter) + annotation_markers(annotation),
            annotation,
            None,
        )
    if setter is not None:
        parameters = _value_parameters(interface, "__setitem__", setter)
        hints = _type_hints(interface, "__setitem__", setter)
        annotation = hints.get(parameters[-1].name, _EMPTY) if parameters else _EMPTY
        setter_allows = _accessor_allows_none(
            interface,
            "setter of the indexer",
            markers_of(setter) + annotation_markers(annotation),
            annotation,
            None,
        )

    return IndexerContract(
        readable=getter is not None,
        writable=setter is not None,
        deletable="__delitem__" in accessors,
        keys=_key_contracts(interface, accessors),
        getter_allows_none=getter_allows,
        setter_allows_none=setter_allows,
    )


# ============================================================================
#                                Methods
# ============================================================================


def _method_contract(interface: str, name: str, fn: Any) -> MethodContract:
    hints = _type_hints(interface, name, fn)
    position = f"return value of '{name}'"

    annotation = hints.get("return", _EMPTY)
    allows = resolve_nullability(
        markers_of(fn) + annotation_markers(annotation),
        interface=interface,
        position=position,
    )
    if annotation is _EMPTY and allows is None:
        raise DefinitionError(
            interface,
            f"{interface}.{name} has no return annotation; annotate it "
            "('-> None' if it returns nothing) or mark its return value.",
        )
    returns_value = not _holds_no_value(annotation)
    if not returns_value and allows is not None:
        base = strip_annotated(annotation)
        reason = (
            "the member never returns"
            if base in (NoReturn, Never)
            else "the member returns None"
        )
        raise IneligibleNullabilityError(interface, position, reason)

    parameters: list[ParameterContract] = []
    for parameter in _value_parameters(interface, name, fn):
        parameters.append(_parameter_contract(interface, name, parameter, hints))

    return MethodContract(
        name=name,
        signature=inspect.signature(fn),
        parameters=tuple(parameters),
        returns_value=returns_value,
        return_allows_none=True if not returns_value else bool(allows),
    )


def _parameter_contract(
    interface: str,
    member: str,
    parameter: inspect.Parameter,
    hints: dict[str, Any],
) -> ParameterContract:
    position = f"argument '{parameter.name}' of '{member}'"
    annotation = hints.get(parameter.name, _EMPTY)
    allows = resolve_nullability(
        annotation_markers(annotation), interface=interface, position=position
    )
    if allows is not None and _holds_no_value(annotation):
        raise IneligibleNullabilityError(
            interface, position, "the type cannot hold a value"
        )
    return ParameterContract(
        name=parameter.name,
        kind=_parameter_kind(parameter, annotation),
        allows_none=bool(allows),
    )
