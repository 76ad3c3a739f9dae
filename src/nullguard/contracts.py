"""Immutable contract descriptions produced by interface validation.

An `InterfaceContract` is the single source of truth for everything a guard
checks. It is built once per interface and never re-derived from the raw
declarations.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum


class ParameterKind(Enum):
    """How a parameter value flows between caller and callee."""

    INPUT = "input"
    OUTPUT = "output"
    REF = "ref"
    VAR_POSITIONAL = "var_positional"
    VAR_KEYWORD = "var_keyword"

    @property
    def checked_before_call(self) -> bool:
        return self is not ParameterKind.OUTPUT

    @property
    def checked_after_call(self) -> bool:
        return self in (ParameterKind.OUTPUT, ParameterKind.REF)


@dataclass(frozen=True)
class ParameterContract:
    """Contract for one parameter of a method or indexer accessor.

    Attributes:
        name: Parameter name as declared.
        kind: Input, output, by-reference or variadic.
        allows_none: Whether ``None`` is permitted.
        index: For elements of a tuple indexer key, the element position.
    """

    name: str
    kind: ParameterKind
    allows_none: bool
    index: int | None = None

    @property
    def label(self) -> str:
        """Name used in violation messages."""
        return self.name if self.index is None else f"{self.name}[{self.index}]"


@dataclass(frozen=True)
class PropertyContract:
    """Contract for a property and its accessors."""

    name: str
    readable: bool
    writable: bool
    deletable: bool
    getter_allows_none: bool = True
    setter_allows_none: bool = True


@dataclass(frozen=True)
class IndexerContract:
    """Contract for the ``__getitem__``/``__setitem__``/``__delitem__`` accessors.

    `keys` holds the contract for the key itself followed by one contract per
    element of a fixed-size tuple key. Key contracts apply identically to
    every accessor.
    """

    readable: bool
    writable: bool
    deletable: bool
    keys: tuple[ParameterContract, ...]
    getter_allows_none: bool = True
    setter_allows_none: bool = True

    @property
    def key(self) -> ParameterContract:
        return self.keys[0]

    @property
    def elements(self) -> tuple[ParameterContract, ...]:
        return self.keys[1:]


@dataclass(frozen=True)
class MethodContract:
    """Contract for a method: its parameters and return value.

    Attributes:
        name: Method name.
        signature: Declared signature including ``self``, used to bind call
            arguments to parameter contracts.
        parameters: Contracts in declaration order, ``self`` excluded.
        returns_value: False for members annotated to return ``None`` (or
            never to return); such members carry no return contract.
        return_allows_none: Whether a ``None`` result is permitted.
    """

    name: str
    signature: inspect.Signature = field(compare=False)
    parameters: tuple[ParameterContract, ...]
    returns_value: bool
    return_allows_none: bool = True


@dataclass(frozen=True)
class InterfaceContract:
    """Complete contract of one null-safe interface."""

    interface: type
    name: str
    properties: tuple[PropertyContract, ...] = ()
    methods: tuple[MethodContract, ...] = ()
    indexer: IndexerContract | None = None

    @property
    def member_count(self) -> int:
        return (
            len(self.properties) + len(self.methods) + (self.indexer is not None)
        )

    def member(self, name: str) -> PropertyContract | MethodContract | None:
        """Look up a property or method contract by name."""
        for member in (*self.properties, *self.methods):
            if member.name == name:
                return member
        return None
