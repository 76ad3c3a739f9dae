"""Error definitions for nullguard.

Two disjoint kinds of failure exist:

* `DefinitionError` (and subclasses) is raised while an interface declaration
  is turned into a contract. It always describes an authoring mistake.
* `NullSafetyViolationError` is raised by a guard at call time when a
  forbidden ``None`` is observed at a checked position.

Exceptions raised by a guarded implementation are never translated into
either of these.
"""

from enum import Enum

# ============================================================================
#                               Base error
# ============================================================================


class NullGuardError(Exception):
    """Base class for all nullguard errors."""


# ============================================================================
#                         Definition (schema) errors
# ============================================================================


class DefinitionError(NullGuardError):
    """Raised when an interface cannot be turned into a null safety contract.

    Attributes:
        interface (str): Qualified name of the offending interface.
    """

    def __init__(self, interface: str, message: str | None = None) -> None:
        if message is None:
            message = f"Invalid null safety definition for {interface}."
        super().__init__(message)
        self.interface = interface


class NotAnInterfaceError(DefinitionError):
    """Raised when the guarded type is not a pure interface."""

    def __init__(self, interface: str, reason: str) -> None:
        super().__init__(
            interface,
            f"Null safety guards are only supported for interfaces: "
            f"{interface} {reason}.",
        )
        self.reason = reason


class NotNullSafeError(DefinitionError):
    """Raised when the interface does not carry the ``@null_safe`` marker."""

    def __init__(self, interface: str) -> None:
        super().__init__(
            interface,
            "Null safety guards can only be used on interfaces marked with "
            f"@null_safe; {interface} is not.",
        )


class DuplicateNullabilityError(DefinitionError):
    """Raised when more than one nullability marker targets the same position.

    Attributes:
        interface (str): Qualified name of the interface.
        position (str): Human-readable label of the position, e.g.
            ``"getter of 'name'"``.
    """

    def __init__(self, interface: str, position: str) -> None:
        super().__init__(
            interface,
            f"Only one nullability marker can be used on the {position} "
            f"({interface}).",
        )
        self.position = position


class IneligibleNullabilityError(DefinitionError):
    """Raised when a nullability marker sits on a position that cannot be checked.

    Attributes:
        interface (str): Qualified name of the interface.
        position (str): Human-readable label of the position.
        reason (str): Why the position is not eligible.
    """

    def __init__(self, interface: str, position: str, reason: str) -> None:
        super().__init__(
            interface,
            f"Nullability markers can not be used on the {position} "
            f"({interface}): {reason}.",
        )
        self.position = position
        self.reason = reason


# ============================================================================
#                         Call-time (violation) errors
# ============================================================================


class ViolationKind(Enum):
    """The kind of position at which a violation was observed."""

    GETTER = "getter"
    SETTER = "setter"
    ARGUMENT = "argument"
    RETURN = "return"
    OUTPUT = "output"


class NullSafetyViolationError(NullGuardError):
    """Raised when a guard observes ``None`` at a position that forbids it.

    Attributes:
        interface (str): Qualified name of the guarded interface.
        member (str): Name of the member being called.
        kind (ViolationKind): Which position failed.
        argument (str | None): Name of the offending parameter, for argument
            and output violations.
    """

    def __init__(
        self,
        interface: str,
        member: str,
        kind: ViolationKind,
        argument: str | None = None,
    ) -> None:
        target = f"{interface}.{member}"
        match kind:
            case ViolationKind.GETTER:
                message = f"{target} getter returned None."
            case ViolationKind.SETTER:
                message = f"Value assigned to {target} is None."
            case ViolationKind.ARGUMENT:
                message = f"Input argument {argument} of {target} is None."
            case ViolationKind.OUTPUT:
                message = f"Output argument {argument} of {target} is None."
            case _:
                message = f"{target} returned None."
        super().__init__(f"Null safety violation: {message}")
        self.interface = interface
        self.member = member
        self.kind = kind
        self.argument = argument
