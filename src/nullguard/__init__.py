"""NULLGUARD

Run-time nullability contracts for interfaces. Mark an interface with
``@null_safe``, declare which positions may hold ``None`` with `NeverNull` and
`CanBeNull`, and wrap implementations with `guard`: every call through the
guard checks arguments before delegating and results after.
"""

from .cache import ContractCache
from .errors import (
    DefinitionError,
    DuplicateNullabilityError,
    IneligibleNullabilityError,
    NotAnInterfaceError,
    NotNullSafeError,
    NullGuardError,
    NullSafetyViolationError,
    ViolationKind,
)
from .guard import get_contract, guard, guarded, is_guarded, prepare, unwrap
from .markers import CanBeNull, NeverNull, Nullability, Out, Ref, null_safe
from .synthesis import synthesize
from .validator import validate

__all__ = [
    "CanBeNull",
    "ContractCache",
    "DefinitionError",
    "DuplicateNullabilityError",
    "IneligibleNullabilityError",
    "NeverNull",
    "NotAnInterfaceError",
    "NotNullSafeError",
    "NullGuardError",
    "NullSafetyViolationError",
    "Nullability",
    "Out",
    "Ref",
    "ViolationKind",
    "__version__",
    "get_contract",
    "guard",
    "guarded",
    "is_guarded",
    "null_safe",
    "prepare",
    "synthesize",
    "unwrap",
    "validate",
]
__version__ = "0.1.0"
