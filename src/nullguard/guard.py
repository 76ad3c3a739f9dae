"""Public entry points: guarding instances and preparing interfaces.

Example:
    ```py
    catalog = guard(Catalog, SqlCatalog(conn))
    catalog.find(None)  # raises NullSafetyViolationError
    ```
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from .cache import ContractCache
from .contracts import InterfaceContract
from .synthesis import GuardedInstance, WrapperFactory
from .synthesis.backend import INNER_ATTR

T = TypeVar("T")
P = ParamSpec("P")

_default_cache = ContractCache()


def default_cache() -> ContractCache:
    """The process-wide cache used when no cache is passed explicitly."""
    return _default_cache


def _resolve(cache: ContractCache | None) -> ContractCache:
    return _default_cache if cache is None else cache


def guard(
    interface: type[T], instance: T | None, *, cache: ContractCache | None = None
) -> T | None:
    """Wrap ``instance`` in a guard enforcing the contract of ``interface``.

    Args:
        interface: The null-safe interface whose contract is enforced.
        instance: The implementation to delegate to. ``None`` is returned
            unchanged, without validating ``interface``.
        cache: Cache to build the guard class in; defaults to the
            process-wide cache.

    Returns:
        A new guard implementing ``interface``, ``instance`` itself if it is
        already a guard for ``interface``, or ``None``.

    Raises:
        DefinitionError: If ``interface`` is not a valid null-safe interface.
    """
    if instance is None:
        return None
    if is_guarded(instance, interface):
        return instance
    factory = _resolve(cache).get_or_build(interface)
    return factory(instance)  # type: ignore[return-value]


def prepare(
    interface: type, *, cache: ContractCache | None = None
) -> WrapperFactory:
    """Build and validate the guard class for ``interface`` ahead of first use.

    Idempotent; useful at start-up to surface definition errors early.

    Raises:
        DefinitionError: If ``interface`` is not a valid null-safe interface.
    """
    return _resolve(cache).prepare(interface)


def get_contract(
    interface: type, *, cache: ContractCache | None = None
) -> InterfaceContract:
    """Return the validated contract of ``interface``."""
    return _resolve(cache).contract_for(interface)


def is_guarded(obj: object, interface: type | None = None) -> bool:
    """Return True if ``obj`` is a guard (for ``interface``, when given)."""
    if not isinstance(obj, GuardedInstance):
        return False
    return interface is None or type(obj).__nullguard_interface__ is interface


def unwrap(obj: T) -> T:
    """Return the instance a guard delegates to; other objects are returned as is."""
    if isinstance(obj, GuardedInstance):
        return getattr(obj, INNER_ATTR)
    return obj


def guarded(
    interface: type[T], *, cache: ContractCache | None = None
) -> Callable[[Callable[P, T | None]], Callable[P, T | None]]:
    """Decorate a factory so that whatever it returns is guarded.

    Example:
        ```py
        @guarded(Catalog)
        def make_catalog(conn) -> Catalog:
            return SqlCatalog(conn)
        ```
    """

    def decorator(factory: Callable[P, T | None]) -> Callable[P, T | None]:
        @functools.wraps(factory)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T | None:
            return guard(interface, factory(*args, **kwargs), cache=cache)

        return wrapper

    return decorator
