"""Per-interface cache of synthesized guard classes.

Building a guard class validates the interface and synthesizes the class; it
happens at most once per interface and cache, even when many threads ask for
the same interface at the same time. Failed builds are not remembered: the
next request simply tries again.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from .contracts import InterfaceContract
from .errors import DefinitionError, NotAnInterfaceError
from .synthesis import WrapperFactory, synthesize
from .validator import validate

logger = logging.getLogger(__name__)


def build_wrapper_factory(interface: type) -> WrapperFactory:
    """Validate ``interface`` and synthesize its guard class."""
    return synthesize(validate(interface))


class ContractCache:
    """Memoizes one guard class per interface type.

    Args:
        builder: Callable turning an interface into its guard class. Defaults
            to `build_wrapper_factory`; tests inject counting builders.

    Note:
        Each interface gets its own build lock, so slow builds of unrelated
        interfaces do not serialize. Lookups of already-built interfaces take
        no lock at all.
    """

    def __init__(
        self, builder: Callable[[type], WrapperFactory] = build_wrapper_factory
    ) -> None:
        self._builder = builder
        self._factories: dict[type, WrapperFactory] = {}
        self._locks: dict[type, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def __contains__(self, interface: object) -> bool:
        return interface in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def _lock_for(self, interface: type) -> threading.Lock:
        with self._registry_lock:
            return self._locks.setdefault(interface, threading.Lock())

    def get_or_build(self, interface: type) -> WrapperFactory:
        """Return the guard class for ``interface``, building it on first use.

        Raises:
            DefinitionError: If the interface is ill-formed. Nothing is cached
                in that case.
        """
        if not isinstance(interface, type):
            raise NotAnInterfaceError(repr(interface), "is not a class")
        if (factory := self._factories.get(interface)) is not None:
            return factory

        with self._lock_for(interface):
            if (factory := self._factories.get(interface)) is not None:
                logger.debug("Guard class for %s built concurrently", interface)
                return factory
            logger.debug("Building guard class for %s", interface.__qualname__)
            try:
                factory = self._builder(interface)
            except DefinitionError as e:
                logger.warning("Cannot guard %s: %s", interface.__qualname__, e)
                raise
            self._factories[interface] = factory
            return factory

    def prepare(self, interface: type) -> WrapperFactory:
        """Eagerly build the guard class, surfacing definition errors early."""
        factory = self.get_or_build(interface)
        logger.info("Prepared null safety guard for %s", interface.__qualname__)
        return factory

    def contract_for(self, interface: type) -> InterfaceContract:
        """Return the contract of ``interface``, building it if needed."""
        return self.get_or_build(interface).__nullguard_contract__
