"""Pytest fixtures for guard contract tests.

Provided fixtures
-----------------
- **wrap**: ``wrap(interface, instance)`` guards ``instance`` using a fresh,
  per-test `ContractCache`, so no test observes another test's cache state.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from nullguard import ContractCache, guard


@pytest.fixture
def wrap(cache: ContractCache) -> Callable[[type, Any], Any]:
    """Return a function guarding an instance with the per-test cache."""

    def _wrap(interface: type, instance: Any) -> Any:
        return guard(interface, instance, cache=cache)

    return _wrap
