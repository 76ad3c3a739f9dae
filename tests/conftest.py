"""Global pytest configuration for NULLGUARD.

Tests are marked by the top-level folder they live in (``tests/unit`` →
``unit``, ``tests/contract`` → ``contract``, ``tests/e2e`` → ``e2e``) unless
they already carry that mark.
"""

from pathlib import Path

import pytest

from nullguard import ContractCache

# pylint: disable=unused-argument

TESTS_ROOT = Path(__file__).parent.resolve()
FOLDER_MARKERS = {"unit", "contract", "e2e"}


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add the folder mark to every collected item."""
    for item in items:
        relative = item.path.resolve().relative_to(TESTS_ROOT)
        folder = relative.parts[0] if len(relative.parts) > 1 else None
        if folder in FOLDER_MARKERS and not any(
            marker.name == folder for marker in item.iter_markers()
        ):
            item.add_marker(getattr(pytest.mark, folder))


@pytest.fixture
def cache() -> ContractCache:
    """A fresh, empty contract cache isolated from the process-wide one."""
    return ContractCache()
