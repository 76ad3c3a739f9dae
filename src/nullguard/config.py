"""Configuration utilities for NULLGUARD.

This module centralizes the environment variables read by the command-line
interface and the helper that resolves ``package.module:Qualname`` targets.
The library itself reads no configuration.
"""

import importlib
import os
import re

from .errors import NullGuardError

CHECK_TARGETS_ENV = "NULLGUARD_CHECK_TARGETS"  # pragma: no mutate
LOG_PATH_ENV = "NULLGUARD_LOG_PATH"  # pragma: no mutate
LOGGER_LEVELS_ENV = "NULLGUARD_LOGGER_LEVELS"  # pragma: no mutate
FLIGHT_RECORDER_CAPACITY_ENV = "NULLGUARD_FLIGHT_RECORDER_CAPACITY"  # pragma: no mutate
FLIGHT_RECORDER_ENV = "NULLGUARD_FLIGHT_RECORDER"  # pragma: no mutate
FORCE_FLUSH_ENV = "NULLGUARD_FORCE_FLUSH"  # pragma: no mutate


class TargetImportError(NullGuardError):
    """Raised when a ``package.module:Qualname`` target cannot be resolved.

    Attributes:
        target (str): The target string as given.
        reason (str): Why it could not be resolved.
    """

    def __init__(self, target: str, reason: str) -> None:
        super().__init__(f"Cannot load {target!r}: {reason}")
        self.target = target
        self.reason = reason


def split_targets(value: str) -> list[str]:
    """Split a comma/space separated target list, dropping empty items."""
    return [item for item in re.split(r"[,\s]+", value) if item]


def get_check_targets() -> list[str]:
    """Targets listed in the `NULLGUARD_CHECK_TARGETS` environment variable.

    Returns:
        The targets in order, or an empty list when the variable is unset.
    """
    return split_targets(os.environ.get(CHECK_TARGETS_ENV, ""))


def load_target(target: str) -> object:
    """Import the object named by ``target``.

    Args:
        target: A string of the form ``package.module:Qualname``, where
            ``Qualname`` may be dotted to reach nested classes.

    Returns:
        The resolved object.

    Raises:
        TargetImportError: If the string is malformed, the module cannot be
            imported or the attribute does not exist.
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise TargetImportError(target, "expected 'package.module:Qualname'")
    try:
        obj: object = importlib.import_module(module_name)
    except ImportError as e:
        raise TargetImportError(target, str(e)) from e
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise TargetImportError(
                target, f"{module_name} has no attribute {qualname!r}"
            ) from e
    return obj
