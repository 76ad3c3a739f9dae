"""Parsing of ``NAME=LEVEL`` logger-level options.

Values come either from repeated ``-L`` flags or from a single comma/space
separated string (the ``NULLGUARD_LOGGER_LEVELS`` environment variable).
"""

import logging
import re

import click

# `nullguard check` imports user modules; keep noisy stdlib loggers quiet.
DEFAULT_LIB_LEVELS = {"asyncio": logging.WARNING}


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Flatten the option value into non-empty ``NAME=LEVEL`` items."""
    values = [value] if isinstance(value, str) else list(value)
    return [item for v in values for item in re.split(r"[,\s]+", v) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback turning ``NAME=LEVEL`` items into a name->level mapping.

    Items override `DEFAULT_LIB_LEVELS`; later items win. Level names are
    case-insensitive.

    Raises:
        click.BadParameter: If an item is not ``NAME=LEVEL`` or LEVEL is not a
            logging level name.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        name, sep, level_str = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        lvl = logging.getLevelNamesMapping().get(level_str.strip().upper())
        if lvl is None:
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = lvl
    return levels
