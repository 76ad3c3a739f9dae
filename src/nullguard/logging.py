"""Handlers the ``nullguard`` command installs on the root logger.

Library code only asks for ``logging.getLogger(__name__)``; nothing here is
imported by the guard machinery. ``nullguard check`` imports user modules,
so records from their loggers show up on the console tagged with their
top-level package name.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "nullguard"

CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


class ThirdPartyPrefixFilter(logging.Filter):
    """Set ``record.prefix`` to ``[pkg]`` for loggers outside nullguard."""

    def filter(self, record: logging.LogRecord) -> bool:
        top_level = record.name.partition(".")[0]
        record.prefix = "" if top_level == PROJECT_PREFIX else f"[{top_level}]"
        return True


def _stderr_console(color: bool) -> Console:
    color_system: ColorSystem | None = "auto" if color else None
    return Console(color_system=color_system, stderr=True)


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Rich handler for stderr.

    ``debug_mode`` lowers the level to DEBUG and swaps the tagged one-line
    format for timestamps, logger names and clickable source paths. ``color``
    follows click-extra's ``--color/--no-color``.
    """
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=_stderr_console(color),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
        return handler

    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Keep the last ``capacity`` DEBUG records; dump them to ``path`` on trouble.

    "Trouble" is a record at ``flush_level`` or above, typically the warning
    the contract cache logs for an interface that fails validation. The file
    is only created on the first flush.
    """
    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(RECORDER_FORMAT))
    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )


def startup_diagnostics(
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_recorder: bool,
    logger_levels: dict[str, int],
) -> list[tuple[str, object]]:
    """Label/value pairs describing the process and its logging setup."""
    diagnostics: list[tuple[str, object]] = [
        ("Python", sys.version.split()[0]),
        ("Platform", f"{platform.system()} {platform.release()}"),
        ("PID", os.getpid()),
        ("CWD", Path.cwd()),
        ("Handlers", [type(h).__name__ for h in handlers]),
    ]
    if flight_recorder:
        diagnostics.append(("Flight recorder", f"path={log_path or '<none>'}"))
    overrides = {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()}
    diagnostics.append(("Per-logger overrides", overrides or "<none>"))
    return diagnostics


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    logger.info(
        "NULLGUARD %s - console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
    )
    for label, value in startup_diagnostics(
        handlers, log_path, flight_recorder, logger_levels
    ):
        logger.debug("%s: %s", label, value)
