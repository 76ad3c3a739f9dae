"""NULLGUARD CLI entry point.

Defines the top-level ``nullguard`` command (via Click-Extra), configures
logging for every subcommand and registers the subcommands.

Currently available commands
- ``nullguard check``: validate null-safe interfaces ahead of run time.

Examples
    $ nullguard --version
    $ nullguard check myapp.interfaces:Catalog myapp.interfaces:Clock
    $ NULLGUARD_CHECK_TARGETS="myapp.interfaces:Catalog" nullguard -v check
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from nullguard import __version__, config
from nullguard.logging import config_console_handler, config_flight_recorder, log_startup

from .check import check
from .helpers import parse_log_level

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """NULLGUARD command-line interface.

    NULLGUARD enforces nullability contracts on interfaces at run time. This tool
    validates interface declarations ahead of time so that definition errors show
    up in CI rather than on the first guarded call.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help="Increase the default WARNING verbosity by one level per repetition.",
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help="Decrease the default WARNING verbosity by one level per repetition.",
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (timestamps, logger names and source paths).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File the flight recorder writes to.",
    default=Path(user_log_dir("nullguard", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar=config.LOG_PATH_ENV,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar=config.FLIGHT_RECORDER_CAPACITY_ENV,
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the last N log records at DEBUG granularity and write them to "
        "--log-path when a WARNING/ERROR occurs (or on exit with --force-flush)."
    ),
    default=True,
    envvar=config.FLIGHT_RECORDER_ENV,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Write the flight recorder buffer to --log-path on exit.",
    default=False,
    show_default=True,
    envvar=config.FORCE_FLUSH_ENV,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set the MINIMUM LEVEL of specific LOGGERS (NAME=LEVEL). Repeatable, or "
        f"a comma/space list in {config.LOGGER_LEVELS_ENV}."
    ),
    envvar=config.LOGGER_LEVELS_ENV,
    show_envvar=True,
)
@clickx.pass_context
def nullguard(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """NULLGUARD command-line interface."""

    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    handlers: list[Handler] = [
        config_console_handler(
            level=level, debug_mode=debug, color=ctx.color is not False
        )
    ]
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )

    # root captures everything; handlers filter
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path if flight_recorder else None,
        flight_recorder=flight_recorder,
        logger_levels=logger_levels,
    )

    ctx.call_on_close(logging.shutdown)


nullguard.add_command(check)
