"""``nullguard check``: validate null-safe interfaces ahead of time.

Imports each ``package.module:Interface`` target, builds its guard class and
reports the outcome per target. Typical use is a CI step that catches
definition errors (conflicting markers, markers on ``None``-returning members,
non-interfaces) before the first guard is created at run time.

Exit status is 0 when every target is valid, 1 when any target fails and 2
when no target is given.
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.table import Table

from nullguard import config
from nullguard.contracts import InterfaceContract, ParameterKind
from nullguard.errors import DefinitionError
from nullguard.guard import get_contract, prepare

from .helpers import error, success, warn

logger = logging.getLogger(__name__)

NO_TARGETS_MSG = (
    "No targets given. Pass package.module:Interface arguments or set "
    f"{config.CHECK_TARGETS_ENV}."
)


def _nullability(allows_none: bool) -> str:
    return "can be null" if allows_none else "never null"


def contract_rows(contract: InterfaceContract) -> list[tuple[str, str, str]]:
    """Flatten a contract into ``(member, position, nullability)`` rows."""
    rows: list[tuple[str, str, str]] = []
    for prop in contract.properties:
        if prop.readable:
            rows.append((prop.name, "getter", _nullability(prop.getter_allows_none)))
        if prop.writable:
            rows.append((prop.name, "setter", _nullability(prop.setter_allows_none)))
    for method in contract.methods:
        for param in method.parameters:
            position = (
                "output" if param.kind is ParameterKind.OUTPUT else "argument"
            )
            rows.append(
                (method.name, f"{position} {param.label}", _nullability(param.allows_none))
            )
        if method.returns_value:
            rows.append(
                (method.name, "return", _nullability(method.return_allows_none))
            )
    if (indexer := contract.indexer) is not None:
        for key in indexer.keys:
            rows.append(("[]", f"key {key.label}", _nullability(key.allows_none)))
        if indexer.readable:
            rows.append(("[]", "getter", _nullability(indexer.getter_allows_none)))
        if indexer.writable:
            rows.append(("[]", "setter", _nullability(indexer.setter_allows_none)))
    return rows


def _print_contract(contract: InterfaceContract) -> None:
    table = Table(title=contract.name)
    table.add_column("Member")
    table.add_column("Position")
    table.add_column("Nullability")
    for row in contract_rows(contract):
        table.add_row(*row)
    Console(soft_wrap=True).print(table)


def _check_target(target: str, show_contract: bool) -> bool:
    try:
        interface = config.load_target(target)
        prepare(interface)  # type: ignore[arg-type]
    except (config.TargetImportError, DefinitionError) as e:
        logger.debug("Check of %s failed", target, exc_info=True)
        error(f"{target}: {e}")
        return False
    contract = get_contract(interface)  # type: ignore[arg-type]
    success(f"{target}: {contract.member_count} members guarded")
    if show_contract:
        _print_contract(contract)
    return True


@click.command()
@click.argument("targets", nargs=-1)
@click.option(
    "--show-contract/--no-show-contract",
    default=False,
    help="Print the resolved contract of every valid target to stdout.",
)
@click.pass_context
def check(ctx: click.Context, targets: tuple[str, ...], show_contract: bool) -> None:
    """Validate null-safe interfaces given as package.module:Interface."""
    targets = targets or tuple(config.get_check_targets())
    if not targets:
        warn(NO_TARGETS_MSG)
        ctx.exit(2)

    failures = [t for t in targets if not _check_target(t, show_contract)]
    if failures:
        logger.info("%d of %d targets failed", len(failures), len(targets))
        ctx.exit(1)
