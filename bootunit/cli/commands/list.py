"""
Native Click implementation of the list command.

Usage: bootunit list [--target TARGET]
"""

from __future__ import annotations

import click

from ...core.bootstrap import bootstrap
from ...core.container import resolve
from ...core.interfaces.presenter import IPresenter
from ..context import BootunitContext
from ..decorators import handle_bootunit_errors, require_units_file


@click.command("list")
@click.option("-t", "--target", help="Only list units wanted by this target")
@click.pass_obj
@require_units_file
@handle_bootunit_errors
def list_units(ctx: BootunitContext, target: str | None) -> None:
    """List declared units.

    \b
    Examples:
        bootunit list
        bootunit list --target multi-user.target
    """
    bootstrap(ctx.cwd)
    presenter: IPresenter = resolve(IPresenter)  # type: ignore[type-abstract]

    store = ctx.load_store()
    units = store.wanted_by(target) if target else list(store)

    if not units:
        click.echo(f"No units wanted by {target}." if target else "No units declared.")
        return

    rows = [
        [
            unit.name,
            unit.run_policy.value,
            ",".join(sorted(unit.activation_triggers)) or "-",
            ",".join(sorted(unit.ordering_after)) or "-",
            unit.run_as_user or "-",
            str(unit.output_destination),
        ]
        for unit in units
    ]
    presenter.print_table(["UNIT", "TYPE", "WANTED BY", "AFTER", "USER", "OUTPUT"], rows)
