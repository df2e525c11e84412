"""
Native Click implementation of the show command.

Usage: bootunit show <unit>
"""

import click

from ...core.bootstrap import bootstrap
from ...core.container import resolve
from ...core.interfaces.presenter import IPresenter
from ..context import BootunitContext
from ..decorators import handle_bootunit_errors, require_units_file


@click.command("show")
@click.argument("name")
@click.pass_obj
@require_units_file
@handle_bootunit_errors
def show(ctx: BootunitContext, name: str) -> None:
    """Show the full declaration of a unit.

    \b
    Examples:
        bootunit show get-device-info
    """
    bootstrap(ctx.cwd)
    presenter: IPresenter = resolve(IPresenter)  # type: ignore[type-abstract]

    store = ctx.load_store()
    presenter.print_unit(store.get(name))
