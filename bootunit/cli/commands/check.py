"""
Native Click implementation of the check command.

Usage: bootunit check
"""

import click

from ...core.bootstrap import bootstrap
from ...core.container import resolve
from ...core.exceptions import ConfigFileError, OrderingCycleError
from ...core.interfaces.presenter import IPresenter
from ..context import BootunitContext
from ..decorators import handle_bootunit_errors, require_units_file


@click.command("check")
@click.pass_obj
@require_units_file
@handle_bootunit_errors
def check(ctx: BootunitContext) -> None:
    """Validate the units file.

    Fails on an unusable config file, a units file that does not parse,
    invalid or duplicate units, conflicting output destinations and ordering
    cycles. Warns about prerequisites that are
    neither units nor configured reached events.
    """
    bootstrap(ctx.cwd)
    presenter: IPresenter = resolve(IPresenter)  # type: ignore[type-abstract]

    if ctx.config_error:
        raise ConfigFileError(ctx.config_error, file_path=ctx.config.get("_config_file"))

    store = ctx.load_store()

    cycle = store.find_ordering_cycle()
    if cycle:
        raise OrderingCycleError("Units are ordered after each other in a cycle", cycle=cycle)

    reached = set(ctx.config.get("activation", {}).get("reached", []))
    for unit in store:
        for dep in sorted(unit.ordering_after):
            if dep not in store and dep not in reached:
                presenter.print_warning(
                    f"{unit.name} is ordered after {dep}, which is not a unit; "
                    f"activate with --reached {dep} once it is up"
                )

    click.echo(f"{len(store)} unit(s) OK in {ctx.units_file}")
