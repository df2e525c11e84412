"""
Native Click implementation of the activate command.

Usage: bootunit activate [TARGET] [--unit NAME ...] [--reached EVENT ...]
"""

from __future__ import annotations

import click

from ...core.bootstrap import bootstrap
from ...core.container import resolve
from ...core.interfaces.launcher import IProcessLauncher
from ...core.interfaces.presenter import IPresenter
from ...services.activation import ActivationRunner, ActivationScheduler
from ..context import BootunitContext
from ..decorators import handle_bootunit_errors, require_units_file


@click.command("activate")
@click.argument("target", required=False)
@click.option("-u", "--unit", "unit_names", multiple=True, help="Activate this unit (repeatable)")
@click.option(
    "-r",
    "--reached",
    multiple=True,
    help="Treat this event as already reached (repeatable)",
)
@click.option("-j", "--jobs", type=click.IntRange(1, 64), help="Maximum concurrent units")
@click.option("-q", "--quiet", is_flag=True, default=None, help="Only report failed or blocked units")
@click.pass_obj
@require_units_file
@handle_bootunit_errors
def activate(
    ctx: BootunitContext,
    target: str | None,
    unit_names: tuple[str, ...],
    reached: tuple[str, ...],
    jobs: int | None,
    quiet: bool | None,
) -> None:
    """Activate the units wanted by a target.

    Runs each ready unit's command, writes its output to the unit's output
    file and prints the final state of every unit. Units ordered after an
    event that is neither a unit nor reached stay blocked.

    Exit status is 1 if any unit failed, 2 if units stayed blocked.

    \b
    Examples:
        bootunit activate                               # Configured target
        bootunit activate multi-user.target -r sound.target
        bootunit activate --unit get-device-info -r sound.target
    """
    if target and unit_names:
        raise click.UsageError("Give either a TARGET or --unit, not both")

    bootstrap(ctx.cwd)
    presenter: IPresenter = resolve(IPresenter)  # type: ignore[type-abstract]

    if ctx.config_error:
        presenter.print_warning(f"{ctx.config_error}; using defaults")

    activation_config = ctx.config.get("activation", {})
    all_reached = [*activation_config.get("reached", []), *reached]
    max_workers = jobs or activation_config.get("max_workers", 4)
    if quiet is None:
        quiet = bool(ctx.config.get("output", {}).get("quiet", False))

    store = ctx.load_store()
    runner = ActivationRunner(
        launcher=resolve(IProcessLauncher),  # type: ignore[type-abstract]
        unit_root=store.unit_root,
    )
    scheduler = ActivationScheduler(store, runner=runner, max_workers=max_workers)

    if unit_names:
        report = scheduler.activate_units(unit_names, reached=all_reached)
    else:
        report = scheduler.activate_target(
            target or activation_config.get("target", "multi-user.target"),
            reached=all_reached,
        )

    presenter.print_report(report, quiet=quiet)

    if report.exit_code != 0:
        raise SystemExit(report.exit_code)
