"""
Click-based CLI for bootunit.

This module provides the main Click command group and serves as the
entry point for the bootunit CLI.

Usage:
    from bootunit.cli import cli
    cli()  # Invokes the CLI
"""

from __future__ import annotations

from pathlib import Path

import click

from .context import BootunitContext

# Version is loaded from package metadata
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("bootunit")
except PackageNotFoundError:
    from .. import __version__


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="bootunit")
@click.option(
    "-f",
    "--units-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Units file to use instead of the configured one.",
)
@click.pass_context
def cli(ctx: click.Context, units_file: Path | None) -> None:
    """bootunit - declarative one-shot startup units

    Declares units in a TOML file and activates them once their ordering
    constraints are met, writing each command's output to a log file.

    \b
    Quick Start:
        bootunit init              Create .bootunit/ and an example units.toml
        bootunit check             Validate the units file
        bootunit activate          Activate the configured target

    \b
    Information:
        bootunit list              List declared units
        bootunit show <unit>       Show one unit

    \b
    Configuration:
        bootunit config            View or set configuration
    """
    ctx.ensure_object(dict)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)
    else:
        ctx.obj = BootunitContext.create(units_file=units_file)


def register_commands() -> None:
    """Register all CLI commands with the main group."""
    from .commands import COMMANDS

    for cmd in COMMANDS:
        cli.add_command(cmd)


# Register commands at module load time
register_commands()


__all__ = [
    "BootunitContext",
    "__version__",
    "cli",
    "register_commands",
]
