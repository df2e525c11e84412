"""
Native Click implementation of the config command.

Usage: bootunit config [list|get|set] [key] [value]
"""

import click

from ...config import config_get, config_list, config_set
from ...core.exceptions import BootunitConfigError
from ..context import BootunitContext


@click.group("config", invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context) -> None:
    """View or set configuration.

    Config is stored in .bootunit/config.toml

    \b
    Examples:

        bootunit config list                        # List all options

        bootunit config get activation.max_workers  # Get a value

        bootunit config set activation.reached sound.target
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@config.command("list")
def config_list_cmd() -> None:
    """List all config options."""
    keys = config_list()
    click.echo("Available config options:")
    click.echo("")

    for key, info in keys.items():
        click.echo(f"  {key}")
        click.echo(f"    {info['description']}")
        click.echo(f"    Default: {info['default']}")
        click.echo("")


@config.command("get")
@click.argument("key")
@click.pass_obj
def config_get_cmd(ctx: BootunitContext, key: str) -> None:
    """Get a config value.

    Arguments:

        KEY    The config key to get (e.g. activation.target)
    """
    value = config_get(key, start_dir=str(ctx.cwd))
    if value is None:
        click.echo(f"{key}: (not set)")
    else:
        click.echo(f"{key}: {value}")


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def config_set_cmd(ctx: BootunitContext, key: str, value: str) -> None:
    """Set a config value.

    Arguments:

        KEY    The config key to set

        VALUE  The value to set
    """
    try:
        config_path, typed_value = config_set(key, value, start_dir=str(ctx.cwd))
    except BootunitConfigError as e:
        raise click.ClickException(e.message) from e
    click.echo(f"Set {key} = {typed_value}")
    click.echo(f"Saved to {config_path}")
