"""
Native Click implementation of the init command.

Usage: bootunit init
"""

import click

from ..context import BootunitContext

# Default config template with comments
DEFAULT_CONFIG_TEMPLATE = """\
# bootunit configuration file

[units]
# Units file, relative to the directory holding .bootunit/
file = "units.toml"
# Base directory for unit commands (defaults to the units file's directory)
# root = "/opt/device"

[activation]
# Target activated when `bootunit activate` is given no target
target = "multi-user.target"
# Events treated as already reached
reached = []
# Maximum number of units activated concurrently
max_workers = 4

[output]
# Only print failed or blocked units after activation
quiet = false

[logging]
# Log level (debug, info, warning, error)
level = "warning"
# Output debug logs to stderr
console = false
# Output debug logs to ~/.bootunit/bootunit.log
file = true
"""

# Example units file: collect device information once the system is up
DEFAULT_UNITS_TEMPLATE = """\
# bootunit units file
#
# Each [units.<name>] table declares one unit. Relative paths in `command`
# are resolved against this file's directory unless `working_directory`
# or units.root says otherwise.

[units.get-device-info]
description = "Get device information on startup"
wanted_by = ["multi-user.target"]
after = ["sound.target"]
user = "root"
type = "oneshot"
command = "bash ./get-device-info.sh"
output = "/output/logs/device-info.txt"
"""


@click.command("init")
@click.option(
    "--no-units",
    is_flag=True,
    default=False,
    help="Do not create an example units file.",
)
@click.pass_obj
def init(ctx: BootunitContext, no_units: bool) -> None:
    """Initialize bootunit in current directory.

    Creates a .bootunit directory with a config.toml holding default
    settings, and an example units.toml unless one already exists.

    \b
    Examples:

        bootunit init             # Config plus example units file

        bootunit init --no-units  # Config only
    """
    cwd = ctx.cwd

    config_dir = cwd / ".bootunit"
    if config_dir.exists():
        click.echo(f".bootunit directory already exists at {config_dir}")
        return

    config_dir.mkdir()
    click.echo(f"Created {config_dir}")

    config_path = config_dir / "config.toml"
    config_path.write_text(DEFAULT_CONFIG_TEMPLATE)
    click.echo(f"Created {config_path}")

    if no_units:
        click.echo("Done.")
        return

    units_path = cwd / "units.toml"
    if units_path.exists():
        click.echo(f"{units_path} already exists. Done.")
        return

    units_path.write_text(DEFAULT_UNITS_TEMPLATE)
    click.echo(f"Created {units_path}")
    click.echo("Done.")
