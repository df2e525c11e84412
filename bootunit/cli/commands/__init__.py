"""
Click command implementations for bootunit CLI.

Each module corresponds to a bootunit command (e.g., activate.py
implements 'bootunit activate'). Commands are registered with the main
CLI group via register_commands() in bootunit.cli.
"""

from .activate import activate
from .check import check
from .config import config
from .init import init
from .list import list_units
from .show import show

COMMANDS = [
    activate,
    check,
    config,
    init,
    list_units,
    show,
]

__all__ = [
    "COMMANDS",
    "activate",
    "check",
    "config",
    "init",
    "list_units",
    "show",
]
