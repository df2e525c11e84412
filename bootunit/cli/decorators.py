"""
Click decorators for bootunit CLI commands.

Provides requirement decorators that validate preconditions before
command execution:
- require_units_file: Ensures the units file exists
- handle_bootunit_errors: Turns BootunitException into a ClickException
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

import click

from ..core.exceptions import BootunitException

if TYPE_CHECKING:
    from .context import BootunitContext

F = TypeVar("F", bound=Callable[..., Any])


def require_units_file(f: F) -> F:
    """Decorator to require an existing units file.

    Usage:
        @click.command()
        @click.pass_obj
        @require_units_file
        def list_units(ctx: BootunitContext):
            ...

    Note:
        This decorator should be applied AFTER @click.pass_obj so that
        the BootunitContext is available.
    """

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        ctx_maybe: Any = args[0] if args else kwargs.get("ctx")

        if ctx_maybe is None:
            raise click.ClickException(
                "Internal error: BootunitContext not available. "
                "Ensure @click.pass_obj is applied before @require_units_file."
            )
        ctx: BootunitContext = ctx_maybe

        if not ctx.units_file.exists():
            raise click.ClickException(
                f"Units file not found: {ctx.units_file}\n"
                "Run 'bootunit init' to create one, or pass --units-file."
            )

        return f(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def handle_bootunit_errors(f: F) -> F:
    """Decorator converting BootunitException into a ClickException.

    Keeps the exception's exit code so scripts can tell configuration
    errors apart from activation failures.
    """

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except BootunitException as e:
            error = click.ClickException(str(e))
            error.exit_code = e.exit_code
            raise error from e

    return wrapper  # type: ignore[return-value]
