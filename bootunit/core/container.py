"""
Service container for bootunit.

Every interface has a default binding, so library code can resolve
services without calling bootstrap() first. bootstrap() replaces the
logger with one built from configuration; tests override single providers.

Usage:
    services = get_container()
    services.launcher.override(providers.Object(fake_launcher))
    launcher = resolve(IProcessLauncher)
"""

from __future__ import annotations

from typing import TypeVar

from dependency_injector import containers, providers

from .interfaces.launcher import IProcessLauncher
from .interfaces.logger import ILogger
from .interfaces.presenter import IPresenter

T = TypeVar("T")


def _null_logger() -> ILogger:
    from ..services.logging import NullLogger

    return NullLogger()


def _console_presenter() -> IPresenter:
    from ..presenters.console import ConsolePresenter

    return ConsolePresenter()


def _subprocess_launcher() -> IProcessLauncher:
    from ..services.activation.launcher import SubprocessLauncher

    return SubprocessLauncher()


class BootunitServices(containers.DeclarativeContainer):
    """Default bindings for the three services bootunit resolves."""

    logger = providers.ThreadSafeSingleton(_null_logger)
    presenter = providers.ThreadSafeSingleton(_console_presenter)
    launcher = providers.Factory(_subprocess_launcher)


_BINDINGS: dict[type, str] = {
    ILogger: "logger",
    IPresenter: "presenter",
    IProcessLauncher: "launcher",
}

_services: BootunitServices | None = None


def get_container() -> BootunitServices:
    """Get the process-wide container, creating it on first use."""
    global _services
    if _services is None:
        _services = BootunitServices()
    return _services


def reset_container() -> None:
    """Drop the container and every override applied to it."""
    global _services
    _services = None


def provider_for(interface: type) -> providers.Provider:
    try:
        name = _BINDINGS[interface]
    except KeyError:
        raise KeyError(f"No service bound to {interface.__name__}") from None
    return getattr(get_container(), name)


def resolve(interface: type[T]) -> T:
    """Resolve the service bound to an interface."""
    return provider_for(interface)()
