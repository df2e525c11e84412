"""
Application bootstrap for bootunit.

Loads settings once and binds the configured logger into the service
container. Settings are read before the logger binding changes, so
reading a broken config file never needs the logger it is configuring.
"""

from __future__ import annotations

from pathlib import Path

from dependency_injector import providers

from .container import BootunitServices, get_container, reset_container
from .settings import BootunitSettings, load_settings

_settings: BootunitSettings | None = None


def bootstrap(start_dir: Path | None = None) -> BootunitServices:
    """
    Bootstrap the bootunit application.

    Repeated calls return the already configured container.

    Args:
        start_dir: Directory to load configuration from (defaults to cwd)
    """
    global _settings

    services = get_container()
    if _settings is not None:
        return services

    from ..services.logging import BootunitLogger

    settings = load_settings(start_dir=str(start_dir) if start_dir else None)
    services.logger.override(providers.ThreadSafeSingleton(BootunitLogger.from_config, settings.logging))
    _settings = settings
    return services


def reset() -> None:
    """Forget the bootstrapped settings and container (used between tests)."""
    global _settings
    reset_container()
    _settings = None
