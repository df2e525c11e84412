"""
Core infrastructure for bootunit.

This module provides:
- BootunitServices: dependency-injector container with default bindings
- Application bootstrap for initialization
- Interface definitions for pluggable services
- Custom exception hierarchy
"""

from .bootstrap import bootstrap, reset
from .container import BootunitServices, get_container, resolve
from .exceptions import (
    ActivationError,
    ActivationFailure,
    BootunitConfigError,
    BootunitException,
    ConfigFileError,
    ConfigValidationError,
    DuplicateUnitError,
    NonZeroExitError,
    OrderingCycleError,
    OrderingUnsatisfied,
    OutputConflictError,
    OutputWriteError,
    SpawnError,
    StoreSealedError,
    UnitDefinitionError,
    UnitFileError,
    UnitNotFoundError,
)

__all__ = [
    "ActivationError",
    "ActivationFailure",
    "BootunitConfigError",
    "BootunitException",
    "BootunitServices",
    "ConfigFileError",
    "ConfigValidationError",
    "DuplicateUnitError",
    "NonZeroExitError",
    "OrderingCycleError",
    "OrderingUnsatisfied",
    "OutputConflictError",
    "OutputWriteError",
    "SpawnError",
    "StoreSealedError",
    "UnitDefinitionError",
    "UnitFileError",
    "UnitNotFoundError",
    "bootstrap",
    "get_container",
    "reset",
    "resolve",
]
