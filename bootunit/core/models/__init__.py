"""
Pydantic models for bootunit.

This package provides typed, validated models for all bootunit data structures.
"""

from .base import BootunitBaseModel, ImmutableModel

# Configuration models
from .config import (
    ActivationConfig,
    BootunitConfig,
    LoggingConfig,
    OutputConfig,
    UnitsConfig,
)

# Unit models
from .unit import (
    ActivationReport,
    ActivationResult,
    LaunchResult,
    OutputMode,
    RunPolicy,
    UnitDescriptor,
    UnitState,
)

__all__ = [
    "ActivationConfig",
    "ActivationReport",
    "ActivationResult",
    "BootunitBaseModel",
    "BootunitConfig",
    "ImmutableModel",
    "LaunchResult",
    "LoggingConfig",
    "OutputConfig",
    "OutputMode",
    "RunPolicy",
    "UnitDescriptor",
    "UnitState",
    "UnitsConfig",
]
