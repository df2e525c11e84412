"""
Configuration models.

Provides Pydantic models for bootunit configuration with validation.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import ConfigDict, Field, field_validator

from .base import BootunitBaseModel

# Type aliases
LogLevel = Literal["debug", "info", "warning", "error"]


class ConfigBaseModel(BootunitBaseModel):
    """Base model for config sections with relaxed strict mode for TOML loading."""

    model_config = ConfigDict(
        strict=False,  # Allow coercion from TOML types
        validate_assignment=True,
        extra="ignore",  # Ignore unknown fields in config files
        populate_by_name=True,
        revalidate_instances="never",
    )


class UnitsConfig(ConfigBaseModel):
    """Units file configuration section."""

    file: Annotated[str, Field(min_length=1)] = "units.toml"
    root: str | None = None  # Base directory for relative working directories

    @field_validator("root", mode="before")
    @classmethod
    def empty_root_is_none(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        return v


class ActivationConfig(ConfigBaseModel):
    """Activation configuration section."""

    target: Annotated[str, Field(min_length=1)] = "multi-user.target"
    reached: list[str] = Field(default_factory=list)
    max_workers: Annotated[int, Field(ge=1, le=64)] = 4

    @field_validator("reached", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: Any) -> list[str]:
        """Parse comma-separated string to list."""
        if isinstance(v, str):
            return [x.strip() for x in v.split(",") if x.strip()]
        return v if v else []


class OutputConfig(ConfigBaseModel):
    """Output configuration section."""

    quiet: bool = False


class LoggingConfig(ConfigBaseModel):
    """Logging configuration section."""

    level: LogLevel = "warning"
    console: bool = False
    file: bool = True


class BootunitConfig(ConfigBaseModel):
    """Complete bootunit configuration.

    This model represents the full configuration with all sections.
    It can be loaded from TOML files or constructed programmatically.
    """

    units: UnitsConfig = Field(default_factory=UnitsConfig)
    activation: ActivationConfig = Field(default_factory=ActivationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
