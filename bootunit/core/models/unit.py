"""
Unit domain models.

Provides the immutable unit descriptor loaded from a units file, the
per-unit activation state machine and the activation result records.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import ConfigDict, Field, field_validator, model_validator

from .base import ImmutableModel

if TYPE_CHECKING:
    from ..exceptions import BootunitException

UNIT_NAME_PATTERN = r"^[A-Za-z0-9@_.:\-]+$"


class RunPolicy(str, Enum):
    """How often a unit may execute within one runner lifetime."""

    RUN_ONCE = "oneshot"
    RUN_ALWAYS = "always"


class OutputMode(str, Enum):
    """How captured output is persisted to the destination."""

    OVERWRITE = "overwrite"
    APPEND = "append"


class UnitState(str, Enum):
    """Activation state of a unit.

    PENDING -> WAITING -> RUNNING -> COMPLETED | FAILED
    """

    PENDING = "pending"
    WAITING = "waiting"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (UnitState.COMPLETED, UnitState.FAILED)


class UnitDescriptor(ImmutableModel):
    """Declarative description of a single unit.

    Field aliases match the keys of a ``[units.<name>]`` table in a units
    file, so the same model validates both TOML data and keyword arguments.
    """

    model_config = ConfigDict(
        frozen=True,
        strict=False,  # Allow coercion from TOML types (list -> frozenset, str -> Path)
        extra="forbid",
        populate_by_name=True,
        revalidate_instances="never",
    )

    name: Annotated[str, Field(min_length=1, max_length=256, pattern=UNIT_NAME_PATTERN)]
    description: str = ""
    run_policy: RunPolicy = Field(default=RunPolicy.RUN_ONCE, alias="type")
    activation_triggers: frozenset[str] = Field(default_factory=frozenset, alias="wanted_by")
    ordering_after: frozenset[str] = Field(default_factory=frozenset, alias="after")
    run_as_user: str | None = Field(default=None, alias="user")
    command: Annotated[str, Field(min_length=1)]
    output_destination: Path = Field(alias="output")
    working_directory: Path | None = None
    output_mode: OutputMode = OutputMode.OVERWRITE
    shared_output: bool = False
    environment: tuple[tuple[str, str], ...] = ()

    @field_validator("activation_triggers", "ordering_after", mode="before")
    @classmethod
    def parse_name_set(cls, v: Any) -> Any:
        """Accept a single name or a whitespace-separated string."""
        if isinstance(v, str):
            return frozenset(v.split())
        return v

    @field_validator("environment", mode="before")
    @classmethod
    def freeze_environment(cls, v: Any) -> Any:
        """Store a ``{NAME = value}`` table as sorted (name, value) pairs."""
        if isinstance(v, Mapping):
            return tuple(sorted(v.items()))
        return v

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("command must not be blank")
        return v.strip()

    @field_validator("run_as_user", mode="before")
    @classmethod
    def normalize_user(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_ordering(self) -> UnitDescriptor:
        """A unit cannot wait on itself."""
        if self.name in self.ordering_after:
            raise ValueError(f"unit {self.name} cannot be ordered after itself")
        return self

    @property
    def is_run_once(self) -> bool:
        return self.run_policy is RunPolicy.RUN_ONCE

    def resolve_working_directory(self, unit_root: Path) -> Path:
        """Resolve where the command runs.

        Relative working directories (and the default of none) are taken
        relative to the unit root, which is where relative script paths in
        ``command`` are looked up.
        """
        if self.working_directory is None:
            return unit_root
        if self.working_directory.is_absolute():
            return self.working_directory
        return unit_root / self.working_directory

    def resolve_output_destination(self, unit_root: Path) -> Path:
        """Resolve the output file. Relative destinations live under the unit root."""
        destination = self.output_destination.expanduser()
        if destination.is_absolute():
            return destination
        return unit_root / destination


class LaunchResult(ImmutableModel):
    """Result of running one command to completion."""

    exit_code: int
    stdout: bytes
    stderr: bytes = b""
    duration: Annotated[float, Field(ge=0)]

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class ActivationResult:
    """Outcome of one ``activate`` call for a unit.

    ``error`` holds the ActivationFailure for failed units and the
    OrderingUnsatisfied notice for deferred ones.
    """

    name: str
    state: UnitState
    exit_code: int | None = None
    duration: float = 0.0
    bytes_written: int = 0
    waiting_on: tuple[str, ...] = ()
    error: BootunitException | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is UnitState.COMPLETED

    @property
    def failed(self) -> bool:
        return self.state is UnitState.FAILED

    @property
    def deferred(self) -> bool:
        return self.state is UnitState.WAITING


@dataclass
class ActivationReport:
    """Aggregated outcome of activating a set of units."""

    target: str | None
    results: dict[str, ActivationResult] = field(default_factory=dict)

    @property
    def completed(self) -> list[str]:
        return [name for name, r in self.results.items() if r.succeeded]

    @property
    def failed(self) -> list[str]:
        return [name for name, r in self.results.items() if r.failed]

    @property
    def blocked(self) -> list[str]:
        return [name for name, r in self.results.items() if r.deferred]

    @property
    def succeeded(self) -> bool:
        return not self.failed and not self.blocked

    @property
    def exit_code(self) -> int:
        """CLI exit code: 1 when any unit failed, 2 when units stayed blocked."""
        if self.failed:
            return 1
        if self.blocked:
            return 2
        return 0
