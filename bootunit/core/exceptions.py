"""
Custom exception hierarchy for bootunit.

Every failure that crosses a module boundary is a typed exception carrying a
message, a context dict for diagnostics and an optional cause.
"""

from __future__ import annotations


class BootunitException(Exception):
    """
    Base exception for all bootunit errors.

    Attributes:
        message: Human-readable error description
        context: Additional debugging context (unit names, paths, etc.)
        exit_code: Suggested exit code for CLI (default: 1)
        recoverable: Whether retry/recovery may be possible
    """

    exit_code: int = 1
    recoverable: bool = False

    def __init__(
        self,
        message: str,
        *,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        if cause is not None:
            self.__cause__ = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class BootunitConfigError(BootunitException):
    """Base class for configuration-related errors."""

    pass


class ConfigFileError(BootunitConfigError):
    """
    Error reading or parsing a configuration file.

    Raised for TOML parsing errors, file not found, permission errors, etc.
    """

    def __init__(
        self,
        message: str,
        *,
        file_path: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if file_path:
            ctx["file_path"] = file_path
        super().__init__(message, context=ctx, cause=cause)


class ConfigValidationError(BootunitConfigError, ValueError):
    """Invalid or missing configuration value."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        value: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if key:
            ctx["key"] = key
        if value is not None:
            ctx["value"] = value
        super().__init__(message, context=ctx, cause=cause)


# =============================================================================
# Unit Definition Errors
# =============================================================================


class UnitDefinitionError(BootunitException):
    """Base class for errors in the declared set of units."""

    def __init__(
        self,
        message: str,
        *,
        unit_name: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if unit_name:
            ctx["unit"] = unit_name
        super().__init__(message, context=ctx, cause=cause)
        self.unit_name = unit_name


class DuplicateUnitError(UnitDefinitionError):
    """A unit with the same name is already registered."""

    pass


class UnitNotFoundError(UnitDefinitionError, KeyError):
    """No unit is registered under the requested name."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return UnitDefinitionError.__str__(self)


class OutputConflictError(UnitDefinitionError):
    """
    Two units write to the same output destination.

    Destinations are exclusive per unit unless every unit sharing the path
    declares shared_output.
    """

    def __init__(
        self,
        message: str,
        *,
        unit_name: str | None = None,
        destination: str | None = None,
        other_unit: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if destination:
            ctx["destination"] = destination
        if other_unit:
            ctx["other_unit"] = other_unit
        super().__init__(message, unit_name=unit_name, context=ctx, cause=cause)


class StoreSealedError(UnitDefinitionError):
    """Registration attempted after the unit store was sealed."""

    pass


class OrderingCycleError(UnitDefinitionError):
    """Units order after each other in a cycle and can never start."""

    def __init__(
        self,
        message: str,
        *,
        cycle: list[str] | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if cycle:
            ctx["cycle"] = " -> ".join(cycle)
        super().__init__(message, context=ctx, cause=cause)
        self.cycle = cycle or []


class UnitFileError(UnitDefinitionError):
    """
    Error reading, parsing or validating a units file.

    Raised for TOML syntax errors, unreadable files and invalid unit tables.
    """

    def __init__(
        self,
        message: str,
        *,
        file_path: str | None = None,
        unit_name: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if file_path:
            ctx["file_path"] = file_path
        super().__init__(message, unit_name=unit_name, context=ctx, cause=cause)


# =============================================================================
# Activation Errors
# =============================================================================


class OrderingUnsatisfied(BootunitException):
    """
    A unit's ordering prerequisites have not completed yet.

    Not a failure: the unit stays waiting and the caller retries later.
    """

    recoverable: bool = True

    def __init__(
        self,
        message: str,
        *,
        unit_name: str | None = None,
        missing: list[str] | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if unit_name:
            ctx["unit"] = unit_name
        if missing:
            ctx["missing"] = missing
        super().__init__(message, context=ctx, cause=cause)
        self.unit_name = unit_name
        self.missing = missing or []


class ActivationError(BootunitException):
    """Base class for errors while activating a single unit."""

    pass


class SpawnError(ActivationError):
    """
    The unit's command could not be started.

    Raised for missing executables, permission errors, unknown users and
    unparseable command strings.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        user: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = command
        if user:
            ctx["user"] = user
        super().__init__(message, context=ctx, cause=cause)


class NonZeroExitError(ActivationError):
    """The unit's command ran but exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int,
        command: str | None = None,
        stderr: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        ctx["returncode"] = returncode
        if command:
            ctx["command"] = command
        if stderr:
            ctx["stderr"] = stderr
        super().__init__(message, context=ctx, cause=cause)
        self.returncode = returncode


class OutputWriteError(ActivationError):
    """Captured output could not be persisted to the destination."""

    def __init__(
        self,
        message: str,
        *,
        destination: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or {}
        if destination:
            ctx["destination"] = destination
        super().__init__(message, context=ctx, cause=cause)


class ActivationFailure(BootunitException):
    """
    Terminal failure of one unit's activation.

    Wraps the specific ActivationError in ``cause`` so callers can tell a
    spawn failure from a non-zero exit or a write failure.
    """

    def __init__(self, name: str, cause: ActivationError) -> None:
        super().__init__(
            f"Unit {name} failed: {cause.message}",
            context={"unit": name, "kind": type(cause).__name__},
            cause=cause,
        )
        self.name = name
        self.cause = cause
