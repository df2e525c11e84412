"""
Activation runner.

Activates one unit at a time against a set of already-completed names and
owns the per-unit state machine:

    PENDING -> WAITING (ordering unsatisfied) -> RUNNING -> COMPLETED | FAILED

One-shot units get exactly one execution attempt per runner lifetime;
failures are returned as ActivationFailure results, never raised.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Collection
from pathlib import Path

from ...core.container import resolve
from ...core.exceptions import (
    ActivationError,
    ActivationFailure,
    NonZeroExitError,
    OrderingUnsatisfied,
)
from ...core.interfaces.launcher import IProcessLauncher
from ...core.interfaces.logger import ILogger
from ...core.models.unit import ActivationResult, LaunchResult, UnitDescriptor, UnitState
from .output import OutputSink

STDERR_TAIL_CHARS = 2000


class ActivationRunner:
    """
    Runs unit commands and records their final status.

    Safe to call from several threads for different units; a unit that is
    already running is never started a second time.

    Usage:
        runner = ActivationRunner(unit_root=store.unit_root)
        result = runner.activate(store.get("get-device-info"), completed={"sound.target"})
        if result.failed:
            print(result.error)
    """

    def __init__(
        self,
        launcher: IProcessLauncher | None = None,
        sink: OutputSink | None = None,
        unit_root: Path | None = None,
        logger: ILogger | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            launcher: Process launcher (resolved from the container if omitted)
            sink: Output sink shared by all units of this runner
            unit_root: Base directory for unit commands (defaults to cwd)
            logger: Logger for internal diagnostics
        """
        self._launcher = launcher
        self._sink = sink or OutputSink()
        self._unit_root = Path(unit_root) if unit_root else Path.cwd()
        self._logger = logger
        self._lock = threading.Lock()
        self._states: dict[str, UnitState] = {}
        self._results: dict[str, ActivationResult] = {}

    @property
    def logger(self) -> ILogger:
        if self._logger is None:
            self._logger = resolve(ILogger)  # type: ignore[type-abstract]
        return self._logger

    @property
    def launcher(self) -> IProcessLauncher:
        if self._launcher is None:
            self._launcher = resolve(IProcessLauncher)  # type: ignore[type-abstract]
        return self._launcher

    # -------------------------------------------------------------------------
    # State queries
    # -------------------------------------------------------------------------

    def state(self, name: str) -> UnitState:
        with self._lock:
            return self._states.get(name, UnitState.PENDING)

    def result(self, name: str) -> ActivationResult | None:
        with self._lock:
            return self._results.get(name)

    def results(self) -> dict[str, ActivationResult]:
        with self._lock:
            return dict(self._results)

    def completed(self) -> set[str]:
        """Names of units that reached COMPLETED."""
        with self._lock:
            return {n for n, s in self._states.items() if s is UnitState.COMPLETED}

    def reset(self, name: str) -> bool:
        """
        Clear a unit's terminal or waiting state so it can be activated again.

        This is the operator's re-issue; the runner never retries on its own.

        Returns:
            False if the unit is currently running (nothing is reset)
        """
        with self._lock:
            if self._states.get(name) is UnitState.RUNNING:
                return False
            self._states.pop(name, None)
            self._results.pop(name, None)
        self.logger.info("Unit %s reset", name)
        return True

    # -------------------------------------------------------------------------
    # Activation
    # -------------------------------------------------------------------------

    def activate(
        self,
        descriptor: UnitDescriptor,
        completed: Collection[str],
    ) -> ActivationResult:
        """
        Activate a unit if its ordering constraints are satisfied.

        Args:
            descriptor: Unit to activate
            completed: Names of units and events that have already completed

        Returns:
            ActivationResult. WAITING results carry an OrderingUnsatisfied
            notice and should be retried later; FAILED results carry an
            ActivationFailure.
        """
        name = descriptor.name

        with self._lock:
            state = self._states.get(name, UnitState.PENDING)

            if state is UnitState.RUNNING:
                self.logger.debug("Unit %s is already running", name)
                return self._results[name]

            if state.is_terminal and descriptor.is_run_once:
                self.logger.debug("Unit %s is one-shot and already %s", name, state.value)
                return self._results[name]

            done = set(completed)
            missing = sorted(dep for dep in descriptor.ordering_after if dep not in done)
            if missing:
                notice = OrderingUnsatisfied(
                    f"Unit {name} is waiting on {', '.join(missing)}",
                    unit_name=name,
                    missing=missing,
                )
                result = ActivationResult(
                    name=name,
                    state=UnitState.WAITING,
                    waiting_on=tuple(missing),
                    error=notice,
                )
                self._states[name] = UnitState.WAITING
                self._results[name] = result
                self.logger.debug("%s", notice)
                return result

            self._states[name] = UnitState.RUNNING
            self._results[name] = ActivationResult(name=name, state=UnitState.RUNNING)

        self.logger.info("Starting unit %s: %s", name, descriptor.command)
        try:
            result = self._execute(descriptor)
        except Exception as e:
            failure = ActivationFailure(name, ActivationError(f"Unexpected error: {e!r}", cause=e))
            with self._lock:
                self._states[name] = UnitState.FAILED
                self._results[name] = ActivationResult(name=name, state=UnitState.FAILED, error=failure)
            raise

        with self._lock:
            self._states[name] = result.state
            self._results[name] = result
        return result

    def _execute(self, descriptor: UnitDescriptor) -> ActivationResult:
        """Spawn, wait, capture and write for one unit."""
        name = descriptor.name
        destination = descriptor.resolve_output_destination(self._unit_root)
        launch: LaunchResult | None = None
        start = time.monotonic()

        try:
            self._sink.check_writable(destination)
            launch = self.launcher.run(
                descriptor.command,
                user=descriptor.run_as_user,
                cwd=descriptor.resolve_working_directory(self._unit_root),
                env=dict(descriptor.environment) or None,
            )
            if not launch.succeeded:
                stderr = launch.stderr.decode("utf-8", errors="replace")[-STDERR_TAIL_CHARS:]
                raise NonZeroExitError(
                    f"Command exited with status {launch.exit_code}",
                    returncode=launch.exit_code,
                    command=descriptor.command,
                    stderr=stderr.strip() or None,
                )
            written = self._sink.write(destination, launch.stdout, descriptor.output_mode)
        except ActivationError as e:
            failure = ActivationFailure(name, e)
            self.logger.error("%s", failure)
            return ActivationResult(
                name=name,
                state=UnitState.FAILED,
                exit_code=launch.exit_code if launch else None,
                duration=launch.duration if launch else time.monotonic() - start,
                error=failure,
            )

        if launch.stderr:
            self.logger.debug(
                "Unit %s stderr: %s", name, launch.stderr.decode("utf-8", errors="replace").strip()
            )
        self.logger.info(
            "Unit %s completed in %.2fs (%d bytes -> %s)", name, launch.duration, written, destination
        )
        return ActivationResult(
            name=name,
            state=UnitState.COMPLETED,
            exit_code=launch.exit_code,
            duration=launch.duration,
            bytes_written=written,
        )
