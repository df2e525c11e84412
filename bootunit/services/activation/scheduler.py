"""
Activation scheduler.

Drives an ActivationRunner over a set of units: ready units (all ordering
prerequisites completed or reached) run concurrently on a thread pool, and
readiness is re-evaluated each time a unit finishes. Units that can never
become ready are left WAITING and reported as blocked.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from ...core.container import resolve
from ...core.interfaces.logger import ILogger
from ...core.models.unit import ActivationReport, ActivationResult, UnitDescriptor, UnitState
from ..units.store import UnitStore
from .runner import ActivationRunner


class ActivationScheduler:
    """
    Activates every unit wanted by a target, or an explicit list of units.

    Failures are aggregated into the returned ActivationReport; one unit's
    failure never stops independent units.

    Usage:
        scheduler = ActivationScheduler(store, max_workers=4)
        report = scheduler.activate_target("multi-user.target", reached={"sound.target"})
    """

    def __init__(
        self,
        store: UnitStore,
        runner: ActivationRunner | None = None,
        max_workers: int = 4,
        logger: ILogger | None = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._store = store
        self._runner = runner or ActivationRunner(unit_root=store.unit_root)
        self._max_workers = max_workers
        self._logger = logger

    @property
    def logger(self) -> ILogger:
        if self._logger is None:
            self._logger = resolve(ILogger)  # type: ignore[type-abstract]
        return self._logger

    @property
    def runner(self) -> ActivationRunner:
        return self._runner

    def activate_target(self, target: str, reached: Iterable[str] = ()) -> ActivationReport:
        """
        Activate the units wanted by ``target``.

        Args:
            target: Event name, e.g. "multi-user.target"
            reached: Events already reached (e.g. "sound.target")
        """
        units = self._store.wanted_by(target)
        self.logger.info("Target %s wants %d unit(s)", target, len(units))
        return self._activate(units, set(reached), target)

    def activate_units(self, names: Iterable[str], reached: Iterable[str] = ()) -> ActivationReport:
        """
        Activate the named units.

        Raises:
            UnitNotFoundError: If a name is not a known unit
        """
        units: list[UnitDescriptor] = []
        for name in names:
            unit = self._store.get(name)
            if unit not in units:
                units.append(unit)
        return self._activate(units, set(reached), None)

    def _activate(
        self,
        units: list[UnitDescriptor],
        reached: set[str],
        target: str | None,
    ) -> ActivationReport:
        report = ActivationReport(target=target)
        pending = list(units)
        in_flight: dict[Future[ActivationResult], str] = {}

        with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="bootunit") as pool:
            while True:
                done = reached | self._runner.completed()
                still_pending = []
                for unit in pending:
                    if unit.ordering_after <= done:
                        self.logger.debug("Unit %s is ready", unit.name)
                        in_flight[pool.submit(self._runner.activate, unit, frozenset(done))] = unit.name
                    else:
                        # Records WAITING in the runner without spawning anything
                        self._runner.activate(unit, done)
                        still_pending.append(unit)
                pending = still_pending

                if not in_flight:
                    break

                finished, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                for future in finished:
                    name = in_flight.pop(future)
                    report.results[name] = self._collect(name, future)

        for unit in pending:
            result = self._runner.result(unit.name) or ActivationResult(
                name=unit.name, state=UnitState.WAITING
            )
            self.logger.warning(
                "Unit %s never became ready; waiting on %s",
                unit.name,
                ", ".join(result.waiting_on) or "unknown prerequisites",
            )
            report.results[unit.name] = result

        self.logger.info(
            "Activation finished: %d completed, %d failed, %d blocked",
            len(report.completed),
            len(report.failed),
            len(report.blocked),
        )
        return report

    def _collect(self, name: str, future: Future[ActivationResult]) -> ActivationResult:
        try:
            return future.result()
        except Exception as e:
            self.logger.error("Unit %s raised unexpectedly: %s", name, e)
            return self._runner.result(name) or ActivationResult(name=name, state=UnitState.FAILED)
