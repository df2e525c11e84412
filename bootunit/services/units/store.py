"""
Unit descriptor store.

Holds the closed set of units known to one process run, keyed by name.
Built once at startup (usually by the units file loader), sealed, and only
read afterwards.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from ...core.exceptions import (
    DuplicateUnitError,
    OutputConflictError,
    StoreSealedError,
    UnitNotFoundError,
)
from ...core.models.unit import UnitDescriptor


def _destination_key(path: Path) -> str:
    return os.path.normpath(os.path.abspath(path))


class UnitStore:
    """
    Registry of unit descriptors.

    Enforces:
    - unique unit names
    - exclusive output destinations, unless every unit sharing a path
      declares shared_output
    - no registration after seal()

    Usage:
        store = UnitStore.from_descriptors(units, unit_root=Path("/etc/units"))
        unit = store.get("get-device-info")
    """

    def __init__(self, unit_root: Path | None = None) -> None:
        """
        Initialize an empty store.

        Args:
            unit_root: Base directory for unit commands (defaults to cwd)
        """
        self._units: dict[str, UnitDescriptor] = {}
        self._destinations: dict[str, str] = {}
        self._sealed = False
        self.unit_root = Path(unit_root) if unit_root else Path.cwd()

    @classmethod
    def from_descriptors(
        cls,
        descriptors: Iterable[UnitDescriptor],
        unit_root: Path | None = None,
    ) -> UnitStore:
        """Register every descriptor, then seal the store."""
        store = cls(unit_root=unit_root)
        for descriptor in descriptors:
            store.register(descriptor)
        store.seal()
        return store

    def register(self, descriptor: UnitDescriptor) -> None:
        """
        Add a unit to the store.

        Raises:
            StoreSealedError: If the store has been sealed
            DuplicateUnitError: If a unit with the same name exists
            OutputConflictError: If the destination is already claimed
        """
        if self._sealed:
            raise StoreSealedError(
                "Unit store is sealed; units cannot be added after loading",
                unit_name=descriptor.name,
            )

        if descriptor.name in self._units:
            raise DuplicateUnitError(
                f"Unit {descriptor.name} is already registered",
                unit_name=descriptor.name,
            )

        dest = _destination_key(descriptor.resolve_output_destination(self.unit_root))
        owner = self._destinations.get(dest)
        if owner is not None:
            other = self._units[owner]
            if not (descriptor.shared_output and other.shared_output):
                raise OutputConflictError(
                    f"Units {owner} and {descriptor.name} write to the same output; "
                    "declare shared_output on both to allow it",
                    unit_name=descriptor.name,
                    destination=dest,
                    other_unit=owner,
                )
        else:
            self._destinations[dest] = descriptor.name

        self._units[descriptor.name] = descriptor

    def seal(self) -> None:
        """Close the store to further registration."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get(self, name: str) -> UnitDescriptor:
        """
        Look up a unit by name.

        Raises:
            UnitNotFoundError: If no unit has that name
        """
        try:
            return self._units[name]
        except KeyError:
            raise UnitNotFoundError(f"Unit {name} is not defined", unit_name=name) from None

    def names(self) -> list[str]:
        """Unit names in registration order."""
        return list(self._units)

    def wanted_by(self, event: str) -> list[UnitDescriptor]:
        """Units that start on the given event, in registration order."""
        return [u for u in self._units.values() if event in u.activation_triggers]

    def triggers(self) -> list[str]:
        """Every event some unit is wanted by, sorted."""
        events: set[str] = set()
        for unit in self._units.values():
            events.update(unit.activation_triggers)
        return sorted(events)

    def find_ordering_cycle(self) -> list[str] | None:
        """
        Find a cycle in the ordering constraints between known units.

        Names in ``ordering_after`` that are not units (events such as
        ``sound.target``) are ignored.

        Returns:
            The cycle as a list of names whose first and last entries are
            equal, or None if the ordering is acyclic.
        """
        visiting: list[str] = []
        on_path: set[str] = set()
        done: set[str] = set()

        def visit(name: str) -> list[str] | None:
            if name in on_path:
                return [*visiting[visiting.index(name) :], name]
            if name in done:
                return None
            visiting.append(name)
            on_path.add(name)
            for dep in sorted(self._units[name].ordering_after):
                if dep in self._units:
                    cycle = visit(dep)
                    if cycle:
                        return cycle
            visiting.pop()
            on_path.discard(name)
            done.add(name)
            return None

        for name in self._units:
            cycle = visit(name)
            if cycle:
                return cycle
        return None

    def __contains__(self, name: object) -> bool:
        return name in self._units

    def __iter__(self) -> Iterator[UnitDescriptor]:
        return iter(self._units.values())

    def __len__(self) -> int:
        return len(self._units)
