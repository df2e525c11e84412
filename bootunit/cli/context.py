"""
Click context extension for bootunit CLI.

Provides BootunitContext dataclass that holds bootunit-specific data
passed through the Click command chain via ctx.obj.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..core.settings import find_config_file

if TYPE_CHECKING:
    from ..services.units.store import UnitStore


@dataclass
class BootunitContext:
    """Extended context passed through Click command chain.

    Created once at CLI startup and passed to commands via Click's
    ctx.obj mechanism.

    Attributes:
        project_dir: Directory holding .bootunit/ (cwd if none was found)
        cwd: Current working directory
        config: Loaded configuration dictionary
        units_override: Units file given on the command line, if any
    """

    project_dir: Path
    cwd: Path
    config: dict[str, Any] = field(default_factory=dict)
    units_override: Path | None = None

    @classmethod
    def create(cls, cwd: Path | None = None, units_file: Path | None = None) -> BootunitContext:
        """Create a BootunitContext for the current environment.

        Args:
            cwd: Working directory override (defaults to Path.cwd())
            units_file: Units file override (from --units-file)

        Returns:
            Configured BootunitContext instance
        """
        if cwd is None:
            cwd = Path.cwd()

        project_dir = cwd
        config_file = find_config_file(str(cwd))
        if config_file is not None:
            # .bootunit/config.toml -> project dir is two levels up; pyproject.toml -> one
            project_dir = (
                config_file.parent if config_file.name == "pyproject.toml" else config_file.parent.parent
            )

        return cls(
            project_dir=project_dir,
            cwd=cwd,
            config=cls._load_config(cwd),
            units_override=units_file,
        )

    @staticmethod
    def _load_config(start_dir: Path) -> dict[str, Any]:
        from ..config import load_config

        return load_config(start_dir=str(start_dir))

    @property
    def units_file(self) -> Path:
        """Units file: --units-file, else units.file relative to the project dir."""
        if self.units_override is not None:
            return self.units_override
        configured = Path(self.config.get("units", {}).get("file") or "units.toml")
        if configured.is_absolute():
            return configured
        return self.project_dir / configured

    @property
    def config_error(self) -> str | None:
        """Why the config file could not be used, if it could not."""
        return self.config.get("_config_error")

    @property
    def unit_root(self) -> Path | None:
        """Configured unit root, resolved against the project dir."""
        root = self.config.get("units", {}).get("root")
        if not root:
            return None
        root_path = Path(root)
        return root_path if root_path.is_absolute() else self.project_dir / root_path

    def load_store(self) -> UnitStore:
        """Load the units file into a sealed store.

        Raises:
            UnitFileError: If the units file is missing or invalid
        """
        from ..services.units.loader import load_units

        return load_units(self.units_file, unit_root=self.unit_root)
