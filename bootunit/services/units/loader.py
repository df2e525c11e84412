"""
Units file loader.

Reads unit declarations from a TOML file:

    [units.get-device-info]
    description = "Get device information on startup"
    wanted_by = ["multi-user.target"]
    after = ["sound.target"]
    user = "root"
    type = "oneshot"
    command = "bash ./get-device-info.sh"
    output = "/output/logs/device-info.txt"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from pydantic import ValidationError

from ...core.container import resolve
from ...core.exceptions import UnitDefinitionError, UnitFileError
from ...core.interfaces.logger import ILogger
from ...core.models.unit import UnitDescriptor
from .store import UnitStore


def _get_logger() -> ILogger:
    return resolve(ILogger)  # type: ignore[type-abstract]


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "unit"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def parse_units(data: dict[str, Any], source: str = "<memory>") -> list[UnitDescriptor]:
    """
    Validate the ``units`` table of a parsed units file.

    Args:
        data: Parsed TOML document
        source: Name used in error messages

    Returns:
        Descriptors in file order

    Raises:
        UnitFileError: If the document or any unit table is invalid
    """
    units = data.get("units")
    if units is None:
        return []
    if not isinstance(units, dict):
        raise UnitFileError("'units' must be a table of unit tables", file_path=source)

    descriptors = []
    for name, table in units.items():
        if not isinstance(table, dict):
            raise UnitFileError(
                f"Unit {name} must be a table",
                file_path=source,
                unit_name=name,
            )
        if "name" in table and table["name"] != name:
            raise UnitFileError(
                f"Unit table {name} declares a different name: {table['name']}",
                file_path=source,
                unit_name=name,
            )
        try:
            descriptors.append(UnitDescriptor.model_validate({**table, "name": name}))
        except ValidationError as e:
            raise UnitFileError(
                f"Invalid unit {name}: {_format_validation_error(e)}",
                file_path=source,
                unit_name=name,
                cause=e,
            ) from e
    return descriptors


def load_units(path: Path | str, unit_root: Path | str | None = None) -> UnitStore:
    """
    Load a units file into a sealed store.

    Args:
        path: Units file to read
        unit_root: Base directory for unit commands; defaults to the
            directory containing the units file

    Returns:
        Sealed UnitStore

    Raises:
        UnitFileError: If the file cannot be read or parsed, or a unit is
            invalid, duplicated or conflicts with another
    """
    path = Path(path)
    logger = _get_logger()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise UnitFileError("Units file not found", file_path=str(path), cause=e) from e
    except tomllib.TOMLDecodeError as e:
        raise UnitFileError(f"Failed to parse units file: {e}", file_path=str(path), cause=e) from e
    except OSError as e:
        raise UnitFileError(f"Failed to read units file: {e}", file_path=str(path), cause=e) from e

    descriptors = parse_units(data, source=str(path))

    root = Path(unit_root) if unit_root else path.resolve().parent
    try:
        store = UnitStore.from_descriptors(descriptors, unit_root=root)
    except UnitDefinitionError as e:
        raise UnitFileError(e.message, file_path=str(path), unit_name=e.unit_name, cause=e) from e

    logger.debug("Loaded %d unit(s) from %s (unit root %s)", len(store), path, root)
    return store
