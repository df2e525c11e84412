"""
Layered settings for bootunit.

Highest priority first:
1. Keyword arguments to BootunitSettings
2. Environment variables (BOOTUNIT_<SECTION>__<FIELD>)
3. The nearest .bootunit/config.toml, or a pyproject.toml with [tool.bootunit]
4. Model defaults

A config file that cannot be read or parsed is never fatal. Its problem
is kept on the settings as ``config_error`` and the defaults apply.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from pydantic import PrivateAttr, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from .models.config import (
    ActivationConfig,
    LoggingConfig,
    OutputConfig,
    UnitsConfig,
)

CONFIG_DIR_NAME = ".bootunit"
CONFIG_FILE_NAME = "config.toml"
SECTIONS = ("units", "activation", "output", "logging")


def _declares_bootunit(pyproject: Path) -> bool:
    try:
        with open(pyproject, "rb") as f:
            return "bootunit" in tomllib.load(f).get("tool", {})
    except (OSError, tomllib.TOMLDecodeError):
        # someone else's broken pyproject.toml is not our config
        return False


def find_config_file(start_dir: str | None = None) -> Path | None:
    """Find the nearest bootunit config file walking up from start_dir (or cwd)."""
    start = Path(start_dir) if start_dir else Path.cwd()

    for directory in (start, *start.parents):
        candidate = directory / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate
        pyproject = directory / "pyproject.toml"
        if pyproject.exists() and _declares_bootunit(pyproject):
            return pyproject

    return None


@dataclass
class ConfigDocument:
    """The TOML table settings are read from, plus why reading it failed."""

    path: Path | None = None
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def read(cls, path: Path | None) -> ConfigDocument:
        if path is None:
            return cls()
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            return cls(path=path, error=f"Failed to parse config file {path}: {e}")
        except OSError as e:
            return cls(path=path, error=f"Failed to read config file {path}: {e.strerror or e}")

        if path.name == "pyproject.toml":
            data = data.get("tool", {}).get("bootunit", {})
        return cls(path=path, data=data)


# Document for the BootunitSettings() call currently inside load_settings()
_active_document: ContextVar[ConfigDocument | None] = ContextVar("bootunit_config_document", default=None)


class TomlConfigSource(PydanticBaseSettingsSource):
    """Settings source serving sections from an already read ConfigDocument."""

    def __init__(self, settings_cls: type[BaseSettings], document: ConfigDocument):
        super().__init__(settings_cls)
        self.document = document

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self.document.data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return {name: value for name, value in self.document.data.items() if name in SECTIONS}


class BootunitSettings(BaseSettings):
    """Merged bootunit configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BOOTUNIT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    units: UnitsConfig = UnitsConfig()
    activation: ActivationConfig = ActivationConfig()
    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()

    _document: ConfigDocument = PrivateAttr(default_factory=ConfigDocument)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        document = _active_document.get()
        if document is None:
            document = ConfigDocument.read(find_config_file())
        return init_settings, env_settings, TomlConfigSource(settings_cls, document)

    @property
    def config_file(self) -> Path | None:
        return self._document.path

    @property
    def config_error(self) -> str | None:
        return self._document.error

    def to_dict(self) -> dict[str, Any]:
        """Plain nested dict of every section, plus ``_config_file``/``_config_error`` when set."""
        result: dict[str, Any] = {section: getattr(self, section).model_dump() for section in SECTIONS}
        if self.config_file:
            result["_config_file"] = str(self.config_file)
        if self.config_error:
            result["_config_error"] = self.config_error
        return result


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}"


def load_settings(config_path: Path | None = None, start_dir: str | None = None) -> BootunitSettings:
    """Load bootunit settings from the config file and environment.

    Args:
        config_path: Explicit path to config file
        start_dir: Directory to start searching from (if config_path not given)
    """
    document = ConfigDocument.read(config_path or find_config_file(start_dir))
    token = _active_document.set(document)
    try:
        try:
            settings = BootunitSettings()
        except ValidationError as e:
            if not document.data:
                raise
            # The file holds values the models reject: fall back to defaults
            document = ConfigDocument(
                path=document.path,
                error=f"Invalid value in config file {document.path}: {_first_error(e)}",
            )
            _active_document.set(document)
            settings = BootunitSettings()
    finally:
        _active_document.reset(token)

    settings._document = document
    return settings
