"""
Diagnostic logging for bootunit.

BootunitLogger writes through the stdlib ``bootunit`` logger to stderr
and/or a rotating file under ~/.bootunit/. Units run on worker threads,
so every record carries the thread name.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from ..core.interfaces.logger import ILogger
from ..core.models.config import LoggingConfig

DEFAULT_LOG_FILE = Path("~/.bootunit/bootunit.log")
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 3


class BootunitLogger(ILogger):
    """ILogger backed by a stdlib logger with its own handlers."""

    def __init__(
        self,
        level: str = "warning",
        console: bool = False,
        log_file: Path | None = DEFAULT_LOG_FILE,
        name: str = "bootunit",
    ) -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
        self._logger.propagate = False
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

        self.log_file = Path(log_file).expanduser() if log_file is not None else None
        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        if console:
            self._attach(logging.StreamHandler(sys.stderr), formatter)
        if self.log_file is not None:
            self._attach_file(self.log_file, formatter)

    @classmethod
    def from_config(cls, config: LoggingConfig, log_file: Path | None = DEFAULT_LOG_FILE) -> BootunitLogger:
        """Build a logger from the [logging] config section."""
        return cls(level=config.level, console=config.console, log_file=log_file if config.file else None)

    def _attach(self, handler: logging.Handler, formatter: logging.Formatter) -> None:
        handler.setFormatter(formatter)
        self._logger.addHandler(handler)

    def _attach_file(self, path: Path, formatter: logging.Formatter) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
        except OSError as e:
            print(f"bootunit: file logging disabled: {e}", file=sys.stderr)
            self.log_file = None
            return
        self._attach(handler, formatter)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(message, *args, **kwargs)


class NullLogger(ILogger):
    """Discards everything; the binding used before bootstrap()."""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass
