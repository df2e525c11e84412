"""
Output sink for captured unit output.

Writes to the same destination are serialized with one lock per path so
units that share an output file never interleave.
"""

import os
import threading
from pathlib import Path

from ...core.exceptions import OutputWriteError
from ...core.models.unit import OutputMode


class OutputSink:
    """Persists captured stdout to unit output destinations."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, path: Path) -> threading.Lock:
        key = os.path.normpath(os.path.abspath(str(path)))
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def check_writable(self, path: Path) -> None:
        """
        Verify the destination's parent directory exists and is writable.

        Raises:
            OutputWriteError: If the destination cannot be written
        """
        parent = Path(path).parent
        if not parent.exists():
            raise OutputWriteError("Output directory does not exist", destination=str(path))
        if not parent.is_dir():
            raise OutputWriteError("Output parent is not a directory", destination=str(path))
        if not os.access(parent, os.W_OK):
            raise OutputWriteError("Output directory is not writable", destination=str(path))
        if Path(path).is_dir():
            raise OutputWriteError("Output destination is a directory", destination=str(path))

    def write(self, path: Path, data: bytes, mode: OutputMode = OutputMode.OVERWRITE) -> int:
        """
        Write captured output.

        Args:
            path: Destination file
            data: Bytes to persist
            mode: Overwrite (default) or append

        Returns:
            Number of bytes written

        Raises:
            OutputWriteError: If the file cannot be opened or written
        """
        file_mode = "ab" if mode is OutputMode.APPEND else "wb"
        with self._lock_for(path):
            try:
                with open(path, file_mode) as f:
                    f.write(data)
            except OSError as e:
                raise OutputWriteError(
                    f"Failed to write output: {e.strerror or e}",
                    destination=str(path),
                    cause=e,
                ) from e
        return len(data)
