"""
Shared pytest fixtures for bootunit tests.

This module provides:
- write_units: writes a units file into a temporary directory
- scripted_launcher: a process launcher that returns canned results
- run_bootunit: runs the bootunit CLI in a subprocess
"""

import os
import subprocess
import sys
import threading
import time
from collections.abc import Callable
from pathlib import Path

import pytest

from bootunit.core.bootstrap import reset
from bootunit.core.interfaces.launcher import IProcessLauncher
from bootunit.core.models.unit import LaunchResult, UnitDescriptor


@pytest.fixture(autouse=True)
def reset_container():
    """Give every test a fresh service container."""
    reset()
    yield
    reset()


class ScriptedLauncher(IProcessLauncher):
    """
    Launcher returning canned results keyed by command string.

    Each entry of ``script`` is one of:
    - bytes: stdout of a successful run
    - int: a non-zero exit code with empty stdout
    - Exception: raised from run()
    - callable: called with the command, its return value used as above
    """

    def __init__(self, script: dict | None = None) -> None:
        self.script = script or {}
        self.calls: list[dict] = []
        self._lock = threading.Lock()

    def run(self, command, *, user=None, cwd=None, env=None) -> LaunchResult:
        with self._lock:
            self.calls.append({"command": command, "user": user, "cwd": cwd, "env": env})
        outcome = self.script.get(command, b"")
        if callable(outcome):
            outcome = outcome(command)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, int):
            return LaunchResult(exit_code=outcome, stdout=b"", stderr=b"boom\n", duration=0.01)
        return LaunchResult(exit_code=0, stdout=outcome, duration=0.01)

    def commands(self) -> list[str]:
        return [c["command"] for c in self.calls]


@pytest.fixture
def scripted_launcher() -> Callable[..., ScriptedLauncher]:
    """Factory for ScriptedLauncher instances."""
    return ScriptedLauncher


@pytest.fixture
def make_unit(tmp_path: Path) -> Callable[..., UnitDescriptor]:
    """
    Build a UnitDescriptor with defaults suited to tests.

    The output destination defaults to <tmp_path>/logs/<name>.txt and the
    logs directory is created.
    """
    logs = tmp_path / "logs"
    logs.mkdir(exist_ok=True)

    def make(name: str, **fields) -> UnitDescriptor:
        fields.setdefault("command", f"run-{name}")
        fields.setdefault("output_destination", logs / f"{name}.txt")
        return UnitDescriptor(name=name, **fields)

    return make


@pytest.fixture
def write_units(tmp_path: Path) -> Callable[[str], Path]:
    """Write a units file into tmp_path and return its path."""

    def write(content: str, name: str = "units.toml") -> Path:
        path = tmp_path / name
        path.write_text(content)
        return path

    return write


def _run_bootunit_cmd(*args: str, cwd: Path, check: bool = True) -> subprocess.CompletedProcess:
    """Run a bootunit command using the current Python interpreter."""
    result = subprocess.run(
        [sys.executable, "-m", "bootunit", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        env={
            **os.environ,
            "HOME": str(cwd),
            "BOOTUNIT_LOGGING__FILE": "false",
        },
    )
    if check and result.returncode != 0:
        raise subprocess.CalledProcessError(
            result.returncode,
            [sys.executable, "-m", "bootunit", *args],
            result.stdout,
            result.stderr,
        )
    return result


@pytest.fixture
def run_bootunit(tmp_path: Path) -> Callable[..., subprocess.CompletedProcess]:
    """Run the bootunit CLI inside tmp_path."""

    def run(*args: str, check: bool = True) -> subprocess.CompletedProcess:
        return _run_bootunit_cmd(*args, cwd=tmp_path, check=check)

    return run


def _wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    """Poll until predicate() is true or the timeout expires."""
    return _wait_for
