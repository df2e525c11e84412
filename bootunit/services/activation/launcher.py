"""
Subprocess-backed process launcher.

Runs a unit's command without a shell, under the unit's identity, and
captures stdout and stderr.
"""

import os
import pwd
import shlex
import subprocess
import time
from pathlib import Path

from ...core.container import resolve
from ...core.exceptions import SpawnError
from ...core.interfaces.launcher import IProcessLauncher
from ...core.interfaces.logger import ILogger
from ...core.models.unit import LaunchResult


class SubprocessLauncher(IProcessLauncher):
    """
    Launch commands with subprocess.Popen.

    The identity is only switched when the requested user differs from the
    effective user of this process; switching requires privileges.
    """

    def __init__(self, logger: ILogger | None = None) -> None:
        self._logger = logger

    @property
    def logger(self) -> ILogger:
        if self._logger is None:
            self._logger = resolve(ILogger)  # type: ignore[type-abstract]
        return self._logger

    def run(
        self,
        command: str,
        *,
        user: str | None = None,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> LaunchResult:
        args = self._split(command)
        child_env = dict(os.environ)
        if env:
            child_env.update(env)

        identity: dict = {}
        if user is not None:
            account = self._lookup_user(user, command)
            if account.pw_uid != os.geteuid():
                identity = {
                    "user": account.pw_uid,
                    "group": account.pw_gid,
                    "extra_groups": os.getgrouplist(account.pw_name, account.pw_gid),
                }
                child_env.update(
                    {"HOME": account.pw_dir, "USER": account.pw_name, "LOGNAME": account.pw_name}
                )

        if cwd is not None and not Path(cwd).is_dir():
            raise SpawnError(
                "Working directory does not exist",
                command=command,
                context={"cwd": str(cwd)},
            )

        self.logger.debug("Spawning %s (cwd=%s, user=%s)", args, cwd, user)
        start = time.monotonic()
        try:
            proc = subprocess.Popen(
                args,
                cwd=str(cwd) if cwd is not None else None,
                env=child_env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                **identity,
            )
        except FileNotFoundError as e:
            raise SpawnError(
                f"Executable not found: {args[0]}", command=command, user=user, cause=e
            ) from e
        except PermissionError as e:
            raise SpawnError(
                f"Permission denied starting {args[0]}", command=command, user=user, cause=e
            ) from e
        except (OSError, subprocess.SubprocessError) as e:
            raise SpawnError(
                f"Could not start command: {e}", command=command, user=user, cause=e
            ) from e

        stdout, stderr = proc.communicate()
        duration = time.monotonic() - start
        self.logger.debug("%s exited with %d after %.2fs", args[0], proc.returncode, duration)

        return LaunchResult(
            exit_code=proc.returncode,
            stdout=stdout,
            stderr=stderr,
            duration=duration,
        )

    @staticmethod
    def _split(command: str) -> list[str]:
        try:
            args = shlex.split(command)
        except ValueError as e:
            raise SpawnError(f"Could not parse command: {e}", command=command, cause=e) from e
        if not args:
            raise SpawnError("Command is empty", command=command)
        return args

    @staticmethod
    def _lookup_user(user: str, command: str) -> pwd.struct_passwd:
        try:
            if user.isdigit():
                return pwd.getpwuid(int(user))
            return pwd.getpwnam(user)
        except KeyError as e:
            raise SpawnError(f"Unknown user: {user}", command=command, user=user, cause=e) from e
