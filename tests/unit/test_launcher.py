"""
Unit tests for SubprocessLauncher.
"""

import os
import pwd
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from bootunit.core.exceptions import SpawnError
from bootunit.services.activation.launcher import SubprocessLauncher


class TestSubprocessLauncher:
    """Tests for running real commands."""

    def test_captures_stdout_and_stderr(self, tmp_path):
        result = SubprocessLauncher().run("sh -c 'echo out; echo err >&2'", cwd=tmp_path)

        assert result.succeeded
        assert result.stdout == b"out\n"
        assert result.stderr == b"err\n"
        assert result.duration >= 0

    def test_exit_code_reported(self, tmp_path):
        result = SubprocessLauncher().run("sh -c 'exit 7'", cwd=tmp_path)

        assert result.exit_code == 7
        assert not result.succeeded

    def test_relative_script_resolved_against_cwd(self, tmp_path):
        (tmp_path / "info.sh").write_text("echo hello\n")

        result = SubprocessLauncher().run("sh ./info.sh", cwd=tmp_path)

        assert result.stdout == b"hello\n"

    def test_no_shell_interpretation(self, tmp_path):
        result = SubprocessLauncher().run("echo $HOME ; true", cwd=tmp_path)

        assert result.stdout == b"$HOME ; true\n"

    def test_environment_is_added(self, tmp_path):
        result = SubprocessLauncher().run("sh -c 'echo $MODE'", cwd=tmp_path, env={"MODE": "boot"})

        assert result.stdout == b"boot\n"

    def test_current_user_needs_no_switch(self, tmp_path):
        me = pwd.getpwuid(os.geteuid()).pw_name

        with patch("bootunit.services.activation.launcher.subprocess.Popen", wraps=subprocess.Popen) as popen:
            result = SubprocessLauncher().run("true", user=me, cwd=tmp_path)

        assert result.succeeded
        assert not {"user", "group", "extra_groups"} & popen.call_args.kwargs.keys()

    def test_switch_sets_group_and_supplementary_groups(self, tmp_path):
        account = pwd.getpwuid(os.geteuid())
        proc = MagicMock(returncode=0)
        proc.communicate.return_value = (b"", b"")

        with (
            patch("bootunit.services.activation.launcher.os.geteuid", return_value=account.pw_uid + 1),
            patch("bootunit.services.activation.launcher.subprocess.Popen", return_value=proc) as popen,
        ):
            SubprocessLauncher().run("true", user=account.pw_name, cwd=tmp_path)

        kwargs = popen.call_args.kwargs
        assert kwargs["user"] == account.pw_uid
        assert kwargs["group"] == account.pw_gid
        assert kwargs["extra_groups"] == os.getgrouplist(account.pw_name, account.pw_gid)
        assert kwargs["env"]["HOME"] == account.pw_dir

    @pytest.mark.skipif(os.geteuid() != 0, reason="switching user needs root")
    def test_root_drops_to_target_groups(self):
        try:
            nobody = pwd.getpwnam("nobody")
        except KeyError:
            pytest.skip("no nobody account")

        result = SubprocessLauncher().run("sh -c 'id -u; id -g; id -G'", user="nobody", cwd=Path("/"))

        uid, gid, groups = result.stdout.decode().split("\n")[:3]
        assert int(uid) == nobody.pw_uid
        assert int(gid) == nobody.pw_gid
        assert "0" not in groups.split()


class TestSpawnErrors:
    """Tests for commands that cannot be started."""

    def test_missing_executable(self, tmp_path):
        with pytest.raises(SpawnError, match="Executable not found"):
            SubprocessLauncher().run("no-such-binary-here-abc", cwd=tmp_path)

    def test_unknown_user(self, tmp_path):
        with pytest.raises(SpawnError, match="Unknown user") as exc_info:
            SubprocessLauncher().run("true", user="no-such-user-bootunit", cwd=tmp_path)

        assert exc_info.value.context["user"] == "no-such-user-bootunit"

    def test_missing_working_directory(self, tmp_path):
        with pytest.raises(SpawnError, match="Working directory"):
            SubprocessLauncher().run("true", cwd=tmp_path / "missing")

    @pytest.mark.parametrize("command", ["", "   "])
    def test_empty_command(self, command):
        with pytest.raises(SpawnError, match="empty"):
            SubprocessLauncher().run(command)

    def test_unbalanced_quotes(self):
        with pytest.raises(SpawnError, match="Could not parse"):
            SubprocessLauncher().run("echo 'unterminated")
