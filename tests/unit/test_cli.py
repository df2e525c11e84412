"""
Unit tests for the bootunit CLI commands.

Commands run through the top-level group with Click's CliRunner inside a
temporary project directory; process launching is replaced with a
scripted launcher through the service container.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner
from dependency_injector import providers

from bootunit.cli import cli
from bootunit.core.bootstrap import bootstrap

UNITS = """\
[units.get-device-info]
description = "Get device information on startup"
wanted_by = ["multi-user.target"]
after = ["sound.target"]
command = "bash ./get-device-info.sh"
output = "{logs}/device-info.txt"

[units.banner]
wanted_by = ["multi-user.target"]
command = "print-banner"
output = "{logs}/banner.txt"
"""


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A project directory with a units file, used as cwd."""
    logs = tmp_path / "logs"
    logs.mkdir()
    (tmp_path / "units.toml").write_text(UNITS.format(logs=logs))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BOOTUNIT_LOGGING__FILE", "false")
    return tmp_path


@pytest.fixture
def launcher(project, scripted_launcher):
    """Scripted launcher installed in the service container."""
    fake = scripted_launcher(
        {
            "bash ./get-device-info.sh": b"device: X1\n",
            "print-banner": b"welcome\n",
        }
    )
    container = bootstrap(project)
    container.launcher.override(providers.Object(fake))
    return fake


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestListAndShow:
    """Tests for bootunit list and bootunit show."""

    def test_list_all_units(self, runner, project):
        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0, result.output
        assert "UNIT" in result.output
        assert "get-device-info" in result.output
        assert "sound.target" in result.output
        assert "banner" in result.output

    def test_list_by_target(self, runner, project):
        result = runner.invoke(cli, ["list", "--target", "graphical.target"])

        assert result.exit_code == 0
        assert "No units wanted by graphical.target." in result.output

    def test_show_unit(self, runner, project):
        result = runner.invoke(cli, ["show", "get-device-info"])

        assert result.exit_code == 0, result.output
        assert "Unit: get-device-info" in result.output
        assert "Command:      bash ./get-device-info.sh" in result.output
        assert "User:         (current)" in result.output

    def test_show_unknown_unit(self, runner, project):
        result = runner.invoke(cli, ["show", "nope"])

        assert result.exit_code == 1
        assert "Unit nope is not defined" in result.output

    def test_missing_units_file(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("BOOTUNIT_LOGGING__FILE", "false")

        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 1
        assert "Units file not found" in result.output

    def test_units_file_option(self, runner, project, tmp_path):
        other = tmp_path / "other.toml"
        other.write_text('[units.only]\ncommand = "true"\noutput = "/tmp/only.txt"\n')

        result = runner.invoke(cli, ["--units-file", str(other), "list"])

        assert result.exit_code == 0
        assert "only" in result.output
        assert "get-device-info" not in result.output


class TestCheck:
    """Tests for bootunit check."""

    def test_valid_file_warns_about_unreached_events(self, runner, project):
        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0, result.output
        assert "2 unit(s) OK" in result.output
        assert "ordered after sound.target" in result.output

    def test_configured_reached_event_silences_warning(self, runner, project):
        config_dir = project / ".bootunit"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text('[activation]\nreached = ["sound.target"]\n')

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0
        assert "Warning" not in result.output

    def test_cycle_fails(self, runner, project):
        (project / "units.toml").write_text(
            """\
[units.a]
command = "true"
output = "/tmp/a.txt"
after = ["b"]

[units.b]
command = "true"
output = "/tmp/b.txt"
after = ["a"]
"""
        )

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 1
        assert "cycle" in result.output

    def test_invalid_unit_fails(self, runner, project):
        (project / "units.toml").write_text('[units.a]\ncommand = "true"\n')

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 1
        assert "Invalid unit a" in result.output


class TestActivate:
    """Tests for bootunit activate."""

    def test_blocked_unit_exit_code(self, runner, project, launcher):
        result = runner.invoke(cli, ["activate"])

        assert result.exit_code == 2, result.output
        assert "waiting on sound.target" in result.output
        assert "1 completed, 0 failed, 1 blocked" in result.output
        assert launcher.commands() == ["print-banner"]

    def test_reached_event_lets_unit_run(self, runner, project, launcher):
        result = runner.invoke(cli, ["activate", "multi-user.target", "-r", "sound.target"])

        assert result.exit_code == 0, result.output
        assert "2 completed, 0 failed, 0 blocked" in result.output
        assert (project / "logs" / "device-info.txt").read_bytes() == b"device: X1\n"
        assert {call["cwd"] for call in launcher.calls} == {project.resolve()}

    def test_relative_output_follows_units_file(self, runner, project, launcher):
        boot = project / "boot"
        (boot / "logs").mkdir(parents=True)
        (boot / "units.toml").write_text('[units.banner]\ncommand = "print-banner"\noutput = "logs/banner.txt"\n')

        result = runner.invoke(cli, ["--units-file", str(boot / "units.toml"), "activate", "--unit", "banner"])

        assert result.exit_code == 0, result.output
        assert (boot / "logs" / "banner.txt").read_bytes() == b"welcome\n"

    def test_single_unit(self, runner, project, launcher):
        result = runner.invoke(cli, ["activate", "--unit", "banner"])

        assert result.exit_code == 0, result.output
        assert launcher.commands() == ["print-banner"]

    def test_failure_exit_code(self, runner, project, launcher):
        launcher.script["print-banner"] = 4

        result = runner.invoke(cli, ["activate", "-r", "sound.target"])

        assert result.exit_code == 1
        assert "failed" in result.output
        assert "Command exited with status 4" in result.output

    def test_quiet_hides_completed_units(self, runner, project, launcher):
        result = runner.invoke(cli, ["activate", "-r", "sound.target", "--quiet"])

        assert result.exit_code == 0
        assert "banner" not in result.output
        assert "2 completed" in result.output

    def test_target_and_unit_are_exclusive(self, runner, project, launcher):
        result = runner.invoke(cli, ["activate", "multi-user.target", "--unit", "banner"])

        assert result.exit_code == 2
        assert "not both" in result.output
        assert launcher.calls == []

    def test_unknown_unit(self, runner, project, launcher):
        result = runner.invoke(cli, ["activate", "--unit", "nope"])

        assert result.exit_code == 1
        assert "Unit nope is not defined" in result.output


class TestBrokenConfig:
    """Commands keep working with defaults when the config file is broken."""

    @pytest.fixture
    def broken_config(self, project: Path) -> Path:
        config_path = project / ".bootunit" / "config.toml"
        config_path.parent.mkdir()
        config_path.write_text('[logging\nlevel = "\n')
        return config_path

    def test_check_fails_with_parse_error(self, runner, project, broken_config):
        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 1
        assert "Failed to parse config file" in result.output
        assert "RecursionError" not in result.output

    def test_activate_warns_and_runs(self, runner, project, broken_config, launcher):
        result = runner.invoke(cli, ["activate", "-r", "sound.target"])

        assert result.exit_code == 0, result.output
        assert "Failed to parse config file" in result.output
        assert "using defaults" in result.output
        assert sorted(launcher.commands()) == ["bash ./get-device-info.sh", "print-banner"]
