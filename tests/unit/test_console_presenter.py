"""
Unit tests for ConsolePresenter report formatting.
"""

import io

import pytest

from bootunit.core.exceptions import ActivationFailure, OutputWriteError
from bootunit.core.models.unit import ActivationReport, ActivationResult, UnitDescriptor, UnitState
from bootunit.presenters.console import ConsolePresenter, format_duration


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def presenter(out):
    return ConsolePresenter(use_color=False, file=out)


def _report():
    failure = ActivationFailure("b", OutputWriteError("Output directory does not exist", destination="/x/b.txt"))
    return ActivationReport(
        target="multi-user.target",
        results={
            "a": ActivationResult(name="a", state=UnitState.COMPLETED, duration=0.5, bytes_written=11),
            "b": ActivationResult(name="b", state=UnitState.FAILED, error=failure),
            "c": ActivationResult(name="c", state=UnitState.WAITING, waiting_on=("b",)),
        },
    )


def test_report_lists_every_unit(presenter, out):
    presenter.print_report(_report())

    text = out.getvalue()
    assert "11 bytes in 0.5s" in text
    assert "Output directory does not exist" in text
    assert "waiting on b" in text
    assert text.rstrip().endswith("1 completed, 1 failed, 1 blocked")


def test_quiet_report_skips_completed(presenter, out):
    presenter.print_report(_report(), quiet=True)

    lines = out.getvalue().splitlines()
    assert not any(line.startswith("a ") for line in lines)
    assert any(line.startswith("b ") for line in lines)


def test_empty_report(presenter, out):
    presenter.print_report(ActivationReport(target="rescue.target"))

    assert out.getvalue() == "No units to activate for rescue.target.\n"


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(1.5, "1.5s"), (90, "1.5m"), (5400, "1.5h")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_unit_environment_listed_in_name_order(presenter, out):
    unit = UnitDescriptor(name="a", command="true", output="/tmp/a", environment={"MODE": "boot", "LANG": "C"})

    presenter.print_unit(unit)

    lines = [line for line in out.getvalue().splitlines() if "Env:" in line]
    assert lines == ["  Env:          LANG=C", "  Env:          MODE=boot"]
