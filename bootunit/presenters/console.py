"""
Console presenter for terminal output.

Implements human-readable output formatting for the CLI.
"""

import sys

from ..core.interfaces.presenter import IPresenter
from ..core.models.unit import ActivationReport, ActivationResult, UnitDescriptor, UnitState

STATE_COLORS = {
    UnitState.COMPLETED: "\033[92m",
    UnitState.FAILED: "\033[91m",
    UnitState.WAITING: "\033[93m",
}


class ConsolePresenter(IPresenter):
    """
    Console output presenter.

    Formats output for human-readable terminal display.
    """

    def __init__(self, use_color: bool = True, file=None) -> None:
        """
        Initialize console presenter.

        Args:
            use_color: Whether to use ANSI color codes
            file: Output file (defaults to sys.stdout)
        """
        self._use_color = use_color and sys.stdout.isatty()
        self._out = file

    @property
    def _file(self):
        return self._out or sys.stdout

    @property
    def _err_file(self):
        return sys.stderr

    def print(self, message: str) -> None:
        """Print a message to output."""
        print(message, file=self._file)

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        if self._use_color:
            print(f"\033[93mWarning: {message}\033[0m", file=self._err_file)
        else:
            print(f"Warning: {message}", file=self._err_file)

    def print_table(self, headers: list[str], rows: list[list[str]]) -> None:
        """
        Print a formatted table.

        Args:
            headers: Column headers
            rows: Table rows
        """
        if not rows:
            return

        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(cell)))

        header_line = "  ".join(str(h).ljust(widths[i]) for i, h in enumerate(headers))
        if self._use_color:
            print(f"\033[1m{header_line}\033[0m", file=self._file)
        else:
            print(header_line, file=self._file)

        print("-" * len(header_line), file=self._file)

        for row in rows:
            row_line = "  ".join(
                str(cell).ljust(widths[i]) if i < len(widths) else str(cell)
                for i, cell in enumerate(row)
            )
            print(row_line.rstrip(), file=self._file)

    def print_unit(self, unit: UnitDescriptor) -> None:
        """Print every field of a unit descriptor."""
        lines = [
            f"Unit: {unit.name}",
            f"  Description:  {unit.description or '-'}",
            f"  Type:         {unit.run_policy.value}",
            f"  Wanted by:    {', '.join(sorted(unit.activation_triggers)) or '-'}",
            f"  After:        {', '.join(sorted(unit.ordering_after)) or '-'}",
            f"  User:         {unit.run_as_user or '(current)'}",
            f"  Command:      {unit.command}",
            f"  Output:       {unit.output_destination} ({unit.output_mode.value})",
        ]
        if unit.working_directory is not None:
            lines.append(f"  Working dir:  {unit.working_directory}")
        if unit.shared_output:
            lines.append("  Shared output: yes")
        for key, value in unit.environment:
            lines.append(f"  Env:          {key}={value}")
        for line in lines:
            print(line, file=self._file)

    def print_report(self, report: ActivationReport, quiet: bool = False) -> None:
        """Print one row per unit followed by a summary line.

        Args:
            report: Activation report
            quiet: Only list failed and blocked units
        """
        rows = []
        for name, result in report.results.items():
            if quiet and result.succeeded:
                continue
            rows.append([name, self._format_state(result.state), _format_detail(result)])
        self.print_table(["UNIT", "STATE", "DETAIL"], rows)

        if not report.results:
            target = f" for {report.target}" if report.target else ""
            self.print(f"No units to activate{target}.")
            return

        summary = (
            f"{len(report.completed)} completed, "
            f"{len(report.failed)} failed, "
            f"{len(report.blocked)} blocked"
        )
        if rows:
            self.print("")
        self.print(summary)

    def _format_state(self, state: UnitState) -> str:
        label = state.value
        color = STATE_COLORS.get(state)
        if self._use_color and color:
            return f"{color}{label}\033[0m"
        return label


def _format_detail(result: ActivationResult) -> str:
    if result.succeeded:
        return f"{result.bytes_written} bytes in {format_duration(result.duration)}"
    if result.deferred:
        return f"waiting on {', '.join(result.waiting_on)}" if result.waiting_on else "waiting"
    if result.error is not None:
        cause = getattr(result.error, "cause", None)
        return str(cause) if cause is not None else str(result.error)
    return ""


def format_duration(seconds: float) -> str:
    """Format a duration for display."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3600:
        return f"{seconds / 60:.1f}m"
    return f"{seconds / 3600:.1f}h"
