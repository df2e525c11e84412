"""
Presenters for user-facing output.

Presenters implement IPresenter and handle formatting and display
of unit listings and activation reports.
"""

from .console import ConsolePresenter, format_duration

__all__ = ["ConsolePresenter", "format_duration"]
