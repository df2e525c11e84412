"""
Presenter interface definitions for output formatting.

Keeps user-facing output (unit listings, activation reports) separate from
diagnostic logging.
"""

from abc import ABC, abstractmethod

from ..models.unit import ActivationReport, UnitDescriptor


class IPresenter(ABC):
    """
    Interface for output presentation.

    Implementations handle formatting and displaying output
    to the user in various formats.
    """

    @abstractmethod
    def print(self, message: str) -> None:
        """Print a message to output."""
        pass

    @abstractmethod
    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        pass

    @abstractmethod
    def print_table(self, headers: list[str], rows: list[list[str]]) -> None:
        """
        Print a table.

        Args:
            headers: Column headers
            rows: Table rows (list of row values)
        """
        pass

    @abstractmethod
    def print_unit(self, unit: UnitDescriptor) -> None:
        """Print every field of a unit descriptor."""
        pass

    @abstractmethod
    def print_report(self, report: ActivationReport, quiet: bool = False) -> None:
        """Print the final status of units in an activation report."""
        pass
