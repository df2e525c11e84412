"""Unit declarations: the descriptor store and the units file loader."""

from .loader import load_units, parse_units
from .store import UnitStore

__all__ = ["UnitStore", "load_units", "parse_units"]
