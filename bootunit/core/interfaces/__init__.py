"""
Interface definitions for bootunit's services.

These interfaces define the contracts that implementations must follow,
enabling dependency inversion and substitution in tests.
"""

from .launcher import IProcessLauncher
from .logger import ILogger
from .presenter import IPresenter

__all__ = [
    "ILogger",
    "IPresenter",
    "IProcessLauncher",
]
