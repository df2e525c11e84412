"""
Unit activation services.

- SubprocessLauncher: runs a command under a unit's identity
- OutputSink: serialized writes to output destinations
- ActivationRunner: per-unit state machine and single activation
- ActivationScheduler: readiness loop over many units
"""

from .launcher import SubprocessLauncher
from .output import OutputSink
from .runner import ActivationRunner
from .scheduler import ActivationScheduler

__all__ = [
    "ActivationRunner",
    "ActivationScheduler",
    "OutputSink",
    "SubprocessLauncher",
]
