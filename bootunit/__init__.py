"""
bootunit - declarative one-shot startup units.

Declares units in a TOML file and activates them once their ordering
constraints are met, capturing each command's output to a log file.
"""

__version__ = "0.1.0"
