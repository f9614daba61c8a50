"""
probes for the various places python interpreters can be discovered.
"""

from __future__ import annotations

from .base import CommandRunner, Probe, run_command
from .launcher import LauncherProbe, parse_launcher_line, parse_launcher_output
from .path import SystemPathProbe
from .pyenv import VersionManagerProbe, parse_pyenv_output

__all__ = [
    "CommandRunner",
    "Probe",
    "run_command",
    "LauncherProbe",
    "VersionManagerProbe",
    "SystemPathProbe",
    "parse_launcher_line",
    "parse_launcher_output",
    "parse_pyenv_output",
]
