"""
python interpreter discovery.

libpyfinder finds installed python interpreters through the windows `py`
launcher and pyenv, ranks them, and falls back to whatever interpreter is
on PATH when neither tool knows of any.

functions:
    `def discover(probes: Sequence[Probe] | None = None, fallback: SystemPathProbe | None = None) -> list[InterpreterCandidate]`
        find and rank every usable interpreter
    `def aggregate(results: Iterable[Sequence[InterpreterCandidate]]) -> list[InterpreterCandidate]`
        merge, deduplicate and rank probe results
"""

from __future__ import annotations

from .core import aggregate, collect, discover, probe_for
from .errors import (
    ActivationError,
    DiscoveryError,
    NoInterpreterFoundError,
    SourceUnavailableError,
)
from .models import InterpreterCandidate, InterpreterSource, ResolvedInterpreter
from .probes import LauncherProbe, Probe, SystemPathProbe, VersionManagerProbe

__version__ = "0.1.0"
__all__ = [
    "aggregate",
    "collect",
    "discover",
    "probe_for",
    "ActivationError",
    "DiscoveryError",
    "NoInterpreterFoundError",
    "SourceUnavailableError",
    "InterpreterCandidate",
    "InterpreterSource",
    "ResolvedInterpreter",
    "LauncherProbe",
    "Probe",
    "SystemPathProbe",
    "VersionManagerProbe",
]
