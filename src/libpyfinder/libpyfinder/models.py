"""
models for libpyfinder.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import final

from packaging.version import InvalidVersion, Version

_MAJOR_MINOR = re.compile(r"(\d+)\.(\d+)")


class InterpreterSource(Enum):
    """
    enumeration of the places an interpreter candidate can come from.

    attributes:
        `LAUNCHER: str`
            the windows `py` launcher
        `VERSION_MANAGER: str`
            pyenv (or pyenv-win)
        `SYSTEM_PATH: str`
            a plain command found on PATH, used only as a last resort
    """

    LAUNCHER = "launcher"
    VERSION_MANAGER = "version_manager"
    SYSTEM_PATH = "system_path"

    @property
    def priority(self) -> int:
        """ranking priority, lower sorts first."""
        return _PRIORITIES[self]


_PRIORITIES = {
    InterpreterSource.LAUNCHER: 0,
    InterpreterSource.VERSION_MANAGER: 1,
    InterpreterSource.SYSTEM_PATH: 2,
}


def parse_version_key(version: str) -> tuple[int, int]:
    """
    parse a `(major, minor)` tuple out of a version string.

    arguments:
        `version: str`
            version string as reported by a tool, e.g. "3.12", "3.11.4",
            or "pypy3.10-7.3.12"

    returns: `tuple[int, int]`
        `(major, minor)`, or `(0, 0)` if nothing numeric could be found
    """
    try:
        release = Version(version).release
        if len(release) >= 2:
            return release[0], release[1]
        return release[0], 0
    except InvalidVersion:
        pass

    match = _MAJOR_MINOR.search(version)
    if match is None:
        return 0, 0
    return int(match.group(1)), int(match.group(2))


@final
@dataclass(frozen=True)
class InterpreterCandidate:
    """
    one discoverable python interpreter.

    attributes:
        `version: str`
            version string, "3.12" for launcher entries or the raw pyenv
            version (e.g. "3.12.1") for version manager entries
        `source: InterpreterSource`
            where the candidate was discovered
        `invocation_key: str`
            what to pass to invoke the interpreter: a launcher selector
            ("-3.12-64"), a plain command name ("python3"), or the generic
            "python" token for version manager entries
        `architecture: str`
            "32" or "64", empty if unknown
        `path: str`
            absolute path to the executable, empty if the source did not
            expose it
        `is_default: bool`
            whether the source tool marked this as its default
        `tool_version: str`
            the exact version string the version manager needs for
            activation, empty for other sources
    """

    version: str
    source: InterpreterSource
    invocation_key: str
    architecture: str = ""
    path: str = ""
    is_default: bool = False
    tool_version: str = ""

    @property
    def dedupe_key(self) -> tuple[InterpreterSource, str, str]:
        """candidates sharing this key are the same interpreter."""
        return self.source, self.version, self.architecture

    @property
    def version_key(self) -> tuple[int, int]:
        return parse_version_key(self.version)

    @property
    def label(self) -> str:
        """one-line human readable description."""
        parts = [f"Python {self.version}"]
        if self.architecture:
            parts.append(f"({self.architecture}-bit)")
        parts.append(f"[{self.source.value}]")
        if self.path:
            parts.append(self.path)
        if self.is_default:
            parts.append("(default)")
        return " ".join(parts)

    def to_dict(self) -> dict[str, object]:
        return {
            "version": self.version,
            "source": self.source.value,
            "invocation_key": self.invocation_key,
            "architecture": self.architecture,
            "path": self.path,
            "is_default": self.is_default,
        }


@final
@dataclass
class ResolvedInterpreter:
    """
    a candidate turned into something that can actually be run.

    attributes:
        `candidate: InterpreterCandidate`
            the candidate this was materialised from
        `command: list[str]`
            command prefix that starts the interpreter, e.g. `["py", "-3.12-64"]`
    """

    candidate: InterpreterCandidate
    command: list[str] = field(default_factory=list)
