"""
windows `py` launcher probe.

the launcher's listing format has drifted between releases, so each line is
run through a small set of rules in priority order:

    1. active virtual environment lines are skipped
    2. tagged format (launcher 3.11+):
           -V:3.12 *        Python 3.12 (64-bit)
           -V:3.11-32       Python 3.11 (32-bit) *
           -V:3.13t         Python 3.13 (64-bit, freethreaded)
    3. legacy format (older launchers, and `-0p` path listings):
           -3.9-64 *
           -3.8-32        C:\\Python38-32\\python.exe
           -V:3.12 *        C:\\Python312\\python.exe

lines matching none of these are ignored.
"""

from __future__ import annotations

import logging
import re

from typing_extensions import override

from ..errors import SourceUnavailableError
from ..models import InterpreterCandidate, InterpreterSource, ResolvedInterpreter
from .base import CommandRunner, Probe

logger = logging.getLogger(__name__)

DEFAULT_ARCHITECTURE = "64"
DEFAULT_MARKER = "*"
FREE_THREADED_SUFFIX = "t"

_ACTIVE_VENV = re.compile(r"active\s+(?:venv|virtual\s*env)", re.IGNORECASE)

_TAGGED = re.compile(
    r"""
    ^\s*-V:(?P<version>\d+\.\d+t?)(?:-(?P<tag_arch>32|64))?
    \s*(?P<lead_default>\*)?
    \s+(?P<description>.*?\((?P<bits>32|64)-bit[^)]*\).*?)
    \s*(?P<trail_default>\*)?\s*$
    """,
    re.VERBOSE,
)

_LEGACY = re.compile(
    r"""
    ^\s*-(?:V:)?(?P<version>\d+\.\d+t?)(?:-(?P<arch>32|64))?
    (?:\s+(?P<rest>.*?))?\s*$
    """,
    re.VERBOSE,
)

_ABSOLUTE_PATH = re.compile(r"^(?:[A-Za-z]:[\\/]|[\\/])")


def launcher_key(version: str, architecture: str) -> str:
    """
    build the launcher selector argument, e.g. `-3.12-64`.

    free-threaded builds (`3.13t`) are selected by their tag alone, with no
    architecture suffix.
    """
    if version.endswith(FREE_THREADED_SUFFIX):
        return f"-{version}"
    return f"-{version}-{architecture or DEFAULT_ARCHITECTURE}"


def is_active_venv_line(line: str) -> bool:
    """whether the line describes the currently active virtual environment."""
    return _ACTIVE_VENV.search(line) is not None


def match_tagged(line: str) -> InterpreterCandidate | None:
    """
    match a tagged launcher line.

    arguments:
        `line: str`
            one line of launcher output

    returns: `InterpreterCandidate | None`
        the parsed candidate, or None if the line is not in tagged format
    """
    match = _TAGGED.match(line)
    if match is None:
        return None

    version = match.group("version")
    architecture = match.group("bits")
    return InterpreterCandidate(
        version=version,
        source=InterpreterSource.LAUNCHER,
        invocation_key=launcher_key(version, architecture),
        architecture=architecture,
        is_default=bool(match.group("lead_default") or match.group("trail_default")),
    )


def match_legacy(line: str) -> InterpreterCandidate | None:
    """
    match a legacy launcher line.

    the architecture defaults to 64-bit when the line omits it. the free text
    after the version may hold the default marker, an executable path, or
    both, in any order.

    arguments:
        `line: str`
            one line of launcher output

    returns: `InterpreterCandidate | None`
        the parsed candidate, or None if the line is not in legacy format
    """
    match = _LEGACY.match(line)
    if match is None:
        return None

    version = match.group("version")
    architecture = match.group("arch") or DEFAULT_ARCHITECTURE
    rest = match.group("rest") or ""

    is_default = False
    text = rest.strip()
    if text.startswith(DEFAULT_MARKER):
        is_default = True
        text = text[len(DEFAULT_MARKER) :].strip()
    if text.endswith(f" {DEFAULT_MARKER}") or text == DEFAULT_MARKER:
        is_default = True
        text = text[: -len(DEFAULT_MARKER)].strip()

    path = text if _ABSOLUTE_PATH.match(text) else ""

    return InterpreterCandidate(
        version=version,
        source=InterpreterSource.LAUNCHER,
        invocation_key=launcher_key(version, architecture),
        architecture=architecture,
        path=path,
        is_default=is_default,
    )


def parse_launcher_line(line: str) -> InterpreterCandidate | None:
    """run one line through the launcher rules, in priority order."""
    if is_active_venv_line(line):
        return None
    return match_tagged(line) or match_legacy(line)


def parse_launcher_output(output: str) -> list[InterpreterCandidate]:
    """
    parse a full launcher listing.

    arguments:
        `output: str`
            stdout of `py -0p` or `py -0`

    returns: `list[InterpreterCandidate]`
        candidates in listing order

    raises:
        `SourceUnavailableError`
            if the output has content but not a single usable line
    """
    candidates: list[InterpreterCandidate] = []
    meaningful = False

    for line in output.splitlines():
        if not line.strip():
            continue
        if is_active_venv_line(line):
            logger.debug("skipping active environment line: %s", line.strip())
            meaningful = True
            continue

        candidate = parse_launcher_line(line)
        if candidate is None:
            logger.debug("ignoring unrecognised launcher line: %s", line.strip())
            continue

        meaningful = True
        candidates.append(candidate)

    if output.strip() and not meaningful:
        raise SourceUnavailableError("py launcher output could not be parsed")

    return candidates


class LauncherProbe(Probe):
    """lists interpreters registered with the windows `py` launcher."""

    source = InterpreterSource.LAUNCHER

    def __init__(self, command: str = "py", runner: CommandRunner | None = None) -> None:
        super().__init__(command, runner)

    @override
    def probe(self) -> list[InterpreterCandidate]:
        try:
            result = self._run("-0p")
        except SourceUnavailableError as e:
            logger.debug("verbose listing failed, retrying plain listing: %s", e)
            result = self._run("-0")

        return parse_launcher_output(result.stdout)

    @override
    def materialize(self, candidate: InterpreterCandidate) -> ResolvedInterpreter:
        return ResolvedInterpreter(
            candidate=candidate,
            command=[self.command, candidate.invocation_key],
        )
