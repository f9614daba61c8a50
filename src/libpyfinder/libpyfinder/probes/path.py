"""
last-resort probe for interpreters that are simply on PATH.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Sequence

from typing_extensions import override

from ..errors import NoInterpreterFoundError
from ..models import InterpreterCandidate, InterpreterSource
from .base import CommandRunner, Probe

logger = logging.getLogger(__name__)

DEFAULT_COMMANDS = ("python3", "python", "py")

_VERSION_OUTPUT = re.compile(r"Python\s+(?P<version>\d+\.\d+(?:\.\d+)?\S*)", re.IGNORECASE)


def default_commands() -> tuple[str, ...]:
    """the fixed fallback order for the running platform."""
    if sys.platform == "win32":
        return ("python", "py", "python3")
    return DEFAULT_COMMANDS


class SystemPathProbe(Probe):
    """
    finds the first plain interpreter command that answers `--version`.

    this is not a ranked source; it only runs when every other probe came up
    empty, and yields exactly one candidate.
    """

    source = InterpreterSource.SYSTEM_PATH

    def __init__(
        self,
        commands: Sequence[str] | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.commands: tuple[str, ...] = tuple(commands) if commands else default_commands()
        super().__init__(self.commands[0], runner)

    @override
    def probe(self) -> list[InterpreterCandidate]:
        """
        return a single candidate for the first responding command.

        raises:
            `NoInterpreterFoundError`
                if none of the commands respond
        """
        for command in self.commands:
            try:
                result = self.runner([command, "--version"])
            except OSError as e:
                logger.debug("%s: not available (%s)", command, e)
                continue

            if result.returncode != 0:
                logger.debug("%s --version exited with code %d", command, result.returncode)
                continue

            # python 2 printed its version to stderr
            output = f"{result.stdout or ''} {result.stderr or ''}"
            match = _VERSION_OUTPUT.search(output)
            if match is None:
                logger.debug("%s --version gave no version: %r", command, output.strip())
                continue

            version = match.group("version")
            logger.debug("found %s on PATH (Python %s)", command, version)
            return [
                InterpreterCandidate(
                    version=version,
                    source=InterpreterSource.SYSTEM_PATH,
                    invocation_key=command,
                )
            ]

        raise NoInterpreterFoundError(
            "no python interpreter found (tried: "
            + ", ".join(self.commands)
            + "); install python from https://www.python.org/downloads/ and try again"
        )
