"""
shared plumbing for interpreter probes.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import TypeAlias

from ..errors import SourceUnavailableError
from ..models import InterpreterCandidate, InterpreterSource, ResolvedInterpreter

logger = logging.getLogger(__name__)

CommandRunner: TypeAlias = Callable[[Sequence[str]], subprocess.CompletedProcess[str]]


def run_command(args: Sequence[str]) -> subprocess.CompletedProcess[str]:
    """
    run a command to completion, capturing its text output.

    arguments:
        `args: Sequence[str]`
            command and arguments

    returns: `subprocess.CompletedProcess[str]`
        the completed process; a non-zero exit code is not an error here

    raises:
        `OSError`
            if the executable cannot be started
    """
    logger.debug("running: %s", " ".join(args))
    return subprocess.run(list(args), capture_output=True, text=True, check=False)


class Probe(ABC):
    """
    queries one external discovery mechanism and normalises its output.

    subclasses implement `probe()` and, if the interpreter needs more than a
    plain command to run, `materialize()`.
    """

    source: InterpreterSource

    def __init__(self, command: str, runner: CommandRunner | None = None) -> None:
        self.command = command
        self.runner: CommandRunner = runner if runner is not None else run_command

    @abstractmethod
    def probe(self) -> list[InterpreterCandidate]:
        """
        list the interpreters this source knows about.

        returns: `list[InterpreterCandidate]`
            zero or more candidates, in the order the tool reported them

        raises:
            `SourceUnavailableError`
                if the tool is missing, failed, or produced unusable output
        """
        raise NotImplementedError

    def materialize(self, candidate: InterpreterCandidate) -> ResolvedInterpreter:
        """
        turn a chosen candidate into a runnable command prefix.

        the default is to run the invocation key as a plain command.
        """
        return ResolvedInterpreter(candidate=candidate, command=[candidate.invocation_key])

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        """run the tool, mapping every kind of failure to `SourceUnavailableError`."""
        argv = [self.command, *args]
        try:
            result = self.runner(argv)
        except OSError as e:
            raise SourceUnavailableError(f"{self.command}: could not run: {e}") from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise SourceUnavailableError(
                f"'{' '.join(argv)}' exited with code {result.returncode}"
                + (f": {detail}" if detail else "")
            )

        logger.debug("%s output:\n%s", " ".join(argv), result.stdout)
        return result
