"""
pyenv (and pyenv-win) probe.
"""

from __future__ import annotations

import logging

from typing_extensions import override

from ..errors import ActivationError, SourceUnavailableError
from ..models import InterpreterCandidate, InterpreterSource, ResolvedInterpreter
from .base import CommandRunner, Probe

logger = logging.getLogger(__name__)

# pyenv resolves this shim to whatever `pyenv local` selected
GENERIC_INTERPRETER = "python"

SYSTEM_ENTRY = "system"
NESTED_ENV_MARKERS = ("/envs/", "\\envs\\")

# pyenv-win shells out to cscript; with the vbscript engine disabled or
# missing, every command prints this instead of a listing
BROKEN_SHELL_MARKERS = ("no script engine for file extension",)


def parse_pyenv_output(output: str) -> list[InterpreterCandidate]:
    """
    parse the output of `pyenv versions --bare`.

    arguments:
        `output: str`
            one version per line

    returns: `list[InterpreterCandidate]`
        one candidate per installed version, in listing order

    raises:
        `SourceUnavailableError`
            if the output shows pyenv's shell integration is broken
    """
    lowered = output.lower()
    for marker in BROKEN_SHELL_MARKERS:
        if marker in lowered:
            raise SourceUnavailableError(f"pyenv appears misconfigured: '{marker}'")

    candidates: list[InterpreterCandidate] = []
    for line in output.splitlines():
        entry = line.strip()
        if not entry:
            continue
        if entry == SYSTEM_ENTRY or entry.startswith(f"{SYSTEM_ENTRY} "):
            continue
        if any(marker in entry for marker in NESTED_ENV_MARKERS):
            logger.debug("skipping nested pyenv environment: %s", entry)
            continue

        candidates.append(
            InterpreterCandidate(
                version=entry,
                source=InterpreterSource.VERSION_MANAGER,
                invocation_key=GENERIC_INTERPRETER,
                tool_version=entry,
            )
        )

    return candidates


class VersionManagerProbe(Probe):
    """
    lists interpreters installed through pyenv.

    selecting one of these is two steps: `pyenv local <version>` pins the
    working directory, after which the generic `python` shim resolves to it.
    """

    source = InterpreterSource.VERSION_MANAGER

    def __init__(self, command: str = "pyenv", runner: CommandRunner | None = None) -> None:
        super().__init__(command, runner)

    @override
    def probe(self) -> list[InterpreterCandidate]:
        try:
            result = self._run("versions", "--bare")
        except SourceUnavailableError as e:
            # pyenv-win reports the broken engine on stderr with a non-zero exit
            if any(marker in str(e).lower() for marker in BROKEN_SHELL_MARKERS):
                raise SourceUnavailableError(f"pyenv appears misconfigured: {e}") from e
            raise

        stderr = (result.stderr or "").lower()
        if any(marker in stderr for marker in BROKEN_SHELL_MARKERS):
            raise SourceUnavailableError("pyenv appears misconfigured")

        return parse_pyenv_output(result.stdout)

    def activate(self, candidate: InterpreterCandidate) -> None:
        """
        set the candidate as the local pyenv version for the working directory.

        exit code zero is taken as success; nothing further is verified.

        raises:
            `ActivationError`
                if pyenv could not be run or exited non-zero
        """
        version = candidate.tool_version or candidate.version
        argv = [self.command, "local", version]
        try:
            result = self.runner(argv)
        except OSError as e:
            raise ActivationError(f"could not run '{' '.join(argv)}': {e}") from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise ActivationError(
                f"'{' '.join(argv)}' exited with code {result.returncode}"
                + (f": {detail}" if detail else "")
            )
        logger.debug("pyenv local version set to %s", version)

    @override
    def materialize(self, candidate: InterpreterCandidate) -> ResolvedInterpreter:
        self.activate(candidate)
        return ResolvedInterpreter(candidate=candidate, command=[candidate.invocation_key])
