"""
virtual environment provisioning.

the provisioner only looks at whether the target directory exists; it never
inspects its contents, so a directory left half-built by an aborted run is
treated like any other existing environment.
"""

from __future__ import annotations

import logging
import shutil
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import final

from libpyfinder import InterpreterCandidate, Probe, ResolvedInterpreter, probe_for
from libpyfinder.probes import CommandRunner, run_command

from .errors import CreationError, DestructiveOperationError
from .selection import Prompter, confirm

logger = logging.getLogger(__name__)

VERSION_PIN_FILE = ".python-version"


class ProvisionOutcome(Enum):
    """what `Provisioner.provision()` ended up doing."""

    CREATED = "created"
    RECREATED = "recreated"
    KEPT = "kept"


@final
@dataclass
class EnvironmentRequest:
    """
    the resolved intent, consumed once by the provisioner.

    attributes:
        `interpreter: InterpreterCandidate`
            the interpreter chosen to build the environment
        `target: Path`
            environment directory to create
        `force: bool`
            recreate an existing environment without asking
    """

    interpreter: InterpreterCandidate
    target: Path
    force: bool = False


def venv_python_path(target: Path) -> Path:
    """
    get the interpreter path inside a virtual environment.

    handles cross-platform differences between windows and unix. the path
    is returned whether or not it exists yet.
    """
    if sys.platform == "win32":
        return target.joinpath("Scripts", "python.exe")
    return target.joinpath("bin", "python")


def remove_environment(target: Path) -> None:
    """
    delete an existing environment.

    raises:
        `DestructiveOperationError`
            if anything could not be removed
    """
    try:
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
    except OSError as e:
        raise DestructiveOperationError(
            f"could not remove existing environment at {target}: {e}"
        ) from e


class Provisioner:
    """
    creates the virtual environment for a chosen interpreter.

    arguments:
        `probes: Sequence[Probe]`
            probes that discovered the candidates; the matching probe
            materialises the chosen one (running pyenv activation if needed)
        `prompter: Prompter`
            used to ask before recreating an existing environment
        `runner: CommandRunner | None`
            runs the creation command. if None, uses a real subprocess.
        `remover: Callable[[Path], None] | None`
            deletes an existing environment. if None, uses `remove_environment`.
    """

    def __init__(
        self,
        probes: Sequence[Probe],
        prompter: Prompter,
        runner: CommandRunner | None = None,
        remover: Callable[[Path], None] | None = None,
    ) -> None:
        self.probes = list(probes)
        self.prompter = prompter
        self.runner: CommandRunner = runner if runner is not None else run_command
        self.remover: Callable[[Path], None] = remover if remover is not None else remove_environment

    def provision(self, request: EnvironmentRequest) -> ProvisionOutcome:
        """
        create, recreate or keep the environment.

        arguments:
            `request: EnvironmentRequest`
                what to build and where

        returns: `ProvisionOutcome`
            the terminal state reached

        raises:
            `ActivationError`
                if the version manager could not select the interpreter
            `DestructiveOperationError`
                if an existing environment could not be removed
            `CreationError`
                if the environment could not be created
        """
        target = request.target
        existed = target.exists()

        if existed and not request.force:
            logger.info("a virtual environment already exists at %s", target)
            if not confirm(self.prompter, "recreate it?"):
                logger.info("keeping the existing environment")
                return ProvisionOutcome.KEPT

        # activation runs before anything is deleted, so a pyenv failure
        # leaves an existing environment untouched
        resolved = self.materialize(request.interpreter)

        if existed:
            logger.info("removing existing environment at %s", target)
            self.remover(target)

        self.create(resolved, target)
        return ProvisionOutcome.RECREATED if existed else ProvisionOutcome.CREATED

    def materialize(self, candidate: InterpreterCandidate) -> ResolvedInterpreter:
        """turn the chosen candidate into a runnable command via its probe."""
        probe = probe_for(candidate, self.probes)
        if probe is None:
            return ResolvedInterpreter(candidate=candidate, command=[candidate.invocation_key])
        return probe.materialize(candidate)

    def create(self, interpreter: ResolvedInterpreter, target: Path) -> None:
        """
        run `<interpreter> -m venv <target>`.

        raises:
            `CreationError`
                if the command could not be started or exited non-zero
        """
        argv = [*interpreter.command, "-m", "venv", str(target)]
        logger.info("creating virtual environment with %s", " ".join(interpreter.command))

        try:
            result = self.runner(argv)
        except OSError as e:
            raise CreationError(f"could not run '{' '.join(argv)}': {e}") from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise CreationError(
                f"'{' '.join(argv)}' exited with code {result.returncode}"
                + (f": {detail}" if detail else "")
            )

        logger.info("virtual environment created at %s", target)


def cleanup_stale_version_pin(workdir: Path, version_manager: str = "pyenv") -> bool:
    """
    delete a `.python-version` file nothing will read.

    the pin is only stale when the version manager is not installed. failing
    to delete it is logged and otherwise ignored.

    arguments:
        `workdir: Path`
            directory that may hold the pin file
        `version_manager: str`
            command whose presence makes the pin meaningful

    returns: `bool`
        whether the pin file was removed
    """
    pin = workdir.joinpath(VERSION_PIN_FILE)
    if not pin.exists():
        return False

    if shutil.which(version_manager) is not None:
        return False

    try:
        pin.unlink()
    except OSError as e:
        logger.warning("could not remove stale %s: %s", pin, e)
        return False

    logger.info("removed stale %s (%s is not installed)", VERSION_PIN_FILE, version_manager)
    return True
