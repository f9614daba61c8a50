"""
conftest for venvstrap tests.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterable, Sequence
from pathlib import Path
from unittest import mock

import pytest

from libpyfinder import InterpreterCandidate, InterpreterSource


class ScriptedPrompter:
    """prompter that replays canned answers and records everything shown."""

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self.answers = list(answers)
        self.shown: list[str] = []
        self.questions: list[str] = []

    def show(self, text: str) -> None:
        self.shown.append(text)

    def ask(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {question}")
        return self.answers.pop(0)


class RecordingRunner:
    """command runner that records calls and returns a fixed exit code.

    when `create_dirs` is set, a successful `-m venv <dir>` call creates the
    directory, like the real command would.
    """

    def __init__(self, returncode: int = 0, stderr: str = "", create_dirs: bool = True) -> None:
        self.returncode = returncode
        self.stderr = stderr
        self.create_dirs = create_dirs
        self.calls: list[list[str]] = []

    def __call__(self, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
        self.calls.append(list(args))
        if self.returncode == 0 and self.create_dirs and "venv" in args:
            Path(args[-1]).joinpath("bin").mkdir(parents=True, exist_ok=True)
        return subprocess.CompletedProcess(
            args=list(args), returncode=self.returncode, stdout="", stderr=self.stderr
        )


@pytest.fixture
def prompter():
    """factory for `ScriptedPrompter` instances."""
    return ScriptedPrompter


@pytest.fixture
def runner():
    """factory for `RecordingRunner` instances."""
    return RecordingRunner


@pytest.fixture
def launcher_candidate() -> InterpreterCandidate:
    return InterpreterCandidate(
        version="3.12",
        source=InterpreterSource.LAUNCHER,
        invocation_key="-3.12-64",
        architecture="64",
        is_default=True,
    )


@pytest.fixture
def pyenv_candidate() -> InterpreterCandidate:
    return InterpreterCandidate(
        version="3.11.9",
        source=InterpreterSource.VERSION_MANAGER,
        invocation_key="python",
        tool_version="3.11.9",
    )


@pytest.fixture(autouse=True)
def clear_venvstrap_env():
    """clear VENVSTRAP_* variables so the test runner's environment does not leak in."""
    cleaned = {k: v for k, v in os.environ.items() if not k.startswith("VENVSTRAP_")}
    with mock.patch.dict(os.environ, cleaned, clear=True):
        yield
