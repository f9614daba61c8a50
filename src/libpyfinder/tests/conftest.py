"""
conftest for libpyfinder tests.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

import pytest


class FakeRunner:
    """stand-in for `run_command` that answers from a table of canned results.

    commands missing from the table raise `FileNotFoundError`, the same way
    a missing executable does.
    """

    def __init__(self, responses: dict[tuple[str, ...], subprocess.CompletedProcess[str] | Exception]):
        self.responses = responses
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
        key = tuple(args)
        self.calls.append(key)
        response = self.responses.get(key)
        if response is None:
            raise FileNotFoundError(2, "No such file or directory", args[0])
        if isinstance(response, Exception):
            raise response
        return response


def completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess[str]:
    """build a completed process result."""
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def fake_runner():
    """factory for `FakeRunner` instances."""
    return FakeRunner


@pytest.fixture(name="completed")
def completed_fixture():
    """the `completed` helper, for building canned results."""
    return completed
