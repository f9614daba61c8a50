"""
interactive interpreter selection.

all terminal interaction goes through the narrow `Prompter` protocol so the
selection loop can be driven by a scripted stub in tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, final

from libpyfinder import InterpreterCandidate


class Prompter(Protocol):
    """something that can show text to the user and read a line back."""

    def show(self, text: str) -> None: ...

    def ask(self, question: str) -> str: ...


@final
class ConsolePrompter:
    """prompter backed by stdout and stdin."""

    def show(self, text: str) -> None:
        print(text)

    def ask(self, question: str) -> str:
        return input(question)


def default_candidate(candidates: Sequence[InterpreterCandidate]) -> InterpreterCandidate:
    """
    pick the candidate used when the user just presses enter.

    arguments:
        `candidates: Sequence[InterpreterCandidate]`
            ranked, non-empty candidate list

    returns: `InterpreterCandidate`
        the first candidate marked default, else the first candidate
    """
    for candidate in candidates:
        if candidate.is_default:
            return candidate
    return candidates[0]


def select(candidates: Sequence[InterpreterCandidate], prompter: Prompter) -> InterpreterCandidate:
    """
    ask the user to pick one of the ranked candidates.

    blank input picks the default; a number picks that 1-indexed entry.
    anything else is rejected and asked again, without limit.

    arguments:
        `candidates: Sequence[InterpreterCandidate]`
            ranked, non-empty candidate list
        `prompter: Prompter`
            where to show the list and read the answer

    returns: `InterpreterCandidate`
        the chosen candidate
    """
    if not candidates:
        raise ValueError("select() needs at least one candidate")

    default = default_candidate(candidates)
    default_index = candidates.index(default) + 1

    prompter.show("available python interpreters:")
    for i, candidate in enumerate(candidates, 1):
        prompter.show(f"  [{i}] {candidate.label}")

    while True:
        answer = prompter.ask(f"select an interpreter [{default_index}]: ").strip()
        if not answer:
            return default
        if answer.isdecimal() and 1 <= int(answer) <= len(candidates):
            return candidates[int(answer) - 1]
        prompter.show(f"invalid choice '{answer}', enter a number from 1 to {len(candidates)}")


def confirm(prompter: Prompter, question: str) -> bool:
    """ask a y/N question; only 'y' or 'yes' count as yes, closed input counts as no."""
    try:
        answer = prompter.ask(f"{question} (y/N): ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")
