"""
core discovery logic for libpyfinder.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .errors import SourceUnavailableError
from .models import InterpreterCandidate, InterpreterSource
from .probes import LauncherProbe, Probe, SystemPathProbe, VersionManagerProbe

logger = logging.getLogger(__name__)


def default_probes() -> list[Probe]:
    """the ranked probes, in source order."""
    return [LauncherProbe(), VersionManagerProbe()]


def _rank(candidate: InterpreterCandidate) -> tuple[int, int, int]:
    major, minor = candidate.version_key
    return candidate.source.priority, -major, -minor


def aggregate(results: Iterable[Sequence[InterpreterCandidate]]) -> list[InterpreterCandidate]:
    """
    merge, deduplicate and rank probe results.

    results are concatenated in the order given, duplicates (same source,
    version and architecture) collapse to their first occurrence, and the
    survivors are sorted by source priority, then by descending
    `(major, minor)`. the sort is stable, so ties keep their relative order.

    arguments:
        `results: Iterable[Sequence[InterpreterCandidate]]`
            one list per probe, launcher first

    returns: `list[InterpreterCandidate]`
        ranked candidates; empty if every probe came up empty
    """
    seen: set[tuple[InterpreterSource, str, str]] = set()
    merged: list[InterpreterCandidate] = []

    for candidates in results:
        for candidate in candidates:
            if candidate.dedupe_key in seen:
                logger.debug("dropping duplicate candidate: %s", candidate.label)
                continue
            seen.add(candidate.dedupe_key)
            merged.append(candidate)

    return sorted(merged, key=_rank)


def collect(probe: Probe) -> list[InterpreterCandidate]:
    """
    run one probe, treating an unavailable source as empty.

    arguments:
        `probe: Probe`
            the probe to run

    returns: `list[InterpreterCandidate]`
        the probe's candidates, or an empty list if the source is unavailable
    """
    try:
        return probe.probe()
    except SourceUnavailableError as e:
        logger.warning("%s unavailable: %s", probe.source.value.replace("_", " "), e)
        return []


def discover(
    probes: Sequence[Probe] | None = None,
    fallback: SystemPathProbe | None = None,
) -> list[InterpreterCandidate]:
    """
    find every usable python interpreter on this machine.

    arguments:
        `probes: Sequence[Probe] | None`
            ranked probes to run. if None, uses the launcher and pyenv probes.
        `fallback: SystemPathProbe | None`
            probe used when the ranked probes find nothing. if None, uses
            the default PATH command list.

    returns: `list[InterpreterCandidate]`
        ranked candidates, or exactly one PATH candidate if nothing ranked
        was found

    raises:
        `NoInterpreterFoundError`
            if the ranked probes and the PATH fallback all came up empty
    """
    if probes is None:
        probes = default_probes()

    candidates = aggregate(collect(probe) for probe in probes)
    if candidates:
        return candidates

    logger.debug("no ranked candidates, falling back to PATH")
    if fallback is None:
        fallback = SystemPathProbe()
    return fallback.probe()


def probe_for(candidate: InterpreterCandidate, probes: Iterable[Probe]) -> Probe | None:
    """find the probe responsible for materialising a candidate."""
    for probe in probes:
        if probe.source is candidate.source:
            return probe
    return None
