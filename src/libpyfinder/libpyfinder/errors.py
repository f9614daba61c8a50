"""
exceptions raised by libpyfinder.
"""

from __future__ import annotations


class DiscoveryError(Exception):
    """base class for interpreter discovery errors."""


class SourceUnavailableError(DiscoveryError):
    """
    a probe could not produce candidates.

    raised when the tool is missing, exits non-zero, or emits output that is
    unusable. callers recover from this by treating the source as empty.
    """


class NoInterpreterFoundError(DiscoveryError):
    """every source, including the PATH fallback, came up empty."""


class ActivationError(DiscoveryError):
    """the version manager refused to set the local version."""
