"""
venvstrap: bootstrap a local python development environment.

this package discovers installed python interpreters (through the windows
`py` launcher, pyenv, or plain PATH commands), lets the user pick one,
creates a `.venv` virtual environment in the current directory, and writes
vscode settings so the editor targets it straight away.
"""

from __future__ import annotations

from .config import Config
from .editor import WriteResult, owned_settings, write_settings
from .errors import CreationError, DestructiveOperationError, ProvisionError
from .provisioner import (
    EnvironmentRequest,
    ProvisionOutcome,
    Provisioner,
    cleanup_stale_version_pin,
    venv_python_path,
)
from .selection import ConsolePrompter, Prompter, default_candidate, select

__version__ = "0.1.0"
__all__ = [
    "Config",
    "WriteResult",
    "owned_settings",
    "write_settings",
    "CreationError",
    "DestructiveOperationError",
    "ProvisionError",
    "EnvironmentRequest",
    "ProvisionOutcome",
    "Provisioner",
    "cleanup_stale_version_pin",
    "venv_python_path",
    "ConsolePrompter",
    "Prompter",
    "default_candidate",
    "select",
]
