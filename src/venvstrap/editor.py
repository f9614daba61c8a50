"""
editor settings writer.

merges the keys venvstrap owns into the workspace's vscode settings file,
leaving every other key alone. editor integration is best-effort: failures
are logged as warnings and never abort the run.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

INTERPRETER_PATH_KEY = "python.defaultInterpreterPath"
ACTIVATE_ENVIRONMENT_KEY = "python.terminal.activateEnvironment"
LINTING_ENABLED_KEY = "python.linting.enabled"
FORMATTER_KEY = "python.formatting.provider"

SettingValue = str | bool


class WriteResult(Enum):
    """
    outcome of `write_settings()`.

    attributes:
        `WRITTEN: str`
            owned keys merged over the existing settings
        `DEGRADED: str`
            existing file was unreadable, so only owned keys were written
        `FAILED: str`
            nothing could be written
    """

    WRITTEN = "written"
    DEGRADED = "degraded"
    FAILED = "failed"


def _linter_key(linter: str) -> str:
    return f"python.linting.{linter}Enabled"


def owned_settings(
    interpreter_path: str | Path,
    linter: str = "flake8",
    formatter: str = "black",
) -> dict[str, SettingValue]:
    """
    build the six settings venvstrap is responsible for.

    arguments:
        `interpreter_path: str | Path`
            python executable inside the new environment
        `linter: str`
            linter to enable; pylint is disabled unless it is the one chosen,
            in which case flake8 is disabled instead
        `formatter: str`
            formatter provider name

    returns: `dict[str, SettingValue]`
        the owned settings
    """
    disabled = "flake8" if linter == "pylint" else "pylint"
    return {
        INTERPRETER_PATH_KEY: str(interpreter_path),
        ACTIVATE_ENVIRONMENT_KEY: True,
        LINTING_ENABLED_KEY: True,
        _linter_key(linter): True,
        _linter_key(disabled): False,
        FORMATTER_KEY: formatter,
    }


def _read_existing(settings_file: Path) -> dict[str, object] | None:
    """
    read the current settings.

    returns: `dict[str, object] | None`
        the parsed settings (empty if the file is missing or blank), or
        None if the file exists but is not a json object

    raises:
        `OSError`
            if the file exists but cannot be read
    """
    if not settings_file.exists():
        return {}

    text = settings_file.read_bytes()
    if not text.strip():
        return {}

    try:
        data = json.loads(text)
    except ValueError as e:
        logger.debug("%s is not valid json: %s", settings_file, e)
        return None

    if not isinstance(data, dict):
        return None
    return data


def write_settings(owned: Mapping[str, SettingValue], settings_file: Path) -> WriteResult:
    """
    merge the owned settings into the settings file.

    owned values win over existing ones; unrelated keys survive. if the
    existing file cannot be parsed it is replaced by the owned keys alone,
    which loses whatever else it held.

    arguments:
        `owned: Mapping[str, SettingValue]`
            settings to write
        `settings_file: Path`
            path to the settings json file

    returns: `WriteResult`
        what happened; this function does not raise for i/o problems
    """
    result = WriteResult.WRITTEN

    try:
        existing = _read_existing(settings_file)
        if existing is None:
            logger.warning(
                "could not parse %s; rewriting it with only the interpreter settings "
                "(other settings in it are lost)",
                settings_file,
            )
            existing = {}
            result = WriteResult.DEGRADED

        merged = {**existing, **owned}
        settings_file.parent.mkdir(parents=True, exist_ok=True)
        _ = settings_file.write_text(json.dumps(merged, indent=4) + "\n", encoding="utf-8")
    except OSError as e:
        logger.warning("could not write editor settings to %s: %s", settings_file, e)
        return WriteResult.FAILED

    logger.info("editor settings written to %s", settings_file)
    return result
