"""
configuration loading for venvstrap.

this module handles loading configuration from pyproject.toml,
.venvstrap.toml, and environment variables.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from libpyfinder.probes.path import default_commands

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """
    main configuration class for venvstrap.

    attributes:
        `project_root: Path`
            directory the environment is created in
        `venv_dir: str`
            name of the environment directory, relative to project_root
        `settings_file: str`
            editor settings file, relative to project_root
        `launcher: str`
            command for the windows `py` launcher
        `version_manager: str`
            command for pyenv
        `fallback_commands: list[str]`
            plain interpreter commands tried, in order, when no other
            source has candidates
        `linter: str`
            linter enabled in the editor settings
        `formatter: str`
            formatter selected in the editor settings
        `debug: bool`
            log probe commands and their raw output
    """

    project_root: Path = field(default_factory=lambda: Path(".").resolve())
    venv_dir: str = ".venv"
    settings_file: str = ".vscode/settings.json"
    launcher: str = "py"
    version_manager: str = "pyenv"
    fallback_commands: list[str] = field(default_factory=lambda: list(default_commands()))
    linter: str = "flake8"
    formatter: str = "black"
    debug: bool = False

    def __post_init__(self) -> None:
        """Ensure project_root is a path object."""
        if isinstance(self.project_root, str):
            self.project_root = Path(self.project_root)

    @property
    def venv_path(self) -> Path:
        return self.project_root.joinpath(self.venv_dir)

    @property
    def settings_path(self) -> Path:
        return self.project_root.joinpath(self.settings_file)

    @classmethod
    def from_pyproject_toml(cls, project_root: str | Path) -> Config | None:
        """
        Load configuration from the [tool.venvstrap] table of pyproject.toml.

        arguments:
            `project_root: str | Path`
                project root directory containing pyproject.toml

        returns: `Config | None`
            configuration object if found, none otherwise
        """
        project_path = Path(project_root)
        table = cls._read_pyproject_table(project_path)
        if table is None:
            return None
        return cls._from_dict(table, project_path)

    @classmethod
    def from_venvstrap_toml(cls, project_root: str | Path) -> Config | None:
        """
        Load configuration from .venvstrap.toml.

        arguments:
            `project_root: str | Path`
                project root directory containing .venvstrap.toml

        returns: `Config | None`
            configuration object if found, none otherwise
        """
        project_path = Path(project_root)
        table = cls._read_venvstrap_table(project_path)
        if table is None:
            return None
        return cls._from_dict(table, project_path)

    @classmethod
    def from_environment(cls, project_root: str | Path = ".") -> Config:
        """
        Load configuration from environment variables.

        returns: `Config`
            configuration with values from environment
        """
        return cls(project_root=Path(project_root), **cls._environment_overrides())

    @classmethod
    def load(cls, project_root: str | Path = ".") -> Config:
        """
        Load configuration from all available sources.

        sources are loaded in order of priority (later overrides earlier):
        1. default values
        2. pyproject.toml
        3. .venvstrap.toml
        4. environment variables

        a value set explicitly by a later source always wins, even when it
        equals the default.

        arguments:
            `project_root: str | Path`
                project root directory

        returns: `Config`
            merged configuration from all sources
        """
        project_path = Path(project_root).resolve()

        config = cls(project_root=project_path)

        if (pyproject_table := cls._read_pyproject_table(project_path)) is not None:
            config = config.merge(cls._overrides(pyproject_table))

        if (venvstrap_table := cls._read_venvstrap_table(project_path)) is not None:
            config = config.merge(cls._overrides(venvstrap_table))

        config = config.merge(cls._environment_overrides())

        return config

    def merge(self, overrides: dict[str, Any]) -> Config:
        """
        merge explicitly set values into this configuration.

        arguments:
            `overrides: dict[str, Any]`
                field names and the values a source set for them

        returns: `Config`
            new merged configuration
        """
        return replace(self, **overrides)

    @staticmethod
    def _read_toml(path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None

        try:
            with open(path, "rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug("ignoring unreadable %s: %s", path, e)
            return None

    @classmethod
    def _read_pyproject_table(cls, project_path: Path) -> dict[str, Any] | None:
        data = cls._read_toml(project_path.joinpath("pyproject.toml"))
        if data is None:
            return None

        tool_config = data.get("tool", {}).get("venvstrap")
        if not isinstance(tool_config, dict):
            return None
        return tool_config

    @classmethod
    def _read_venvstrap_table(cls, project_path: Path) -> dict[str, Any] | None:
        return cls._read_toml(project_path.joinpath(".venvstrap.toml"))

    @staticmethod
    def _overrides(data: dict[str, Any]) -> dict[str, Any]:
        """
        pick the valid, explicitly set fields out of a toml table.

        unknown keys and values of the wrong type are ignored.

        arguments:
            `data: dict[str, Any]`
                configuration dictionary

        returns: `dict[str, Any]`
            field names and values to apply
        """
        overrides: dict[str, Any] = {}

        for key in ("venv_dir", "settings_file", "launcher", "version_manager", "linter", "formatter"):
            value = data.get(key)
            if isinstance(value, str) and value:
                overrides[key] = value

        commands = data.get("fallback_commands")
        if isinstance(commands, list) and commands and all(isinstance(c, str) for c in commands):
            overrides["fallback_commands"] = list(commands)

        if isinstance(data.get("debug"), bool):
            overrides["debug"] = data["debug"]

        return overrides

    @staticmethod
    def _environment_overrides() -> dict[str, Any]:
        overrides: dict[str, Any] = {}

        if venv_dir := os.environ.get("VENVSTRAP_VENV_DIR"):
            overrides["venv_dir"] = venv_dir

        if settings_file := os.environ.get("VENVSTRAP_SETTINGS_FILE"):
            overrides["settings_file"] = settings_file

        if formatter := os.environ.get("VENVSTRAP_FORMATTER"):
            overrides["formatter"] = formatter

        if debug := os.environ.get("VENVSTRAP_DEBUG"):
            overrides["debug"] = debug.lower() in ("true", "1", "yes")

        return overrides

    @classmethod
    def _from_dict(cls, data: dict[str, Any], project_root: Path) -> Config:
        """
        Create configuration from a dictionary.

        arguments:
            `data: dict[str, Any]`
                configuration dictionary
            `project_root: Path`
                project root path

        returns: `Config`
            configuration object
        """
        return cls(project_root=project_root, **cls._overrides(data))
