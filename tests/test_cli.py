"""tests for the cli module."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from libpyfinder import (
    ActivationError,
    InterpreterCandidate,
    InterpreterSource,
    LauncherProbe,
    NoInterpreterFoundError,
    Probe,
    SystemPathProbe,
)
from venvstrap.cli import create_parser, main, run
from venvstrap.config import Config
from venvstrap.errors import CreationError, DestructiveOperationError
from venvstrap.provisioner import ProvisionOutcome, venv_python_path


class StaticProbe(Probe):
    """probe returning a fixed candidate list."""

    def __init__(self, source: InterpreterSource, result: list[InterpreterCandidate]):
        super().__init__("static")
        self.source = source
        self.result = result

    def probe(self) -> list[InterpreterCandidate]:
        return list(self.result)


def no_path(args) -> subprocess.CompletedProcess[str]:
    raise FileNotFoundError(2, "No such file or directory", args[0])


class TestCreateParser:
    """tests for the create_parser function."""

    def test_parser_creation(self) -> None:
        """Test that parser is created successfully."""
        parser = create_parser()

        assert parser.prog == "venvstrap"

    def test_force_flag(self) -> None:
        """Test the force flag and its short form."""
        parser = create_parser()

        assert parser.parse_args([]).force is False
        assert parser.parse_args(["--force"]).force is True
        assert parser.parse_args(["-f"]).force is True

    def test_no_other_flags(self) -> None:
        """Test that unknown flags are rejected."""
        with pytest.raises(SystemExit):
            _ = create_parser().parse_args(["--yes"])


class TestRun:
    """tests for the run function."""

    def test_full_flow(self, tmp_path: Path, prompter, runner) -> None:
        """Test selection, creation and settings in one run."""
        config = Config(project_root=tmp_path)
        config.settings_path.parent.mkdir()
        _ = config.settings_path.write_text(json.dumps({"foo": "bar"}))
        run_ = runner()
        p = prompter([""])

        def listing(args):
            output = " -V:3.12 *        Python 3.12 (64-bit)\n -V:3.11          Python 3.11 (64-bit)\n"
            return subprocess.CompletedProcess(list(args), 0, output, "")

        outcome = run(
            config,
            prompter=p,
            probes=[LauncherProbe(runner=listing)],
            fallback=SystemPathProbe(["python3"], runner=no_path),
            runner=run_,
        )

        assert outcome is ProvisionOutcome.CREATED
        assert run_.calls == [["py", "-3.12-64", "-m", "venv", str(config.venv_path)]]
        settings = json.loads(config.settings_path.read_text())
        assert settings["foo"] == "bar"
        assert settings["python.defaultInterpreterPath"] == str(venv_python_path(config.venv_path))
        assert len(settings) == 7

    def test_fallback_skips_selection(self, tmp_path: Path, prompter, runner) -> None:
        """Test that a lone PATH interpreter is used without prompting."""
        config = Config(project_root=tmp_path)
        run_ = runner()
        p = prompter()

        def python3_only(args):
            if args[0] == "python3":
                return subprocess.CompletedProcess(list(args), 0, "Python 3.12.3\n", "")
            raise FileNotFoundError(2, "No such file or directory", args[0])

        outcome = run(
            config,
            prompter=p,
            probes=[
                StaticProbe(InterpreterSource.LAUNCHER, []),
                StaticProbe(InterpreterSource.VERSION_MANAGER, []),
            ],
            fallback=SystemPathProbe(["python3", "python"], runner=python3_only),
            runner=run_,
        )

        assert outcome is ProvisionOutcome.CREATED
        assert p.questions == []
        assert run_.calls == [["python3", "-m", "venv", str(config.venv_path)]]

    def test_declined_still_writes_settings(
        self, tmp_path: Path, launcher_candidate, prompter, runner
    ) -> None:
        """Test that keeping the environment still configures the editor."""
        config = Config(project_root=tmp_path)
        config.venv_path.mkdir()
        _ = (tmp_path / ".python-version").write_text("3.12.4\n")
        run_ = runner()

        with mock.patch("shutil.which", return_value=None):
            outcome = run(
                config,
                prompter=prompter(["", "n"]),
                probes=[StaticProbe(InterpreterSource.LAUNCHER, [launcher_candidate])],
                fallback=SystemPathProbe(["python3"], runner=no_path),
                runner=run_,
            )

        assert outcome is ProvisionOutcome.KEPT
        assert run_.calls == []
        assert config.settings_path.exists()
        assert (tmp_path / ".python-version").exists()

    def test_stale_pin_removed_after_creation(
        self, tmp_path: Path, launcher_candidate, prompter, runner
    ) -> None:
        """Test that a pin file is cleaned up when pyenv is absent."""
        config = Config(project_root=tmp_path)
        _ = (tmp_path / ".python-version").write_text("3.12.4\n")

        with mock.patch("shutil.which", return_value=None):
            _ = run(
                config,
                prompter=prompter([""]),
                probes=[StaticProbe(InterpreterSource.LAUNCHER, [launcher_candidate])],
                fallback=SystemPathProbe(["python3"], runner=no_path),
                runner=runner(),
            )

        assert not (tmp_path / ".python-version").exists()

    def test_nothing_found(self, tmp_path: Path, prompter, runner) -> None:
        """Test that no interpreter anywhere raises."""
        with pytest.raises(NoInterpreterFoundError):
            _ = run(
                Config(project_root=tmp_path),
                prompter=prompter(),
                probes=[StaticProbe(InterpreterSource.LAUNCHER, [])],
                fallback=SystemPathProbe(["python3"], runner=no_path),
                runner=runner(),
            )


class TestMain:
    """tests for the main entry point."""

    @pytest.fixture(autouse=True)
    def in_tmp(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

    def test_success(self) -> None:
        """Test exit code 0 on creation."""
        with mock.patch("venvstrap.cli.run", return_value=ProvisionOutcome.CREATED) as run_mock:
            assert main([]) == 0

        assert run_mock.call_args.kwargs["force"] is False

    def test_kept_is_success(self) -> None:
        """Test exit code 0 when the user keeps the environment."""
        with mock.patch("venvstrap.cli.run", return_value=ProvisionOutcome.KEPT):
            assert main([]) == 0

    def test_force_passed_through(self) -> None:
        """Test that --force reaches the run function."""
        with mock.patch("venvstrap.cli.run", return_value=ProvisionOutcome.RECREATED) as run_mock:
            assert main(["--force"]) == 0

        assert run_mock.call_args.kwargs["force"] is True

    @pytest.mark.parametrize(
        "error",
        [
            NoInterpreterFoundError("no python interpreter found"),
            ActivationError("pyenv local failed"),
            DestructiveOperationError("could not remove"),
            CreationError("venv failed"),
        ],
    )
    def test_fatal_errors(self, error: Exception, caplog) -> None:
        """Test exit code 1 and an error message for every fatal error."""
        with mock.patch("venvstrap.cli.run", side_effect=error):
            assert main([]) == 1

        assert str(error) in caplog.text

    def test_interrupt(self, capsys) -> None:
        """Test that ctrl+c ends the run with exit code 1."""
        with mock.patch("venvstrap.cli.run", side_effect=KeyboardInterrupt):
            assert main([]) == 1

        assert "cancelled" in capsys.readouterr().err

    def test_closed_input(self, caplog) -> None:
        """Test that closed stdin during selection exits 1 with an error message."""
        with mock.patch("venvstrap.cli.run", side_effect=EOFError):
            assert main([]) == 1

        assert "input closed" in caplog.text

    def test_closed_input_keeps_existing_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, runner
    ) -> None:
        """Test that closed stdin at the recreate question keeps the environment."""
        config = Config(project_root=tmp_path)
        config.venv_path.mkdir()
        run_ = runner()

        def closed_stdin(prompt: str = "") -> str:
            raise EOFError

        monkeypatch.setattr("builtins.input", closed_stdin)

        def python3_only(args):
            return subprocess.CompletedProcess(list(args), 0, "Python 3.12.3\n", "")

        outcome = run(
            config,
            probes=[StaticProbe(InterpreterSource.LAUNCHER, [])],
            fallback=SystemPathProbe(["python3"], runner=python3_only),
            runner=run_,
        )

        assert outcome is ProvisionOutcome.KEPT
        assert run_.calls == []
