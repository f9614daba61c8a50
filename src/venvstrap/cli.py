"""
command-line interface for venvstrap.

discovers interpreters, asks which one to use, creates `.venv` in the
current directory, and points the editor at it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from libpyfinder import (
    DiscoveryError,
    InterpreterCandidate,
    InterpreterSource,
    LauncherProbe,
    Probe,
    SystemPathProbe,
    VersionManagerProbe,
    discover,
)
from libpyfinder.probes import CommandRunner

from .config import Config
from .editor import owned_settings, write_settings
from .errors import ProvisionError
from .provisioner import (
    EnvironmentRequest,
    ProvisionOutcome,
    Provisioner,
    cleanup_stale_version_pin,
    venv_python_path,
)
from .selection import ConsolePrompter, Prompter, select

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """
    create the argument parser for the cli.

    returns: `argparse.ArgumentParser`
        configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="venvstrap",
        description="create a virtual environment in the current directory and point vscode at it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  venvstrap            # pick an interpreter, create .venv, write .vscode/settings.json
  venvstrap --force    # recreate an existing .venv without asking
        """,
    )
    _ = parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="recreate an existing virtual environment without asking",
    )
    return parser


def choose_interpreter(
    candidates: Sequence[InterpreterCandidate], prompter: Prompter
) -> InterpreterCandidate:
    """
    pick the interpreter to build with.

    a lone PATH fallback candidate is used as-is; anything else goes through
    the interactive selection.
    """
    if len(candidates) == 1 and candidates[0].source is InterpreterSource.SYSTEM_PATH:
        chosen = candidates[0]
        logger.info("no managed interpreters found, using '%s' from PATH", chosen.invocation_key)
        return chosen
    return select(candidates, prompter)


def run(
    config: Config,
    force: bool = False,
    prompter: Prompter | None = None,
    probes: Sequence[Probe] | None = None,
    fallback: SystemPathProbe | None = None,
    runner: CommandRunner | None = None,
) -> ProvisionOutcome:
    """
    run the whole bootstrap sequence.

    arguments:
        `config: Config`
            configuration
        `force: bool`
            recreate an existing environment without asking
        `prompter: Prompter | None`
            user interaction. if None, uses the console.
        `probes: Sequence[Probe] | None`
            ranked probes. if None, builds them from the configuration.
        `fallback: SystemPathProbe | None`
            PATH fallback probe. if None, builds it from the configuration.
        `runner: CommandRunner | None`
            runs the environment creation command. if None, uses a real
            subprocess.

    returns: `ProvisionOutcome`
        what happened to the environment

    raises:
        `DiscoveryError`
            if no interpreter was found or activation failed
        `ProvisionError`
            if the environment could not be removed or created
    """
    if prompter is None:
        prompter = ConsolePrompter()
    if probes is None:
        probes = [
            LauncherProbe(config.launcher),
            VersionManagerProbe(config.version_manager),
        ]
    if fallback is None:
        fallback = SystemPathProbe(config.fallback_commands)

    candidates = discover(probes, fallback)
    chosen = choose_interpreter(candidates, prompter)
    logger.info("using %s", chosen.label)

    request = EnvironmentRequest(interpreter=chosen, target=config.venv_path, force=force)
    provisioner = Provisioner([*probes, fallback], prompter, runner=runner)
    outcome = provisioner.provision(request)

    owned = owned_settings(
        venv_python_path(config.venv_path),
        linter=config.linter,
        formatter=config.formatter,
    )
    _ = write_settings(owned, config.settings_path)

    if outcome is not ProvisionOutcome.KEPT:
        _ = cleanup_stale_version_pin(config.project_root, config.version_manager)

    return outcome


def main(argv: Sequence[str] | None = None) -> int:
    """
    run the cli main entry point.

    arguments:
        `argv: Sequence[str] | None`
            command-line arguments (default: sys.argv[1:])

    returns: `int`
        exit code (0 on success or when the existing environment is kept,
        1 on any fatal error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    force = bool(getattr(args, "force", False))

    config = Config.load()

    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    try:
        outcome = run(config, force=force)
    except (DiscoveryError, ProvisionError) as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        print("\ncancelled", file=sys.stderr)
        return 1
    except EOFError:
        logger.error("input closed before an interpreter was chosen")
        return 1

    if outcome is ProvisionOutcome.KEPT:
        logger.info("done (existing environment kept)")
    else:
        logger.info("done, activate with: %s", _activation_hint(config))
    return 0


def _activation_hint(config: Config) -> str:
    if sys.platform == "win32":
        return str(config.venv_path.joinpath("Scripts", "activate"))
    return f"source {config.venv_path.joinpath('bin', 'activate')}"


if __name__ == "__main__":
    sys.exit(main())
