"""
cli for pyfinder.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from .core import discover
from .errors import NoInterpreterFoundError
from .models import InterpreterCandidate


def create_parser() -> argparse.ArgumentParser:
    """
    create the argument parser for pyfinder.

    returns: `argparse.ArgumentParser`
        configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="pyfinder",
        description="list the python interpreters installed on this machine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  pyfinder            # ranked list of interpreters
  pyfinder --json     # output as json
        """,
    )

    _ = parser.add_argument(
        "--json",
        action="store_true",
        help="output as json",
    )

    _ = parser.add_argument(
        "--debug",
        action="store_true",
        help="log probe commands and their raw output",
    )

    _ = parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    return parser


def format_output(candidates: Sequence[InterpreterCandidate], json_output: bool = False) -> str:
    """
    format discovered candidates for output.

    arguments:
        `candidates: Sequence[InterpreterCandidate]`
            ranked candidates
        `json_output: bool`
            whether to output as json

    returns: `str`
        formatted output string
    """
    if json_output:
        return json.dumps([c.to_dict() for c in candidates], indent=2)

    return "\n".join(f"[{i}] {c.label}" for i, c in enumerate(candidates, 1))


def main(argv: Sequence[str] | None = None) -> int:
    """
    main entry point for pyfinder cli.

    arguments:
        `argv: Sequence[str] | None`
            command line arguments. if None, uses sys.argv.

    returns: `int`
        exit code (0 if an interpreter was found, 1 otherwise)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    json_output = bool(getattr(args, "json", False))
    debug = bool(getattr(args, "debug", False))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="[%(name)s] %(message)s",
    )

    try:
        candidates = discover()
    except NoInterpreterFoundError as e:
        if json_output:
            print("[]")
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(format_output(candidates, json_output=json_output))
    return 0


if __name__ == "__main__":
    sys.exit(main())
