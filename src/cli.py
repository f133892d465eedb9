"""
Command-line interface for removing exports from ES module files.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from parser import SUPPORTED_SYNTAX, ParseError
from shaker import shake_module


def _print_diagnostics(messages: List[str]) -> None:
    if not messages:
        return
    for message in messages:
        sys.stderr.write(message + "\n")


def remove_command(args: argparse.Namespace) -> int:
    input_path = Path(args.input).resolve()
    if not input_path.exists():
        sys.stderr.write(f"ERROR: Input file not found: {input_path}\n")
        return 1

    try:
        source = input_path.read_text(encoding="utf-8")
    except OSError as exc:
        sys.stderr.write(f"ERROR: Failed to read {input_path}: {exc}\n")
        return 1

    try:
        result = shake_module(
            source,
            args.exports or [],
            source_name=str(input_path),
            conservative=args.conservative,
        )
    except ParseError as exc:
        sys.stderr.write(f"ERROR: Parsing failed: {exc}\n")
        return 1

    if args.out:
        output_path = Path(args.out)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result.source, encoding="utf-8")
    else:
        sys.stdout.write(result.source)

    _print_diagnostics([f"INFO {input_path}: {message}" for message in result.diagnostics])
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remove-exports",
        description="Remove exports from an ES module and tree-shake the code they used",
        epilog=f"Input is parsed with esprima: {SUPPORTED_SYNTAX}.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command")

    remove_parser = subparsers.add_parser("remove", help="Remove exports from a single module")
    remove_parser.add_argument("input", help="Path to the JavaScript module")
    remove_parser.add_argument(
        "--export",
        dest="exports",
        action="append",
        metavar="NAME",
        help="Exported name to remove (repeatable; use `default` for the default export)",
    )
    remove_parser.add_argument(
        "--out",
        help="Output file path (defaults to stdout)",
    )
    remove_parser.add_argument(
        "--conservative",
        action="store_true",
        help="Only prune declarations that the removed exports were using.",
    )
    remove_parser.set_defaults(func=remove_command)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
