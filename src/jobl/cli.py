"""Command-line interface for validating JOBL documents."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import cast

from jobl.config import CliConfig, load_config
from jobl.logging import configure_logging
from jobl.parser import parse_file
from jobl.serialize import dump_document

LOGGER = logging.getLogger(__name__)

_FORMAT_CHOICES = ("toml", "yaml")


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser."""

    parser = argparse.ArgumentParser(prog="jobl")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML file with CLI settings.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override (DEBUG, INFO, WARNING, ...).",
    )
    subparsers = parser.add_subparsers(dest="command")

    validate_parser = subparsers.add_parser("validate", help="Validate one or more documents")
    validate_parser.add_argument("files", nargs="+", type=Path)
    validate_parser.add_argument(
        "--format",
        dest="fmt",
        choices=_FORMAT_CHOICES,
        default=None,
        help="Document syntax; inferred from the file suffix when omitted.",
    )
    validate_parser.add_argument(
        "--error-format",
        choices=("text", "json"),
        default=None,
        help="How validation errors are printed.",
    )
    validate_parser.set_defaults(handler=_validate_command)

    dump_parser = subparsers.add_parser("dump", help="Print the canonical form of a document")
    dump_parser.add_argument("file", type=Path)
    dump_parser.add_argument("--format", dest="fmt", choices=_FORMAT_CHOICES, default=None)
    dump_parser.set_defaults(handler=_dump_command)
    return parser


def _validate_command(args: argparse.Namespace, config: CliConfig) -> int:
    error_format = args.error_format or config.error_format
    fmt = args.fmt or config.default_format
    exit_code = 0
    for path in args.files:
        result = parse_file(path, fmt=fmt)
        LOGGER.info(
            "validate_complete file=%s ok=%s",
            path,
            result.ok,
            extra={"file": path, "error_count": len(result.errors)},
        )
        if not result.ok:
            exit_code = 1
        if error_format == "json":
            payload = {
                "file": str(path),
                "ok": result.ok,
                "errors": [
                    {"path": error.path, "message": error.message} for error in result.errors
                ],
            }
            print(json.dumps(payload, sort_keys=True))
        elif result.ok:
            print(f"{path}: ok")
        else:
            for error in result.errors:
                print(f"{path}: {error}")
    return exit_code


def _dump_command(args: argparse.Namespace, config: CliConfig) -> int:
    result = parse_file(args.file, fmt=args.fmt or config.default_format)
    if result.document is None:
        for error in result.errors:
            print(f"{args.file}: {error}", file=sys.stderr)
        return 1
    sys.stdout.write(dump_document(result.document))
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0

    try:
        config = load_config(args.config) if args.config is not None else CliConfig()
        configure_logging(
            log_level=args.log_level or config.log_level,
            log_file=config.log_file,
        )
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    command_handler = cast(Callable[[argparse.Namespace, CliConfig], int], handler)
    return command_handler(args, config)


if __name__ == "__main__":
    raise SystemExit(main())
