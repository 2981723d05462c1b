#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/cli/builder.py
"""Argument parser and exit codes for the framecode CLI."""

from __future__ import annotations

import argparse

from framecode.constants import DEFAULT_INDENT
from framecode.exceptions import FrameTreeError, SnapshotError, TreeImportError

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_IMPORT_ERROR = 6
EXIT_SNAPSHOT_ERROR = 10


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, SnapshotError):
        return EXIT_SNAPSHOT_ERROR

    if isinstance(exception, FrameTreeError):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, TreeImportError):
        return EXIT_IMPORT_ERROR

    if isinstance(exception, OSError):
        return EXIT_FILE_ERROR

    # All other errors (unexpected errors)
    return EXIT_ERROR


def _add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("logging")
    group.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    group.add_argument("--log-file", help="Also write log output to this file")
    group.add_argument("--trace", action="store_true", help="Timestamped log output with logger names")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with its ``emit``, ``check`` and ``import`` commands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser

    """
    parser = argparse.ArgumentParser(
        prog="framecode",
        description="Emit, validate and import frame-tree programs stored as JSON snapshots.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    emit_parser = subparsers.add_parser("emit", help="Print the program text of a snapshot")
    emit_parser.add_argument("snapshot", help="Snapshot JSON file ('-' for stdin)")
    emit_parser.add_argument("--out", "-o", help="Write the program text to this file")
    emit_parser.add_argument("--indent", default=DEFAULT_INDENT, help="Indentation of one block level")
    emit_parser.add_argument(
        "--position-map", action="store_true", help="Print the line/slot position map as JSON instead of the text"
    )
    emit_parser.add_argument("--rich", action="store_true", help="Use rich terminal output with formatting")
    _add_logging_arguments(emit_parser)

    check_parser = subparsers.add_parser("check", help="Check the structural invariants of a snapshot")
    check_parser.add_argument("snapshot", help="Snapshot JSON file ('-' for stdin)")
    check_parser.add_argument("--rich", action="store_true", help="Use rich terminal output with formatting")
    _add_logging_arguments(check_parser)

    import_parser = subparsers.add_parser("import", help="Build frames from a JSON syntax tree")
    import_parser.add_argument("tree", help="Syntax tree JSON file ('-' for stdin)")
    import_parser.add_argument(
        "--into",
        metavar="SNAPSHOT",
        help="Paste into this snapshot at its cursor instead of building a new program",
    )
    import_parser.add_argument("--out", "-o", help="Write the resulting snapshot to this file")
    import_parser.add_argument(
        "--unsupported",
        choices=["comment", "skip", "error"],
        default="comment",
        help="What to do with statements that have no frame equivalent (default: comment)",
    )
    import_parser.add_argument("--emit", action="store_true", help="Print the program text instead of the snapshot")
    _add_logging_arguments(import_parser)

    return parser
