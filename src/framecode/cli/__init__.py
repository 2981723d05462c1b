"""Command-line interface for the framecode library.

The CLI works on JSON files: frame-tree snapshots (as written by
:func:`framecode.frames.serialization.tree_to_json`) and generic syntax trees
(nested ``{"kind", "value", "children"}`` objects as produced by an external
parser).

Examples
--------
Print the program held by a snapshot::

    $ framecode emit program.json

Show where each slot sits on each emitted line::

    $ framecode emit program.json --position-map --rich

Validate a snapshot::

    $ framecode check program.json

Build a program from a parsed syntax tree::

    $ framecode import tree.json --out program.json

Paste a parsed snippet at the cursor of an existing program::

    $ framecode import snippet.json --into program.json --out program.json

"""

import logging
import sys

from framecode.cli.builder import create_parser, get_exit_code_for_exception
from framecode.cli.commands import dispatch_command
from framecode.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def main(args: list[str] | None = None) -> int:
    """Run the CLI.

    Parameters
    ----------
    args : list[str], optional
        Command line arguments (defaults to ``sys.argv[1:]``)

    Returns
    -------
    int
        Process exit code

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(parsed_args.log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        return dispatch_command(parsed_args)
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)
