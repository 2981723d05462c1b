#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/cli/commands.py
"""Command handlers for the framecode CLI.

Each handler takes the parsed arguments and returns an exit code. Plain
output goes to stdout; ``--rich`` switches to rich tables and syntax
highlighting.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from framecode.cli.builder import EXIT_IMPORT_ERROR, EXIT_SUCCESS, EXIT_VALIDATION_ERROR
from framecode.editor import FrameEditor
from framecode.events import EditorEvent
from framecode.exceptions import TreeImportError
from framecode.frames.emitter import EmitResult, TextEmitter
from framecode.frames.importer import SyntaxNode
from framecode.frames.serialization import json_to_tree
from framecode.options import EditorOptions, EmitterOptions, ImporterOptions

logger = logging.getLogger(__name__)


def _read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _write_text(text: str, out: str | None) -> None:
    if out:
        Path(out).write_text(text, encoding="utf-8")
        logger.info(f"Wrote {out}")
    else:
        sys.stdout.write(text)


def _print_program_rich(result: EmitResult) -> None:
    from rich.console import Console
    from rich.syntax import Syntax

    console = Console()
    console.print(Syntax(result.text, "python", line_numbers=True, start_line=0))


def _print_position_map_rich(result: EmitResult) -> None:
    from rich.console import Console
    from rich.table import Table

    table = Table(title="Position map")
    table.add_column("Line", justify="right")
    table.add_column("Frame", justify="right")
    table.add_column("Slots (label: start+length)")
    for line, positions in sorted(result.position_map.items()):
        slots = ", ".join(f"{slot.label_index}: {slot.start}+{slot.length}" for slot in positions.slots)
        table.add_row(str(line), str(positions.frame_id), slots)
    Console().print(table)


def handle_emit_command(args: argparse.Namespace) -> int:
    """Emit the program text (or position map) of a snapshot."""
    store = json_to_tree(_read_text(args.snapshot))
    result = TextEmitter(store, EmitterOptions(indent=args.indent)).emit()

    if args.rich and not args.out:
        if args.position_map:
            _print_position_map_rich(result)
        else:
            _print_program_rich(result)
        return EXIT_SUCCESS

    if args.position_map:
        _write_text(json.dumps(result.position_map_to_dict(), indent=2) + "\n", args.out)
    else:
        _write_text(result.text, args.out)
    return EXIT_SUCCESS


def handle_check_command(args: argparse.Namespace) -> int:
    """Report the structural invariant violations of a snapshot."""
    store = json_to_tree(_read_text(args.snapshot), validate=False)
    violations = store.check_invariants(raise_on_error=False)

    if args.rich:
        from rich.console import Console
        from rich.table import Table

        console = Console()
        if not violations:
            console.print(f"[green]OK[/green] {len(store)} frames, no violations")
        else:
            table = Table(title=f"{len(violations)} invariant violation(s)")
            table.add_column("#", justify="right")
            table.add_column("Violation", style="red")
            for index, violation in enumerate(violations, 1):
                table.add_row(str(index), violation)
            console.print(table)
    else:
        if not violations:
            print(f"OK: {len(store)} frames, no violations")
        for violation in violations:
            print(violation)

    return EXIT_VALIDATION_ERROR if violations else EXIT_SUCCESS


def handle_import_command(args: argparse.Namespace) -> int:
    """Build frames from a JSON syntax tree and output the resulting snapshot."""
    try:
        tree_data = json.loads(_read_text(args.tree))
    except json.JSONDecodeError as e:
        raise TreeImportError(f"Syntax tree is not valid JSON: {e}", original_error=e) from e
    tree = SyntaxNode.from_dict(tree_data)
    options = EditorOptions(importer=ImporterOptions(unsupported_constructs=args.unsupported))
    events: list[EditorEvent] = []

    if args.into:
        editor = FrameEditor(json_to_tree(_read_text(args.into)), options, events.append)
        success = editor.import_from_parsed_text(tree)
    else:
        editor = FrameEditor(options=options, event_callback=events.append)
        success = editor.load_program(tree)

    for event in events:
        detail = event.metadata.get("error") or event.metadata.get("node_kind", "")
        print(f"{event} {detail}".rstrip(), file=sys.stderr)

    if not success:
        logger.error(f"Import of {args.tree} failed")
        return EXIT_IMPORT_ERROR

    if args.emit:
        _write_text(editor.emit().text, args.out)
    else:
        _write_text(editor.to_snapshot(indent=2) + "\n", args.out)
    return EXIT_SUCCESS


COMMAND_HANDLERS = {
    "emit": handle_emit_command,
    "check": handle_check_command,
    "import": handle_import_command,
}


def dispatch_command(args: argparse.Namespace) -> int:
    """Run the handler of the parsed sub-command."""
    return COMMAND_HANDLERS[args.command](args)
