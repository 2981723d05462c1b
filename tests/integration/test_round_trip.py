#  Copyright (c) 2025 Tom Villani, Ph.D.
"""End-to-end tests: build, emit, re-import, navigate and annotate programs."""

import pytest
from syntax_trees import (
    assign,
    call,
    comparison,
    example_program_tree,
    funcdef,
    if_stmt,
    import_name,
    name,
    number,
    program,
    return_stmt,
    suite,
)

from framecode.constants import IMPORTS_CONTAINER_ID, MAIN_CONTAINER_ID
from framecode.diagnostics import LintMessage, RuntimeFailure
from framecode.editor import FrameEditor
from framecode.frames import CaretPosition, Cursor, FrameTreeStore, SyntaxNode

EXAMPLE_TEXT = "x = 1 \nif x > 0 :\n    return x \n"


class CannedParser:
    """Parser that knows the syntax tree of a fixed set of sources."""

    def __init__(self, trees: dict[str, SyntaxNode]):
        self.trees = trees

    def parse(self, source: str) -> SyntaxNode:
        return self.trees[source]


class SubstringLinter:
    """Linter flagging every occurrence of one word."""

    def __init__(self, word: str):
        self.word = word

    def lint(self, source: str) -> list[LintMessage]:
        messages = []
        for line, text in enumerate(source.split("\n")):
            column = text.find(self.word)
            if column >= 0:
                messages.append(LintMessage(line, column, f"'{self.word}' is not allowed"))
        return messages


class LineEngine:
    """Execution engine failing on the first line that contains a marker."""

    def __init__(self, marker: str):
        self.marker = marker

    def run(self, source: str, position_map) -> RuntimeFailure:
        line = next(index for index, text in enumerate(source.split("\n"), 1) if self.marker in text)
        return RuntimeFailure(line, f"failure at {self.marker}")


def shape(store: FrameTreeStore, frame_id: int) -> tuple:
    """Return a frame's variant, slot texts, body and joint group without ids."""
    frame = store.get_frame(frame_id)
    return (
        frame.kind,
        tuple(frame.slot_code(index) for index in sorted(frame.slots)),
        tuple(shape(store, child_id) for child_id in frame.children_ids),
        tuple(shape(store, joint_id) for joint_id in frame.joint_frame_ids),
    )


def sign_program() -> SyntaxNode:
    """Return an import, a function with an if/elif/else chain, and a call to it."""
    chain = if_stmt(
        comparison("x", ">", "0"),
        suite(return_stmt(number("1"))),
        elifs=((comparison("x", "<", "0"), suite(return_stmt(number("-1")))),),
        else_body=suite(return_stmt(number("0"))),
    )
    return program(
        import_name("math"),
        funcdef("sign", [name("x")], suite(chain)),
        assign("y", call("sign", number("3"))),
    )


@pytest.mark.integration
class TestRoundTrip:
    """Test that emitted text imports back into the same frames."""

    def test_example_program(self, example_store: FrameTreeStore) -> None:
        """Test the reference program built by hand, emitted, parsed and imported."""
        source = FrameEditor(example_store).emit().text
        assert source == EXAMPLE_TEXT

        editor = FrameEditor()
        assert editor.import_source(source, CannedParser({EXAMPLE_TEXT: example_program_tree()}))

        assert editor.emit().text == EXAMPLE_TEXT
        assert shape(editor.store, MAIN_CONTAINER_ID) == shape(example_store, MAIN_CONTAINER_ID)

    def test_loaded_program_survives_emit_and_reload(self) -> None:
        """Test a program spread over all three containers."""
        first = FrameEditor()
        assert first.load_program(sign_program())
        text = first.emit().text
        assert "    elif x < 0 :\n        return -1 \n    else :\n" in text

        second = FrameEditor()
        assert second.load_program(CannedParser({text: sign_program()}).parse(text))
        assert second.emit().text == text
        assert shape(second.store, 0) == shape(first.store, 0)

    def test_snapshot_restores_program_and_cursor(self) -> None:
        """Test that a snapshot carries the tree and the cursor."""
        editor = FrameEditor()
        editor.load_program(sign_program())
        snapshot = editor.to_snapshot()
        text = editor.emit().text
        cursor = editor.cursor

        editor.handle_key("Backspace")
        editor.restore_snapshot(snapshot)

        assert editor.emit().text == text
        assert editor.cursor == cursor


@pytest.mark.integration
class TestEditingSession:
    """Test navigation and diagnostics over an imported program."""

    def test_down_visits_every_frame(self) -> None:
        """Test that repeated Down reaches every frame, in text order."""
        editor = FrameEditor()
        editor.load_program(sign_program())
        editor.store.set_cursor(Cursor(IMPORTS_CONTAINER_ID, CaretPosition.BODY))

        visited = []
        for _ in range(50):
            before = editor.cursor
            editor.handle_key("ArrowDown")
            if editor.cursor == before:
                break
            if editor.cursor.frame_id not in visited and editor.cursor.frame_id not in editor.store.container_ids:
                visited.append(editor.cursor.frame_id)

        emitted_order = [positions.frame_id for _, positions in sorted(editor.emit().position_map.items())]
        assert visited == emitted_order

    def test_lint_lands_on_slots(self) -> None:
        """Test lint messages found in the emitted text appear on the right slots."""
        editor = FrameEditor()
        editor.load_program(sign_program())

        messages = editor.lint(SubstringLinter("sign"))

        assert len(messages) == 2
        errors = {
            (frame.kind.value, index)
            for frame in editor.store.frames.values()
            for index, label_slots in frame.slots.items()
            if label_slots.error
        }
        assert errors == {("funcdef", 0), ("varassign", 1)}

    def test_runtime_error_on_nested_frame(self) -> None:
        """Test a failure inside the elif branch."""
        editor = FrameEditor()
        editor.load_program(sign_program())

        frame_id = editor.run(LineEngine("return -1"))

        frame = editor.store.get_frame(frame_id)
        assert frame.kind.value == "return"
        assert frame.slot_code(0) == "-1"
        assert frame.last_runtime_error == "failure at return -1"

    def test_disabled_branch_keeps_mapping(self) -> None:
        """Test that disabling frames shifts lines without breaking the map."""
        editor = FrameEditor()
        editor.load_program(sign_program())
        funcdef_frame = next(frame for frame in editor.store.frames.values() if frame.kind.value == "funcdef")
        editor.store.set_disabled(funcdef_frame.id, True)

        result = editor.emit()
        assert result.text.count('"""') == 2
        frame_id = editor.run(LineEngine("y = "))
        assert editor.store.get_frame(frame_id).kind.value == "varassign"
