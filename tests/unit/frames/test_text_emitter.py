#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for program text emission and the position map."""

import pytest

from framecode.frames import (
    CaretPosition,
    Cursor,
    FrameTreeStore,
    FrameType,
    LinePositions,
    SlotPosition,
    TextEmitter,
    emit_program,
)
from framecode.options import EmitterOptions

EXAMPLE_TEXT = "x = 1 \nif x > 0 :\n    return x \n"


@pytest.mark.unit
class TestEmission:
    """Test the emitted text."""

    def test_empty_program(self, empty_store: FrameTreeStore) -> None:
        """Test that containers contribute no text."""
        result = TextEmitter(empty_store).emit()
        assert result.text == ""
        assert result.position_map == {}

    def test_example_program(self, example_store: FrameTreeStore) -> None:
        """Test the reference program."""
        assert TextEmitter(example_store).emit().text == EXAMPLE_TEXT

    def test_emission_is_repeatable(self, example_store: FrameTreeStore) -> None:
        """Test that repeated calls on an unchanged tree give identical results."""
        emitter = TextEmitter(example_store)
        first = emitter.emit()
        second = emitter.emit()
        assert first == second

    def test_empty_body_emits_header_only(self, empty_store: FrameTreeStore) -> None:
        """Test a block without a body."""
        if_id = empty_store.insert(FrameType.IF)
        empty_store.set_slot_code(if_id, 0, "ok")
        assert emit_program(empty_store).text == "if ok :\n"

    def test_joint_frames_at_head_indentation(self, empty_store: FrameTreeStore) -> None:
        """Test that continuations are emitted at the head's level."""
        if_id = empty_store.insert(FrameType.IF)
        empty_store.set_slot_code(if_id, 0, "c")
        empty_store.insert(FrameType.CONTINUE)
        empty_store.set_cursor(Cursor(if_id, CaretPosition.BELOW))
        empty_store.insert(FrameType.ELSE)
        empty_store.insert(FrameType.BREAK)

        assert emit_program(empty_store).text == "if c :\n    continue\nelse :\n    break\n"

    def test_containers_in_order(self, empty_store: FrameTreeStore) -> None:
        """Test that imports come first, then function definitions, then main code."""
        main_id = empty_store.insert(FrameType.EXPRESSION)
        empty_store.set_slot_code(main_id, 0, "main()")
        empty_store.set_cursor(Cursor(-2, CaretPosition.BODY))
        def_id = empty_store.insert(FrameType.FUNCDEF)
        empty_store.set_slot_code(def_id, 0, "main")
        empty_store.set_cursor(Cursor(-1, CaretPosition.BODY))
        import_id = empty_store.insert(FrameType.IMPORT)
        empty_store.set_slot_code(import_id, 0, "sys")

        assert emit_program(empty_store).text == "import sys \ndef main ( ) :\nmain() \n"

    def test_hidden_label_is_skipped(self, empty_store: FrameTreeStore) -> None:
        """Test the optional ``as`` part of a with frame."""
        with_id = empty_store.insert(FrameType.WITH)
        empty_store.set_slot_code(with_id, 0, "open(f)")
        empty_store.set_slot_code(with_id, 1, "fh")
        assert emit_program(empty_store).text == "with open(f) as fh :\n"

        empty_store.set_slot_shown(with_id, 1, False)
        result = emit_program(empty_store)
        assert result.text == "with open(f) :\n"
        assert [slot.label_index for slot in result.position_map[0].slots] == [0]

    def test_custom_indent(self, example_store: FrameTreeStore) -> None:
        """Test a tab indentation."""
        result = TextEmitter(example_store, EmitterOptions(indent="\t")).emit()
        assert result.text == "x = 1 \nif x > 0 :\n\treturn x \n"
        assert result.position_map[2].slots[0].start == 8

    def test_subtree(self, example_store: FrameTreeStore) -> None:
        """Test emitting a single frame and its body."""
        result = TextEmitter(example_store).emit(2)
        assert result.text == "if x > 0 :\n    return x \n"
        assert result.frame_at_line(0) == 2
        assert result.frame_at_line(1) == 3


@pytest.mark.unit
class TestPositionMap:
    """Test the line and slot positions recorded during emission."""

    def test_example_map(self, example_store: FrameTreeStore) -> None:
        """Test every entry of the reference program's map."""
        position_map = TextEmitter(example_store).emit().position_map
        assert position_map == {
            0: LinePositions(1, (SlotPosition(0, 0, 2), SlotPosition(1, 4, 2))),
            1: LinePositions(2, (SlotPosition(0, 3, 6),)),
            2: LinePositions(3, (SlotPosition(0, 11, 2),)),
        }

    def test_slot_positions_cover_the_code(self, example_store: FrameTreeStore) -> None:
        """Test that each recorded span holds the slot's code plus its trailing space."""
        result = TextEmitter(example_store).emit()
        lines = result.text.split("\n")
        for line, positions in result.position_map.items():
            frame = example_store.get_frame(positions.frame_id)
            for slot in positions.slots:
                span = lines[line][slot.start : slot.start + slot.length]
                assert span == frame.slot_code(slot.label_index) + " "

    def test_slot_at(self) -> None:
        """Test column lookup on a line."""
        positions = LinePositions(1, (SlotPosition(0, 0, 2), SlotPosition(1, 4, 2)))
        assert positions.slot_at(0) == 0
        assert positions.slot_at(1) == 0
        assert positions.slot_at(2) is None
        assert positions.slot_at(5) == 1
        assert positions.slot_at(6) is None

    def test_to_dict(self, example_store: FrameTreeStore) -> None:
        """Test the JSON-compatible form of the map."""
        data = TextEmitter(example_store).emit().position_map_to_dict()
        assert data["1"] == {"frameId": 2, "slots": [{"labelIndex": 0, "start": 3, "length": 6}]}
        assert set(data) == {"0", "1", "2"}


@pytest.mark.unit
class TestDisabledFrames:
    """Test the delimited blocks around disabled frames."""

    def test_disabled_first_frame(self, example_store: FrameTreeStore) -> None:
        """Test a disabled run followed by enabled code."""
        example_store.set_disabled(1, True)
        result = emit_program(example_store)
        assert result.text == '"""\nx = 1 \n"""\nif x > 0 :\n    return x \n'
        assert sorted(result.position_map) == [1, 3, 4]
        assert result.frame_at_line(0) is None
        assert result.frame_at_line(1) == 1

    def test_disabled_run_at_end_is_closed(self, example_store: FrameTreeStore) -> None:
        """Test that an open disabled run is closed when emission ends."""
        example_store.set_disabled(2, True)
        result = emit_program(example_store)
        assert result.text == 'x = 1 \n"""\nif x > 0 :\n    return x \n"""'
        assert result.text.count('"""') == 2

    def test_disabled_nested_frame_keeps_indentation(self, example_store: FrameTreeStore) -> None:
        """Test delimiters of a disabled run inside a block."""
        example_store.set_disabled(3, True)
        result = emit_program(example_store)
        assert result.text == 'x = 1 \nif x > 0 :\n    """\n    return x \n    """'
        assert result.frame_at_line(3) == 3

    def test_custom_delimiter(self, example_store: FrameTreeStore) -> None:
        """Test the single-quote delimiter option."""
        example_store.set_disabled(1, True)
        options = EmitterOptions(disabled_block_delimiter="'''")
        assert TextEmitter(example_store, options).emit().text.startswith("'''\nx = 1 \n'''\n")
