#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/frames/emitter.py
"""Frame tree to program text.

The emitter walks the tree depth first. Containers are unwrapped, statements
produce one line each, and blocks produce their header line followed by their
indented body and by their joint continuations at the header's indentation.

Alongside the text it records a position map: for every emitted statement line
(0-based), the frame it came from and where each editable slot sits on that
line. Lint and runtime errors reported against the text are routed back onto
frames and slots through this map.

Disabled frames are wrapped in a triple-quoted block so the text stays valid
Python while the disabled code is inert::

    x = 1
    \"\"\"
    y = 2
    \"\"\"

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from framecode.constants import ROOT_FRAME_ID
from framecode.frames.nodes import Frame
from framecode.frames.slots import render_slot
from framecode.frames.store import FrameTreeStore
from framecode.frames.visitors import FrameVisitor
from framecode.options.emitter import EmitterOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotPosition:
    """Location of one editable slot on an emitted line.

    Parameters
    ----------
    label_index : int
        Label index of the slot in its frame
    start : int
        0-based column where the slot's code starts
    length : int
        Rendered length of the slot, including its trailing space

    """

    label_index: int
    start: int
    length: int

    def contains(self, column: int) -> bool:
        """Return True if ``column`` falls inside the slot."""
        return self.start <= column <= self.start + self.length - 1


@dataclass(frozen=True)
class LinePositions:
    """Frame and slot positions of one emitted line."""

    frame_id: int
    slots: tuple[SlotPosition, ...] = ()

    def slot_at(self, column: int) -> Optional[int]:
        """Return the label index of the slot covering ``column``, if any."""
        for slot in self.slots:
            if slot.contains(column):
                return slot.label_index
        return None


PositionMap = dict[int, LinePositions]


@dataclass(frozen=True)
class EmitResult:
    """Program text and its position map.

    Parameters
    ----------
    text : str
        Emitted program text
    position_map : dict of int to LinePositions
        0-based line number to the frame and slots that produced it

    """

    text: str
    position_map: PositionMap = field(default_factory=dict)

    def frame_at_line(self, line: int) -> Optional[int]:
        """Return the id of the frame emitted on ``line`` (0-based), if any."""
        positions = self.position_map.get(line)
        return positions.frame_id if positions is not None else None

    def position_map_to_dict(self) -> dict[str, Any]:
        """Return the position map as JSON-compatible data."""
        return {
            str(line): {
                "frameId": positions.frame_id,
                "slots": [
                    {"labelIndex": slot.label_index, "start": slot.start, "length": slot.length}
                    for slot in positions.slots
                ],
            }
            for line, positions in self.position_map.items()
        }


class _EmissionVisitor(FrameVisitor):
    """Single-use visitor holding the state of one emission pass."""

    def __init__(self, store: FrameTreeStore, options: EmitterOptions):
        self.store = store
        self.options = options
        self.chunks: list[str] = []
        self.position_map: PositionMap = {}
        self.line = 0
        self.indent = ""
        self.in_disabled_block = False
        self.disabled_indent = ""

    def _delimiter(self) -> str:
        return f"{self.disabled_indent}{self.options.disabled_block_delimiter}"

    def emit_frames(self, frame_ids: list[int], indent: str) -> None:
        saved_indent = self.indent
        for frame_id in frame_ids:
            frame = self.store.get_frame(frame_id)
            if frame.is_disabled != self.in_disabled_block:
                self.in_disabled_block = frame.is_disabled
                if frame.is_disabled:
                    self.disabled_indent = indent
                self.chunks.append(self._delimiter() + "\n")
                self.line += 1
            self.indent = indent
            frame.accept(self)
        self.indent = saved_indent

    def finish(self) -> EmitResult:
        if self.in_disabled_block:
            self.in_disabled_block = False
            self.chunks.append(self._delimiter())
        return EmitResult(text="".join(self.chunks), position_map=self.position_map)

    def _emit_header(self, frame: Frame) -> None:
        text = self.indent
        positions: list[SlotPosition] = []
        for label_index, label in enumerate(frame.frame_type.labels):
            label_slots = frame.slots.get(label_index) if label.has_slot else None
            if label.hidable and label_slots is not None and not label_slots.shown:
                continue
            text += label.text
            if label.has_slot:
                code = render_slot(label_slots.content) if label_slots is not None else ""
                positions.append(SlotPosition(label_index, len(text), len(code) + 1))
                text += code + " "
        self.chunks.append(text + "\n")
        self.position_map[self.line] = LinePositions(frame.id, tuple(positions))
        self.line += 1

    def visit_container(self, frame: Frame) -> None:
        self.emit_frames(frame.children_ids, "")

    def visit_block(self, frame: Frame) -> None:
        indent = self.indent
        self._emit_header(frame)
        # An empty body contributes no line at all
        self.emit_frames(frame.children_ids, indent + self.options.indent)
        self.emit_frames(frame.joint_frame_ids, indent)

    def visit_statement(self, frame: Frame) -> None:
        self._emit_header(frame)


class TextEmitter:
    """Turns a frame tree into program text and a position map.

    Parameters
    ----------
    store : FrameTreeStore
        Tree to emit; only read
    options : EmitterOptions, optional
        Indentation and disabled-block delimiter

    """

    def __init__(self, store: FrameTreeStore, options: Optional[EmitterOptions] = None):
        self.store = store
        self.options = options or EmitterOptions()

    def emit(self, frame_id: int = ROOT_FRAME_ID) -> EmitResult:
        """Emit the tree (or the subtree under ``frame_id``).

        Each call uses fresh emission state, so calls are independent and
        repeated calls on an unchanged tree give identical results.

        Returns
        -------
        EmitResult
            Program text and position map

        """
        visitor = _EmissionVisitor(self.store, self.options)
        if frame_id == ROOT_FRAME_ID:
            self.store.get_frame(ROOT_FRAME_ID).accept(visitor)
        else:
            visitor.emit_frames([frame_id], "")
        result = visitor.finish()
        logger.debug(f"Emitted {visitor.line} lines")
        return result


def emit_program(store: FrameTreeStore, options: Optional[EmitterOptions] = None) -> EmitResult:
    """Emit the whole program held by ``store``."""
    return TextEmitter(store, options).emit()
