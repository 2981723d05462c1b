#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/diagnostics.py
"""Route lint and runtime errors back onto frames.

Linters and the execution engine report problems against the emitted program
text. The position map recorded during emission tells which frame, and which
slot of it, produced each line; this module uses it to attach the messages to
the frame tree as annotations. Annotations never interrupt editing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from framecode.frames.emitter import PositionMap
from framecode.frames.store import FrameTreeStore

logger = logging.getLogger(__name__)

_RUNTIME_LINE_PATTERN = re.compile(r" on line (\d+)")


@dataclass(frozen=True)
class LintMessage:
    """One problem reported by a linter.

    Parameters
    ----------
    line : int
        0-based line of the emitted text
    column : int
        0-based column offset on that line
    message : str
        Description of the problem

    """

    line: int
    column: int
    message: str


@dataclass(frozen=True)
class RuntimeFailure:
    """Failure reported by the execution engine.

    Parameters
    ----------
    line : int or None
        1-based line of the emitted text the failure happened on, if known
    message : str
        Error message without any line reference

    """

    line: Optional[int]
    message: str


def apply_lint_messages(store: FrameTreeStore, position_map: PositionMap, messages: list[LintMessage]) -> int:
    """Attach lint messages to the frames and slots they point at.

    A message whose column falls inside a slot annotates that slot; other
    messages on a mapped line annotate the frame as a whole. Messages on lines
    without a map entry (disabled-block delimiters, text outside the tree) are
    ignored. Previous lint annotations are cleared first.

    Parameters
    ----------
    store : FrameTreeStore
        Tree to annotate
    position_map : PositionMap
        Map recorded when the linted text was emitted
    messages : list of LintMessage
        Problems reported by the linter

    Returns
    -------
    int
        Number of messages attached to the tree

    """
    store.clear_errors()
    applied = 0
    for lint in messages:
        positions = position_map.get(lint.line)
        if positions is None or positions.frame_id not in store:
            logger.debug(f"No frame for lint message on line {lint.line}: {lint.message}")
            continue
        label_index = positions.slot_at(lint.column)
        if label_index is not None:
            store.set_slot_error(positions.frame_id, label_index, lint.message)
        else:
            store.set_frame_error(positions.frame_id, lint.message)
        applied += 1
    return applied


def format_lint_messages(messages: list[LintMessage]) -> str:
    """Return lint messages as ``line:column | message`` lines, each preceded by a newline."""
    return "".join(f"\n{lint.line}:{lint.column} | {lint.message}" for lint in messages)


def parse_runtime_error_text(error_text: str) -> RuntimeFailure:
    """Extract the line number from an execution engine error message.

    Examples
    --------
    >>> parse_runtime_error_text("NameError: name 'y' is not defined on line 3")
    RuntimeFailure(line=3, message="NameError: name 'y' is not defined")

    """
    match = _RUNTIME_LINE_PATTERN.search(error_text)
    line = int(match.group(1)) if match else None
    return RuntimeFailure(line=line, message=_RUNTIME_LINE_PATTERN.sub("", error_text))


def apply_runtime_failure(
    store: FrameTreeStore,
    position_map: PositionMap,
    failure: RuntimeFailure,
    preamble: str = "Runtime error",
) -> Optional[int]:
    """Attach a runtime failure to the frame that produced the failing line.

    Every slot of that frame receives ``"<preamble> (<message>)"`` and the
    frame keeps the raw message as its last runtime error.

    Returns
    -------
    int or None
        Id of the annotated frame, or None if the line maps to no frame

    """
    if failure.line is None:
        return None
    positions = position_map.get(failure.line - 1)
    if positions is None or positions.frame_id not in store:
        logger.debug(f"Runtime failure on unmapped line {failure.line}")
        return None

    frame = store.get_frame(positions.frame_id)
    frame.last_runtime_error = failure.message
    for label_index in frame.slots:
        store.set_slot_error(frame.id, label_index, f"{preamble} ({failure.message})")
    logger.info(f"Runtime error mapped to frame {frame.id}: {failure.message}")
    return frame.id
