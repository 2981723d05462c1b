#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/frames/nodes.py
"""Frame node classes.

This module defines the node type of the frame tree together with the small
value types that travel with it: the labelled slot wrapper, the caret position
and the cursor.

A frame takes part in two adjacency relations:

- ``children_ids``: the frame's body, owned by its ``parent_id``;
- ``joint_frame_ids``: the joint continuations (``elif``, ``else``,
  ``except``, ``finally``) stored only on the head of a joint group. A joint
  frame points back to its head through ``joint_parent_id`` and keeps
  ``parent_id`` at 0.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from framecode.frames.definitions import FrameDefinition, FrameType
from framecode.frames.slots import SlotStructure, leaf_structure, render_slot

if TYPE_CHECKING:
    from framecode.frames.visitors import FrameVisitor


class CaretPosition(str, Enum):
    """Where the caret sits relative to its frame."""

    BODY = "caretBody"
    BELOW = "caretBelow"


class RemovalMode(str, Enum):
    """How :meth:`FrameTreeStore.remove` treats the removed frame's content.

    HARD deletes the frame with its whole body and, for a joint head, its
    joint continuations. MERGE keeps the bodies and splices them in place of
    the removed frame.
    """

    HARD = "hard"
    MERGE = "merge"


@dataclass
class LabelSlots:
    """Content of one labelled slot.

    Parameters
    ----------
    content : SlotStructure
        Root structure of the slot
    shown : bool, default True
        Whether the label and slot are displayed; only meaningful for hidable
        labels such as the ``as`` part of a ``with`` frame
    error : str, default ""
        Lint annotation attached to the slot

    """

    content: SlotStructure = field(default_factory=leaf_structure)
    shown: bool = True
    error: str = ""

    @property
    def code(self) -> str:
        """Rendered code of the slot."""
        return render_slot(self.content)


@dataclass
class Frame:
    """A statement or compound-statement header in the frame tree.

    Parameters
    ----------
    id : int
        Unique identifier; 0 is the implicit root, -1 to -3 the containers
    frame_type : FrameDefinition
        Static descriptor of the variant
    parent_id : int, default 0
        Owner of the body list holding this frame (0 for joint frames)
    children_ids : list of int
        Body frames in order
    joint_parent_id : int, default 0
        Head of the joint group when this frame is a joint continuation
    joint_frame_ids : list of int
        Joint continuations, only populated on a head frame
    slots : dict of int to LabelSlots
        Slot content keyed by label index
    is_disabled : bool, default False
        Whether the frame is excluded from execution
    is_selected : bool, default False
        Selection flag for the host UI
    is_visible : bool, default True
        Visibility flag for the host UI
    is_collapsed : bool, default False
        Collapse flag for the host UI
    last_runtime_error : str, default ""
        Message of the last runtime failure mapped onto this frame
    error : str, default ""
        Frame-level lint annotation (errors outside any slot)

    """

    id: int
    frame_type: FrameDefinition
    parent_id: int = 0
    children_ids: list[int] = field(default_factory=list)
    joint_parent_id: int = 0
    joint_frame_ids: list[int] = field(default_factory=list)
    slots: dict[int, LabelSlots] = field(default_factory=dict)
    is_disabled: bool = False
    is_selected: bool = False
    is_visible: bool = True
    is_collapsed: bool = False
    last_runtime_error: str = ""
    error: str = ""

    @property
    def kind(self) -> FrameType:
        """Variant identifier of the frame."""
        return self.frame_type.type

    @property
    def is_joint(self) -> bool:
        """Whether the frame is a joint continuation of another frame."""
        return self.joint_parent_id != 0

    @property
    def is_container(self) -> bool:
        """Whether the frame is one of the fixed top-level containers."""
        return self.frame_type.is_container

    @property
    def allows_children(self) -> bool:
        """Whether the frame owns a body."""
        return self.frame_type.allow_children

    def slot_code(self, label_index: int) -> str:
        """Return the rendered code of the slot at ``label_index``."""
        return self.slots[label_index].code

    def accept(self, visitor: FrameVisitor) -> Any:
        """Accept a visitor for processing this frame.

        Containers, blocks (frames owning a body) and statements are
        dispatched to separate visit methods.
        """
        if self.frame_type.is_container or self.frame_type.type is FrameType.ROOT:
            return visitor.visit_container(self)
        if self.frame_type.allow_children:
            return visitor.visit_block(self)
        return visitor.visit_statement(self)


def make_frame(
    frame_id: int,
    frame_type: FrameDefinition,
    slots: Optional[dict[int, LabelSlots]] = None,
    **kwargs: Any,
) -> Frame:
    """Create a frame with an empty slot for every slot-bearing label.

    Parameters
    ----------
    frame_id : int
        Identifier of the new frame
    frame_type : FrameDefinition
        Variant descriptor
    slots : dict, optional
        Slot content to use instead of the empty defaults, keyed by label index
    **kwargs : Any
        Any other :class:`Frame` field

    Returns
    -------
    Frame
        The new, unlinked frame

    """
    filled: dict[int, LabelSlots] = {index: LabelSlots() for index in frame_type.slot_label_indices}
    if slots:
        filled.update(slots)
    return Frame(id=frame_id, frame_type=frame_type, slots=filled, **kwargs)


@dataclass(frozen=True)
class Cursor:
    """Current edit position.

    Parameters
    ----------
    frame_id : int
        Frame the caret belongs to
    caret : CaretPosition
        Inside the frame's body or below the frame
    slot_index : int or None, default None
        Label index of the slot holding keyboard focus, if any

    """

    frame_id: int
    caret: CaretPosition = CaretPosition.BODY
    slot_index: Optional[int] = None

    def with_focus(self, slot_index: Optional[int]) -> Cursor:
        """Return a copy of the cursor with a different focused slot."""
        return Cursor(self.frame_id, self.caret, slot_index)
