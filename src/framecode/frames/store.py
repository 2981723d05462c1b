#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/frames/store.py
"""Canonical frame tree and cursor.

:class:`FrameTreeStore` exclusively owns every :class:`Frame` of a program.
It addresses frames by integer id and keeps the two adjacency relations
(bodies and joint groups) consistent through its mutation methods. Every
mutation either completes or leaves the tree untouched.

Examples
--------
Build ``if x > 0 :`` with a ``return x`` inside:

    >>> from framecode.frames.definitions import FrameType
    >>> store = FrameTreeStore.create_default()
    >>> if_id = store.insert(FrameType.IF)
    >>> store.set_slot_code(if_id, 0, "x > 0")
    >>> return_id = store.insert(FrameType.RETURN)
    >>> store.get_frame(return_id).parent_id == if_id
    True

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Union

from framecode.constants import (
    DEFAULT_FIRST_FRAME_ID,
    FUNCDEFS_CONTAINER_ID,
    IMPORTS_CONTAINER_ID,
    MAIN_CONTAINER_ID,
    ROOT_FRAME_ID,
)
from framecode.exceptions import FrameNotFoundError, FrameTreeError
from framecode.frames.definitions import FrameDefinition, FrameType, get_definition
from framecode.frames.nodes import CaretPosition, Cursor, Frame, LabelSlots, RemovalMode, make_frame
from framecode.frames.slots import SlotStructure, leaf_structure
from framecode.frames.visitors import InvariantVisitor

logger = logging.getLogger(__name__)

CONTAINER_LAYOUT: tuple[tuple[int, FrameType], ...] = (
    (IMPORTS_CONTAINER_ID, FrameType.IMPORTS_CONTAINER),
    (FUNCDEFS_CONTAINER_ID, FrameType.FUNCDEFS_CONTAINER),
    (MAIN_CONTAINER_ID, FrameType.MAIN_CONTAINER),
)


@dataclass(frozen=True)
class InsertionPoint:
    """Where a new frame would land.

    Parameters
    ----------
    owner_id : int
        Frame owning the target list
    index : int
        Position in the target list
    joint : bool
        True when the target list is the owner's ``joint_frame_ids``

    """

    owner_id: int
    index: int
    joint: bool = False


class FrameTreeStore:
    """Frame tree with its cursor.

    Parameters
    ----------
    frames : dict of int to Frame
        Every frame of the tree, keyed by id, including the root
    cursor : Cursor
        Current edit position
    next_id : int, optional
        Next id to hand out; defaults to one past the largest id in use

    Notes
    -----
    Methods referencing an id that is not in the tree raise
    :class:`FrameNotFoundError`. Callers are expected to pass ids they got
    from the store, so this signals a bug rather than a user error.

    """

    def __init__(self, frames: dict[int, Frame], cursor: Cursor, next_id: Optional[int] = None):
        if ROOT_FRAME_ID not in frames:
            raise FrameTreeError("A frame tree needs a root frame with id 0")
        self.frames = frames
        self.cursor = cursor
        if next_id is None:
            next_id = max(max(frames), DEFAULT_FIRST_FRAME_ID - 1) + 1
        self.next_id = next_id

    @classmethod
    def create_default(cls) -> FrameTreeStore:
        """Create an empty program: the root and its three containers.

        The cursor starts in the body of the main container.
        """
        root = make_frame(ROOT_FRAME_ID, get_definition(FrameType.ROOT))
        frames = {ROOT_FRAME_ID: root}
        for container_id, container_type in CONTAINER_LAYOUT:
            frames[container_id] = make_frame(container_id, get_definition(container_type), parent_id=ROOT_FRAME_ID)
            root.children_ids.append(container_id)
        return cls(frames, Cursor(MAIN_CONTAINER_ID, CaretPosition.BODY), DEFAULT_FIRST_FRAME_ID)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __contains__(self, frame_id: object) -> bool:
        return frame_id in self.frames

    def __len__(self) -> int:
        return len(self.frames)

    def get_frame(self, frame_id: int) -> Frame:
        """Return the frame with ``frame_id``.

        Raises
        ------
        FrameNotFoundError
            If no frame has that id

        """
        try:
            return self.frames[frame_id]
        except KeyError:
            raise FrameNotFoundError(frame_id) from None

    def children_of(self, frame_id: int) -> list[Frame]:
        """Return the body frames of ``frame_id`` in order."""
        return [self.get_frame(child_id) for child_id in self.get_frame(frame_id).children_ids]

    def joint_frames_of(self, frame_id: int) -> list[Frame]:
        """Return the joint continuations headed by ``frame_id`` in order."""
        return [self.get_frame(joint_id) for joint_id in self.get_frame(frame_id).joint_frame_ids]

    def head_of(self, frame_id: int) -> Frame:
        """Return the joint-group head of ``frame_id``, or the frame itself."""
        frame = self.get_frame(frame_id)
        return self.get_frame(frame.joint_parent_id) if frame.is_joint else frame

    def parent_of(self, frame_id: int) -> int:
        """Return the id of the body list owner ``frame_id`` logically lives in.

        A joint frame lives in the same list as its head. The root is its own
        parent.
        """
        if frame_id == ROOT_FRAME_ID:
            return ROOT_FRAME_ID
        return self.head_of(frame_id).parent_id

    @property
    def container_ids(self) -> list[int]:
        """Ids of the top-level containers in display order."""
        return list(self.get_frame(ROOT_FRAME_ID).children_ids)

    def ancestors(self, frame_id: int) -> list[Frame]:
        """Return the logical ancestors of ``frame_id``, nearest first, up to the root."""
        chain: list[Frame] = []
        current = frame_id
        while current != ROOT_FRAME_ID:
            frame = self.get_frame(current)
            if frame.is_joint:
                # A joint frame lives in the same body as its head
                current = self.get_frame(frame.joint_parent_id).parent_id
            else:
                current = frame.parent_id
            chain.append(self.get_frame(current))
        return chain

    def iter_frames(self, frame_id: int = ROOT_FRAME_ID, include_self: bool = False) -> Iterator[Frame]:
        """Iterate over a subtree in emission order.

        Each frame is followed by its body, then by its joint continuations
        (each followed by its own body).

        Parameters
        ----------
        frame_id : int, default 0
            Subtree root
        include_self : bool, default False
            Whether to yield the subtree root itself

        """
        frame = self.get_frame(frame_id)
        if include_self:
            yield frame
        for child_id in frame.children_ids:
            yield from self.iter_frames(child_id, include_self=True)
        for joint_id in frame.joint_frame_ids:
            yield from self.iter_frames(joint_id, include_self=True)

    def is_allowed_under(self, owner_id: int, frame_type: Union[FrameType, str]) -> bool:
        """Return True if ``frame_type`` may sit in the body of ``owner_id``.

        The owner must accept the variant in its body and no enclosing block
        may forbid it as a descendant.
        """
        kind = FrameType(frame_type)
        owner = self.get_frame(owner_id)
        if not owner.allows_children:
            return False
        if get_definition(kind).is_joint_frame or kind is FrameType.ROOT:
            return False
        if get_definition(kind).is_container:
            return owner_id == ROOT_FRAME_ID
        if owner.frame_type.forbids(kind):
            return False
        return not any(frame.frame_type.forbids_descendant(kind) for frame in self.ancestors(owner_id))

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def _joint_insertion_point(self, anchor: Frame, definition: FrameDefinition) -> Optional[InsertionPoint]:
        if not definition.is_joint_frame or anchor.is_container:
            return None
        head = self.head_of(anchor.id)
        if not head.frame_type.allow_joint_children:
            return None
        if not (anchor.frame_type.accepts_joint(definition.type) and head.frame_type.accepts_joint(definition.type)):
            return None
        index = 0 if anchor.id == head.id else head.joint_frame_ids.index(anchor.id) + 1
        if index < len(head.joint_frame_ids):
            following = self.get_frame(head.joint_frame_ids[index])
            if not definition.accepts_joint(following.kind):
                return None
        return InsertionPoint(head.id, index, joint=True)

    def insertion_point(self, frame_type: Union[FrameType, str]) -> Optional[InsertionPoint]:
        """Compute where :meth:`insert` would place a frame of ``frame_type``.

        Returns
        -------
        InsertionPoint or None
            None when the variant may not be inserted at the cursor

        """
        definition = get_definition(frame_type)
        if definition.is_container or definition.type is FrameType.ROOT:
            return None

        anchor = self.get_frame(self.cursor.frame_id)
        joint_point = self._joint_insertion_point(anchor, definition)
        if joint_point is not None:
            return joint_point

        point = self.body_insertion_point()
        if not self.is_allowed_under(point.owner_id, definition.type):
            return None
        return point

    def body_insertion_point(self) -> InsertionPoint:
        """Return the body position the cursor designates.

        In a body the position is the first slot of that body; below a frame
        it is right after the frame (or after its joint-group head).
        """
        anchor = self.get_frame(self.cursor.frame_id)
        in_body = self.cursor.caret is CaretPosition.BODY and anchor.allows_children
        if in_body or anchor.is_container or anchor.id == ROOT_FRAME_ID:
            return InsertionPoint(anchor.id, 0)
        head = self.head_of(anchor.id)
        owner_id = head.parent_id
        return InsertionPoint(owner_id, self.get_frame(owner_id).children_ids.index(head.id) + 1)

    def is_insertion_allowed(self, frame_type: Union[FrameType, str]) -> bool:
        """Return True if a frame of ``frame_type`` may be inserted at the cursor."""
        return self.insertion_point(frame_type) is not None

    def insert(self, frame_type: Union[FrameType, str]) -> Optional[int]:
        """Insert a new empty frame at the cursor.

        With the caret in a body the frame becomes the first child; below a
        frame it becomes the next sibling of that frame (or of its joint-group
        head). A joint variant accepted by the cursor frame is added to the
        joint group right after it instead. The cursor then moves onto the new
        frame: into its body when it has one, otherwise below it.

        Parameters
        ----------
        frame_type : FrameType or str
            Variant of the new frame

        Returns
        -------
        int or None
            Id of the new frame, or None when the variant is not allowed at
            the cursor (nothing is changed in that case)

        """
        point = self.insertion_point(frame_type)
        if point is None:
            logger.debug(f"Insertion of {frame_type!r} refused at {self.cursor}")
            return None

        definition = get_definition(frame_type)
        frame_id = self.next_id
        self.next_id += 1
        owner = self.get_frame(point.owner_id)
        if point.joint:
            frame = make_frame(frame_id, definition, joint_parent_id=owner.id)
            owner.joint_frame_ids.insert(point.index, frame_id)
        else:
            frame = make_frame(frame_id, definition, parent_id=owner.id)
            owner.children_ids.insert(point.index, frame_id)
        self.frames[frame_id] = frame

        caret = CaretPosition.BODY if definition.allow_children else CaretPosition.BELOW
        self.cursor = Cursor(frame_id, caret)
        logger.debug(f"Inserted {definition.type.value!r} frame {frame_id} into {owner.id} at {point.index}")
        return frame_id

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def _owning_list(self, frame: Frame) -> list[int]:
        if frame.is_joint:
            return self.get_frame(frame.joint_parent_id).joint_frame_ids
        return self.get_frame(frame.parent_id).children_ids

    def _discard(self, frame_id: int) -> None:
        frame = self.frames.pop(frame_id)
        for child_id in frame.children_ids:
            self._discard(child_id)
        for joint_id in frame.joint_frame_ids:
            self._discard(joint_id)

    def _merge_destination(self, frame: Frame) -> tuple[int, list[int]]:
        # Frame receiving the body on a merge, and the frames that move there
        if frame.is_joint:
            head = self.get_frame(frame.joint_parent_id)
            position = head.joint_frame_ids.index(frame.id)
            receiver_id = head.joint_frame_ids[position - 1] if position > 0 else head.id
            return receiver_id, list(frame.children_ids)
        moving = list(frame.children_ids)
        for joint_id in frame.joint_frame_ids:
            moving.extend(self.get_frame(joint_id).children_ids)
        return frame.parent_id, moving

    def can_merge(self, frame_id: int) -> bool:
        """Return True if ``frame_id`` can be merged away without losing any frame.

        Merging is impossible for the root and the containers, and when the
        frame receiving the body does not allow one of the children (a
        function body cannot move into the function definitions container).
        """
        frame = self.get_frame(frame_id)
        if frame_id == ROOT_FRAME_ID or frame.is_container:
            return False
        receiver_id, moving = self._merge_destination(frame)
        return all(self.is_allowed_under(receiver_id, self.get_frame(child_id).kind) for child_id in moving)

    def remove(self, frame_id: int, mode: RemovalMode = RemovalMode.HARD) -> None:
        """Remove a frame from the tree.

        Parameters
        ----------
        frame_id : int
            Frame to remove
        mode : RemovalMode, default RemovalMode.HARD
            HARD deletes the frame, its body and, for a joint head, its whole
            joint group. MERGE keeps the bodies: the children of the frame
            (and of its joint continuations, for a head) take its place in its
            parent's body. A merged joint continuation hands its children to
            the previous joint sibling, or to the head.

        Raises
        ------
        FrameTreeError
            If ``frame_id`` is the root or a container, or a MERGE would move
            a child where it is not allowed (see :meth:`can_merge`)

        """
        frame = self.get_frame(frame_id)
        if frame_id == ROOT_FRAME_ID or frame.is_container:
            raise FrameTreeError(f"Frame {frame_id} is a container and cannot be removed")

        owning_list = self._owning_list(frame)
        position = owning_list.index(frame_id)

        if mode is RemovalMode.HARD:
            del owning_list[position]
            self._discard(frame_id)
        else:
            if not self.can_merge(frame_id):
                raise FrameTreeError(f"Frame {frame_id} cannot be merged: its body is not allowed at the destination")
            receiver_id, moved = self._merge_destination(frame)
            for child_id in moved:
                self.get_frame(child_id).parent_id = receiver_id
            if frame.is_joint:
                self.get_frame(receiver_id).children_ids.extend(moved)
                del owning_list[position]
            else:
                owning_list[position : position + 1] = moved
            for joint_id in frame.joint_frame_ids:
                del self.frames[joint_id]
            del self.frames[frame_id]

        logger.debug(f"Removed frame {frame_id} ({mode.value})")
        if self.cursor.frame_id not in self.frames:
            self._repair_cursor(owning_list, position, frame)

    def _repair_cursor(self, owning_list: list[int], position: int, removed: Frame) -> None:
        if position > 0 and position - 1 < len(owning_list):
            self.cursor = Cursor(owning_list[position - 1], CaretPosition.BELOW)
        elif removed.is_joint:
            self.cursor = Cursor(removed.joint_parent_id, CaretPosition.BELOW)
        else:
            self.cursor = Cursor(removed.parent_id, CaretPosition.BODY)
        logger.debug(f"Cursor moved to {self.cursor} after removal")

    def count_descendants(self, frame_id: int, limit: Optional[int] = None) -> int:
        """Count the body and joint-group descendants of a frame.

        A joint continuation counts as one frame plus its own descendants, or
        as nothing when its body is empty.
        With a ``limit``, the count stops descending once it is reached; it is
        a soft ceiling, since a branch already entered is counted in full.

        Parameters
        ----------
        frame_id : int
            Frame whose descendants are counted
        limit : int, optional
            Count at which to stop looking further

        Returns
        -------
        int
            Number of descendants found

        """
        frame = self.get_frame(frame_id)
        count = len(frame.children_ids)
        if limit is not None and count >= limit:
            return count
        for child_id in frame.children_ids:
            count += self.count_descendants(child_id, limit)
        if limit is not None and count >= limit:
            return count
        for joint_id in frame.joint_frame_ids:
            # An empty continuation holds no code of its own
            if self.get_frame(joint_id).children_ids:
                count += 1
            count += self.count_descendants(joint_id, limit)
        return count

    # ------------------------------------------------------------------
    # Reordering and splicing
    # ------------------------------------------------------------------

    def reorder(self, frame_id: int, new_parent_id: int, new_index: int) -> None:
        """Move a frame to another position.

        A body frame moves to ``new_index`` of ``new_parent_id``'s body; a
        joint continuation moves to ``new_index`` of ``new_parent_id``'s joint
        group. The index is taken after the frame left its old list. Whether
        the variant is allowed at the destination is the caller's concern.

        Raises
        ------
        FrameTreeError
            If the frame is a container, or the destination is the frame
            itself or one of its descendants

        """
        frame = self.get_frame(frame_id)
        new_parent = self.get_frame(new_parent_id)
        if frame.is_container or frame_id == ROOT_FRAME_ID:
            raise FrameTreeError(f"Container {frame_id} cannot be moved")
        if new_parent_id == frame_id or any(f.id == new_parent_id for f in self.iter_frames(frame_id)):
            raise FrameTreeError(f"Frame {frame_id} cannot be moved inside itself")
        if frame.is_joint and new_parent.is_joint:
            raise FrameTreeError(f"Joint frame {frame_id} can only join a joint-group head")

        self._owning_list(frame).remove(frame_id)
        if frame.is_joint:
            target = new_parent.joint_frame_ids
            frame.joint_parent_id = new_parent_id
        else:
            target = new_parent.children_ids
            frame.parent_id = new_parent_id
        target.insert(max(0, min(new_index, len(target))), frame_id)
        logger.debug(f"Moved frame {frame_id} to {new_parent_id} at {new_index}")

    def splice_frames(
        self,
        batch: Mapping[int, Frame],
        top_level_ids: list[int],
        parent_id: int,
        index: int,
    ) -> list[int]:
        """Commit a batch of detached frames into the tree.

        The batch (typically built by the importer under scratch ids) is
        renumbered with fresh ids, its top-level frames are inserted into
        ``parent_id``'s body at ``index``, and the new ids are returned. The
        tree is left untouched if any top-level frame is not allowed there.

        Parameters
        ----------
        batch : Mapping[int, Frame]
            Frames to commit, keyed by their provisional ids
        top_level_ids : list of int
            Provisional ids of the frames going directly into the body
        parent_id : int
            Frame receiving the batch
        index : int
            Position in the receiver's body

        Returns
        -------
        list of int
            New ids of the top-level frames, in order

        Raises
        ------
        FrameTreeError
            If a top-level frame is not allowed under ``parent_id``

        """
        parent = self.get_frame(parent_id)
        for top_id in top_level_ids:
            kind = batch[top_id].kind
            if not self.is_allowed_under(parent_id, kind):
                raise FrameTreeError(f"Frame type {kind.value!r} is not allowed under frame {parent_id}")

        renumbered = {old_id: self.next_id + offset for offset, old_id in enumerate(sorted(batch))}
        self.next_id += len(renumbered)

        def new_id(old_id: int, default: int = 0) -> int:
            return renumbered.get(old_id, default)

        for old_id, frame in batch.items():
            frame.id = renumbered[old_id]
            frame.children_ids = [new_id(child_id) for child_id in frame.children_ids]
            frame.joint_frame_ids = [new_id(joint_id) for joint_id in frame.joint_frame_ids]
            if frame.joint_parent_id:
                frame.joint_parent_id = new_id(frame.joint_parent_id)
            else:
                frame.parent_id = new_id(frame.parent_id, parent_id)
            self.frames[frame.id] = frame

        new_top_ids = [renumbered[top_id] for top_id in top_level_ids]
        for top_id in new_top_ids:
            self.frames[top_id].parent_id = parent_id
        parent.children_ids[index:index] = new_top_ids
        logger.debug(f"Spliced {len(renumbered)} frames into {parent_id} at {index}")
        return new_top_ids

    # ------------------------------------------------------------------
    # Content and flags
    # ------------------------------------------------------------------

    def set_cursor(self, cursor: Cursor) -> None:
        """Move the cursor, validating that its frame exists."""
        self.get_frame(cursor.frame_id)
        self.cursor = cursor

    def _label_slots(self, frame_id: int, label_index: int) -> LabelSlots:
        frame = self.get_frame(frame_id)
        try:
            return frame.slots[label_index]
        except KeyError:
            raise FrameTreeError(f"Frame {frame_id} has no slot at label {label_index}") from None

    def set_slot_code(self, frame_id: int, label_index: int, code: Union[str, SlotStructure]) -> None:
        """Replace the content of a slot.

        Parameters
        ----------
        frame_id : int
            Frame holding the slot
        label_index : int
            Label index of the slot
        code : str or SlotStructure
            New content; a string is stored as a single leaf

        """
        label_slots = self._label_slots(frame_id, label_index)
        label_slots.content = leaf_structure(code) if isinstance(code, str) else code

    def set_slot_shown(self, frame_id: int, label_index: int, shown: bool) -> None:
        """Show or hide a hidable label together with its slot."""
        frame = self.get_frame(frame_id)
        if not frame.frame_type.labels[label_index].hidable:
            raise FrameTreeError(f"Label {label_index} of frame {frame_id} cannot be hidden")
        self._label_slots(frame_id, label_index).shown = shown

    def set_disabled(self, frame_id: int, disabled: bool) -> None:
        """Enable or disable a frame together with its body and joint group."""
        for frame in self.iter_frames(frame_id, include_self=True):
            if not frame.is_container:
                frame.is_disabled = disabled

    def set_slot_error(self, frame_id: int, label_index: int, error: str) -> None:
        """Attach a lint message to a slot."""
        self._label_slots(frame_id, label_index).error = error

    def set_frame_error(self, frame_id: int, error: str) -> None:
        """Attach a lint message to a frame as a whole."""
        self.get_frame(frame_id).error = error

    def clear_errors(self, include_runtime: bool = False) -> None:
        """Clear every lint annotation, and runtime errors when asked."""
        for frame in self.frames.values():
            frame.error = ""
            for label_slots in frame.slots.values():
                label_slots.error = ""
            if include_runtime:
                frame.last_runtime_error = ""

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def check_invariants(self, raise_on_error: bool = True) -> list[str]:
        """Check every structural invariant of the tree.

        Parameters
        ----------
        raise_on_error : bool, default True
            Raise instead of returning when a violation is found

        Returns
        -------
        list of str
            Descriptions of the violations (empty for a consistent tree)

        Raises
        ------
        FrameTreeError
            If ``raise_on_error`` is True and the tree is inconsistent

        """
        violations = InvariantVisitor(self.frames).check()
        if self.cursor.frame_id not in self.frames:
            violations.append(f"Cursor points at missing frame {self.cursor.frame_id}")
        if violations and raise_on_error:
            raise FrameTreeError(f"Frame tree is inconsistent: {violations[0]}", violations)
        return violations
