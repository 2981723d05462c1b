#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/frames/navigation.py
"""Caret navigation and structural deletion over the frame tree.

The cursor moves through the tree as if it were a document. Every move is a
pure function of the cursor, the shape of the tree and the requested
direction, and always resolves to a valid cursor (at worst the unchanged
one).

Most transitions work on an *acting sibling list*: the body list the cursor
frame lives in, with the frame's joint group spliced in right after its head.
Moving down from a caret inside a body also splices in that frame's body.
Moving up also splices in the previous frame's joint group (or, for a
container, the previous container's body) so that the caret steps into it
instead of jumping over it.

Examples
--------
    >>> from framecode.frames.definitions import FrameType
    >>> store = FrameTreeStore.create_default()
    >>> if_id = store.insert(FrameType.IF)
    >>> NavigationEngine(store).down()
    Cursor(frame_id=1, caret=<CaretPosition.BELOW: 'caretBelow'>, slot_index=None)

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional

from framecode.constants import DEFAULT_LARGE_DELETION_THRESHOLD, ROOT_FRAME_ID, NavigationKey
from framecode.frames.nodes import CaretPosition, Cursor, RemovalMode
from framecode.frames.store import FrameTreeStore

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]

ARROW_KEYS = frozenset({"ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight"})
DELETE_KEYS = frozenset({"Delete", "Backspace"})


def _index(ids: list[int], frame_id: int) -> int:
    try:
        return ids.index(frame_id)
    except ValueError:
        return -1


@dataclass(frozen=True)
class DeletionPlan:
    """What a structural delete key would do.

    Parameters
    ----------
    target_id : int or None
        Frame to remove, or None when the key removes nothing
    mode : RemovalMode
        Hard delete for ``Delete``, merge for ``Backspace``
    cursor : Cursor
        Cursor after the action

    """

    target_id: Optional[int]
    mode: RemovalMode
    cursor: Cursor


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of a structural delete.

    Parameters
    ----------
    removed_id : int or None
        Frame that was removed, if any
    mode : RemovalMode
        How it was removed
    descendant_count : int
        Descendants counted before removal, up to the warning threshold
    large_deletion : bool
        Whether the count reached the warning threshold

    """

    removed_id: Optional[int]
    mode: RemovalMode
    descendant_count: int = 0
    large_deletion: bool = False


class NavigationEngine:
    """Cursor state machine over a :class:`FrameTreeStore`.

    The transition methods (:meth:`down`, :meth:`up`, :meth:`left`,
    :meth:`right`) only compute a cursor; :meth:`handle_key` applies it to
    the store. :meth:`delete` is the only method that changes the tree.

    Parameters
    ----------
    store : FrameTreeStore
        Tree to navigate

    """

    def __init__(self, store: FrameTreeStore):
        self.store = store

    # ------------------------------------------------------------------
    # Acting sibling list
    # ------------------------------------------------------------------

    def acting_siblings(self, frame_id: int, caret: CaretPosition, direction: Direction) -> list[int]:
        """Return the list of frame ids a move from ``frame_id`` steps through.

        Parameters
        ----------
        frame_id : int
            Frame holding the caret
        caret : CaretPosition
            Caret position on that frame
        direction : {"up", "down"}
            Direction of the move

        Returns
        -------
        list of int
            The frame's body list with the joint group, and depending on the
            direction the body or the previous joint group, spliced in

        """
        frame = self.store.get_frame(frame_id)
        siblings = list(self.store.get_frame(self.store.parent_of(frame_id)).children_ids)

        if frame.joint_frame_ids or frame.is_joint:
            head = self.store.head_of(frame_id)
            position = _index(siblings, head.id) + 1
            siblings[position:position] = head.joint_frame_ids

        position = _index(siblings, frame_id)
        if direction == "up":
            if position > 0:
                previous = self.store.get_frame(siblings[position - 1])
                if frame.is_container:
                    siblings[position:position] = previous.children_ids
                elif previous.joint_frame_ids and previous.id != frame.joint_parent_id:
                    siblings[position:position] = previous.joint_frame_ids
        elif caret is CaretPosition.BODY and position >= 0:
            siblings[position + 1 : position + 1] = frame.children_ids
        return siblings

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _current(self, cursor: Optional[Cursor]) -> Cursor:
        return cursor if cursor is not None else self.store.cursor

    def _landing(self, frame_id: int) -> Cursor:
        frame = self.store.get_frame(frame_id)
        return Cursor(frame_id, CaretPosition.BODY if frame.allows_children else CaretPosition.BELOW)

    def _next_container(self, container_id: int) -> Optional[int]:
        containers = self.store.container_ids
        position = _index(containers, container_id)
        if 0 <= position < len(containers) - 1:
            return containers[position + 1]
        return None

    def down(self, cursor: Optional[Cursor] = None) -> Cursor:
        """Return the cursor one step down from ``cursor`` (default: the store's)."""
        cursor = self._current(cursor)
        frame = self.store.get_frame(cursor.frame_id)
        siblings = self.acting_siblings(frame.id, cursor.caret, "down")

        if cursor.caret is CaretPosition.BODY:
            if frame.children_ids:
                return self._landing(frame.children_ids[0])
            if frame.is_container:
                next_container = self._next_container(frame.id)
                if next_container is not None:
                    return Cursor(next_container, CaretPosition.BODY)
                return Cursor(frame.id, cursor.caret)
            return Cursor(frame.id, CaretPosition.BELOW)

        position = _index(siblings, frame.id)
        if 0 <= position < len(siblings) - 1:
            return self._landing(siblings[position + 1])

        parent_id = self.store.parent_of(frame.id)
        parent = self.store.get_frame(parent_id)
        if parent.is_container:
            next_container = self._next_container(parent_id)
            if next_container is not None:
                return Cursor(next_container, CaretPosition.BODY)
            return Cursor(frame.id, cursor.caret)
        if parent_id != ROOT_FRAME_ID:
            return Cursor(parent_id, CaretPosition.BELOW)
        return Cursor(frame.id, cursor.caret)

    def up(self, cursor: Optional[Cursor] = None) -> Cursor:
        """Return the cursor one step up from ``cursor`` (default: the store's)."""
        cursor = self._current(cursor)
        frame = self.store.get_frame(cursor.frame_id)

        if cursor.caret is CaretPosition.BODY or not frame.allows_children:
            siblings = self.acting_siblings(frame.id, cursor.caret, "up")
            position = _index(siblings, frame.id)
            if position > 0:
                previous = self.store.get_frame(siblings[position - 1])
                return Cursor(previous.id, CaretPosition.BODY if previous.is_container else CaretPosition.BELOW)
            parent_id = self.store.parent_of(frame.id)
            if parent_id != ROOT_FRAME_ID:
                return Cursor(parent_id, CaretPosition.BODY)
            return Cursor(frame.id, CaretPosition.BODY)

        # Below a frame with a body: step into the end of that body
        if frame.children_ids:
            return Cursor(frame.children_ids[-1], CaretPosition.BELOW)
        return Cursor(frame.id, CaretPosition.BODY)

    def editable_slots(self, frame_id: int) -> list[int]:
        """Return the label indices of the frame's slots that can take focus."""
        frame = self.store.get_frame(frame_id)
        return [
            label_index
            for label_index in frame.frame_type.slot_label_indices
            if label_index in frame.slots and frame.slots[label_index].shown
        ]

    def _focus_edge(self, cursor: Cursor, first: bool) -> Cursor:
        slots = self.editable_slots(cursor.frame_id)
        if not slots:
            return cursor
        return cursor.with_focus(slots[0] if first else slots[-1])

    def right(self, cursor: Optional[Cursor] = None) -> Cursor:
        """Return the cursor after a Right key.

        With a focused slot, focus moves to the next slot of the frame; past
        the last slot the caret moves down and focuses the first slot of the
        frame it lands on, if that frame has any. Without focus, the caret
        enters the next frame's first slot.
        """
        cursor = self._current(cursor)
        if cursor.slot_index is not None:
            slots = self.editable_slots(cursor.frame_id)
            position = _index(slots, cursor.slot_index)
            if 0 <= position < len(slots) - 1:
                return cursor.with_focus(slots[position + 1])
            return self._focus_edge(self.down(cursor.with_focus(None)), first=True)

        frame = self.store.get_frame(cursor.frame_id)
        siblings = self.acting_siblings(frame.id, cursor.caret, "down")
        position = _index(siblings, frame.id)
        at_body_end = cursor.caret is CaretPosition.BODY and not frame.children_ids
        at_list_end = cursor.caret is CaretPosition.BELOW and not 0 <= position < len(siblings) - 1
        if at_body_end or at_list_end:
            return self.down(cursor)
        target = Cursor(siblings[position + 1], self._landing(siblings[position + 1]).caret)
        focused = self._focus_edge(target, first=True)
        return focused if focused.slot_index is not None else self.down(cursor)

    def left(self, cursor: Optional[Cursor] = None) -> Cursor:
        """Return the cursor after a Left key.

        With a focused slot, focus moves to the previous slot of the frame;
        before the first slot the caret moves up and focuses the last slot of
        the frame it lands on, if that frame has any. Without focus, the
        caret enters the last slot of its own frame.
        """
        cursor = self._current(cursor)
        if cursor.slot_index is not None:
            slots = self.editable_slots(cursor.frame_id)
            position = _index(slots, cursor.slot_index)
            if position > 0:
                return cursor.with_focus(slots[position - 1])
            return self._focus_edge(self.up(cursor.with_focus(None)), first=False)

        frame = self.store.get_frame(cursor.frame_id)
        if cursor.caret is CaretPosition.BELOW and frame.allows_children:
            return self.up(cursor)
        focused = self._focus_edge(cursor, first=False)
        return focused if focused.slot_index is not None else self.up(cursor)

    def move(self, key: NavigationKey, cursor: Optional[Cursor] = None) -> Cursor:
        """Return the cursor an arrow key leads to.

        Raises
        ------
        ValueError
            If ``key`` is not an arrow key

        """
        if key == "ArrowDown":
            return self.down(cursor)
        if key == "ArrowUp":
            return self.up(cursor)
        if key == "ArrowRight":
            return self.right(cursor)
        if key == "ArrowLeft":
            return self.left(cursor)
        raise ValueError(f"Not an arrow key: {key!r}")

    # ------------------------------------------------------------------
    # Structural delete
    # ------------------------------------------------------------------

    def plan_deletion(self, key: NavigationKey, cursor: Optional[Cursor] = None) -> DeletionPlan:
        """Work out what ``Delete`` or ``Backspace`` would do at ``cursor``.

        ``Delete`` removes the next entry of the acting list (the first body
        child when the caret is in a body) with its whole subtree; the cursor
        stays. ``Backspace`` in a body only moves the caret up; below a frame
        it moves the caret to the previous entry (or the parent's body) and
        merges the frame away, keeping its body. A merge that would move a
        child where it is not allowed is refused and changes nothing.
        """
        cursor = self._current(cursor).with_focus(None)
        frame = self.store.get_frame(cursor.frame_id)
        siblings = self.acting_siblings(frame.id, cursor.caret, "down")
        position = _index(siblings, frame.id)

        if key == "Delete":
            target_id = None
            if 0 <= position < len(siblings) - 1:
                candidate = self.store.get_frame(siblings[position + 1])
                if not candidate.is_container:
                    target_id = candidate.id
            return DeletionPlan(target_id, RemovalMode.HARD, cursor)

        if key != "Backspace":
            raise ValueError(f"Not a delete key: {key!r}")
        if frame.is_container or frame.id == ROOT_FRAME_ID:
            return DeletionPlan(None, RemovalMode.MERGE, cursor)
        if cursor.caret is CaretPosition.BODY:
            return DeletionPlan(None, RemovalMode.MERGE, self.up(cursor))

        if not self.store.can_merge(frame.id):
            logger.debug(f"Backspace below frame {frame.id} refused: its body cannot move")
            return DeletionPlan(None, RemovalMode.MERGE, cursor)

        # The previous entry of a frame following a joint group is the group's last continuation
        siblings = self.acting_siblings(frame.id, cursor.caret, "up")
        position = _index(siblings, frame.id)
        if position > 0:
            new_cursor = Cursor(siblings[position - 1], CaretPosition.BELOW)
        elif frame.is_joint:
            new_cursor = Cursor(frame.joint_parent_id, CaretPosition.BELOW)
        else:
            new_cursor = Cursor(self.store.parent_of(frame.id), CaretPosition.BODY)
        return DeletionPlan(frame.id, RemovalMode.MERGE, new_cursor)

    def delete(
        self,
        key: NavigationKey,
        large_deletion_threshold: int = DEFAULT_LARGE_DELETION_THRESHOLD,
    ) -> DeletionResult:
        """Apply ``Delete`` or ``Backspace`` at the store's cursor.

        The descendants of the target are counted (up to the threshold)
        before it is removed; reaching the threshold is reported in the
        result but does not stop the deletion.

        Parameters
        ----------
        key : {"Delete", "Backspace"}
            Structural delete key
        large_deletion_threshold : int, default 3
            Descendant count from which the deletion is flagged as large

        Returns
        -------
        DeletionResult
            What was removed and whether it was a large deletion

        """
        plan = self.plan_deletion(key)
        if plan.target_id is None:
            self.store.cursor = plan.cursor
            return DeletionResult(None, plan.mode)

        count = self.store.count_descendants(plan.target_id, large_deletion_threshold)
        large = count >= large_deletion_threshold
        if large:
            logger.warning(f"Deleting frame {plan.target_id} removes at least {count} nested frames")

        self.store.cursor = plan.cursor
        self.store.remove(plan.target_id, plan.mode)
        logger.debug(f"{key} removed frame {plan.target_id}, cursor now {self.store.cursor}")
        return DeletionResult(plan.target_id, plan.mode, count, large)

    # ------------------------------------------------------------------
    # Key dispatch
    # ------------------------------------------------------------------

    def handle_key(self, key: NavigationKey) -> Optional[DeletionResult]:
        """Apply a navigation or delete key to the store.

        Returns
        -------
        DeletionResult or None
            The deletion outcome for delete keys, None for arrow keys

        Raises
        ------
        ValueError
            If ``key`` is not a navigation key

        """
        if key in DELETE_KEYS:
            return self.delete(key)
        if key not in ARROW_KEYS:
            raise ValueError(f"Unknown navigation key: {key!r}")
        self.store.cursor = self.move(key)
        logger.debug(f"{key} moved the cursor to {self.store.cursor}")
        return None

