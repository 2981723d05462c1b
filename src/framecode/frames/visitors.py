#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/frames/visitors.py
"""Visitor pattern implementation for frame tree traversal.

Frames dispatch to one of three visit methods depending on their variant:
containers (never emitted themselves), blocks (frames owning a body and
possibly joint continuations) and statements. Visitors resolve child ids
through the frame mapping they are given, so the same visitor can walk the
live tree or a scratch batch.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from framecode.constants import ROOT_FRAME_ID
from framecode.frames.definitions import FrameDefinition, FrameType
from framecode.frames.nodes import Frame
from framecode.frames.slots import slot_invariant_violations

logger = logging.getLogger(__name__)


class FrameVisitor(ABC):
    """Abstract base class for frame visitors.

    Subclasses implement the three visit methods. ``Frame.accept`` picks the
    method, so a visitor walks a subtree by calling ``frame.accept(self)`` on
    each frame it wants to descend into.

    Examples
    --------
    Count the statements of a tree:

        >>> class StatementCounter(FrameVisitor):
        ...     def __init__(self, frames):
        ...         self.frames = frames
        ...         self.count = 0
        ...     def visit_container(self, frame):
        ...         for child_id in frame.children_ids:
        ...             self.frames[child_id].accept(self)
        ...     visit_block = visit_container
        ...     def visit_statement(self, frame):
        ...         self.count += 1

    """

    @abstractmethod
    def visit_container(self, frame: Frame) -> Any:
        """Visit the root or one of the top-level containers."""
        pass

    @abstractmethod
    def visit_block(self, frame: Frame) -> Any:
        """Visit a frame that owns a body."""
        pass

    @abstractmethod
    def visit_statement(self, frame: Frame) -> Any:
        """Visit a frame without a body."""
        pass


class InvariantVisitor(FrameVisitor):
    """Visitor collecting every structural invariant violation of a tree.

    Checked for each frame reached from the root:

    - adjacency lists and back-references agree;
    - joint frames only appear in their head's joint list, and each joint
      variant is accepted by the head or the previous joint sibling;
    - containers sit directly under the root and nowhere else;
    - every body only holds variants its owner accepts, and no enclosing
      block forbids a frame's variant as a descendant;
    - every slot holds well-formed content.

    Frames present in the mapping but unreachable from the root are reported
    as orphans.

    Parameters
    ----------
    frames : Mapping[int, Frame]
        All frames of the tree, keyed by id

    """

    def __init__(self, frames: Mapping[int, Frame]):
        self.frames = frames
        self.violations: list[str] = []
        self._seen: set[int] = set()
        self._ancestors: list[FrameDefinition] = []

    def check(self, root_id: int = ROOT_FRAME_ID) -> list[str]:
        """Walk the tree from ``root_id`` and return the violations found."""
        root = self.frames.get(root_id)
        if root is None:
            return [f"Root frame {root_id} is missing"]
        self._seen.add(root_id)
        root.accept(self)
        for frame_id in self.frames:
            if frame_id not in self._seen:
                self.violations.append(f"Frame {frame_id} is not reachable from the root")
        return self.violations

    def _add(self, message: str) -> None:
        logger.debug(f"Invariant violation: {message}")
        self.violations.append(message)

    def _resolve(self, frame_id: int, owner: Frame, relation: str) -> Optional[Frame]:
        frame = self.frames.get(frame_id)
        if frame is None:
            self._add(f"Frame {owner.id} lists missing frame {frame_id} in {relation}")
            return None
        if frame_id in self._seen:
            self._add(f"Frame {frame_id} is linked more than once")
            return None
        self._seen.add(frame_id)
        return frame

    def _check_slots(self, frame: Frame) -> None:
        slot_indices = set(frame.frame_type.slot_label_indices)
        for label_index, label_slots in frame.slots.items():
            if label_index not in slot_indices:
                self._add(f"Frame {frame.id} has a slot for label {label_index}, which carries none")
                continue
            for violation in slot_invariant_violations(label_slots.content, f"frame {frame.id} slot {label_index}"):
                self._add(violation)

    def _visit_children(self, frame: Frame) -> None:
        if frame.children_ids and not frame.frame_type.allow_children:
            self._add(f"Frame {frame.id} ({frame.kind.value!r}) has a body but allows none")

        self._ancestors.append(frame.frame_type)
        for child_id in frame.children_ids:
            child = self._resolve(child_id, frame, "children_ids")
            if child is None:
                continue
            if child.parent_id != frame.id:
                self._add(f"Frame {child_id} has parent_id {child.parent_id}, expected {frame.id}")
            if child.is_joint or child.frame_type.is_joint_frame:
                self._add(f"Joint frame {child_id} appears in the body of frame {frame.id}")
            if child.is_container and frame.id != ROOT_FRAME_ID:
                self._add(f"Container {child_id} is nested under frame {frame.id}")
            if frame.id == ROOT_FRAME_ID and not child.is_container:
                self._add(f"Frame {child_id} sits directly under the root")
            if frame.id != ROOT_FRAME_ID and frame.frame_type.forbids(child.kind):
                self._add(f"Frame {child_id} ({child.kind.value!r}) is forbidden in the body of frame {frame.id}")
            for ancestor in self._ancestors[:-1]:
                if ancestor.forbids_descendant(child.kind):
                    self._add(f"Frame {child_id} ({child.kind.value!r}) is forbidden under {ancestor.type.value!r}")
            child.accept(self)
        self._ancestors.pop()

    def _visit_joints(self, frame: Frame) -> None:
        if frame.joint_frame_ids and frame.is_joint:
            self._add(f"Joint frame {frame.id} holds joint frames of its own")

        previous = frame
        for joint_id in frame.joint_frame_ids:
            joint = self._resolve(joint_id, frame, "joint_frame_ids")
            if joint is None:
                continue
            if joint.joint_parent_id != frame.id:
                self._add(f"Joint frame {joint_id} has joint_parent_id {joint.joint_parent_id}, expected {frame.id}")
            if joint.parent_id != 0:
                self._add(f"Joint frame {joint_id} has parent_id {joint.parent_id}, expected 0")
            if not previous.frame_type.accepts_joint(joint.kind):
                self._add(f"Joint frame {joint_id} ({joint.kind.value!r}) may not follow frame {previous.id}")
            elif not frame.frame_type.accepts_joint(joint.kind):
                self._add(f"Joint frame {joint_id} ({joint.kind.value!r}) is not a continuation of frame {frame.id}")
            joint.accept(self)
            previous = joint

    def visit_container(self, frame: Frame) -> None:
        """Check a container's body."""
        if frame.kind is not FrameType.ROOT and frame.parent_id != ROOT_FRAME_ID:
            self._add(f"Container {frame.id} has parent_id {frame.parent_id}")
        self._visit_children(frame)

    def visit_block(self, frame: Frame) -> None:
        """Check a block's slots, body and joint group."""
        self._check_slots(frame)
        self._visit_children(frame)
        self._visit_joints(frame)

    def visit_statement(self, frame: Frame) -> None:
        """Check a statement's slots and that it owns no other frames."""
        self._check_slots(frame)
        if frame.children_ids:
            self._add(f"Statement frame {frame.id} has a body")
        if frame.joint_frame_ids:
            self._add(f"Statement frame {frame.id} has joint frames")
