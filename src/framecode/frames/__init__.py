#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/frames/__init__.py
"""Frame tree module for block-based program editing.

A program is held as a tree of *frames*: each frame is a statement or a
compound-statement header with fixed labels and editable slots. The module
consists of several components:

- definitions: the closed catalogue of frame variants
- slots: slot content structures and their rendering
- nodes: the frame node, the cursor and related value types
- visitors: visitor pattern implementation for frame traversal
- store: the canonical tree with its invariant-preserving mutations
- emitter: program text and line/slot position map
- importer: parsed syntax tree to frames
- navigation: caret movement and structural deletion
- serialization: JSON snapshots of a tree and its cursor

Examples
--------
Basic usage:

    >>> from framecode.frames import FrameTreeStore, FrameType, TextEmitter
    >>> store = FrameTreeStore.create_default()
    >>> frame_id = store.insert(FrameType.VARASSIGN)
    >>> store.set_slot_code(frame_id, 0, "x")
    >>> store.set_slot_code(frame_id, 1, "1")
    >>> TextEmitter(store).emit().text
    'x = 1 \\n'

"""

from __future__ import annotations

from framecode.frames.definitions import (
    FRAME_DEFINITIONS,
    DraggableGroup,
    FrameDefinition,
    FrameLabel,
    FrameType,
    find_definition,
    get_definition,
)
from framecode.frames.emitter import EmitResult, LinePositions, PositionMap, SlotPosition, TextEmitter, emit_program
from framecode.frames.importer import ImportedBatch, SyntaxNode, TreeImporter
from framecode.frames.navigation import DeletionPlan, DeletionResult, NavigationEngine
from framecode.frames.nodes import CaretPosition, Cursor, Frame, LabelSlots, RemovalMode, make_frame
from framecode.frames.serialization import dict_to_tree, json_to_tree, tree_to_dict, tree_to_json
from framecode.frames.slots import (
    SlotContent,
    SlotLeaf,
    SlotStructure,
    bracketed,
    concat_slots,
    leaf_structure,
    render_slot,
)
from framecode.frames.store import FrameTreeStore, InsertionPoint
from framecode.frames.visitors import FrameVisitor, InvariantVisitor

__all__ = [
    # Catalogue
    "FRAME_DEFINITIONS",
    "DraggableGroup",
    "FrameDefinition",
    "FrameLabel",
    "FrameType",
    "find_definition",
    "get_definition",
    # Slots
    "SlotContent",
    "SlotLeaf",
    "SlotStructure",
    "bracketed",
    "concat_slots",
    "leaf_structure",
    "render_slot",
    # Nodes
    "CaretPosition",
    "Cursor",
    "Frame",
    "LabelSlots",
    "RemovalMode",
    "make_frame",
    # Tree
    "FrameTreeStore",
    "InsertionPoint",
    "FrameVisitor",
    "InvariantVisitor",
    # Emission
    "EmitResult",
    "LinePositions",
    "PositionMap",
    "SlotPosition",
    "TextEmitter",
    "emit_program",
    # Import
    "ImportedBatch",
    "SyntaxNode",
    "TreeImporter",
    # Navigation
    "DeletionPlan",
    "DeletionResult",
    "NavigationEngine",
    # Serialization
    "dict_to_tree",
    "json_to_tree",
    "tree_to_dict",
    "tree_to_json",
]
