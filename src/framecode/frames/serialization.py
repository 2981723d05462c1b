#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/frames/serialization.py
"""JSON serialization and deserialization for frame trees.

The whole tree together with its cursor is the unit of persisted and
undo-tracked state. This module converts a :class:`FrameTreeStore` to and
from plain dictionaries and JSON text.

The JSON format preserves:
- every frame with its adjacency lists, slot content and flags
- the cursor, including the focused slot
- the next id to hand out

Examples
--------
Snapshot a tree and load it back:

    >>> store = FrameTreeStore.create_default()
    >>> json_str = tree_to_json(store, indent=2)
    >>> restored = json_to_tree(json_str)
    >>> restored.container_ids
    [-1, -2, -3]

"""

from __future__ import annotations

import json
import logging
from typing import Any

from framecode.exceptions import FrameCodeError, SnapshotError
from framecode.frames.definitions import find_definition
from framecode.frames.nodes import CaretPosition, Cursor, Frame, LabelSlots
from framecode.frames.slots import SlotContent, SlotLeaf, SlotStructure
from framecode.frames.store import FrameTreeStore

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def slot_to_dict(content: SlotContent) -> dict[str, Any]:
    """Convert slot content to a dictionary.

    Leaves become ``{"code", "quote"}``; structures become ``{"fields",
    "operators", "openingBracket"}``.
    """
    if isinstance(content, SlotLeaf):
        return {"code": content.code, "quote": content.quote}
    return {
        "fields": [slot_to_dict(item) for item in content.fields],
        "operators": list(content.operators),
        "openingBracket": content.opening_bracket,
    }


def dict_to_slot(data: dict[str, Any]) -> SlotContent:
    """Convert a dictionary from :func:`slot_to_dict` back to slot content.

    Raises
    ------
    SnapshotError
        If the dictionary is neither a leaf nor a structure

    """
    if not isinstance(data, dict):
        raise SnapshotError(f"Slot content must be an object, got {type(data).__name__}")
    if "fields" in data:
        return SlotStructure(
            fields=[dict_to_slot(item) for item in data["fields"]],
            operators=[str(operator) for operator in data.get("operators", [])],
            opening_bracket=data.get("openingBracket"),
        )
    if "code" in data:
        return SlotLeaf(code=str(data["code"]), quote=str(data.get("quote", "")))
    raise SnapshotError(f"Slot content has neither 'fields' nor 'code': {data!r}")


def _frame_to_dict(frame: Frame) -> dict[str, Any]:
    return {
        "id": frame.id,
        "frameType": frame.kind.value,
        "parentId": frame.parent_id,
        "childrenIds": list(frame.children_ids),
        "jointParentId": frame.joint_parent_id,
        "jointFrameIds": list(frame.joint_frame_ids),
        "slots": {
            str(label_index): {
                "content": slot_to_dict(label_slots.content),
                "shown": label_slots.shown,
                "error": label_slots.error,
            }
            for label_index, label_slots in frame.slots.items()
        },
        "isDisabled": frame.is_disabled,
        "isSelected": frame.is_selected,
        "isVisible": frame.is_visible,
        "isCollapsed": frame.is_collapsed,
        "lastRuntimeError": frame.last_runtime_error,
        "error": frame.error,
    }


def _dict_to_frame(data: dict[str, Any]) -> Frame:
    definition = find_definition(data.get("frameType", ""))
    if definition is None:
        raise SnapshotError(f"Unknown frame type in snapshot: {data.get('frameType')!r}")
    slots = {
        int(label_index): LabelSlots(
            content=dict_to_slot(slot_data["content"]),
            shown=bool(slot_data.get("shown", True)),
            error=str(slot_data.get("error", "")),
        )
        for label_index, slot_data in data.get("slots", {}).items()
    }
    return Frame(
        id=int(data["id"]),
        frame_type=definition,
        parent_id=int(data.get("parentId", 0)),
        children_ids=[int(child_id) for child_id in data.get("childrenIds", [])],
        joint_parent_id=int(data.get("jointParentId", 0)),
        joint_frame_ids=[int(joint_id) for joint_id in data.get("jointFrameIds", [])],
        slots=slots,
        is_disabled=bool(data.get("isDisabled", False)),
        is_selected=bool(data.get("isSelected", False)),
        is_visible=bool(data.get("isVisible", True)),
        is_collapsed=bool(data.get("isCollapsed", False)),
        last_runtime_error=str(data.get("lastRuntimeError", "")),
        error=str(data.get("error", "")),
    )


def tree_to_dict(store: FrameTreeStore) -> dict[str, Any]:
    """Convert a frame tree and its cursor to a dictionary.

    Parameters
    ----------
    store : FrameTreeStore
        Tree to convert

    Returns
    -------
    dict
        Dictionary with ``frames``, ``cursor`` and ``nextId`` entries

    """
    cursor = store.cursor
    return {
        "frames": [_frame_to_dict(frame) for frame in store.frames.values()],
        "cursor": {"frameId": cursor.frame_id, "caret": cursor.caret.value, "slotIndex": cursor.slot_index},
        "nextId": store.next_id,
    }


def dict_to_tree(data: dict[str, Any], validate: bool = True) -> FrameTreeStore:
    """Convert a dictionary from :func:`tree_to_dict` back to a frame tree.

    Parameters
    ----------
    data : dict
        Dictionary representation of a tree
    validate : bool, default True
        Check every structural invariant of the loaded tree

    Returns
    -------
    FrameTreeStore
        Reconstructed tree

    Raises
    ------
    SnapshotError
        If the data is malformed or describes an inconsistent tree

    """
    try:
        frames = {frame.id: frame for frame in (_dict_to_frame(item) for item in data["frames"])}
        cursor_data = data.get("cursor") or {}
        cursor = Cursor(
            frame_id=int(cursor_data.get("frameId", 0)),
            caret=CaretPosition(cursor_data.get("caret", CaretPosition.BODY.value)),
            slot_index=cursor_data.get("slotIndex"),
        )
        store = FrameTreeStore(frames, cursor, data.get("nextId"))
    except SnapshotError:
        raise
    except FrameCodeError as e:
        raise SnapshotError(f"Invalid frame tree snapshot: {e}", original_error=e) from e
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise SnapshotError(f"Malformed frame tree snapshot: {e!r}", original_error=e) from e

    if validate:
        violations = store.check_invariants(raise_on_error=False)
        if violations:
            logger.debug(f"Snapshot violations: {violations}")
            raise SnapshotError(f"Snapshot describes an inconsistent tree: {violations[0]}")
    return store


def tree_to_json(store: FrameTreeStore, indent: int | None = None) -> str:
    """Serialize a frame tree to a JSON string with schema versioning.

    Parameters
    ----------
    store : FrameTreeStore
        Tree to serialize
    indent : int or None, default None
        Number of spaces for indentation (None for compact format)

    Returns
    -------
    str
        JSON string representation with schema version

    """
    versioned_dict = {"schema_version": SCHEMA_VERSION, **tree_to_dict(store)}
    return json.dumps(versioned_dict, indent=indent, ensure_ascii=False)


def json_to_tree(json_str: str, validate: bool = True) -> FrameTreeStore:
    """Deserialize a JSON string to a frame tree.

    JSON without a ``schema_version`` field is read as version 1.

    Parameters
    ----------
    json_str : str
        JSON string representation
    validate : bool, default True
        Check every structural invariant of the loaded tree

    Returns
    -------
    FrameTreeStore
        Reconstructed tree

    Raises
    ------
    SnapshotError
        If the JSON is malformed, has an unsupported schema version, or
        describes an inconsistent tree

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}", original_error=e) from e
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot JSON must be an object")

    schema_version = data.pop("schema_version", SCHEMA_VERSION)
    if schema_version != SCHEMA_VERSION:
        raise SnapshotError(f"Unsupported snapshot schema version: {schema_version} (expected {SCHEMA_VERSION})")
    return dict_to_tree(data, validate=validate)
