#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/events.py
"""Editor event callback system.

This module provides a standardized way to report advisory conditions to the
host UI: large deletions, failed imports and constructs that had no frame
equivalent. Events never block the action that produced them.

Examples
--------
Show a banner on large deletions:

    >>> from framecode.editor import FrameEditor
    >>> from framecode.events import EditorEvent
    >>>
    >>> def on_event(event: EditorEvent) -> None:
    ...     if event.event_type == "large_deletion":
    ...         print(f"Deleted {event.metadata['descendants']} frames")
    >>>
    >>> editor = FrameEditor(event_callback=on_event)

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Optional

logger = logging.getLogger(__name__)

EventType = Literal["large_deletion", "import_failed", "unsupported_construct", "runtime_error"]


@dataclass
class EditorEvent:
    """Advisory event raised by an editing operation.

    Parameters
    ----------
    event_type : EventType
        Type of the event:

        - "large_deletion": a deletion is about to remove at least the
          configured number of descendant frames. ``metadata`` holds
          ``frame_id`` and ``descendants``.

        - "import_failed": a paste/import was rejected as a whole.
          ``metadata`` holds ``error``.

        - "unsupported_construct": a statement with no frame equivalent was
          turned into a placeholder. ``metadata`` holds ``node_kind``.

        - "runtime_error": the execution engine reported a failure that was
          mapped onto a frame. ``metadata`` holds ``frame_id`` and ``line``.

    message : str
        Display text (already translated) for the host UI
    message_key : str, default ""
        Translation key the message was produced from
    metadata : dict, default empty
        Additional event-specific information

    """

    event_type: EventType
    message: str
    message_key: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return human-readable string representation.

        Returns
        -------
        str
            Formatted event description

        """
        return f"[{self.event_type.upper()}] {self.message}".strip()


EditorEventCallback = Callable[[EditorEvent], None]
"""Type alias for editor event callback functions.

Callbacks should not raise exceptions; if they do, the exception is logged
and the editing operation carries on.
"""


def dispatch_event(callback: Optional[EditorEventCallback], event: EditorEvent) -> None:
    """Deliver an event to the callback if one is registered.

    Parameters
    ----------
    callback : EditorEventCallback or None
        Registered callback
    event : EditorEvent
        Event to deliver

    """
    if callback is None:
        return
    try:
        callback(event)
    except Exception as e:
        # Log but don't interrupt the editing operation if the callback fails
        logger.warning(f"Editor event callback raised exception: {e}", exc_info=True)
