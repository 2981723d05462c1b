"""framecode - The structural core of a block-based Python program editor.

framecode holds a program as a tree of *frames*: statement and
compound-statement shells with fixed labels and editable slots. Around that
tree it provides the machinery a frame editor needs:

- linearization of the tree into Python source text, with a per-line map of
  which frame and slot produced each piece of text;
- reconstruction of frames from a generic parsed syntax tree (paste/import);
- a caret state machine that moves through the tree as if it were a
  document, including joint frames such as ``elif`` and ``except``, and
  structural delete/merge.

Requirements
------------
- Python 3.10+

Examples
--------
Build and emit a small program:

    >>> from framecode import FrameEditor, FrameType
    >>> editor = FrameEditor()
    >>> assign = editor.insert(FrameType.VARASSIGN)
    >>> editor.set_slot_code(assign, 0, "x")
    >>> editor.set_slot_code(assign, 1, "1")
    >>> print(editor.emit().text)
    x = 1

Receive advisory events:

    >>> def on_event(event):
    ...     print(event)
    >>> editor = FrameEditor(event_callback=on_event)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "framecode requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from framecode.diagnostics import LintMessage, RuntimeFailure
from framecode.editor import FrameEditor
from framecode.events import EditorEvent, EditorEventCallback
from framecode.exceptions import (
    FrameCodeError,
    FrameNotFoundError,
    FrameTreeError,
    MalformedSyntaxNodeError,
    SnapshotError,
    TreeImportError,
    UnknownOperatorError,
    UnsupportedConstructError,
)
from framecode.frames import (
    CaretPosition,
    Cursor,
    EmitResult,
    Frame,
    FrameTreeStore,
    FrameType,
    NavigationEngine,
    RemovalMode,
    SyntaxNode,
    TextEmitter,
    TreeImporter,
)
from framecode.options import EditorOptions, EmitterOptions, ImporterOptions

__all__ = [
    "__version__",
    # Editor
    "FrameEditor",
    # Frame tree
    "CaretPosition",
    "Cursor",
    "EmitResult",
    "Frame",
    "FrameTreeStore",
    "FrameType",
    "NavigationEngine",
    "RemovalMode",
    "SyntaxNode",
    "TextEmitter",
    "TreeImporter",
    # Diagnostics
    "LintMessage",
    "RuntimeFailure",
    # Events
    "EditorEvent",
    "EditorEventCallback",
    # Options
    "EditorOptions",
    "EmitterOptions",
    "ImporterOptions",
    # Exceptions
    "FrameCodeError",
    "FrameNotFoundError",
    "FrameTreeError",
    "MalformedSyntaxNodeError",
    "SnapshotError",
    "TreeImportError",
    "UnknownOperatorError",
    "UnsupportedConstructError",
]
