#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/editor.py
"""Editor facade.

:class:`FrameEditor` wires the frame tree, navigation, emitter, importer and
diagnostics together behind the operations a host UI calls: insert frames,
handle keys, emit the program, paste parsed code, and show lint or runtime
errors on the frames that caused them. Advisory conditions are reported
through an :data:`~framecode.events.EditorEventCallback`.

Examples
--------
    >>> from framecode.editor import FrameEditor
    >>> from framecode.frames import FrameType
    >>> editor = FrameEditor()
    >>> frame_id = editor.insert(FrameType.RETURN)
    >>> editor.set_slot_code(frame_id, 0, "x")
    >>> editor.emit().text
    'return x \\n'

"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from framecode.collaborators import ExecutionEngine, Linter, SyntaxTreeParser, Translator
from framecode.constants import (
    FUNCDEFS_CONTAINER_ID,
    IMPORTS_CONTAINER_ID,
    LARGE_DELETION_MESSAGE_KEY,
    MAIN_CONTAINER_ID,
    RUNTIME_ERROR_PREAMBLE_KEY,
    NavigationKey,
)
from framecode.diagnostics import LintMessage, apply_lint_messages, apply_runtime_failure
from framecode.events import EditorEvent, EditorEventCallback, EventType, dispatch_event
from framecode.exceptions import FrameCodeError, TreeImportError
from framecode.frames.definitions import FrameType
from framecode.frames.emitter import EmitResult, TextEmitter
from framecode.frames.importer import SyntaxNode, TreeImporter
from framecode.frames.navigation import DeletionResult, NavigationEngine
from framecode.frames.nodes import CaretPosition, Cursor
from framecode.frames.serialization import json_to_tree, tree_to_json
from framecode.frames.slots import SlotStructure
from framecode.frames.store import FrameTreeStore
from framecode.i18n import CatalogueTranslator
from framecode.options.editor import EditorOptions

logger = logging.getLogger(__name__)


class FrameEditor:
    """A frame tree with everything needed to edit it.

    Parameters
    ----------
    store : FrameTreeStore, optional
        Tree to edit; an empty program by default
    options : EditorOptions, optional
        Emitter, importer and deletion-warning configuration
    event_callback : EditorEventCallback, optional
        Receives large-deletion, import and runtime-error events
    translator : Translator, optional
        Display-text lookup; the built-in English catalogue by default

    """

    def __init__(
        self,
        store: Optional[FrameTreeStore] = None,
        options: Optional[EditorOptions] = None,
        event_callback: Optional[EditorEventCallback] = None,
        translator: Optional[Translator] = None,
    ):
        self.store = store or FrameTreeStore.create_default()
        self.options = options or EditorOptions()
        self.event_callback = event_callback
        self.translator = translator or CatalogueTranslator()
        self.navigation = NavigationEngine(self.store)
        self.importer = TreeImporter(self.options.importer, event_callback, self.translator)
        self.last_emit: Optional[EmitResult] = None

    @property
    def cursor(self) -> Cursor:
        """Current edit position."""
        return self.store.cursor

    def _replace_store(self, store: FrameTreeStore) -> None:
        self.store = store
        self.navigation = NavigationEngine(store)
        self.last_emit = None

    def _notify(self, event_type: EventType, message_key: str, **metadata: Any) -> None:
        dispatch_event(
            self.event_callback,
            EditorEvent(
                event_type=event_type,
                message=self.translator.translate(message_key),
                message_key=message_key,
                metadata=metadata,
            ),
        )

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def insert(self, frame_type: Union[FrameType, str]) -> Optional[int]:
        """Insert an empty frame at the cursor; see :meth:`FrameTreeStore.insert`."""
        return self.store.insert(frame_type)

    def set_slot_code(self, frame_id: int, label_index: int, code: Union[str, SlotStructure]) -> None:
        """Replace the content of a slot."""
        self.store.set_slot_code(frame_id, label_index, code)

    def handle_key(self, key: NavigationKey) -> Optional[DeletionResult]:
        """Apply an arrow, ``Delete`` or ``Backspace`` key.

        A deletion reaching the configured descendant threshold delivers one
        ``large_deletion`` event and still goes ahead.

        Returns
        -------
        DeletionResult or None
            The deletion outcome for delete keys, None for arrow keys

        """
        if key not in ("Delete", "Backspace"):
            return self.navigation.handle_key(key)

        result = self.navigation.delete(key, self.options.large_deletion_threshold)
        if result.large_deletion:
            self._notify(
                "large_deletion",
                LARGE_DELETION_MESSAGE_KEY,
                frame_id=result.removed_id,
                descendants=result.descendant_count,
            )
        return result

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def emit(self) -> EmitResult:
        """Emit the program and remember the position map for diagnostics."""
        self.last_emit = TextEmitter(self.store, self.options.emitter).emit()
        return self.last_emit

    def import_from_parsed_text(self, tree: SyntaxNode) -> bool:
        """Paste a parsed syntax tree at the cursor.

        Returns
        -------
        bool
            True if the frames were imported; on False the tree is unchanged

        """
        return self.importer.import_tree(tree, self.store)

    def import_source(self, source: str, parser: SyntaxTreeParser) -> bool:
        """Parse ``source`` with ``parser`` and paste the result at the cursor.

        Errors raised by the parser itself propagate to the caller.
        """
        return self.import_from_parsed_text(parser.parse(source))

    def load_program(self, tree: SyntaxNode) -> bool:
        """Replace the whole program with a parsed syntax tree.

        Top-level imports go to the imports container, function definitions
        to the function definitions container and everything else to the main
        container, each keeping its order. The cursor ends below the last
        frame of the main container.

        Returns
        -------
        bool
            True if the program was loaded; on False the tree is unchanged

        """
        try:
            batch = self.importer.build(tree)
            routed: dict[int, list[int]] = {IMPORTS_CONTAINER_ID: [], FUNCDEFS_CONTAINER_ID: [], MAIN_CONTAINER_ID: []}
            for top_id in batch.top_level_ids:
                frame = batch.frames[top_id]
                if frame.frame_type.is_import_frame:
                    routed[IMPORTS_CONTAINER_ID].append(top_id)
                elif frame.kind is FrameType.FUNCDEF:
                    routed[FUNCDEFS_CONTAINER_ID].append(top_id)
                else:
                    routed[MAIN_CONTAINER_ID].append(top_id)

            store = FrameTreeStore.create_default()
            new_ids: list[int] = []
            for container_id, top_ids in routed.items():
                new_ids = self.importer.commit(batch.subset(top_ids), store, container_id, 0)
            store.cursor = Cursor(new_ids[-1], CaretPosition.BELOW) if new_ids else store.cursor
        except FrameCodeError as e:
            self.importer.report_failure(tree, e)
            return False
        except Exception as e:
            self.importer.report_failure(tree, TreeImportError(f"Unexpected error during load: {e}", original_error=e))
            return False

        self._replace_store(store)
        self.importer.report_unsupported(batch)
        logger.info(f"Loaded program with {len(store) - 1 - len(store.container_ids)} frames")
        return True

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def lint(self, linter: Linter) -> list[LintMessage]:
        """Lint the current program and annotate the offending frames and slots."""
        result = self.emit()
        messages = linter.lint(result.text)
        applied = apply_lint_messages(self.store, result.position_map, messages)
        logger.debug(f"Attached {applied} of {len(messages)} lint messages")
        return messages

    def run(self, engine: ExecutionEngine) -> Optional[int]:
        """Run the current program and annotate the frame of a runtime failure.

        Returns
        -------
        int or None
            Id of the frame the failure was mapped onto, if any

        """
        result = self.emit()
        self.store.clear_errors(include_runtime=True)
        failure = engine.run(result.text, result.position_map)
        if failure is None:
            return None

        frame_id = apply_runtime_failure(
            self.store,
            result.position_map,
            failure,
            preamble=self.translator.translate(RUNTIME_ERROR_PREAMBLE_KEY),
        )
        if frame_id is not None:
            self._notify("runtime_error", RUNTIME_ERROR_PREAMBLE_KEY, frame_id=frame_id, line=failure.line)
        else:
            logger.warning(f"Runtime failure could not be mapped to a frame: {failure.message}")
        return frame_id

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_snapshot(self, indent: Optional[int] = None) -> str:
        """Return the tree and cursor as JSON."""
        return tree_to_json(self.store, indent=indent)

    def restore_snapshot(self, json_str: str) -> None:
        """Replace the tree and cursor with a JSON snapshot.

        Raises
        ------
        SnapshotError
            If the snapshot cannot be loaded; the current tree is kept

        """
        self._replace_store(json_to_tree(json_str))

    @classmethod
    def from_snapshot(
        cls,
        json_str: str,
        options: Optional[EditorOptions] = None,
        event_callback: Optional[EditorEventCallback] = None,
        translator: Optional[Translator] = None,
    ) -> FrameEditor:
        """Create an editor over a tree loaded from a JSON snapshot."""
        return cls(json_to_tree(json_str), options, event_callback, translator)
