#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/frames/importer.py
"""Parsed syntax tree to frames.

The importer turns a generic concrete syntax tree (one node per grammar
production, named after CPython's grammar: ``file_input``, ``if_stmt``,
``suite``, ``trailer``...) into a batch of frames. The batch is built under
scratch ids, away from the live tree, and committed in one step. Any failure
while building discards the whole batch and nothing reaches the tree.

Statement nodes are dispatched through a kind to handler table. Expression
nodes are reduced to slot content by :meth:`TreeImporter.to_slots`:

- a node without children becomes a one-leaf slot holding its value;
- a node with a single child is unwrapped;
- a node starting with an opening bracket becomes a bracketed group;
- a node starting with ``-``, ``+``, ``~`` or ``not`` is a prefix operation;
- anything else is read as ``operand (operator operand)*``, where a
  ``trailer`` child (call, subscript or attribute access) stands alone.

Examples
--------
Import ``x = 1``:

    >>> tree = SyntaxNode("file_input", children=[
    ...     SyntaxNode("expr_stmt", children=[
    ...         SyntaxNode("NAME", "x"), SyntaxNode("OP", "="), SyntaxNode("NUMBER", "1"),
    ...     ]),
    ... ])
    >>> store = FrameTreeStore.create_default()
    >>> TreeImporter().import_tree(tree, store)
    True

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from framecode.constants import (
    IMPORT_FAILED_MESSAGE_KEY,
    KNOWN_OPERATORS,
    LAYOUT_TOKEN_KINDS,
    OPENING_BRACKETS,
    STATEMENT_NODE_KINDS_EXTRA,
    UNARY_OPERATORS,
    UNSUPPORTED_CONSTRUCT_MESSAGE_KEY,
    WRAPPER_NODE_KINDS,
)
from framecode.events import EditorEvent, EditorEventCallback, dispatch_event
from framecode.exceptions import (
    FrameCodeError,
    MalformedSyntaxNodeError,
    TreeImportError,
    UnknownOperatorError,
    UnsupportedConstructError,
)
from framecode.frames.definitions import FrameType, get_definition
from framecode.frames.nodes import CaretPosition, Cursor, Frame, LabelSlots, make_frame
from framecode.frames.slots import SlotStructure, bracketed, concat_slots, leaf_structure
from framecode.frames.store import FrameTreeStore
from framecode.i18n import CatalogueTranslator
from framecode.options.importer import ImporterOptions

logger = logging.getLogger(__name__)


@dataclass
class SyntaxNode:
    """Node of a generic concrete syntax tree.

    Parameters
    ----------
    kind : str
        Grammar production or token name (``"if_stmt"``, ``"NAME"``...)
    value : str or None, default None
        Literal text of a token node
    children : list of SyntaxNode
        Child nodes in source order

    Notes
    -----
    Token kinds are upper case (``NAME``, ``OP``, ``NEWLINE``...) and
    production kinds lower case, as in CPython's grammar.

    """

    kind: str
    value: Optional[str] = None
    children: list[SyntaxNode] = field(default_factory=list)

    @property
    def is_token(self) -> bool:
        """Whether the node is a token rather than a grammar production."""
        return self.kind.isupper()

    def to_dict(self) -> dict[str, Any]:
        """Return the node as JSON-compatible data."""
        data: dict[str, Any] = {"kind": self.kind}
        if self.value is not None:
            data["value"] = self.value
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SyntaxNode:
        """Build a node (and its subtree) from :meth:`to_dict` data.

        Raises
        ------
        MalformedSyntaxNodeError
            If a node has no ``kind``

        """
        if not isinstance(data, dict) or not isinstance(data.get("kind"), str):
            raise MalformedSyntaxNodeError("?", f"Syntax node data needs a string 'kind': {data!r}")
        children = [cls.from_dict(child) for child in data.get("children") or []]
        return cls(kind=data["kind"], value=data.get("value"), children=children)

    def tokens(self) -> list[str]:
        """Return the values of every non-layout token under the node, in order."""
        if not self.children:
            if self.value is None or self.kind in LAYOUT_TOKEN_KINDS:
                return []
            return [self.value]
        return [token for child in self.children for token in child.tokens()]


@dataclass
class ImportedBatch:
    """Frames built by one import, not yet part of any tree.

    Parameters
    ----------
    frames : dict of int to Frame
        Every built frame, keyed by scratch id
    top_level_ids : list of int
        Scratch ids of the frames that go directly into the receiving body
    next_id : int
        Next scratch id to hand out
    unsupported_kinds : list of str
        Kinds of the statements kept as comments

    """

    frames: dict[int, Frame] = field(default_factory=dict)
    top_level_ids: list[int] = field(default_factory=list)
    next_id: int = 0
    unsupported_kinds: list[str] = field(default_factory=list)

    def add_frame(
        self,
        frame_type: FrameType,
        slots: dict[int, LabelSlots],
        add_to: list[int],
        parent_id: int = 0,
        joint_parent_id: int = 0,
    ) -> Frame:
        """Create a frame under the next scratch id and link it into ``add_to``.

        Raises
        ------
        TreeImportError
            If an enclosing frame of the batch forbids the variant
        """
        if not joint_parent_id:
            self._check_nesting(frame_type, parent_id)
        frame = make_frame(
            self.next_id,
            get_definition(frame_type),
            slots,
            parent_id=parent_id,
            joint_parent_id=joint_parent_id,
        )
        self.next_id += 1
        self.frames[frame.id] = frame
        add_to.append(frame.id)
        return frame

    def _check_nesting(self, frame_type: FrameType, owner_id: int) -> None:
        # Same ancestor chain as FrameTreeStore.ancestors: a joint frame skips its head
        while owner_id in self.frames:
            owner = self.frames[owner_id]
            if owner.frame_type.forbids(frame_type):
                raise TreeImportError(
                    f"A '{frame_type.value}' frame cannot sit inside '{owner.kind.value}'",
                    node_kind=frame_type.value,
                )
            if owner.is_joint:
                owner_id = self.frames[owner.joint_parent_id].parent_id
            else:
                owner_id = owner.parent_id

    def subset(self, top_level_ids: list[int]) -> ImportedBatch:
        """Return the part of the batch reachable from ``top_level_ids``."""
        frames: dict[int, Frame] = {}
        pending = list(top_level_ids)
        while pending:
            frame = self.frames[pending.pop()]
            frames[frame.id] = frame
            pending.extend(frame.children_ids)
            pending.extend(frame.joint_frame_ids)
        return ImportedBatch(frames=frames, top_level_ids=list(top_level_ids), next_id=self.next_id)


Handler = Callable[[SyntaxNode, ImportedBatch, list[int], int], None]


def _slots(*contents: SlotStructure) -> dict[int, LabelSlots]:
    return {index: LabelSlots(content) for index, content in enumerate(contents)}


def _is_slice_colon(node: SyntaxNode) -> bool:
    return not node.children and node.value == ":"


class TreeImporter:
    """Builds frames from a parsed syntax tree.

    Parameters
    ----------
    options : ImporterOptions, optional
        Scratch id range and handling of statements without a frame equivalent
    event_callback : EditorEventCallback, optional
        Receives ``unsupported_construct`` and ``import_failed`` events
    translator : object with a ``translate(key)`` method, optional
        Display-text lookup for event messages

    """

    def __init__(
        self,
        options: Optional[ImporterOptions] = None,
        event_callback: Optional[EditorEventCallback] = None,
        translator: Any = None,
    ):
        self.options = options or ImporterOptions()
        self.event_callback = event_callback
        self.translator = translator or CatalogueTranslator()
        self._handlers: dict[str, Handler] = {kind: self._walk_children for kind in WRAPPER_NODE_KINDS}
        self._handlers.update(
            {
                "suite": self._handle_suite,
                "expr_stmt": self._handle_expr_stmt,
                "pass_stmt": self._handle_pass,
                "break_stmt": self._handle_break,
                "continue_stmt": self._handle_continue,
                "raise_stmt": self._handle_raise,
                "return_stmt": self._handle_return,
                "global_stmt": self._handle_global,
                "import_stmt": self._walk_children,
                "import_name": self._handle_import_name,
                "import_from": self._handle_import_from,
                "if_stmt": self._handle_if,
                "while_stmt": self._handle_while,
                "for_stmt": self._handle_for,
                "try_stmt": self._handle_try,
                "with_stmt": self._handle_with,
                "funcdef": self._handle_funcdef,
            }
        )

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def build(self, tree: SyntaxNode) -> ImportedBatch:
        """Build the frames for ``tree`` without touching any store.

        Raises
        ------
        TreeImportError
            If the tree cannot be turned into frames

        """
        batch = ImportedBatch(next_id=self.options.first_scratch_id)
        self._walk(tree, batch, batch.top_level_ids, 0)
        logger.debug(f"Built {len(batch.frames)} frames from a {tree.kind} tree")
        return batch

    def import_tree(self, tree: SyntaxNode, store: FrameTreeStore) -> bool:
        """Import ``tree`` at the store's cursor.

        The frames are inserted where the cursor designates a body position
        and the cursor moves below the last imported frame. On any failure
        the store is left exactly as it was.

        Parameters
        ----------
        tree : SyntaxNode
            Parsed program text
        store : FrameTreeStore
            Tree receiving the frames

        Returns
        -------
        bool
            True if the frames were imported

        """
        try:
            batch = self.build(tree)
            point = store.body_insertion_point()
            new_ids = self.commit(batch, store, point.owner_id, point.index)
        except FrameCodeError as e:
            self.report_failure(tree, e)
            return False
        except Exception as e:
            self.report_failure(tree, TreeImportError(f"Unexpected error during import: {e}", original_error=e))
            return False

        if new_ids:
            store.cursor = Cursor(new_ids[-1], CaretPosition.BELOW)
        self.report_unsupported(batch)
        return True

    def commit(self, batch: ImportedBatch, store: FrameTreeStore, owner_id: int, index: int) -> list[int]:
        """Splice a built batch into ``store`` and return the new top-level ids."""
        if not batch.top_level_ids:
            return []
        return store.splice_frames(batch.frames, batch.top_level_ids, owner_id, index)

    def report_failure(self, tree: SyntaxNode, error: FrameCodeError) -> None:
        """Log a failed import and deliver an ``import_failed`` event."""
        node_kind = getattr(error, "node_kind", None) or tree.kind
        logger.error(f"Import failed on '{node_kind}' node: {error}", exc_info=True)
        dispatch_event(
            self.event_callback,
            EditorEvent(
                event_type="import_failed",
                message=self.translator.translate(IMPORT_FAILED_MESSAGE_KEY),
                message_key=IMPORT_FAILED_MESSAGE_KEY,
                metadata={"error": str(error), "node_kind": node_kind},
            ),
        )

    def report_unsupported(self, batch: ImportedBatch) -> None:
        """Deliver one ``unsupported_construct`` event per statement kept as a comment."""
        for node_kind in batch.unsupported_kinds:
            dispatch_event(
                self.event_callback,
                EditorEvent(
                    event_type="unsupported_construct",
                    message=self.translator.translate(UNSUPPORTED_CONSTRUCT_MESSAGE_KEY),
                    message_key=UNSUPPORTED_CONSTRUCT_MESSAGE_KEY,
                    metadata={"node_kind": node_kind},
                ),
            )

    # ------------------------------------------------------------------
    # Slot content
    # ------------------------------------------------------------------

    def to_slots(self, node: SyntaxNode) -> SlotStructure:
        """Reduce an expression node to slot content.

        Raises
        ------
        MalformedSyntaxNodeError
            If a leaf node carries no value, or an operator has no operand
        UnknownOperatorError
            If an operator token is outside the known vocabulary

        """
        children = node.children
        if not children:
            if node.value is None:
                raise MalformedSyntaxNodeError(node.kind)
            return self._leaf(node)
        if len(children) == 1:
            return self.to_slots(children[0])

        first = children[0]
        if _is_slice_colon(first):
            # Open start of a slice: x[:n]
            rest = SyntaxNode(node.kind, children=children[1:])
            return concat_slots(leaf_structure(""), ":", self.to_slots(rest))

        if not first.children and first.value in UNARY_OPERATORS:
            operand = SyntaxNode(node.kind, children=children[1:])
            return concat_slots(leaf_structure(""), first.value, self.to_slots(operand))

        if not first.children and first.value in OPENING_BRACKETS:
            interior = children[1:-1]
            inner = self.to_slots(SyntaxNode(node.kind, children=interior)) if interior else leaf_structure("")
            if node.kind == "parameters":
                return inner
            return bracketed(inner, first.value)

        current = self.to_slots(first)
        index = 1
        while index < len(children):
            child = children[index]
            if child.kind == "trailer":
                if child.children and child.children[0].value == ".":
                    current = concat_slots(current, ".", self.to_slots(child.children[1]))
                else:
                    current = concat_slots(current, "", self.to_slots(child))
                index += 1
                continue

            operator = self.dig_value(child)
            if operator not in KNOWN_OPERATORS:
                raise UnknownOperatorError(operator, node.kind)
            if operator in (",", ":") and (index + 1 == len(children) or _is_slice_colon(children[index + 1])):
                # Trailing comma or open end of a slice: x[1:], x[1::2]
                current = concat_slots(current, operator, leaf_structure(""))
                index += 1
                continue
            if index + 1 < len(children):
                current = concat_slots(current, operator, self.to_slots(children[index + 1]))
            else:
                raise MalformedSyntaxNodeError(node.kind, f"Operator {operator!r} in '{node.kind}' has no right operand")
            index += 2
        return current

    def dig_value(self, node: SyntaxNode) -> str:
        """Return the single token text a node stands for.

        Single-child wrappers are unwrapped; a two-child ``comp_op`` node
        (``not in``, ``is not``) gives both words separated by a space.
        """
        if node.value:
            return node.value
        if not node.children:
            raise MalformedSyntaxNodeError(node.kind)
        if len(node.children) == 1:
            return self.dig_value(node.children[0])
        if node.kind == "comp_op" and len(node.children) == 2:
            return f"{self.dig_value(node.children[0])} {self.dig_value(node.children[1])}"
        raise TreeImportError(f"Cannot find a single operator in '{node.kind}' node", node_kind=node.kind)

    @staticmethod
    def _leaf(node: SyntaxNode) -> SlotStructure:
        value = node.value or ""
        if node.kind == "STRING" and len(value) >= 2 and value[0] in "'\"" and value[-1] == value[0]:
            if not value.startswith(value[0] * 3):
                return leaf_structure(value[1:-1], quote=value[0])
        return leaf_structure(value)

    def _remainder_slots(self, node: SyntaxNode, start: int) -> SlotStructure:
        remainder = node.children[start:]
        if not remainder:
            return leaf_structure("")
        return self.to_slots(SyntaxNode(node.kind, children=remainder))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _walk(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        handler = self._handlers.get(node.kind)
        if handler is not None:
            handler(node, batch, add_to, parent_id)
        elif node.kind.endswith("_stmt") or node.kind in STATEMENT_NODE_KINDS_EXTRA:
            self._handle_unsupported(node, batch, add_to, parent_id)
        else:
            logger.debug(f"Ignoring '{node.kind}' node")

    def _walk_children(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        for child in node.children:
            self._walk(child, batch, add_to, parent_id)

    def _handle_suite(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        for child in node.children:
            if not child.is_token:
                self._walk(child, batch, add_to, parent_id)

    def _handle_unsupported(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        mode = self.options.unsupported_constructs
        if mode == "error":
            raise UnsupportedConstructError(node.kind)
        if mode == "skip":
            logger.debug(f"Skipping unsupported '{node.kind}' statement")
            return
        text = " ".join(node.tokens())
        logger.warning(f"No frame for '{node.kind}' statement, keeping it as a comment: {text}")
        batch.add_frame(FrameType.COMMENT, _slots(leaf_structure(text)), add_to, parent_id)
        batch.unsupported_kinds.append(node.kind)

    def _handle_expr_stmt(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        split = next((i for i, child in enumerate(node.children) if child.value == "="), None)
        if split is None:
            batch.add_frame(FrameType.EXPRESSION, _slots(self.to_slots(node)), add_to, parent_id)
            return
        lhs = self.to_slots(SyntaxNode(node.kind, children=node.children[:split]))
        rhs = self._remainder_slots(node, split + 1)
        batch.add_frame(FrameType.VARASSIGN, _slots(lhs, rhs), add_to, parent_id)

    def _handle_pass(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        # pass only exists to fill empty bodies, which frames allow
        pass

    def _handle_break(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        batch.add_frame(FrameType.BREAK, {}, add_to, parent_id)

    def _handle_continue(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        batch.add_frame(FrameType.CONTINUE, {}, add_to, parent_id)

    def _handle_raise(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        batch.add_frame(FrameType.RAISE, _slots(self._remainder_slots(node, 1)), add_to, parent_id)

    def _handle_return(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        batch.add_frame(FrameType.RETURN, _slots(self._remainder_slots(node, 1)), add_to, parent_id)

    def _handle_global(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        batch.add_frame(FrameType.GLOBAL, _slots(self._remainder_slots(node, 1)), add_to, parent_id)

    def _handle_import_name(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        batch.add_frame(FrameType.IMPORT, _slots(self._remainder_slots(node, 1)), add_to, parent_id)

    def _handle_import_from(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        # from <dots and module> import <names>; relative dots are separate tokens
        split = next((i for i, child in enumerate(node.children) if i > 0 and child.value == "import"), None)
        if split is None:
            raise MalformedSyntaxNodeError(node.kind, "'import_from' node without an 'import' keyword")
        module = "".join(token for child in node.children[1:split] for token in child.tokens())
        names = self._remainder_slots(node, split + 1)
        # Slot content: module at label 0, names at label 1
        batch.add_frame(FrameType.FROM_IMPORT, _slots(leaf_structure(module), names), add_to, parent_id)

    def _frame_with_body(
        self,
        node: SyntaxNode,
        frame_type: FrameType,
        slot_child_indices: list[int],
        body_index: int,
        batch: ImportedBatch,
        add_to: list[int],
        parent_id: int = 0,
        joint_parent_id: int = 0,
    ) -> Frame:
        definition = get_definition(frame_type)
        slots = {
            label_index: LabelSlots(self.to_slots(node.children[child_index]))
            for label_index, child_index in zip(definition.slot_label_indices, slot_child_indices)
        }
        frame = batch.add_frame(frame_type, slots, add_to, parent_id, joint_parent_id)
        self._walk(node.children[body_index], batch, frame.children_ids, frame.id)
        return frame

    def _handle_if(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        # if <condition> : <body> (elif <condition> : <body>)* (else : <body>)?
        head = self._frame_with_body(node, FrameType.IF, [1], 3, batch, add_to, parent_id)
        index = 4
        while index < len(node.children):
            keyword = node.children[index].value
            if keyword == "elif":
                self._frame_with_body(
                    node, FrameType.ELIF, [index + 1], index + 3, batch, head.joint_frame_ids, joint_parent_id=head.id
                )
                index += 4
            elif keyword == "else":
                self._frame_with_body(node, FrameType.ELSE, [], index + 2, batch, head.joint_frame_ids, joint_parent_id=head.id)
                index += 3
            else:
                index += 1

    def _handle_while(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        # while <condition> : <body>; a while/else has no frame equivalent
        if len(node.children) > 4:
            self._handle_unsupported(node, batch, add_to, parent_id)
            return
        self._frame_with_body(node, FrameType.WHILE, [1], 3, batch, add_to, parent_id)

    def _handle_for(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        # for <target> in <iterable> : <body> (else : <body>)?
        head = self._frame_with_body(node, FrameType.FOR, [1, 3], 5, batch, add_to, parent_id)
        if len(node.children) > 6 and node.children[6].value == "else":
            self._frame_with_body(node, FrameType.ELSE, [], 8, batch, head.joint_frame_ids, joint_parent_id=head.id)

    def _handle_try(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        # try : <body> (except_clause : <body>)* (else : <body>)? (finally : <body>)?
        head = self._frame_with_body(node, FrameType.TRY, [], 2, batch, add_to, parent_id)
        index = 3
        while index < len(node.children):
            clause = node.children[index]
            if clause.kind == "except_clause" or clause.value == "except":
                slot = self._remainder_slots(clause, 1) if clause.children else leaf_structure("")
                joint = batch.add_frame(FrameType.EXCEPT, _slots(slot), head.joint_frame_ids, joint_parent_id=head.id)
                self._walk(node.children[index + 2], batch, joint.children_ids, joint.id)
                index += 3
            elif clause.value in ("else", "finally"):
                frame_type = FrameType.ELSE if clause.value == "else" else FrameType.FINALLY
                self._frame_with_body(node, frame_type, [], index + 2, batch, head.joint_frame_ids, joint_parent_id=head.id)
                index += 3
            else:
                index += 1

    def _handle_with(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        # with <item> : <body>; several items have no frame equivalent
        if len(node.children) != 4:
            self._handle_unsupported(node, batch, add_to, parent_id)
            return
        item = node.children[1]
        if item.kind == "with_item" and len(item.children) == 3 and item.children[1].value == "as":
            slots = {0: LabelSlots(self.to_slots(item.children[0])), 1: LabelSlots(self.to_slots(item.children[2]))}
        else:
            slots = {0: LabelSlots(self.to_slots(item)), 1: LabelSlots(shown=False)}
        frame = batch.add_frame(FrameType.WITH, slots, add_to, parent_id)
        self._walk(node.children[3], batch, frame.children_ids, frame.id)

    def _handle_funcdef(self, node: SyntaxNode, batch: ImportedBatch, add_to: list[int], parent_id: int) -> None:
        # def <name> <parameters> : <body>; return annotations have no frame equivalent
        if len(node.children) != 5:
            self._handle_unsupported(node, batch, add_to, parent_id)
            return
        self._frame_with_body(node, FrameType.FUNCDEF, [1, 2], 4, batch, add_to, parent_id)
