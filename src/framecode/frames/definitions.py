#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/frames/definitions.py
"""Frame variant catalogue.

Every frame in a tree carries one of the static descriptors defined here. A
descriptor lists the frame's labels (the fixed keyword text and whether an
editable slot follows it) and the structural rules the store enforces: whether
the frame owns a body, which variants it accepts as joint continuations and
which variants may never appear below it.

Variant Families
----------------
Containers (never emitted, only children of the implicit root):
    - root, importsContainer, funcDefsContainer, mainContainer

Blocks (own a body):
    - if, elif, else, for, while, try, except, finally, funcdef, with

Statements (no body):
    - varassign, return, break, continue, raise, global, comment,
      import, from-import, and the generic expression statement ("")

"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional


class FrameType(str, Enum):
    """Identifiers of every frame variant."""

    ROOT = "root"
    IMPORTS_CONTAINER = "importsContainer"
    FUNCDEFS_CONTAINER = "funcDefsContainer"
    MAIN_CONTAINER = "mainContainer"

    IF = "if"
    ELIF = "elif"
    ELSE = "else"
    FOR = "for"
    WHILE = "while"
    TRY = "try"
    EXCEPT = "except"
    FINALLY = "finally"
    FUNCDEF = "funcdef"
    WITH = "with"

    VARASSIGN = "varassign"
    RETURN = "return"
    BREAK = "break"
    CONTINUE = "continue"
    RAISE = "raise"
    GLOBAL = "global"
    COMMENT = "comment"
    IMPORT = "import"
    FROM_IMPORT = "from-import"
    EXPRESSION = ""


class DraggableGroup(str, Enum):
    """Groups of frames that may be dragged into each other's lists."""

    IMPORTS = "imports"
    CODE = "code"
    FUNCTION_SIGNATURES = "functionSignatures"
    IF_COMPOUND = "ifCompound"
    TRY_COMPOUND = "tryCompound"
    NONE = "none"


IMPORT_FRAME_TYPES = frozenset({FrameType.IMPORT, FrameType.FROM_IMPORT})
JOINT_FRAME_TYPES = frozenset({FrameType.ELIF, FrameType.ELSE, FrameType.EXCEPT, FrameType.FINALLY})
CONTAINER_FRAME_TYPES = frozenset(
    {FrameType.IMPORTS_CONTAINER, FrameType.FUNCDEFS_CONTAINER, FrameType.MAIN_CONTAINER}
)

# Every variant a user can insert
USER_FRAME_TYPES = frozenset(t for t in FrameType if t is not FrameType.ROOT and t not in CONTAINER_FRAME_TYPES)

# Variants that may appear in ordinary code bodies
STANDARD_FRAME_TYPES = USER_FRAME_TYPES - IMPORT_FRAME_TYPES - {FrameType.FUNCDEF}

_BLOCK_FORBIDDEN = IMPORT_FRAME_TYPES | {FrameType.FUNCDEF} | JOINT_FRAME_TYPES


@dataclass(frozen=True)
class FrameLabel:
    """One label of a frame header.

    Parameters
    ----------
    text : str
        Literal keyword text emitted before the slot (e.g. ``"if "``)
    has_slot : bool, default True
        Whether an editable slot follows the label
    hidable : bool, default False
        Whether the label and its slot are omitted when the slot is not shown
        (e.g. the ``as`` part of a ``with`` frame)
    optional_slot : bool, default False
        Whether the slot may legitimately stay empty
    default_text_key : str, default ""
        Translation key of the placeholder shown in an empty slot

    """

    text: str
    has_slot: bool = True
    hidable: bool = False
    optional_slot: bool = False
    default_text_key: str = ""


@dataclass(frozen=True)
class FrameDefinition:
    """Static descriptor of a frame variant.

    Parameters
    ----------
    type : FrameType
        Variant identifier
    labels : tuple of FrameLabel
        Ordered header labels
    allow_children : bool
        Whether the frame owns a body
    allow_joint_children : bool
        Whether the frame may head a joint group
    forbidden_children_types : frozenset of FrameType
        Variants that may not appear in the body; for blocks, anywhere below
    is_joint_frame : bool
        Whether the variant is a joint continuation
    joint_frame_types : tuple of FrameType
        Variants accepted as the next joint continuation
    draggable_group : DraggableGroup
        Drag-and-drop group of the frame
    is_container : bool
        Whether the frame is one of the fixed top-level containers

    """

    type: FrameType
    labels: tuple[FrameLabel, ...] = ()
    allow_children: bool = False
    allow_joint_children: bool = False
    forbidden_children_types: frozenset[FrameType] = field(default_factory=frozenset)
    is_joint_frame: bool = False
    joint_frame_types: tuple[FrameType, ...] = ()
    draggable_group: DraggableGroup = DraggableGroup.NONE
    is_container: bool = False

    @property
    def slot_label_indices(self) -> list[int]:
        """Indices of the labels that carry an editable slot."""
        return [index for index, label in enumerate(self.labels) if label.has_slot]

    @property
    def is_import_frame(self) -> bool:
        """Whether the variant belongs to the imports section."""
        return self.type in IMPORT_FRAME_TYPES

    def forbids(self, frame_type: FrameType) -> bool:
        """Return True if ``frame_type`` may not appear in this frame's own body."""
        return frame_type in self.forbidden_children_types

    def forbids_descendant(self, frame_type: FrameType) -> bool:
        """Return True if ``frame_type`` may not appear anywhere below this frame.

        Containers and the root only constrain their own top-level list;
        blocks constrain their whole subtree.
        """
        if self.is_container or self.type is FrameType.ROOT:
            return False
        return self.forbids(frame_type)

    def accepts_joint(self, frame_type: FrameType) -> bool:
        """Return True if ``frame_type`` may follow this frame in a joint group."""
        return frame_type in self.joint_frame_types


_BLOCK = FrameDefinition(
    type=FrameType.ROOT,
    allow_children=True,
    forbidden_children_types=_BLOCK_FORBIDDEN,
    draggable_group=DraggableGroup.CODE,
)

_STATEMENT = FrameDefinition(
    type=FrameType.EXPRESSION,
    forbidden_children_types=USER_FRAME_TYPES,
    draggable_group=DraggableGroup.CODE,
)


def _block(frame_type: FrameType, *labels: FrameLabel, **overrides) -> FrameDefinition:
    return replace(_BLOCK, type=frame_type, labels=labels, **overrides)


def _statement(frame_type: FrameType, *labels: FrameLabel, **overrides) -> FrameDefinition:
    return replace(_STATEMENT, type=frame_type, labels=labels, **overrides)


def _colon() -> FrameLabel:
    return FrameLabel(":", has_slot=False)


def _container(frame_type: FrameType, label_key: str, allowed: frozenset[FrameType], group: DraggableGroup):
    return replace(
        _BLOCK,
        type=frame_type,
        labels=(FrameLabel("", has_slot=False, default_text_key=label_key),),
        forbidden_children_types=USER_FRAME_TYPES - allowed,
        draggable_group=group,
        is_container=True,
    )


FRAME_DEFINITIONS: dict[FrameType, FrameDefinition] = {
    FrameType.ROOT: replace(_BLOCK, forbidden_children_types=USER_FRAME_TYPES, draggable_group=DraggableGroup.NONE),
    FrameType.IMPORTS_CONTAINER: _container(
        FrameType.IMPORTS_CONTAINER,
        "appMessage.importsContainer",
        IMPORT_FRAME_TYPES | {FrameType.COMMENT},
        DraggableGroup.IMPORTS,
    ),
    FrameType.FUNCDEFS_CONTAINER: _container(
        FrameType.FUNCDEFS_CONTAINER,
        "appMessage.funcDefsContainer",
        frozenset({FrameType.FUNCDEF, FrameType.COMMENT}),
        DraggableGroup.FUNCTION_SIGNATURES,
    ),
    FrameType.MAIN_CONTAINER: _container(
        FrameType.MAIN_CONTAINER,
        "appMessage.mainContainer",
        STANDARD_FRAME_TYPES - JOINT_FRAME_TYPES,
        DraggableGroup.CODE,
    ),
    FrameType.IF: _block(
        FrameType.IF,
        FrameLabel("if ", default_text_key="frame.defaultText.condition"),
        _colon(),
        allow_joint_children=True,
        joint_frame_types=(FrameType.ELIF, FrameType.ELSE),
    ),
    FrameType.ELIF: _block(
        FrameType.ELIF,
        FrameLabel("elif ", default_text_key="frame.defaultText.condition"),
        _colon(),
        is_joint_frame=True,
        joint_frame_types=(FrameType.ELIF, FrameType.ELSE),
        draggable_group=DraggableGroup.IF_COMPOUND,
    ),
    FrameType.ELSE: _block(
        FrameType.ELSE,
        FrameLabel("else :", has_slot=False),
        is_joint_frame=True,
        joint_frame_types=(FrameType.FINALLY,),
        draggable_group=DraggableGroup.IF_COMPOUND,
    ),
    FrameType.FOR: _block(
        FrameType.FOR,
        FrameLabel("for ", default_text_key="frame.defaultText.identifier"),
        FrameLabel("in ", default_text_key="frame.defaultText.list"),
        _colon(),
        allow_joint_children=True,
        joint_frame_types=(FrameType.ELSE,),
    ),
    FrameType.WHILE: _block(
        FrameType.WHILE,
        FrameLabel("while ", default_text_key="frame.defaultText.condition"),
        _colon(),
    ),
    FrameType.TRY: _block(
        FrameType.TRY,
        FrameLabel("try :", has_slot=False),
        allow_joint_children=True,
        joint_frame_types=(FrameType.EXCEPT, FrameType.ELSE, FrameType.FINALLY),
    ),
    FrameType.EXCEPT: _block(
        FrameType.EXCEPT,
        FrameLabel("except ", optional_slot=True, default_text_key="frame.defaultText.exception"),
        _colon(),
        is_joint_frame=True,
        joint_frame_types=(FrameType.EXCEPT, FrameType.ELSE, FrameType.FINALLY),
        draggable_group=DraggableGroup.TRY_COMPOUND,
    ),
    FrameType.FINALLY: _block(
        FrameType.FINALLY,
        FrameLabel("finally :", has_slot=False),
        is_joint_frame=True,
        draggable_group=DraggableGroup.NONE,
    ),
    FrameType.FUNCDEF: _block(
        FrameType.FUNCDEF,
        FrameLabel("def ", default_text_key="frame.defaultText.name"),
        FrameLabel("(", optional_slot=True, default_text_key="frame.defaultText.parameters"),
        FrameLabel(") :", has_slot=False),
        draggable_group=DraggableGroup.FUNCTION_SIGNATURES,
    ),
    FrameType.WITH: _block(
        FrameType.WITH,
        FrameLabel("with ", default_text_key="frame.defaultText.expression"),
        FrameLabel("as ", hidable=True, default_text_key="frame.defaultText.identifier"),
        _colon(),
    ),
    FrameType.VARASSIGN: _statement(
        FrameType.VARASSIGN,
        FrameLabel("", default_text_key="frame.defaultText.identifier"),
        FrameLabel("= ", default_text_key="frame.defaultText.value"),
    ),
    FrameType.RETURN: _statement(
        FrameType.RETURN,
        FrameLabel("return ", optional_slot=True, default_text_key="frame.defaultText.expression"),
    ),
    FrameType.BREAK: _statement(FrameType.BREAK, FrameLabel("break", has_slot=False)),
    FrameType.CONTINUE: _statement(FrameType.CONTINUE, FrameLabel("continue", has_slot=False)),
    FrameType.RAISE: _statement(
        FrameType.RAISE,
        FrameLabel("raise ", optional_slot=True, default_text_key="frame.defaultText.exception"),
    ),
    FrameType.GLOBAL: _statement(
        FrameType.GLOBAL,
        FrameLabel("global ", default_text_key="frame.defaultText.variable"),
    ),
    FrameType.COMMENT: _statement(
        FrameType.COMMENT,
        FrameLabel("# ", optional_slot=True, default_text_key="frame.defaultText.comment"),
    ),
    FrameType.IMPORT: _statement(
        FrameType.IMPORT,
        FrameLabel("import ", default_text_key="frame.defaultText.modulePart"),
        draggable_group=DraggableGroup.IMPORTS,
    ),
    FrameType.FROM_IMPORT: _statement(
        FrameType.FROM_IMPORT,
        FrameLabel("from ", default_text_key="frame.defaultText.module"),
        FrameLabel("import ", default_text_key="frame.defaultText.modulePart"),
        draggable_group=DraggableGroup.IMPORTS,
    ),
    FrameType.EXPRESSION: _statement(
        FrameType.EXPRESSION,
        FrameLabel("", optional_slot=True, default_text_key="frame.defaultText.funcCall"),
    ),
}


def get_definition(frame_type: FrameType | str) -> FrameDefinition:
    """Look up the descriptor of a frame variant.

    Parameters
    ----------
    frame_type : FrameType or str
        Variant identifier, either the enum member or its string value

    Returns
    -------
    FrameDefinition
        Static descriptor of the variant

    Raises
    ------
    ValueError
        If ``frame_type`` names no known variant

    """
    return FRAME_DEFINITIONS[FrameType(frame_type)]


def find_definition(frame_type: str) -> Optional[FrameDefinition]:
    """Like :func:`get_definition` but returns None for unknown identifiers."""
    try:
        return get_definition(frame_type)
    except ValueError:
        return None
