#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/frames/slots.py
"""Slot content structures.

A slot holds the code typed after a frame label. Its content is a tree: a
:class:`SlotStructure` holds an ordered list of fields separated by operator
tokens, and each field is either a :class:`SlotLeaf` (literal code, optionally
quoted) or a nested bracketed :class:`SlotStructure`.

Two invariants hold for every structure:

- ``len(operators) == len(fields) - 1`` whenever ``fields`` is non-empty;
- a bracketed structure is always surrounded by an empty leaf on each side,
  joined to them with empty operators.

Examples
--------
Build and render ``print(x + 1)``:

    >>> call = concat_slots(
    ...     leaf_structure("print"), "", bracketed(concat_slots(leaf_structure("x"), "+", leaf_structure("1")), "(")
    ... )
    >>> render_slot(call)
    'print(x + 1)'

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from framecode.constants import OPENING_BRACKETS, TIGHT_OPERATORS

# Symbolic operators that bind tightly to their operand when used as a prefix
_UNARY_SYMBOLS = frozenset({"-", "+", "~"})


@dataclass
class SlotLeaf:
    """Flat piece of code.

    Parameters
    ----------
    code : str, default ""
        Literal code text
    quote : str, default ""
        Quote delimiter for string literals (empty for plain code)

    """

    code: str = ""
    quote: str = ""


@dataclass
class SlotStructure:
    """Ordered fields joined by operators, optionally bracketed.

    Parameters
    ----------
    fields : list of SlotContent
        Leaf or nested structure fields
    operators : list of str
        Operator tokens between consecutive fields
    opening_bracket : str or None, default None
        Opening bracket character when the structure is a bracketed group

    """

    fields: list[SlotContent] = field(default_factory=list)
    operators: list[str] = field(default_factory=list)
    opening_bracket: Optional[str] = None

    @property
    def is_bracketed(self) -> bool:
        """Whether the structure renders inside brackets."""
        return self.opening_bracket is not None


SlotContent = Union[SlotLeaf, SlotStructure]


def leaf_structure(code: str = "", quote: str = "") -> SlotStructure:
    """Return a one-field structure holding a single leaf."""
    return SlotStructure(fields=[SlotLeaf(code=code, quote=quote)])


def concat_slots(lhs: SlotStructure, operator: str, rhs: SlotStructure) -> SlotStructure:
    """Join two structures with an operator between the last and first fields.

    Parameters
    ----------
    lhs : SlotStructure
        Left-hand structure
    operator : str
        Operator token placed between the two
    rhs : SlotStructure
        Right-hand structure

    Returns
    -------
    SlotStructure
        New unbracketed structure holding the fields of both sides

    """
    return SlotStructure(
        fields=[*lhs.fields, *rhs.fields],
        operators=[*lhs.operators, operator, *rhs.operators],
    )


def bracketed(inner: SlotStructure, opening_bracket: str) -> SlotStructure:
    """Wrap ``inner`` as a bracketed group bounded by two empty leaves.

    Raises
    ------
    ValueError
        If ``opening_bracket`` is not one of ``(``, ``[`` or ``{``

    """
    if opening_bracket not in OPENING_BRACKETS:
        raise ValueError(f"Not an opening bracket: {opening_bracket!r}")
    group = SlotStructure(fields=list(inner.fields), operators=list(inner.operators), opening_bracket=opening_bracket)
    return SlotStructure(fields=[SlotLeaf(), group, SlotLeaf()], operators=["", ""])


def closing_bracket(opening_bracket: str) -> str:
    """Return the bracket closing ``opening_bracket``."""
    return OPENING_BRACKETS[opening_bracket]


def render_operator(operator: str, left_is_empty: bool = False) -> str:
    """Render an operator token with its surrounding spaces.

    ``.`` and the empty operator stay tight, ``,`` and ``:`` take a trailing
    space only, everything else is spaced on both sides. When the left operand
    is empty the operator is a prefix: symbolic prefixes bind to the operand
    and keyword prefixes keep only their trailing space.
    """
    if operator in TIGHT_OPERATORS:
        return operator
    if operator in (",", ":"):
        return f"{operator} "
    if left_is_empty:
        return operator if operator in _UNARY_SYMBOLS else f"{operator} "
    return f" {operator} "


def render_slot(content: SlotContent) -> str:
    """Render slot content as program text.

    Parameters
    ----------
    content : SlotContent
        Leaf or structure to render

    Returns
    -------
    str
        The code as it appears in emitted program text

    """
    if isinstance(content, SlotLeaf):
        return f"{content.quote}{content.code}{content.quote}"

    rendered = [render_slot(field_content) for field_content in content.fields]
    parts: list[str] = rendered[:1]
    for index in range(1, len(rendered)):
        # An empty left operand makes the operator a prefix, unless that empty
        # leaf is the boundary of a bracketed group
        left_is_empty = not rendered[index - 1] and (index == 1 or content.operators[index - 2] != "")
        parts.append(render_operator(content.operators[index - 1], left_is_empty))
        parts.append(rendered[index])
    text = "".join(parts)

    if content.opening_bracket is not None:
        return f"{content.opening_bracket}{text}{closing_bracket(content.opening_bracket)}"
    return text


def is_empty_slot(content: SlotContent) -> bool:
    """Return True if the content renders to nothing."""
    return render_slot(content) == ""


def slot_invariant_violations(content: SlotContent, path: str = "slot") -> list[str]:
    """Collect descriptions of every broken slot invariant.

    Parameters
    ----------
    content : SlotContent
        Content to check
    path : str, default "slot"
        Location prefix used in the messages

    Returns
    -------
    list of str
        Empty when the content is well formed

    """
    if isinstance(content, SlotLeaf):
        return []

    violations: list[str] = []
    if content.fields and len(content.operators) != len(content.fields) - 1:
        violations.append(
            f"{path}: {len(content.fields)} fields but {len(content.operators)} operators"
        )
    if content.opening_bracket is not None and content.opening_bracket not in OPENING_BRACKETS:
        violations.append(f"{path}: unknown opening bracket {content.opening_bracket!r}")

    for index, field_content in enumerate(content.fields):
        field_path = f"{path}.fields[{index}]"
        if isinstance(field_content, SlotStructure) and field_content.is_bracketed:
            before = content.fields[index - 1] if index > 0 else None
            after = content.fields[index + 1] if index + 1 < len(content.fields) else None
            if not (_is_empty_leaf(before) and _is_empty_leaf(after)):
                violations.append(f"{field_path}: bracketed group not bounded by empty leaves")
            elif len(content.operators) == len(content.fields) - 1 and (
                content.operators[index - 1] != "" or content.operators[index] != ""
            ):
                violations.append(f"{field_path}: bracketed group joined with non-empty operators")
        violations.extend(slot_invariant_violations(field_content, field_path))
    return violations


def _is_empty_leaf(content: Optional[SlotContent]) -> bool:
    return isinstance(content, SlotLeaf) and content.code == "" and content.quote == ""
