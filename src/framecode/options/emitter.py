#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/options/emitter.py
"""Configuration options for the text emitter."""

from __future__ import annotations

from dataclasses import dataclass, field

from framecode.constants import DEFAULT_DISABLED_BLOCK_DELIMITER, DEFAULT_INDENT
from framecode.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class EmitterOptions(CloneFrozenMixin):
    """Configuration options for turning a frame tree into program text.

    Parameters
    ----------
    indent : str, default "    "
        Whitespace added for each level of nesting. Must be non-empty and
        contain only spaces or tabs.
    disabled_block_delimiter : str, default '\"\"\"'
        Token written on its own line around runs of disabled frames so that
        they read back as an inert string literal.

    """

    indent: str = field(
        default=DEFAULT_INDENT,
        metadata={"help": "Indentation added per nesting level", "importance": "core"},
    )
    disabled_block_delimiter: str = field(
        default=DEFAULT_DISABLED_BLOCK_DELIMITER,
        metadata={
            "help": "Delimiter line emitted around disabled frames",
            "choices": ['"""', "'''"],
            "importance": "advanced",
        },
    )

    def __post_init__(self) -> None:
        """Validate the indentation and delimiter.

        Raises
        ------
        ValueError
            If any field value is invalid.

        """
        if not self.indent or self.indent.strip(" \t"):
            raise ValueError(f"indent must be a non-empty run of spaces or tabs, got {self.indent!r}")
        if self.disabled_block_delimiter not in ('"""', "'''"):
            raise ValueError(
                f"disabled_block_delimiter must be a triple-quote token, got {self.disabled_block_delimiter!r}"
            )
