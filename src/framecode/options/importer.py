#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/options/importer.py
"""Configuration options for the tree importer."""

from __future__ import annotations

from dataclasses import dataclass, field

from framecode.constants import (
    DEFAULT_FIRST_SCRATCH_ID,
    DEFAULT_UNSUPPORTED_CONSTRUCTS,
    UnsupportedConstructMode,
)
from framecode.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class ImporterOptions(CloneFrozenMixin):
    """Configuration options for building frames from a parsed syntax tree.

    Parameters
    ----------
    first_scratch_id : int, default 1_000_000
        First id handed to frames while the imported batch is still outside
        the live tree. Ids are renumbered when the batch is spliced in.
    unsupported_constructs : {"comment", "skip", "error"}, default "comment"
        What to do with statements that have no frame equivalent (classes,
        decorators, async blocks...):

        - "comment": keep the statement text in a comment frame
        - "skip": drop the statement
        - "error": abort the whole import

    """

    first_scratch_id: int = field(
        default=DEFAULT_FIRST_SCRATCH_ID,
        metadata={"help": "First provisional id used for imported frames", "importance": "advanced"},
    )
    unsupported_constructs: UnsupportedConstructMode = field(
        default=DEFAULT_UNSUPPORTED_CONSTRUCTS,
        metadata={
            "help": "Handling of statements without a frame equivalent",
            "choices": ["comment", "skip", "error"],
            "importance": "core",
        },
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.first_scratch_id <= 0:
            raise ValueError(f"first_scratch_id must be positive, got {self.first_scratch_id}")
        if self.unsupported_constructs not in ("comment", "skip", "error"):
            raise ValueError(
                f"unsupported_constructs must be 'comment', 'skip' or 'error', got {self.unsupported_constructs!r}"
            )
