#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/options/editor.py
"""Configuration options for the editor facade."""

from __future__ import annotations

from dataclasses import dataclass, field

from framecode.constants import DEFAULT_LARGE_DELETION_THRESHOLD
from framecode.options.base import CloneFrozenMixin
from framecode.options.emitter import EmitterOptions
from framecode.options.importer import ImporterOptions


@dataclass(frozen=True)
class EditorOptions(CloneFrozenMixin):
    """Configuration for :class:`framecode.editor.FrameEditor`.

    Parameters
    ----------
    large_deletion_threshold : int, default 3
        Number of descendant frames at which a deletion raises a
        ``large_deletion`` event. The deletion proceeds regardless.
    emitter : EmitterOptions
        Options passed to the text emitter
    importer : ImporterOptions
        Options passed to the tree importer

    """

    large_deletion_threshold: int = field(
        default=DEFAULT_LARGE_DELETION_THRESHOLD,
        metadata={"help": "Descendant count that triggers a large-deletion warning", "importance": "core"},
    )
    emitter: EmitterOptions = field(
        default_factory=EmitterOptions,
        metadata={"help": "Text emitter options", "importance": "advanced"},
    )
    importer: ImporterOptions = field(
        default_factory=ImporterOptions,
        metadata={"help": "Tree importer options", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.large_deletion_threshold < 1:
            raise ValueError(f"large_deletion_threshold must be at least 1, got {self.large_deletion_threshold}")
