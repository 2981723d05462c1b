#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/options/__init__.py
"""Option dataclasses for the emitter, importer and editor."""

from framecode.options.base import CloneFrozenMixin
from framecode.options.editor import EditorOptions
from framecode.options.emitter import EmitterOptions
from framecode.options.importer import ImporterOptions

__all__ = [
    "CloneFrozenMixin",
    "EditorOptions",
    "EmitterOptions",
    "ImporterOptions",
]
