#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/collaborators.py
"""Interfaces of the services the editor core relies on.

Parsing, linting, execution and localisation live outside the core. They are
consumed only through the protocols below, so any object with matching
methods can be plugged in.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from framecode.diagnostics import LintMessage, RuntimeFailure
from framecode.frames.emitter import PositionMap
from framecode.frames.importer import SyntaxNode


@runtime_checkable
class SyntaxTreeParser(Protocol):
    """Turns program text into a generic syntax tree."""

    def parse(self, source: str) -> SyntaxNode:
        """Parse ``source`` into a concrete syntax tree."""
        ...


@runtime_checkable
class Linter(Protocol):
    """Reports problems in program text."""

    def lint(self, source: str) -> list[LintMessage]:
        """Return the problems found in ``source``, in order."""
        ...


@runtime_checkable
class ExecutionEngine(Protocol):
    """Runs program text."""

    def run(self, source: str, position_map: PositionMap) -> Optional[RuntimeFailure]:
        """Run ``source`` and return its failure, or None on normal completion."""
        ...


@runtime_checkable
class Translator(Protocol):
    """Looks up display text for message keys."""

    def translate(self, key: str) -> str:
        """Return the display text for ``key``."""
        ...
