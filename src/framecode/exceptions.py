#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the framecode library.

This module defines specialized exception classes for the error conditions
that can occur while editing, emitting and importing frame trees. These
exceptions provide more specific error information than generic built-ins.

Exception Hierarchy
-------------------
- FrameCodeError (base exception)

  - FrameNotFoundError (reference to a frame id that does not exist)

  - FrameTreeError (tree invariant violations)

  - TreeImportError (syntax tree could not be turned into frames)
    - MalformedSyntaxNodeError (node with neither value nor children)
    - UnknownOperatorError (operator token outside the known vocabulary)
    - UnsupportedConstructError (statement kind with no frame equivalent)

  - SnapshotError (invalid serialized tree data)

Notes
-----
FrameNotFoundError and FrameTreeError signal programming-contract violations.
Callers are expected to pass ids that exist, so these are not meant to be
recovered from. Import errors are caught at the top-level import entry point
and turned into a boolean outcome.

"""

from __future__ import annotations

from typing import Any


class FrameCodeError(Exception):
    """Base exception class for all framecode-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class FrameNotFoundError(FrameCodeError, KeyError):
    """Exception raised when an operation references a non-existent frame id.

    Parameters
    ----------
    frame_id : int
        The id that could not be resolved
    message : str, optional
        Custom error message. If not provided, uses default message

    Attributes
    ----------
    frame_id : int
        The id that could not be resolved

    """

    def __init__(self, frame_id: int, message: str | None = None):
        """Initialize the error with the missing frame id."""
        if message is None:
            message = f"No frame with id {frame_id} in the tree"
        super().__init__(message)
        self.frame_id = frame_id

    def __str__(self) -> str:
        """Return the message rather than KeyError's quoted repr."""
        return self.message


class FrameTreeError(FrameCodeError):
    """Exception raised when the frame tree breaks one of its invariants.

    Parameters
    ----------
    message : str
        Description of the invariant violation
    violations : list of str, optional
        Every violation found, when several were collected at once

    Attributes
    ----------
    violations : list of str
        Individual violation descriptions

    """

    def __init__(self, message: str, violations: list[str] | None = None):
        """Initialize the tree error with the collected violations."""
        super().__init__(message)
        self.violations = violations or []


class TreeImportError(FrameCodeError):
    """Exception raised when a parsed syntax tree cannot be turned into frames.

    Parameters
    ----------
    message : str
        Description of the import failure
    node_kind : str, optional
        Kind of the syntax node being processed when the failure happened
    original_error : Exception, optional
        The underlying exception that caused the import failure

    Attributes
    ----------
    node_kind : str or None
        Kind of the offending syntax node

    """

    def __init__(self, message: str, node_kind: str | None = None, original_error: Exception | None = None):
        """Initialize the import error."""
        super().__init__(message, original_error)
        self.node_kind = node_kind


class MalformedSyntaxNodeError(TreeImportError):
    """Exception raised for a syntax node that carries neither a value nor children."""

    def __init__(self, node_kind: str, message: str | None = None):
        """Initialize the malformed node error."""
        if message is None:
            message = f"Node of kind '{node_kind}' has no value and no children"
        super().__init__(message, node_kind=node_kind)


class UnknownOperatorError(TreeImportError):
    """Exception raised when an operator token is outside the known vocabulary.

    Parameters
    ----------
    operator : str
        The unrecognized operator text
    node_kind : str, optional
        Kind of the expression node holding the operator

    Attributes
    ----------
    operator : str
        The unrecognized operator text

    """

    def __init__(self, operator: Any, node_kind: str | None = None):
        """Initialize the unknown operator error."""
        super().__init__(f"Unknown operator: {operator!r}", node_kind=node_kind)
        self.operator = operator


class UnsupportedConstructError(TreeImportError):
    """Exception raised for statements that have no frame equivalent.

    Only raised when the importer is configured with
    ``unsupported_constructs="error"``.

    """

    def __init__(self, node_kind: str):
        """Initialize the unsupported construct error."""
        super().__init__(f"No frame equivalent for '{node_kind}'", node_kind=node_kind)


class SnapshotError(FrameCodeError):
    """Exception raised when serialized tree data cannot be loaded.

    Parameters
    ----------
    message : str
        Description of the problem in the snapshot
    original_error : Exception, optional
        The underlying exception (e.g. a JSON decoding error)

    """

    pass
