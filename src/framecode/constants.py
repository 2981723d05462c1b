#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the framecode library.

This module centralizes the hardcoded values, reserved identifiers and
default configuration constants used across framecode.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Reserved Frame Identifiers - Root and container ids
3. Emission Defaults - Text emitter settings
4. Import Defaults - Tree importer settings and operator vocabulary
5. Editor Defaults - Navigation and deletion policy
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions - All Literal Types and Type Aliases
# =============================================================================

UnsupportedConstructMode = Literal["comment", "skip", "error"]
NavigationKey = Literal["ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight", "Delete", "Backspace"]

# =============================================================================
# Reserved Frame Identifiers
# =============================================================================

ROOT_FRAME_ID = 0
IMPORTS_CONTAINER_ID = -1
FUNCDEFS_CONTAINER_ID = -2
MAIN_CONTAINER_ID = -3

# First id handed out to user frames in a freshly created tree
DEFAULT_FIRST_FRAME_ID = 1

# =============================================================================
# Emission Defaults
# =============================================================================

DEFAULT_INDENT = "    "
DEFAULT_DISABLED_BLOCK_DELIMITER = '"""'

# =============================================================================
# Import Defaults
# =============================================================================

# Scratch ids sit far away from live ids until the batch is renumbered
DEFAULT_FIRST_SCRATCH_ID = 1_000_000
DEFAULT_UNSUPPORTED_CONSTRUCTS: UnsupportedConstructMode = "comment"

# Grammar productions that only wrap other statements
WRAPPER_NODE_KINDS = frozenset(
    {
        "file_input",
        "stmt",
        "simple_stmt",
        "small_stmt",
        "flow_stmt",
        "compound_stmt",
    }
)

# Token kinds that never produce frames (layout and end-of-input markers)
LAYOUT_TOKEN_KINDS = frozenset({"NEWLINE", "INDENT", "DEDENT", "ENDMARKER"})

STATEMENT_NODE_KINDS_EXTRA = frozenset({"classdef", "decorated", "async_stmt", "async_funcdef"})

UNARY_OPERATORS = ("-", "+", "~", "not")
OPENING_BRACKETS = {"(": ")", "[": "]", "{": "}"}

ARITHMETIC_OPERATORS = ("+", "-", "*", "/", "//", "%", "**", "@")
BITWISE_OPERATORS = ("&", "|", "^", "~", "<<", ">>")
COMPARISON_OPERATORS = ("<", ">", "<=", ">=", "==", "!=", "<>")
AUGMENTED_ASSIGNMENT_OPERATORS = (
    "+=",
    "-=",
    "*=",
    "/=",
    "//=",
    "%=",
    "**=",
    "@=",
    "&=",
    "|=",
    "^=",
    "<<=",
    ">>=",
)
PUNCTUATION_OPERATORS = (",", ".", ":", "=", "")
KEYWORD_OPERATORS = ("and", "or", "not", "in", "not in", "is", "is not", "as", "if", "else", "from")

KNOWN_OPERATORS = frozenset(
    ARITHMETIC_OPERATORS
    + BITWISE_OPERATORS
    + COMPARISON_OPERATORS
    + AUGMENTED_ASSIGNMENT_OPERATORS
    + PUNCTUATION_OPERATORS
    + KEYWORD_OPERATORS
)

# Operators rendered without surrounding spaces
TIGHT_OPERATORS = frozenset({".", ""})

# =============================================================================
# Editor Defaults
# =============================================================================

DEFAULT_LARGE_DELETION_THRESHOLD = 3

# Message keys looked up through the translator
LARGE_DELETION_MESSAGE_KEY = "messageBannerMessage.deleteLargeCode"
UNSUPPORTED_CONSTRUCT_MESSAGE_KEY = "messageBannerMessage.unsupportedConstruct"
IMPORT_FAILED_MESSAGE_KEY = "messageBannerMessage.uploadEditorFileError"
RUNTIME_ERROR_PREAMBLE_KEY = "console.runtimeErrorEditableSlotPreamble"
