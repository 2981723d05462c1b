#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/framecode/i18n.py
"""Default display-text catalogue.

Localisation is an external collaborator; this module only provides the
English fallback catalogue used when the host supplies no translator, so that
placeholder texts and container labels are never empty.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES: dict[str, str] = {
    "appMessage.importsContainer": "Imports",
    "appMessage.funcDefsContainer": "Function definitions",
    "appMessage.mainContainer": "My code",
    "frame.defaultText.condition": "condition",
    "frame.defaultText.identifier": "identifier",
    "frame.defaultText.list": "list",
    "frame.defaultText.exception": "exception",
    "frame.defaultText.name": "name",
    "frame.defaultText.parameters": "parameters",
    "frame.defaultText.expression": "expression",
    "frame.defaultText.funcCall": "function call",
    "frame.defaultText.variable": "variable",
    "frame.defaultText.value": "value",
    "frame.defaultText.modulePart": "module part",
    "frame.defaultText.module": "module",
    "frame.defaultText.comment": "your comment",
    "messageBannerMessage.deleteLargeCode": "A large portion of code has been deleted.",
    "messageBannerMessage.unsupportedConstruct": "Some code could not be turned into frames and was kept as a comment.",
    "messageBannerMessage.uploadEditorFileError": "The code could not be imported.",
    "console.runtimeErrorEditableSlotPreamble": "Runtime error",
}


class CatalogueTranslator:
    """Translator backed by a plain key/text mapping.

    Unknown keys are returned unchanged so a missing entry shows up as its key
    rather than as an empty label.

    Parameters
    ----------
    messages : Mapping[str, str] or None, default = None
        Catalogue to use; defaults to :data:`DEFAULT_MESSAGES`

    """

    def __init__(self, messages: Optional[Mapping[str, str]] = None):
        self.messages = dict(DEFAULT_MESSAGES if messages is None else messages)

    def translate(self, key: str) -> str:
        """Return the display text for ``key``."""
        text = self.messages.get(key)
        if text is None:
            logger.debug(f"No display text for key {key}")
            return key
        return text
