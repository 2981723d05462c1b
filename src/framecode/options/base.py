"""Base classes for framecode options.

This module defines the foundation class shared by the emitter, importer and
editor option dataclasses.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    Options objects are immutable; this mixin adds the ability to derive a
    modified copy, re-running ``__post_init__`` validation on the result.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)

    @classmethod
    def describe_fields(cls) -> dict[str, str]:
        """Return the help text of every field, keyed by field name."""
        return {f.name: f.metadata.get("help", "") for f in fields(cls)}
