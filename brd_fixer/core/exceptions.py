from __future__ import annotations

"""Exception classes raised by the BRD fixer core.

Only one failure kind exists in the core: a document that cannot be parsed
as a tree, or that lacks an attribute the board format mandates.  Empty
boards, boards without duplicates and libraries without packages are valid
inputs, not errors.
"""

from pathlib import Path
from typing import Optional

__all__ = ["BrdFixerError", "MalformedDocument"]


class BrdFixerError(Exception):
    """Base exception for all fixer errors."""

    def __init__(self, message: str, file_path: Optional[Path] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.cause = cause

    def __str__(self) -> str:
        if self.file_path:
            return f"[{self.file_path}] {super().__str__()}"
        return super().__str__()


class MalformedDocument(BrdFixerError):
    """Raised when the board text is not a well-formed tree.

    Also raised when a ``<library>`` has no ``name`` attribute.  Fatal to
    the call: no partial result is produced.
    """
    pass
