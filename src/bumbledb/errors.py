"""Exceptions raised by bumbledb.

OS-level failures (permissions, missing directories, disk errors) are not
wrapped: they surface as the original OSError subclass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class BumbleDBError(Exception):
    """Base class for bumbledb errors."""


class CorruptLineError(BumbleDBError, ValueError):
    """A collection file holds a line that is not valid JSON."""

    def __init__(self, path: Path, lineno: int, detail: str = "") -> None:
        self.path = path
        self.lineno = lineno
        msg = f"{path}:{lineno}: invalid document line"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class InvalidCollectionName(BumbleDBError, ValueError):
    """Collection name cannot be mapped to a file inside the data directory."""
