"""Database: a directory of <name>.ndjson collection files."""

from __future__ import annotations

import contextlib
import logging
import shutil
from pathlib import Path

from bumbledb.collection import EXTENSION, Collection

logger = logging.getLogger("bumbledb.database")


class Database:
    """Hands out Collection objects rooted at data_dir.

    Constructing a Database does not touch the disk; use open_database()
    to also create the directory.
    """

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)

    def __repr__(self) -> str:
        return f"Database({str(self.data_dir)!r})"

    def collection(self, name: str) -> Collection:
        return Collection(self.data_dir, name)

    def __getitem__(self, name: str) -> Collection:
        return self.collection(name)

    def collections(self) -> list[str]:
        """Names of all collections that have a file in data_dir."""
        return sorted(
            p.name[: -len(EXTENSION)]
            for p in self.data_dir.iterdir()
            if p.is_file() and p.name.endswith(EXTENSION)
        )

    def drop(self) -> None:
        """Delete every collection. data_dir is recreated empty."""
        with contextlib.suppress(FileNotFoundError):
            shutil.rmtree(self.data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("dropped database %s", self.data_dir)


def open_database(data_dir: Path | str) -> Database:
    """Create data_dir if needed and return a Database for it."""
    path = Path(data_dir)
    path.mkdir(parents=True, exist_ok=True)
    return Database(path)
