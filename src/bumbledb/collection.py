"""Collection: one NDJSON file, queried and mutated as a whole.

    users = Collection("/path/to/data", "users")
    users.insert_one({"id": 1, "address": {"country": "Pakistan"}})
    users.find({"address.country": "Pakistan"}).to_list()
    users.update({"id": 1}, {"id": 1, "address": {"country": "Croatia"}})
    users.delete({"id": 1})

Every operation first makes sure the file exists, so a collection that was
never written reads as empty. Reads scan the whole file; update and delete
rewrite it through a temp file (see bumbledb.files).
"""

from __future__ import annotations

import logging
import os
from contextlib import closing
from pathlib import Path
from typing import TYPE_CHECKING, Any

from bumbledb import files
from bumbledb.codec import SKIP, encode
from bumbledb.errors import InvalidCollectionName
from bumbledb.query import matches

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

logger = logging.getLogger("bumbledb.collection")

EXTENSION = ".ndjson"

Document = Any


def validate_name(name: str) -> str:
    """Reject names that would not map to a single file in the data dir."""
    seps = {"/", os.sep, os.altsep} - {None}
    if not name or name in (".", "..") or any(s in name for s in seps):
        msg = f"Invalid collection name: {name!r}"
        raise InvalidCollectionName(msg)
    return name


class Cursor:
    """Lazy result of Collection.find().

    Each iteration opens the file again and scans from the first line, so a
    cursor can be iterated any number of times. Nothing is read until then.
    """

    def __init__(self, path: Path, query: Mapping[str, Any] | None) -> None:
        self.path = path
        self.query = dict(query) if query else {}

    def __iter__(self) -> Iterator[Document]:
        files.ensure_exists(self.path)
        return self._scan()

    def _scan(self) -> Iterator[Document]:
        for _line, doc in files.iter_lines(self.path):
            if doc is not SKIP and matches(self.query, doc):
                yield doc

    def to_list(self) -> list[Document]:
        return list(self)

    def first(self) -> Document | None:
        """Return the first match and release the file, or None."""
        with closing(iter(self)) as it:
            return next(it, None)

    def __repr__(self) -> str:
        return f"Cursor({str(self.path)!r}, {self.query!r})"


class Collection:
    """Document API over <data_dir>/<name>.ndjson."""

    def __init__(self, data_dir: Path | str, name: str) -> None:
        self.name = validate_name(name)
        self.path = Path(data_dir) / f"{name}{EXTENSION}"

    def __repr__(self) -> str:
        return f"Collection({self.name!r}, path={str(self.path)!r})"

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def find(self, query: Mapping[str, Any] | None = None) -> Cursor:
        """Return a lazy cursor over documents matching query, in file order."""
        return Cursor(self.path, query)

    def find_one(self, query: Mapping[str, Any] | None = None) -> Document | None:
        """First matching document, or None. Stops reading at the match."""
        return self.find(query).first()

    # ------------------------------------------------------------------
    # Write: append
    # ------------------------------------------------------------------

    def insert_one(self, doc: Document) -> Document:
        """Append doc as one line. Returns doc unchanged."""
        line = encode(doc) + "\n"
        with files.collection_lock(self.path):
            files.ensure_exists(self.path)
            files.append(self.path, line)
        return doc

    def insert_many(self, docs: Iterable[Document]) -> list[Document]:
        """Append all docs with a single write.

        If that write fails part-way, a prefix of the batch may already be
        on disk. Nothing rolls it back.
        """
        docs = list(docs)
        buf = "".join(encode(d) + "\n" for d in docs)
        with files.collection_lock(self.path):
            files.ensure_exists(self.path)
            files.append(self.path, buf)
        logger.debug("%s: appended %d document(s)", self.name, len(docs))
        return docs

    # ------------------------------------------------------------------
    # Write: rewrite
    # ------------------------------------------------------------------

    def update(self, query: Mapping[str, Any] | None, replacement: Document) -> Document:
        """Replace every document matching query with replacement.

        All matches are replaced, not only the first. With no match the
        file is still rewritten (identical content). Returns replacement.
        """
        new_line = encode(replacement)
        replaced = 0

        def _swap(line: str, doc: Document) -> str:
            nonlocal replaced
            if matches(query, doc):
                replaced += 1
                return new_line
            return line

        with files.collection_lock(self.path):
            files.ensure_exists(self.path)
            files.rewrite(self.path, _swap)
        logger.debug("%s: update replaced %d document(s)", self.name, replaced)
        return replacement

    def delete(self, query: Mapping[str, Any] | None) -> int:
        """Remove every document matching query. Returns how many were removed."""
        deleted = 0

        def _drop(line: str, doc: Document) -> str | None:
            nonlocal deleted
            if matches(query, doc):
                deleted += 1
                return None
            return line

        with files.collection_lock(self.path):
            files.ensure_exists(self.path)
            files.rewrite(self.path, _drop)
        logger.debug("%s: deleted %d document(s)", self.name, deleted)
        return deleted

    def drop(self) -> None:
        """Delete the collection file. Fine if it does not exist."""
        with files.collection_lock(self.path):
            removed = files.remove_if_exists(self.path)
        if removed:
            logger.debug("%s: dropped", self.name)
