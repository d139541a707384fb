"""Collection file primitives: create-if-absent, scan, append, rewrite.

Rewrite protocol (update/delete):

    <name>.ndjson               # live collection file
    <name>.ndjson.in-progress   # rewrite target, renamed over the live file

The live file is only ever replaced by os.replace(), so a crash leaves
either the old content or the new content, never a mix. A leftover
.in-progress file is overwritten by the next rewrite.

Mutators serialize on a per-path threading.Lock (see collection_lock).
The lock is process-local: two processes rewriting the same collection
are not arbitrated and share the same temp name.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

from bumbledb.codec import SKIP, decode
from bumbledb.errors import CorruptLineError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

logger = logging.getLogger("bumbledb.files")

TEMP_SUFFIX = ".in-progress"

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def temp_path_for(path: Path) -> Path:
    """Sibling rewrite target: the full file name plus a fixed marker."""
    return path.with_name(path.name + TEMP_SUFFIX)


def collection_lock(path: Path) -> threading.Lock:
    """Return the process-wide lock for the collection file at path."""
    key = path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.Lock()
        return lock


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def ensure_exists(path: Path) -> None:
    """Create an empty file at path unless one is already there.

    Only FileExistsError is tolerated; every other OSError propagates.
    """
    try:
        with path.open("x"):
            pass
    except FileExistsError:
        return
    logger.debug("created %s", path)


def remove_if_exists(path: Path) -> bool:
    """Unlink path. Returns False if it was already gone."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------


def iter_lines(path: Path) -> Iterator[tuple[str, Any]]:
    """Yield (raw line without newline, decoded document) for each line.

    Blank lines come through with SKIP as the document. The file handle is
    closed when the generator is exhausted, closed or garbage-collected.
    """
    with path.open("rb") as f:
        for lineno, raw in enumerate(f, start=1):
            try:
                line = raw.removesuffix(b"\n").decode("utf-8")
                doc = decode(line)
            except UnicodeDecodeError as exc:
                raise CorruptLineError(path, lineno, exc.reason) from exc
            except json.JSONDecodeError as exc:
                raise CorruptLineError(path, lineno, exc.msg) from exc
            yield line, doc


# ---------------------------------------------------------------------------
# Write
# ---------------------------------------------------------------------------


def append(path: Path, text: str) -> None:
    """Append text to path in a single write call."""
    if not text:
        return
    with path.open("a", encoding="utf-8", newline="\n") as f:
        f.write(text)


def rewrite(path: Path, transform: Callable[[str, Any], str | None]) -> None:
    """Stream path through transform into a temp file, then rename it over path.

    transform(line, doc) returns the line to write in place of the input
    (without newline), or None to drop it. Blank lines are copied as-is.
    Any failure removes the temp file and leaves path untouched.
    """
    tmp = temp_path_for(path)
    try:
        with tmp.open("w", encoding="utf-8", newline="\n") as out:
            for line, doc in iter_lines(path):
                if doc is SKIP:
                    out.write(line + "\n")
                    continue
                new_line = transform(line, doc)
                if new_line is not None:
                    out.write(new_line + "\n")
            out.flush()
            os.fsync(out.fileno())
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
        raise
    tmp.replace(path)
