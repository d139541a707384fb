"""One document <-> one line of JSON."""

from __future__ import annotations

import json
from typing import Any, Final

SKIP: Final = object()  # blank line marker returned by decode()


def encode(doc: Any) -> str:
    """Serialize doc to a single compact JSON line (no trailing newline)."""
    return json.dumps(doc, ensure_ascii=False, separators=(",", ":"))


def decode(line: str) -> Any:
    """Parse one line. Returns SKIP for blank lines.

    Raises json.JSONDecodeError for anything else that is not JSON.
    """
    stripped = line.strip()
    if not stripped:
        return SKIP
    return json.loads(stripped)
