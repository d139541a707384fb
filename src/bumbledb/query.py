"""Equality queries over dotted field paths.

A query maps dotted paths to required values:

    {"address.country": "Cayman Islands", "id": 2}

A document matches when every path resolves to a value of the same JSON
type that compares equal (ints and floats are both numbers; bools are not). A path that cannot be resolved never matches, not even
against None.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final


class _Missing:
    """Sentinel for a path that does not resolve."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


def resolve(doc: Any, path: str) -> Any:
    """Walk doc along a dotted path through nested mappings."""
    cur = doc
    for part in path.split("."):
        if isinstance(cur, Mapping) and part in cur:
            cur = cur[part]
        else:
            return MISSING
    return cur


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _strict_equal(actual: Any, expected: Any) -> bool:
    if actual is MISSING:
        return False
    # JSON has one number type: 2 and 2.0 are equal, True is not 1.
    if _is_number(expected) or _is_number(actual):
        return _is_number(actual) and _is_number(expected) and actual == expected
    # Containers are opaque: only the very same object is equal.
    if isinstance(expected, (Mapping, list, tuple)):
        return actual is expected
    return type(actual) is type(expected) and actual == expected


def matches(query: Mapping[str, Any] | None, doc: Any) -> bool:
    """True if doc satisfies every (path, value) pair in query."""
    if not query:
        return True
    return all(_strict_equal(resolve(doc, path), expected) for path, expected in query.items())
