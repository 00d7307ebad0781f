from __future__ import annotations
from typing import Any, List

from deploymap.documents.types import Document, Value
from deploymap.errors import MappingError

SEPARATOR = "."


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


def split_path(path: str) -> List[str]:
    """
    Split a dot path into its key segments.

    "" -> []            (the document itself)
    "a" -> ["a"]
    "a.b.c" -> ["a", "b", "c"]
    """
    if not isinstance(path, str):
        raise MappingError(f"path expression must be a string; got {type(path).__name__}")
    if path == "":
        return []
    parts = path.split(SEPARATOR)
    if any(p == "" for p in parts):
        raise MappingError(f"path expression {path!r} has an empty segment")
    return parts


def deep_get(doc: Document, path: str, default: Any = MISSING) -> Value:
    """
    Resolve `path` against `doc`, returning `default` when a key is absent
    or a scalar is reached before the last segment.

    Descending into a list is not supported and raises MappingError.
    """
    cur: Any = doc
    walked: List[str] = []
    for key in split_path(path):
        if isinstance(cur, list):
            at = SEPARATOR.join(walked) or "<root>"
            raise MappingError(
                f"path expression {path!r} descends into a list at {at!r}"
            )
        if not isinstance(cur, dict) or key not in cur:
            return default
        cur = cur[key]
        walked.append(key)
    return cur
