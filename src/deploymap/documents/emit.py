# deploymap/documents/emit.py

from __future__ import annotations

import datetime
import json
from pathlib import Path
from typing import Any, Optional, Union

from deploymap.errors import DocumentIOError
from .loader import resolve_path
from .types import Document, find_non_string_key


def _json_default(value: Any) -> Any:
    # YAML sources may carry native timestamps
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def serialize(doc: Document) -> str:
    """
    Canonical JSON text for a Document.

    Keys are written in the document's own order (never sorted), with a
    two-space indent and a trailing newline, so equal documents always
    produce byte-identical text.
    """
    bad_key = find_non_string_key(doc)
    if bad_key is not None:
        raise DocumentIOError(f"cannot serialize document: keys must be strings; found {bad_key}")
    try:
        text = json.dumps(
            doc,
            indent=2,
            sort_keys=False,
            ensure_ascii=False,
            allow_nan=False,
            default=_json_default,
        )
    except (TypeError, ValueError) as e:
        raise DocumentIOError(f"cannot serialize document: {e}") from e
    return text + "\n"


def write(
    doc: Document,
    destination: Union[str, Path],
    workdir: Optional[Path] = None,
) -> Path:
    """Serialize `doc` and write it to `destination`; returns the written path."""
    outpath = resolve_path(destination, workdir)
    text = serialize(doc)

    # One missing directory level is created; anything deeper is an error.
    parent = outpath.parent
    try:
        if not parent.exists():
            parent.mkdir(exist_ok=True)
        outpath.write_text(text, encoding="utf-8")
    except OSError as e:
        raise DocumentIOError(f"{outpath}: cannot write ({e})") from e

    return outpath
