# deploymap/documents/loader.py

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from deploymap.errors import DocumentIOError, ParseError
from .types import Document, find_non_string_key


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON number")


def _parse_json(text: str) -> Any:
    # strict: no trailing commas, no comments, no NaN/Infinity
    return json.loads(text, parse_constant=_reject_constant)


def _parse_yaml(text: str) -> Any:
    return yaml.safe_load(text)


def _as_document(data: Any) -> Document:
    if data is None:
        raise ParseError("document is empty")
    if not isinstance(data, dict):
        raise ParseError(
            f"document must be a mapping at top level; got {type(data).__name__}"
        )
    bad_key = find_non_string_key(data)
    if bad_key is not None:
        raise ParseError(f"document keys must be strings; found {bad_key}")
    return data


def parse(text: str) -> Document:
    """
    Parse JSON or YAML text into a Document.

    JSON is tried first; only when it fails to decode is the text handed to
    the YAML parser. A ParseError is raised when both stages fail, or when
    the parsed value is not a mapping.
    """
    try:
        data = _parse_json(text)
    except ValueError as json_err:
        # JSONDecodeError, or a NaN/Infinity token
        try:
            data = _parse_yaml(text)
        except yaml.YAMLError as yaml_err:
            raise ParseError(
                f"not valid JSON ({json_err}) and not valid YAML ({yaml_err})"
            ) from yaml_err
    return _as_document(data)


def resolve_path(path: Union[str, Path], workdir: Optional[Path] = None) -> Path:
    p = Path(path).expanduser()
    if workdir is not None and not p.is_absolute():
        p = Path(workdir).expanduser() / p
    return p.resolve()


def load(path: Union[str, Path], workdir: Optional[Path] = None) -> Document:
    """Read a JSON/YAML file (relative to `workdir` when given) into a Document."""
    path = resolve_path(path, workdir)
    if not path.is_file():
        raise DocumentIOError(f"{path}: no such file")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentIOError(f"{path}: cannot read ({e})") from e

    try:
        return parse(text)
    except ParseError as e:
        raise ParseError(f"{path}: {e}") from e
