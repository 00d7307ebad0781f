# deploymap/mapping/schema.py

from __future__ import annotations

from typing import Any, Dict

import jsonschema

from deploymap.errors import MappingError

# Optional path: either empty, or non-empty segments joined by single dots.
PATH_PATTERN = r"^(?:[^.]+(?:\.[^.]+)*)?$"

MAPPING_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "propertyNames": {"type": "string"},
    "additionalProperties": {
        "type": "string",
        "pattern": PATH_PATTERN,
    },
}


def _describe(err: jsonschema.ValidationError) -> str:
    where = ".".join(str(p) for p in err.absolute_path)
    if "propertyNames" in err.schema_path:
        return f"mapping target key {err.instance!r} must be a string"
    if not where:
        if err.validator == "type":
            return f"mapping must be a mapping at top level; got {type(err.instance).__name__}"
        return f"mapping: {err.message}"
    if err.validator == "type":
        return (
            f"mapping entry '{where}': path expression must be a string; "
            f"got {type(err.instance).__name__}"
        )
    if err.validator == "pattern":
        return f"mapping entry '{where}': path expression {err.instance!r} has an empty segment"
    return f"mapping entry '{where}': {err.message}"


def validate_mapping(mapping: Any) -> None:
    """
    Structural validation of a mapping document.

    Every key is a target input name and every value a dot path string.
    Anything else is a caller bug and raises MappingError.
    """
    try:
        jsonschema.validate(instance=mapping, schema=MAPPING_SCHEMA)
    except jsonschema.ValidationError as e:
        raise MappingError(_describe(e)) from e
