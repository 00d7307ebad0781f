# deploymap/mapping/engine.py

from __future__ import annotations

import logging
from copy import deepcopy

from deploymap.documents.types import Document
from .paths import MISSING, deep_get
from .schema import validate_mapping

logger = logging.getLogger("deploymap")


def transform(outputs: Document, mapping: Document) -> Document:
    """
    Build an inputs document from a deployment's outputs.

    Each mapping entry is `target_key: "dot.path"`. Entries are processed in
    mapping order; a path that does not resolve in `outputs` drops its
    target key instead of failing the whole run. Resolved values are deep
    copies, so the result never shares structure with `outputs`.
    """
    validate_mapping(mapping)
    if not isinstance(outputs, dict):
        raise TypeError(f"outputs must be a dict; got {type(outputs).__name__}")

    result: Document = {}
    for target_key, path in mapping.items():
        value = deep_get(outputs, path)
        if value is MISSING:
            logger.debug("input '%s': path '%s' not found in outputs; omitted", target_key, path)
            continue
        result[target_key] = deepcopy(value)

    return result
