from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

# JSON-shaped tree: dicts keep insertion order, which is the document order.
Scalar = Union[str, int, float, bool, None]
Value = Union[Scalar, "Document", List[Any]]
Document = Dict[str, Any]


def find_non_string_key(node: Value, where: str = "") -> Optional[str]:
    """Location of the first dict key that is not a string, or None."""
    if isinstance(node, dict):
        for key, child in node.items():
            at = f"{where}.{key}" if where else str(key)
            if not isinstance(key, str):
                return f"{at} ({type(key).__name__} key)"
            found = find_non_string_key(child, at)
            if found is not None:
                return found
    elif isinstance(node, list):
        for i, child in enumerate(node):
            found = find_non_string_key(child, f"{where}[{i}]")
            if found is not None:
                return found
    return None
