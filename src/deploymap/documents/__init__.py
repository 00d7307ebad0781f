from . import types
from . import loader
from . import emit

from .loader import parse, load
from .emit import serialize, write

__all__ = [
    "types",
    "loader",
    "emit",
    "parse",
    "load",
    "serialize",
    "write",
]
