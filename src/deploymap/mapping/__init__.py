from . import paths
from . import schema
from . import engine

from .engine import transform

__all__ = [
    "paths",
    "schema",
    "engine",
    "transform",
]
