from . import errors
from . import documents
from . import mapping
from . import config
from . import pipeline

__all__ = [
    "errors",
    "documents",
    "mapping",
    "config",
    "pipeline",
]
