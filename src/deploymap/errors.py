# deploymap/errors.py

from __future__ import annotations


class DeploymapError(Exception):
    """Base class for every error raised by deploymap."""


class ConfigError(DeploymapError, ValueError):
    """Step configuration is incomplete or contradictory."""


class ParseError(DeploymapError, ValueError):
    """Text is neither valid JSON nor valid YAML, or is not a mapping."""


class DocumentIOError(DeploymapError, OSError):
    """A document could not be read from or written to disk."""


class MappingError(DeploymapError, ValueError):
    """A mapping document is structurally invalid."""
