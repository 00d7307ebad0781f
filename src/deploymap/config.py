"""
deploymap | config.py

Configuration object for one outputs-to-inputs step.
The step runner and the CLI both work from this object only.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from deploymap.errors import ConfigError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_VAR_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_.]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)")

# Build-step parameter names (camelCase) are accepted alongside snake_case.
_FIELD_ALIASES: Dict[str, str] = {
    "outputsLocation": "outputs_location",
    "inputsLocation": "inputs_location",
    "mappingLocation": "mapping_location",
}
_FIELDS = ("outputs_location", "inputs_location", "mapping", "mapping_location")


def is_blank(value: Optional[str]) -> bool:
    return value is None or str(value).strip() == ""


def expand_vars(value: Optional[str], env: Mapping[str, str]) -> Optional[str]:
    """
    Substitute `${NAME}` and `$NAME` references from `env`.

    Unknown names are left as written.
    """
    if value is None:
        return None

    def _sub(m: re.Match) -> str:
        name = m.group(1) or m.group(2)
        return env.get(name, m.group(0))

    return _VAR_RE.sub(_sub, value)


def resolve_in_workdir(location: str, workdir: Path) -> Path:
    """Resolve `location` against `workdir`; refuse anything outside it."""
    p = Path(location).expanduser()
    if not p.is_absolute():
        p = workdir / p
    p = p.resolve()
    try:
        p.relative_to(workdir)
    except ValueError:
        raise ConfigError(f"{location} resolves outside the working directory {workdir}")
    return p


# ---------------------------------------------------------------------------
# StepConfig
# ---------------------------------------------------------------------------

@dataclass
class StepConfig:
    """
    StepConfig describes a single outputs-to-inputs conversion.

    It carries:
      - outputs_location: outputs/capabilities document to read (required)
      - inputs_location: inputs document to write (required)
      - mapping: inline JSON/YAML mapping text
      - mapping_location: file holding the mapping
      - workdir: every location is resolved against it
      - logger

    Exactly one of `mapping` / `mapping_location` must be given. The whole
    configuration is checked once, in `validate()`, when the object is built.
    """

    outputs_location: Optional[str] = None
    inputs_location: Optional[str] = None
    mapping: Optional[str] = None
    mapping_location: Optional[str] = None
    workdir: Path = field(default_factory=Path.cwd)

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("deploymap"))

    # -----------------------------------------------------------------------
    # Post-init
    # -----------------------------------------------------------------------
    def __post_init__(self):
        self.workdir = Path(self.workdir).expanduser().resolve()
        self.validate()

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("[deploymap] %(message)s"))
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def validate(self) -> None:
        if is_blank(self.mapping) == is_blank(self.mapping_location):
            raise ConfigError(
                "Please specify either a mapping, or the name of a file "
                "containing the mapping (not both)"
            )
        if is_blank(self.outputs_location):
            raise ConfigError("outputs location is required")
        if is_blank(self.inputs_location):
            raise ConfigError("inputs location is required")
        if not self.workdir.is_dir():
            raise ConfigError(f"working directory {self.workdir} does not exist")

        for location in (self.outputs_location, self.inputs_location, self.mapping_location):
            if not is_blank(location):
                resolve_in_workdir(location, self.workdir)

    # -----------------------------------------------------------------------
    # Resolved locations
    # -----------------------------------------------------------------------
    @property
    def outputs_path(self) -> Path:
        return resolve_in_workdir(self.outputs_location, self.workdir)

    @property
    def inputs_path(self) -> Path:
        return resolve_in_workdir(self.inputs_location, self.workdir)

    @property
    def mapping_path(self) -> Optional[Path]:
        if is_blank(self.mapping_location):
            return None
        return resolve_in_workdir(self.mapping_location, self.workdir)

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------
    @classmethod
    def from_dict(cls, d: Dict[str, Any], **overrides: Any) -> "StepConfig":
        """
        Build a StepConfig from a loaded config document.

        Keys may be snake_case or the build-step names (outputsLocation,
        mapping, mappingLocation, inputsLocation). Non-None `overrides`
        win over values from `d`.
        """
        if not isinstance(d, dict):
            raise ConfigError("step config must be a mapping")

        values: Dict[str, Any] = {}
        for key, value in d.items():
            name = _FIELD_ALIASES.get(key, key)
            if name not in _FIELDS:
                raise ConfigError(f"Unknown step config field: '{key}'")
            if name == "mapping" and isinstance(value, dict):
                # mapping written inline as a nested block
                value = json.dumps(value)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"step config field '{key}' must be a string")
            values[name] = value

        for name, value in overrides.items():
            if value is not None:
                values[name] = value

        return cls(**values)

    def expanded(self, env: Mapping[str, str]) -> "StepConfig":
        """Copy of this config with variables substituted in every location."""
        return dataclasses.replace(
            self,
            **{name: expand_vars(getattr(self, name), env) for name in _FIELDS},
        )

    # -----------------------------------------------------------------------
    # Utility
    # -----------------------------------------------------------------------
    def summary(self) -> Dict[str, Any]:
        """Return a dictionary summary for debugging/logging."""
        return {
            "outputs_location": self.outputs_location,
            "mapping": self.mapping,
            "mapping_location": self.mapping_location,
            "inputs_location": self.inputs_location,
            "workdir": str(self.workdir),
        }
