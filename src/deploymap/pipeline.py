# deploymap/pipeline.py

from __future__ import annotations

from typing import Optional

from deploymap.config import StepConfig
from deploymap.documents import emit, loader
from deploymap.documents.types import Document
from deploymap.mapping.engine import transform


def load_mapping(config: StepConfig) -> Document:
    """Parse the inline mapping, or read it from `mapping_location`."""
    mapping_path = config.mapping_path
    if mapping_path is None:
        return loader.parse(config.mapping)
    config.logger.info("Reading inputs mapping from %s", mapping_path)
    return loader.load(mapping_path)


def run_step(config: StepConfig, *, dry_run: bool = False) -> Document:
    """
    Load -> transform -> write for one configured step.

    Nothing is written unless the whole inputs document was built. With
    `dry_run` the result is returned without touching the destination.
    """
    log = config.logger

    mapping = load_mapping(config)
    log.info("Reading outputs from %s", config.outputs_path)
    outputs = loader.load(config.outputs_path)

    inputs = transform(outputs, mapping)
    omitted = [k for k in mapping if k not in inputs]
    log.info("Mapped %d input(s); %d omitted", len(inputs), len(omitted))
    if omitted:
        log.debug("Omitted inputs: %s", ", ".join(omitted))

    if dry_run:
        return inputs

    written = emit.write(inputs, config.inputs_path)
    log.info("Wrote inputs to %s", written)
    return inputs


def run(
    *,
    outputs_location: str,
    inputs_location: str,
    mapping: Optional[str] = None,
    mapping_location: Optional[str] = None,
    workdir=None,
) -> Document:
    """Convenience wrapper: build a StepConfig from keywords and run it."""
    kwargs = {}
    if workdir is not None:
        kwargs["workdir"] = workdir
    config = StepConfig(
        outputs_location=outputs_location,
        inputs_location=inputs_location,
        mapping=mapping,
        mapping_location=mapping_location,
        **kwargs,
    )
    return run_step(config)
