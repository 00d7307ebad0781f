from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from deploymap.config import StepConfig, is_blank, resolve_in_workdir
from deploymap.documents import emit, loader
from deploymap.errors import ConfigError, DeploymapError
from deploymap.mapping.schema import validate_mapping
from deploymap.pipeline import run_step

app = typer.Typer(help="deploymap CLI: turn deployment outputs into deployment inputs")


def _fail(err: Exception) -> None:
    typer.secho(f"Error: {err}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _read_config_file(path: Optional[Path]) -> Dict[str, Any]:
    if path is None:
        return {}
    try:
        return loader.load(path)
    except DeploymapError as e:
        raise typer.BadParameter(f"--config: {e}")


# -----------------------------
# transform
# -----------------------------

@app.command()
def transform(
    outputs: Optional[str] = typer.Option(None, "--outputs", "-o", help="Outputs/capabilities file (JSON or YAML)"),
    inputs: Optional[str] = typer.Option(None, "--inputs", "-i", help="Inputs file to write (JSON)"),
    mapping: Optional[str] = typer.Option(None, "--mapping", "-m", help="Inline mapping (JSON or YAML)"),
    mapping_file: Optional[str] = typer.Option(None, "--mapping-file", "-f", help="File holding the mapping"),
    workdir: Path = typer.Option(Path("."), "--workdir", "-w", help="Directory all locations are relative to"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Step config file (JSON or YAML)"),
    use_env: bool = typer.Option(True, "--env/--no-env", help="Expand ${VAR} references from the environment"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the inputs document instead of writing it"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Map an outputs document onto an inputs document."""
    file_values = _read_config_file(config_file)
    try:
        config = StepConfig.from_dict(
            file_values,
            outputs_location=outputs,
            inputs_location=inputs,
            mapping=mapping,
            mapping_location=mapping_file,
            workdir=workdir,
        )
        if use_env:
            config = config.expanded(os.environ)
    except ConfigError as e:
        raise typer.BadParameter(str(e))

    if verbose:
        config.logger.setLevel(logging.DEBUG)

    try:
        result = run_step(config, dry_run=dry_run)
    except DeploymapError as e:
        _fail(e)

    if dry_run:
        typer.echo(emit.serialize(result), nl=False)
    else:
        typer.secho(f"Wrote {config.inputs_path} ({len(result)} input(s))", fg=typer.colors.GREEN)


# -----------------------------
# check-mapping
# -----------------------------

@app.command("check-mapping")
def check_mapping(
    mapping: Optional[str] = typer.Option(None, "--mapping", "-m", help="Inline mapping (JSON or YAML)"),
    mapping_file: Optional[str] = typer.Option(None, "--mapping-file", "-f", help="File holding the mapping"),
    workdir: Path = typer.Option(Path("."), "--workdir", "-w"),
):
    """Parse and validate a mapping, then list its entries."""
    if is_blank(mapping) == is_blank(mapping_file):
        raise typer.BadParameter("Provide exactly one of --mapping or --mapping-file.")

    try:
        if not is_blank(mapping):
            doc = loader.parse(mapping)
        else:
            doc = loader.load(resolve_in_workdir(mapping_file, workdir.expanduser().resolve()))
        validate_mapping(doc)
    except ConfigError as e:
        raise typer.BadParameter(str(e))
    except DeploymapError as e:
        _fail(e)

    for target, path in doc.items():
        typer.echo(f"{target} <- {path or '<outputs>'}")
    typer.secho(f"OK: {len(doc)} mapping entr{'y' if len(doc) == 1 else 'ies'}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
