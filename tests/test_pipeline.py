import json
from pathlib import Path

import pytest

from deploymap.config import StepConfig
from deploymap.errors import ConfigError, MappingError, ParseError
from deploymap.pipeline import run, run_step


OUTPUTS_YAML = """
vm:
  ip: 10.0.0.4
  ports: [22, 80]
endpoint: http://10.0.0.4
"""


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "outputs.yaml").write_text(OUTPUTS_YAML, encoding="utf-8")
    return tmp_path


def test_inline_mapping_writes_inputs(workspace: Path):
    result = run(
        outputs_location="outputs.yaml",
        inputs_location="inputs.json",
        mapping='{"server_ip": "vm.ip", "url": "endpoint", "disk": "vm.disk"}',
        workdir=workspace,
    )
    assert result == {"server_ip": "10.0.0.4", "url": "http://10.0.0.4"}

    written = (workspace / "inputs.json").read_text(encoding="utf-8")
    assert json.loads(written) == result
    assert written.index("server_ip") < written.index("url")


def test_mapping_file(workspace: Path):
    (workspace / "mapping.yaml").write_text("ports: vm.ports\n", encoding="utf-8")
    cfg = StepConfig(
        outputs_location="outputs.yaml",
        inputs_location="inputs.json",
        mapping_location="mapping.yaml",
        workdir=workspace,
    )
    assert run_step(cfg) == {"ports": [22, 80]}
    assert json.loads((workspace / "inputs.json").read_text()) == {"ports": [22, 80]}


def test_dry_run_writes_nothing(workspace: Path):
    cfg = StepConfig(
        outputs_location="outputs.yaml",
        inputs_location="inputs.json",
        mapping="ip: vm.ip",
        workdir=workspace,
    )
    assert run_step(cfg, dry_run=True) == {"ip": "10.0.0.4"}
    assert not (workspace / "inputs.json").exists()


def test_both_mappings_touch_no_files(tmp_path: Path):
    (tmp_path / "mapping.yaml").write_text("ip: vm.ip\n", encoding="utf-8")
    before = sorted(p.name for p in tmp_path.iterdir())
    with pytest.raises(ConfigError):
        run(
            outputs_location="outputs.yaml",
            inputs_location="inputs.json",
            mapping="ip: vm.ip",
            mapping_location="mapping.yaml",
            workdir=tmp_path,
        )
    assert sorted(p.name for p in tmp_path.iterdir()) == before


def test_invalid_outputs_create_no_destination(tmp_path: Path):
    (tmp_path / "outputs.json").write_text("vm: [unclosed", encoding="utf-8")
    with pytest.raises(ParseError):
        run(
            outputs_location="outputs.json",
            inputs_location="inputs.json",
            mapping="ip: vm.ip",
            workdir=tmp_path,
        )
    assert not (tmp_path / "inputs.json").exists()


def test_malformed_mapping_creates_no_destination(workspace: Path):
    with pytest.raises(MappingError):
        run(
            outputs_location="outputs.yaml",
            inputs_location="inputs.json",
            mapping='{"ip": "vm.ip", "port": "vm.ports.0"}',
            workdir=workspace,
        )
    assert not (workspace / "inputs.json").exists()


def test_missing_outputs_file(tmp_path: Path):
    with pytest.raises(IOError):
        run(
            outputs_location="outputs.yaml",
            inputs_location="inputs.json",
            mapping="ip: vm.ip",
            workdir=tmp_path,
        )


def test_reading_mapping_file_is_logged(workspace: Path, caplog):
    (workspace / "mapping.yaml").write_text("ip: vm.ip\n", encoding="utf-8")
    cfg = StepConfig(
        outputs_location="outputs.yaml",
        inputs_location="inputs.json",
        mapping_location="mapping.yaml",
        workdir=workspace,
    )
    with caplog.at_level("INFO", logger="deploymap"):
        run_step(cfg)
    assert "Reading inputs mapping from" in caplog.text
    assert "Mapped 1 input(s); 0 omitted" in caplog.text


def test_non_finite_outputs_create_no_destination(tmp_path: Path):
    (tmp_path / "outputs.yaml").write_text("ratio: .nan\nlimit: .inf\n", encoding="utf-8")
    with pytest.raises(IOError, match="cannot serialize"):
        run(
            outputs_location="outputs.yaml",
            inputs_location="inputs.json",
            mapping='{"r": "ratio", "l": "limit"}',
            workdir=tmp_path,
        )
    assert not (tmp_path / "inputs.json").exists()


def test_non_string_output_keys_are_rejected(tmp_path: Path):
    (tmp_path / "outputs.yaml").write_text("vm: {1: a, '1': b}\n", encoding="utf-8")
    with pytest.raises(ParseError, match="keys must be strings"):
        run(
            outputs_location="outputs.yaml",
            inputs_location="inputs.json",
            mapping='{"vm": "vm"}',
            workdir=tmp_path,
        )
    assert not (tmp_path / "inputs.json").exists()
