"""
Integration tests for the sketch.py command line interface.
"""

import zipfile

import pytest
from conftest import SKETCH_ENTRIES, write_sketch
from loguru import logger
from typer.testing import CliRunner

from scripts import sketch as sketch_cli

runner = CliRunner()

CONFIG_YAML = """
repo_root: {repo_root}
unpacked: .sketch
export:
  tool: {repo_root}/bin/sketchtool
  type: artboards
  to: exports
  args:
    formats: svg
fonts:
  embed_prefixes: [Arial]
  ignore_prefixes: []
"""


@pytest.fixture
def cli_config(tmp_path, monkeypatch):
    monkeypatch.setattr(sketch_cli, "LOGS_PATH", tmp_path / "logs")
    path = tmp_path / "gitsketch.yaml"
    path.write_text(CONFIG_YAML.format(repo_root=tmp_path), encoding="utf-8")
    yield path
    # Drop sinks bound to the runner's captured stdout
    logger.remove()


@pytest.mark.integration
def test_generate_command_packs_unpacked_tree(tmp_path, cli_config):
    unpacked = tmp_path / "button" / ".sketch"
    unpacked.mkdir(parents=True)
    (unpacked / "document.json").write_text("{}\n", encoding="utf-8")

    result = runner.invoke(
        sketch_cli.app, ["generate", "--src", str(tmp_path / "button"), "-c", str(cli_config)]
    )

    assert result.exit_code == 0, result.output
    assert "generated successfully" in result.output
    with zipfile.ZipFile(tmp_path / "button" / "button.sketch") as zf:
        assert zf.namelist() == ["document.json"]
    assert list((tmp_path / "logs").glob("sketch_*/sketch.log"))


@pytest.mark.integration
def test_stage_command_reports_missing_file(tmp_path, cli_config):
    result = runner.invoke(
        sketch_cli.app,
        ["stage", "--src", str(tmp_path / "button" / "button.sketch"), "-c", str(cli_config)],
    )

    assert result.exit_code == 1
    assert "Sketch file not found" in result.output


@pytest.mark.integration
def test_bad_config_exits_before_running(tmp_path, monkeypatch):
    monkeypatch.setattr(sketch_cli, "LOGS_PATH", tmp_path / "logs")

    result = runner.invoke(
        sketch_cli.app,
        ["generate", "--src", str(tmp_path), "-c", str(tmp_path / "missing.yaml")],
    )

    assert result.exit_code == 1
    assert "Could not load configuration" in result.output
    assert not (tmp_path / "logs").exists()



@pytest.mark.integration
def test_stage_command_reports_corrupt_document(tmp_path, cli_config):
    sketch = write_sketch(
        tmp_path / "button" / "button.sketch", {**SKETCH_ENTRIES, "document.json": "{not json"}
    )

    result = runner.invoke(sketch_cli.app, ["stage", "--src", str(sketch), "-c", str(cli_config)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Failed staging sketch file" in result.output
    assert "Invalid JSON" in result.output


@pytest.mark.integration
def test_invalid_yaml_config_is_reported(tmp_path, monkeypatch):
    monkeypatch.setattr(sketch_cli, "LOGS_PATH", tmp_path / "logs")
    config = tmp_path / "gitsketch.yaml"
    config.write_text("export: [unclosed\n", encoding="utf-8")

    result = runner.invoke(
        sketch_cli.app, ["generate", "--src", str(tmp_path), "-c", str(config)]
    )

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Could not load configuration" in result.output
