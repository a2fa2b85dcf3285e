"""Unit tests for sketchtool invocation and export output handling."""

import os
from pathlib import Path

import pytest
from conftest import FAILING_SKETCHTOOL, write_tool

from gitsketch.config import ExportConfig
from gitsketch.contexts.exporting import (
    build_export_command,
    export_content,
    locate_tool,
    parse_exported,
)
from gitsketch.contexts.exporting import exporter as exporter_module
from gitsketch.exceptions import ExportError, ToolNotFoundError

skip_on_windows = pytest.mark.skipif(os.name == "nt", reason="fake sketchtool is a shell script")


class RecordingRepository:
    """Stands in for GitRepository and records what would be staged."""

    def __init__(self):
        self.calls = []

    def delete_and_stage(self, path):
        self.calls.append(("delete_and_stage", Path(path)))
        return False

    def stage(self, path, include_deletions=False):
        self.calls.append(("stage", Path(path)))


# ============================================================================
# Command construction and output parsing
# ============================================================================


@pytest.mark.unit
def test_build_export_command_layout():
    export = ExportConfig(
        tool=Path("/opt/sketchtool"),
        type="artboards",
        to="exports",
        args={"background": "#FFFFFF", "formats": "svg", "trimmed": "NO"},
    )

    cmd = build_export_command(
        Path("/opt/sketchtool"), Path("/d/button.sketch"), Path("/d/exports"), export
    )

    assert cmd == [
        "/opt/sketchtool",
        "export",
        "artboards",
        "/d/button.sketch",
        "--output=/d/exports",
        "--background=#FFFFFF",
        "--formats=svg",
        "--trimmed=NO",
    ]


@pytest.mark.unit
def test_build_export_command_drops_reserved_output_arg():
    export = ExportConfig(
        tool=Path("/opt/sketchtool"),
        type="artboards",
        to="exports",
        args={"output": "/elsewhere", "formats": "png"},
    )

    cmd = build_export_command(Path("/opt/sketchtool"), Path("a.sketch"), Path("/out"), export)

    assert "--output=/elsewhere" not in cmd
    assert cmd.count("--output=/out") == 1
    assert "--formats=png" in cmd


@pytest.mark.unit
def test_parse_exported_keeps_order_and_joins_output_dir():
    stdout = "Exported Button.svg\nExported Icons/Close Icon.svg\nExported Card@2x.png\n"

    exported = parse_exported(stdout, Path("/repo/button/exports"))

    assert exported == [
        Path("/repo/button/exports/Button.svg"),
        Path("/repo/button/exports/Icons/Close Icon.svg"),
        Path("/repo/button/exports/Card@2x.png"),
    ]


@pytest.mark.unit
def test_parse_exported_ignores_other_output():
    assert parse_exported("Warning: something\n", Path("/out")) == []


# ============================================================================
# Tool discovery
# ============================================================================


@pytest.mark.unit
def test_locate_tool_prefers_configured_path(tmp_path):
    tool = write_tool(tmp_path / "sketchtool", "#!/bin/sh\n")
    export = ExportConfig(tool=tool, type="artboards", to="exports")

    assert locate_tool(export) == tool


@pytest.mark.unit
def test_locate_tool_falls_back_to_path(tmp_path, monkeypatch):
    monkeypatch.setattr(exporter_module.shutil, "which", lambda name: "/usr/local/bin/sketchtool")
    export = ExportConfig(tool=tmp_path / "missing", type="artboards", to="exports")

    assert locate_tool(export) == Path("/usr/local/bin/sketchtool")


@pytest.mark.unit
def test_locate_tool_missing_everywhere_is_fatal(tmp_path, monkeypatch):
    monkeypatch.setattr(exporter_module.shutil, "which", lambda name: None)
    export = ExportConfig(tool=tmp_path / "missing", type="artboards", to="exports")

    with pytest.raises(ToolNotFoundError):
        locate_tool(export)


# ============================================================================
# export_content with a fake sketchtool
# ============================================================================


@pytest.mark.unit
@skip_on_windows
def test_export_content_runs_tool_and_embeds_fonts(tmp_path, make_config, fake_sketchtool):
    config = make_config()
    document = tmp_path / "button" / "button.sketch"
    document.parent.mkdir()
    document.write_bytes(b"zip")
    repo = RecordingRepository()

    result = export_content(document, tmp_path / "button" / "exports", config, repo)

    svg = tmp_path / "button" / "exports" / "button.svg"
    assert result.exported == [svg]
    assert result.embedded_fonts == {svg: ["Arial"]}
    assert "@font-face" in svg.read_text(encoding="utf-8")

    args = (fake_sketchtool.parent / "sketchtool-args.txt").read_text()
    assert args.startswith("export artboards")
    assert "--formats=svg" in args


@pytest.mark.unit
@skip_on_windows
def test_export_content_clears_then_stages_output_dir(tmp_path, make_config, fake_sketchtool):
    config = make_config()
    output_dir = (tmp_path / "button" / "exports").resolve()
    repo = RecordingRepository()

    export_content(tmp_path / "button" / "button.sketch", output_dir, config, repo)

    assert repo.calls == [("delete_and_stage", output_dir), ("stage", output_dir)]


@pytest.mark.unit
@skip_on_windows
def test_export_content_failure_raises(tmp_path, make_config):
    tool = write_tool(tmp_path / "bin" / "sketchtool", FAILING_SKETCHTOOL)
    config = make_config()
    repo = RecordingRepository()

    with pytest.raises(ExportError) as excinfo:
        export_content(tmp_path / "button.sketch", tmp_path / "exports", config, repo)

    assert excinfo.value.returncode == 3
    assert "could not be opened" in excinfo.value.stderr
    assert excinfo.value.command[0] == str(tool)
    # Nothing staged after the failed run
    assert [call for call, _ in repo.calls] == ["delete_and_stage"]
