"""Shared fixtures: configs, sketch containers, a fake sketchtool and git repositories."""

import json
import shutil
import subprocess
import zipfile
from pathlib import Path

import pytest

from gitsketch.config import ExportConfig, FontConfig, GitSketchConfig

GIT_AVAILABLE = shutil.which("git") is not None
skip_if_no_git = pytest.mark.skipif(not GIT_AVAILABLE, reason="git not installed")

FONT_BYTES = b"\x00\x01\x00\x00fake-arial-font"

BUTTON_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg width="120px" height="40px" viewBox="0 0 120 40" version="1.1" xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">
    <!-- Generator: Sketch 52.6 (67491) - http://www.bohemiancoding.com/sketch -->
    <title>button</title>
    <desc>Created with Sketch.</desc>
    <g id="Page-1" stroke="none" fill="none">
        <text id="Label" font-family="Arial" font-size="14" fill="#000000">
            <tspan x="10" y="25">Click me</tspan>
        </text>
    </g>
</svg>
"""

SKETCH_ENTRIES = {
    "document.json": json.dumps({"currentPageIndex": 3, "_class": "document", "pages": []}),
    "meta.json": json.dumps({"version": 112, "appVersion": "52.6"}),
    "user.json": json.dumps({"document": {"pageListHeight": 110}}),
    "pages/6A1B.json": json.dumps({"name": "Page 1", "_class": "page", "layers": []}),
    "previews/preview.png": b"\x89PNG\r\n\x1a\nfake",
    "images/logo.png": b"\x89PNG\r\n\x1a\nlogo",
}

FAKE_SKETCHTOOL = """#!/bin/sh
# Stand-in for sketchtool: writes one SVG into --output and reports it
for arg in "$@"; do
    case "$arg" in
        --output=*) out="${arg#--output=}" ;;
    esac
done
echo "$@" > "$(dirname "$0")/sketchtool-args.txt"
mkdir -p "$out"
cat > "$out/button.svg" <<'SVG'
%s
SVG
echo "Exported button.svg"
""" % BUTTON_SVG.strip()

FAILING_SKETCHTOOL = """#!/bin/sh
echo "Error: document could not be opened" >&2
exit 3
"""


def write_sketch(path: Path, entries: dict = SKETCH_ENTRIES) -> Path:
    """Write a .sketch container holding entries (name -> str or bytes)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return path


def write_tool(path: Path, script: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(script)
    path.chmod(0o755)
    return path


def git(repo_root: Path, *args: str) -> str:
    """Run git in repo_root and return stdout."""
    result = subprocess.run(
        ["git", "-C", str(repo_root), *args], capture_output=True, text=True, check=True
    )
    return result.stdout


@pytest.fixture
def fonts_dir(tmp_path):
    directory = tmp_path / "assets" / "fonts"
    directory.mkdir(parents=True)
    (directory / "Arial.ttf").write_bytes(FONT_BYTES)
    return directory


@pytest.fixture
def font_config(fonts_dir):
    return FontConfig(
        embed_prefixes=("Arial",),
        ignore_prefixes=("Arial ", "ArialNarrow-Italic"),
        path=fonts_dir,
        extension="ttf",
    )


@pytest.fixture
def make_config(tmp_path, font_config):
    """Factory for GitSketchConfig rooted at tmp_path; keyword arguments override fields."""

    def _make(**overrides) -> GitSketchConfig:
        fields = {
            "repo_root": tmp_path,
            "unpacked": ".sketch",
            "export": ExportConfig(
                tool=tmp_path / "bin" / "sketchtool",
                type="artboards",
                to="exports",
                args={"background": "#FFFFFF", "formats": "svg", "trimmed": "NO"},
            ),
            "fonts": font_config,
        }
        fields.update(overrides)
        return GitSketchConfig(**fields)

    return _make


@pytest.fixture
def fake_sketchtool(tmp_path):
    return write_tool(tmp_path / "bin" / "sketchtool", FAKE_SKETCHTOOL)


@pytest.fixture
def git_repo(tmp_path):
    """An empty git repository at tmp_path."""
    if not GIT_AVAILABLE:
        pytest.skip("git not installed")
    git(tmp_path, "init", "-q")
    git(tmp_path, "config", "user.email", "designer@example.com")
    git(tmp_path, "config", "user.name", "Designer")
    git(tmp_path, "config", "commit.gpgsign", "false")
    return tmp_path
