"""
sketchtool Export Module

Renders a .sketch document with sketchtool (bundled with Sketch.app) and
post-processes the exported SVGs.

Command line contract:
    sketchtool export <type> <document> --output=<dir> [--key=value ...]

sketchtool prints one "Exported <relative path>" line per artifact; that output
is the only record of what was produced and in which order.
"""

import re
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from gitsketch.config import RESERVED_EXPORT_ARG, ExportConfig, GitSketchConfig
from gitsketch.contexts.exporting.logger import (
    _log_debug,
    _log_info,
    _log_success,
    _log_warning,
    log_export_failure,
)
from gitsketch.contexts.exporting.svg_fonts import embed_fonts
from gitsketch.contexts.versioning import GitRepository
from gitsketch.exceptions import ExportError, ToolNotFoundError

SKETCHTOOL_NAME = "sketchtool"
VECTOR_SUFFIX = ".svg"

EXPORTED_PATTERN = re.compile(r"Exported (.+)")


@dataclass
class ExportResult:
    """
    Result of one export run.

    Attributes:
        output_dir: Directory sketchtool wrote into
        exported: Artifact paths in the order sketchtool reported them
        embedded_fonts: Font families embedded, per SVG path
        stdout: Standard output from sketchtool
    """

    output_dir: Path
    exported: List[Path] = field(default_factory=list)
    embedded_fonts: dict = field(default_factory=dict)
    stdout: str = ""


def locate_tool(export: ExportConfig) -> Path:
    """
    Find the sketchtool executable.

    Checks the configured path first, then searches PATH.

    Raises:
        ToolNotFoundError: If sketchtool is in neither place
    """
    _log_debug(f"Searching for {SKETCHTOOL_NAME} under {export.tool}")
    if export.tool.exists():
        return export.tool

    _log_debug("Not found. Searching under PATH")
    found = shutil.which(SKETCHTOOL_NAME)
    if found is None:
        raise ToolNotFoundError(
            f"Could not locate {SKETCHTOOL_NAME} under '{export.tool}'. "
            f"Please install Sketch or add {SKETCHTOOL_NAME} to your PATH."
        )

    _log_debug(f"{SKETCHTOOL_NAME} located under: {found}")
    return Path(found)


def build_export_command(
    tool: Path, document: Path, output_dir: Path, export: ExportConfig
) -> List[str]:
    """
    Assemble the sketchtool command line.

    The output directory is always the one gitsketch manages; a configured
    "output" argument is dropped with a warning.
    """
    cmd = [str(tool), "export", export.type, str(document), f"--output={output_dir}"]

    for key, value in export.args.items():
        if key == RESERVED_EXPORT_ARG:
            _log_warning(
                f"Ignoring configuration `export.args.{RESERVED_EXPORT_ARG}`, "
                "using `export.to` instead"
            )
            continue
        cmd.append(f"--{key}={value}")

    return cmd


def parse_exported(stdout: str, output_dir: Path) -> List[Path]:
    """Collect "Exported <name>" lines from sketchtool output as paths under output_dir."""
    return [output_dir / match.group(1).strip() for match in EXPORTED_PATTERN.finditer(stdout)]


def export_content(
    document: Path, output_dir: Path, config: GitSketchConfig, repo: GitRepository
) -> ExportResult:
    """
    Regenerate the export directory for a sketch document.

    Steps:
    1. Delete the previous export directory and stage the removals
    2. Run sketchtool
    3. Embed fonts in each exported SVG, one file at a time, in export order
    4. Stage the export directory

    Args:
        document: The .sketch file
        output_dir: Export directory (recreated by sketchtool)
        config: Loaded configuration
        repo: Repository used for staging

    Returns:
        ExportResult with the exported artifact paths

    Raises:
        ToolNotFoundError: If sketchtool cannot be found
        ExportError: If sketchtool exits with a non-zero status
        FileNotFoundError: If a font selected for embedding is missing
    """
    document = Path(document).resolve()
    output_dir = Path(output_dir).resolve()

    repo.delete_and_stage(output_dir)

    tool = locate_tool(config.export)
    cmd = build_export_command(tool, document, output_dir, config.export)

    _log_info(f"Exporting {config.export.type} from {document.name}")
    _log_debug(f"Executing: {' '.join(cmd)}")
    result = subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
    )

    if result.returncode != 0:
        log_export_failure(result)
        raise ExportError(
            f"sketchtool failed to export {document}",
            command=cmd,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    exported = parse_exported(result.stdout, output_dir)
    _log_debug(f"Exported: {', '.join(str(path) for path in exported)}")

    export_result = ExportResult(output_dir=output_dir, exported=exported, stdout=result.stdout)

    for path in exported:
        if path.suffix.lower() != VECTOR_SUFFIX:
            continue
        export_result.embedded_fonts[path] = embed_fonts(path, config.fonts)

    repo.stage(output_dir)
    _log_success(f"Exported {len(exported)} artifacts to {output_dir}")

    return export_result
