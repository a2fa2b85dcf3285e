"""
Sketch Sync Workflows

Orchestrates the contexts into the three user-facing operations:

- stage:    unpack + normalize → export + embed fonts → stage → README
- import:   copy a .sketch file into <target>/<name>/, then stage
- generate: repack <name>/<unpacked>/ into <name>/<name>.sketch

Every step finishes before the next starts; later steps read the files that
earlier ones wrote. Nothing is rolled back on failure: the generated trees are
rebuilt from scratch by the next successful run.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from gitsketch.config import GitSketchConfig
from gitsketch.contexts.archive import normalize_tree, pack, unpack
from gitsketch.contexts.documentation import update_readme
from gitsketch.contexts.exporting import export_content
from gitsketch.contexts.syncing.logger import _log_debug, _log_info, _log_success, _log_warning
from gitsketch.contexts.versioning import GitRepository
from gitsketch.exceptions import ContainerLayoutError, SourceNotFoundError

SKETCH_SUFFIX = ".sketch"
PREVIEWS_DIR = "previews"


@dataclass
class StageResult:
    """
    Result of staging a sketch file.

    Attributes:
        sketch_path: The staged .sketch file
        unpacked_dir: Regenerated unpacked tree
        export_dir: Regenerated export directory
        exported: Exported artifacts, in export order
        readme_path: Updated README (None when README generation is off)
    """

    sketch_path: Path
    unpacked_dir: Path
    export_dir: Path
    exported: List[Path] = field(default_factory=list)
    readme_path: Optional[Path] = None


def unpack_sketch(
    sketch_path: Path, unpacked_dir: Path, config: GitSketchConfig, repo: GitRepository
) -> None:
    """Replace unpacked_dir with a fresh copy of the container's contents."""
    repo.delete_and_stage(unpacked_dir)

    _log_info(f"Unpacking {sketch_path.name}")
    unpack(sketch_path, unpacked_dir)

    previews_dir = unpacked_dir / PREVIEWS_DIR
    if config.delete_previews and previews_dir.exists():
        _log_debug(f"Deleting {previews_dir}")
        shutil.rmtree(previews_dir)


def stage_sketch(
    sketch_path: Path,
    config: GitSketchConfig,
    repo: Optional[GitRepository] = None,
    force: bool = False,
) -> StageResult:
    """
    Sync a sketch file's unpacked tree, exports and README, staging each in git.

    Args:
        sketch_path: Path to <name>/<name>.sketch
        config: Loaded configuration
        repo: Repository for staging (default: repository at config.repo_root)
        force: Continue when the file name differs from its directory name

    Returns:
        StageResult describing the regenerated files

    Raises:
        SourceNotFoundError: If the sketch file does not exist
        ContainerLayoutError: If the file name differs from its directory name
            and force is not set
    """
    sketch_path = Path(sketch_path).resolve()
    _log_info(f"Staging {sketch_path}")

    if not sketch_path.is_file():
        raise SourceNotFoundError(f"Sketch file not found: {sketch_path}", path=sketch_path)

    if repo is None:
        repo = GitRepository(config.repo_root)

    parent_dir = sketch_path.parent
    if sketch_path.stem != parent_dir.name:
        message = (
            f"Sketch file name '{sketch_path.stem}' is different than its parent dir name "
            f"'{parent_dir.name}'.\n"
            "If you're trying to add a new sketch file to git, use the following command:\n"
            "sketch.py import --src=<sketch-file> --target=<parent-dir>"
        )
        if not force:
            raise ContainerLayoutError(message)
        _log_warning(message)
        _log_warning("--force used, continuing.")

    unpacked_dir = parent_dir / config.unpacked
    export_dir = parent_dir / config.export.to
    _log_debug(f"Unpacked dir: {unpacked_dir}")
    _log_debug(f"Export dir: {export_dir}")

    unpack_sketch(sketch_path, unpacked_dir, config, repo)
    normalize_tree(unpacked_dir)
    repo.stage(unpacked_dir)

    export = export_content(sketch_path, export_dir, config, repo)
    result = StageResult(
        sketch_path=sketch_path,
        unpacked_dir=unpacked_dir,
        export_dir=export_dir,
        exported=export.exported,
    )

    if config.generate_readme:
        result.readme_path = update_readme(parent_dir, export.exported, config.repo_root, repo)
    else:
        _log_debug("Skipping README.md (generate_readme is off)")

    _log_success(f"Staged {sketch_path.name}")
    return result


def import_sketch(
    src: Path,
    target_dir: Path,
    config: GitSketchConfig,
    repo: Optional[GitRepository] = None,
    force: bool = False,
) -> StageResult:
    """
    Copy a sketch file into a new git-ready directory and stage it.

    The file lands at <target_dir>/<name>/<name>.sketch.

    Args:
        src: Sketch file to import
        target_dir: Directory that will contain the new sketch directory
        config: Loaded configuration
        repo: Repository for staging (default: repository at config.repo_root)
        force: Import even if the sketch directory already exists

    Raises:
        SourceNotFoundError: If src does not exist
        ContainerLayoutError: If the sketch directory exists and force is not set
    """
    src = Path(src).resolve()
    _log_info(f"Importing {src}")

    if not src.is_file():
        raise SourceNotFoundError(f"Source sketch file not found: {src}", path=src)

    parent_dir = Path(target_dir).resolve() / src.stem
    if parent_dir.exists():
        message = f"Target sketch dir already exists: {parent_dir}"
        if not force:
            raise ContainerLayoutError(message)
        _log_warning(message)
        _log_warning("--force used, importing into the existing directory.")

    _log_debug(f"Creating sketch dir: {parent_dir}")
    parent_dir.mkdir(parents=True, exist_ok=True)

    imported = parent_dir / src.name
    shutil.copy2(src, imported)

    return stage_sketch(imported, config, repo=repo, force=force)


def generate_sketch(parent_dir: Path, config: GitSketchConfig) -> Path:
    """
    Rebuild <parent_dir>/<name>.sketch from the unpacked tree.

    Args:
        parent_dir: Sketch directory holding the unpacked tree
        config: Loaded configuration

    Returns:
        Path to the generated sketch file

    Raises:
        SourceNotFoundError: If parent_dir or its unpacked tree is missing
    """
    parent_dir = Path(parent_dir).resolve()
    _log_info(f"Generating sketch file for {parent_dir}")

    if not parent_dir.is_dir():
        raise SourceNotFoundError(f"Source sketch folder not found: {parent_dir}", path=parent_dir)

    unpacked_dir = parent_dir / config.unpacked
    if not unpacked_dir.is_dir():
        raise SourceNotFoundError(
            f"Unable to generate sketch file, could not find: {unpacked_dir}", path=unpacked_dir
        )

    sketch_path = parent_dir / f"{parent_dir.name}{SKETCH_SUFFIX}"
    _log_debug(f"Generating {sketch_path} from {unpacked_dir}")
    pack(unpacked_dir, sketch_path)

    _log_success(f"Generated {sketch_path}")
    return sketch_path
