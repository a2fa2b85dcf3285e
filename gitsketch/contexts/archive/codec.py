"""
Sketch Container Codec

.sketch files are ZIP archives holding JSON layout data, previews and image
assets. This module extracts them into a plain directory tree and packs such a
tree back into a container.
"""

import zipfile
from dataclasses import dataclass
from pathlib import Path

from gitsketch.contexts.archive.logger import _log_debug
from gitsketch.exceptions import ArchiveError


@dataclass
class UnpackResult:
    """
    Result of unpacking a container.

    Attributes:
        archive_path: Container that was read
        output_dir: Directory the entries were written to
        files_written: Number of file entries extracted
    """

    archive_path: Path
    output_dir: Path
    files_written: int


@dataclass
class PackResult:
    """
    Result of packing a directory into a container.

    Attributes:
        output_path: Container that was written
        files_packed: Number of files added
        total_size: Sum of uncompressed file sizes in bytes
        compressed_size: Size of the resulting container in bytes
    """

    output_path: Path
    files_packed: int
    total_size: int
    compressed_size: int


def _safe_target(dest_dir: Path, entry_name: str) -> Path:
    """Resolve an archive entry under dest_dir, rejecting entries that escape it."""
    target = (dest_dir / entry_name).resolve()
    if target != dest_dir and dest_dir not in target.parents:
        raise ArchiveError(f"Archive entry escapes destination directory: {entry_name}")
    return target


def unpack(archive_path: Path, dest_dir: Path) -> UnpackResult:
    """
    Extract every file in a container into dest_dir.

    Existing contents of dest_dir are not removed first; callers that need a
    clean tree must delete it beforehand.

    Args:
        archive_path: Path to the .sketch file
        dest_dir: Directory to extract into (created if missing)

    Returns:
        UnpackResult with extraction statistics

    Raises:
        FileNotFoundError: If archive_path does not exist
        ArchiveError: If archive_path is not a valid ZIP file
    """
    archive_path = Path(archive_path).resolve()
    dest_dir = Path(dest_dir).resolve()

    if not archive_path.exists():
        raise FileNotFoundError(f"Sketch file not found: {archive_path}")

    if not zipfile.is_zipfile(archive_path):
        raise ArchiveError(f"Not a valid sketch (ZIP) file: {archive_path}")

    dest_dir.mkdir(parents=True, exist_ok=True)
    files_written = 0

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            for info in zf.infolist():
                target = _safe_target(dest_dir, info.filename)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(zf.read(info))
                files_written += 1
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"Corrupt sketch file {archive_path}: {e}") from e

    _log_debug(f"Unpacked {files_written} files from {archive_path.name} into {dest_dir}")
    return UnpackResult(archive_path=archive_path, output_dir=dest_dir, files_written=files_written)


def _collect_files(directory: Path) -> list[tuple[Path, str]]:
    """
    Collect all files in directory with their archive paths.

    Returns sorted list of (filesystem_path, archive_path) tuples so repeated
    packs of the same tree produce entries in the same order.
    """
    files = []
    for path in sorted(directory.rglob("*")):
        if path.is_dir():
            continue
        files.append((path, path.relative_to(directory).as_posix()))
    return files


def pack(source_dir: Path, archive_path: Path) -> PackResult:
    """
    Pack a directory tree into a container, replacing any existing file.

    Args:
        source_dir: Directory whose full contents become the archive
        archive_path: Destination .sketch file

    Returns:
        PackResult with file statistics

    Raises:
        ArchiveError: If source_dir is missing or not a directory
    """
    source_dir = Path(source_dir).resolve()
    archive_path = Path(archive_path).resolve()

    if not source_dir.is_dir():
        raise ArchiveError(f"Directory not found: {source_dir}")

    files = _collect_files(source_dir)
    total_size = 0

    archive_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for fs_path, entry_name in files:
            content = fs_path.read_bytes()
            total_size += len(content)
            zf.writestr(entry_name, content)

    compressed_size = archive_path.stat().st_size
    _log_debug(f"Packed {len(files)} files into {archive_path} ({compressed_size:,} bytes)")

    return PackResult(
        output_path=archive_path,
        files_packed=len(files),
        total_size=total_size,
        compressed_size=compressed_size,
    )
