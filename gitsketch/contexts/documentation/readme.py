"""
README Image Index

Each sketch directory carries a README.md that shows every exported artboard,
so reviewers can see the rendered design on the git hosting site. The image
list lives between two HTML comment markers and is rewritten on every sync;
anything outside the markers is left alone.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote

from gitsketch.contexts.documentation.logger import _log_debug, _log_info, _log_warning
from gitsketch.contexts.versioning import GitRepository

README_NAME = "README.md"
START_MARKER = "<!--start-images-->"
END_MARKER = "<!--end-images-->"

# Left as-is in image links; everything else is percent-encoded
LINK_SAFE_CHARACTERS = "/@-_.~"


@dataclass
class RegionUpdate:
    """
    Result of splicing a block into a managed region.

    Attributes:
        content: Updated file content
        replaced: True if the existing region was replaced in place
        warning: Why the block was appended instead (None when replaced)
    """

    content: str
    replaced: bool
    warning: Optional[str] = None


def _repo_relative(path: Path, repo_root: Path) -> str:
    path = Path(path).resolve()
    try:
        return path.relative_to(Path(repo_root).resolve()).as_posix()
    except ValueError:
        return path.as_posix().lstrip("/")


def build_image_references(exported: List[Path], repo_root: Path) -> str:
    """
    Build the markdown placed between the region markers.

    One "### <artboard>" heading and image link per exported artifact, in
    export order. Links are relative to the repository root.
    """
    block = "\n"
    for path in exported:
        link = quote(_repo_relative(path, repo_root), safe=LINK_SAFE_CHARACTERS)
        block += f"\n### {Path(path).stem}\n\n![content]({link})\n"
    return block + "\n"


def splice_region(
    content: str, block: str, start: str = START_MARKER, end: str = END_MARKER
) -> RegionUpdate:
    """
    Put block between the start and end markers of content.

    When both markers are present and in order, the span from start through
    end is replaced. Otherwise the markers and block are appended to the end
    of content and a warning is returned.

    Args:
        content: Current file content
        block: Text to place between the markers
        start: Start marker
        end: End marker

    Returns:
        RegionUpdate with the new content
    """
    region = f"{start}{block}{end}"
    start_index = content.find(start)
    end_index = content.find(end)

    warning = None
    if start_index == -1 and end_index == -1:
        warning = f"Couldn't find '{start}' or '{end}'"
    elif start_index == -1:
        warning = f"Couldn't find '{start}'"
    elif end_index == -1:
        warning = f"Couldn't find '{end}'"
    elif start_index > end_index:
        warning = f"Found '{start}' after '{end}'"

    if warning is not None:
        return RegionUpdate(content=content + region, replaced=False, warning=warning)

    updated = content[:start_index] + region + content[end_index + len(end) :]
    return RegionUpdate(content=updated, replaced=True)


def update_readme(
    parent_dir: Path, exported: List[Path], repo_root: Path, repo: GitRepository
) -> Path:
    """
    Refresh the image index in <parent_dir>/README.md and stage the file.

    A missing README is created holding only the two markers before splicing.

    Args:
        parent_dir: Sketch directory that owns the README
        exported: Exported artifact paths, in export order
        repo_root: Root that image links are made relative to
        repo: Repository used for staging

    Returns:
        Path to the README file
    """
    readme_path = Path(parent_dir) / README_NAME

    if readme_path.exists():
        _log_debug(f"Found existing {readme_path}")
        content = readme_path.read_text(encoding="utf-8")
    else:
        _log_info(f"Creating a new {readme_path}")
        content = START_MARKER + END_MARKER

    update = splice_region(content, build_image_references(exported, repo_root))
    if update.warning is not None:
        _log_warning(f"{update.warning} in {readme_path}")
        _log_warning("Appending image references to the end of the readme file.")

    _log_info(f"Updating content references ({len(exported)} images)")
    readme_path.write_text(update.content, encoding="utf-8")

    repo.stage(readme_path)
    return readme_path
