"""
Unpacked Tree Normalization

Sketch writes its JSON minified and records which page was open when the file
was last saved. Both produce noisy diffs that have nothing to do with design
changes. This module rewrites every JSON file of an unpacked tree into a
canonical form:

1. Keys sorted alphabetically, tab indentation, trailing newline
2. document.json gets currentPageIndex pinned to 1

Running it twice on the same tree produces byte-identical output.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

from gitsketch.contexts.archive.logger import _log_debug
from gitsketch.exceptions import ArchiveError

DOCUMENT_DESCRIPTOR_STEM = "document"
CURRENT_PAGE_FIELD = "currentPageIndex"
PINNED_PAGE_INDEX = 1
JSON_INDENT = "\t"


@dataclass
class NormalizationResult:
    """
    Result of normalizing an unpacked tree.

    Attributes:
        root: Directory that was normalized
        normalized_files: JSON files rewritten in canonical form
    """

    root: Path
    normalized_files: List[Path] = field(default_factory=list)


def _is_json_file(path: Path) -> bool:
    return path.suffix.lower() == ".json"


def normalize_json(text: str, is_document: bool = False) -> str:
    """
    Canonicalize a JSON document.

    Args:
        text: JSON source text
        is_document: Pin currentPageIndex (set for document.json)

    Returns:
        Canonical JSON text ending in a newline
    """
    data: Any = json.loads(text)

    if is_document and isinstance(data, dict):
        data[CURRENT_PAGE_FIELD] = PINNED_PAGE_INDEX

    return json.dumps(data, indent=JSON_INDENT, sort_keys=True, ensure_ascii=False) + "\n"


def normalize_tree(root: Path) -> NormalizationResult:
    """
    Rewrite every JSON file under root into canonical form.

    Non-JSON files (previews, bitmaps, fonts) are left untouched.

    Args:
        root: Unpacked tree to normalize in place

    Returns:
        NormalizationResult listing rewritten files

    Raises:
        ArchiveError: If a JSON file is not valid UTF-8 JSON
    """
    root = Path(root)
    result = NormalizationResult(root=root)

    for path in sorted(root.rglob("*")):
        if not path.is_file() or not _is_json_file(path):
            continue

        is_document = path.stem == DOCUMENT_DESCRIPTOR_STEM
        if is_document:
            _log_debug(f"Setting {path.name} {CURRENT_PAGE_FIELD} to {PINNED_PAGE_INDEX}")

        try:
            canonical = normalize_json(path.read_text(encoding="utf-8"), is_document=is_document)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ArchiveError(f"Invalid JSON in {path}: {e}") from e
        path.write_text(canonical, encoding="utf-8")
        result.normalized_files.append(path)

    _log_debug(f"Normalized {len(result.normalized_files)} JSON files under {root}")
    return result
