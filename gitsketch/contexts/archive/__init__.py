"""
Archive Context

Responsibilities:
- Unpacks .sketch containers into a directory tree
- Repacks a directory tree into a .sketch container
- Normalizes unpacked JSON so unchanged designs produce unchanged files

Owns: Container I/O, unpacked tree canonical form
Never: Talks to git or sketchtool
"""

from gitsketch.contexts.archive.codec import PackResult, UnpackResult, pack, unpack
from gitsketch.contexts.archive.normalizer import (
    NormalizationResult,
    normalize_json,
    normalize_tree,
)

__all__ = [
    "pack",
    "unpack",
    "PackResult",
    "UnpackResult",
    "normalize_json",
    "normalize_tree",
    "NormalizationResult",
]
