"""
Documentation Context

Responsibilities:
- Maintains the exported image index inside each sketch directory's README.md

Owns: The marker-delimited region of README.md
Never: Touches README content outside the markers
"""

from gitsketch.contexts.documentation.readme import (
    END_MARKER,
    START_MARKER,
    RegionUpdate,
    build_image_references,
    splice_region,
    update_readme,
)

__all__ = [
    "END_MARKER",
    "START_MARKER",
    "RegionUpdate",
    "build_image_references",
    "splice_region",
    "update_readme",
]
