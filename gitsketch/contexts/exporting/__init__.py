"""
Exporting Context

Responsibilities:
- Locates and runs sketchtool to render artboards
- Recovers the list of exported artifacts from sketchtool output
- Embeds configured fonts into exported SVGs

Owns: Rendered artifacts under the export directory
Never: Modifies the .sketch document or its unpacked tree
"""

from gitsketch.contexts.exporting.exporter import (
    ExportResult,
    build_export_command,
    export_content,
    locate_tool,
    parse_exported,
)
from gitsketch.contexts.exporting.svg_fonts import (
    FontPolicy,
    embed_fonts,
    rewrite_font_family,
    splice_font_faces,
)

__all__ = [
    "ExportResult",
    "build_export_command",
    "export_content",
    "locate_tool",
    "parse_exported",
    "FontPolicy",
    "embed_fonts",
    "rewrite_font_family",
    "splice_font_faces",
]
