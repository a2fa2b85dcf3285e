"""
SVG Font Embedding

Exported SVGs reference fonts by family name only, so they render with a
fallback font anywhere the design font is not installed (including on the git
hosting site). This module inlines the font files as base64 @font-face rules.

Processing one SVG:
1. Parse the markup and rewrite every font-family attribute: record the
   families that should be embedded and quote multi-word family names
2. Add a <style> block per recorded family to <defs>, holding an
   <embeddedFont> placeholder with the family, file type and base64 data
3. Serialize, then splice each placeholder into a CDATA @font-face rule

Step 3 is a text substitution because ElementTree cannot emit CDATA sections.
The placeholder tag is unique to this module, so the substitution cannot touch
anything that came from sketchtool.
"""

import base64
import io
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple
from xml.sax.saxutils import unescape

from gitsketch.config import FontConfig
from gitsketch.contexts.exporting.logger import _log_debug, _log_info
from gitsketch.exceptions import VectorDocumentError

FONT_FAMILY_ATTRIBUTE = "font-family"
MARKER_TAG = "embeddedFont"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Elements that conventionally precede <defs> in sketchtool output
LEADING_TAGS = ("title", "desc")

MARKER_PATTERN = re.compile(
    r'<(?:[\w.-]+:)?embeddedFont font-family="([^"]*)" font-type="([^"]*)" '
    r'font-base64="([^"]*)"\s*/>'
)

FONT_FACE_TEMPLATE = (
    "<![CDATA[\n        "
    '@font-face {{ font-family: "{family}"; '
    'src: url("data:application/x-font-{font_type};base64,{data}"); }}\n      '
    "]]>"
)


@dataclass(frozen=True)
class FontPolicy:
    """
    Decides which font families get embedded.

    A family is embedded when it starts with one of embed_prefixes and with
    none of ignore_prefixes. Ignore prefixes always win.
    """

    embed_prefixes: Tuple[str, ...]
    ignore_prefixes: Tuple[str, ...]

    @classmethod
    def from_config(cls, fonts: FontConfig) -> "FontPolicy":
        return cls(embed_prefixes=fonts.embed_prefixes, ignore_prefixes=fonts.ignore_prefixes)

    def is_ignored(self, family: str) -> bool:
        return any(family.startswith(prefix) for prefix in self.ignore_prefixes)

    def should_embed(self, family: str) -> bool:
        if self.is_ignored(family):
            return False
        return any(family.startswith(prefix) for prefix in self.embed_prefixes)


def _is_quoted(family: str) -> bool:
    return family[:1] in ("'", '"')


def rewrite_font_family(value: str, policy: FontPolicy, record: Dict[str, bool]) -> str:
    """
    Rewrite one font-family attribute value.

    Families to embed are added to record (insertion order = first seen).
    Any family containing a space is wrapped in single quotes unless already
    quoted, whether or not it gets embedded.

    Args:
        value: Raw attribute value, e.g. "Arial-BoldMT, Open Sans"
        policy: Embedding policy
        record: Families already recorded for this document (mutated)

    Returns:
        Rewritten attribute value
    """
    families = []
    for raw_family in value.split(","):
        family = raw_family.strip()
        if not family:
            continue

        name = family.strip("'\"")
        if name not in record:
            if policy.should_embed(name):
                _log_debug(f"Font family to embed: {name}")
                record[name] = True
            elif policy.is_ignored(name):
                _log_debug(f"Skipping ignored font family: {name}")

        if " " in family and not _is_quoted(family):
            _log_debug(f'Quoting font-family value "{family}"')
            family = f"'{family}'"

        families.append(family)

    return ", ".join(families)


def _namespace_of(tag: str) -> str:
    return tag[1:].split("}", 1)[0] if tag.startswith("{") else ""


def _qualified(local_name: str, namespace: str) -> str:
    return f"{{{namespace}}}{local_name}" if namespace else local_name


def _local_name(tag) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _register_namespaces(markup: bytes) -> None:
    """Keep the document's own namespace prefixes when serializing."""
    for _, (prefix, uri) in ET.iterparse(io.BytesIO(markup), events=("start-ns",)):
        # ElementTree reserves ns<N> prefixes for generated names
        if re.match(r"ns\d+$", prefix):
            continue
        ET.register_namespace(prefix, uri)


def _parse(markup: bytes) -> ET.Element:
    _register_namespaces(markup)
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    return ET.fromstring(markup, parser=parser)


def _find_or_create_defs(root: ET.Element, namespace: str) -> ET.Element:
    defs = root.find(_qualified("defs", namespace))
    if defs is not None:
        return defs

    _log_debug("Adding <defs> element")
    position = 0
    for index, child in enumerate(root):
        if child.tag is ET.Comment or _local_name(child.tag) in LEADING_TAGS:
            position = index + 1
        else:
            break

    defs = ET.Element(_qualified("defs", namespace))
    root.insert(position, defs)
    return defs


def _add_font_marker(
    defs: ET.Element, namespace: str, family: str, fonts: FontConfig
) -> None:
    font_path = fonts.path / f"{family}.{fonts.extension}"
    _log_debug(f"Embedding {font_path}")

    encoded = base64.b64encode(font_path.read_bytes()).decode("ascii")

    style = ET.SubElement(defs, _qualified("style", namespace), {"type": "text/css"})
    ET.SubElement(
        style,
        _qualified(MARKER_TAG, namespace),
        {
            "font-family": family,
            "font-type": fonts.extension,
            "font-base64": encoded,
        },
    )


def splice_font_faces(markup: str) -> str:
    """
    Replace every <embeddedFont .../> placeholder with a CDATA @font-face rule.

    Args:
        markup: Serialized SVG containing placeholders

    Returns:
        Markup with placeholders replaced
    """

    def _font_face(match: re.Match) -> str:
        return FONT_FACE_TEMPLATE.format(
            family=unescape(match.group(1), {"&quot;": '"'}),
            font_type=match.group(2),
            data=match.group(3),
        )

    return MARKER_PATTERN.sub(_font_face, markup)


def embed_fonts(svg_path: Path, fonts: FontConfig) -> List[str]:
    """
    Post-process one exported SVG in place.

    The file is always rewritten so that font-family quoting fixes are kept
    even when nothing is embedded.

    Args:
        svg_path: Exported SVG file
        fonts: Font configuration (prefix lists, font directory, extension)

    Returns:
        Embedded font families, in order of first appearance

    Raises:
        FileNotFoundError: If a font selected for embedding has no font file
        VectorDocumentError: If the SVG is not well-formed XML
    """
    svg_path = Path(svg_path)
    _log_debug(f"Post-processing {svg_path}")

    policy = FontPolicy.from_config(fonts)
    record: Dict[str, bool] = {}

    try:
        root = _parse(svg_path.read_bytes())
    except ET.ParseError as e:
        raise VectorDocumentError(
            f"Cannot parse exported SVG {svg_path}: {e}", path=svg_path
        ) from e

    for element in root.iter():
        value = element.get(FONT_FAMILY_ATTRIBUTE)
        if value is not None:
            element.set(FONT_FAMILY_ATTRIBUTE, rewrite_font_family(value, policy, record))

    families = list(record)
    if families:
        _log_info(f"Embedding fonts in {svg_path.name}: {', '.join(families)}")
        namespace = _namespace_of(root.tag)
        defs = _find_or_create_defs(root, namespace)
        for family in families:
            _add_font_marker(defs, namespace, family, fonts)
    else:
        _log_debug(f"No fonts need to be embedded in {svg_path.name}")

    markup = XML_DECLARATION + ET.tostring(root, encoding="unicode")
    svg_path.write_text(splice_font_faces(markup), encoding="utf-8")

    return families
