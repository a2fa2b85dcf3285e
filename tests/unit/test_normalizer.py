"""Unit tests for unpacked tree JSON normalization."""

import json

import pytest

from gitsketch.contexts.archive import normalize_json, normalize_tree
from gitsketch.exceptions import ArchiveError


@pytest.fixture
def unpacked_tree(tmp_path):
    root = tmp_path / ".sketch"
    (root / "pages").mkdir(parents=True)
    (root / "document.json").write_text('{"pages":[],"currentPageIndex":4,"_class":"document"}')
    (root / "pages" / "page.json").write_text('{"name":"Café","layers":[{"b":1,"a":2}]}')
    (root / "images").mkdir()
    (root / "images" / "logo.png").write_bytes(b"\x89PNG raw")
    return root


@pytest.mark.unit
def test_document_current_page_is_pinned(unpacked_tree):
    normalize_tree(unpacked_tree)

    document = json.loads((unpacked_tree / "document.json").read_text())
    assert document["currentPageIndex"] == 1


@pytest.mark.unit
def test_other_json_files_keep_their_fields(unpacked_tree):
    normalize_tree(unpacked_tree)

    page = json.loads((unpacked_tree / "pages" / "page.json").read_text(encoding="utf-8"))
    assert "currentPageIndex" not in page
    assert page["name"] == "Café"


@pytest.mark.unit
def test_json_is_tab_indented_with_sorted_keys():
    text = normalize_json('{"b":1,"a":{"d":2,"c":3}}')

    assert text == '{\n\t"a": {\n\t\t"c": 3,\n\t\t"d": 2\n\t},\n\t"b": 1\n}\n'


@pytest.mark.unit
def test_non_ascii_is_preserved():
    assert "Café" in normalize_json('{"name": "Caf\\u00e9"}')


@pytest.mark.unit
def test_non_json_files_untouched(unpacked_tree):
    result = normalize_tree(unpacked_tree)

    assert (unpacked_tree / "images" / "logo.png").read_bytes() == b"\x89PNG raw"
    assert sorted(path.name for path in result.normalized_files) == ["document.json", "page.json"]


@pytest.mark.unit
def test_normalize_is_idempotent(unpacked_tree):
    normalize_tree(unpacked_tree)
    first = {path: path.read_bytes() for path in unpacked_tree.rglob("*") if path.is_file()}

    normalize_tree(unpacked_tree)
    second = {path: path.read_bytes() for path in unpacked_tree.rglob("*") if path.is_file()}

    assert first == second


@pytest.mark.unit
def test_formatting_differences_normalize_to_same_text():
    minified = '{"currentPageIndex":0,"pages":[1,2]}'
    pretty = '{\n  "pages": [1, 2],\n  "currentPageIndex": 7\n}'

    assert normalize_json(minified, is_document=True) == normalize_json(pretty, is_document=True)


@pytest.mark.unit
def test_invalid_json_raises_archive_error(unpacked_tree):
    (unpacked_tree / "document.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(ArchiveError, match="document.json"):
        normalize_tree(unpacked_tree)


@pytest.mark.unit
def test_non_utf8_json_raises_archive_error(unpacked_tree):
    (unpacked_tree / "pages" / "page.json").write_bytes(b'{"name": "\xff"}')

    with pytest.raises(ArchiveError, match="page.json"):
        normalize_tree(unpacked_tree)
