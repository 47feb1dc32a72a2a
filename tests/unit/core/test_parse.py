"""Unit tests for core/parse.py"""

from datetime import date

import pytest

from postref.core.errors import MalformedFrontMatter, UnknownKey, UnknownLayout
from postref.core.parse import (
    build_document,
    discover_files,
    dump_frontmatter,
    extract_excerpt,
    parse_file,
    parse_frontmatter,
)


# --- parse_frontmatter ---

def test_parse_frontmatter_splits_metadata_and_body():
    """parse_frontmatter extracts the fenced YAML header and returns the rest as body."""
    fm, body = parse_frontmatter("---\ntitle: Hello\nlayout: article\n---\n# Body\n")
    assert fm == {"title": "Hello", "layout": "article"}
    assert body == "# Body\n"


def test_parse_frontmatter_quoted_value_keeps_markup():
    """Quoted values may carry literal markup."""
    fm, _ = parse_frontmatter('---\ndescription: "Prefer <code>auto</code>: it works"\n---\n')
    assert fm["description"] == "Prefer <code>auto</code>: it works"


def test_parse_frontmatter_no_fence_returns_text_whole():
    text = "<p>No header here</p>\n"
    assert parse_frontmatter(text) == ({}, text)


def test_parse_frontmatter_fence_must_be_first_line():
    """A fence further down the text is body content, not front matter."""
    text = "intro\n---\ntitle: x\n---\n"
    assert parse_frontmatter(text) == ({}, text)


def test_parse_frontmatter_empty_block():
    assert parse_frontmatter("---\n---\nbody\n") == ({}, "body\n")


def test_parse_frontmatter_tolerates_trailing_blanks_and_crlf():
    fm, body = parse_frontmatter("---  \r\ntitle: T\r\n---\r\nbody\r\n")
    assert fm == {"title": "T"}
    assert body == "body\r\n"


def test_parse_frontmatter_ignores_bom():
    fm, _ = parse_frontmatter("\ufeff---\ntitle: T\n---\n")
    assert fm == {"title": "T"}


def test_parse_frontmatter_unclosed_fence():
    """An opening fence with no closing fence is malformed."""
    with pytest.raises(MalformedFrontMatter, match="never closed"):
        parse_frontmatter("---\ntitle: Hello\n# Body\n")


def test_parse_frontmatter_invalid_yaml():
    with pytest.raises(MalformedFrontMatter, match="invalid YAML"):
        parse_frontmatter("---\ntitle: [unclosed\n---\n")


def test_parse_frontmatter_non_mapping():
    with pytest.raises(MalformedFrontMatter, match="expected a mapping"):
        parse_frontmatter("---\n- a\n- b\n---\n")


def test_parse_frontmatter_unknown_keys_preserved_by_default():
    fm, _ = parse_frontmatter("---\ntitle: T\ncomments: true\n---\n")
    assert fm["comments"] is True


def test_parse_frontmatter_strict_rejects_unknown_key():
    with pytest.raises(UnknownKey) as exc:
        parse_frontmatter("---\ntitle: T\ncomments: true\n---\n", strict=True)
    assert exc.value.detail == "comments"


def test_parse_frontmatter_strict_custom_known_keys():
    fm, _ = parse_frontmatter("---\ncomments: true\n---\n", strict=True, known_keys=["comments"])
    assert fm == {"comments": True}


# --- dump_frontmatter ---

@pytest.mark.parametrize("metadata,body", [
    ({"layout": "article", "title": "Exceptions vs error codes", "tag": "c++"}, "\nBody.\n"),
    ({"description": "Who owns a <code>T*</code>?", "date": date(2014, 6, 19)}, ""),
    ({"tags": ["c++", "auto"], "published": False, "x": None}, "{% post_url p2 %}\n"),
    ({}, "no header\n"),
])
def test_dump_then_parse_preserves_metadata_and_body(metadata, body):
    """Serializing and re-parsing front matter returns the same keys, values, and body."""
    assert parse_frontmatter(dump_frontmatter(metadata, body)) == (metadata, body)


def test_dump_frontmatter_keeps_key_order():
    text = dump_frontmatter({"title": "T", "layout": "article"}, "")
    assert text.index("title") < text.index("layout")


# --- build_document ---

def test_build_document_fields(make_doc):
    raw = "---\nlayout: article\ntitle: Auto\ndescription: On auto\ntag: c++\n---\nBody text.\n"
    doc = make_doc("2014-08-01-almost-always-auto", raw)
    assert doc.path == "2014-08-01-almost-always-auto"
    assert doc.layout == "article"
    assert doc.title == "Auto"
    assert doc.description == "On auto"
    assert doc.tag == "c++"
    assert doc.date == date(2014, 8, 1)
    assert doc.slug == "almost-always-auto"
    assert doc.url == "/2014/08/01/almost-always-auto.html"
    assert doc.body == "Body text.\n"
    assert doc.excerpt == "Body text."


def test_build_document_defaults(make_doc):
    """Missing layout/title fall back to the configured layout and a path-derived title."""
    doc = make_doc("deprecation-attributes", "plain body\n")
    assert doc.layout == "default"
    assert doc.title == "Deprecation Attributes"
    assert doc.date is None
    assert doc.tag is None
    assert doc.url == "/deprecation-attributes.html"


def test_build_document_is_immutable(make_doc):
    doc = make_doc("p1")
    with pytest.raises(Exception):
        doc.title = "changed"


def test_build_document_permalink_override(make_doc):
    doc = make_doc("2014-06-19-x", "---\npermalink: /about/\n---\n")
    assert doc.url == "/about/"


def test_build_document_slug_override(make_doc):
    doc = make_doc("2014-06-19-x", "---\nslug: Lvalues & Rvalues\n---\n")
    assert doc.slug == "lvalues-rvalues"
    assert doc.url == "/2014/06/19/lvalues-rvalues.html"


def test_build_document_front_matter_date_wins(make_doc):
    doc = make_doc("2014-06-19-x", "---\ndate: 2015-01-02 10:00:00\n---\n")
    assert doc.date == date(2015, 1, 2)


def test_build_document_invalid_date(make_doc):
    with pytest.raises(MalformedFrontMatter, match="2014-06-19-x"):
        make_doc("2014-06-19-x", "---\ndate: someday\n---\n")


def test_build_document_collects_tags(make_doc):
    doc = make_doc("p", "---\ntag: c++\ntags: [idioms, c++]\n---\n")
    assert doc.tags == ("c++", "idioms")


def test_build_document_unknown_layout(make_doc):
    with pytest.raises(UnknownLayout) as exc:
        make_doc("p", "---\nlayout: fancy\n---\n", layouts=["default", "article"])
    assert exc.value.doc_path == "p"
    assert exc.value.detail == "fancy"


def test_build_document_error_names_path(settings):
    """Parser errors are re-raised carrying the document path."""
    with pytest.raises(MalformedFrontMatter) as exc:
        build_document("2014-06-19-broken", "---\ntitle: x\n", settings)
    assert exc.value.doc_path == "2014-06-19-broken"
    assert "2014-06-19-broken" in str(exc.value)


def test_build_document_hash_is_of_raw(make_doc):
    from postref.core.utils.hashing import sha256
    raw = "---\ntitle: T\n---\nbody\n"
    assert make_doc("p", raw).hash == sha256(raw)


# --- extract_excerpt ---

def test_extract_excerpt_skips_headings():
    assert extract_excerpt("# Title\n\nFirst  para\nwraps.\n\nSecond.\n") == "First para wraps."


def test_extract_excerpt_none_for_empty_body():
    assert extract_excerpt("") is None


# --- discovery ---

def test_discover_files_dir(tmp_path):
    """discover_files finds configured extensions recursively, sorted."""
    (tmp_path / "b.html").write_text("b")
    sub = tmp_path / "_posts"
    sub.mkdir()
    (sub / "a.md").write_text("a")
    (tmp_path / "notes.txt").write_text("x")
    assert discover_files(tmp_path, [".md", ".html"]) == [sub / "a.md", tmp_path / "b.html"]


def test_discover_files_skips_dot_entries(tmp_path):
    hidden = tmp_path / ".drafts"
    hidden.mkdir()
    (hidden / "a.md").write_text("a")
    (tmp_path / ".b.md").write_text("b")
    assert discover_files(tmp_path, [".md"]) == []


def test_discover_files_single(tmp_path):
    f = tmp_path / "doc.MD"
    f.write_text("x")
    assert discover_files(f, [".md"]) == [f]


def test_parse_file_uses_relative_path(tmp_path, settings):
    sub = tmp_path / "_posts"
    sub.mkdir()
    f = sub / "2014-06-19-raw-pointers.html"
    f.write_text("---\ntitle: Raw\n---\n<p>hi</p>\n")
    doc = parse_file(f, tmp_path, settings)
    assert doc.path == "_posts/2014-06-19-raw-pointers"
    assert doc.url == "/2014/06/19/raw-pointers.html"


# --- non-string keys and read-only metadata ---

@pytest.mark.parametrize("header", ["2014: year\ntitle: x\n", "yes: 1\n", "1.5: x\n"])
def test_parse_frontmatter_rejects_non_string_keys(header):
    """Keys YAML reads as ints, bools, or sequences are malformed front matter."""
    with pytest.raises(MalformedFrontMatter, match="non-string key"):
        parse_frontmatter(f"---\n{header}---\nbody\n")


def test_parse_frontmatter_quoted_numeric_key_is_allowed():
    fm, _ = parse_frontmatter("---\n'2014': year\n---\n")
    assert fm == {"2014": "year"}


def test_build_document_non_string_key_names_path(settings):
    with pytest.raises(MalformedFrontMatter) as exc:
        build_document("p", "---\n2014: year\ntitle: x\n---\nbody\n", settings)
    assert exc.value.doc_path == "p"


def test_build_document_metadata_is_read_only(make_doc):
    doc = make_doc("p", "---\ntitle: T\ncomments: true\n---\n")
    with pytest.raises(TypeError):
        doc.metadata["x"] = 1
    assert "x" not in doc.metadata
    assert dict(doc.metadata) == {"title": "T", "comments": True}
