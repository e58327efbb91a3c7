"""Tests for YAML frontmatter helpers."""

from apiwiki.generation.frontmatter import build_frontmatter, parse_frontmatter


def test_build_keeps_order_and_drops_none():
    content = build_frontmatter({"uid": "ns:Foo", "title": "Foo Namespace", "description": None, "type": "namespace"})

    assert content == "---\nuid: ns:Foo\ntitle: Foo Namespace\ntype: namespace\n---\n\n"


def test_parse_round_trip():
    content = build_frontmatter({"uid": "type:Foo.Bar", "version": "1.0.0"}) + "# Bar\n"

    metadata, body = parse_frontmatter(content)

    assert metadata == {"uid": "type:Foo.Bar", "version": "1.0.0"}
    assert body == "# Bar\n"


def test_parse_without_frontmatter():
    metadata, body = parse_frontmatter("# Just a heading\n")

    assert metadata is None
    assert body == "# Just a heading\n"


def test_parse_crlf_and_empty_block():
    metadata, body = parse_frontmatter("---\r\n---\r\nBody\r\n")

    assert metadata == {}
    assert body == "Body\n"


def test_parse_invalid_yaml_is_not_frontmatter():
    content = "---\nkey: [unclosed\n---\nBody\n"

    metadata, body = parse_frontmatter(content)

    assert metadata is None
    assert body == content
