"""Tests for the sidecar store: parsing, indexing and zero-trust skeletons."""

from pathlib import Path, PurePosixPath

import pytest

from apiwiki.diagnostics import DiagnosticCode, DiagnosticLog
from apiwiki.generation.frontmatter import parse_frontmatter
from apiwiki.sidecars import SidecarStore, build_skeleton, parse_sidecar, sidecar_relative_path

BAR_SIDECAR = """---
uid: type:Foo.Bar
title: Bar Class
description: Holds the bar.
see_also:
  - type:Foo.Color
  - url: https://example.com/bars
    title: Bar guide
order:
  Examples: 1
---

Opening words.

## Remarks

Bars are {snippet:thread-safety}

## Examples

```csharp
var bar = new Bar();
```
"""


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def section(entry, heading: str):
    return next(s for s in entry.sections if s.heading == heading)


@pytest.fixture
def sidecar_root(tmp_path):
    return tmp_path / "sidecars" / "1.0.0"


@pytest.fixture
def snippets(tmp_path):
    folder = tmp_path / "sidecars" / "_snippets"
    write(folder / "thread-safety.md", "safe to share between threads.\n")
    return folder


class TestParseSidecar:
    def test_parses_frontmatter_and_sections(self):
        entry = parse_sidecar(BAR_SIDECAR)

        assert entry.uid == "type:Foo.Bar"
        assert entry.description == "Holds the bar."
        assert entry.preamble == "Opening words."
        assert [s.heading for s in entry.sections] == ["Remarks", "Examples"]
        assert section(entry, "Examples").order == 1
        assert section(entry, "Remarks").order is None
        assert [ref.key for ref in entry.see_also] == ["type:Foo.Color", "https://example.com/bars"]

    def test_missing_frontmatter_rejected(self):
        with pytest.raises(ValueError):
            parse_sidecar("## Remarks\n\nNo frontmatter.\n")

    def test_bad_order_rejected(self):
        with pytest.raises(ValueError):
            parse_sidecar("---\nuid: ns:Foo\norder: [1, 2]\n---\n")

    def test_single_see_also_without_list(self):
        entry = parse_sidecar("---\nuid: type:A\nsee_also: type:B\n---\n")

        assert [ref.key for ref in entry.see_also] == ["type:B"]

    def test_non_list_see_also_rejected(self):
        with pytest.raises(ValueError, match="see_also"):
            parse_sidecar("---\nuid: type:A\nsee_also: 42\n---\n")

    def test_bad_see_also_rejected(self):
        with pytest.raises(ValueError):
            parse_sidecar("---\nuid: ns:Foo\nsee_also:\n  - title: nowhere\n---\n")


class TestSkeleton:
    def test_skeleton_round_trips_as_empty_entry(self):
        content = build_skeleton("type:Foo.Bar", "Bar Class")

        metadata, _ = parse_frontmatter(content)
        entry = parse_sidecar(content)

        assert metadata == {
            "uid": "type:Foo.Bar",
            "title": "Bar Class",
            "description": "",
            "see_also": [],
        }
        assert [s.heading for s in entry.sections] == ["Remarks", "Examples"]
        assert not entry.has_content

    def test_sidecar_path_mirrors_page(self):
        assert sidecar_relative_path(PurePosixPath("Foo/Types/Bar/index.mdx")) == PurePosixPath(
            "Foo/Types/Bar/index.md"
        )


class TestLoad:
    def test_indexes_by_frontmatter_uid(self, sidecar_root, snippets):
        # Moved by a human; the uid still finds it
        write(sidecar_root / "moved" / "anywhere.md", BAR_SIDECAR)

        store = SidecarStore(sidecar_root, snippets).load()

        assert "type:Foo.Bar" in store
        assert store.description("type:Foo.Bar") == "Holds the bar."
        assert store.path_for("type:Foo.Bar") == sidecar_root / "moved" / "anywhere.md"

    def test_snippets_expanded(self, sidecar_root, snippets):
        write(sidecar_root / "Foo" / "Types" / "Bar" / "index.md", BAR_SIDECAR)

        store = SidecarStore(sidecar_root, snippets).load()

        remarks = section(store.get("type:Foo.Bar"), "Remarks")
        assert remarks.content == "Bars are safe to share between threads."

    def test_unknown_snippet_left_verbatim(self, sidecar_root, tmp_path):
        write(sidecar_root / "a.md", "---\nuid: ns:Foo\n---\n\n## Remarks\n\nSee {snippet:nope}\n")
        diagnostics = DiagnosticLog()

        store = SidecarStore(sidecar_root, tmp_path / "none", diagnostics).load()

        assert section(store.get("ns:Foo"), "Remarks").content == "See {snippet:nope}"
        assert diagnostics.by_code(DiagnosticCode.UNKNOWN_SNIPPET)[0].uid == "ns:Foo"

    def test_invalid_files_skipped_not_rewritten(self, sidecar_root):
        broken = write(sidecar_root / "broken.md", "no frontmatter here\n")
        no_uid = write(sidecar_root / "no-uid.md", "---\ntitle: x\n---\n")
        diagnostics = DiagnosticLog()

        store = SidecarStore(sidecar_root, diagnostics=diagnostics).load()

        assert len(store) == 0
        assert len(diagnostics.by_code(DiagnosticCode.SIDECAR_INVALID)) == 2
        assert broken.read_text(encoding="utf-8") == "no frontmatter here\n"
        assert no_uid.read_text(encoding="utf-8") == "---\ntitle: x\n---\n"

    def test_duplicate_uid_first_path_wins(self, sidecar_root):
        write(sidecar_root / "a.md", "---\nuid: ns:Foo\ndescription: from a\n---\n")
        write(sidecar_root / "b.md", "---\nuid: ns:Foo\ndescription: from b\n---\n")
        diagnostics = DiagnosticLog()

        store = SidecarStore(sidecar_root, diagnostics=diagnostics).load()

        assert store.description("ns:Foo") == "from a"
        assert diagnostics.by_code(DiagnosticCode.SIDECAR_CONFLICT)[0].path == "b.md"

    def test_missing_root_is_empty(self, tmp_path):
        assert len(SidecarStore(tmp_path / "absent").load()) == 0


class TestEnsureSkeleton:
    """Zero-trust: existing sidecar files are never modified."""

    def test_creates_missing_skeleton(self, sidecar_root):
        store = SidecarStore(sidecar_root).load()

        created = store.ensure_skeleton("type:Foo.Bar", PurePosixPath("Foo/Types/Bar/index.mdx"), "Bar Class")

        target = sidecar_root / "Foo" / "Types" / "Bar" / "index.md"
        assert created
        assert target.read_text(encoding="utf-8") == build_skeleton("type:Foo.Bar", "Bar Class")
        assert "type:Foo.Bar" in store

    def test_existing_uid_untouched(self, sidecar_root):
        path = write(sidecar_root / "elsewhere.md", BAR_SIDECAR)
        store = SidecarStore(sidecar_root).load()

        created = store.ensure_skeleton("type:Foo.Bar", PurePosixPath("Foo/Types/Bar/index.mdx"), "Bar Class")

        assert not created
        assert path.read_text(encoding="utf-8") == BAR_SIDECAR
        assert not (sidecar_root / "Foo" / "Types" / "Bar" / "index.md").exists()

    def test_occupied_path_reports_conflict(self, sidecar_root):
        occupant = write(sidecar_root / "Foo" / "Types" / "Bar" / "index.md", "---\nuid: type:Other\n---\n")
        diagnostics = DiagnosticLog()
        store = SidecarStore(sidecar_root, diagnostics=diagnostics).load()

        created = store.ensure_skeleton("type:Foo.Bar", PurePosixPath("Foo/Types/Bar/index.mdx"), "Bar Class")

        assert not created
        assert occupant.read_text(encoding="utf-8") == "---\nuid: type:Other\n---\n"
        assert diagnostics.by_code(DiagnosticCode.SIDECAR_CONFLICT)[0].uid == "type:Foo.Bar"

    def test_carry_forward_copies_previous_file(self, tmp_path):
        old_root = tmp_path / "sidecars" / "1.0.0"
        write(old_root / "Foo" / "Types" / "Bar" / "index.md", BAR_SIDECAR)
        previous = SidecarStore(old_root).load()
        store = SidecarStore(tmp_path / "sidecars" / "1.1.0").load()

        created = store.ensure_skeleton(
            "type:Foo.Bar", PurePosixPath("Foo/Types/Bar/index.mdx"), "Bar Class", previous
        )

        new_file = tmp_path / "sidecars" / "1.1.0" / "Foo" / "Types" / "Bar" / "index.md"
        assert created
        assert new_file.read_text(encoding="utf-8") == BAR_SIDECAR
        assert store.description("type:Foo.Bar") == "Holds the bar."

    def test_carry_forward_follows_uid_to_new_path(self, tmp_path):
        old_root = tmp_path / "sidecars" / "1.0.0"
        write(old_root / "Foo" / "Types" / "Bar" / "index.md", BAR_SIDECAR)
        previous = SidecarStore(old_root).load()
        store = SidecarStore(tmp_path / "sidecars" / "1.1.0").load()

        store.ensure_skeleton(
            "type:Foo.Bar", PurePosixPath("Foo/Namespaces/Sub/Types/Bar/index.mdx"), "Bar Class", previous
        )

        assert store.path_for("type:Foo.Bar") == (
            tmp_path / "sidecars" / "1.1.0" / "Foo" / "Namespaces" / "Sub" / "Types" / "Bar" / "index.md"
        )
