"""Tests for writing a planned tree and the staging helpers."""

from pathlib import Path

import pytest

from apiwiki.generation.layout import plan_tree
from apiwiki.generation.staging import (
    interrupted_builds,
    prepare_staging_directory,
    promote_staging_to_production,
)
from apiwiki.generation.writer import OutputWriteError, write_tree

IGNORED_ATTRIBUTE = "type:System.ComponentModel.EditorBrowsableAttribute"


class TestWriteTree:
    def test_writes_every_page(self, index, tmp_path):
        plan = plan_tree(index, ignore_attributes=[IGNORED_ATTRIBUTE])
        root = tmp_path / "out"

        written = write_tree(plan, root, lambda node: f"{node.uid}\n")

        assert written == len(plan.nodes)
        for node in plan.nodes:
            assert (root / node.path).read_text(encoding="utf-8") == f"{node.uid}\n"

    def test_unwritable_root_is_fatal(self, index, tmp_path):
        plan = plan_tree(index)
        blocker = tmp_path / "file"
        blocker.write_text("not a folder")

        with pytest.raises(OutputWriteError) as exc_info:
            write_tree(plan, blocker / "out", lambda node: "")

        assert exc_info.value.path == blocker / "out"

    def test_unwritable_page_is_fatal(self, index, tmp_path):
        plan = plan_tree(index)
        root = tmp_path / "out"
        first = plan.nodes[0]
        # A folder where the first page should go
        (root / first.path).mkdir(parents=True)

        with pytest.raises(OutputWriteError) as exc_info:
            write_tree(plan, root, lambda node: "")

        assert exc_info.value.path == root / first.path
        assert str(first.path.name) in str(exc_info.value)


class TestStaging:
    def test_prepare_wipes_previous_attempt(self, tmp_path: Path):
        staging = tmp_path / ".building-1.0.0"
        (staging / "stale").mkdir(parents=True)

        prepare_staging_directory(staging)

        assert staging.is_dir()
        assert list(staging.iterdir()) == []

    def test_promote_replaces_production(self, tmp_path: Path):
        staging = tmp_path / ".building-1.0.0"
        production = tmp_path / "1.0.0"
        (production / "old").mkdir(parents=True)
        staging.mkdir()
        (staging / "index.mdx").write_text("new")

        promote_staging_to_production(staging, production)

        assert not staging.exists()
        assert (production / "index.mdx").read_text() == "new"
        assert not (production / "old").exists()

    def test_interrupted_builds(self, tmp_path: Path):
        assert interrupted_builds(tmp_path / "missing") == []
        assert interrupted_builds(tmp_path) == []

        (tmp_path / ".building-2.0").mkdir()
        (tmp_path / ".building-1.0").mkdir()
        (tmp_path / "1.0").mkdir()
        (tmp_path / ".building-notes.txt").write_text("not a folder")

        assert interrupted_builds(tmp_path) == [tmp_path / ".building-1.0", tmp_path / ".building-2.0"]
