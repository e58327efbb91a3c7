"""Tests for promoting versions and archiving the ones they replace."""

import json

import pytest

from apiwiki.generation.frontmatter import build_frontmatter
from apiwiki.versions import VersionError, VersionManager, is_shell, snapshot_path


def write_version(config, version: str, text: str) -> None:
    root = config.version_path(version)
    (root / "Foo").mkdir(parents=True)
    (root / "Foo" / "index.mdx").write_text(
        build_frontmatter({"uid": "ns:Foo", "version": version}) + text, encoding="utf-8"
    )


@pytest.fixture
def manager(make_config):
    return VersionManager(make_config())


def test_archive_ref_is_relative_to_output(manager):
    assert manager.archive_ref("1.0.0") == ".archive/1.0.0.json"


def test_first_promotion(manager):
    config = manager.config
    write_version(config, "1.0.0", "first\n")

    assert manager.promote("1.0.0") is None

    assert json.loads(config.registry_path.read_text(encoding="utf-8")) == {
        "current": "1.0.0",
        "historical": [],
    }
    mirrored = (config.current_path / "Foo" / "index.mdx").read_text(encoding="utf-8")
    assert mirrored.endswith("first\n")
    assert not config.archive_path.exists()


def test_promotion_archives_previous_version(manager):
    config = manager.config
    write_version(config, "1.0.0", "first\n")
    manager.promote("1.0.0")
    write_version(config, "1.1.0", "second\n")

    assert manager.promote("1.1.0") == "1.0.0"

    old_page = (config.version_path("1.0.0") / "Foo" / "index.mdx").read_text(encoding="utf-8")
    assert is_shell(old_page)
    snapshot = json.loads(snapshot_path(config.archive_path, "1.0.0").read_text(encoding="utf-8"))
    assert snapshot["pages"]["Foo/index.mdx"].endswith("first\n")
    mirrored = (config.current_path / "Foo" / "index.mdx").read_text(encoding="utf-8")
    assert mirrored.endswith("second\n")
    assert manager.load_registry().historical == ["1.0.0"]


def test_historical_version_refused_before_any_change(manager):
    config = manager.config
    write_version(config, "1.0.0", "first\n")
    manager.promote("1.0.0")
    write_version(config, "1.1.0", "second\n")
    manager.promote("1.1.0")
    registry_before = config.registry_path.read_bytes()

    with pytest.raises(VersionError):
        manager.check("1.0.0")
    with pytest.raises(VersionError):
        manager.promote("1.0.0")

    assert config.registry_path.read_bytes() == registry_before


def test_archive_without_tree_is_a_no_op(manager):
    assert manager.archive("0.9.0") == 0
    assert not snapshot_path(manager.config.archive_path, "0.9.0").exists()


def test_unreadable_registry_is_fatal(manager):
    config = manager.config
    config.registry_path.parent.mkdir(parents=True)
    config.registry_path.write_text("{broken", encoding="utf-8")

    with pytest.raises(VersionError):
        manager.check("1.0.0")
