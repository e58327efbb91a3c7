"""Namespace and type navigation index of a generated version tree.

The index is built by scanning written pages, not from the manifest, so it
always describes exactly what is on disk. Folder classification:
- a folder without index.mdx is a grouping folder (Types/, Namespaces/ ...)
  whose entries are flattened into the parent listing
- ``type: namespace`` in index.mdx: a namespace, recursed
- ``type: type`` in index.mdx: a type; only its Nested-Types/ are recursed
- anything else: treated as a namespace, with a diagnostic
- loose .mdx files other than index.mdx are single-page types (delegates)
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from apiwiki.constants import INDEX_FILE, NAVIGATION_FILE, NESTED_TYPES_FOLDER, PAGE_SUFFIX
from apiwiki.diagnostics import DiagnosticCode, DiagnosticLog
from apiwiki.generation.frontmatter import parse_frontmatter

logger = logging.getLogger(__name__)


def _read_frontmatter(path: Path) -> dict:
    try:
        metadata, _ = parse_frontmatter(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError):
        return {}
    return metadata or {}


def _entry(
    name: str,
    entry_type: str,
    metadata: dict,
    path: str,
    children: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    return {
        "name": metadata.get("sidebar_label") or name,
        "type": entry_type,
        "typekind": metadata.get("kind") if entry_type == "type" else None,
        "description": metadata.get("description"),
        "path": path,
        "children": children or [],
    }


class NavigationBuilder:
    """Scan one version folder into navigation entries."""

    def __init__(self, version_root: Path, diagnostics: Optional[DiagnosticLog] = None):
        self.version_root = version_root
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.version_root).as_posix()

    def entries(self, folder: Path) -> list[dict[str, Any]]:
        """Entries for the contents of folder, sorted by name."""
        if not folder.is_dir():
            return []

        result: list[dict[str, Any]] = []
        for child in sorted(folder.iterdir(), key=lambda p: p.name):
            if child.is_dir():
                result.extend(self._folder(child))
            elif child.suffix == PAGE_SUFFIX and child.name != INDEX_FILE:
                metadata = _read_frontmatter(child)
                result.append(
                    _entry(child.stem, "type", metadata, self._relative(child.with_suffix("")))
                )
        return result

    def _folder(self, folder: Path) -> list[dict[str, Any]]:
        index_page = folder / INDEX_FILE
        if not index_page.is_file():
            return self.entries(folder)

        metadata = _read_frontmatter(index_page)
        page_type = metadata.get("type")
        relative = self._relative(folder)

        if page_type == "type":
            nested = self.entries(folder / NESTED_TYPES_FOLDER)
            return [_entry(folder.name, "type", metadata, relative, nested)]

        if page_type != "namespace":
            self.diagnostics.warn(
                DiagnosticCode.AMBIGUOUS_FOLDER,
                f"index page declares type {page_type!r}; treating as namespace",
                uid=metadata.get("uid"),
                path=self._relative(index_page),
            )
        return [_entry(folder.name, "namespace", metadata, relative, self.entries(folder))]

    def build(self) -> dict[str, list[dict[str, Any]]]:
        """Map each top-level folder to the entries it contains."""
        navigation: dict[str, list[dict[str, Any]]] = {}
        if not self.version_root.is_dir():
            return navigation
        for child in sorted(self.version_root.iterdir(), key=lambda p: p.name):
            if child.is_dir():
                navigation[child.name] = self.entries(child)
        return navigation


def write_navigation(version_root: Path, diagnostics: Optional[DiagnosticLog] = None) -> Path:
    """Scan version_root and write its navigation.json.

    Returns:
        Path of the written file.
    """
    navigation = NavigationBuilder(version_root, diagnostics).build()
    target = version_root / NAVIGATION_FILE
    with open(target, "w", encoding="utf-8", newline="\n") as f:
        json.dump(navigation, f, indent=2, ensure_ascii=False)
        f.write("\n")
    logger.info(f"Wrote navigation for {len(navigation)} top-level folders to {target}")
    return target
