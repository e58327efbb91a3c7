"""Snapshots and shell pages of historical versions.

Archiving a version is two steps, in this order:
1. Every page of the version is written once into an immutable JSON
   snapshot (``.archive/<version>.json``). An existing snapshot is never
   rewritten.
2. Each page is replaced by a shell page that keeps its frontmatter and
   whose body only loads the page's entry from the snapshot.

Both steps are idempotent, so an interrupted archive can simply be re-run.
"""

import logging
from pathlib import Path

from apiwiki.constants import ARCHIVE_SUFFIX, PAGE_SUFFIX, SHELL_COMPONENT, SHELL_IMPORT
from apiwiki.generation.frontmatter import build_frontmatter, parse_frontmatter
from apiwiki.versions.registry import write_json_atomic

logger = logging.getLogger(__name__)


def iter_pages(version_root: Path) -> list[Path]:
    """All pages of a version tree, in sorted path order."""
    return sorted(p for p in version_root.rglob(f"*{PAGE_SUFFIX}") if p.is_file())


def is_shell(content: str) -> bool:
    metadata, _ = parse_frontmatter(content)
    return bool(metadata and metadata.get("archived") is True)


def build_shell(content: str, version: str, page_path: str, archive_ref: str) -> str:
    """Shell page for content: same frontmatter plus archive pointers."""
    metadata, _ = parse_frontmatter(content)
    frontmatter = dict(metadata or {})
    frontmatter["archived"] = True
    frontmatter["archive"] = archive_ref
    body = f'{SHELL_IMPORT}\n\n<{SHELL_COMPONENT} version="{version}" path="{page_path}" />\n'
    return build_frontmatter(frontmatter) + body


def snapshot_path(archive_path: Path, version: str) -> Path:
    return archive_path / f"{version}{ARCHIVE_SUFFIX}"


def write_snapshot(version_root: Path, archive_path: Path, version: str) -> bool:
    """Write the snapshot of a version unless it already exists.

    Returns:
        True if a snapshot was written.
    """
    target = snapshot_path(archive_path, version)
    if target.exists():
        logger.debug(f"Snapshot {target} exists; left untouched")
        return False

    pages = {}
    for page in iter_pages(version_root):
        content = page.read_text(encoding="utf-8")
        if is_shell(content):
            # Shells hold no content; a snapshot built from them would be useless
            raise ValueError(f"{page} is already a shell but no snapshot exists at {target}")
        pages[page.relative_to(version_root).as_posix()] = content

    write_json_atomic(target, {"version": version, "pages": pages})
    logger.info(f"Archived {len(pages)} pages of {version} to {target}")
    return True


def convert_to_shells(version_root: Path, version: str, archive_ref: str) -> int:
    """Replace every full page of a version with its shell.

    Returns:
        Number of pages converted; pages that already are shells are skipped.
    """
    converted = 0
    for page in iter_pages(version_root):
        content = page.read_text(encoding="utf-8")
        if is_shell(content):
            continue
        relative = page.relative_to(version_root).as_posix()
        page.write_text(
            build_shell(content, version, relative, archive_ref), encoding="utf-8", newline="\n"
        )
        converted += 1
    logger.info(f"Converted {converted} pages of {version} to shells")
    return converted
