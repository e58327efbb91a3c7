"""Sidecar store: human-authored overlays kept beside the generated tree.

File-primary storage, one markdown file per addressable node, mirroring the
generated path with a ``.md`` suffix. Files are indexed by the ``uid`` in
their frontmatter, not by their path, so a human may move a file without
losing the association.

Nothing in this module ever deletes, truncates or rewrites an existing
sidecar file. New files are created with exclusive-create semantics.
"""

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Iterator, Optional

from pydantic import ValidationError

from apiwiki.constants import PAGE_SUFFIX, SIDECAR_SUFFIX, SNIPPET_PATTERN
from apiwiki.diagnostics import DiagnosticCode, DiagnosticLog
from apiwiki.generation.frontmatter import build_frontmatter, parse_frontmatter
from apiwiki.sidecars.headings import extract_sections, render_sections
from apiwiki.sidecars.schemas import SeeAlsoRef, SidecarEntry, SidecarSection

logger = logging.getLogger(__name__)

SKELETON_HEADINGS = ("Remarks", "Examples")


def sidecar_relative_path(page_path: PurePosixPath) -> PurePosixPath:
    """Map a generated page path to its sidecar path (``.mdx`` -> ``.md``)."""
    if page_path.suffix == PAGE_SUFFIX:
        return page_path.with_suffix(SIDECAR_SUFFIX)
    return page_path.with_name(page_path.name + SIDECAR_SUFFIX)


def build_skeleton(uid: str, title: str) -> str:
    """Content of a fresh, empty sidecar for uid."""
    frontmatter = build_frontmatter(
        {"uid": uid, "title": title, "description": "", "see_also": []}
    )
    return frontmatter + render_sections([(heading, "") for heading in SKELETON_HEADINGS])


def parse_sidecar(content: str, source: str = "<memory>") -> SidecarEntry:
    """Parse sidecar file content into an entry.

    Raises:
        ValueError: If the frontmatter is missing or malformed.
    """
    metadata, body = parse_frontmatter(content)
    if metadata is None:
        raise ValueError(f"{source} has no YAML frontmatter")

    order = metadata.get("order") or {}
    if not isinstance(order, dict):
        raise ValueError(f"{source}: 'order' must map headings to integers")

    see_also_refs = metadata.get("see_also") or []
    if isinstance(see_also_refs, (str, dict)):
        # A single reference written without list syntax
        see_also_refs = [see_also_refs]
    if not isinstance(see_also_refs, list):
        raise ValueError(f"{source}: 'see_also' must be a list of references")

    preamble, pairs = extract_sections(body)
    try:
        sections = [
            SidecarSection(heading=heading, content=content, order=order.get(heading))
            for heading, content in pairs
        ]
        see_also = [SeeAlsoRef.model_validate(ref) for ref in see_also_refs]
        description = metadata.get("description")
        return SidecarEntry(
            uid=metadata.get("uid"),
            title=metadata.get("title"),
            description=str(description).strip() if description else None,
            preamble=preamble,
            sections=sections,
            see_also=see_also,
        )
    except ValidationError as e:
        raise ValueError(f"{source}: {e.error_count()} invalid fields") from e


class SidecarStore:
    """UID-indexed sidecars of one version.

    Args:
        root: Sidecar tree of the version (``<sidecar_dir>/<version>``).
        snippets_path: Folder of reusable ``{snippet:name}`` markdown files.
        diagnostics: Collector for invalid, conflicting or unknown content.
    """

    def __init__(
        self,
        root: Path,
        snippets_path: Optional[Path] = None,
        diagnostics: Optional[DiagnosticLog] = None,
    ) -> None:
        self.root = root
        self.snippets_path = snippets_path
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self._entries: dict[str, SidecarEntry] = {}
        self._paths: dict[str, Path] = {}
        self._snippets: Optional[dict[str, str]] = None

    # Loading

    def load(self) -> "SidecarStore":
        """Index every sidecar file under root. Returns self."""
        self._entries.clear()
        self._paths.clear()
        if not self.root.is_dir():
            return self

        for path in sorted(self.root.rglob(f"*{SIDECAR_SUFFIX}")):
            if path.is_file():
                self._load_file(path)

        logger.info(f"Loaded {len(self._entries)} sidecars from {self.root}")
        return self

    def _load_file(self, path: Path) -> None:
        relative = path.relative_to(self.root).as_posix()
        try:
            entry = parse_sidecar(path.read_text(encoding="utf-8"), source=relative)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            self.diagnostics.warn(DiagnosticCode.SIDECAR_INVALID, str(e), path=relative)
            return

        if not entry.uid:
            self.diagnostics.warn(
                DiagnosticCode.SIDECAR_INVALID, "frontmatter has no uid", path=relative
            )
            return
        if entry.uid in self._entries:
            self.diagnostics.warn(
                DiagnosticCode.SIDECAR_CONFLICT,
                f"uid already provided by {self._paths[entry.uid].relative_to(self.root).as_posix()}",
                uid=entry.uid,
                path=relative,
            )
            return

        self._entries[entry.uid] = self._expand_snippets(entry, relative)
        self._paths[entry.uid] = path

    # Snippets

    def _load_snippets(self) -> dict[str, str]:
        if self._snippets is None:
            self._snippets = {}
            if self.snippets_path is not None and self.snippets_path.is_dir():
                for path in sorted(self.snippets_path.glob(f"*{SIDECAR_SUFFIX}")):
                    self._snippets[path.stem] = path.read_text(encoding="utf-8").strip("\n")
        return self._snippets

    def _expand_text(self, text: str, uid: str, relative: str) -> str:
        if "{snippet:" not in text:
            return text
        snippets = self._load_snippets()

        def substitute(match: re.Match) -> str:
            name = match.group(1)
            if name in snippets:
                return snippets[name]
            self.diagnostics.warn(
                DiagnosticCode.UNKNOWN_SNIPPET, f"unknown snippet {name!r}", uid=uid, path=relative
            )
            return match.group(0)

        return re.sub(SNIPPET_PATTERN, substitute, text)

    def _expand_snippets(self, entry: SidecarEntry, relative: str) -> SidecarEntry:
        uid = entry.uid or ""
        sections = [
            section.model_copy(update={"content": self._expand_text(section.content, uid, relative)})
            for section in entry.sections
        ]
        return entry.model_copy(
            update={
                "preamble": self._expand_text(entry.preamble, uid, relative),
                "sections": sections,
            }
        )

    # Lookup

    def get(self, uid: str) -> Optional[SidecarEntry]:
        return self._entries.get(uid)

    def path_for(self, uid: str) -> Optional[Path]:
        """File the sidecar for uid was loaded from or written to."""
        return self._paths.get(uid)

    def description(self, uid: str) -> Optional[str]:
        entry = self._entries.get(uid)
        if entry is None or not entry.description:
            return None
        return entry.description

    def __contains__(self, uid: object) -> bool:
        return uid in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    # Skeletons

    def ensure_skeleton(
        self,
        uid: str,
        page_path: PurePosixPath,
        title: str,
        previous: Optional["SidecarStore"] = None,
    ) -> bool:
        """Create the sidecar for uid unless one already exists.

        The new file mirrors page_path. When ``previous`` holds a sidecar for
        the same uid, its file is copied instead of writing an empty skeleton.
        An existing file at the target path is never touched.

        Returns:
            True if a file was created.

        Raises:
            OSError: If the folder or file cannot be created.
        """
        if uid in self._entries:
            return False

        relative = sidecar_relative_path(page_path)
        target = self.root / relative

        source = previous.path_for(uid) if previous is not None else None
        if source is not None:
            content = source.read_text(encoding="utf-8")
        else:
            content = build_skeleton(uid, title)

        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(target, "x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError:
            self.diagnostics.warn(
                DiagnosticCode.SIDECAR_CONFLICT,
                "a sidecar for another uid occupies this path; not overwritten",
                uid=uid,
                path=relative.as_posix(),
            )
            return False

        if source is not None:
            logger.debug(f"Carried sidecar for {uid} forward from {source}")
        self._load_file(target)
        return True
