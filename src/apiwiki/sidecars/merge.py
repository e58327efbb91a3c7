"""Section ordering and merging of sidecar entries."""

from typing import Iterable, Optional

from apiwiki.constants import SEE_ALSO_HEADING
from apiwiki.sidecars.schemas import SeeAlsoRef, SidecarEntry, SidecarSection


def is_see_also(heading: str) -> bool:
    return heading.strip().casefold() == SEE_ALSO_HEADING.casefold()


def sections_in_order(
    entry: SidecarEntry,
) -> tuple[list[SidecarSection], Optional[SidecarSection]]:
    """Resolve the render order of an entry's sections.

    Sections with an order hint come first, ascending by hint (ties keep
    declaration order); sections without a hint follow in declaration
    order. The reserved "See Also" section never takes part in ordering.

    Returns:
        Tuple of (ordered sections, the See Also section or None).
    """
    see_also: Optional[SidecarSection] = None
    hinted: list[SidecarSection] = []
    unhinted: list[SidecarSection] = []

    for section in entry.sections:
        if is_see_also(section.heading):
            see_also = section
        elif section.order is not None:
            hinted.append(section)
        else:
            unhinted.append(section)

    # sorted() is stable, so equal hints keep declaration order
    hinted = sorted(hinted, key=lambda s: s.order)
    return hinted + unhinted, see_also


def merge_see_also(*lists: Iterable[SeeAlsoRef]) -> list[SeeAlsoRef]:
    """Union of reference lists in first-seen order, duplicates removed."""
    seen: set[str] = set()
    merged: list[SeeAlsoRef] = []
    for refs in lists:
        for ref in refs:
            if ref.key in seen:
                continue
            seen.add(ref.key)
            merged.append(ref)
    return merged


def merge_entries(entries: list[SidecarEntry]) -> Optional[SidecarEntry]:
    """Merge sidecar entries ordered least to most specific.

    - description, title and preamble: the last non-empty value wins
    - sections: a more specific entry with text replaces a section with the same
      heading in place; new headings are appended
    - see also: unioned in first-seen order without duplicates

    Returns:
        The merged entry, or None when entries is empty.
    """
    if not entries:
        return None
    if len(entries) == 1:
        return entries[0]

    description: Optional[str] = None
    title: Optional[str] = None
    preamble = ""
    sections: list[SidecarSection] = []
    positions: dict[str, int] = {}

    for entry in entries:
        if entry.description and entry.description.strip():
            description = entry.description
        if entry.title:
            title = entry.title
        if entry.preamble.strip():
            preamble = entry.preamble
        for section in entry.sections:
            if section.heading in positions:
                # An empty heading (as in a fresh skeleton) does not erase inherited text
                if section.content.strip():
                    sections[positions[section.heading]] = section
            else:
                positions[section.heading] = len(sections)
                sections.append(section)

    return SidecarEntry(
        uid=entries[-1].uid,
        title=title,
        description=description,
        preamble=preamble,
        sections=sections,
        see_also=merge_see_also(*(entry.see_also for entry in entries)),
    )
