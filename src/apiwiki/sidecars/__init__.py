"""Sidecar store and merge rules for human-authored documentation."""

from apiwiki.sidecars.merge import is_see_also, merge_entries, merge_see_also, sections_in_order
from apiwiki.sidecars.schemas import SeeAlsoRef, SidecarEntry, SidecarSection
from apiwiki.sidecars.store import (
    SidecarStore,
    build_skeleton,
    parse_sidecar,
    sidecar_relative_path,
)

__all__ = [
    "SeeAlsoRef",
    "SidecarEntry",
    "SidecarSection",
    "SidecarStore",
    "build_skeleton",
    "is_see_also",
    "merge_entries",
    "merge_see_also",
    "parse_sidecar",
    "sections_in_order",
    "sidecar_relative_path",
]
