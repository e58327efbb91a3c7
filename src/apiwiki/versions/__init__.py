"""Version retention: current version in full, historical versions as shells."""

from apiwiki.versions.archive import (
    build_shell,
    convert_to_shells,
    is_shell,
    snapshot_path,
    write_snapshot,
)
from apiwiki.versions.manager import VersionManager
from apiwiki.versions.registry import (
    VersionError,
    VersionRegistry,
    load_registry,
    save_registry,
    write_json_atomic,
)

__all__ = [
    "VersionError",
    "VersionManager",
    "VersionRegistry",
    "build_shell",
    "convert_to_shells",
    "is_shell",
    "load_registry",
    "save_registry",
    "snapshot_path",
    "write_json_atomic",
    "write_snapshot",
]
