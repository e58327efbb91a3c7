"""Promotion of a freshly generated version to current."""

import logging
import shutil
from typing import Optional

from apiwiki.config import Config
from apiwiki.versions.archive import convert_to_shells, snapshot_path, write_snapshot
from apiwiki.versions.registry import VersionError, VersionRegistry, load_registry, save_registry

logger = logging.getLogger(__name__)


class VersionManager:
    """Keeps exactly one version current and archives the ones it replaces.

    Sidecar trees are never touched here; historical sidecars stay as the
    humans left them.
    """

    def __init__(self, config: Config) -> None:
        self.config = config

    def load_registry(self) -> VersionRegistry:
        return load_registry(self.config.registry_path)

    def check(self, version: str) -> VersionRegistry:
        """Fail before any write if version may not be generated.

        Raises:
            VersionError: If version is historical or the registry is unreadable.
        """
        registry = self.load_registry()
        registry.check_can_generate(version)
        return registry

    def archive_ref(self, version: str) -> str:
        """Snapshot location relative to the output root, as written into shells."""
        return snapshot_path(self.config.archive_path, version).relative_to(
            self.config.output_path
        ).as_posix()

    def archive(self, version: str) -> int:
        """Snapshot a version and turn its pages into shells.

        Returns:
            Number of pages converted to shells.

        Raises:
            VersionError: If the snapshot or a shell cannot be written.
        """
        root = self.config.version_path(version)
        if not root.is_dir():
            logger.warning(f"Historical version {version} has no tree at {root}; nothing to archive")
            return 0
        try:
            write_snapshot(root, self.config.archive_path, version)
            return convert_to_shells(root, version, self.archive_ref(version))
        except (OSError, ValueError) as e:
            raise VersionError(f"Failed to archive version {version}: {e}") from e

    def refresh_current_mirror(self, version: str) -> None:
        """Replace the unqualified mirror with a copy of version's tree."""
        source = self.config.version_path(version)
        mirror = self.config.current_path
        try:
            if mirror.exists():
                shutil.rmtree(mirror)
            shutil.copytree(source, mirror)
        except OSError as e:
            raise VersionError(f"Failed to refresh {mirror} from {source}: {e}") from e
        logger.info(f"Mirrored {version} to {mirror}")

    def promote(self, version: str) -> Optional[str]:
        """Make a generated version current.

        The previously current version is archived first; the registry is
        saved last so it only ever records completed promotions.

        Returns:
            The version that became historical, or None.

        Raises:
            VersionError: If version is historical or any step fails.
        """
        registry = self.load_registry()
        previous = registry.promote(version)
        if previous is not None:
            converted = self.archive(previous)
            logger.info(f"Version {previous} is now historical ({converted} shell pages)")

        self.refresh_current_mirror(version)
        try:
            save_registry(registry, self.config.registry_path)
        except OSError as e:
            raise VersionError(f"Failed to write {self.config.registry_path}: {e}") from e
        return previous
