"""Build folders for a version that is being generated.

Pages of a version are written under ``<output>/.building-<version>``. The
folder is renamed over ``<output>/<version>`` only after navigation has been
written, so readers of the version folder never see half a tree. A build
that dies part way leaves its ``.building-*`` folder behind; the next run of
the same version discards it, and runs of other versions report it.
"""

import shutil
from pathlib import Path

from apiwiki.constants import STAGING_PREFIX


def prepare_staging_directory(staging_path: Path) -> None:
    """Start a build folder from nothing.

    A folder left by an earlier run of the same version is removed. Pages
    are rendered from the manifest every time, so the promoted tree is not
    copied in.
    """
    if staging_path.exists():
        shutil.rmtree(staging_path)
    staging_path.mkdir(parents=True, exist_ok=True)


def promote_staging_to_production(staging_path: Path, production_path: Path) -> None:
    """Swap a finished build folder in as the version folder.

    Whatever the version folder held before (pages of an earlier run, or
    shells) is deleted first. The registry, the ``current`` mirror and
    archiving are handled by ``apiwiki.versions``, not here.

    Args:
        staging_path: The finished ``.building-<version>`` folder.
        production_path: ``<output>/<version>``.
    """
    if production_path.exists():
        shutil.rmtree(production_path)

    shutil.move(str(staging_path), str(production_path))


def interrupted_builds(output_path: Path) -> list[Path]:
    """Build folders under output_path that were never promoted, by name."""
    if not output_path.is_dir():
        return []
    return sorted(
        child for child in output_path.iterdir() if child.is_dir() and child.name.startswith(STAGING_PREFIX)
    )
