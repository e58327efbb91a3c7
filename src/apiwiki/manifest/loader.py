"""Load the manifest JSON artifact."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from apiwiki.manifest.models import Manifest

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Raised when the manifest cannot be read or does not match the schema."""

    pass


def parse_manifest(data: Any, source: str = "<memory>") -> Manifest:
    """Validate decoded JSON into a Manifest.

    Raises:
        ManifestError: If the data violates the entity shapes.
    """
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {source} must be a JSON object")
    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ManifestError(
            f"Manifest {source} does not match the schema "
            f"({e.error_count()} errors, first at {location}: {first['msg']})"
        ) from e


def load_manifest(path: Path) -> Manifest:
    """Load a manifest from a JSON file.

    Args:
        path: The manifest artifact written by the extractor.

    Returns:
        Validated Manifest.

    Raises:
        ManifestError: If the file is missing, not JSON, or malformed.
    """
    path = Path(path)
    if not path.exists():
        raise ManifestError(f"Manifest not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Manifest {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise ManifestError(f"Failed to read manifest {path}: {e}") from e

    manifest = parse_manifest(data, source=str(path))
    logger.info(
        f"Loaded manifest {path}: {len(manifest.namespaces)} namespaces, "
        f"{len(manifest.types)} types, {len(manifest.members)} members"
    )
    return manifest
