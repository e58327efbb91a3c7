"""Version registry: which version is current and which are historical."""

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


class VersionError(Exception):
    """Raised when a version cannot be generated or promoted."""

    pass


def write_json_atomic(path: Path, data: Any) -> None:
    """Write JSON through a temporary file in the same folder and os.replace.

    Readers see either the old file or the complete new one.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


@dataclass
class VersionRegistry:
    """Contents of versions.json. Historical versions are newest first."""

    current: Optional[str] = None
    historical: list[str] = field(default_factory=list)

    def is_historical(self, version: str) -> bool:
        return version in self.historical

    def check_can_generate(self, version: str) -> None:
        """Raise VersionError if version may not be generated.

        Promotion is one-directional: a historical version never becomes
        current again.
        """
        if self.is_historical(version):
            raise VersionError(
                f"Version {version!r} is historical (current is {self.current!r}); "
                "historical versions cannot be regenerated"
            )

    def promote(self, version: str) -> Optional[str]:
        """Make version current.

        Returns:
            The previously current version that is now historical, or None
            when version was already current or nothing was current.
        """
        self.check_can_generate(version)
        if self.current == version:
            return None
        previous = self.current
        if previous is not None:
            self.historical.insert(0, previous)
        self.current = version
        return previous

    def to_dict(self) -> dict[str, Any]:
        return {"current": self.current, "historical": list(self.historical)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VersionRegistry":
        current = data.get("current")
        historical = data.get("historical") or []
        if current is not None and not isinstance(current, str):
            raise VersionError("versions.json: 'current' must be a string")
        if not isinstance(historical, list) or not all(isinstance(v, str) for v in historical):
            raise VersionError("versions.json: 'historical' must be a list of strings")
        return cls(current=current, historical=list(historical))


def load_registry(path: Path) -> VersionRegistry:
    """Load versions.json; a missing file is an empty registry.

    Raises:
        VersionError: If the file exists but cannot be read or parsed.
    """
    if not path.exists():
        return VersionRegistry()
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise VersionError(f"Failed to read version registry {path}: {e}") from e
    if not isinstance(data, dict):
        raise VersionError(f"Version registry {path} must be a JSON object")
    return VersionRegistry.from_dict(data)


def save_registry(registry: VersionRegistry, path: Path) -> None:
    write_json_atomic(path, registry.to_dict())
