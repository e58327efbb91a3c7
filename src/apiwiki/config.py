"""Configuration system for apiwiki.

This module handles loading settings from INI files and environment
variables, providing sensible defaults, validating them before any file is
written, and computing the derived paths of the output and sidecar trees.
"""

import os
import re
from configparser import ConfigParser, Error as ConfigParserError
from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from apiwiki.constants import (
    DEFAULT_ARCHIVE_DIR,
    DEFAULT_CURRENT_DIR,
    DEFAULT_DESCRIPTION_PLACEHOLDER,
    DEFAULT_GLOBAL_NAMESPACE_NAME,
    REGISTRY_FILE,
    STAGING_PREFIX,
    VERSION_TAG_PATTERN,
)


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# Schema: section -> key -> (type, default, description)
# A default of None marks a required key.
CONFIG_SCHEMA: dict[str, dict[str, tuple[type, Any, str]]] = {
    "generation": {
        "version": (str, None, "Version tag being generated"),
        "global_namespace_name": (
            str,
            DEFAULT_GLOBAL_NAMESPACE_NAME,
            "Display name of the implicit global namespace",
        ),
        "ignore_attributes": (list, (), "Attribute type UIDs that hide an entity"),
        "generate_sidecars": (bool, True, "Write sidecar skeletons"),
        "carry_forward_sidecars": (
            bool,
            True,
            "Seed new skeletons from the previous version's sidecars",
        ),
        "description_placeholder": (
            str,
            DEFAULT_DESCRIPTION_PLACEHOLDER,
            "Listing text for entities without a description",
        ),
    },
    "paths": {
        "output_dir": (str, "docs/api", "Generated documentation root"),
        "sidecar_dir": (str, "docs/sidecars", "Human-authored sidecar root"),
        "manifest": (str, "manifest.json", "Metadata manifest artifact"),
        "archive_dir": (str, DEFAULT_ARCHIVE_DIR, "Snapshot folder inside output"),
        "current_dir": (str, DEFAULT_CURRENT_DIR, "Unqualified current mirror"),
        "snippets_dir": (str, "_snippets", "Snippet folder inside sidecar root"),
    },
}

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


@dataclass(frozen=True)
class GenerationConfig:
    """Generation-related configuration."""

    version: Optional[str]
    global_namespace_name: str
    ignore_attributes: tuple[str, ...]
    generate_sidecars: bool
    carry_forward_sidecars: bool
    description_placeholder: str


@dataclass(frozen=True)
class PathsConfig:
    """Path names configuration."""

    output_dir: str
    sidecar_dir: str
    manifest: str
    archive_dir: str
    current_dir: str
    snippets_dir: str


def _split_list(raw_value: str) -> tuple[str, ...]:
    items = re.split(r"[,\n]", raw_value)
    return tuple(item.strip() for item in items if item.strip())


def _load_section(
    parser: ConfigParser, section: str, schema: dict[str, tuple[type, Any, str]]
) -> dict[str, Any]:
    """Read one section, coercing each key to its declared type.

    Missing keys take the schema default. Lists are comma or newline
    separated and come back as tuples.

    Raises:
        ConfigError: If a value cannot be coerced.
    """
    result = {}

    for key, (typ, default, _) in schema.items():
        if parser.has_option(section, key):
            raw_value = parser.get(section, key)
            value: Any
            try:
                if typ is bool:
                    lowered = raw_value.strip().lower()
                    if lowered in _TRUE_VALUES:
                        value = True
                    elif lowered in _FALSE_VALUES:
                        value = False
                    else:
                        raise ValueError(raw_value)
                elif typ is list:
                    value = _split_list(raw_value)
                else:
                    value = raw_value.strip()
            except ValueError as e:
                raise ConfigError(
                    f"Invalid value for [{section}].{key}: {raw_value!r} (expected {typ.__name__})"
                ) from e
        else:
            value = tuple(default) if typ is list else default

        result[key] = value

    return result


def _schema_defaults(section: str) -> dict[str, Any]:
    return {
        key: (tuple(default) if typ is list else default)
        for key, (typ, default, _) in CONFIG_SCHEMA[section].items()
    }


@dataclass(frozen=True)
class Config:
    """Complete generation configuration.

    Relative paths in the [paths] section resolve against workspace_path.
    """

    workspace_path: Path
    generation: GenerationConfig = None  # type: ignore[assignment]  # Set in __post_init__ if None
    paths: PathsConfig = None  # type: ignore[assignment]

    def __post_init__(self):
        """Initialize section configs with defaults if not provided."""
        if self.generation is None:
            object.__setattr__(
                self, "generation", GenerationConfig(**_schema_defaults("generation"))
            )
        if self.paths is None:
            object.__setattr__(self, "paths", PathsConfig(**_schema_defaults("paths")))

    def _resolve(self, value: str) -> Path:
        path = Path(value).expanduser()
        if path.is_absolute():
            return path
        return self.workspace_path / path

    @property
    def version(self) -> str:
        """Version tag being generated (validated to be present)."""
        if not self.generation.version:
            raise ConfigError("Missing required setting [generation].version")
        return self.generation.version

    @property
    def output_path(self) -> Path:
        """Root of the generated documentation tree."""
        return self._resolve(self.paths.output_dir)

    @property
    def sidecar_root(self) -> Path:
        """Root of the sidecar tree (all versions)."""
        return self._resolve(self.paths.sidecar_dir)

    @property
    def manifest_path(self) -> Path:
        """Path to the manifest JSON artifact."""
        return self._resolve(self.paths.manifest)

    @property
    def archive_path(self) -> Path:
        """Folder holding immutable snapshots of historical versions."""
        return self.output_path / self.paths.archive_dir

    @property
    def current_path(self) -> Path:
        """Unqualified mirror of the current version."""
        return self.output_path / self.paths.current_dir

    @property
    def registry_path(self) -> Path:
        """Path to versions.json."""
        return self.output_path / REGISTRY_FILE

    @property
    def snippets_path(self) -> Path:
        """Folder of reusable sidecar snippets."""
        return self.sidecar_root / self.paths.snippets_dir

    def version_path(self, version: Optional[str] = None) -> Path:
        """Version-qualified generated tree."""
        return self.output_path / (version or self.version)

    def staging_path(self, version: Optional[str] = None) -> Path:
        """Staging folder a version is built in before promotion."""
        return self.output_path / f"{STAGING_PREFIX}{version or self.version}"

    def sidecar_path(self, version: Optional[str] = None) -> Path:
        """Sidecar tree of one version."""
        return self.sidecar_root / (version or self.version)

    def with_version(self, version: str) -> "Config":
        """Copy of this config generating another version."""
        return replace(self, generation=replace(self.generation, version=version))


def validate_config(config: Config) -> Config:
    """Check settings that must hold before anything is written.

    Raises:
        ConfigError: Naming the offending [section].key.
    """
    version = config.generation.version
    if not version:
        raise ConfigError("Missing required setting [generation].version")
    if not re.match(VERSION_TAG_PATTERN, version):
        raise ConfigError(
            f"Invalid value for [generation].version: {version!r} "
            f"(expected letters, digits, '.', '_' or '-')"
        )
    if version in (config.paths.current_dir, config.paths.archive_dir):
        raise ConfigError(
            f"Invalid value for [generation].version: {version!r} is a reserved folder name"
        )

    for key in ("archive_dir", "current_dir", "snippets_dir"):
        value = getattr(config.paths, key)
        if not value or "/" in value or "\\" in value or value in (".", ".."):
            raise ConfigError(f"Invalid value for [paths].{key}: {value!r} (expected a folder name)")

    if not config.generation.global_namespace_name.strip():
        raise ConfigError("Invalid value for [generation].global_namespace_name: empty")

    output = config.output_path.resolve()
    sidecars = config.sidecar_root.resolve()
    if output == sidecars or output.is_relative_to(sidecars) or sidecars.is_relative_to(output):
        raise ConfigError(
            f"[paths].sidecar_dir ({sidecars}) must not overlap [paths].output_dir ({output})"
        )

    return config


def load_config(
    config_path: Optional[Path] = None,
    workspace_path: Optional[Path] = None,
    version: Optional[str] = None,
) -> Config:
    """Load and validate configuration from an INI file.

    Args:
        config_path: Path to config file. If None, uses defaults from schema.
        workspace_path: Base for relative paths. Defaults to the config
            file's directory, or the current directory without a file.
        version: Overrides [generation].version when given.

    Returns:
        Validated Config.

    Raises:
        ConfigError: If the file is unreadable or validation fails.
    """
    parser = ConfigParser()

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        try:
            parser.read(config_path)
        except ConfigParserError as e:
            raise ConfigError(f"Failed to parse config file {config_path}: {e}") from e

    generation_values = _load_section(parser, "generation", CONFIG_SCHEMA["generation"])
    paths_values = _load_section(parser, "paths", CONFIG_SCHEMA["paths"])

    if version:
        generation_values["version"] = version

    if workspace_path is None:
        workspace_path = config_path.parent if config_path is not None else Path(".")

    config = Config(
        workspace_path=workspace_path,
        generation=GenerationConfig(**generation_values),
        paths=PathsConfig(**paths_values),
    )
    return validate_config(config)


@lru_cache(maxsize=1)
def load_settings() -> Config:
    """Load settings from environment variables and config file.

    Settings are cached for the lifetime of the process.
    Use load_settings.cache_clear() to reload settings.

    Environment:
        APIWIKI_CONFIG: Path to the INI file (optional).
        APIWIKI_WORKSPACE: Base for relative paths (optional).
        APIWIKI_VERSION: Overrides [generation].version (optional).

    Raises:
        ConfigError: If validation fails.
    """
    config_path_str = os.getenv("APIWIKI_CONFIG")
    workspace_str = os.getenv("APIWIKI_WORKSPACE")

    return load_config(
        config_path=Path(config_path_str) if config_path_str else None,
        workspace_path=Path(workspace_str) if workspace_str else None,
        version=os.getenv("APIWIKI_VERSION"),
    )
