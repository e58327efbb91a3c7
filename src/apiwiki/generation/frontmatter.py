"""Utilities for building and parsing YAML frontmatter.

Generated pages and sidecars both start with a YAML frontmatter block.
Page frontmatter carries:
- uid: The entity the page documents
- title / sidebar_label: Display name
- description: One-line description (from the sidecar)
- type: namespace, type or member
- kind: typekind or memberKind of the entity
- version: Version tag the page was generated for

Archived shell pages add ``archived`` and ``archive``. Frontmatter never
carries timestamps so identical inputs give identical pages.
"""

from typing import Any

import yaml


def build_frontmatter(metadata: dict[str, Any]) -> str:
    """Build a YAML frontmatter block.

    Keys keep their insertion order and None values are dropped.

    Returns:
        YAML frontmatter string starting with --- and ending with ---
        followed by a blank line.
    """
    values = {key: value for key, value in metadata.items() if value is not None}
    body = yaml.safe_dump(
        values,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=1000,
    )
    return f"---\n{body}---\n\n"


def parse_frontmatter(content: str) -> tuple[dict | None, str]:
    """Parse YAML frontmatter from page or sidecar content.

    Args:
        content: Full content that may start with frontmatter

    Returns:
        Tuple of (metadata_dict, remaining_content).
        If no valid frontmatter found, returns (None, original_content).
    """
    content = content.replace("\r\n", "\n")
    if not content.startswith("---\n"):
        return None, content

    end_pos = content.find("\n---\n", 3)
    if end_pos == -1:
        if content.rstrip().endswith("\n---"):
            end_pos = content.rstrip().rfind("\n---")
        else:
            return None, content

    # "---\n---" is an empty block
    yaml_content = content[4:end_pos] if end_pos >= 4 else ""

    try:
        metadata = yaml.safe_load(yaml_content) if yaml_content.strip() else {}
        if not isinstance(metadata, dict):
            return None, content
    except yaml.YAMLError:
        return None, content

    remaining_start = end_pos + len("\n---\n")
    if remaining_start < len(content) and content[remaining_start] == "\n":
        remaining_start += 1

    return metadata, content[remaining_start:]
