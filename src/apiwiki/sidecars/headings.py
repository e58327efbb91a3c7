"""Split sidecar markdown bodies into heading-delimited sections."""

import re

from apiwiki.constants import SECTION_HEADING_LEVEL

_FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")


def _heading_pattern(level: int) -> re.Pattern:
    return re.compile(rf"^{'#' * level}\s+(.+?)\s*#*\s*$")


def extract_sections(
    body: str, level: int = SECTION_HEADING_LEVEL
) -> tuple[str, list[tuple[str, str]]]:
    """Split markdown into the text before the first heading and its sections.

    Only headings of exactly ``level`` delimit sections; deeper headings stay
    inside the section content. Lines inside fenced code blocks are never
    treated as headings.

    Args:
        body: Markdown text without frontmatter.
        level: Heading level that delimits sections.

    Returns:
        Tuple of (preamble, [(heading, content), ...]) with surrounding blank
        lines stripped from every piece.
    """
    pattern = _heading_pattern(level)
    preamble: list[str] = []
    sections: list[tuple[str, list[str]]] = []
    in_fence = False

    for line in body.splitlines():
        if _FENCE_PATTERN.match(line):
            in_fence = not in_fence
        match = None if in_fence else pattern.match(line)
        if match:
            sections.append((match.group(1).strip(), []))
        elif sections:
            sections[-1][1].append(line)
        else:
            preamble.append(line)

    return (
        "\n".join(preamble).strip("\n"),
        [(heading, "\n".join(lines).strip("\n")) for heading, lines in sections],
    )


def render_sections(sections: list[tuple[str, str]], level: int = SECTION_HEADING_LEVEL) -> str:
    """Render (heading, content) pairs back to markdown."""
    blocks = []
    for heading, content in sections:
        block = f"{'#' * level} {heading}\n"
        text = content.strip("\n")
        if text.strip():
            block += f"\n{text}\n"
        blocks.append(block)
    return "\n".join(blocks)
