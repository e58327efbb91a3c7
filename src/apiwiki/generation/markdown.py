"""MDX building blocks: escaping, links, tables and a page builder.

Text that comes from the manifest (names, XML doc summaries, signatures
outside code fences) goes through escape_mdx so MDX never parses it as JSX
or an expression. Sidecar markdown is inserted verbatim.
"""

import posixpath
from pathlib import PurePosixPath
from typing import Iterable

_MDX_ESCAPES = str.maketrans(
    {
        "<": "&lt;",
        ">": "&gt;",
        "{": "&#123;",
        "}": "&#125;",
    }
)


def escape_mdx(text: str) -> str:
    return text.translate(_MDX_ESCAPES)


def escape_table_cell(text: str) -> str:
    """Escape text for a table cell; pipes and line breaks would split the row."""
    flattened = " ".join(text.split())
    return escape_mdx(flattened).replace("|", "\\|")


def inline_code(text: str) -> str:
    fence = "``" if "`" in text else "`"
    padding = " " if fence == "``" else ""
    return f"{fence}{padding}{text}{padding}{fence}"


def link(text: str, target: str) -> str:
    label = escape_mdx(text).replace("[", "\\[").replace("]", "\\]")
    return f"[{label}]({target})"


def relative_link(from_page: PurePosixPath, to_page: PurePosixPath) -> str:
    """Relative link from one generated page to another."""
    if from_page == to_page:
        return f"./{to_page.name}"
    relative = posixpath.relpath(to_page.as_posix(), start=from_page.parent.as_posix() or ".")
    if not relative.startswith("../"):
        relative = f"./{relative}"
    return relative


def code_block(code: str, language: str = "csharp") -> str:
    return f"```{language}\n{code}\n```"


def table(headers: list[str], rows: Iterable[list[str]]) -> str:
    """Render a markdown table. Cells must already be escaped."""
    lines = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join("---" for _ in headers) + " |",
    ]
    for row in rows:
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)


def bullet_list(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


class PageBuilder:
    """Accumulates markdown blocks separated by blank lines."""

    def __init__(self) -> None:
        self._blocks: list[str] = []

    def heading(self, text: str, level: int = 2) -> "PageBuilder":
        self._blocks.append(f"{'#' * level} {text}")
        return self

    def text(self, markdown: str) -> "PageBuilder":
        """Append a block; blank blocks are skipped."""
        stripped = markdown.strip("\n")
        if stripped.strip():
            self._blocks.append(stripped)
        return self

    def section(self, heading: str, markdown: str, level: int = 2) -> "PageBuilder":
        """Append a heading and its body, or nothing when the body is blank."""
        if markdown.strip():
            self.heading(heading, level)
            self.text(markdown)
        return self

    def __len__(self) -> int:
        return len(self._blocks)

    def build(self) -> str:
        if not self._blocks:
            return ""
        return "\n\n".join(self._blocks) + "\n"
