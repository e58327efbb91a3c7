"""Materialise a TreePlan on disk."""

import logging
from pathlib import Path
from typing import Callable

from apiwiki.generation.layout import GeneratedNode, TreePlan

logger = logging.getLogger(__name__)


class OutputWriteError(Exception):
    """Raised when a folder or page of the generated tree cannot be written."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")


def write_tree(
    plan: TreePlan,
    root: Path,
    render: Callable[[GeneratedNode], str],
) -> int:
    """Create the plan's folders and pages under root.

    Folders are created first, in plan order, so every directory exists
    before its contents. Pages are written in traversal order.

    Args:
        plan: The planned tree.
        root: Version folder to write into (normally a staging folder).
        render: Produces the final content of one node.

    Returns:
        Number of pages written.

    Raises:
        OutputWriteError: On the first folder or file that cannot be written.
    """
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(root, str(e)) from e

    for directory in plan.directories:
        target = root / directory
        try:
            target.mkdir(exist_ok=True)
        except OSError as e:
            raise OutputWriteError(target, str(e)) from e

    written = 0
    for node in plan.nodes:
        target = root / node.path
        content = render(node)
        try:
            target.write_text(content, encoding="utf-8", newline="\n")
        except OSError as e:
            raise OutputWriteError(target, str(e)) from e
        written += 1

    logger.info(f"Wrote {written} pages to {root}")
    return written
