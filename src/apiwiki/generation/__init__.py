"""Documentation tree generation.

The orchestrator is imported from apiwiki.generation.orchestrator (or the
top-level apiwiki package); it is not re-exported here because the sidecar
and version packages depend on the frontmatter helpers below.
"""

from apiwiki.generation.frontmatter import (
    build_frontmatter,
    parse_frontmatter,
)
from apiwiki.generation.layout import (
    GeneratedNode,
    LayoutPlanner,
    NodeKind,
    TreePlan,
    plan_tree,
)
from apiwiki.generation.naming import is_ignored, sanitize_name

__all__ = [
    # Frontmatter
    "build_frontmatter",
    "parse_frontmatter",
    # Layout
    "GeneratedNode",
    "LayoutPlanner",
    "NodeKind",
    "TreePlan",
    "plan_tree",
    # Naming
    "is_ignored",
    "sanitize_name",
]
