"""Sidecar content conventions.

Sidecars are human-authored markdown files that sit next to (never inside)
the generated tree. Section headings are free-form, but the headings below
are the conventional ones and "See Also" is reserved: it is always rendered
last, whatever order hints the author gives.
"""

# =============================================================================
# Files
# =============================================================================

SIDECAR_SUFFIX = ".md"
SNIPPET_PATTERN = r"\{snippet:([\w.-]+)\}"

# =============================================================================
# Section Headings
# =============================================================================

SEE_ALSO_HEADING = "See Also"
SECTION_HEADING_LEVEL = 2


# =============================================================================
# Rendering
# =============================================================================
# Listing tables show one-line sidecar descriptions. Entities without one
# fall back to DEFAULT_DESCRIPTION_PLACEHOLDER (overridable in config).
# References that cannot be linked render UNRESOLVED_MARKER in place of a
# broken link.

DEFAULT_DESCRIPTION_PLACEHOLDER = "No description available."
UNRESOLVED_MARKER = "`{uid}` (unresolved reference)"
EXTERNAL_LINK_PREFIXES = ("http://", "https://", "mailto:")
