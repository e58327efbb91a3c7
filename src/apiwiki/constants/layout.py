"""Documentation tree layout.

These names form the on-disk contract between the generated tree, the
sidecar tree and the historical-version shells. Renaming any of them breaks
the 1:1 path correspondence that editing and archiving depend on.
"""

# =============================================================================
# File Names
# =============================================================================
# Every folder node (namespace, enum, class, struct, interface) is rendered
# as an index page inside its own folder. Delegates are a single page named
# after the type. A type with exactly one constructor gets CONSTRUCTOR_FILE;
# several constructors are numbered from 1 (Constructor1.mdx, ...).

PAGE_SUFFIX = ".mdx"
INDEX_FILE = f"index{PAGE_SUFFIX}"
STATIC_CONSTRUCTOR_FILE = f"static-constructor{PAGE_SUFFIX}"
CONSTRUCTOR_STEM = "Constructor"
CONSTRUCTOR_FILE = f"{CONSTRUCTOR_STEM}{PAGE_SUFFIX}"

# =============================================================================
# Folder Names
# =============================================================================

NAMESPACES_FOLDER = "Namespaces"
TYPES_FOLDER = "Types"
CONSTRUCTORS_FOLDER = "Constructors"
METHODS_FOLDER = "Methods"
PROPERTIES_FOLDER = "Properties"
FIELDS_FOLDER = "Fields"
EVENTS_FOLDER = "Events"
NESTED_TYPES_FOLDER = "Nested-Types"


# =============================================================================
# Name Sanitization
# =============================================================================
# Declared names are turned into file and folder names by stripping the
# generic arity suffix (List`1 -> List) and collapsing every run of
# characters that are illegal on common filesystems, control characters or
# whitespace into NAME_SEPARATOR.

NAME_SEPARATOR = "-"
GENERIC_ARITY_PATTERN = r"(?:`\d+)+$"
ILLEGAL_NAME_PATTERN = r'[<>:"/\\|?*\x00-\x1f\s]+'
EMPTY_NAME_REPLACEMENT = "_"

# =============================================================================
# Global Namespace
# =============================================================================

GLOBAL_NAMESPACE_UID = "ns:<global>"
DEFAULT_GLOBAL_NAMESPACE_NAME = "Global Namespace"

# =============================================================================
# Output Artifacts
# =============================================================================

NAVIGATION_FILE = "navigation.json"
STAGING_PREFIX = ".building-"
