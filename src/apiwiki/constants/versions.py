"""Version retention layout.

The current version lives at <output>/<version>/ and is mirrored to the
unqualified <output>/current/. Historical versions keep their folder but
every page is replaced by a shell that loads its body from an immutable
snapshot in <output>/.archive/<version>.json.
"""

REGISTRY_FILE = "versions.json"
DEFAULT_CURRENT_DIR = "current"
DEFAULT_ARCHIVE_DIR = ".archive"
ARCHIVE_SUFFIX = ".json"

# Shell pages import this component from the site to render archived bodies.
SHELL_COMPONENT = "ArchivedPage"
SHELL_IMPORT = "import ArchivedPage from '@site/src/components/ArchivedPage';"

VERSION_TAG_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"
