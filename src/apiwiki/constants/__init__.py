"""Layout and content constants.

Re-exports all constants for convenient importing:
    from apiwiki.constants import INDEX_FILE, SEE_ALSO_HEADING
"""

from apiwiki.constants.layout import *  # noqa: F403
from apiwiki.constants.sidecars import *  # noqa: F403
from apiwiki.constants.versions import *  # noqa: F403
