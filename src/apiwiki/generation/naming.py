"""File names and visibility rules for generated nodes."""

import re
from typing import Iterable, Union

from apiwiki.constants import (
    EMPTY_NAME_REPLACEMENT,
    GENERIC_ARITY_PATTERN,
    ILLEGAL_NAME_PATTERN,
    NAME_SEPARATOR,
)
from apiwiki.manifest import AnyMember, AnyType, ManifestIndex

_ARITY = re.compile(GENERIC_ARITY_PATTERN)
_ILLEGAL = re.compile(ILLEGAL_NAME_PATTERN)


def sanitize_name(name: str) -> str:
    """Turn a declared name into a file or folder name.

    Strips a trailing generic arity suffix (``List`1`` -> ``List``) and
    collapses every run of filesystem-illegal characters and whitespace into
    a single separator. A name that ends up empty, ``.`` or ``..`` becomes
    ``_``. Applying it twice gives the same result as applying it once.
    """
    stripped = _ARITY.sub("", name)
    cleaned = _ILLEGAL.sub(NAME_SEPARATOR, stripped)
    if cleaned in ("", ".", ".."):
        return EMPTY_NAME_REPLACEMENT
    return cleaned


def is_ignored(
    entity: Union[AnyType, AnyMember],
    index: ManifestIndex,
    ignore_attributes: Iterable[str],
) -> bool:
    """Whether a type or member is excluded from the generated tree.

    Compiler-synthesised entities are always excluded, as is anything
    carrying an attribute whose attribute type is in ignore_attributes.
    """
    if entity.is_compiler_generated:
        return True
    ignored = set(ignore_attributes)
    if not ignored:
        return False
    for attribute_uid in entity.attributes:
        attribute = index.attribute(attribute_uid)
        if attribute is not None and attribute.attribute_type in ignored:
            return True
    return False
