"""Non-fatal issues collected during a generation run.

Resolution failures, ignored references, name collisions and similar
problems never stop generation. They are recorded here, logged at WARNING,
and handed back to the caller in the GenerationResult.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

logger = logging.getLogger(__name__)


class DiagnosticCode(str, Enum):
    """Kinds of non-fatal issues."""

    UNRESOLVED_UID = "unresolved-uid"
    IGNORED_REFERENCE = "ignored-reference"
    DUPLICATE_UID = "duplicate-uid"
    UID_MISMATCH = "uid-mismatch"
    DUPLICATE_PLACEMENT = "duplicate-placement"
    ORPHANED_TYPE = "orphaned-type"
    NAME_COLLISION = "name-collision"
    CONTAINMENT_CYCLE = "containment-cycle"
    SIDECAR_CONFLICT = "sidecar-conflict"
    SIDECAR_INVALID = "sidecar-invalid"
    UNKNOWN_SNIPPET = "unknown-snippet"
    AMBIGUOUS_FOLDER = "ambiguous-folder"


@dataclass(frozen=True)
class Diagnostic:
    """A single warning naming the offending UID and/or path."""

    code: DiagnosticCode
    message: str
    uid: str | None = None
    path: str | None = None

    def __str__(self) -> str:
        where = " ".join(part for part in (self.uid, self.path) if part)
        if where:
            return f"[{self.code.value}] {where}: {self.message}"
        return f"[{self.code.value}] {self.message}"


class DiagnosticLog:
    """Collects diagnostics in the order they are reported."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def warn(
        self,
        code: DiagnosticCode,
        message: str,
        uid: str | None = None,
        path: str | None = None,
    ) -> Diagnostic:
        """Record a diagnostic and log it at WARNING."""
        diagnostic = Diagnostic(code=code, message=message, uid=uid, path=path)
        self._items.append(diagnostic)
        logger.warning(str(diagnostic))
        return diagnostic

    def extend(self, other: "DiagnosticLog") -> None:
        self._items.extend(other._items)

    def by_code(self, code: DiagnosticCode) -> list[Diagnostic]:
        return [d for d in self._items if d.code == code]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
