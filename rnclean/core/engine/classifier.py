"""
Failure classifier — decide whether a failure was a permission problem.

This is a heuristic, not error parsing. It looks for phrases the OS and
common tools print when a filesystem permission check refuses an
operation. Anything phrased differently (a localized message, a tool
that swallows the errno) is classified as OTHER, which only means no
ownership repair is attempted.

Pure functions over a list of log lines. No I/O.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Sequence
from typing import Protocol

# Log lines inspected after a failure.
CLASSIFY_WINDOW = 50


class FailureKind(str, enum.Enum):
    """Classification of a failed operation."""

    PERMISSION_DENIED = "permission_denied"
    OTHER = "other"


# Case-insensitive. Mirrors the permission handlers used for install
# remediation: POSIX messages plus the errno names npm and node print.
PERMISSION_PATTERNS: tuple[str, ...] = (
    r"permission denied",
    r"operation not permitted",
    r"\bEACCES\b",
    r"\bEPERM\b",
)


class FailureClassifier(Protocol):
    """Anything that can classify a failure from its output tail."""

    def classify(self, output_tail: Sequence[str]) -> FailureKind: ...


class PermissionClassifier:
    """Pattern-based classifier for permission refusals."""

    def __init__(self, patterns: Sequence[str] = PERMISSION_PATTERNS):
        self._regex = re.compile("|".join(f"(?:{p})" for p in patterns), re.IGNORECASE)

    def classify(self, output_tail: Sequence[str]) -> FailureKind:
        for line in output_tail:
            if self._regex.search(line):
                return FailureKind.PERMISSION_DENIED
        return FailureKind.OTHER


def classify(output_tail: Sequence[str]) -> FailureKind:
    """Classify with the default permission patterns."""
    return PermissionClassifier().classify(output_tail)
