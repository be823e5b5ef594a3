"""
Project probe — read-only environment checks used by the planner.

Answers "does this path exist", "is this tool installed", "is this a
macOS host" without mutating anything. The probe also remembers paths
that earlier planned operations will remove, so a later guard sees the
project as it will be at that point of the run rather than as it is
before the run starts.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from collections.abc import Callable, Iterable
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

# Required project marker.
PROJECT_MARKER = "package.json"


class PreconditionError(Exception):
    """Raised when the run cannot start (e.g. not a React Native project root)."""


def ensure_project_root(root: Path) -> Path:
    """Verify the project marker exists and return the resolved root.

    Raises:
        PreconditionError: If ``package.json`` is absent.
    """
    if not (root / PROJECT_MARKER).is_file():
        raise PreconditionError(
            f"{PROJECT_MARKER} not found in {root}. "
            "Run from your React Native project root."
        )
    return root.resolve()


class ProjectProbe:
    """Read-only view of a project root and its host."""

    def __init__(
        self,
        root: Path,
        which: Callable[[str], str | None] = shutil.which,
        platform: str | None = None,
    ):
        self._root = root
        self._which = which
        self._platform = platform if platform is not None else sys.platform
        self._removed: list[PurePosixPath] = []

    @property
    def root(self) -> Path:
        return self._root

    @property
    def is_macos(self) -> bool:
        return self._platform == "darwin"

    def has_tool(self, name: str) -> bool:
        """Whether an executable is on PATH."""
        return self._which(name) is not None

    def mark_removed(self, paths: Iterable[str]) -> None:
        """Record that an earlier planned operation removes these paths."""
        self._removed.extend(PurePosixPath(p) for p in paths)

    def _planned_gone(self, rel: str) -> bool:
        target = PurePosixPath(rel)
        return any(target == r or r in target.parents for r in self._removed)

    def is_file(self, rel: str) -> bool:
        if self._planned_gone(rel):
            return False
        return (self._root / rel).is_file()

    def is_dir(self, rel: str) -> bool:
        if self._planned_gone(rel):
            return False
        return (self._root / rel).is_dir()

    def is_executable(self, rel: str) -> bool:
        if self._planned_gone(rel):
            return False
        path = self._root / rel
        return path.is_file() and os.access(path, os.X_OK)
