"""
Filesystem adapter — recursive removal of build artifacts and caches.

Provides a safe, receipt-returning ``rm -rf`` that the runner can log,
dry-run, and recover. Paths that are already absent count as removed,
so running a cleanup twice never fails on the second pass.
"""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path

from rnclean.adapters.base import Adapter, ExecutionContext
from rnclean.core.models.operation import Receipt

logger = logging.getLogger(__name__)


def resolve_path(raw: str, cwd: str) -> Path:
    """Expand ``~`` and anchor relative paths at the operation's cwd."""
    target = Path(raw).expanduser()
    if not target.is_absolute():
        target = Path(cwd) / target
    return target


class FilesystemAdapter(Adapter):
    """Remove files and directory trees with receipts.

    Operation params:
        paths (list[str]): Targets, relative to the operation cwd or absolute.
    """

    @property
    def name(self) -> str:
        return "filesystem"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        paths = context.operation.params.get("paths")
        if not paths:
            return False, "Missing required param: 'paths'"

        for raw in paths:
            target = resolve_path(raw, context.working_dir)
            if target == Path(target.anchor) or target == Path.home():
                return False, f"Refusing to remove {target}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        op = context.operation
        start = time.monotonic()
        removed: list[str] = []
        absent: list[str] = []
        errors: list[str] = []

        for raw in op.params["paths"]:
            target = resolve_path(raw, context.working_dir)
            try:
                if target.is_symlink() or target.is_file():
                    target.unlink()
                elif target.is_dir():
                    shutil.rmtree(target)
                else:
                    absent.append(raw)
                    continue
                removed.append(raw)
            except OSError as e:
                reason = e.strerror or str(e)
                errors.append(f"rm: cannot remove '{raw}': {reason}")

        elapsed_ms = int((time.monotonic() - start) * 1000)
        lines = [f"removed {p}" for p in removed] + [f"already absent: {p}" for p in absent]
        metadata = {"removed": removed, "absent": absent}

        if errors:
            logger.debug("Removal errors for %s: %s", op.id, errors)
            return Receipt.failure(
                adapter=self.name,
                operation_id=op.id,
                error="\n".join(errors),
                output="\n".join(lines),
                duration_ms=elapsed_ms,
                metadata=metadata,
            )

        return Receipt.success(
            adapter=self.name,
            operation_id=op.id,
            output="\n".join(lines),
            duration_ms=elapsed_ms,
            metadata=metadata,
        )
