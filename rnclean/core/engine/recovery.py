"""
Recovery strategy — one bounded corrective action per classified failure.

The only strategy is an ownership repair: ``sudo chown -R <user>`` over
the failing operation's own targets. It escalates privilege, so it runs
only for PERMISSION_DENIED failures and at most once per operation. The
strategy never re-runs the failed operation; the runner does that.

Scope: a removal operation is repaired over the targets that still
exist, anything else over its working directory.
"""

from __future__ import annotations

import getpass
import logging
import shutil
from collections.abc import Callable
from typing import Protocol

from rnclean.adapters.registry import AdapterRegistry
from rnclean.adapters.shell.filesystem import resolve_path
from rnclean.core.engine.classifier import FailureKind
from rnclean.core.engine.log_sink import LogSink
from rnclean.core.models.operation import Operation

logger = logging.getLogger(__name__)

OWNERSHIP_FIX = "ownership-fix"


class RecoveryStrategy(Protocol):
    """A single-attempt corrective action for one failure kind."""

    tag: str

    def attempt(self, kind: FailureKind, operation: Operation) -> bool: ...


class OwnershipRepair:
    """Recursively reassign ownership of an operation's targets to the user."""

    tag = OWNERSHIP_FIX

    def __init__(
        self,
        registry: AdapterRegistry,
        log: LogSink,
        user: str | None = None,
        which: Callable[[str], str | None] = shutil.which,
    ):
        self._registry = registry
        self._log = log
        self._user = user
        self._which = which

    @property
    def user(self) -> str:
        return self._user or getpass.getuser()

    def scope_for(self, operation: Operation) -> list[str]:
        """Paths the repair will cover for this operation."""
        scope = operation.ownership_scope()
        if operation.adapter == "filesystem":
            existing = [p for p in scope if resolve_path(p, operation.cwd).exists()]
            return existing or [operation.cwd]
        return scope

    def build_operation(self, operation: Operation) -> Operation:
        return Operation(
            id=f"{operation.id}:{OWNERSHIP_FIX}",
            description=f"Ownership fix for {operation.description}",
            adapter="shell",
            params={"argv": ["sudo", "chown", "-R", self.user, *self.scope_for(operation)]},
            cwd=operation.cwd,
            destructive=True,
        )

    def attempt(self, kind: FailureKind, operation: Operation) -> bool:
        """Run the ownership repair once. True only if it exited cleanly."""
        if kind is not FailureKind.PERMISSION_DENIED:
            return False

        if self._which("sudo") is None:
            logger.warning("Permission denied but sudo is not available; no ownership fix")
            self._log.append("ownership fix skipped: sudo not found")
            return False

        fix = self.build_operation(operation)
        logger.warning("Permission denied — attempting: %s", fix.invocation)
        self._log.append(f"$ {fix.invocation}")

        receipt = self._registry.execute(fix)
        self._log.append(receipt.transcript)

        if not receipt.ok:
            logger.warning("Ownership fix failed for %s", operation.description)
        return receipt.ok
