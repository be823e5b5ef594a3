"""
Operation and Receipt models — the execution contract.

Operations represent requested steps of a cleanup run. Receipts represent
the outcome of one adapter invocation. The runner sends Operations to
adapters through the registry; adapters return Receipts. Never exceptions.
"""

from __future__ import annotations

import shlex
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Operation(BaseModel):
    """A named, independently executable step of a cleanup run.

    Operations carry their own working directory. Nothing in the engine
    changes the process cwd, so two operations never share hidden state.

    Params by adapter:
        shell:       ``argv`` (list[str]), optional ``input`` (stdin text)
        filesystem:  ``paths`` (list[str]) — removed recursively
    """

    id: str                             # unique within a plan
    description: str                    # human label used in reports
    adapter: str = "shell"              # which adapter handles this
    params: dict[str, Any] = Field(default_factory=dict)
    cwd: str = "."
    destructive: bool = False
    timeout: float | None = None        # seconds, None = wait forever
    fallback: Operation | None = None   # tried once after a definitive failure

    @property
    def invocation(self) -> str:
        """Human-readable rendering of what this operation would run."""
        if self.adapter == "filesystem":
            return "rm -rf " + " ".join(
                shlex.quote(p) for p in self.params.get("paths", [])
            )
        argv = self.params.get("argv", [])
        return shlex.join(argv) if argv else self.description

    def ownership_scope(self) -> list[str]:
        """Paths an ownership repair for this operation should cover.

        Removal operations scope to their own targets; everything else
        scopes to its working directory.
        """
        if self.adapter == "filesystem":
            paths = self.params.get("paths", [])
            if paths:
                return list(paths)
        return [self.cwd]


class Receipt(BaseModel):
    """Result of a single adapter execution.

    Receipts capture the full outcome of an operation attempt. The adapter
    NEVER raises exceptions — failures are captured here.
    """

    adapter: str
    operation_id: str
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the attempt succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the attempt failed."""
        return self.status == "failed"

    @property
    def timed_out(self) -> bool:
        return bool(self.metadata.get("timed_out"))

    @property
    def transcript(self) -> str:
        """Everything the attempt printed, output first, then error text."""
        parts = [p for p in (self.output, self.error) if p]
        return "\n".join(parts)

    @classmethod
    def success(
        cls,
        adapter: str,
        operation_id: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            adapter=adapter,
            operation_id=operation_id,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        adapter: str,
        operation_id: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            adapter=adapter,
            operation_id=operation_id,
            status="failed",
            error=error,
            **kwargs,
        )
