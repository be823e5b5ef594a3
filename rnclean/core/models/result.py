"""
ExecutionResult — the runner's verdict on one Operation.

A Receipt describes a single adapter attempt. An ExecutionResult
describes the whole Operation, which may span up to two attempts
(original + post-recovery retry) plus an optional fallback.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

RecoveryTag = Literal["ownership-fix", "fallback"]


class ExecutionResult(BaseModel):
    """Outcome of running one Operation through the task runner."""

    operation_id: str
    description: str
    status: Literal["ok", "skipped", "failed"]
    recovered_via: RecoveryTag | None = None
    output_tail: list[str] = Field(default_factory=list)
    attempts: int = 0
    duration_ms: int = 0
    timed_out: bool = False

    @model_validator(mode="after")
    def _recovery_implies_retry(self) -> ExecutionResult:
        # A recovery tag means a first attempt failed and a later one succeeded.
        if self.recovered_via is not None and (self.status != "ok" or self.attempts < 2):
            raise ValueError(
                "recovered_via requires a successful result after at least two attempts"
            )
        return self

    @property
    def succeeded(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @property
    def recovered(self) -> bool:
        return self.recovered_via is not None
