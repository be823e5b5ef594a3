"""
Run report — final aggregation of a cleanup run.

Pure aggregation over the RunState (and optionally the plan, for the
not-applicable count). Used only for final messaging and exit status.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rnclean.core.engine.runner import RunState
from rnclean.core.models.plan import CleanupPlan
from rnclean.core.models.result import ExecutionResult


@dataclass
class RunSummary:
    """Counts and disposition of a finished run."""

    failed_count: int = 0
    succeeded: int = 0
    skipped: int = 0
    recovered: int = 0
    not_applicable: int = 0
    log_file: str = ""
    failures: list[ExecutionResult] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return self.failed_count == 0

    @property
    def status(self) -> str:
        if self.failed_count == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "all_succeeded": self.all_succeeded,
            "failed_count": self.failed_count,
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "recovered": self.recovered,
            "not_applicable": self.not_applicable,
            "log_file": self.log_file,
            "failures": [
                {"description": r.description, "output_tail": r.output_tail}
                for r in self.failures
            ],
        }


def summarize(state: RunState, plan: CleanupPlan | None = None) -> RunSummary:
    """Aggregate a RunState into a RunSummary. Never retries anything."""
    results = state.results
    return RunSummary(
        failed_count=state.failed_count,
        succeeded=sum(1 for r in results if r.succeeded),
        skipped=sum(1 for r in results if r.skipped),
        recovered=sum(1 for r in results if r.recovered),
        not_applicable=(len(plan.entries) - len(plan.planned)) if plan else 0,
        log_file=str(state.log.path),
        failures=[r for r in results if r.failed],
    )
