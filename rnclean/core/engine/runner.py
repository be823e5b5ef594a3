"""
Task runner — the central execution loop.

Runs one Operation at a time, records everything to the run log, and
absorbs every non-fatal failure. A failure is classified from the
failing attempt's own output; a permission failure gets one ownership
repair and one retry. An operation with a fallback gets the fallback
once after that. The
failure counter moves by exactly one per failed operation, however many
attempts were made.

Flow per operation:
    dry-run? → log + skip
    attempt → ok? → done
            → classify → permission? → repair → retry once → ok? → done
            → fallback? → attempt once → ok? → done
            → count failure, surface log tail
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from rnclean.adapters.registry import AdapterRegistry
from rnclean.core.engine.classifier import (
    CLASSIFY_WINDOW,
    FailureClassifier,
    FailureKind,
    PermissionClassifier,
)
from rnclean.core.engine.log_sink import LogSink
from rnclean.core.engine.recovery import RecoveryStrategy
from rnclean.core.models.operation import Operation, Receipt
from rnclean.core.models.plan import CleanupPlan
from rnclean.core.models.result import ExecutionResult

logger = logging.getLogger(__name__)

# Log lines attached to a failed result for the user-visible summary.
FAILURE_TAIL_LINES = 20

FALLBACK = "fallback"


@dataclass
class RunState:
    """Per-run aggregate. Mutated only by the TaskRunner."""

    log: LogSink
    failed_count: int = 0
    results: list[ExecutionResult] = field(default_factory=list)


class TaskRunner:
    """Execute operations sequentially with classify → recover → retry."""

    def __init__(
        self,
        registry: AdapterRegistry,
        state: RunState,
        classifier: FailureClassifier | None = None,
        recovery: RecoveryStrategy | None = None,
        dry_run: bool = False,
        timeout: float | None = None,
        on_start: Callable[[Operation], None] | None = None,
        on_result: Callable[[ExecutionResult], None] | None = None,
    ):
        self._registry = registry
        self._state = state
        self._classifier = classifier or PermissionClassifier()
        self._recovery = recovery
        self._dry_run = dry_run
        self._timeout = timeout
        self._on_start = on_start
        self._on_result = on_result

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def run(self, op: Operation) -> ExecutionResult:
        """Run one operation to a final verdict. Never raises for tool failures."""
        if self._on_start:
            self._on_start(op)

        result = self._execute(op)
        self._state.results.append(result)

        if self._on_result:
            self._on_result(result)
        return result

    def run_plan(self, plan: CleanupPlan) -> RunState:
        """Run every planned entry in order, continuing past failures."""
        for entry in plan.entries:
            if entry.operation is None:
                logger.info("⊘ %s (%s)", entry.description, entry.reason)
                continue
            self.run(entry.operation)
        return self._state

    # ── Internals ───────────────────────────────────────────────

    def _execute(self, op: Operation) -> ExecutionResult:
        start = time.monotonic()
        log = self._state.log

        if self._dry_run:
            log.append(f"DRY-RUN: {op.invocation}")
            logger.info("⊘ %s → skipped (dry-run)", op.description)
            return self._result(op, "skipped", start, attempts=0)

        receipt = self._attempt(op)
        attempts = 1
        if receipt.ok:
            logger.info("✓ %s", op.description)
            return self._result(op, "ok", start, attempts=attempts)

        if receipt.timed_out:
            logger.warning("%s timed out; not retrying", op.description)
            return self._fail(op, start, attempts, timed_out=True)

        # Only this attempt's output; earlier operations' lines stay out.
        kind = self._classifier.classify(receipt.transcript.splitlines()[-CLASSIFY_WINDOW:])
        logger.debug("%s failed, classified as %s", op.description, kind.value)

        if kind is FailureKind.PERMISSION_DENIED and self._recovery is not None:
            if self._recovery.attempt(kind, op):
                receipt = self._attempt(op)
                attempts += 1
                if receipt.ok:
                    logger.info("✓ %s (after %s)", op.description, self._recovery.tag)
                    return self._result(
                        op, "ok", start, attempts=attempts, recovered_via=self._recovery.tag
                    )

        if op.fallback is not None and not receipt.timed_out:
            logger.warning("%s failed; trying %s", op.description, op.fallback.description)
            receipt = self._attempt(op.fallback)
            attempts += 1
            if receipt.ok:
                logger.info("✓ %s (via %s)", op.description, op.fallback.description)
                return self._result(
                    op, "ok", start, attempts=attempts, recovered_via=FALLBACK
                )

        return self._fail(op, start, attempts, timed_out=receipt.timed_out)

    def _attempt(self, op: Operation) -> Receipt:
        log = self._state.log
        log.append(f"$ {op.invocation}  (cwd: {op.cwd})")
        receipt = self._registry.execute(op, timeout=self._timeout)
        log.append(receipt.transcript)
        return receipt

    def _fail(
        self,
        op: Operation,
        start: float,
        attempts: int,
        timed_out: bool = False,
    ) -> ExecutionResult:
        self._state.failed_count += 1
        tail = self._state.log.tail(FAILURE_TAIL_LINES)
        logger.info("✗ %s failed (continuing)", op.description)
        for line in tail:
            logger.debug("  %s", line)
        return self._result(
            op, "failed", start, attempts=attempts, output_tail=tail, timed_out=timed_out
        )

    @staticmethod
    def _result(
        op: Operation,
        status: str,
        start: float,
        attempts: int,
        recovered_via: str | None = None,
        output_tail: list[str] | None = None,
        timed_out: bool = False,
    ) -> ExecutionResult:
        return ExecutionResult(
            operation_id=op.id,
            description=op.description,
            status=status,
            recovered_via=recovered_via,
            output_tail=output_tail or [],
            attempts=attempts,
            duration_ms=int((time.monotonic() - start) * 1000),
            timed_out=timed_out,
        )
