"""
Clean use case — one full cleanup-and-reinstall run.

This is the top-level orchestrator: it resolves configuration, starts
the run log, checks the project precondition, builds the plan, asks
for confirmation, executes the plan, and summarizes the outcome.
The full vertical slice from user intent to a final report.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rnclean.adapters.registry import AdapterRegistry
from rnclean.core.config.loader import ConfigError, resolve_config
from rnclean.core.engine.log_sink import LogSink
from rnclean.core.engine.planner import build_plan
from rnclean.core.engine.recovery import OwnershipRepair
from rnclean.core.engine.report import RunSummary, summarize
from rnclean.core.engine.runner import RunState, TaskRunner
from rnclean.core.models.config import CleanConfig
from rnclean.core.models.operation import Operation
from rnclean.core.models.plan import CleanupPlan
from rnclean.core.models.result import ExecutionResult
from rnclean.core.services.probe import PreconditionError, ProjectProbe, ensure_project_root

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[CleanupPlan], bool]

CONFIRMATION_REQUIRED = "Confirmation required: pass --yes to run without a prompt."


@dataclass
class CleanResult:
    """Result of a cleanup run (or of a preview, when nothing executed)."""

    config: CleanConfig | None = None
    plan: CleanupPlan | None = None
    project_root: Path | None = None
    summary: RunSummary | None = None
    cancelled: bool = False
    error: str | None = None

    @property
    def executed(self) -> bool:
        return self.summary is not None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["project_root"] = str(self.project_root)
        result["cancelled"] = self.cancelled
        if self.config:
            result["dry_run"] = self.config.dry_run
        if self.plan:
            result["plan"] = self.plan.to_dict()
        if self.summary:
            result["summary"] = self.summary.to_dict()
        return result


def preview_plan(
    project_root: Path,
    cli_overrides: Mapping[str, Any] | None = None,
    config_path: Path | None = None,
    which: Callable[[str], str | None] = shutil.which,
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> CleanResult:
    """Resolve configuration and build the plan without executing anything."""
    result = CleanResult(project_root=project_root)
    try:
        result.config = resolve_config(
            project_root, cli_overrides, config_path=config_path, environ=environ
        )
        root = ensure_project_root(project_root)
    except (ConfigError, PreconditionError) as e:
        result.error = str(e)
        return result

    result.project_root = root
    result.plan = build_plan(result.config, ProjectProbe(root, which=which, platform=platform))
    return result


def run_clean(
    project_root: Path,
    cli_overrides: Mapping[str, Any] | None = None,
    config_path: Path | None = None,
    confirm: ConfirmFn | None = None,
    registry: AdapterRegistry | None = None,
    mock_mode: bool = False,
    which: Callable[[str], str | None] = shutil.which,
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
    on_start: Callable[[Operation], None] | None = None,
    on_result: Callable[[ExecutionResult], None] | None = None,
) -> CleanResult:
    """Execute a full cleanup run.

    Args:
        project_root: Directory expected to contain ``package.json``.
        cli_overrides: Configuration values from the command line.
        config_path: Optional explicit config file.
        confirm: Called with the plan before anything executes; a False
            return cancels the run. Skipped when ``assume_yes`` is set.
            Without it (and without ``assume_yes``) only a dry run proceeds;
            anything else is refused with ``CONFIRMATION_REQUIRED``.
        registry: Optional pre-configured adapter registry.
        mock_mode: If True, every operation succeeds without side effects.
        which: Tool lookup used by the planner and the ownership repair.
        platform: Host platform override (default: ``sys.platform``).
        environ: Environment mapping for configuration.
        on_start: Called before each operation executes.
        on_result: Called with each operation's final result.

    Returns:
        CleanResult. Fatal errors and a refused confirmation are reported
        in ``error``; nothing is executed in either case.
    """
    result = CleanResult(project_root=project_root)

    # ── Configuration ────────────────────────────────────────────
    try:
        config = resolve_config(
            project_root, cli_overrides, config_path=config_path, environ=environ
        )
    except ConfigError as e:
        result.error = str(e)
        return result
    result.config = config

    # ── Run log (truncated once per run) ─────────────────────────
    log = LogSink(config.log_file)
    log.start()

    # ── Precondition ─────────────────────────────────────────────
    try:
        root = ensure_project_root(project_root)
    except PreconditionError as e:
        log.append(f"FATAL: {e}")
        result.error = str(e)
        return result
    result.project_root = root

    # ── Plan ─────────────────────────────────────────────────────
    plan = build_plan(config, ProjectProbe(root, which=which, platform=platform))
    result.plan = plan

    if not config.assume_yes:
        if confirm is None and not config.dry_run:
            # Nobody to ask; a destructive run needs explicit consent.
            logger.info("No confirmation available and assume_yes not set")
            log.append(f"Canceled: {CONFIRMATION_REQUIRED}")
            result.cancelled = True
            result.error = CONFIRMATION_REQUIRED
            return result
        if confirm is not None and not confirm(plan):
            logger.info("Run cancelled at confirmation")
            log.append("Canceled.")
            result.cancelled = True
            return result

    # ── Execute ──────────────────────────────────────────────────
    if registry is None:
        registry = AdapterRegistry.default(mock_mode=mock_mode)

    state = RunState(log=log)
    runner = TaskRunner(
        registry=registry,
        state=state,
        recovery=OwnershipRepair(registry, log, which=which),
        dry_run=config.dry_run,
        timeout=config.timeout,
        on_start=on_start,
        on_result=on_result,
    )
    runner.run_plan(plan)

    result.summary = summarize(state, plan)
    logger.info(
        "Run finished: %d failed, %d succeeded, %d skipped",
        result.summary.failed_count,
        result.summary.succeeded,
        result.summary.skipped,
    )
    return result
