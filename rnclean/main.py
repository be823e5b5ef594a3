"""
rnclean — CLI entrypoint.

Usage:
    rnclean --help
    rnclean plan
    rnclean clean --yes
    python -m rnclean.main clean --dry-run
"""

from __future__ import annotations

import functools
import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from rnclean import __version__
from rnclean.core.models.operation import Operation
from rnclean.core.models.plan import CleanupPlan
from rnclean.core.models.result import ExecutionResult
from rnclean.core.observability.logging_config import resolve_level, setup_logging

TAIL_INDENT = "  "


def _color() -> bool | None:
    # NO_COLOR (https://no-color.org) forces plain output.
    return False if os.environ.get("NO_COLOR") else None


def _say(message: str, **style: Any) -> None:
    click.secho(message, color=_color(), **style)


@click.group()
@click.version_option(version=__version__, prog_name="rnclean")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to a config file (default: .rnclean.yml in the project root).",
)
@click.option(
    "--project",
    "-C",
    "project_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="React Native project root (default: current directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    project_dir: str | None,
) -> None:
    """rnclean — clean and reinstall a React Native project."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["project_root"] = Path(project_dir) if project_dir else Path.cwd()

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug, verbose, quiet, os.environ.get("RNCLEAN_LOG_LEVEL")),
        log_file=os.environ.get("RNCLEAN_DIAG_LOG_FILE"),
        log_file_level=os.environ.get("RNCLEAN_DIAG_LOG_LEVEL"),
    )


# ── Shared run options ──────────────────────────────────────────


def run_options(f: Callable) -> Callable:
    """Options that shape the plan; shared by ``plan`` and ``clean``."""
    options = [
        click.option("--dry-run", is_flag=True, help="Show actions without executing."),
        click.option("--no-ios", is_flag=True, help="Skip iOS cleanup."),
        click.option("--no-android", is_flag=True, help="Skip Android cleanup."),
        click.option("--no-install", is_flag=True, help="Skip reinstalling JS deps."),
        click.option("--no-pods", is_flag=True, help="Skip CocoaPods install."),
        click.option("--no-clean-project", is_flag=True, help="Skip 'react-native-clean-project'."),
        click.option("--no-global-gradle", is_flag=True, help="Keep ~/.gradle caches."),
        click.option(
            "--pm",
            type=click.Choice(["npm", "yarn", "pnpm", "bun"]),
            default=None,
            help="Force package manager.",
        ),
        click.option("--legacy-peer-deps", is_flag=True, help="Use npm --legacy-peer-deps when installing."),
        click.option("--npm-ci", is_flag=True, help="Use npm ci when possible."),
        click.option("--log-file", default=None, help="Run log path (default: /tmp/rn-clean.log)."),
        click.option("--timeout", type=float, default=None, help="Per-operation timeout in seconds."),
    ]
    for option in reversed(options):
        f = option(f)

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        kwargs["overrides"] = _overrides(
            dry_run=kwargs.pop("dry_run"),
            no_ios=kwargs.pop("no_ios"),
            no_android=kwargs.pop("no_android"),
            no_install=kwargs.pop("no_install"),
            no_pods=kwargs.pop("no_pods"),
            no_clean_project=kwargs.pop("no_clean_project"),
            no_global_gradle=kwargs.pop("no_global_gradle"),
            pm=kwargs.pop("pm"),
            legacy_peer_deps=kwargs.pop("legacy_peer_deps"),
            npm_ci=kwargs.pop("npm_ci"),
            log_file=kwargs.pop("log_file"),
            timeout=kwargs.pop("timeout"),
        )
        return f(*args, **kwargs)

    return wrapper


def _overrides(**flags: Any) -> dict[str, Any]:
    """Translate CLI flags into config overrides; unset flags stay None."""
    return {
        "dry_run": flags["dry_run"] or None,
        "ios": False if flags["no_ios"] else None,
        "android": False if flags["no_android"] else None,
        "install": False if flags["no_install"] else None,
        "pods": False if flags["no_pods"] else None,
        "clean_project": False if flags["no_clean_project"] else None,
        "global_gradle_caches": False if flags["no_global_gradle"] else None,
        "package_manager": flags["pm"],
        "legacy_peer_deps": flags["legacy_peer_deps"] or None,
        "npm_ci": flags["npm_ci"] or None,
        "log_file": flags["log_file"],
        "timeout": flags["timeout"],
    }


# ── Rendering ───────────────────────────────────────────────────


def _render_plan(plan: CleanupPlan, verbose: bool = False) -> None:
    _say(f"\n📋 Plan ({len(plan.planned)} steps, PM: {plan.package_manager})", fg="cyan", bold=True)
    step = 0
    for entry in plan.entries:
        if entry.operation is not None:
            step += 1
            marker = " ⚠" if entry.operation.destructive else ""
            click.echo(f"   {step:>2}. {entry.description}{marker}")
            if verbose:
                click.echo(f"       $ {entry.operation.invocation}  (cwd: {entry.operation.cwd})")
                if entry.operation.fallback is not None:
                    click.echo(f"       ↳ fallback: {entry.operation.fallback.invocation}")
        else:
            _say(f"    ⊘  {entry.description} — {entry.reason}", fg="yellow")
    click.echo()


def _render_start(op: Operation) -> None:
    _say(f"🔧 {op.description}", bold=True)


def _render_result(result: ExecutionResult) -> None:
    if result.skipped:
        _say(f"⊘  {result.description} - SKIPPED (dry-run)", fg="yellow")
    elif result.recovered_via == "ownership-fix":
        _say(f"✅ {result.description} - SUCCESS (after ownership fix)", fg="green")
    elif result.recovered_via == "fallback":
        _say(f"✅ {result.description} - SUCCESS (via fallback)", fg="green")
    elif result.succeeded:
        _say(f"✅ {result.description} - SUCCESS", fg="green")
    else:
        suffix = " (timed out)" if result.timed_out else ""
        _say(f"❌ {result.description} - FAILED{suffix} (continuing...)", fg="red")
        for line in result.output_tail:
            click.echo(f"{TAIL_INDENT}{line}")


def _confirm(plan: CleanupPlan) -> bool:
    _render_plan(plan)
    return click.confirm("This will DELETE caches/builds (safe). Continue?", default=False)


# ── Commands ────────────────────────────────────────────────────


@cli.command()
@run_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, overrides: dict[str, Any], as_json: bool) -> None:
    """Preview the steps a clean would run, without running them."""
    from rnclean.core.use_cases.clean import preview_plan

    result = preview_plan(
        ctx.obj["project_root"],
        cli_overrides=overrides,
        config_path=ctx.obj.get("config_path"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        _say(f"❌ {result.error}", fg="red")
        sys.exit(1)

    assert result.plan is not None
    _render_plan(result.plan, verbose=True)


@cli.command()
@run_options
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Skip confirmation.")
@click.option("--strict", is_flag=True, help="Exit 2 when any step failed.")
@click.option("--mock", is_flag=True, help="Use mock adapter (no real execution).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def clean(
    ctx: click.Context,
    overrides: dict[str, Any],
    assume_yes: bool,
    strict: bool,
    mock: bool,
    as_json: bool,
) -> None:
    """Delete caches and builds, then reinstall dependencies.

    Examples:

        rnclean clean

        rnclean clean --yes --no-ios

        rnclean clean --dry-run --pm yarn
    """
    from rnclean.core.use_cases.clean import run_clean

    overrides = {**overrides, "assume_yes": assume_yes or None, "strict": strict or None}
    quiet = ctx.obj.get("quiet", False)
    stream = not as_json

    if stream and not quiet:
        _say("🧹 Starting React Native project cleanup", bold=True)
        if mock:
            _say("   Mode: mock (no real execution)", fg="yellow")

    try:
        result = run_clean(
            ctx.obj["project_root"],
            cli_overrides=overrides,
            config_path=ctx.obj.get("config_path"),
            confirm=_confirm if stream else None,
            mock_mode=mock,
            on_start=_render_start if stream else None,
            on_result=_render_result if stream else None,
        )
    except KeyboardInterrupt:
        _say("\n⚠  Interrupted.", fg="yellow")
        sys.exit(130)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        _say(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if result.cancelled:
        _say("⚠  Canceled.", fg="yellow")
        return

    summary = result.summary
    assert summary is not None

    click.echo()
    if summary.all_succeeded:
        _say("🎉 Cleanup completed successfully!", bold=True)
    else:
        _say(
            f"⚠  Cleanup completed with {summary.failed_count} failed command(s) "
            f"[{summary.status}]. See log.",
            fg="yellow",
        )
    if summary.recovered:
        click.echo(f"   Recovered: {summary.recovered}")
    click.echo(f"📋 Log: {summary.log_file}")

    if result.config and result.config.strict and not summary.all_succeeded:
        sys.exit(2)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
