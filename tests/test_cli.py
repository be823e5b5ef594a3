"""
Tests for CLI commands — plan, clean, and global options.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from rnclean.adapters.mock import MockAdapter
from rnclean.adapters.registry import AdapterRegistry
from rnclean.main import cli


def _invoke(args: list[str], input: str | None = None):
    runner = CliRunner()
    return runner.invoke(cli, args, input=input)


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = _invoke(["--help"])
        assert result.exit_code == 0
        assert "clean and reinstall a React Native project" in result.output

    def test_version(self):
        result = _invoke(["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_clean_help_lists_flags(self):
        result = _invoke(["clean", "--help"])
        assert result.exit_code == 0
        for flag in ("--dry-run", "--no-ios", "--no-android", "--no-install", "--pm", "--npm-ci"):
            assert flag in result.output


class TestPlanCommand:
    def test_plan_json(self, rn_project: Path):
        result = _invoke(["-q", "-C", str(rn_project), "plan", "--json", "--no-ios"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        descriptions = [e["description"] for e in data["plan"]["entries"]]
        assert "Removing node_modules" in descriptions
        assert "Cleaning iOS Pods" not in descriptions
        assert data["plan"]["package_manager"] == "npm"

    def test_plan_human(self, rn_project: Path):
        result = _invoke(["-C", str(rn_project), "plan", "--pm", "yarn"])
        assert result.exit_code == 0
        assert "PM: yarn" in result.output
        assert "$ rm -rf node_modules" in result.output

    def test_plan_leaves_project_untouched(self, rn_project: Path):
        _invoke(["-C", str(rn_project), "plan"])
        assert (rn_project / "node_modules").exists()

    def test_plan_outside_project(self, tmp_path: Path):
        result = _invoke(["-C", str(tmp_path), "plan"])
        assert result.exit_code == 1
        assert "package.json not found" in result.output

    def test_plan_bad_config(self, rn_project: Path):
        (rn_project / ".rnclean.yml").write_text("package_manager: cargo\n")
        result = _invoke(["-q", "-C", str(rn_project), "plan", "--json"])
        assert result.exit_code == 1
        assert "error" in json.loads(result.stdout)


class TestCleanCommand:
    def test_mock_run_succeeds(self, rn_project: Path, tmp_path: Path):
        log = tmp_path / "rn.log"
        result = _invoke([
            "-C", str(rn_project), "clean", "--yes", "--mock", "--log-file", str(log),
        ])
        assert result.exit_code == 0, result.output
        assert "🔧 Removing node_modules" in result.output
        assert "✅ Removing node_modules - SUCCESS" in result.output
        assert "Cleanup completed successfully!" in result.output
        assert f"📋 Log: {log}" in result.output
        assert log.read_text().startswith("React Native Clean Script Log - ")
        assert (rn_project / "node_modules").exists()

    def test_json(self, rn_project: Path, tmp_path: Path):
        result = _invoke([
            "-q", "-C", str(rn_project), "clean", "--yes", "--mock", "--json",
            "--log-file", str(tmp_path / "rn.log"),
        ])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["summary"]["status"] == "ok"
        assert data["summary"]["failed_count"] == 0
        assert data["summary"]["succeeded"] == data["plan"]["planned"]

    def test_dry_run_touches_nothing(self, rn_project: Path, tmp_path: Path):
        log = tmp_path / "rn.log"
        result = _invoke([
            "-C", str(rn_project), "clean", "--yes", "--dry-run", "--log-file", str(log),
        ])
        assert result.exit_code == 0, result.output
        assert "SKIPPED (dry-run)" in result.output
        assert (rn_project / "node_modules" / "react" / "index.js").exists()
        assert (rn_project / "package-lock.json").exists()
        assert "DRY-RUN: rm -rf node_modules" in log.read_text()

    def test_missing_package_json(self, tmp_path: Path):
        log = tmp_path / "rn.log"
        result = _invoke(["-C", str(tmp_path), "clean", "--yes", "--mock", "--log-file", str(log)])
        assert result.exit_code == 1
        assert "package.json not found" in result.output
        assert "FATAL:" in log.read_text()

    def test_cancel_at_prompt(self, rn_project: Path, tmp_path: Path):
        result = _invoke(
            ["-C", str(rn_project), "clean", "--mock", "--log-file", str(tmp_path / "rn.log")],
            input="n\n",
        )
        assert result.exit_code == 0
        assert "Continue?" in result.output
        assert "Canceled." in result.output
        assert "🔧" not in result.output

    def test_json_without_yes_refuses(self, rn_project: Path, tmp_path: Path):
        result = _invoke(
            ["-q", "-C", str(rn_project), "clean", "--json", "--no-install",
             "--no-clean-project", "--log-file", str(tmp_path / "rn.log")],
            input="n\n",
        )
        assert result.exit_code == 1
        assert "--yes" in json.loads(result.stdout)["error"]
        assert (rn_project / "node_modules" / "react" / "index.js").exists()
        assert (rn_project / "ios" / "Pods").exists()

    def test_json_dry_run_without_yes(self, rn_project: Path, tmp_path: Path):
        result = _invoke([
            "-q", "-C", str(rn_project), "clean", "--json", "--dry-run",
            "--log-file", str(tmp_path / "rn.log"),
        ])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["summary"]["skipped"] > 0
        assert (rn_project / "node_modules").exists()

    def test_confirm_at_prompt(self, rn_project: Path, tmp_path: Path):
        result = _invoke(
            ["-C", str(rn_project), "clean", "--mock", "--log-file", str(tmp_path / "rn.log")],
            input="y\n",
        )
        assert result.exit_code == 0
        assert "Cleanup completed successfully!" in result.output


class TestFailureDisposition:
    def _failing_registry(self, monkeypatch) -> None:
        shell = MockAdapter(adapter_name="shell")
        shell.set_failure("npm-install", error="npm ERR! code ERESOLVE")
        registry = AdapterRegistry()
        registry.register(shell)
        registry.register(MockAdapter(adapter_name="filesystem"))
        monkeypatch.setattr(
            AdapterRegistry, "default", classmethod(lambda cls, mock_mode=False: registry)
        )

    def test_failures_exit_zero(self, rn_project: Path, tmp_path: Path, monkeypatch):
        self._failing_registry(monkeypatch)
        result = _invoke([
            "-C", str(rn_project), "clean", "--yes", "--log-file", str(tmp_path / "rn.log"),
        ])
        assert result.exit_code == 0
        assert "❌ npm install - FAILED (continuing...)" in result.output
        assert "  npm ERR! code ERESOLVE" in result.output
        assert "completed with 1 failed command(s)" in result.output
        assert "[partial]" in result.output

    def test_strict_exits_two(self, rn_project: Path, tmp_path: Path, monkeypatch):
        self._failing_registry(monkeypatch)
        result = _invoke([
            "-C", str(rn_project), "clean", "--yes", "--strict",
            "--log-file", str(tmp_path / "rn.log"),
        ])
        assert result.exit_code == 2
