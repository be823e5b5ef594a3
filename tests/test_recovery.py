"""
Tests for the ownership-repair recovery strategy.
"""

from pathlib import Path

from rnclean.adapters.mock import MockAdapter
from rnclean.adapters.registry import AdapterRegistry
from rnclean.core.engine.classifier import FailureKind
from rnclean.core.engine.log_sink import LogSink
from rnclean.core.engine.recovery import OwnershipRepair
from rnclean.core.models.operation import Operation, Receipt


def _has_sudo(name: str) -> str | None:
    return f"/usr/bin/{name}"


def _no_sudo(name: str) -> str | None:
    return None


def _registry() -> tuple[AdapterRegistry, MockAdapter]:
    mock = MockAdapter(adapter_name="shell")
    registry = AdapterRegistry()
    registry.register(mock)
    return registry, mock


def _removal(tmp_path: Path, *paths: str) -> Operation:
    return Operation(
        id="ios-pods",
        description="Cleaning iOS Pods",
        adapter="filesystem",
        params={"paths": list(paths)},
        cwd=str(tmp_path),
        destructive=True,
    )


class TestOwnershipRepair:
    def test_success(self, tmp_path: Path, log_sink: LogSink):
        registry, mock = _registry()
        repair = OwnershipRepair(registry, log_sink, user="dev", which=_has_sudo)
        op = Operation(id="npm-install", description="npm install",
                       params={"argv": ["npm", "install"]}, cwd=str(tmp_path))

        assert repair.attempt(FailureKind.PERMISSION_DENIED, op) is True
        assert mock.call_count == 1
        argv = mock.call_log[0].operation.params["argv"]
        assert argv == ["sudo", "chown", "-R", "dev", str(tmp_path)]
        assert "sudo chown -R dev" in log_sink.path.read_text()

    def test_never_runs_original_operation(self, tmp_path: Path, log_sink: LogSink):
        registry, mock = _registry()
        repair = OwnershipRepair(registry, log_sink, user="dev", which=_has_sudo)
        op = Operation(id="npm-install", description="npm install", params={"argv": ["npm", "install"]})
        repair.attempt(FailureKind.PERMISSION_DENIED, op)
        assert mock.calls_for("npm-install") == 0

    def test_other_kind_refused(self, log_sink: LogSink):
        registry, mock = _registry()
        repair = OwnershipRepair(registry, log_sink, user="dev", which=_has_sudo)
        op = Operation(id="x", description="x", params={"argv": ["x"]})
        assert repair.attempt(FailureKind.OTHER, op) is False
        assert mock.call_count == 0

    def test_sudo_missing(self, log_sink: LogSink):
        registry, mock = _registry()
        repair = OwnershipRepair(registry, log_sink, user="dev", which=_no_sudo)
        op = Operation(id="x", description="x", params={"argv": ["x"]})
        assert repair.attempt(FailureKind.PERMISSION_DENIED, op) is False
        assert mock.call_count == 0

    def test_chown_fails(self, log_sink: LogSink):
        registry, mock = _registry()
        mock.set_failure("x:ownership-fix", error="sudo: a password is required")
        repair = OwnershipRepair(registry, log_sink, user="dev", which=_has_sudo)
        op = Operation(id="x", description="x", params={"argv": ["x"]})
        assert repair.attempt(FailureKind.PERMISSION_DENIED, op) is False
        assert "a password is required" in log_sink.path.read_text()


class TestRepairScope:
    def test_removal_scoped_to_existing_targets(self, tmp_path: Path, log_sink: LogSink):
        (tmp_path / "ios" / "Pods").mkdir(parents=True)
        registry, _ = _registry()
        repair = OwnershipRepair(registry, log_sink, user="dev", which=_has_sudo)
        op = _removal(tmp_path, "ios/Pods", "ios/Podfile.lock")
        assert repair.scope_for(op) == ["ios/Pods"]

    def test_removal_with_nothing_left_falls_back_to_cwd(self, tmp_path: Path, log_sink: LogSink):
        registry, _ = _registry()
        repair = OwnershipRepair(registry, log_sink, user="dev", which=_has_sudo)
        op = _removal(tmp_path, "ios/build")
        assert repair.scope_for(op) == [str(tmp_path)]

    def test_command_scoped_to_cwd(self, tmp_path: Path, log_sink: LogSink):
        registry, _ = _registry()
        repair = OwnershipRepair(registry, log_sink, user="dev", which=_has_sudo)
        op = Operation(id="pod", description="pod install", params={"argv": ["pod", "install"]},
                       cwd=str(tmp_path / "ios"))
        fix = repair.build_operation(op)
        assert fix.params["argv"][-1] == str(tmp_path / "ios")
        assert fix.cwd == str(tmp_path / "ios")
        assert fix.id == "pod:ownership-fix"

    def test_default_user(self, log_sink: LogSink):
        registry, _ = _registry()
        repair = OwnershipRepair(registry, log_sink, which=_has_sudo)
        assert repair.user


class TestRepairReceipt:
    def test_success_receipt_output_logged(self, log_sink: LogSink):
        registry, mock = _registry()
        mock.set_response("x:ownership-fix", Receipt.success(
            adapter="shell", operation_id="x:ownership-fix", output="changed ownership",
        ))
        repair = OwnershipRepair(registry, log_sink, user="dev", which=_has_sudo)
        op = Operation(id="x", description="x", params={"argv": ["x"]})
        assert repair.attempt(FailureKind.PERMISSION_DENIED, op)
        assert "changed ownership" in log_sink.path.read_text()
