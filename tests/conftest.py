"""
Shared test fixtures and configuration.
"""

import os
from pathlib import Path

import pytest

from rnclean.adapters.mock import MockAdapter
from rnclean.adapters.registry import AdapterRegistry
from rnclean.core.engine.log_sink import LogSink


def _touch(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def rn_project(tmp_path: Path, monkeypatch) -> Path:
    """A React Native project tree with artifacts to clean.

    HOME points into the temp dir so ``~`` paths never reach the real home.
    """
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    (tmp_path / "home").mkdir()

    root = tmp_path / "app"
    _touch(root / "package.json", '{"name": "app"}')
    _touch(root / "package-lock.json", "{}")
    _touch(root / "node_modules" / "react" / "index.js")
    _touch(root / "ios" / "Podfile", "platform :ios")
    _touch(root / "ios" / "Podfile.lock")
    _touch(root / "ios" / "Pods" / "Manifest.lock")
    _touch(root / "ios" / "build" / "app.o")
    _touch(root / "android" / ".gradle" / "cache.bin")
    _touch(root / "android" / "app" / "build" / "app.apk")
    gradlew = _touch(root / "android" / "gradlew", "#!/bin/sh\n")
    os.chmod(gradlew, 0o755)
    return root


@pytest.fixture
def log_sink(tmp_path: Path) -> LogSink:
    """A started run log in the temp dir."""
    sink = LogSink(tmp_path / "run.log")
    sink.start()
    return sink


@pytest.fixture
def mock_shell() -> MockAdapter:
    return MockAdapter(adapter_name="shell")


@pytest.fixture
def mock_registry(mock_shell: MockAdapter) -> AdapterRegistry:
    """Registry where both shell and filesystem go to mocks."""
    registry = AdapterRegistry()
    registry.register(mock_shell)
    registry.register(MockAdapter(adapter_name="filesystem"))
    return registry
