"""
CleanConfig — the resolved, validated configuration of one run.

Built by the config loader from (lowest to highest precedence):
model defaults, ``.rnclean.yml``, environment variables, CLI flags.
The engine receives it as an opaque, already-validated object.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PackageManager = Literal["npm", "yarn", "pnpm", "bun"]

DEFAULT_LOG_FILE = "/tmp/rn-clean.log"


class CleanConfig(BaseModel):
    """Flat set of toggles plus the package-manager choice."""

    model_config = ConfigDict(extra="forbid")

    assume_yes: bool = False
    dry_run: bool = False

    ios: bool = True
    android: bool = True
    install: bool = True
    pods: bool = True
    clean_project: bool = True
    global_gradle_caches: bool = True

    package_manager: PackageManager | None = None   # None = auto-detect
    legacy_peer_deps: bool = False
    npm_ci: bool = False

    log_file: str = DEFAULT_LOG_FILE
    timeout: float | None = Field(default=None, gt=0)
    strict: bool = False
