"""
Task planner — the ordered list of steps a cleanup run will execute.

All inclusion logic lives here: configuration toggles, directory and
lockfile checks, tool presence and host OS. The runner executes the
plan this module returns, so the preview and the run cannot diverge.

Probes are read-only. The probe is told about each planned removal, so
a guard evaluated later in the plan sees the project as it will be at
that point of the run.
"""

from __future__ import annotations

import logging
import shlex

from rnclean.core.models.config import CleanConfig, PackageManager
from rnclean.core.models.operation import Operation
from rnclean.core.models.plan import CleanupPlan
from rnclean.core.services.probe import ProjectProbe

logger = logging.getLogger(__name__)

LOCKFILES: tuple[str, ...] = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "bun.lockb",
)

# Lockfile that marks each package manager, in detection priority order.
PM_LOCKFILES: tuple[tuple[PackageManager, str], ...] = (
    ("pnpm", "pnpm-lock.yaml"),
    ("yarn", "yarn.lock"),
    ("bun", "bun.lockb"),
)

# Answers for react-native-clean-project's prompts: yes to the caches,
# no to wiping the ios/ and android/ projects themselves.
CLEAN_PROJECT_ANSWERS = "y\ny\ny\ny\nn\ny\ny\ny\nn\n"

GLOBAL_GRADLE_DIRS: tuple[tuple[str, str], ...] = (
    ("caches", "Cleaning Gradle caches"),
    ("daemon", "Cleaning Gradle daemon"),
    ("native", "Cleaning Gradle native"),
    ("kotlin", "Cleaning Gradle kotlin"),
)


def _gradlew(*args: str) -> list[str]:
    """Run the Gradle wrapper in a login shell.

    A login shell reads the user's profile, where JAVA_HOME and
    ANDROID_HOME are usually exported; a bare exec from a GUI or a
    minimal shell would not see them.
    """
    return ["bash", "-lc", shlex.join(["./gradlew", *args])]


def detect_package_manager(probe: ProjectProbe) -> PackageManager:
    """Pick the package manager whose CLI is installed and lockfile present.

    Falls back to npm. Call before any removal is planned.
    """
    for pm, lockfile in PM_LOCKFILES:
        if probe.has_tool(pm) and probe.is_file(lockfile):
            return pm
    return "npm"


class _PlanBuilder:
    """Accumulates entries while keeping the probe in step with removals."""

    def __init__(self, plan: CleanupPlan, probe: ProjectProbe):
        self.plan = plan
        self.probe = probe
        self.root = str(probe.root)

    def cwd(self, rel: str = "") -> str:
        return str(self.probe.root / rel) if rel else self.root

    def remove(self, op_id: str, description: str, *paths: str) -> None:
        self.plan.add(
            Operation(
                id=op_id,
                description=description,
                adapter="filesystem",
                params={"paths": list(paths)},
                cwd=self.root,
                destructive=True,
            )
        )
        self.probe.mark_removed(p for p in paths if not p.startswith("~"))

    def command(
        self,
        op_id: str,
        description: str,
        argv: list[str],
        cwd: str | None = None,
        destructive: bool = False,
        stdin: str | None = None,
        fallback: Operation | None = None,
    ) -> None:
        params: dict = {"argv": argv}
        if stdin is not None:
            params["input"] = stdin
        self.plan.add(
            Operation(
                id=op_id,
                description=description,
                params=params,
                cwd=cwd or self.root,
                destructive=destructive,
                fallback=fallback,
            )
        )

    def skip(self, description: str, reason: str) -> None:
        self.plan.not_applicable(description, reason)


def build_plan(config: CleanConfig, probe: ProjectProbe) -> CleanupPlan:
    """Build the ordered cleanup plan for a configuration and project state.

    Args:
        config: Resolved configuration.
        probe: Read-only probe over the project root. It is mutated only
            to remember planned removals; nothing on disk is touched.

    Returns:
        CleanupPlan whose planned entries are exactly what will execute.
    """
    pm = config.package_manager or detect_package_manager(probe)
    plan = CleanupPlan(package_manager=pm, project_root=str(probe.root))
    b = _PlanBuilder(plan, probe)

    _plan_clean_project(b, config)
    _plan_js_removal(b, config, pm)
    if config.ios:
        _plan_ios(b)
    if config.android:
        _plan_android(b, config)
    _plan_watchman(b)
    _plan_cache_clean(b, pm)
    if config.install:
        _plan_install(b, config, pm)
    else:
        b.skip(f"Installing JS dependencies ({pm})", "disabled (--no-install)")
    _plan_pods(b, config)
    if config.android and probe.is_executable("android/gradlew"):
        b.command(
            "gradle-clean",
            "Gradle clean (no-daemon)",
            _gradlew("clean", "--no-daemon"),
            cwd=b.cwd("android"),
        )

    logger.debug(
        "Planned %d of %d steps (pm=%s)", len(plan.planned), len(plan.entries), pm
    )
    return plan


# ── Sections ────────────────────────────────────────────────────


def _plan_clean_project(b: _PlanBuilder, config: CleanConfig) -> None:
    description = "npx react-native-clean-project"
    if not config.clean_project:
        b.skip(description, "disabled (--no-clean-project)")
    elif not b.probe.has_tool("npx"):
        b.skip(description, "npx not found")
    else:
        b.command(
            "rn-clean-project",
            description,
            ["npx", "react-native-clean-project"],
            destructive=True,
            stdin=CLEAN_PROJECT_ANSWERS,
        )


def _plan_js_removal(b: _PlanBuilder, config: CleanConfig, pm: str) -> None:
    b.remove("remove-node-modules", "Removing node_modules", "node_modules")
    for lockfile in LOCKFILES:
        if not b.probe.is_file(lockfile):
            continue
        description = f"Removing {lockfile}"
        if lockfile == "package-lock.json" and pm == "npm" and config.npm_ci and config.install:
            b.skip(description, "kept for npm ci")
            continue
        b.remove(f"remove-{lockfile}", description, lockfile)


def _plan_ios(b: _PlanBuilder) -> None:
    if not b.probe.is_dir("ios"):
        b.skip("iOS cleanup", "iOS directory not found")
        return
    b.remove("ios-pods", "Cleaning iOS Pods", "ios/Pods", "ios/Podfile.lock")
    b.remove("ios-build", "Cleaning iOS build", "ios/build")
    if b.probe.is_macos:
        b.remove(
            "xcode-derived-data",
            "Cleaning Xcode DerivedData",
            "~/Library/Developer/Xcode/DerivedData",
        )
    else:
        b.skip("Cleaning Xcode DerivedData", "non-macOS host")


def _plan_android(b: _PlanBuilder, config: CleanConfig) -> None:
    if not b.probe.is_dir("android"):
        b.skip("Android cleanup", "Android directory not found")
        return
    b.remove("android-gradle", "Cleaning Android .gradle (project)", "android/.gradle")
    b.remove(
        "android-build", "Cleaning Android build dirs", "android/build", "android/app/build"
    )
    b.remove("local-gradle", "Cleaning local .gradle", ".gradle")
    b.remove(
        "android-cxx", "Cleaning Android CMake (.cxx)", "android/.cxx", "android/app/.cxx"
    )
    for name, description in GLOBAL_GRADLE_DIRS:
        if config.global_gradle_caches:
            b.remove(f"gradle-{name}", description, f"~/.gradle/{name}/")
        else:
            b.skip(description, "disabled (--no-global-gradle)")
    if b.probe.is_executable("android/gradlew"):
        b.command(
            "gradle-stop",
            "Stopping Gradle daemon",
            _gradlew("--stop"),
            cwd=b.cwd("android"),
        )


def _plan_watchman(b: _PlanBuilder) -> None:
    description = "Clearing Watchman watches"
    if b.probe.has_tool("watchman"):
        b.command("watchman", description, ["watchman", "watch-del-all"])
    else:
        b.skip(description, "Watchman not found")


def _plan_cache_clean(b: _PlanBuilder, pm: str) -> None:
    if pm == "npm":
        b.command(
            "npm-cache", "Cleaning npm cache", ["npm", "cache", "clean", "--force"],
            destructive=True,
        )
    elif pm == "yarn":
        b.command("yarn-cache", "Cleaning yarn cache", ["yarn", "cache", "clean"], destructive=True)
    elif pm == "pnpm":
        b.command("pnpm-store", "Pruning pnpm store", ["pnpm", "store", "prune"], destructive=True)
    else:
        b.skip("Cleaning bun cache", "Bun has no cache clean command")


def _plan_install(b: _PlanBuilder, config: CleanConfig, pm: str) -> None:
    if pm != "npm":
        b.command(f"{pm}-install", f"{pm} install", [pm, "install"])
        return

    if config.npm_ci and b.probe.is_file("package-lock.json"):
        description = "npm ci (legacy-peer-deps ignored by ci)" if config.legacy_peer_deps else "npm ci"
        b.command("npm-ci", description, ["npm", "ci"])
    elif config.legacy_peer_deps:
        b.command(
            "npm-install",
            "npm install --legacy-peer-deps",
            ["npm", "install", "--legacy-peer-deps"],
        )
    else:
        b.command("npm-install", "npm install", ["npm", "install"])


def _plan_pods(b: _PlanBuilder, config: CleanConfig) -> None:
    if not (config.ios and config.pods):
        return
    if not b.probe.is_macos:
        b.skip("pod install", "CocoaPods install skipped on non-macOS")
        return
    if not b.probe.is_dir("ios"):
        return
    if not b.probe.has_tool("pod"):
        b.skip("pod install", "CocoaPods not found")
        return

    ios = b.cwd("ios")
    fallback = Operation(
        id="pod-install-repo-update",
        description="pod install --repo-update",
        params={"argv": ["pod", "install", "--repo-update"]},
        cwd=ios,
    )
    b.command("pod-install", "pod install", ["pod", "install"], cwd=ios, fallback=fallback)
