"""
Development environment setup phases

Phases run in a fixed order: system packages, Flutter SDK, Android SDK,
shell exports, validation. `complete` runs all of them and stops at the
first failure. Any failing command fails its phase.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from ..config.settings import DevEnvConfig
from .environment import DevEnvironment, detect_environment, render_exports, write_exports
from .probe import DEFAULT_TOOLS, ToolProbe, ToolStatus
from .runner import CommandError, CommandResult, CommandRunner

FLUTTER_REPO = "https://github.com/flutter/flutter.git"
ANDROID_PACKAGES = ["platform-tools", "platforms;android-34", "build-tools;34.0.0"]
REQUIRED_TOOLS = ["git", "curl", "unzip", "java", "flutter", "dart"]


class Phase(str, Enum):
    SYSTEM = "system"
    FLUTTER = "flutter"
    ANDROID = "android"
    EXPORT = "export"
    VALIDATE = "validate"
    COMPLETE = "complete"


PHASE_ORDER = [Phase.SYSTEM, Phase.FLUTTER, Phase.ANDROID, Phase.EXPORT, Phase.VALIDATE]


class PhaseResult(BaseModel):
    phase: Phase
    ok: bool
    message: str = ""
    commands: List[str] = Field(default_factory=list)


class ValidationCheck(BaseModel):
    name: str
    ok: bool
    required: bool = True
    detail: Optional[str] = None


class ValidationReport(BaseModel):
    checks: List[ValidationCheck] = Field(default_factory=list)

    @property
    def all_ok(self) -> bool:
        return all(check.ok for check in self.checks if check.required)

    @property
    def missing(self) -> List[str]:
        return [check.name for check in self.checks if check.required and not check.ok]


def _is_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


def install_system_packages(
    runner: CommandRunner, packages: List[str], as_root: Optional[bool] = None
) -> CommandResult:
    """Refresh apt indexes and install packages, through sudo unless already root."""
    if not packages:
        raise ValueError("No packages to install")
    as_root = _is_root() if as_root is None else as_root
    prefix = [] if as_root else ["sudo"]
    runner.run(prefix + ["apt-get", "update"])
    return runner.run(prefix + ["apt-get", "install", "-y"] + list(packages))


def validate(
    env: DevEnvironment,
    probe: Optional[ToolProbe] = None,
    tools: Optional[List[str]] = None,
) -> ValidationReport:
    """Check tools on PATH and that the resolved SDK directories exist."""
    probe = probe or ToolProbe()
    checks: List[ValidationCheck] = []

    statuses: List[ToolStatus] = probe.probe_all(tools or DEFAULT_TOOLS)
    for status in statuses:
        checks.append(
            ValidationCheck(
                name=status.name,
                ok=status.found,
                required=status.name in REQUIRED_TOOLS,
                detail=status.version or status.path or "not found on PATH",
            )
        )

    for variable, directory in (
        ("FLUTTER_ROOT", env.flutter_root),
        ("ANDROID_HOME", env.android_home),
        ("JAVA_HOME", env.java_home),
    ):
        exists = bool(directory) and Path(directory).is_dir()
        checks.append(
            ValidationCheck(
                name=variable,
                ok=exists,
                detail=directory if directory else "not set",
            )
        )

    report = ValidationReport(checks=checks)
    if report.all_ok:
        logger.info("✅ Development environment looks complete")
    else:
        logger.warning(f"⚠️ Missing: {', '.join(report.missing)}")
    return report


class EnvironmentSetup:
    """Runs setup phases against one configuration and command runner."""

    def __init__(
        self,
        cfg: Optional[DevEnvConfig] = None,
        runner: Optional[CommandRunner] = None,
        probe: Optional[ToolProbe] = None,
        environ: Optional[Dict[str, str]] = None,
        as_root: Optional[bool] = None,
    ):
        self.cfg = cfg or DevEnvConfig()
        self.runner = runner or CommandRunner(timeout=self.cfg.command_timeout)
        self.probe = probe or ToolProbe()
        self.environ = environ
        self.as_root = as_root
        self.report: Optional[ValidationReport] = None

    @property
    def rc_file(self) -> Path:
        return Path(self.cfg.rc_file or "~/.bashrc").expanduser()

    def environment(self) -> DevEnvironment:
        return detect_environment(self.cfg, self.environ, self.probe.which)

    # Phases

    def system(self) -> str:
        install_system_packages(self.runner, self.cfg.system_packages, self.as_root)
        return f"Installed {len(self.cfg.system_packages)} system packages"

    def flutter(self) -> str:
        existing = self.probe.probe("flutter", with_version=False)
        if existing.found:
            return f"Flutter already installed at {existing.path}"

        target = Path(self.cfg.flutter_dir or "~/flutter").expanduser()
        if target.exists() and any(target.iterdir()):
            raise CommandError(["git", "clone"], 1, f"{target} exists and is not empty")
        self.runner.run(["git", "clone", FLUTTER_REPO, "-b", "stable", "--depth", "1", str(target)])
        flutter = str(target / "bin" / "flutter")
        self.runner.run([flutter, "config", "--no-analytics"])
        self.runner.run([flutter, "precache"])
        return f"Flutter installed at {target}"

    def android(self) -> str:
        env = self.environment()
        sdkmanager = self.probe.which("sdkmanager")
        if sdkmanager is None and env.android_home:
            candidate = Path(env.android_home) / "cmdline-tools" / "latest" / "bin" / "sdkmanager"
            sdkmanager = str(candidate) if candidate.exists() else None
        if sdkmanager is None:
            raise CommandError(
                ["sdkmanager"],
                127,
                "sdkmanager not found; install the Android command-line tools "
                "into $ANDROID_HOME/cmdline-tools/latest",
            )

        self.runner.run([sdkmanager, "--licenses"], input="y\n" * 20)
        self.runner.run([sdkmanager] + ANDROID_PACKAGES)
        flutter = self.probe.which("flutter")
        if flutter and env.android_home:
            self.runner.run([flutter, "config", "--android-sdk", env.android_home])
        return f"Installed Android packages: {', '.join(ANDROID_PACKAGES)}"

    def export(self) -> str:
        block = render_exports(self.environment())
        if self.runner.dry_run:
            logger.info(f"Would write to {self.rc_file}:\n{block}")
            return f"Exports for {self.rc_file} rendered (dry run)"
        changed = write_exports(self.rc_file, block)
        return f"{'Updated' if changed else 'Unchanged'} {self.rc_file}"

    def validate(self) -> str:
        self.report = validate(self.environment(), self.probe)
        if not self.report.all_ok:
            raise CommandError(["validate"], 1, f"missing {', '.join(self.report.missing)}")
        return "All checks passed"

    def run_phase(self, phase: Phase) -> PhaseResult:
        handlers: Dict[Phase, Callable[[], str]] = {
            Phase.SYSTEM: self.system,
            Phase.FLUTTER: self.flutter,
            Phase.ANDROID: self.android,
            Phase.EXPORT: self.export,
            Phase.VALIDATE: self.validate,
        }
        logger.info(f"🔧 Phase: {phase.value}")
        start = len(self.runner.history)
        try:
            message = handlers[phase]()
        except (CommandError, OSError, ValueError) as e:
            logger.error(f"❌ Phase {phase.value} failed: {e}")
            return PhaseResult(
                phase=phase,
                ok=False,
                message=str(e),
                commands=[r.display for r in self.runner.history[start:]],
            )
        logger.info(f"✅ {message}")
        return PhaseResult(
            phase=phase,
            ok=True,
            message=message,
            commands=[r.display for r in self.runner.history[start:]],
        )

    def run(self, phase: Phase) -> List[PhaseResult]:
        """Run one phase, or every phase in order for `complete`."""
        phases = PHASE_ORDER if phase == Phase.COMPLETE else [phase]
        results = []
        for step in phases:
            result = self.run_phase(step)
            results.append(result)
            if not result.ok:
                break
        return results
