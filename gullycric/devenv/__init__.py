"""Flutter and Android development environment setup."""

from .environment import DevEnvironment, detect_environment, render_exports, write_exports
from .phases import (
    EnvironmentSetup,
    Phase,
    PhaseResult,
    ValidationReport,
    install_system_packages,
    validate,
)
from .probe import ToolProbe, ToolStatus
from .runner import CommandError, CommandResult, CommandRunner

__all__ = [
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "DevEnvironment",
    "EnvironmentSetup",
    "Phase",
    "PhaseResult",
    "ToolProbe",
    "ToolStatus",
    "ValidationReport",
    "detect_environment",
    "install_system_packages",
    "render_exports",
    "validate",
    "write_exports",
]
