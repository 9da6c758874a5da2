"""
Global Configuration System for GullyCric

Centralized configuration for storage, connectivity, authentication rules,
match limits, the branch manager and the development environment helper.
Provides type-safe configuration with validation and environment variable support.
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field, field_validator, model_validator


class StorageConfig(BaseModel):
    """Local key-value storage configuration"""

    data_dir: str = Field(
        default=str(Path.home() / ".gullycric"),
        description="Directory holding the local store file",
    )
    store_file: str = Field(
        default="store.json", description="Name of the JSON key-value store file"
    )
    seed_mock_data: bool = Field(
        default=True,
        description="Seed local storage from the mock backend when it is empty",
    )
    mock_match_count: int = Field(
        default=5, description="Matches generated when seeding", ge=1, le=50
    )
    mock_seed: int = Field(default=42, description="Random seed for mock data")

    @property
    def store_path(self) -> Path:
        return Path(self.data_dir).expanduser() / self.store_file


class NetworkConfig(BaseModel):
    """Connectivity probe configuration"""

    offline: bool = Field(
        default=False, description="Force offline mode (local data only)"
    )
    probe_host: str = Field(default="8.8.8.8", description="Host used for probing")
    probe_port: int = Field(default=53, description="Port used for probing", ge=1, le=65535)
    probe_timeout: float = Field(
        default=1.5, description="Probe timeout in seconds", gt=0.0, le=30.0
    )
    simulated_latency: float = Field(
        default=0.0, description="Mock backend latency in seconds", ge=0.0, le=5.0
    )


class AuthConfig(BaseModel):
    """Authentication rules"""

    min_login_password_length: int = Field(
        default=6, description="Minimum password length accepted at login", ge=1
    )
    min_password_length: int = Field(
        default=8, description="Minimum password length for new passwords", ge=6
    )
    max_password_length: int = Field(
        default=128, description="Maximum password length", ge=16, le=1024
    )
    otp_length: int = Field(default=6, description="OTP digits", ge=4, le=8)
    session_hours: int = Field(
        default=24, description="Session lifetime in hours", ge=1, le=24 * 30
    )


class MatchConfig(BaseModel):
    """Match creation limits"""

    default_overs: int = Field(default=20, description="Default overs per side", ge=1)
    max_overs: int = Field(default=50, description="Maximum overs per side", ge=1, le=90)
    min_players_per_team: int = Field(
        default=1, description="Minimum players per team", ge=1
    )
    max_players_per_team: int = Field(
        default=11, description="Maximum players per team", ge=1, le=15
    )


class BranchManagerConfig(BaseModel):
    """Git branch manager defaults"""

    default_base_branch: str = Field(default="main", description="Base for new branches")
    default_workflow: str = Field(default="github-flow", description="Naming workflow")
    auto_cleanup_merged: bool = Field(default=True)
    backup_retention_days: int = Field(
        default=7, ge=0, description="Days to keep safety backups; 0 disables them"
    )
    auto_fetch: bool = Field(default=True, description="Fetch before sync/merge")
    require_confirmation: bool = Field(
        default=True, description="Prompt before destructive operations"
    )
    git_timeout: float = Field(
        default=60.0, description="Timeout for a single git command", gt=0.0
    )
    protected_branches: List[str] = Field(
        default_factory=lambda: ["main", "master", "develop", "dev"]
    )
    conflict_resolution_tool: str = Field(
        default="code --wait", description="Tool opened on conflicted files by merge --merge-tool"
    )
    log_level: str = Field(default="INFO", description="Branch manager log level")
    config_path: str = Field(
        default=str(Path.home() / ".config" / "branch_manager" / "config"),
        description="Branch manager key=value configuration file",
    )

    @field_validator("default_workflow")
    @classmethod
    def validate_workflow(cls, v):
        if v not in ("github-flow", "gitflow", "custom"):
            raise ValueError("default_workflow must be github-flow, gitflow or custom")
        return v


class DevEnvConfig(BaseModel):
    """Flutter/Android development environment settings"""

    flutter_dir: Optional[str] = Field(default=None, description="Flutter SDK root")
    android_sdk_dir: Optional[str] = Field(default=None, description="Android SDK root")
    java_home: Optional[str] = Field(default=None, description="JDK root")
    rc_file: Optional[str] = Field(
        default=None, description="Shell rc file receiving exports (default: ~/.bashrc)"
    )
    system_packages: List[str] = Field(
        default_factory=lambda: [
            "curl",
            "git",
            "unzip",
            "xz-utils",
            "zip",
            "libglu1-mesa",
            "openjdk-17-jdk",
        ]
    )
    command_timeout: float = Field(default=900.0, gt=0.0)


class GullyCricConfig(BaseModel):
    """Master GullyCric Configuration Container"""

    storage: StorageConfig = Field(
        default_factory=StorageConfig, description="Local storage configuration"
    )
    network: NetworkConfig = Field(
        default_factory=NetworkConfig, description="Connectivity configuration"
    )
    auth: AuthConfig = Field(
        default_factory=AuthConfig, description="Authentication configuration"
    )
    match: MatchConfig = Field(
        default_factory=MatchConfig, description="Match rules configuration"
    )
    branch_manager: BranchManagerConfig = Field(
        default_factory=BranchManagerConfig,
        description="Branch manager configuration",
    )
    devenv: DevEnvConfig = Field(
        default_factory=DevEnvConfig, description="Development environment"
    )

    @model_validator(mode="after")
    def validate_config_consistency(self):
        """Validate cross-field consistency"""
        if self.match.min_players_per_team > self.match.max_players_per_team:
            raise ValueError(
                "match.min_players_per_team must not exceed max_players_per_team"
            )
        if self.match.default_overs > self.match.max_overs:
            raise ValueError("match.default_overs must not exceed max_overs")
        if self.auth.min_password_length > self.auth.max_password_length:
            raise ValueError(
                "auth.min_password_length must not exceed max_password_length"
            )
        return self


SECTIONS = tuple(GullyCricConfig.model_fields.keys())


def _coerce_env_value(value: str):
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    try:
        if "." in value:
            return float(value)
    except ValueError:
        pass
    return value


def _env_overrides(environ: Dict[str, str]) -> Dict[str, Dict]:
    """
    Parse GULLYCRIC_{SECTION}_{FIELD} variables into nested overrides.

    Section names may contain underscores (branch_manager), so the longest
    known section prefix wins.
    """
    overrides: Dict[str, Dict] = {}
    for env_var, value in environ.items():
        if not env_var.startswith("GULLYCRIC_"):
            continue
        rest = env_var[len("GULLYCRIC_") :].lower()
        section = next(
            (
                s
                for s in sorted(SECTIONS, key=len, reverse=True)
                if rest.startswith(s + "_")
            ),
            None,
        )
        if section is None:
            continue
        field = rest[len(section) + 1 :]
        overrides.setdefault(section, {})[field] = _coerce_env_value(value)
    return overrides


def load_config(
    config_path: Optional[Path] = None,
    config_data: Optional[Dict] = None,
    environ: Optional[Dict[str, str]] = None,
) -> GullyCricConfig:
    """
    Load configuration with environment variable overrides and optional config file

    Args:
        config_path: Optional path to JSON configuration file
        config_data: Optional dictionary of configuration data
        environ: Environment mapping (defaults to os.environ)

    Environment variables can override any config value using the pattern:
    GULLYCRIC_{SECTION}_{FIELD} = value

    Example: GULLYCRIC_NETWORK_OFFLINE=true
    """
    config_dict: Dict = {}

    if config_path and config_path.exists():
        try:
            with open(config_path, "r") as f:
                if config_path.suffix.lower() == ".json":
                    config_dict = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"⚠️ Failed to load config file {config_path}: {e}")

    if config_data:
        for section, fields in config_data.items():
            if isinstance(fields, dict):
                config_dict.setdefault(section, {}).update(fields)
            else:
                config_dict[section] = fields

    env = os.environ if environ is None else environ
    for section, fields in _env_overrides(env).items():
        config_dict.setdefault(section, {}).update(fields)

    try:
        return GullyCricConfig(**config_dict)
    except ValueError as e:
        logger.warning(f"⚠️ Configuration validation failed: {e}")
        logger.warning("Using default configuration...")
        return GullyCricConfig()


# Global configuration instance
config = load_config()
