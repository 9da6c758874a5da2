"""
GullyCric Configuration Module

Provides centralized configuration management for the entire application.
Import the global config instance to access all configuration values.

Usage:
    from gullycric.config import config

    store_path = config.storage.store_path
    max_overs = config.match.max_overs
    base_branch = config.branch_manager.default_base_branch
"""

from .settings import (
    AuthConfig,
    BranchManagerConfig,
    DevEnvConfig,
    GullyCricConfig,
    MatchConfig,
    NetworkConfig,
    StorageConfig,
    config,
    load_config,
)

__all__ = [
    "GullyCricConfig",
    "StorageConfig",
    "NetworkConfig",
    "AuthConfig",
    "MatchConfig",
    "BranchManagerConfig",
    "DevEnvConfig",
    "config",
    "load_config",
]
