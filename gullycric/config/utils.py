"""
Configuration Utilities

Helper functions for managing GullyCric configuration including validation,
export, comparison and summaries.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger
from pydantic import ValidationError

from .settings import GullyCricConfig


def export_config_to_json(config: GullyCricConfig, output_path: Path) -> None:
    """
    Export configuration to JSON file

    Args:
        config: GullyCricConfig instance to export
        output_path: Path where to save the JSON file
    """
    config_dict = config.model_dump()

    with open(output_path, "w") as f:
        json.dump(config_dict, f, indent=2, default=str)

    logger.info(f"✅ Configuration exported to {output_path}")


def validate_config_file(config_path: Path) -> List[str]:
    """
    Validate a configuration file and return any issues

    Unlike load_config, this does not fall back to defaults, so problems are
    reported instead of silently replaced.

    Returns:
        List of validation messages (empty if valid)
    """
    try:
        with open(config_path, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        return [f"Cannot read configuration file: {e}"]

    try:
        GullyCricConfig(**data)
    except ValidationError as e:
        return [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
    except ValueError as e:
        return [f"Configuration validation failed: {e}"]
    return []


def compare_configs(config1: GullyCricConfig, config2: GullyCricConfig) -> Dict[str, Any]:
    """
    Compare two configurations and return differences

    Returns:
        Dictionary of differences keyed by dotted path
    """
    dict1 = config1.model_dump()
    dict2 = config2.model_dump()

    differences = {}

    def compare_dicts(d1, d2, path=""):
        for key in set(d1.keys()) | set(d2.keys()):
            current_path = f"{path}.{key}" if path else key

            if key not in d1:
                differences[current_path] = {"config1": "<missing>", "config2": d2[key]}
            elif key not in d2:
                differences[current_path] = {"config1": d1[key], "config2": "<missing>"}
            elif isinstance(d1[key], dict) and isinstance(d2[key], dict):
                compare_dicts(d1[key], d2[key], current_path)
            elif d1[key] != d2[key]:
                differences[current_path] = {"config1": d1[key], "config2": d2[key]}

    compare_dicts(dict1, dict2)
    return differences


def config_summary_lines(config: GullyCricConfig) -> List[str]:
    """Human-readable summary of the configuration"""
    return [
        "🔧 GullyCric Configuration Summary",
        f"  • Store: {config.storage.store_path}",
        f"  • Seed mock data: {'On' if config.storage.seed_mock_data else 'Off'}",
        f"  • Offline mode: {'On' if config.network.offline else 'Off'}",
        f"  • Match overs: default {config.match.default_overs}, max {config.match.max_overs}",
        f"  • Players per team: {config.match.min_players_per_team}-{config.match.max_players_per_team}",
        f"  • Session lifetime: {config.auth.session_hours}h",
        f"  • Base branch: {config.branch_manager.default_base_branch}"
        f" ({config.branch_manager.default_workflow})",
    ]


def create_config_template() -> str:
    """JSON template with all available options"""
    return GullyCricConfig().model_dump_json(indent=2)
