"""
Branch manager configuration file

Plain KEY=value lines, with # comments and optional quotes, stored at
~/.config/branch_manager/config by default. Values override the
branch_manager section of the global configuration.
"""

from pathlib import Path
from typing import Dict, Optional, Union

from loguru import logger
from pydantic import ValidationError

from ..config.settings import BranchManagerConfig

FILE_KEYS: Dict[str, str] = {
    "DEFAULT_BASE_BRANCH": "default_base_branch",
    "DEFAULT_WORKFLOW": "default_workflow",
    "AUTO_CLEANUP_MERGED": "auto_cleanup_merged",
    "CONFLICT_RESOLUTION_TOOL": "conflict_resolution_tool",
    "BACKUP_RETENTION_DAYS": "backup_retention_days",
    "LOG_LEVEL": "log_level",
    "AUTO_FETCH": "auto_fetch",
    "REQUIRE_CONFIRMATION": "require_confirmation",
    "GIT_TIMEOUT": "git_timeout",
    "PROTECTED_BRANCHES": "protected_branches",
}

HEADER = "# Branch Manager Configuration\n# Generated by branch-manager\n"


def parse_config_text(text: str) -> Dict[str, str]:
    """KEY=value pairs from config text; unknown keys are kept, blank lines and comments skipped."""
    values: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        values[key.strip()] = value
    return values


def _field_value(field: str, value: str):
    if field == "protected_branches":
        return [b.strip() for b in value.split(",") if b.strip()]
    return value


def apply_file_values(
    base: BranchManagerConfig, values: Dict[str, str]
) -> BranchManagerConfig:
    """Overlay parsed file values onto a config key by key; an invalid value keeps its base value."""
    cfg = base
    for key, value in values.items():
        field = FILE_KEYS.get(key)
        if field is None:
            logger.debug(f"Ignoring unknown branch manager setting {key}")
            continue
        data = cfg.model_dump()
        data[field] = _field_value(field, value)
        try:
            cfg = BranchManagerConfig.model_validate(data)
        except ValidationError as e:
            logger.warning(
                f"⚠️ Ignoring invalid {key}={value!r}: {e.errors()[0]['msg']}"
            )
    return cfg


def render_config(cfg: BranchManagerConfig) -> str:
    lines = [HEADER]
    for key, field in FILE_KEYS.items():
        value = getattr(cfg, field)
        if isinstance(value, bool):
            text = "true" if value else "false"
        elif isinstance(value, list):
            text = ",".join(value)
        elif isinstance(value, float) and value.is_integer():
            text = str(int(value))
        else:
            text = str(value)
        if " " in text:
            text = f'"{text}"'
        lines.append(f"{key}={text}")
    return "\n".join(lines) + "\n"


def save_branch_config(cfg: BranchManagerConfig, path: Optional[Union[str, Path]] = None) -> Path:
    target = Path(path or cfg.config_path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_config(cfg), encoding="utf-8")
    logger.info(f"📝 Saved branch manager configuration to {target}")
    return target


def load_branch_config(
    base: Optional[BranchManagerConfig] = None,
    path: Optional[Union[str, Path]] = None,
    create: bool = True,
) -> BranchManagerConfig:
    """
    Load the configuration file on top of base.

    A missing file is created with the base values when create is True.
    """
    base = base or BranchManagerConfig()
    target = Path(path or base.config_path).expanduser()
    if not target.exists():
        if create:
            save_branch_config(base, target)
        return base

    try:
        text = target.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"⚠️ Failed to read {target}: {e}")
        return base
    cfg = apply_file_values(base, parse_config_text(text))
    return cfg.model_copy(update={"config_path": str(target)})
