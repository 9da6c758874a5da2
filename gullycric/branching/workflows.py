"""Branch naming workflows and name validation."""

import re
from typing import Dict, List, Optional

WORKFLOW_PATTERNS: Dict[str, List[str]] = {
    "github-flow": ["feature/", "hotfix/"],
    "gitflow": ["feature/", "develop/", "release/", "hotfix/"],
    "custom": ["feat/", "fix/", "chore/"],
}

WORKFLOW_GUIDANCE: Dict[str, str] = {
    "github-flow": "Create feature branches from main and merge back to main when ready",
    "gitflow": "Features and releases branch from develop; hotfixes branch from main",
    "custom": "Use the configured prefixes: feat/, fix/, chore/",
}

RESERVED_NAMES = ("HEAD", "master", "main", "origin", "upstream")
BRANCH_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9/_-]+$")

# Branch type aliases per workflow
_TYPE_PREFIXES: Dict[str, Dict[str, str]] = {
    "github-flow": {"feature": "feature/", "feat": "feature/", "hotfix": "hotfix/", "fix": "hotfix/"},
    "gitflow": {
        "feature": "feature/",
        "feat": "feature/",
        "release": "release/",
        "rel": "release/",
        "hotfix": "hotfix/",
        "fix": "hotfix/",
        "develop": "develop/",
        "dev": "develop/",
    },
}


def validate_branch_name(name: str) -> Optional[str]:
    """Return an error message, or None when the name is acceptable."""
    if not name:
        return "Branch name cannot be empty"
    if not BRANCH_NAME_PATTERN.match(name):
        return (
            "Branch name contains invalid characters. Use only letters, numbers, "
            "hyphens, underscores, and forward slashes."
        )
    if name in RESERVED_NAMES:
        return f"Branch name '{name}' is reserved"
    return None


def workflow_prefixes(workflow: str) -> List[str]:
    if workflow not in WORKFLOW_PATTERNS:
        raise ValueError(f"Unknown workflow: {workflow}")
    return WORKFLOW_PATTERNS[workflow]


def follows_convention(name: str, workflow: str) -> bool:
    return any(name.startswith(prefix) for prefix in workflow_prefixes(workflow))


def slugify(description: str) -> str:
    slug = re.sub(r"[^a-z0-9]", "-", description.lower())
    return re.sub(r"-+", "-", slug).strip("-")


def suggest_branch_name(
    workflow: str, branch_type: str = "feature", description: str = "new-feature"
) -> str:
    """
    Build a conventional branch name, e.g. feature/user-login.

    Unknown branch types fall back to feature/. The custom workflow always
    uses its first prefix.
    """
    prefixes = workflow_prefixes(workflow)
    slug = slugify(description) or "new-feature"
    if workflow == "custom":
        return f"{prefixes[0]}{slug}"
    prefix = _TYPE_PREFIXES[workflow].get(branch_type.lower(), "feature/")
    return f"{prefix}{slug}"
