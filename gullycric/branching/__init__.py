"""Git branch management on top of the git command line."""

from .config_file import load_branch_config, save_branch_config
from .git_client import ErrorCategory, GitClient, GitCommandError, categorize_git_error
from .manager import (
    BranchManager,
    BranchManagerError,
    BranchStatus,
    BranchUsageError,
    CleanupResult,
    ConflictComplexity,
    ConflictInfo,
    MergeResult,
    MergeStrategy,
    SyncResult,
    SyncStatus,
    SyncStrategy,
    WorkflowResult,
    analyze_conflict_text,
)
from .workflows import (
    WORKFLOW_PATTERNS,
    follows_convention,
    suggest_branch_name,
    validate_branch_name,
)

__version__ = "1.0.0"

__all__ = [
    "BranchManager",
    "BranchManagerError",
    "BranchStatus",
    "BranchUsageError",
    "CleanupResult",
    "ConflictComplexity",
    "ConflictInfo",
    "ErrorCategory",
    "GitClient",
    "GitCommandError",
    "MergeResult",
    "MergeStrategy",
    "SyncResult",
    "SyncStatus",
    "SyncStrategy",
    "WORKFLOW_PATTERNS",
    "WorkflowResult",
    "analyze_conflict_text",
    "categorize_git_error",
    "follows_convention",
    "load_branch_config",
    "save_branch_config",
    "suggest_branch_name",
    "validate_branch_name",
]
