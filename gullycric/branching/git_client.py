"""
Thin git wrapper

Runs git through subprocess with captured text output. Failures raise
GitCommandError carrying the exit code, the command, stderr and an
ErrorCategory derived from both.
"""

import shlex
import subprocess
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from loguru import logger


class ErrorCategory(str, Enum):
    GIT_COMMAND = "GIT_COMMAND"
    NETWORK = "NETWORK"
    PERMISSION = "PERMISSION"
    REPOSITORY = "REPOSITORY"
    USER_INPUT = "USER_INPUT"
    SYSTEM = "SYSTEM"
    CONFLICT = "CONFLICT"
    AUTHENTICATION = "AUTHENTICATION"
    TIMEOUT = "TIMEOUT"


CATEGORY_DESCRIPTIONS = {
    ErrorCategory.GIT_COMMAND: "Git command execution failed",
    ErrorCategory.NETWORK: "Network or remote repository issue",
    ErrorCategory.PERMISSION: "File system permission issue",
    ErrorCategory.REPOSITORY: "Repository state or integrity issue",
    ErrorCategory.USER_INPUT: "Invalid user input or configuration",
    ErrorCategory.SYSTEM: "System or environment issue",
    ErrorCategory.CONFLICT: "Merge or rebase conflict",
    ErrorCategory.AUTHENTICATION: "Authentication or credential issue",
    ErrorCategory.TIMEOUT: "Git command timed out",
}


def categorize_git_error(exit_code: int, error_output: str) -> ErrorCategory:
    """Classify a failed git invocation by exit code first, then by its stderr."""
    if exit_code == 1:
        if "Permission denied" in error_output:
            return ErrorCategory.PERMISSION
        if "not a git repository" in error_output:
            return ErrorCategory.REPOSITORY
        if "merge conflict" in error_output or "CONFLICT" in error_output:
            return ErrorCategory.CONFLICT
        return ErrorCategory.GIT_COMMAND
    if exit_code == 128:
        if "not a git repository" in error_output or "invalid object name" in error_output:
            return ErrorCategory.REPOSITORY
        return ErrorCategory.GIT_COMMAND
    if exit_code == 129:
        return ErrorCategory.USER_INPUT
    if "Could not resolve hostname" in error_output or "Connection refused" in error_output:
        return ErrorCategory.NETWORK
    if "Authentication failed" in error_output or "Permission denied (publickey)" in error_output:
        return ErrorCategory.AUTHENTICATION
    if "Permission denied" in error_output:
        return ErrorCategory.PERMISSION
    return ErrorCategory.SYSTEM


class GitCommandError(Exception):
    def __init__(
        self,
        command: List[str],
        exit_code: int,
        stderr: str = "",
        category: Optional[ErrorCategory] = None,
    ):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr.strip()
        self.category = category or categorize_git_error(exit_code, stderr)
        message = f"{shlex.join(command)} failed with exit code {exit_code}"
        if self.stderr:
            message += f": {self.stderr}"
        super().__init__(message)

    @property
    def description(self) -> str:
        return CATEGORY_DESCRIPTIONS[self.category]


class GitResult:
    def __init__(self, command: List[str], returncode: int, stdout: str, stderr: str):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return self.stdout.strip()

    def lines(self) -> List[str]:
        return [line for line in self.stdout.splitlines() if line.strip()]


class GitClient:
    def __init__(self, cwd: Optional[Union[str, Path]] = None, timeout: float = 60.0):
        self.cwd = str(cwd) if cwd is not None else None
        self.timeout = timeout

    def run(self, *args: str, check: bool = True, timeout: Optional[float] = None) -> GitResult:
        command = ["git", *args]
        logger.debug(f"$ {shlex.join(command)}")
        try:
            completed = subprocess.run(
                command,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=timeout or self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise GitCommandError(
                command, 124, f"timed out after {timeout or self.timeout:g}s", ErrorCategory.TIMEOUT
            )
        except FileNotFoundError as e:
            raise GitCommandError(command, 127, str(e), ErrorCategory.SYSTEM)

        result = GitResult(command, completed.returncode, completed.stdout, completed.stderr)
        if check and not result.ok:
            # Conflict reports go to stdout
            raise GitCommandError(
                command, result.returncode, (result.stderr + "\n" + result.stdout).strip()
            )
        return result

    # Queries

    def is_repository(self) -> bool:
        return self.run("rev-parse", "--git-dir", check=False).ok

    def current_branch(self) -> Optional[str]:
        """Current branch name, or None when HEAD is detached."""
        return self.run("branch", "--show-current").output or None

    def branch_exists(self, name: str) -> bool:
        return self.run("show-ref", "--verify", "--quiet", f"refs/heads/{name}", check=False).ok

    def local_branches(self) -> List[str]:
        return self.run("for-each-ref", "--format=%(refname:short)", "refs/heads/").lines()

    def has_uncommitted_changes(self) -> bool:
        """Modified or staged tracked files."""
        return bool(self.changed_files())

    def changed_files(self) -> List[str]:
        """Paths with tracked changes; a rename or copy reports its new path."""
        output = self.run("status", "--porcelain=v1", "-z", "--untracked-files=no").stdout
        entries = iter(output.split("\0"))
        files = []
        for entry in entries:
            if not entry:
                continue
            files.append(entry[3:])
            # -z puts the source path of a rename or copy in its own entry
            if entry[0] in "RC" or entry[1] in "RC":
                next(entries, None)
        return files

    def untracked_files(self) -> List[str]:
        return self.run("ls-files", "--others", "--exclude-standard").lines()

    def upstream_of(self, branch: str) -> Optional[str]:
        result = self.run(
            "rev-parse", "--abbrev-ref", "--symbolic-full-name", f"{branch}@{{upstream}}", check=False
        )
        return result.output if result.ok and result.output else None

    def ahead_behind(self, branch: str, other: str) -> Tuple[int, int]:
        """Commits on branch not on other, and on other not on branch."""
        counts = self.run("rev-list", "--left-right", "--count", f"{branch}...{other}").output
        ahead, behind = counts.split()
        return int(ahead), int(behind)

    def remotes(self) -> List[str]:
        return self.run("remote").lines()

    def merged_branches(self, target: str) -> List[str]:
        return [
            line.lstrip("*+ ").strip()
            for line in self.run("branch", "--merged", target).lines()
        ]

    def rev_parse(self, ref: str) -> str:
        return self.run("rev-parse", ref).output

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        return self.run("merge-base", "--is-ancestor", ancestor, descendant, check=False).ok

    def conflicted_files(self) -> List[str]:
        return self.run("diff", "--name-only", "--diff-filter=U").lines()

    def repository_root(self) -> Path:
        return Path(self.run("rev-parse", "--show-toplevel").output)
