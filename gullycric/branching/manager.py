"""
Branch manager operations

BranchManager wraps everyday git branch handling: creating and switching
branches, merging with fast-forward detection and conflict analysis,
syncing with upstream, status reporting and cleanup of merged branches.
Merges, cleanups and workflow deletes back up the branch tips they move
or remove first. All git work is delegated to GitClient.
"""

import shlex
import shutil
import subprocess
from datetime import datetime
from enum import Enum
from typing import List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from ..config.settings import BranchManagerConfig
from .backups import Backup, BackupStore
from .git_client import ErrorCategory, GitClient, GitCommandError
from .workflows import follows_convention, validate_branch_name

CONFLICT_START = "<<<<<<<"
CONFLICT_BASE = "|||||||"
CONFLICT_SEPARATOR = "======="
CONFLICT_END = ">>>>>>>"


class BranchManagerError(Exception):
    """Operation refused or failed; exit_code is what the CLI exits with."""

    exit_code = 1

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BranchUsageError(BranchManagerError):
    exit_code = 2


class SyncStatus(str, Enum):
    NO_UPSTREAM = "no-upstream"
    UP_TO_DATE = "up-to-date"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"


class MergeStrategy(str, Enum):
    AUTO = "auto"
    FAST_FORWARD = "fast-forward"
    MERGE_COMMIT = "merge-commit"


class SyncStrategy(str, Enum):
    AUTO = "auto"
    PULL = "pull"
    REBASE = "rebase"


class ConflictComplexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    MISSING = "missing"


class ConflictInfo(BaseModel):
    path: str
    complexity: ConflictComplexity
    markers: int = 0
    lines: int = 0
    auto_resolvable: bool = False


class BranchStatus(BaseModel):
    branch: Optional[str]
    upstream: Optional[str] = None
    sync_status: SyncStatus = SyncStatus.NO_UPSTREAM
    ahead: int = 0
    behind: int = 0
    changed_files: List[str] = Field(default_factory=list)
    untracked_files: List[str] = Field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.changed_files


class CreateResult(BaseModel):
    branch: str
    base: str
    stashed: bool = False
    follows_convention: bool = True


class SwitchResult(BaseModel):
    branch: str
    previous: Optional[str] = None
    stashed: bool = False
    changed: bool = True


class MergeResult(BaseModel):
    source: str
    target: str
    strategy: Optional[MergeStrategy] = None
    merged: bool = False
    message: str = ""
    conflicts: List[ConflictInfo] = Field(default_factory=list)
    resolved: List[str] = Field(default_factory=list, description="Conflicted files resolved before committing")
    backup_id: Optional[str] = None

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


class SyncResult(BaseModel):
    branch: str
    upstream: Optional[str] = None
    status: SyncStatus
    action: str = "none"
    message: str = ""


class CleanupResult(BaseModel):
    target: str
    candidates: List[str] = Field(default_factory=list)
    deleted: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)
    dry_run: bool = False
    backup_id: Optional[str] = None


class WorkflowResult(BaseModel):
    source: str
    target: str
    steps: List[str] = Field(default_factory=list)
    merge: Optional[MergeResult] = None
    deleted: List[str] = Field(default_factory=list)
    pushed: bool = False
    backups: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.merge is not None and not self.merge.has_conflicts


def sync_status_of(ahead: int, behind: int) -> SyncStatus:
    if ahead and behind:
        return SyncStatus.DIVERGED
    if ahead:
        return SyncStatus.AHEAD
    if behind:
        return SyncStatus.BEHIND
    return SyncStatus.UP_TO_DATE


def categorize_conflict(markers: int, lines: int) -> ConflictComplexity:
    if markers <= 3 and lines <= 10:
        return ConflictComplexity.SIMPLE
    if markers <= 10 and lines <= 50:
        return ConflictComplexity.MODERATE
    return ConflictComplexity.COMPLEX


def _squash(lines: List[str]) -> List[str]:
    return ["".join(line.split()) for line in lines if line.strip()]


def analyze_conflict_text(path: str, text: str) -> ConflictInfo:
    """
    Summarize the conflict markers in a file's content.

    lines counts the lines inside conflict regions. A conflict is
    auto-resolvable when both sides only differ in whitespace.
    """
    markers = 0
    lines = 0
    ours: List[str] = []
    theirs: List[str] = []
    section = None
    for line in text.splitlines():
        if line.startswith(CONFLICT_START):
            markers += 1
            section = "ours"
            continue
        if line.startswith(CONFLICT_BASE) and section == "ours":
            section = "base"
            continue
        if line.startswith(CONFLICT_SEPARATOR) and section in ("ours", "base"):
            markers += 1
            section = "theirs"
            continue
        if line.startswith(CONFLICT_END) and section == "theirs":
            markers += 1
            section = None
            continue
        if section is None:
            continue
        lines += 1
        if section == "ours":
            ours.append(line)
        elif section == "theirs":
            theirs.append(line)

    return ConflictInfo(
        path=path,
        complexity=categorize_conflict(markers, lines),
        markers=markers,
        lines=lines,
        auto_resolvable=markers > 0 and _squash(ours) == _squash(theirs),
    )


def resolve_keeping_ours(text: str) -> str:
    """Drop conflict markers along with the base and their sides of every conflict."""
    kept = []
    section = None
    for line in text.splitlines(keepends=True):
        if line.startswith(CONFLICT_START):
            section = "ours"
        elif line.startswith(CONFLICT_BASE) and section == "ours":
            section = "base"
        elif line.startswith(CONFLICT_SEPARATOR) and section in ("ours", "base"):
            section = "theirs"
        elif line.startswith(CONFLICT_END) and section == "theirs":
            section = None
        elif section in (None, "ours"):
            kept.append(line)
    return "".join(kept)


class BranchManager:
    def __init__(self, git: Optional[GitClient] = None, cfg: Optional[BranchManagerConfig] = None):
        self.cfg = cfg or BranchManagerConfig()
        self.git = git or GitClient(timeout=self.cfg.git_timeout)
        self.backups = BackupStore(self.git)

    # Checks

    def ensure_repository(self) -> None:
        if not self.git.is_repository():
            raise GitCommandError(
                ["git", "rev-parse", "--git-dir"],
                128,
                "not a git repository",
                ErrorCategory.REPOSITORY,
            )

    def _current(self) -> str:
        branch = self.git.current_branch()
        if branch is None:
            raise BranchManagerError("HEAD is detached; switch to a branch first")
        return branch

    def _require_branch(self, name: str) -> None:
        if not self.git.branch_exists(name):
            raise BranchManagerError(f"Branch '{name}' does not exist")

    def _require_clean(self, action: str) -> None:
        changed = self.git.changed_files()
        if changed:
            raise BranchManagerError(
                f"Cannot {action} with uncommitted changes ({len(changed)} files); "
                "commit or stash them first"
            )

    def _stash(self, reason: str) -> bool:
        if not self.git.has_uncommitted_changes():
            return False
        self.git.run("stash", "push", "-m", f"branch-manager: {reason}")
        logger.info(f"📦 Stashed uncommitted changes ({reason})")
        return True

    def _remote_branch(self, name: str) -> Optional[str]:
        for remote in self.git.remotes():
            ref = f"{remote}/{name}"
            if self.git.run("show-ref", "--verify", "--quiet", f"refs/remotes/{ref}", check=False).ok:
                return ref
        return None

    # Branch operations

    def create(
        self,
        name: str,
        base: Optional[str] = None,
        stash: bool = False,
        switch: bool = True,
    ) -> CreateResult:
        """Create name from base (default: configured base branch) and check it out."""
        error = validate_branch_name(name)
        if error:
            raise BranchUsageError(error)
        conventional = follows_convention(name, self.cfg.default_workflow)
        if not conventional:
            logger.warning(
                f"⚠️ '{name}' does not follow the {self.cfg.default_workflow} naming convention"
            )
        if self.git.branch_exists(name):
            raise BranchManagerError(f"Branch '{name}' already exists")

        base = base or self.cfg.default_base_branch
        if not self.git.branch_exists(base) and self._remote_branch(base) is None:
            raise BranchManagerError(f"Base branch '{base}' does not exist")

        stashed = False
        if switch:
            if stash:
                stashed = self._stash(f"before creating {name}")
            else:
                self._require_clean("create a branch")
            self.git.run("checkout", "-b", name, base)
        else:
            self.git.run("branch", name, base)

        logger.info(f"🌿 Created branch {name} from {base}")
        return CreateResult(branch=name, base=base, stashed=stashed, follows_convention=conventional)

    def switch(self, name: str, stash: bool = False) -> SwitchResult:
        previous = self.git.current_branch()
        if name == previous:
            return SwitchResult(branch=name, previous=previous, changed=False)

        remote_ref = None
        if not self.git.branch_exists(name):
            remote_ref = self._remote_branch(name)
            if remote_ref is None:
                raise BranchManagerError(f"Branch '{name}' does not exist locally or on any remote")

        stashed = self._stash(f"switching from {previous} to {name}") if stash else False
        if not stashed:
            self._require_clean("switch branches")

        if remote_ref:
            self.git.run("checkout", "-b", name, "--track", remote_ref)
        else:
            self.git.run("checkout", name)
        logger.info(f"🔀 Switched to {name}")
        return SwitchResult(branch=name, previous=previous, stashed=stashed)

    def delete(self, name: str, force: bool = False) -> None:
        if name in self.cfg.protected_branches:
            raise BranchManagerError(f"Branch '{name}' is protected")
        if name == self.git.current_branch():
            raise BranchManagerError(f"Cannot delete the current branch '{name}'")
        self._require_branch(name)
        self.git.run("branch", "-D" if force else "-d", name)
        logger.info(f"🗑️ Deleted branch {name}")

    # Backups

    def backup(self, operation: str, branches: List[str]) -> Optional[str]:
        """Record branch tips before a destructive step; disabled when retention is 0 days."""
        if self.cfg.backup_retention_days <= 0 or not branches:
            return None
        backup_id = self.backups.create(operation, branches)
        self.backups.prune(self.cfg.backup_retention_days)
        return backup_id

    def list_backups(self) -> List[Backup]:
        return self.backups.all()

    def restore_backup(self, backup_id: str) -> List[str]:
        """Move each branch in the backup back to its recorded commit."""
        backup = self.backups.get(backup_id)
        if backup is None:
            raise BranchManagerError(f"Backup '{backup_id}' not found")
        current = self.git.current_branch()
        if current in backup.branches:
            self._require_clean("restore the current branch")
        return self.backups.restore(backup, current)

    def prune_backups(self, now: Optional[datetime] = None) -> List[str]:
        return self.backups.prune(self.cfg.backup_retention_days, now)

    # Merging

    def can_fast_forward(self, source: str, target: str) -> bool:
        if not self.git.is_ancestor(target, source):
            return False
        ahead, _ = self.git.ahead_behind(source, target)
        return ahead > 0

    def analyze_conflicts(self) -> List[ConflictInfo]:
        root = self.git.repository_root()
        conflicts = []
        for path in self.git.conflicted_files():
            file_path = root / path
            if not file_path.is_file():
                conflicts.append(ConflictInfo(path=path, complexity=ConflictComplexity.MISSING))
                continue
            text = file_path.read_text(encoding="utf-8", errors="replace")
            conflicts.append(analyze_conflict_text(path, text))
        return conflicts

    def launch_merge_tool(self, path: str) -> bool:
        """Open the configured conflict resolution tool on path; True when it exits cleanly."""
        command = shlex.split(self.cfg.conflict_resolution_tool)
        if not command or shutil.which(command[0]) is None:
            logger.warning(f"⚠️ Merge tool '{self.cfg.conflict_resolution_tool}' is not available")
            return False
        file_path = self.git.repository_root() / path
        logger.info(f"🛠️ Opening {path} with {command[0]}")
        try:
            completed = subprocess.run(command + [str(file_path)], cwd=self.git.cwd)
        except OSError as e:
            logger.error(f"❌ Could not launch merge tool: {e}")
            return False
        return completed.returncode == 0

    def _resolve_conflicts(
        self, conflicts: List[ConflictInfo], auto_resolve: bool, merge_tool: bool
    ) -> Optional[List[str]]:
        """Resolved paths, or None when any conflict is left unresolved."""
        root = self.git.repository_root()
        resolved = []
        for conflict in conflicts:
            file_path = root / conflict.path
            if conflict.complexity == ConflictComplexity.MISSING:
                return None
            if auto_resolve and conflict.auto_resolvable:
                text = file_path.read_text(encoding="utf-8")
                file_path.write_text(resolve_keeping_ours(text), encoding="utf-8")
                logger.info(f"✅ Auto-resolved whitespace conflict in {conflict.path}")
            elif merge_tool and self.launch_merge_tool(conflict.path):
                text = file_path.read_text(encoding="utf-8", errors="replace")
                if analyze_conflict_text(conflict.path, text).markers:
                    logger.warning(f"⚠️ {conflict.path} still has conflict markers")
                    return None
            else:
                return None
            self.git.run("add", "--", conflict.path)
            resolved.append(conflict.path)
        return resolved

    def merge(
        self,
        source: str,
        target: Optional[str] = None,
        strategy: MergeStrategy = MergeStrategy.AUTO,
        auto_resolve: bool = False,
        merge_tool: bool = False,
    ) -> MergeResult:
        """
        Merge source into target (default: current branch).

        Fast-forwards when possible under the auto strategy, otherwise
        creates a merge commit. The target's tip is backed up first.

        On conflicts, auto_resolve keeps our side of whitespace-only
        conflicts and merge_tool opens the configured tool on the rest.
        The merge is committed only when every conflict was resolved;
        otherwise it is aborted and the conflicted files are reported
        with their complexity.
        """
        current = self._current()
        target = target or current
        if source == target:
            raise BranchUsageError("Cannot merge a branch into itself")
        self._require_branch(source)
        self._require_branch(target)
        self._require_clean("merge")

        if self.git.rev_parse(source) == self.git.rev_parse(target):
            return MergeResult(
                source=source, target=target, message="Branches are identical, no merge needed"
            )
        if self.git.is_ancestor(source, target):
            return MergeResult(
                source=source, target=target, message=f"{target} already contains {source}"
            )

        fast_forward = self.can_fast_forward(source, target)
        if strategy == MergeStrategy.FAST_FORWARD and not fast_forward:
            raise BranchManagerError(
                f"Cannot fast-forward {target} to {source}; the branches have diverged"
            )
        used = (
            MergeStrategy.FAST_FORWARD
            if fast_forward and strategy != MergeStrategy.MERGE_COMMIT
            else MergeStrategy.MERGE_COMMIT
        )

        if current != target:
            self.git.run("checkout", target)
        backup_id = self.backup("merge", [target])

        logger.info(f"🔀 Merging {source} into {target} ({used.value})")
        try:
            if used == MergeStrategy.FAST_FORWARD:
                self.git.run("merge", "--ff-only", source)
            else:
                self.git.run("merge", "--no-ff", "-m", f"Merge branch '{source}' into {target}", source)
        except GitCommandError as e:
            conflicts = self.analyze_conflicts()
            if not conflicts and e.category != ErrorCategory.CONFLICT:
                raise
            resolved = None
            if auto_resolve or merge_tool:
                resolved = self._resolve_conflicts(conflicts, auto_resolve, merge_tool)
            if resolved:
                self.git.run("commit", "--no-edit")
                logger.info(f"✅ Merged {source} into {target} after resolving {len(resolved)} files")
                return MergeResult(
                    source=source,
                    target=target,
                    strategy=used,
                    merged=True,
                    message="Merge completed after resolving conflicts",
                    resolved=resolved,
                    backup_id=backup_id,
                )
            self.git.run("merge", "--abort", check=False)
            logger.error(f"❌ Merge of {source} into {target} has {len(conflicts)} conflicted files")
            return MergeResult(
                source=source,
                target=target,
                strategy=used,
                message="Merge aborted due to conflicts",
                conflicts=conflicts,
                backup_id=backup_id,
            )

        logger.info(f"✅ Merged {source} into {target}")
        return MergeResult(
            source=source,
            target=target,
            strategy=used,
            merged=True,
            message="Merge completed",
            backup_id=backup_id,
        )

    # Upstream

    def fetch(self) -> bool:
        if not self.git.remotes():
            return False
        self.git.run("fetch", "--all", "--prune")
        return True

    def branch_status(self, branch: str) -> BranchStatus:
        upstream = self.git.upstream_of(branch)
        if upstream is None:
            return BranchStatus(branch=branch)
        ahead, behind = self.git.ahead_behind(branch, upstream)
        return BranchStatus(
            branch=branch,
            upstream=upstream,
            sync_status=sync_status_of(ahead, behind),
            ahead=ahead,
            behind=behind,
        )

    def status(self) -> BranchStatus:
        branch = self.git.current_branch()
        base = self.branch_status(branch) if branch else BranchStatus(branch=None)
        return base.model_copy(
            update={
                "changed_files": self.git.changed_files(),
                "untracked_files": self.git.untracked_files(),
            }
        )

    def sync(self, branch: Optional[str] = None, strategy: SyncStrategy = SyncStrategy.AUTO) -> SyncResult:
        """Bring branch up to date with its upstream by pulling or rebasing."""
        current = self._current()
        branch = branch or current
        self._require_branch(branch)
        self._require_clean("sync")

        if self.cfg.auto_fetch:
            self.fetch()

        state = self.branch_status(branch)
        if state.upstream is None:
            return SyncResult(
                branch=branch,
                status=SyncStatus.NO_UPSTREAM,
                message=f"{branch} has no upstream branch",
            )
        if state.sync_status in (SyncStatus.UP_TO_DATE, SyncStatus.AHEAD):
            return SyncResult(
                branch=branch,
                upstream=state.upstream,
                status=state.sync_status,
                message=f"{branch} is {state.sync_status.value} with {state.upstream}",
            )

        if branch != current:
            self.git.run("checkout", branch)
        try:
            if strategy == SyncStrategy.REBASE:
                action = self._rebase_onto(state.upstream)
            else:
                action = self._pull()
        finally:
            if branch != current:
                self.git.run("checkout", current, check=False)

        logger.info(f"✅ Synced {branch} with {state.upstream} ({action})")
        return SyncResult(
            branch=branch,
            upstream=state.upstream,
            status=state.sync_status,
            action=action,
            message=f"Synced {branch} with {state.upstream}",
        )

    def _pull(self) -> str:
        try:
            self.git.run("pull", "--ff-only")
            return "fast-forward"
        except GitCommandError as e:
            if e.category == ErrorCategory.TIMEOUT:
                raise
            logger.info("Fast-forward not possible, pulling with a merge commit")
        try:
            self.git.run("pull", "--no-ff", "--no-rebase", "--no-edit")
        except GitCommandError as e:
            self.git.run("merge", "--abort", check=False)
            raise BranchManagerError(f"Pull failed and was aborted: {e.stderr or e}")
        return "merge"

    def _rebase_onto(self, upstream: str) -> str:
        try:
            self.git.run("rebase", upstream)
        except GitCommandError as e:
            self.git.run("rebase", "--abort", check=False)
            raise BranchManagerError(f"Rebase onto {upstream} failed and was aborted: {e.stderr or e}")
        return "rebase"

    def push(self, branch: Optional[str] = None) -> bool:
        """Push branch, setting its upstream on first push. False when there is no remote."""
        branch = branch or self._current()
        remotes = self.git.remotes()
        if not remotes:
            logger.warning("⚠️ No remote configured; skipping push")
            return False
        upstream = self.git.upstream_of(branch)
        if upstream:
            self.git.run("push", upstream.split("/", 1)[0], branch)
        else:
            remote = "origin" if "origin" in remotes else remotes[0]
            self.git.run("push", "-u", remote, branch)
        logger.info(f"🚀 Pushed {branch}")
        return True

    # Cleanup

    def merged_candidates(self, target: Optional[str] = None) -> List[str]:
        target = target or self.cfg.default_base_branch
        self._require_branch(target)
        excluded = {target, self.git.current_branch(), *self.cfg.protected_branches}
        return [b for b in self.git.merged_branches(target) if b and b not in excluded]

    def cleanup(self, target: Optional[str] = None, dry_run: bool = False) -> CleanupResult:
        """Delete local branches already merged into target."""
        target = target or self.cfg.default_base_branch
        candidates = self.merged_candidates(target)
        result = CleanupResult(target=target, candidates=candidates, dry_run=dry_run)
        if dry_run:
            logger.info(f"Would delete {len(candidates)} merged branches")
            return result

        result.backup_id = self.backup("cleanup", candidates)
        for branch in candidates:
            try:
                self.git.run("branch", "-d", branch)
                result.deleted.append(branch)
            except GitCommandError as e:
                logger.warning(f"⚠️ Could not delete {branch}: {e.stderr}")
                result.failed.append(branch)
        logger.info(f"🧹 Deleted {len(result.deleted)} merged branches")
        return result

    # Workflows

    def complete_feature_workflow(
        self, source: Optional[str] = None, target: Optional[str] = None, push: bool = True
    ) -> WorkflowResult:
        """
        Finish a feature branch: sync both sides, merge into target,
        delete the feature branch and push the target.
        """
        source = source or self._current()
        target = target or self.cfg.default_base_branch
        if source in self.cfg.protected_branches or source == target:
            raise BranchUsageError(f"'{source}' is not a feature branch")

        result = WorkflowResult(source=source, target=target)
        self.sync(source)
        result.steps.append(f"synced {source}")
        self.sync(target)
        result.steps.append(f"synced {target}")

        result.merge = self.merge(source, target)
        if result.merge.backup_id:
            result.backups.append(result.merge.backup_id)
        if result.merge.has_conflicts:
            result.steps.append("merge aborted")
            return result
        result.steps.append(f"merged {source} into {target}")

        backup_id = self.backup("delete", [source])
        if backup_id:
            result.backups.append(backup_id)
        self.delete(source)
        result.deleted.append(source)
        result.steps.append(f"deleted {source}")

        if push:
            result.pushed = self.push(target)
            if result.pushed:
                result.steps.append(f"pushed {target}")
        return result

    def merge_and_push(
        self, source: str, target: Optional[str] = None, push: bool = True
    ) -> WorkflowResult:
        target = target or self._current()
        result = WorkflowResult(source=source, target=target)
        result.merge = self.merge(source, target)
        if result.merge.backup_id:
            result.backups.append(result.merge.backup_id)
        if result.merge.has_conflicts:
            result.steps.append("merge aborted")
            return result
        result.steps.append(f"merged {source} into {target}")

        if self.cfg.auto_cleanup_merged:
            cleaned = self.cleanup(target)
            if cleaned.backup_id:
                result.backups.append(cleaned.backup_id)
            result.deleted = cleaned.deleted
            result.steps.append(f"cleaned up {len(cleaned.deleted)} merged branches")

        if push:
            result.pushed = self.push(target)
            if result.pushed:
                result.steps.append(f"pushed {target}")
        return result
