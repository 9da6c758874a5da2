"""
Tests for BranchManager.

Git operations run against real temporary repositories; conflict
analysis and categorization are exercised on plain text.
"""

import shutil
import subprocess

import pytest

from conftest import commit_file, git
from gullycric.branching.git_client import GitClient, GitCommandError
from gullycric.branching.manager import (
    BranchManager,
    BranchManagerError,
    BranchUsageError,
    ConflictComplexity,
    MergeStrategy,
    SyncStatus,
    SyncStrategy,
    analyze_conflict_text,
    categorize_conflict,
    resolve_keeping_ours,
    sync_status_of,
)
from gullycric.config.settings import BranchManagerConfig


def manager_for(repo, **overrides) -> BranchManager:
    return BranchManager(GitClient(repo), BranchManagerConfig(**overrides))


def feature_with_commit(repo, branch="feature/x", name="feature.txt"):
    git(repo, "checkout", "-q", "-b", branch)
    commit_file(repo, name, "feature\n", f"Add {name}")
    git(repo, "checkout", "-q", "main")


@pytest.fixture
def other_clone(tmp_path, git_remote):
    """A second working copy of origin, used to push commits the first one lacks."""
    clone = tmp_path / "other"
    subprocess.run(
        ["git", "clone", "-q", "-b", "main", str(git_remote), str(clone)],
        check=True,
        capture_output=True,
    )
    git(clone, "config", "user.email", "other@example.com")
    git(clone, "config", "user.name", "Other")
    git(clone, "config", "commit.gpgsign", "false")
    return clone


class TestConflictAnalysis:
    """Test conflict marker parsing and complexity thresholds."""

    def test_counts_markers_and_inner_lines(self):
        text = "\n".join(
            [
                "header",
                "<<<<<<< HEAD",
                "ours 1",
                "ours 2",
                "=======",
                "theirs",
                ">>>>>>> feature/x",
                "footer",
            ]
        )

        info = analyze_conflict_text("a.txt", text)

        assert info.markers == 3
        assert info.lines == 3
        assert info.complexity == ConflictComplexity.SIMPLE
        assert not info.auto_resolvable

    def test_base_section_is_not_counted_as_a_marker(self):
        text = "<<<<<<< HEAD\nours\n||||||| base\nbase\n=======\ntheirs\n>>>>>>> other\n"

        info = analyze_conflict_text("a.txt", text)

        assert info.markers == 3
        assert info.lines == 3

    def test_whitespace_only_difference_is_auto_resolvable(self):
        text = "<<<<<<< HEAD\nx = 1\n=======\nx  =  1\n\n>>>>>>> other\n"

        assert analyze_conflict_text("a.py", text).auto_resolvable

    def test_no_markers(self):
        info = analyze_conflict_text("a.txt", "plain\ntext\n")

        assert info.markers == 0
        assert not info.auto_resolvable

    @pytest.mark.parametrize(
        "markers, lines, expected",
        [
            (3, 10, ConflictComplexity.SIMPLE),
            (3, 11, ConflictComplexity.MODERATE),
            (10, 50, ConflictComplexity.MODERATE),
            (12, 5, ConflictComplexity.COMPLEX),
            (6, 51, ConflictComplexity.COMPLEX),
        ],
    )
    def test_complexity_thresholds(self, markers, lines, expected):
        assert categorize_conflict(markers, lines) == expected

    def test_sync_status(self):
        assert sync_status_of(0, 0) == SyncStatus.UP_TO_DATE
        assert sync_status_of(2, 0) == SyncStatus.AHEAD
        assert sync_status_of(0, 1) == SyncStatus.BEHIND
        assert sync_status_of(1, 1) == SyncStatus.DIVERGED


class TestCreateSwitchDelete:
    def test_not_a_repository(self, tmp_path):
        with pytest.raises(GitCommandError):
            manager_for(tmp_path).ensure_repository()

    def test_create_from_base(self, git_repo):
        result = manager_for(git_repo).create("feature/login")

        assert result.branch == "feature/login"
        assert result.base == "main"
        assert result.follows_convention
        assert git(git_repo, "branch", "--show-current") == "feature/login"

    def test_create_without_switching(self, git_repo):
        manager_for(git_repo).create("feature/later", switch=False)

        assert git(git_repo, "branch", "--show-current") == "main"
        assert git(git_repo, "branch", "--list", "feature/later")

    def test_unconventional_name_is_allowed(self, git_repo):
        assert not manager_for(git_repo).create("spike", switch=False).follows_convention

    @pytest.mark.parametrize("name", ["bad name", "main", ""])
    def test_invalid_names(self, git_repo, name):
        with pytest.raises(BranchUsageError):
            manager_for(git_repo).create(name)

    def test_existing_branch_and_missing_base(self, git_repo):
        manager = manager_for(git_repo)
        git(git_repo, "branch", "feature/x")

        with pytest.raises(BranchManagerError, match="Branch 'feature/x' already exists"):
            manager.create("feature/x")
        with pytest.raises(BranchManagerError, match="Base branch 'develop' does not exist"):
            manager.create("feature/y", base="develop")

    def test_dirty_tree_requires_stash(self, git_repo):
        (git_repo / "README.md").write_text("work in progress\n")
        manager = manager_for(git_repo)

        with pytest.raises(BranchManagerError, match="uncommitted changes"):
            manager.create("feature/x")

        result = manager.create("feature/x", stash=True)
        assert result.stashed
        assert "before creating feature/x" in git(git_repo, "stash", "list")

    def test_switch(self, git_repo):
        git(git_repo, "branch", "feature/x")
        manager = manager_for(git_repo)

        result = manager.switch("feature/x")

        assert result.changed
        assert result.previous == "main"
        assert not manager.switch("feature/x").changed
        with pytest.raises(BranchManagerError, match="does not exist locally or on any remote"):
            manager.switch("feature/none")

    def test_switch_tracks_remote_branch(self, git_repo, git_remote):
        git(git_repo, "branch", "feature/remote")
        git(git_repo, "push", "-q", "origin", "feature/remote")
        git(git_repo, "branch", "-D", "feature/remote")

        manager_for(git_repo).switch("feature/remote")

        assert GitClient(git_repo).upstream_of("feature/remote") == "origin/feature/remote"

    def test_delete_rules(self, git_repo):
        feature_with_commit(git_repo)
        manager = manager_for(git_repo)

        with pytest.raises(BranchManagerError, match="protected"):
            manager.delete("main")
        with pytest.raises(BranchManagerError, match="does not exist"):
            manager.delete("feature/none")
        with pytest.raises(GitCommandError):
            manager.delete("feature/x")

        manager.delete("feature/x", force=True)
        assert not GitClient(git_repo).branch_exists("feature/x")

    def test_cannot_delete_current_branch(self, git_repo):
        git(git_repo, "checkout", "-q", "-b", "feature/x")

        with pytest.raises(BranchManagerError, match="current branch"):
            manager_for(git_repo).delete("feature/x")


class TestMerge:
    """Test merge strategies, no-op merges and conflict handling."""

    def test_fast_forward(self, git_repo):
        feature_with_commit(git_repo)

        result = manager_for(git_repo).merge("feature/x")

        assert result.merged
        assert result.strategy == MergeStrategy.FAST_FORWARD
        assert git(git_repo, "rev-parse", "main") == git(git_repo, "rev-parse", "feature/x")

    def test_forced_merge_commit(self, git_repo):
        feature_with_commit(git_repo)

        result = manager_for(git_repo).merge("feature/x", strategy=MergeStrategy.MERGE_COMMIT)

        assert result.strategy == MergeStrategy.MERGE_COMMIT
        assert git(git_repo, "rev-list", "--merges", "--count", "main") == "1"

    def test_diverged_branches(self, git_repo):
        feature_with_commit(git_repo)
        commit_file(git_repo, "main.txt", "main\n", "Main work")
        manager = manager_for(git_repo)

        with pytest.raises(BranchManagerError, match="diverged"):
            manager.merge("feature/x", strategy=MergeStrategy.FAST_FORWARD)

        result = manager.merge("feature/x")
        assert result.merged
        assert result.strategy == MergeStrategy.MERGE_COMMIT

    def test_merge_into_other_branch_checks_it_out(self, git_repo):
        feature_with_commit(git_repo)
        git(git_repo, "checkout", "-q", "feature/x")

        result = manager_for(git_repo).merge("feature/x", "main")

        assert result.merged
        assert git(git_repo, "branch", "--show-current") == "main"

    def test_identical_and_already_merged(self, git_repo):
        git(git_repo, "branch", "feature/same")
        feature_with_commit(git_repo)
        manager = manager_for(git_repo)

        same = manager.merge("feature/same")
        contained = manager.merge("main", "feature/x")

        assert not same.merged
        assert same.message == "Branches are identical, no merge needed"
        assert contained.message == "feature/x already contains main"

    def test_invalid_merges(self, git_repo):
        manager = manager_for(git_repo)

        with pytest.raises(BranchUsageError):
            manager.merge("main")
        with pytest.raises(BranchManagerError, match="does not exist"):
            manager.merge("feature/none")

    def test_conflict_is_aborted_and_reported(self, git_repo):
        git(git_repo, "checkout", "-q", "-b", "feature/x")
        commit_file(git_repo, "README.md", "feature side\n", "Feature edit")
        git(git_repo, "checkout", "-q", "main")
        commit_file(git_repo, "README.md", "main side\n", "Main edit")

        result = manager_for(git_repo).merge("feature/x")

        assert not result.merged
        assert result.message == "Merge aborted due to conflicts"
        assert [c.path for c in result.conflicts] == ["README.md"]
        assert result.conflicts[0].markers == 3
        assert result.conflicts[0].complexity == ConflictComplexity.SIMPLE
        assert GitClient(git_repo).conflicted_files() == []
        assert (git_repo / "README.md").read_text() == "main side\n"


class TestCleanup:
    def test_dry_run_lists_merged_branches(self, git_repo):
        git(git_repo, "branch", "feature/done")
        git(git_repo, "branch", "develop")
        feature_with_commit(git_repo, "feature/open")

        result = manager_for(git_repo).cleanup(dry_run=True)

        assert result.candidates == ["feature/done"]
        assert result.deleted == []
        assert GitClient(git_repo).branch_exists("feature/done")

    def test_deletes_merged_branches(self, git_repo):
        git(git_repo, "branch", "feature/a")
        git(git_repo, "branch", "feature/b")

        result = manager_for(git_repo).cleanup("main")

        assert result.deleted == ["feature/a", "feature/b"]
        assert GitClient(git_repo).local_branches() == ["main"]


class TestUpstream:
    """Test status, sync and push against a bare origin."""

    def test_no_upstream(self, git_repo):
        result = manager_for(git_repo).sync()

        assert result.status == SyncStatus.NO_UPSTREAM
        assert result.action == "none"

    def test_up_to_date_and_ahead(self, git_repo, git_remote):
        manager = manager_for(git_repo)

        assert manager.sync().status == SyncStatus.UP_TO_DATE
        commit_file(git_repo, "local.txt", "local\n", "Local work")
        result = manager.sync()
        assert result.status == SyncStatus.AHEAD
        assert result.action == "none"
        assert manager.status().ahead == 1

    def test_behind_fast_forwards(self, git_repo, other_clone):
        commit_file(other_clone, "remote.txt", "remote\n", "Remote work")
        git(other_clone, "push", "-q", "origin", "main")

        result = manager_for(git_repo).sync()

        assert result.status == SyncStatus.BEHIND
        assert result.action == "fast-forward"
        assert (git_repo / "remote.txt").exists()

    def test_diverged_pull_merges(self, git_repo, other_clone):
        commit_file(other_clone, "remote.txt", "remote\n", "Remote work")
        git(other_clone, "push", "-q", "origin", "main")
        commit_file(git_repo, "local.txt", "local\n", "Local work")

        result = manager_for(git_repo).sync()

        assert result.status == SyncStatus.DIVERGED
        assert result.action == "merge"
        assert git(git_repo, "rev-list", "--merges", "--count", "main") == "1"

    def test_diverged_rebase(self, git_repo, other_clone):
        commit_file(other_clone, "remote.txt", "remote\n", "Remote work")
        git(other_clone, "push", "-q", "origin", "main")
        commit_file(git_repo, "local.txt", "local\n", "Local work")

        result = manager_for(git_repo).sync(strategy=SyncStrategy.REBASE)

        assert result.action == "rebase"
        assert git(git_repo, "rev-list", "--merges", "--count", "main") == "0"
        assert manager_for(git_repo).status().ahead == 1

    def test_status_reports_changes(self, git_repo):
        (git_repo / "README.md").write_text("edited\n")
        (git_repo / "notes.txt").write_text("todo\n")

        status = manager_for(git_repo).status()

        assert status.branch == "main"
        assert status.changed_files == ["README.md"]
        assert status.untracked_files == ["notes.txt"]
        assert not status.clean

    def test_push_without_remote(self, git_repo):
        assert manager_for(git_repo).push() is False

    def test_first_push_sets_upstream(self, git_repo, git_remote):
        git(git_repo, "checkout", "-q", "-b", "feature/x")

        assert manager_for(git_repo).push()
        assert GitClient(git_repo).upstream_of("feature/x") == "origin/feature/x"


class TestWorkflows:
    def test_complete_feature_workflow(self, git_repo, git_remote):
        manager = manager_for(git_repo)
        manager.create("feature/x")
        commit_file(git_repo, "feature.txt", "feature\n", "Add feature")

        result = manager.complete_feature_workflow()

        assert result.ok
        assert result.steps == [
            "synced feature/x",
            "synced main",
            "merged feature/x into main",
            "deleted feature/x",
            "pushed main",
        ]
        assert not GitClient(git_repo).branch_exists("feature/x")
        assert git(git_remote, "rev-parse", "main") == git(git_repo, "rev-parse", "main")
        assert len(result.backups) == 2
        assert manager.list_backups()[-1].operation == "delete"

    def test_workflow_refuses_protected_source(self, git_repo):
        with pytest.raises(BranchUsageError):
            manager_for(git_repo).complete_feature_workflow("main")

    def test_merge_and_push_cleans_up(self, git_repo):
        feature_with_commit(git_repo)

        result = manager_for(git_repo).merge_and_push("feature/x")

        assert result.merge.merged
        assert result.deleted == ["feature/x"]
        assert result.steps == ["merged feature/x into main", "cleaned up 1 merged branches"]
        assert not result.pushed

    def test_merge_and_push_stops_on_conflict(self, git_repo):
        git(git_repo, "checkout", "-q", "-b", "feature/x")
        commit_file(git_repo, "README.md", "feature side\n", "Feature edit")
        git(git_repo, "checkout", "-q", "main")
        commit_file(git_repo, "README.md", "main side\n", "Main edit")

        result = manager_for(git_repo).merge_and_push("feature/x")

        assert not result.ok
        assert result.steps == ["merge aborted"]
        assert GitClient(git_repo).branch_exists("feature/x")


def conflicting_branches(repo, main_text="main side\n", feature_text="feature side\n"):
    git(repo, "config", "merge.conflictStyle", "merge")
    commit_file(repo, "config.py", "a = 1\n", "Add config")
    git(repo, "checkout", "-q", "-b", "feature/x")
    commit_file(repo, "config.py", feature_text, "Feature edit")
    git(repo, "checkout", "-q", "main")
    commit_file(repo, "config.py", main_text, "Main edit")


class TestConflictResolution:
    """Test opt-in resolution of conflicts during a merge."""

    def test_resolve_keeping_ours(self):
        text = "top\n<<<<<<< HEAD\nours\n||||||| base\nbase\n=======\ntheirs\n>>>>>>> feature\nend\n"

        assert resolve_keeping_ours(text) == "top\nours\nend\n"

    def test_whitespace_conflict_is_auto_resolved(self, git_repo):
        conflicting_branches(git_repo, main_text="a  = 1\n", feature_text="a =  1\n")

        result = manager_for(git_repo).merge("feature/x", auto_resolve=True)

        assert result.merged
        assert result.resolved == ["config.py"]
        assert (git_repo / "config.py").read_text() == "a  = 1\n"
        assert git(git_repo, "rev-list", "--merges", "--count", "main") == "1"
        assert GitClient(git_repo).changed_files() == []

    def test_real_conflict_is_not_auto_resolved(self, git_repo):
        conflicting_branches(git_repo)

        result = manager_for(git_repo).merge("feature/x", auto_resolve=True)

        assert not result.merged
        assert result.resolved == []
        assert (git_repo / "config.py").read_text() == "main side\n"

    @pytest.mark.skipif(shutil.which("sed") is None, reason="sed is not installed")
    def test_merge_tool_resolves_conflict(self, git_repo):
        conflicting_branches(git_repo)
        tool = "sed -i -e /^<<<<<<</d -e /^=======/d -e /^>>>>>>>/d"

        result = manager_for(git_repo, conflict_resolution_tool=tool).merge("feature/x", merge_tool=True)

        assert result.merged
        assert (git_repo / "config.py").read_text() == "main side\nfeature side\n"

    def test_failing_merge_tool_aborts(self, git_repo):
        conflicting_branches(git_repo)

        result = manager_for(git_repo, conflict_resolution_tool="false").merge("feature/x", merge_tool=True)

        assert result.message == "Merge aborted due to conflicts"
        assert GitClient(git_repo).conflicted_files() == []

    def test_missing_merge_tool(self, git_repo):
        manager = manager_for(git_repo, conflict_resolution_tool="no-such-merge-tool --wait")

        assert not manager.launch_merge_tool("README.md")


class TestSafetyBackups:
    def test_merge_backs_up_target(self, git_repo):
        before = git(git_repo, "rev-parse", "main")
        feature_with_commit(git_repo)
        manager = manager_for(git_repo)

        result = manager.merge("feature/x")

        [backup] = manager.list_backups()
        assert backup.id == result.backup_id
        assert backup.operation == "merge"
        assert backup.branches == {"main": before}

    def test_zero_retention_disables_backups(self, git_repo):
        feature_with_commit(git_repo)
        manager = manager_for(git_repo, backup_retention_days=0)

        assert manager.merge("feature/x").backup_id is None
        assert manager.list_backups() == []

    def test_cleanup_can_be_restored(self, git_repo):
        git(git_repo, "branch", "feature/a")
        manager = manager_for(git_repo)

        result = manager.cleanup("main")
        restored = manager.restore_backup(result.backup_id)

        assert restored == ["feature/a"]
        assert GitClient(git_repo).branch_exists("feature/a")

    def test_restore_current_branch_requires_clean_tree(self, git_repo):
        feature_with_commit(git_repo)
        manager = manager_for(git_repo)
        backup_id = manager.merge("feature/x").backup_id
        (git_repo / "README.md").write_text("dirty\n")

        with pytest.raises(BranchManagerError, match="uncommitted changes"):
            manager.restore_backup(backup_id)

    def test_unknown_backup(self, git_repo):
        with pytest.raises(BranchManagerError, match="not found"):
            manager_for(git_repo).restore_backup("20240101-000000-merge")
