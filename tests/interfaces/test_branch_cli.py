"""Tests for the branch-manager command line and its exit codes."""

import subprocess

import pytest
from typer.testing import CliRunner

from conftest import commit_file, git
from gullycric.branching import git_client
from gullycric.branching.git_client import GitClient
from gullycric.branching.manager import BranchManager
from gullycric.config.settings import BranchManagerConfig
from gullycric.interfaces.branch_cli import BranchCliState, app

runner = CliRunner()


def state_for(repo, confirm=False, **overrides) -> BranchCliState:
    manager = BranchManager(GitClient(repo), BranchManagerConfig(**overrides))
    return BranchCliState(manager, confirm=confirm)


def invoke(repo, *args, confirm=False, input=None):
    return runner.invoke(app, list(args), obj=state_for(repo, confirm), input=input)


class TestBranchCommands:
    def test_create(self, git_repo):
        result = invoke(git_repo, "create", "feature/login")

        assert result.exit_code == 0, result.output
        assert "Created feature/login from main" in result.output

    def test_invalid_name_is_usage_error(self, git_repo):
        result = invoke(git_repo, "create", "bad name")

        assert result.exit_code == 2
        assert "invalid characters" in result.output

    def test_existing_branch_fails(self, git_repo):
        git(git_repo, "branch", "feature/x")

        result = invoke(git_repo, "create", "feature/x")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_switch(self, git_repo):
        git(git_repo, "branch", "feature/x")

        assert "Switched to feature/x" in invoke(git_repo, "switch", "feature/x").output
        assert "Already on feature/x" in invoke(git_repo, "switch", "feature/x").output

    def test_status(self, git_repo):
        (git_repo / "README.md").write_text("edited\n")

        result = invoke(git_repo, "status")

        assert result.exit_code == 0
        assert "main" in result.output
        assert "dirty" in result.output
        assert "README.md" in result.output

    def test_not_a_repository(self, tmp_path):
        result = invoke(tmp_path, "status")

        assert result.exit_code == 1
        assert "Repository state or integrity issue" in result.output

    def test_git_timeout_exit_code(self, tmp_path, monkeypatch):
        def slow(command, **kwargs):
            raise subprocess.TimeoutExpired(command, kwargs["timeout"])

        monkeypatch.setattr(git_client.subprocess, "run", slow)

        assert invoke(tmp_path, "status").exit_code == 124


class TestMergeCommands:
    """Test merge output, conflicts and confirmation."""

    def test_fast_forward_merge(self, git_repo):
        git(git_repo, "checkout", "-q", "-b", "feature/x")
        commit_file(git_repo, "a.txt", "a\n", "Add a")

        result = invoke(git_repo, "merge", "feature/x", "--into", "main")

        assert result.exit_code == 0, result.output
        assert "Merged feature/x into main (fast-forward)" in result.output

    def test_conflicts_exit_with_error(self, git_repo):
        git(git_repo, "checkout", "-q", "-b", "feature/x")
        commit_file(git_repo, "README.md", "feature side\n", "Feature edit")
        git(git_repo, "checkout", "-q", "main")
        commit_file(git_repo, "README.md", "main side\n", "Main edit")

        result = invoke(git_repo, "merge", "feature/x")

        assert result.exit_code == 1
        assert "Merge aborted due to conflicts" in result.output
        assert "simple" in result.output

    def test_auto_resolve_whitespace_conflict(self, git_repo):
        git(git_repo, "config", "merge.conflictStyle", "merge")
        git(git_repo, "checkout", "-q", "-b", "feature/x")
        commit_file(git_repo, "README.md", "hello  world\n", "Feature edit")
        git(git_repo, "checkout", "-q", "main")
        commit_file(git_repo, "README.md", "hello world \n", "Main edit")

        result = invoke(git_repo, "merge", "feature/x", "--auto-resolve")

        assert result.exit_code == 0, result.output
        assert "resolved README.md" in result.output

    def test_declined_confirmation(self, git_repo):
        git(git_repo, "branch", "feature/x")

        result = invoke(git_repo, "merge", "feature/x", confirm=True, input="n\n")

        assert result.exit_code == 130
        assert "Cancelled" in result.output


class TestCleanupAndWorkflows:
    def test_cleanup_dry_run(self, git_repo):
        git(git_repo, "branch", "feature/done")

        result = invoke(git_repo, "cleanup", "--dry-run")

        assert result.exit_code == 0
        assert "feature/done" in result.output
        assert GitClient(git_repo).branch_exists("feature/done")

    def test_cleanup_deletes(self, git_repo):
        git(git_repo, "branch", "feature/done")

        result = invoke(git_repo, "cleanup")

        assert "Deleted 1 branches" in result.output
        assert not GitClient(git_repo).branch_exists("feature/done")

    def test_nothing_to_clean(self, git_repo):
        assert "No merged branches" in invoke(git_repo, "cleanup").output

    def test_merge_and_push_without_remote(self, git_repo):
        git(git_repo, "checkout", "-q", "-b", "feature/x")
        commit_file(git_repo, "a.txt", "a\n", "Add a")
        git(git_repo, "checkout", "-q", "main")

        result = invoke(git_repo, "workflow", "merge-and-push", "feature/x")

        assert result.exit_code == 0, result.output
        assert "merged feature/x into main" in result.output
        assert "pushed" not in result.output

    def test_complete_feature(self, git_repo, git_remote):
        git(git_repo, "checkout", "-q", "-b", "feature/x")
        commit_file(git_repo, "a.txt", "a\n", "Add a")

        result = invoke(git_repo, "workflow", "complete-feature")

        assert result.exit_code == 0, result.output
        assert "pushed main" in result.output

    @pytest.mark.parametrize(
        "args, expected",
        [
            (["User Login"], "feature/user-login"),
            (["Crash on start", "--type", "fix"], "hotfix/crash-on-start"),
            (["v2", "--type", "release", "--workflow", "gitflow"], "release/v2"),
        ],
    )
    def test_suggest(self, git_repo, args, expected):
        result = invoke(git_repo, "workflow", "suggest", *args)

        assert result.exit_code == 0
        assert expected in result.output

    def test_suggest_unknown_workflow(self, git_repo):
        result = invoke(git_repo, "workflow", "suggest", "x", "--workflow", "trunk")

        assert result.exit_code == 2


class TestBackupCommands:
    """Test listing and restoring backups taken by cleanup."""

    def test_list_empty(self, git_repo):
        assert "No backups found" in invoke(git_repo, "backups", "list").output

    def test_cleanup_then_restore(self, git_repo):
        git(git_repo, "branch", "feature/done")
        assert invoke(git_repo, "cleanup").exit_code == 0

        listed = invoke(git_repo, "backups", "list")
        [backup] = state_for(git_repo).manager.list_backups()
        restored = invoke(git_repo, "backups", "restore", backup.id)

        assert "cleanup" in listed.output
        assert "feature/done" in listed.output
        assert restored.exit_code == 0, restored.output
        assert GitClient(git_repo).branch_exists("feature/done")

    def test_restore_unknown_backup(self, git_repo):
        result = invoke(git_repo, "backups", "restore", "20240101-000000-merge")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_prune(self, git_repo):
        result = invoke(git_repo, "backups", "prune")

        assert result.exit_code == 0
        assert "Pruned 0 backups" in result.output


class TestConfigAndVersion:
    def test_version(self, git_repo):
        assert "branch-manager 1.0.0" in invoke(git_repo, "version").output

    def test_config_file_option(self, git_repo, tmp_path):
        config_file = tmp_path / "branch.conf"
        config_file.write_text("DEFAULT_BASE_BRANCH=develop\nLOG_LEVEL=WARNING\n")

        result = runner.invoke(
            app, ["--repo", str(git_repo), "--config", str(config_file), "-y", "config"]
        )

        assert result.exit_code == 0, result.output
        assert "develop" in result.output
        assert "WARNING" in result.output
