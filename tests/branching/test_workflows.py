"""Tests for branch naming workflows."""

import pytest

from gullycric.branching.workflows import (
    follows_convention,
    slugify,
    suggest_branch_name,
    validate_branch_name,
    workflow_prefixes,
)


class TestValidateBranchName:
    def test_accepts_conventional_names(self):
        assert validate_branch_name("feature/user-login_2") is None

    def test_empty(self):
        assert validate_branch_name("") == "Branch name cannot be empty"

    @pytest.mark.parametrize("name", ["has space", "bad~tilde", "dots..", "colon:name"])
    def test_invalid_characters(self, name):
        assert "invalid characters" in validate_branch_name(name)

    @pytest.mark.parametrize("name", ["HEAD", "main", "master", "origin", "upstream"])
    def test_reserved(self, name):
        assert validate_branch_name(name) == f"Branch name '{name}' is reserved"


class TestWorkflows:
    """Test prefixes and name suggestions per workflow."""

    def test_prefixes(self):
        assert workflow_prefixes("gitflow") == ["feature/", "develop/", "release/", "hotfix/"]
        with pytest.raises(ValueError, match="Unknown workflow"):
            workflow_prefixes("trunk")

    def test_follows_convention(self):
        assert follows_convention("feature/x", "github-flow")
        assert not follows_convention("release/1.0", "github-flow")
        assert follows_convention("release/1.0", "gitflow")
        assert follows_convention("chore/deps", "custom")

    def test_slugify(self):
        assert slugify("  Login Bug!! (iOS) ") == "login-bug-ios"

    @pytest.mark.parametrize(
        "workflow, branch_type, description, expected",
        [
            ("github-flow", "feature", "User Login", "feature/user-login"),
            ("github-flow", "fix", "Login Bug!!", "hotfix/login-bug"),
            ("github-flow", "release", "v2", "feature/v2"),
            ("gitflow", "rel", "2.0 launch", "release/2-0-launch"),
            ("gitflow", "dev", "sandbox", "develop/sandbox"),
            ("custom", "hotfix", "anything", "feat/anything"),
            ("github-flow", "feature", "!!!", "feature/new-feature"),
        ],
    )
    def test_suggestions(self, workflow, branch_type, description, expected):
        assert suggest_branch_name(workflow, branch_type, description) == expected
