"""Tests for the branch manager KEY=value configuration file."""

from gullycric.branching.config_file import (
    HEADER,
    apply_file_values,
    load_branch_config,
    parse_config_text,
    render_config,
)
from gullycric.config.settings import BranchManagerConfig


class TestParse:
    def test_skips_comments_and_strips_quotes(self):
        text = """
        # comment
        DEFAULT_BASE_BRANCH=develop
        CONFLICT_RESOLUTION_TOOL="vim -d"
        LOG_LEVEL='DEBUG'
        not a setting
        """

        assert parse_config_text(text) == {
            "DEFAULT_BASE_BRANCH": "develop",
            "CONFLICT_RESOLUTION_TOOL": "vim -d",
            "LOG_LEVEL": "DEBUG",
        }

    def test_apply_coerces_types(self):
        cfg = apply_file_values(
            BranchManagerConfig(),
            {
                "AUTO_FETCH": "false",
                "GIT_TIMEOUT": "30",
                "PROTECTED_BRANCHES": "main, release ,",
                "UNKNOWN_KEY": "ignored",
            },
        )

        assert cfg.auto_fetch is False
        assert cfg.git_timeout == 30.0
        assert cfg.protected_branches == ["main", "release"]

    def test_invalid_value_keeps_its_base_value(self):
        base = BranchManagerConfig(default_workflow="gitflow")

        cfg = apply_file_values(base, {"DEFAULT_WORKFLOW": "made-up"})

        assert cfg == base

    def test_invalid_value_does_not_discard_valid_ones(self):
        values = parse_config_text("DEFAULT_BASE_BRANCH=develop\nGIT_TIMEOUT=30s\nAUTO_FETCH=false\n")

        cfg = apply_file_values(BranchManagerConfig(git_timeout=45), values)

        assert cfg.default_base_branch == "develop"
        assert cfg.auto_fetch is False
        assert cfg.git_timeout == 45.0


class TestLoadAndSave:
    """Test the file round trip on disk."""

    def test_missing_file_is_created_with_defaults(self, tmp_path):
        path = tmp_path / "branch_manager" / "config"

        cfg = load_branch_config(BranchManagerConfig(), path)

        assert cfg.default_base_branch == "main"
        text = path.read_text()
        assert text.startswith(HEADER)
        assert "AUTO_CLEANUP_MERGED=true" in text
        assert 'CONFLICT_RESOLUTION_TOOL="code --wait"' in text
        assert "GIT_TIMEOUT=60\n" in text
        assert "PROTECTED_BRANCHES=main,master,develop,dev" in text

    def test_file_values_override_base(self, tmp_path):
        path = tmp_path / "config"
        path.write_text("DEFAULT_BASE_BRANCH=develop\nDEFAULT_WORKFLOW=gitflow\n")

        cfg = load_branch_config(BranchManagerConfig(), path)

        assert cfg.default_base_branch == "develop"
        assert cfg.default_workflow == "gitflow"
        assert cfg.config_path == str(path)

    def test_no_create(self, tmp_path):
        path = tmp_path / "config"

        load_branch_config(BranchManagerConfig(), path, create=False)

        assert not path.exists()

    def test_rendered_file_reads_back(self, tmp_path):
        original = BranchManagerConfig(
            default_workflow="custom", backup_retention_days=3, protected_branches=["main"]
        )
        path = tmp_path / "config"
        path.write_text(render_config(original))

        loaded = load_branch_config(BranchManagerConfig(), path)

        assert loaded.default_workflow == "custom"
        assert loaded.backup_retention_days == 3
        assert loaded.protected_branches == ["main"]
