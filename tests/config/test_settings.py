"""Tests for configuration loading and helpers."""

import json

import pytest
from pydantic import ValidationError

from gullycric.config.settings import (
    BranchManagerConfig,
    GullyCricConfig,
    load_config,
)
from gullycric.config.utils import compare_configs, validate_config_file


class TestLoadConfig:
    """Test config sources and their precedence."""

    def test_defaults(self):
        cfg = load_config(environ={})

        assert cfg.match.default_overs == 20
        assert cfg.branch_manager.default_base_branch == "main"
        assert not cfg.network.offline

    def test_env_overrides(self):
        cfg = load_config(
            environ={
                "GULLYCRIC_NETWORK_OFFLINE": "true",
                "GULLYCRIC_MATCH_MAX_OVERS": "30",
                "GULLYCRIC_NETWORK_PROBE_TIMEOUT": "2.5",
                "GULLYCRIC_BRANCH_MANAGER_DEFAULT_BASE_BRANCH": "develop",
                "UNRELATED": "x",
            }
        )

        assert cfg.network.offline is True
        assert cfg.match.max_overs == 30
        assert cfg.network.probe_timeout == 2.5
        assert cfg.branch_manager.default_base_branch == "develop"

    def test_env_beats_file_and_data(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"match": {"max_overs": 40, "default_overs": 10}}))

        cfg = load_config(
            config_path=path,
            config_data={"match": {"max_overs": 35}},
            environ={"GULLYCRIC_MATCH_MAX_OVERS": "25"},
        )

        assert cfg.match.max_overs == 25
        assert cfg.match.default_overs == 10

    def test_invalid_values_fall_back_to_defaults(self):
        cfg = load_config(environ={"GULLYCRIC_MATCH_DEFAULT_OVERS": "80", "GULLYCRIC_MATCH_MAX_OVERS": "40"})

        assert cfg.match.max_overs == 50
        assert cfg.match.default_overs == 20

    def test_unreadable_file_is_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{broken")

        assert load_config(config_path=path, environ={}).match.max_overs == 50


class TestValidation:
    def test_cross_field_players(self):
        with pytest.raises(ValidationError, match="min_players_per_team"):
            GullyCricConfig(match={"min_players_per_team": 11, "max_players_per_team": 5})

    def test_workflow_name(self):
        with pytest.raises(ValidationError):
            BranchManagerConfig(default_workflow="trunk")

    def test_validate_config_file_reports_paths(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"network": {"probe_port": 0}}))

        issues = validate_config_file(path)

        assert len(issues) == 1
        assert issues[0].startswith("network.probe_port")

    def test_compare_configs(self):
        differences = compare_configs(
            GullyCricConfig(), GullyCricConfig(network={"offline": True})
        )

        assert differences == {"network.offline": {"config1": False, "config2": True}}
