"""Tests for the gullycric command line, driven through typer's CliRunner."""

import json

import pytest
from typer.testing import CliRunner

from conftest import build_match, build_team
from gullycric.adapters.factory import create_auth_repository
from gullycric.adapters.key_value_store import InMemoryKeyValueStore
from gullycric.config.settings import GullyCricConfig
from gullycric.domain.models.enums import MatchStatus
from gullycric.interfaces.cricket_cli import CliContext, app

runner = CliRunner()


@pytest.fixture
def cfg(tmp_path):
    return GullyCricConfig(storage={"data_dir": str(tmp_path)}, network={"offline": True})


@pytest.fixture
def context(cfg, cricket_repo):
    auth = create_auth_repository(cfg, store=InMemoryKeyValueStore())
    return CliContext(cfg, cricket=cricket_repo, auth=auth)


@pytest.fixture
def live_context(context, cricket_repo):
    cricket_repo.create_match(build_match("m1"))
    result = runner.invoke(
        app,
        ["matches", "start", "m1", "--toss-winner", "home", "--toss-decision", "bat"],
        obj=context,
    )
    assert result.exit_code == 0, result.output
    return context


def score(context, *args):
    return runner.invoke(
        app,
        ["score", "ball", "m1", "--bowler", "away_p1", "--striker", "home_p1", *args],
        obj=context,
    )


class TestMatchCommands:
    """Test browsing, creating, starting and ending matches."""

    def test_list_empty(self, context):
        result = runner.invoke(app, ["matches", "list"], obj=context)

        assert result.exit_code == 0
        assert "No matches found" in result.output

    def test_create_between_stored_teams(self, context, cricket_repo):
        cricket_repo.create_team(build_team("home", "Home XI"))
        cricket_repo.create_team(build_team("away", "Away XI"))

        result = runner.invoke(
            app,
            ["matches", "create", "Sunday Derby", "--team1", "home", "--team2", "away", "--overs", "5"],
            obj=context,
        )

        assert result.exit_code == 0, result.output
        assert "Created match" in result.output
        matches = cricket_repo.get_matches().value
        assert len(matches) == 1
        assert matches[0].total_overs == 5

    def test_create_with_unknown_team(self, context, cricket_repo):
        cricket_repo.create_team(build_team("home", "Home XI"))

        result = runner.invoke(
            app, ["matches", "create", "Derby", "--team1", "home", "--team2", "ghost"], obj=context
        )

        assert result.exit_code == 1
        assert "Team ghost not found" in result.output

    def test_start_and_show(self, live_context, cricket_repo):
        result = runner.invoke(app, ["matches", "show", "m1"], obj=live_context)

        assert result.exit_code == 0
        assert "Sunday Derby" in result.output
        assert "chose to bat" in result.output
        assert cricket_repo.get_match_by_id("m1").value.status == MatchStatus.IN_PROGRESS

    def test_show_unknown_match(self, context):
        result = runner.invoke(app, ["matches", "show", "nope"], obj=context)

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_end_with_one_inning_is_no_result(self, live_context):
        result = runner.invoke(app, ["matches", "end", "m1"], obj=live_context)

        assert result.exit_code == 0
        assert "No result" in result.output


class TestScoreCommands:
    def test_record_balls(self, live_context):
        assert "4/0" in score(live_context, "--runs", "4").output
        assert "5/0" in score(live_context, "--type", "wide").output

        result = score(live_context, "--wicket", "bowled")

        assert result.exit_code == 0
        assert "5/1" in result.output

    def test_invalid_runs_show_field_errors(self, live_context):
        result = score(live_context, "--runs", "9")

        assert result.exit_code == 1
        assert "Runs must be between 0 and 7" in result.output
        assert "runs: 0-7" in result.output

    def test_show_score(self, live_context):
        score(live_context, "--runs", "6")

        result = runner.invoke(app, ["score", "show", "m1"], obj=live_context)

        assert result.exit_code == 0
        assert "6/0" in result.output


class TestTeamAndPlayerCommands:
    """Test listings over seeded mock data."""

    @pytest.fixture
    def seeded_context(self, cfg, seeded_repo):
        return CliContext(cfg, cricket=seeded_repo)

    def test_teams_list(self, seeded_context):
        result = runner.invoke(app, ["teams", "list"], obj=seeded_context)

        assert result.exit_code == 0
        assert "team_1" in result.output

    def test_top_batsmen(self, seeded_context):
        result = runner.invoke(app, ["players", "top-batsmen", "-n", "3"], obj=seeded_context)

        assert result.exit_code == 0
        assert "Runs" in result.output

    def test_top_bowlers(self, seeded_context):
        result = runner.invoke(app, ["players", "top-bowlers"], obj=seeded_context)

        assert result.exit_code == 0
        assert "Wkts" in result.output


class TestAuthCommands:
    def test_login_whoami_logout(self, context):
        login = runner.invoke(
            app, ["auth", "login", "demo@gullycric.com", "--password", "password123"], obj=context
        )
        assert login.exit_code == 0, login.output
        assert "Signed in as demo@gullycric.com" in login.output

        whoami = runner.invoke(app, ["auth", "whoami"], obj=context)
        assert "Demo User <demo@gullycric.com>" in whoami.output

        assert runner.invoke(app, ["auth", "logout"], obj=context).exit_code == 0
        after = runner.invoke(app, ["auth", "whoami"], obj=context)
        assert after.exit_code == 1
        assert "Not signed in" in after.output

    def test_wrong_password(self, context):
        result = runner.invoke(
            app, ["auth", "login", "demo@gullycric.com", "--password", "wrong-pass"], obj=context
        )

        assert result.exit_code == 1


class TestConfigCommands:
    """Test the configuration helpers exposed on the command line."""

    def test_show(self, context):
        result = runner.invoke(app, ["config", "show"], obj=context)

        assert result.exit_code == 0
        assert "Offline mode: On" in result.output

    def test_template_is_json(self, context):
        result = runner.invoke(app, ["config", "template"], obj=context)

        assert result.exit_code == 0
        assert '"branch_manager"' in result.output

    def test_export_then_validate(self, context, tmp_path):
        output = tmp_path / "exported.json"

        exported = runner.invoke(app, ["config", "export", str(output)], obj=context)
        validated = runner.invoke(app, ["config", "validate", str(output)], obj=context)

        assert exported.exit_code == 0
        assert json.loads(output.read_text())["network"]["offline"] is True
        assert validated.exit_code == 0
        assert "Configuration is valid" in validated.output

    def test_validate_reports_issues(self, context, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"match": {"max_overs": 0}}')

        result = runner.invoke(app, ["config", "validate", str(path)], obj=context)

        assert result.exit_code == 1
        assert "match.max_overs" in result.output
