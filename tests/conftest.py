"""Shared fixtures for the GullyCric test suite."""

import shutil
import subprocess
from datetime import datetime, timedelta

import pytest

from gullycric.adapters.cricket_local_datasource import CricketLocalDataSource
from gullycric.adapters.cricket_mock_datasource import CricketMockDataSource
from gullycric.adapters.cricket_repository import CricketRepositoryImpl
from gullycric.adapters.key_value_store import InMemoryKeyValueStore
from gullycric.adapters.network_info import StaticNetworkInfo
from gullycric.domain.models.enums import MatchStatus
from gullycric.domain.models.match import MatchDomain
from gullycric.domain.models.player import PlayerDomain
from gullycric.domain.models.team import TeamDomain


def build_team(team_id: str, name: str, players: int = 11) -> TeamDomain:
    return TeamDomain(
        id=team_id,
        name=name,
        players=[
            PlayerDomain(id=f"{team_id}_p{i + 1}", name=f"{name} Player {i + 1}", team_id=team_id)
            for i in range(players)
        ],
    )


def build_match(match_id: str = "match_x", overs: int = 2, players: int = 11, **kwargs) -> MatchDomain:
    fields = dict(
        id=match_id,
        title="Sunday Derby",
        team1=build_team("home", "Home XI", players),
        team2=build_team("away", "Away XI", players),
        total_overs=overs,
        players_per_team=players,
        status=MatchStatus.SCHEDULED,
        start_time=datetime.now() + timedelta(days=1),
    )
    fields.update(kwargs)
    return MatchDomain(**fields)


@pytest.fixture
def team_factory():
    return build_team


@pytest.fixture
def match_factory():
    return build_match


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def local_source(store):
    return CricketLocalDataSource(store)


@pytest.fixture
def cricket_repo(local_source):
    """Repository over an empty in-memory store, with mock seeding disabled."""
    return CricketRepositoryImpl(
        local=local_source,
        mock=CricketMockDataSource(seed=7),
        network_info=StaticNetworkInfo(connected=True),
        seed_mock_data=False,
    )


@pytest.fixture
def seeded_repo(local_source):
    """Repository that seeds three mock matches on first access."""
    return CricketRepositoryImpl(
        local=local_source,
        mock=CricketMockDataSource(seed=7),
        network_info=StaticNetworkInfo(connected=True),
        seed_count=3,
    )


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(repo, *args):
    return subprocess.run(
        ["git", *args], cwd=repo, check=True, capture_output=True, text=True
    ).stdout.strip()


def commit_file(repo, name: str, content: str, message: str) -> None:
    (repo / name).write_text(content)
    git(repo, "add", name)
    git(repo, "commit", "-q", "-m", message)


@pytest.fixture
def git_repo(tmp_path):
    """A fresh repository on main with one commit."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "checkout", "-q", "-b", "main")
    git(repo, "config", "user.email", "dev@example.com")
    git(repo, "config", "user.name", "Dev")
    git(repo, "config", "commit.gpgsign", "false")
    commit_file(repo, "README.md", "hello\n", "Initial commit")
    return repo


@pytest.fixture
def git_remote(tmp_path, git_repo):
    """A bare origin that git_repo's main tracks."""
    remote = tmp_path / "origin.git"
    subprocess.run(["git", "init", "-q", "--bare", str(remote)], check=True, capture_output=True)
    git(git_repo, "remote", "add", "origin", str(remote))
    git(git_repo, "push", "-q", "-u", "origin", "main")
    return remote
