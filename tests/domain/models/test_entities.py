"""Tests for derived properties on players, teams, users and matches."""

from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import build_match, build_team
from gullycric.domain.models.enums import PlayerRole, UserRole
from gullycric.domain.models.player import PlayerDomain, PlayerStats
from gullycric.domain.models.team import TeamDomain, TeamStats
from gullycric.domain.models.user import AuthSession, UserDomain


def player(player_id, role=PlayerRole.BATSMAN, **kwargs):
    return PlayerDomain(id=player_id, name=f"Player {player_id}", role=role, **kwargs)


class TestPlayer:
    def test_stats(self):
        stats = PlayerStats(
            innings=10,
            not_outs=2,
            runs_scored=400,
            balls_faced=320,
            balls_bowled=120,
            overs_bowled=20,
            wickets_taken=5,
            runs_conceded=150,
            catches=3,
            stumpings=1,
        )

        assert stats.batting_average == 50.0
        assert stats.strike_rate == 125.0
        assert stats.bowling_average == 30.0
        assert stats.economy_rate == 7.5
        assert stats.bowling_strike_rate == 24.0
        assert stats.total_dismissals == 4

    def test_never_dismissed_has_no_average(self):
        assert PlayerStats(innings=3, not_outs=3, runs_scored=90).batting_average == 0.0

    def test_age(self):
        born = date(date.today().year - 30, 1, 1)

        assert player("p1", date_of_birth=born).age == 30
        assert player("p2").age is None

    def test_all_rounder_from_stats(self):
        stats = PlayerStats(innings=10, runs_scored=300, wickets_taken=5, runs_conceded=150)

        assert player("p1", career_stats=stats).is_all_rounder
        assert not player("p2").is_all_rounder
        assert player("p3", PlayerRole.ALL_ROUNDER).is_all_rounder

    def test_primary_skill_and_name(self):
        keeper = player("p1", PlayerRole.WICKET_KEEPER)

        assert keeper.primary_skill == "Wicket Keeping"
        assert PlayerDomain(id="p2", name="  Sachin  ").name == "Sachin"


class TestTeam:
    """Test squad composition helpers and strength ratings."""

    @pytest.fixture
    def squad(self):
        players = (
            [player(f"bat{i}") for i in range(4)]
            + [player(f"ar{i}", PlayerRole.ALL_ROUNDER) for i in range(2)]
            + [player(f"bowl{i}", PlayerRole.BOWLER) for i in range(3)]
            + [player("wk", PlayerRole.WICKET_KEEPER, is_wicket_keeper=True)]
        )
        return TeamDomain(
            id="t1", name="Lions", players=players, captain_id="bat0", vice_captain_id="ar1"
        )

    def test_composition(self, squad):
        assert len(squad.batsmen) == 6
        assert len(squad.bowlers) == 5
        assert [p.id for p in squad.all_rounders] == ["ar0", "ar1"]
        assert [p.id for p in squad.wicket_keepers] == ["wk"]
        assert squad.captain.id == "bat0"
        assert squad.vice_captain.id == "ar1"

    def test_squad_size(self, squad):
        assert squad.available_spots == 5
        assert not squad.is_full
        assert not squad.has_minimum_players
        assert build_team("t2", "Tigers").has_minimum_players

    def test_strength(self, squad):
        strength = squad.strength()

        assert strength.batting == 5.0
        assert strength.bowling == 5.0
        assert strength.fielding == pytest.approx(50 / 11)
        assert strength.wicket_keeping == 5.0
        assert strength.overall == pytest.approx((15 + 50 / 11) / 4)

    def test_min_above_max_is_rejected(self):
        with pytest.raises(ValueError):
            TeamDomain(id="t", name="T", min_players=12, max_players=11)

    def test_stats(self):
        stats = TeamStats(matches_played=4, matches_won=3, total_runs=600)

        assert stats.win_percentage == 75.0
        assert stats.average_score == 150.0
        assert TeamStats().average_score == 0.0


class TestUser:
    def test_names_and_normalized_email(self):
        user = UserDomain(id="u1", email="  Ravi@Example.COM ", first_name="ravi", last_name="kumar")

        assert user.email == "ravi@example.com"
        assert user.full_name == "ravi kumar"
        assert user.initials == "RK"

    def test_profile_completion(self):
        user = UserDomain(id="u1", email="a@b.co", first_name="A", last_name="B", is_email_verified=True)

        assert not user.is_profile_complete
        assert user.model_copy(update={"player_id": "p1"}).is_profile_complete

    @pytest.mark.parametrize(
        "role, premium, tournaments",
        [
            (UserRole.USER, False, False),
            (UserRole.ORGANIZER, False, True),
            (UserRole.PREMIUM, True, True),
            (UserRole.ADMIN, True, True),
        ],
    )
    def test_role_permissions(self, role, premium, tournaments):
        user = UserDomain(id="u1", email="a@b.co", role=role)

        assert user.is_premium is premium
        assert user.can_create_tournaments is tournaments

    def test_session_expiry(self):
        now = datetime(2024, 5, 1, 12, 0)
        session = AuthSession(
            user=UserDomain(id="u1", email="a@b.co"),
            access_token="a",
            refresh_token="r",
            expires_at=now + timedelta(hours=1),
        )

        assert not session.is_expired(now)
        assert session.is_expired(now + timedelta(hours=1))


class TestMatchDuration:
    def test_duration(self):
        start = datetime(2024, 5, 1, 10, 0)
        match = build_match(start_time=start, end_time=start + timedelta(hours=3))

        assert match.duration == timedelta(hours=3)
        assert build_match(start_time=None).duration is None

    def test_aware_times_become_naive_local(self):
        start = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        match = build_match(start_time=start)

        assert match.start_time == start.astimezone().replace(tzinfo=None)
        finished = match.started("home", "away", at=start).finished(at=start + timedelta(hours=2))
        assert finished.end_time.tzinfo is None
        assert finished.duration == timedelta(hours=2)
