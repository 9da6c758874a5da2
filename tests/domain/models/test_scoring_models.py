"""Tests for balls, innings and the match lifecycle."""

import pytest

from conftest import build_match
from gullycric.domain.models.enums import (
    BallType,
    InningStatus,
    MatchStatus,
    ResultType,
    TossDecision,
    WicketType,
)
from gullycric.domain.models.match import MatchOutcome
from gullycric.domain.models.score import (
    BallDomain,
    InningDomain,
    ScoreDomain,
    format_overs,
)


def ball(runs=0, ball_type=BallType.NORMAL, wicket=None):
    return BallDomain(
        bowler_id="b1",
        striker_id="s1",
        runs_scored=runs,
        ball_type=ball_type,
        is_wicket=wicket is not None,
        wicket_type=wicket,
    )


def inning(**kwargs):
    fields = dict(
        id="inning_m_1", match_id="m", inning_number=1, batting_team_id="home", bowling_team_id="away"
    )
    fields.update(kwargs)
    return InningDomain(**fields)


class TestBallDomain:
    """Test delivery run accounting."""

    def test_normal_ball_runs_to_batsman(self):
        delivery = ball(4)

        assert delivery.batsman_runs == 4
        assert delivery.extra_runs == 0
        assert delivery.is_boundary
        assert delivery.description == "4"

    def test_wide_adds_penalty_run(self):
        delivery = ball(2, BallType.WIDE)

        assert not delivery.is_legal
        assert delivery.batsman_runs == 0
        assert delivery.extra_runs == 3
        assert delivery.total_runs == 3
        assert delivery.description == "WD"

    def test_no_ball_runs_go_to_batsman(self):
        delivery = ball(1, BallType.NO_BALL)

        assert delivery.batsman_runs == 1
        assert delivery.extra_runs == 1
        assert delivery.total_runs == 2

    def test_bye_is_legal_extra(self):
        delivery = ball(1, BallType.BYE)

        assert delivery.is_legal
        assert delivery.extra_runs == 1
        assert delivery.batsman_runs == 0

    def test_wicket_requires_type(self):
        with pytest.raises(ValueError):
            BallDomain(bowler_id="b", striker_id="s", is_wicket=True)
        assert ball(wicket=WicketType.BOWLED).description == "W"

    def test_runs_range(self):
        with pytest.raises(ValueError):
            ball(8)


class TestInningDomain:
    """Test applying deliveries to an inning."""

    def test_format_overs(self):
        assert format_overs(0) == "0.0"
        assert format_overs(15) == "2.3"

    def test_over_closes_after_six_legal_balls(self):
        current = inning()
        for runs in (1, 0, 4, 0, 6, 1):
            current = current.with_ball(ball(runs), total_overs=5, all_out_wickets=10)

        assert current.legal_balls == 6
        assert current.overs == "1.0"
        assert current.current_over == []
        assert len(current.completed_overs) == 1
        assert current.completed_overs[0].runs == 12
        assert current.run_rate == pytest.approx(12.0)

    def test_wides_do_not_count_towards_over(self):
        current = inning().with_ball(ball(0, BallType.WIDE), total_overs=5, all_out_wickets=10)

        assert current.legal_balls == 0
        assert current.runs == 1
        assert current.extras == 1
        assert len(current.current_over) == 1

    def test_ball_is_stamped_with_position(self):
        current = inning()
        for _ in range(7):
            current = current.with_ball(ball(1), total_overs=5, all_out_wickets=10)

        last = current.last_ball
        assert last.over_number == 1
        assert last.ball_number == 1

    def test_all_out_completes_inning(self):
        current = inning()
        for _ in range(2):
            current = current.with_ball(ball(wicket=WicketType.CAUGHT), total_overs=5, all_out_wickets=2)

        assert current.is_complete
        assert current.end_time is not None

    def test_overs_exhausted_completes_inning(self):
        current = inning()
        for _ in range(6):
            current = current.with_ball(ball(1), total_overs=1, all_out_wickets=10)

        assert current.is_complete

    def test_reaching_target_completes_inning(self):
        current = inning(inning_number=2, target=5)
        current = current.with_ball(ball(6), total_overs=5, all_out_wickets=10)

        assert current.is_complete

    def test_completed_inning_rejects_balls(self):
        done = inning(status=InningStatus.COMPLETED)

        with pytest.raises(ValueError, match="already complete"):
            done.with_ball(ball(1), total_overs=5, all_out_wickets=10)


class TestScoreDomain:
    def test_chase_requirements(self):
        chasing = inning(inning_number=2, target=30, runs=12, legal_balls=6)
        score = ScoreDomain.from_inning(chasing, total_overs=2)

        assert score.runs_required == 18
        assert score.balls_remaining == 6
        assert score.required_run_rate == pytest.approx(18.0)
        assert score.score_display == "12/0"

    def test_first_inning_has_no_target(self):
        score = ScoreDomain.from_inning(inning(runs=20, legal_balls=9), total_overs=2)

        assert score.target is None
        assert score.runs_required is None
        assert score.overs == "1.3"


class TestMatchLifecycle:
    """Test match state transitions."""

    def test_started_opens_first_inning(self):
        match = build_match().started("home", "away", "home", TossDecision.BAT)

        assert match.status == MatchStatus.IN_PROGRESS
        assert match.current_inning == 1
        assert match.current_inning_entity.batting_team_id == "home"
        assert match.toss_decision == TossDecision.BAT

    def test_first_inning_completion_opens_chase(self):
        match = build_match().started("home", "away")
        first = match.current_inning_entity.model_copy(update={"runs": 40}).completed()

        match = match.with_inning(first)

        assert match.current_inning == 2
        second = match.current_inning_entity
        assert second.batting_team_id == "away"
        assert second.target == 41
        assert match.batting_team_id == "away"

    def test_second_inning_completion_finishes_match(self):
        match = build_match().started("home", "away")
        match = match.with_inning(match.current_inning_entity.model_copy(update={"runs": 40}).completed())
        chase = match.current_inning_entity.model_copy(update={"runs": 41, "wickets": 3}).completed()

        match = match.with_inning(chase)

        assert match.status == MatchStatus.COMPLETED
        assert match.outcome.winner_team_id == "away"
        assert match.outcome.win_margin == 7
        assert match.outcome.summary == "Away XI won by 7 wickets"

    def test_defending_side_wins_by_runs(self):
        match = build_match().started("home", "away")
        match = match.with_inning(match.current_inning_entity.model_copy(update={"runs": 40}).completed())
        match = match.with_inning(match.current_inning_entity.model_copy(update={"runs": 39}).completed())

        assert match.outcome.winner_team_id == "home"
        assert match.outcome.summary == "Home XI won by 1 run"

    def test_tie(self):
        match = build_match().started("home", "away")
        match = match.with_inning(match.current_inning_entity.model_copy(update={"runs": 40}).completed())
        match = match.with_inning(match.current_inning_entity.model_copy(update={"runs": 40}).completed())

        assert match.outcome.result_type == ResultType.TIE

    def test_finishing_early_is_no_result(self):
        match = build_match().started("home", "away").finished()

        assert match.status == MatchStatus.COMPLETED
        assert match.outcome.result_type == ResultType.NO_RESULT
        assert all(i.is_complete for i in match.innings)

    def test_explicit_outcome_is_kept(self):
        outcome = MatchOutcome(result_type=ResultType.ABANDONED, summary="Rain")
        match = build_match().started("home", "away").finished(outcome)

        assert match.outcome.summary == "Rain"

    def test_can_start_needs_full_squads(self):
        assert build_match().can_start
        assert not build_match(players=11, team1=build_match(players=5).team1).can_start
