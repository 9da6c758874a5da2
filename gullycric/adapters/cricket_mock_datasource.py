"""
Mock cricket backend

Generates plausible teams, players and matches from a seeded random source so
runs are reproducible. Stands in for the remote API: remote-style calls can
be slowed down and made to fail with ServerException.
"""

import random
import time
from datetime import date, datetime, timedelta
from typing import List, Optional

from loguru import logger

from ..domain.common.exceptions import ServerException
from ..domain.models.enums import (
    BattingStyle,
    BowlingStyle,
    InningStatus,
    MatchStatus,
    MatchType,
    PlayerRole,
    TeamType,
    TossDecision,
)
from ..domain.models.match import MatchDomain, MatchRules
from ..domain.models.player import PlayerDomain, PlayerStats
from ..domain.models.score import InningDomain
from ..domain.models.team import TeamDomain, TeamStats

FIRST_NAMES = [
    "Ahmed", "Ali", "Hassan", "Omar", "Usman",
    "Bilal", "Faisal", "Tariq", "Zain", "Hamza",
]
LAST_NAMES = [
    "Khan", "Shah", "Ahmed", "Ali", "Malik",
    "Sheikh", "Qureshi", "Butt", "Awan", "Chaudhry",
]
VENUES = [
    "Central Park Ground", "City Stadium", "Sports Complex", "Community Ground",
    "Municipal Stadium", "Local Cricket Club", "School Ground", "University Field",
]
OVERS_CHOICES = [10, 15, 20, 25, 50]

# Roles for an eleven: openers and middle order, a keeper, all-rounders, bowlers
SQUAD_ROLES = [
    PlayerRole.BATSMAN, PlayerRole.BATSMAN, PlayerRole.BATSMAN, PlayerRole.BATSMAN,
    PlayerRole.WICKET_KEEPER, PlayerRole.ALL_ROUNDER, PlayerRole.ALL_ROUNDER,
    PlayerRole.BOWLER, PlayerRole.BOWLER, PlayerRole.BOWLER, PlayerRole.BOWLER,
]


class CricketMockDataSource:
    def __init__(
        self,
        seed: Optional[int] = 42,
        simulated_latency: float = 0.0,
        failure_rate: float = 0.0,
    ):
        self.random = random.Random(seed)
        self.simulated_latency = simulated_latency
        self.failure_rate = failure_rate

    def _simulate_remote_call(self, operation: str) -> None:
        if self.simulated_latency > 0:
            time.sleep(self.simulated_latency)
        if self.failure_rate > 0 and self.random.random() < self.failure_rate:
            raise ServerException(
                f"Mock backend failed to {operation}", code="MOCK_FAILURE", status_code=503
            )

    # Remote-style API

    def fetch_matches(self, count: int = 5) -> List[MatchDomain]:
        self._simulate_remote_call("fetch matches")
        matches = self.generate_matches(count)
        logger.debug(f"Mock backend returned {len(matches)} matches")
        return matches

    def fetch_teams(self, count: int = 4) -> List[TeamDomain]:
        self._simulate_remote_call("fetch teams")
        return [self.generate_team(f"team_{i + 1}", _team_name(i)) for i in range(count)]

    # Generators

    def generate_matches(self, count: int = 5) -> List[MatchDomain]:
        now = datetime.now()
        matches = []
        for i in range(count):
            team1 = self.generate_team(f"team_{i * 2 + 1}", _team_name(i * 2))
            team2 = self.generate_team(f"team_{i * 2 + 2}", _team_name(i * 2 + 1))
            status = self.random.choice(
                [MatchStatus.SCHEDULED, MatchStatus.SCHEDULED, MatchStatus.IN_PROGRESS, MatchStatus.COMPLETED]
            )
            overs = self.random.choice(OVERS_CHOICES)
            match = MatchDomain(
                id=f"match_{i + 1}",
                title=f"{team1.name} vs {team2.name}",
                description=f"Local cricket match between {team1.name} and {team2.name}",
                match_type=self.random.choice(list(MatchType)),
                status=MatchStatus.SCHEDULED,
                created_at=now - timedelta(days=self.random.randint(1, 30)),
                start_time=now + timedelta(days=self.random.randint(1, 7)),
                venue=self.random.choice(VENUES),
                team1=team1,
                team2=team2,
                total_overs=overs,
                players_per_team=11,
                rules=MatchRules.t20() if overs == 20 else MatchRules.for_overs(overs),
            )
            if status != MatchStatus.SCHEDULED:
                match = self._played(match, completed=status == MatchStatus.COMPLETED)
            matches.append(match)
        return matches

    def _played(self, match: MatchDomain, completed: bool) -> MatchDomain:
        """Give a match a toss and synthesized innings."""
        toss_winner = self.random.choice(match.team_ids)
        decision = self.random.choice(list(TossDecision))
        other = next(t for t in match.team_ids if t != toss_winner)
        batting, bowling = (toss_winner, other) if decision == TossDecision.BAT else (other, toss_winner)
        start = datetime.now() - timedelta(hours=self.random.randint(2, 6))
        max_balls = match.total_overs * 6

        first = self._inning(match, 1, batting, bowling, max_balls, start, complete=completed)
        innings = [first]
        if completed:
            second = self._inning(
                match, 2, bowling, batting, max_balls, start, complete=True, target=first.runs + 1
            )
            innings.append(second)

        played = match.model_copy(
            update={
                "status": MatchStatus.COMPLETED if completed else MatchStatus.IN_PROGRESS,
                "start_time": start,
                "end_time": datetime.now() if completed else None,
                "toss_winner": toss_winner,
                "toss_decision": decision,
                "current_inning": len(innings),
                "batting_team_id": innings[-1].batting_team_id,
                "bowling_team_id": innings[-1].bowling_team_id,
                "innings": innings,
            }
        )
        if completed:
            played = played.model_copy(update={"outcome": played.decide_outcome()})
        return played

    def _inning(self, match, number, batting, bowling, max_balls, start, complete, target=None):
        legal_balls = max_balls if complete else self.random.randint(6, max_balls - 1)
        wickets = self.random.randint(0, match.all_out_wickets if complete else match.all_out_wickets - 1)
        runs = int(legal_balls * self.random.uniform(0.9, 1.6))
        if target is not None and runs >= target:
            runs = target + self.random.randint(0, 5)
            legal_balls = self.random.randint(max(legal_balls // 2, 1), legal_balls)
        return InningDomain(
            id=f"inning_{match.id}_{number}",
            match_id=match.id,
            inning_number=number,
            batting_team_id=batting,
            bowling_team_id=bowling,
            runs=runs,
            wickets=wickets,
            legal_balls=legal_balls,
            extras=self.random.randint(0, 15),
            target=target,
            status=InningStatus.COMPLETED if complete else InningStatus.IN_PROGRESS,
            start_time=start,
            end_time=datetime.now() if complete else None,
        )

    def generate_team(self, team_id: str, name: str, player_count: int = 11) -> TeamDomain:
        players = [
            self.generate_player(f"{team_id}_player_{i + 1}", team_id, i)
            for i in range(max(player_count, 11))
        ]
        played = self.random.randint(0, 100)
        won = self.random.randint(0, played)
        return TeamDomain(
            id=team_id,
            name=name,
            short_name=name.replace("Team ", "T")[:6].upper(),
            description=f"Local cricket team {name}",
            team_type=self.random.choice(list(TeamType)),
            home_venue=self.random.choice(VENUES),
            captain_id=players[0].id,
            vice_captain_id=players[4].id,
            players=players,
            stats=TeamStats(
                matches_played=played,
                matches_won=won,
                matches_lost=played - won,
                total_runs=played * self.random.randint(90, 180),
                total_wickets=played * self.random.randint(4, 9),
                highest_score=self.random.randint(150, 260),
                lowest_score=self.random.randint(40, 90),
            ),
        )

    def generate_player(self, player_id: str, team_id: str, position: int = 0) -> PlayerDomain:
        role = SQUAD_ROLES[position % len(SQUAD_ROLES)]
        bats = role in (PlayerRole.BATSMAN, PlayerRole.WICKET_KEEPER, PlayerRole.ALL_ROUNDER)
        bowls = role in (PlayerRole.BOWLER, PlayerRole.ALL_ROUNDER)
        name = f"{self.random.choice(FIRST_NAMES)} {self.random.choice(LAST_NAMES)}"
        return PlayerDomain(
            id=player_id,
            name=name,
            team_id=team_id,
            date_of_birth=date.today() - timedelta(days=self.random.randint(18 * 365, 40 * 365)),
            role=role,
            batting_style=self.random.choice(list(BattingStyle)),
            bowling_style=(
                self.random.choice([s for s in BowlingStyle if s != BowlingStyle.NONE])
                if bowls
                else BowlingStyle.NONE
            ),
            jersey_number=position + 1,
            is_wicket_keeper=role == PlayerRole.WICKET_KEEPER,
            is_captain=position == 0,
            is_vice_captain=position == 4,
            career_stats=self._stats(bats, bowls),
        )

    def _stats(self, bats: bool, bowls: bool) -> PlayerStats:
        matches = self.random.randint(5, 120)
        innings = self.random.randint(matches // 2, matches)
        not_outs = self.random.randint(0, max(innings // 5, 0))
        per_innings = self.random.uniform(18, 45) if bats else self.random.uniform(2, 12)
        runs = int(innings * per_innings)
        overs = int(matches * self.random.uniform(2.5, 4)) if bowls else 0
        wickets = int(overs * self.random.uniform(0.15, 0.35)) if bowls else 0
        return PlayerStats(
            matches_played=matches,
            innings=innings,
            not_outs=not_outs,
            runs_scored=runs,
            highest_score=min(runs, int(per_innings * self.random.uniform(2, 4))),
            balls_faced=int(runs * self.random.uniform(0.7, 1.2)),
            centuries=runs // 2500,
            half_centuries=runs // 600,
            fours=runs // 9,
            sixes=runs // 30,
            overs_bowled=overs,
            balls_bowled=overs * 6,
            wickets_taken=wickets,
            runs_conceded=int(overs * self.random.uniform(5.5, 8.5)),
            maiden_overs=overs // 25,
            catches=self.random.randint(0, matches // 2),
        )


def _team_name(index: int) -> str:
    """Team A, Team B, ... Team Z, Team AA, ..."""
    letters = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(65 + rem) + letters
    return f"Team {letters}"
