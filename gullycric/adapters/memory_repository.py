"""In-memory match repository for tests and throwaway sessions."""

from datetime import datetime, timedelta
from typing import List, Optional

from loguru import logger

from ..domain.common.result import Failure, Result
from ..domain.models.enums import MatchStatus, TossDecision
from ..domain.models.match import MatchDomain, MatchOutcome
from ..domain.models.player import PlayerDomain
from ..domain.models.score import BallDomain, InningDomain, ScoreDomain
from ..domain.models.team import TeamDomain
from ..domain.repositories.match_repository import MatchRepository
from ..domain.repositories.score_repository import ScoreRepository


def sample_match() -> MatchDomain:
    """A scheduled friendly between two full elevens."""

    def squad(team_id: str, name: str) -> TeamDomain:
        players = [
            PlayerDomain(id=f"{team_id}_player_{i}", name=f"{name} Player {i}", team_id=team_id)
            for i in range(1, 12)
        ]
        return TeamDomain(id=team_id, name=name, players=players, captain_id=players[0].id)

    return MatchDomain(
        id="sample_match_1",
        title="Sample Match",
        description="Sample match for testing",
        team1=squad("team_1", "Team A"),
        team2=squad("team_2", "Team B"),
        start_time=datetime.now() + timedelta(days=1),
        venue="Local Ground",
    )


class InMemoryMatchRepository(MatchRepository, ScoreRepository):
    """
    Match and score repository over plain Python lists.

    State lives on the instance and is lost with it. An empty repository
    hands out one sample match the first time matches are listed.
    """

    def __init__(self, matches: Optional[List[MatchDomain]] = None):
        self.matches: List[MatchDomain] = list(matches or [])
        self.innings: List[InningDomain] = [i for m in self.matches for i in m.innings]

    def _find(self, match_id: str) -> Optional[MatchDomain]:
        match = next((m for m in self.matches if m.id == match_id), None)
        if match is None:
            return None
        innings = sorted(
            (i for i in self.innings if i.match_id == match_id),
            key=lambda i: i.inning_number,
        )
        return match.model_copy(update={"innings": innings})

    def _store(self, match: MatchDomain) -> None:
        self.matches = [m if m.id != match.id else match for m in self.matches]
        self.innings = [i for i in self.innings if i.match_id != match.id] + list(match.innings)

    def _not_found(self, match_id: str) -> Result:
        return Result.failure(
            Failure.not_found(
                f"Match {match_id} not found", resource_type="match", resource_id=match_id
            )
        )

    def get_matches(
        self,
        status: Optional[MatchStatus] = None,
        user_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[List[MatchDomain]]:
        if not self.matches:
            logger.debug("No matches in memory, adding sample match")
            self.matches.append(sample_match())

        matches = [self._find(m.id) for m in self.matches]
        if status is not None:
            matches = [m for m in matches if m.status == status]
        if user_id is not None:
            matches = [m for m in matches if m.created_by == user_id]
        return Result.success(matches[offset : offset + limit])

    def get_match_by_id(self, match_id: str) -> Result[MatchDomain]:
        match = self._find(match_id)
        if match is None:
            return self._not_found(match_id)
        return Result.success(match)

    def create_match(self, match: MatchDomain) -> Result[MatchDomain]:
        if self._find(match.id) is not None:
            return Result.failure(Failure.duplicate(f"Match {match.id} already exists"))
        self.matches.append(match.model_copy(update={"innings": []}))
        self.innings.extend(match.innings)
        return Result.success(match)

    def update_match(self, match: MatchDomain) -> Result[MatchDomain]:
        if self._find(match.id) is None:
            return self._not_found(match.id)
        self._store(match)
        return Result.success(match)

    def delete_match(self, match_id: str) -> Result[None]:
        if self._find(match_id) is None:
            return self._not_found(match_id)
        self.matches = [m for m in self.matches if m.id != match_id]
        self.innings = [i for i in self.innings if i.match_id != match_id]
        return Result.success(None)

    def start_match(
        self,
        match_id: str,
        batting_team_id: str,
        bowling_team_id: str,
        toss_winner: Optional[str] = None,
        toss_decision: Optional[TossDecision] = None,
    ) -> Result[MatchDomain]:
        match = self._find(match_id)
        if match is None:
            return self._not_found(match_id)
        if not match.is_upcoming:
            return Result.failure(
                Failure.invalid_match_state(match.status.value, MatchStatus.SCHEDULED.value)
            )
        started = match.started(batting_team_id, bowling_team_id, toss_winner, toss_decision)
        self._store(started)
        return Result.success(started)

    def end_match(
        self, match_id: str, outcome: Optional[MatchOutcome] = None
    ) -> Result[MatchDomain]:
        match = self._find(match_id)
        if match is None:
            return self._not_found(match_id)
        if not match.is_live:
            return Result.failure(
                Failure.invalid_match_state(match.status.value, MatchStatus.IN_PROGRESS.value)
            )
        finished = match.finished(outcome)
        self._store(finished)
        return Result.success(finished)

    def get_live_matches(self) -> Result[List[MatchDomain]]:
        return Result.success([self._find(m.id) for m in self.matches if m.is_live])

    def get_upcoming_matches(self) -> Result[List[MatchDomain]]:
        return Result.success([self._find(m.id) for m in self.matches if m.is_upcoming])

    def get_completed_matches(self) -> Result[List[MatchDomain]]:
        return Result.success([self._find(m.id) for m in self.matches if m.is_completed])

    # Scoring

    def get_match_score(self, match_id: str) -> Result[ScoreDomain]:
        match = self._find(match_id)
        if match is None:
            return self._not_found(match_id)
        inning = match.current_inning_entity
        if inning is None:
            return Result.failure(Failure.match("Match has not started"))
        return Result.success(
            ScoreDomain.from_inning(inning, match.total_overs, match.is_completed)
        )

    def record_ball(self, match_id: str, ball: BallDomain) -> Result[ScoreDomain]:
        match = self._find(match_id)
        if match is None:
            return self._not_found(match_id)
        inning = match.current_inning_entity
        if not match.is_live or inning is None or inning.is_complete:
            return Result.failure(
                Failure.invalid_match_state(match.status.value, MatchStatus.IN_PROGRESS.value)
            )
        updated = inning.with_ball(ball, match.total_overs, match.all_out_wickets)
        match = match.with_inning(updated)
        self._store(match)
        return Result.success(
            ScoreDomain.from_inning(updated, match.total_overs, match.is_completed)
        )

    def get_inning(self, match_id: str, inning_number: int) -> Result[InningDomain]:
        inning = next(
            (
                i
                for i in self.innings
                if i.match_id == match_id and i.inning_number == inning_number
            ),
            None,
        )
        if inning is None:
            return Result.failure(Failure.not_found(f"Inning {inning_number} not found"))
        return Result.success(inning)

    def complete_inning(self, match_id: str) -> Result[MatchDomain]:
        match = self._find(match_id)
        if match is None:
            return self._not_found(match_id)
        inning = match.current_inning_entity
        if not match.is_live or inning is None or inning.is_complete:
            return Result.failure(
                Failure.invalid_match_state(match.status.value, MatchStatus.IN_PROGRESS.value)
            )
        match = match.with_inning(inning.completed())
        self._store(match)
        return Result.success(match)
