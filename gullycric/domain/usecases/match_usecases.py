"""Use cases for creating, browsing and running matches."""

import uuid
from datetime import datetime
from typing import List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from ...config.settings import MatchConfig
from ..common.result import Failure, Result
from ..models.enums import MatchFormat, MatchStatus, MatchType, TossDecision
from ..models.match import MatchDomain, MatchOutcome, MatchRules
from ..models.team import TeamDomain
from ..repositories.match_repository import MatchRepository
from .base import NoParams, UseCase


def _format_for_overs(total_overs: int) -> MatchFormat:
    return {10: MatchFormat.T10, 20: MatchFormat.T20, 50: MatchFormat.ODI}.get(
        total_overs, MatchFormat.CUSTOM
    )


def _rules_for_overs(total_overs: int) -> MatchRules:
    if total_overs == 20:
        return MatchRules.t20()
    if total_overs == 50:
        return MatchRules.odi()
    return MatchRules.for_overs(total_overs)


class CreateMatchParams(BaseModel):
    title: str
    team1: TeamDomain
    team2: TeamDomain
    total_overs: int = 20
    players_per_team: int = 11
    description: str = ""
    match_type: MatchType = MatchType.FRIENDLY
    venue: Optional[str] = None
    start_time: Optional[datetime] = None
    created_by: str = "system"
    rules: Optional[MatchRules] = None


class CreateMatchUseCase(UseCase[MatchDomain, CreateMatchParams]):
    """Validate a new match and hand it to the repository as scheduled."""

    def __init__(self, repository: MatchRepository, match_config: MatchConfig = None):
        self.repository = repository
        self.match_config = match_config or MatchConfig()

    def __call__(self, params: CreateMatchParams) -> Result[MatchDomain]:
        error = self._validate(params)
        if error:
            logger.debug(f"Rejected match '{params.title}': {error}")
            return self.invalid(error)

        match = MatchDomain(
            id=f"match_{uuid.uuid4().hex[:12]}",
            title=params.title.strip(),
            description=params.description,
            match_type=params.match_type,
            match_format=_format_for_overs(params.total_overs),
            status=MatchStatus.SCHEDULED,
            start_time=params.start_time,
            venue=params.venue,
            created_by=params.created_by,
            team1=params.team1,
            team2=params.team2,
            total_overs=params.total_overs,
            players_per_team=params.players_per_team,
            rules=params.rules or _rules_for_overs(params.total_overs),
        )
        return self.repository.create_match(match)

    def _validate(self, params: CreateMatchParams) -> Optional[str]:
        cfg = self.match_config
        if not params.title.strip():
            return "Match title is required"
        if params.team1.id == params.team2.id:
            return "Team 1 and Team 2 must be different"
        if params.total_overs <= 0:
            return "Total overs must be greater than 0"
        if params.total_overs > cfg.max_overs:
            return f"Total overs cannot exceed {cfg.max_overs}"
        if not (
            cfg.min_players_per_team
            <= params.players_per_team
            <= cfg.max_players_per_team
        ):
            return (
                f"Players per team must be between {cfg.min_players_per_team} "
                f"and {cfg.max_players_per_team}"
            )
        if params.start_time is not None:
            now = datetime.now(params.start_time.tzinfo)
            if params.start_time < now:
                return "Start time cannot be in the past"
        return None


class GetMatchesParams(BaseModel):
    status: Optional[MatchStatus] = None
    user_id: Optional[str] = None
    limit: int = 20
    offset: int = 0


class GetMatchesUseCase(UseCase[List[MatchDomain], GetMatchesParams]):
    def __init__(self, repository: MatchRepository):
        self.repository = repository

    def __call__(self, params: GetMatchesParams) -> Result[List[MatchDomain]]:
        if params.limit <= 0:
            return self.invalid("Limit must be greater than 0")
        if params.offset < 0:
            return self.invalid("Offset cannot be negative")
        return self.repository.get_matches(
            status=params.status,
            user_id=params.user_id,
            limit=params.limit,
            offset=params.offset,
        )


class MatchIdParams(BaseModel):
    match_id: str


class GetMatchUseCase(UseCase[MatchDomain, MatchIdParams]):
    def __init__(self, repository: MatchRepository):
        self.repository = repository

    def __call__(self, params: MatchIdParams) -> Result[MatchDomain]:
        if not params.match_id.strip():
            return self.invalid("Match ID is required")
        return self.repository.get_match_by_id(params.match_id.strip())


class GetLiveMatchesUseCase(UseCase[List[MatchDomain], NoParams]):
    def __init__(self, repository: MatchRepository):
        self.repository = repository

    def __call__(self, params: NoParams = NoParams()) -> Result[List[MatchDomain]]:
        return self.repository.get_live_matches()


class GetUpcomingMatchesUseCase(UseCase[List[MatchDomain], NoParams]):
    def __init__(self, repository: MatchRepository):
        self.repository = repository

    def __call__(self, params: NoParams = NoParams()) -> Result[List[MatchDomain]]:
        return self.repository.get_upcoming_matches()


class GetCompletedMatchesUseCase(UseCase[List[MatchDomain], NoParams]):
    def __init__(self, repository: MatchRepository):
        self.repository = repository

    def __call__(self, params: NoParams = NoParams()) -> Result[List[MatchDomain]]:
        return self.repository.get_completed_matches()


class UpdateMatchParams(BaseModel):
    match: MatchDomain


class UpdateMatchUseCase(UseCase[MatchDomain, UpdateMatchParams]):
    def __init__(self, repository: MatchRepository):
        self.repository = repository

    def __call__(self, params: UpdateMatchParams) -> Result[MatchDomain]:
        match = params.match
        if not match.id.strip():
            return self.invalid("Match ID is required")
        if not match.title.strip():
            return self.invalid("Match title is required")
        if match.team1.id == match.team2.id:
            return self.invalid("Team 1 and Team 2 must be different")
        return self.repository.update_match(match)


class DeleteMatchUseCase(UseCase[None, MatchIdParams]):
    def __init__(self, repository: MatchRepository):
        self.repository = repository

    def __call__(self, params: MatchIdParams) -> Result[None]:
        if not params.match_id.strip():
            return self.invalid("Match ID is required")
        return self.repository.delete_match(params.match_id.strip())


class StartMatchParams(BaseModel):
    match_id: str
    batting_team_id: Optional[str] = None
    bowling_team_id: Optional[str] = None
    toss_winner: Optional[str] = None
    toss_decision: Optional[TossDecision] = None


class StartMatchUseCase(UseCase[MatchDomain, StartMatchParams]):
    """
    Start a scheduled match.

    When the batting side is not given it follows from the toss; without a
    toss, team 1 bats first.
    """

    def __init__(self, repository: MatchRepository):
        self.repository = repository

    def __call__(self, params: StartMatchParams) -> Result[MatchDomain]:
        match_id = params.match_id.strip()
        if not match_id:
            return self.invalid("Match ID is required")

        match_result = self.repository.get_match_by_id(match_id)
        if match_result.is_failure:
            return match_result
        match = match_result.value

        if match.status != MatchStatus.SCHEDULED:
            return self.invalid("Match is not in scheduled status")
        if not match.can_start:
            return self.invalid("Match cannot be started - check team compositions")

        batting, bowling = self._batting_order(match, params)
        if batting == bowling:
            return self.invalid("Batting and bowling teams must be different")
        if batting not in match.team_ids or bowling not in match.team_ids:
            return self.invalid("Batting and bowling teams must play in this match")
        if params.toss_winner is not None and params.toss_winner not in match.team_ids:
            return self.invalid("Toss winner must play in this match")

        logger.info(f"🏏 Starting match {match.title} ({match_id})")
        return self.repository.start_match(
            match_id,
            batting_team_id=batting,
            bowling_team_id=bowling,
            toss_winner=params.toss_winner,
            toss_decision=params.toss_decision,
        )

    @staticmethod
    def _batting_order(match: MatchDomain, params: StartMatchParams):
        batting, bowling = params.batting_team_id, params.bowling_team_id
        if batting is None and bowling is None:
            if params.toss_winner in match.team_ids and params.toss_decision:
                other = next(t for t in match.team_ids if t != params.toss_winner)
                if params.toss_decision == TossDecision.BAT:
                    return params.toss_winner, other
                return other, params.toss_winner
            return match.team1.id, match.team2.id
        if batting is None:
            batting = next((t for t in match.team_ids if t != bowling), None)
        if bowling is None:
            bowling = next((t for t in match.team_ids if t != batting), None)
        return batting, bowling


class EndMatchParams(BaseModel):
    match_id: str
    outcome: Optional[MatchOutcome] = Field(
        None, description="Result to record; derived from the innings when absent"
    )


class EndMatchUseCase(UseCase[MatchDomain, EndMatchParams]):
    def __init__(self, repository: MatchRepository):
        self.repository = repository

    def __call__(self, params: EndMatchParams) -> Result[MatchDomain]:
        match_id = params.match_id.strip()
        if not match_id:
            return self.invalid("Match ID is required")

        match_result = self.repository.get_match_by_id(match_id)
        if match_result.is_failure:
            return match_result
        match = match_result.value
        if match.status != MatchStatus.IN_PROGRESS:
            return Result.failure(
                Failure.invalid_match_state(match.status.value, MatchStatus.IN_PROGRESS.value)
            )
        if params.outcome and params.outcome.winner_team_id not in (None, *match.team_ids):
            return self.invalid("Winner must play in this match")

        logger.info(f"🏁 Ending match {match.title} ({match_id})")
        return self.repository.end_match(match_id, params.outcome)
