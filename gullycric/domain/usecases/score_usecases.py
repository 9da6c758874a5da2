"""Use cases for live ball-by-ball scoring."""

from typing import Optional

from loguru import logger
from pydantic import BaseModel

from ..common.result import Failure, Result
from ..models.enums import BallType, MatchStatus, WicketType
from ..models.match import MatchDomain
from ..models.score import BallDomain, InningDomain, ScoreDomain
from ..repositories.match_repository import MatchRepository
from ..repositories.score_repository import ScoreRepository
from .base import UseCase
from .match_usecases import MatchIdParams


class RecordBallParams(BaseModel):
    match_id: str
    bowler_id: str
    striker_id: str
    non_striker_id: Optional[str] = None
    runs: int = 0
    ball_type: BallType = BallType.NORMAL
    is_wicket: bool = False
    wicket_type: Optional[WicketType] = None
    dismissed_player_id: Optional[str] = None
    fielder_id: Optional[str] = None
    commentary: Optional[str] = None


class RecordBallUseCase(UseCase[ScoreDomain, RecordBallParams]):
    """Record one delivery for a match in progress."""

    def __init__(self, score_repository: ScoreRepository, match_repository: MatchRepository):
        self.score_repository = score_repository
        self.match_repository = match_repository

    def __call__(self, params: RecordBallParams) -> Result[ScoreDomain]:
        if not params.match_id.strip():
            return self.invalid("Match ID is required")
        if not params.bowler_id.strip() or not params.striker_id.strip():
            return self.invalid("Bowler and striker are required")
        if not 0 <= params.runs <= 7:
            return self.invalid("Runs must be between 0 and 7", runs="0-7")
        if params.is_wicket and params.wicket_type is None:
            return self.invalid("Wicket type is required for a wicket")
        if not params.is_wicket and params.wicket_type is not None:
            return self.invalid("Wicket type given for a ball without a wicket")

        match_result = self.match_repository.get_match_by_id(params.match_id.strip())
        if match_result.is_failure:
            return match_result
        match = match_result.value
        if match.status != MatchStatus.IN_PROGRESS:
            return Result.failure(
                Failure.invalid_match_state(
                    match.status.value, MatchStatus.IN_PROGRESS.value
                )
            )
        if params.ball_type == BallType.WIDE and not match.rules.allow_wide_deliveries:
            return Result.failure(Failure.score_update("Wides are not allowed in this match"))
        if params.ball_type == BallType.NO_BALL and not match.rules.allow_no_balls:
            return Result.failure(Failure.score_update("No-balls are not allowed in this match"))

        ball = BallDomain(
            bowler_id=params.bowler_id,
            striker_id=params.striker_id,
            non_striker_id=params.non_striker_id,
            runs_scored=params.runs,
            ball_type=params.ball_type,
            is_wicket=params.is_wicket,
            wicket_type=params.wicket_type,
            dismissed_player_id=params.dismissed_player_id
            or (params.striker_id if params.is_wicket else None),
            fielder_id=params.fielder_id,
            commentary=params.commentary,
        )
        logger.debug(f"Ball for {match.id}: {ball.description}")
        return self.score_repository.record_ball(match.id, ball)


class GetMatchScoreUseCase(UseCase[ScoreDomain, MatchIdParams]):
    def __init__(self, repository: ScoreRepository):
        self.repository = repository

    def __call__(self, params: MatchIdParams) -> Result[ScoreDomain]:
        if not params.match_id.strip():
            return self.invalid("Match ID is required")
        return self.repository.get_match_score(params.match_id.strip())


class GetInningParams(BaseModel):
    match_id: str
    inning_number: int


class GetInningUseCase(UseCase[InningDomain, GetInningParams]):
    def __init__(self, repository: ScoreRepository):
        self.repository = repository

    def __call__(self, params: GetInningParams) -> Result[InningDomain]:
        if not params.match_id.strip():
            return self.invalid("Match ID is required")
        if params.inning_number not in (1, 2):
            return self.invalid("Inning number must be 1 or 2")
        return self.repository.get_inning(params.match_id.strip(), params.inning_number)


class CompleteInningUseCase(UseCase[MatchDomain, MatchIdParams]):
    def __init__(self, repository: ScoreRepository):
        self.repository = repository

    def __call__(self, params: MatchIdParams) -> Result[MatchDomain]:
        if not params.match_id.strip():
            return self.invalid("Match ID is required")
        return self.repository.complete_inning(params.match_id.strip())
