"""Use cases for players and their statistics."""

import uuid
from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from ...utils.validators import validate_name
from ..common.result import Result
from ..models.enums import BattingStyle, BowlingStyle, PlayerRole
from ..models.player import PlayerDomain, PlayerStats
from ..repositories.player_repository import PlayerRepository
from .base import UseCase
from .team_usecases import SearchParams


class CreatePlayerParams(BaseModel):
    name: str
    role: PlayerRole = PlayerRole.BATSMAN
    batting_style: BattingStyle = BattingStyle.RIGHT_HANDED
    bowling_style: BowlingStyle = BowlingStyle.NONE
    team_id: Optional[str] = None
    date_of_birth: Optional[date] = None
    jersey_number: Optional[int] = None
    is_wicket_keeper: bool = False


class CreatePlayerUseCase(UseCase[PlayerDomain, CreatePlayerParams]):
    def __init__(self, repository: PlayerRepository):
        self.repository = repository

    def __call__(self, params: CreatePlayerParams) -> Result[PlayerDomain]:
        error = validate_name(params.name, label="Player name")
        if error:
            return self.invalid(error, name=error)
        if params.date_of_birth and params.date_of_birth > date.today():
            return self.invalid("Date of birth cannot be in the future")
        if params.jersey_number is not None and not 0 <= params.jersey_number <= 999:
            return self.invalid("Jersey number must be between 0 and 999")

        player = PlayerDomain(
            id=f"player_{uuid.uuid4().hex[:12]}",
            name=params.name.strip(),
            role=params.role,
            batting_style=params.batting_style,
            bowling_style=params.bowling_style,
            team_id=params.team_id,
            date_of_birth=params.date_of_birth,
            jersey_number=params.jersey_number,
            is_wicket_keeper=params.is_wicket_keeper
            or params.role == PlayerRole.WICKET_KEEPER,
        )
        return self.repository.create_player(player)


class GetPlayersParams(BaseModel):
    team_id: Optional[str] = None
    role: Optional[PlayerRole] = None
    limit: int = 50
    offset: int = 0


class GetPlayersUseCase(UseCase[List[PlayerDomain], GetPlayersParams]):
    def __init__(self, repository: PlayerRepository):
        self.repository = repository

    def __call__(self, params: GetPlayersParams) -> Result[List[PlayerDomain]]:
        if params.limit <= 0:
            return self.invalid("Limit must be greater than 0")
        return self.repository.get_players(
            team_id=params.team_id,
            role=params.role,
            limit=params.limit,
            offset=max(params.offset, 0),
        )


class PlayerIdParams(BaseModel):
    player_id: str


class GetPlayerUseCase(UseCase[PlayerDomain, PlayerIdParams]):
    def __init__(self, repository: PlayerRepository):
        self.repository = repository

    def __call__(self, params: PlayerIdParams) -> Result[PlayerDomain]:
        if not params.player_id.strip():
            return self.invalid("Player ID is required")
        return self.repository.get_player_by_id(params.player_id.strip())


class UpdatePlayerStatsParams(BaseModel):
    player_id: str
    stats: PlayerStats


class UpdatePlayerStatsUseCase(UseCase[PlayerDomain, UpdatePlayerStatsParams]):
    def __init__(self, repository: PlayerRepository):
        self.repository = repository

    def __call__(self, params: UpdatePlayerStatsParams) -> Result[PlayerDomain]:
        if not params.player_id.strip():
            return self.invalid("Player ID is required")
        stats = params.stats
        if stats.not_outs > stats.innings:
            return self.invalid("Not outs cannot exceed innings")
        if stats.innings > stats.matches_played * 2 and stats.matches_played:
            return self.invalid("Innings cannot exceed two per match")
        if stats.highest_score > stats.runs_scored:
            return self.invalid("Highest score cannot exceed total runs")
        return self.repository.update_player_stats(params.player_id.strip(), stats)


class SearchPlayersUseCase(UseCase[List[PlayerDomain], SearchParams]):
    def __init__(self, repository: PlayerRepository):
        self.repository = repository

    def __call__(self, params: SearchParams) -> Result[List[PlayerDomain]]:
        if not params.query.strip():
            return self.invalid("Search query is required")
        return self.repository.search_players(params.query.strip())


class TopPlayersParams(BaseModel):
    limit: int = 10


class GetTopBatsmenUseCase(UseCase[List[PlayerDomain], TopPlayersParams]):
    def __init__(self, repository: PlayerRepository):
        self.repository = repository

    def __call__(self, params: TopPlayersParams = TopPlayersParams()) -> Result[List[PlayerDomain]]:
        if params.limit <= 0:
            return self.invalid("Limit must be greater than 0")
        return self.repository.get_top_batsmen(params.limit)


class GetTopBowlersUseCase(UseCase[List[PlayerDomain], TopPlayersParams]):
    def __init__(self, repository: PlayerRepository):
        self.repository = repository

    def __call__(self, params: TopPlayersParams = TopPlayersParams()) -> Result[List[PlayerDomain]]:
        if params.limit <= 0:
            return self.invalid("Limit must be greater than 0")
        return self.repository.get_top_bowlers(params.limit)
