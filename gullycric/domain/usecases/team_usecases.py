"""Use cases for teams and squads."""

import uuid
from typing import List, Optional

from pydantic import BaseModel

from ...utils.validators import validate_name
from ..common.result import Failure, Result
from ..models.enums import TeamType
from ..models.player import PlayerDomain
from ..models.team import TeamDomain
from ..repositories.team_repository import TeamRepository
from .base import UseCase


class CreateTeamParams(BaseModel):
    name: str
    short_name: Optional[str] = None
    team_type: TeamType = TeamType.FRIENDS
    city: Optional[str] = None
    home_venue: Optional[str] = None
    created_by: str = "system"
    players: List[PlayerDomain] = []
    max_players: int = 15
    min_players: int = 11


class CreateTeamUseCase(UseCase[TeamDomain, CreateTeamParams]):
    def __init__(self, repository: TeamRepository):
        self.repository = repository

    def __call__(self, params: CreateTeamParams) -> Result[TeamDomain]:
        error = validate_name(params.name, label="Team name")
        if error:
            return self.invalid(error, name=error)
        if params.min_players < 1 or params.max_players < 1:
            return self.invalid("Player limits must be at least 1")
        if params.min_players > params.max_players:
            return self.invalid("Minimum players cannot exceed maximum players")
        if len(params.players) > params.max_players:
            return self.invalid(f"A team can have at most {params.max_players} players")

        name = params.name.strip()
        team = TeamDomain(
            id=f"team_{uuid.uuid4().hex[:12]}",
            name=name,
            short_name=(params.short_name or name[:3]).upper()[:6],
            team_type=params.team_type,
            city=params.city,
            home_venue=params.home_venue,
            created_by=params.created_by,
            players=params.players,
            max_players=params.max_players,
            min_players=params.min_players,
        )
        return self.repository.create_team(team)


class GetTeamsParams(BaseModel):
    team_type: Optional[TeamType] = None
    limit: int = 20
    offset: int = 0


class GetTeamsUseCase(UseCase[List[TeamDomain], GetTeamsParams]):
    def __init__(self, repository: TeamRepository):
        self.repository = repository

    def __call__(self, params: GetTeamsParams) -> Result[List[TeamDomain]]:
        if params.limit <= 0:
            return self.invalid("Limit must be greater than 0")
        return self.repository.get_teams(
            team_type=params.team_type, limit=params.limit, offset=max(params.offset, 0)
        )


class TeamIdParams(BaseModel):
    team_id: str


class GetTeamUseCase(UseCase[TeamDomain, TeamIdParams]):
    def __init__(self, repository: TeamRepository):
        self.repository = repository

    def __call__(self, params: TeamIdParams) -> Result[TeamDomain]:
        if not params.team_id.strip():
            return self.invalid("Team ID is required")
        return self.repository.get_team_by_id(params.team_id.strip())


class TeamPlayerParams(BaseModel):
    team_id: str
    player_id: str


class AddPlayerToTeamUseCase(UseCase[TeamDomain, TeamPlayerParams]):
    """Add a player to a squad that has room and does not already include them."""

    def __init__(self, repository: TeamRepository):
        self.repository = repository

    def __call__(self, params: TeamPlayerParams) -> Result[TeamDomain]:
        if not params.team_id.strip() or not params.player_id.strip():
            return self.invalid("Team ID and player ID are required")

        team_result = self.repository.get_team_by_id(params.team_id)
        if team_result.is_failure:
            return team_result
        team = team_result.value
        if team.is_full:
            return Result.failure(
                Failure.team(f"{team.name} is full ({team.max_players} players)")
            )
        if team.has_player(params.player_id):
            return Result.failure(
                Failure.duplicate(
                    "Player is already in the team",
                    details={"team_id": team.id, "player_id": params.player_id},
                )
            )
        return self.repository.add_player_to_team(team.id, params.player_id)


class RemovePlayerFromTeamUseCase(UseCase[TeamDomain, TeamPlayerParams]):
    def __init__(self, repository: TeamRepository):
        self.repository = repository

    def __call__(self, params: TeamPlayerParams) -> Result[TeamDomain]:
        if not params.team_id.strip() or not params.player_id.strip():
            return self.invalid("Team ID and player ID are required")
        return self.repository.remove_player_from_team(
            params.team_id.strip(), params.player_id.strip()
        )


class UpdateTeamCaptainParams(BaseModel):
    team_id: str
    captain_id: str
    vice_captain_id: Optional[str] = None


class UpdateTeamCaptainUseCase(UseCase[TeamDomain, UpdateTeamCaptainParams]):
    def __init__(self, repository: TeamRepository):
        self.repository = repository

    def __call__(self, params: UpdateTeamCaptainParams) -> Result[TeamDomain]:
        if not params.team_id.strip() or not params.captain_id.strip():
            return self.invalid("Team ID and captain ID are required")
        if params.vice_captain_id and params.vice_captain_id == params.captain_id:
            return self.invalid("Captain and vice captain must be different players")

        team_result = self.repository.get_team_by_id(params.team_id)
        if team_result.is_failure:
            return team_result
        team = team_result.value
        if not team.has_player(params.captain_id):
            return Result.failure(Failure.team("Captain must be a member of the team"))
        if params.vice_captain_id and not team.has_player(params.vice_captain_id):
            return Result.failure(
                Failure.team("Vice captain must be a member of the team")
            )
        return self.repository.update_team_captain(
            team.id, params.captain_id, params.vice_captain_id
        )


class SearchParams(BaseModel):
    query: str


class SearchTeamsUseCase(UseCase[List[TeamDomain], SearchParams]):
    def __init__(self, repository: TeamRepository):
        self.repository = repository

    def __call__(self, params: SearchParams) -> Result[List[TeamDomain]]:
        if not params.query.strip():
            return self.invalid("Search query is required")
        return self.repository.search_teams(params.query.strip())
