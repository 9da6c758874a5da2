"""Repository interface for team data access."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..common.result import Result
from ..models.enums import TeamType
from ..models.team import TeamDomain


class TeamRepository(ABC):
    """Abstract repository for teams and their squads."""

    @abstractmethod
    def get_teams(
        self, team_type: Optional[TeamType] = None, limit: int = 20, offset: int = 0
    ) -> Result[List[TeamDomain]]:
        """
        Get teams, optionally filtered by type.

        Returns:
            Result containing list of teams or error information
        """
        pass

    @abstractmethod
    def get_team_by_id(self, team_id: str) -> Result[TeamDomain]:
        """
        Get a specific team by ID.

        Returns:
            Result containing the team, or a not found failure
        """
        pass

    @abstractmethod
    def create_team(self, team: TeamDomain) -> Result[TeamDomain]:
        pass

    @abstractmethod
    def update_team(self, team: TeamDomain) -> Result[TeamDomain]:
        pass

    @abstractmethod
    def delete_team(self, team_id: str) -> Result[None]:
        pass

    @abstractmethod
    def add_player_to_team(self, team_id: str, player_id: str) -> Result[TeamDomain]:
        """
        Add an existing player to a team's squad.

        Args:
            team_id: Team receiving the player
            player_id: Player to add

        Returns:
            Result containing the updated team or error information
        """
        pass

    @abstractmethod
    def remove_player_from_team(
        self, team_id: str, player_id: str
    ) -> Result[TeamDomain]:
        pass

    @abstractmethod
    def update_team_captain(
        self, team_id: str, captain_id: str, vice_captain_id: Optional[str] = None
    ) -> Result[TeamDomain]:
        pass

    @abstractmethod
    def search_teams(self, query: str) -> Result[List[TeamDomain]]:
        """Case-insensitive search on team name and short name."""
        pass
