"""Repository interface for player data access."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..common.result import Result
from ..models.enums import PlayerRole
from ..models.player import PlayerDomain, PlayerStats


class PlayerRepository(ABC):
    """
    Abstract repository for player data access.

    Provides a consistent interface for accessing player data regardless
    of the underlying data source.
    """

    @abstractmethod
    def get_players(
        self,
        team_id: Optional[str] = None,
        role: Optional[PlayerRole] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[List[PlayerDomain]]:
        """
        Get players, optionally filtered by team and role.

        Returns:
            Result containing list of players or error information
        """
        pass

    @abstractmethod
    def get_player_by_id(self, player_id: str) -> Result[PlayerDomain]:
        """
        Get a specific player by ID.

        Args:
            player_id: The player's ID

        Returns:
            Result containing the player, or a not found failure
        """
        pass

    @abstractmethod
    def create_player(self, player: PlayerDomain) -> Result[PlayerDomain]:
        pass

    @abstractmethod
    def update_player(self, player: PlayerDomain) -> Result[PlayerDomain]:
        pass

    @abstractmethod
    def delete_player(self, player_id: str) -> Result[None]:
        pass

    @abstractmethod
    def update_player_stats(
        self, player_id: str, stats: PlayerStats
    ) -> Result[PlayerDomain]:
        """Replace a player's career statistics."""
        pass

    @abstractmethod
    def search_players(self, query: str) -> Result[List[PlayerDomain]]:
        pass

    @abstractmethod
    def get_top_batsmen(self, limit: int = 10) -> Result[List[PlayerDomain]]:
        """
        Get the leading run scorers.

        Returns:
            Result containing players ordered by career runs, highest first
        """
        pass

    @abstractmethod
    def get_top_bowlers(self, limit: int = 10) -> Result[List[PlayerDomain]]:
        """
        Get the leading wicket takers.

        Returns:
            Result containing players ordered by career wickets, highest first
        """
        pass
