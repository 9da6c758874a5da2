"""Repository interface for match data access."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..common.result import Result
from ..models.enums import MatchStatus, TossDecision
from ..models.match import MatchDomain, MatchOutcome


class MatchRepository(ABC):
    """
    Abstract repository for match data access.

    Provides a consistent interface for accessing matches regardless of the
    underlying data source (mock backend, local store, in-memory lists).
    """

    @abstractmethod
    def get_matches(
        self,
        status: Optional[MatchStatus] = None,
        user_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[List[MatchDomain]]:
        """
        Get matches, optionally filtered.

        Args:
            status: Only matches in this status
            user_id: Only matches created by this user
            limit: Maximum number of matches returned
            offset: Number of matches skipped

        Returns:
            Result containing list of matches or error information
        """
        pass

    @abstractmethod
    def get_match_by_id(self, match_id: str) -> Result[MatchDomain]:
        """
        Get a specific match by ID.

        Returns:
            Result containing the match, or a not found failure
        """
        pass

    @abstractmethod
    def create_match(self, match: MatchDomain) -> Result[MatchDomain]:
        """Persist a new match and return it as stored."""
        pass

    @abstractmethod
    def update_match(self, match: MatchDomain) -> Result[MatchDomain]:
        """Replace a stored match with the given version."""
        pass

    @abstractmethod
    def delete_match(self, match_id: str) -> Result[None]:
        """Delete a match together with its innings."""
        pass

    @abstractmethod
    def start_match(
        self,
        match_id: str,
        batting_team_id: str,
        bowling_team_id: str,
        toss_winner: Optional[str] = None,
        toss_decision: Optional[TossDecision] = None,
    ) -> Result[MatchDomain]:
        """
        Move a scheduled match into progress and open the first inning.

        Args:
            match_id: Match to start
            batting_team_id: Team batting first
            bowling_team_id: Team bowling first
            toss_winner: Team that won the toss
            toss_decision: What the toss winner chose

        Returns:
            Result containing the started match or error information
        """
        pass

    @abstractmethod
    def end_match(
        self, match_id: str, outcome: Optional[MatchOutcome] = None
    ) -> Result[MatchDomain]:
        """
        Complete a match.

        When no outcome is given it is derived from the innings, or recorded
        as no result when fewer than two innings were played.
        """
        pass

    @abstractmethod
    def get_live_matches(self) -> Result[List[MatchDomain]]:
        pass

    @abstractmethod
    def get_upcoming_matches(self) -> Result[List[MatchDomain]]:
        pass

    @abstractmethod
    def get_completed_matches(self) -> Result[List[MatchDomain]]:
        pass
