"""Repository interface for live scoring."""

from abc import ABC, abstractmethod

from ..common.result import Result
from ..models.match import MatchDomain
from ..models.score import BallDomain, InningDomain, ScoreDomain


class ScoreRepository(ABC):
    """Abstract repository for ball-by-ball scoring of a match in progress."""

    @abstractmethod
    def get_match_score(self, match_id: str) -> Result[ScoreDomain]:
        """
        Get the score of the current (or last) inning.

        Returns:
            Result containing a score snapshot, or a failure when the match
            has not started
        """
        pass

    @abstractmethod
    def record_ball(self, match_id: str, ball: BallDomain) -> Result[ScoreDomain]:
        """
        Apply a delivery to the current inning.

        Completing the first inning opens the second with a target; completing
        the second inning completes the match with a computed outcome.

        Args:
            match_id: Match in progress
            ball: The delivery; its over and ball numbers are assigned here

        Returns:
            Result containing the score after the delivery
        """
        pass

    @abstractmethod
    def get_inning(self, match_id: str, inning_number: int) -> Result[InningDomain]:
        pass

    @abstractmethod
    def complete_inning(self, match_id: str) -> Result[MatchDomain]:
        """Close the current inning early (declaration, rain, forfeit)."""
        pass
