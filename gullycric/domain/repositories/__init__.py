"""Repository interfaces for GullyCric data access."""

from .auth_repository import AuthRepository
from .match_repository import MatchRepository
from .player_repository import PlayerRepository
from .score_repository import ScoreRepository
from .team_repository import TeamRepository

__all__ = [
    "AuthRepository",
    "MatchRepository",
    "PlayerRepository",
    "ScoreRepository",
    "TeamRepository",
]
