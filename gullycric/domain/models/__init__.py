"""Domain models for GullyCric matches, teams, players, scoring and users."""

from .enums import (
    BallType,
    BattingStyle,
    BowlingStyle,
    ExtraType,
    InningStatus,
    MatchFormat,
    MatchStatus,
    MatchType,
    PlayerRole,
    ResultType,
    TeamType,
    TossDecision,
    UserRole,
    UserStatus,
    WicketType,
)
from .match import MatchDomain, MatchOutcome, MatchRules
from .player import PlayerDomain, PlayerStats
from .score import BallDomain, InningDomain, OverDomain, ScoreDomain, format_overs
from .team import TeamDomain, TeamStats, TeamStrength
from .user import AuthSession, UserDomain, UserPreferences

__all__ = [
    "BallType",
    "BattingStyle",
    "BowlingStyle",
    "ExtraType",
    "InningStatus",
    "MatchFormat",
    "MatchStatus",
    "MatchType",
    "PlayerRole",
    "ResultType",
    "TeamType",
    "TossDecision",
    "UserRole",
    "UserStatus",
    "WicketType",
    "MatchDomain",
    "MatchOutcome",
    "MatchRules",
    "PlayerDomain",
    "PlayerStats",
    "BallDomain",
    "InningDomain",
    "OverDomain",
    "ScoreDomain",
    "format_overs",
    "TeamDomain",
    "TeamStats",
    "TeamStrength",
    "AuthSession",
    "UserDomain",
    "UserPreferences",
]
