"""Team domain model with squad composition helpers."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from .enums import PlayerRole, TeamType
from .player import PlayerDomain

# Ideal counts used to rate squad balance
IDEAL_BATSMEN = 6
IDEAL_BOWLERS = 5
IDEAL_FIELDERS = 11
IDEAL_KEEPERS = 1


class TeamStats(BaseModel):
    """Aggregate results for a team."""

    matches_played: int = Field(default=0, ge=0)
    matches_won: int = Field(default=0, ge=0)
    matches_lost: int = Field(default=0, ge=0)
    matches_drawn: int = Field(default=0, ge=0)
    matches_tied: int = Field(default=0, ge=0)
    matches_abandoned: int = Field(default=0, ge=0)
    total_runs: int = Field(default=0, ge=0)
    total_wickets: int = Field(default=0, ge=0)
    highest_score: int = Field(default=0, ge=0)
    lowest_score: int = Field(default=0, ge=0)
    last_match_date: Optional[datetime] = None
    last_match_result: Optional[str] = None

    @property
    def win_percentage(self) -> float:
        if self.matches_played == 0:
            return 0.0
        return self.matches_won / self.matches_played * 100

    @property
    def average_score(self) -> float:
        if self.matches_played == 0:
            return 0.0
        return self.total_runs / self.matches_played


class TeamStrength(BaseModel):
    """Squad balance ratings on a 0-5 scale."""

    batting: float = Field(..., ge=0.0, le=5.0)
    bowling: float = Field(..., ge=0.0, le=5.0)
    fielding: float = Field(..., ge=0.0, le=5.0)
    wicket_keeping: float = Field(..., ge=0.0, le=5.0)

    @property
    def overall(self) -> float:
        return (self.batting + self.bowling + self.fielding + self.wicket_keeping) / 4

    @staticmethod
    def rating(count: int, ideal: int) -> float:
        if count >= ideal:
            return 5.0
        return count / ideal * 5.0


class TeamDomain(BaseModel):
    """Domain model for a cricket team and its squad."""

    id: str = Field(..., min_length=1, description="Unique team ID")
    name: str = Field(..., min_length=1, max_length=80)
    short_name: Optional[str] = Field(None, max_length=6)
    description: Optional[str] = None
    team_type: TeamType = Field(default=TeamType.FRIENDS)
    home_venue: Optional[str] = None
    city: Optional[str] = None
    captain_id: Optional[str] = None
    vice_captain_id: Optional[str] = None
    created_by: str = Field(default="system")
    players: List[PlayerDomain] = Field(default_factory=list)
    max_players: int = Field(default=15, ge=1, le=30)
    min_players: int = Field(default=11, ge=1, le=30)
    stats: TeamStats = Field(default_factory=TeamStats)
    is_active: bool = True
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def validate_squad_limits(self):
        if self.min_players > self.max_players:
            raise ValueError("min_players must not exceed max_players")
        return self

    def _player(self, player_id: Optional[str]) -> Optional[PlayerDomain]:
        if player_id is None:
            return None
        return next((p for p in self.players if p.id == player_id), None)

    def has_player(self, player_id: str) -> bool:
        return self._player(player_id) is not None

    @property
    def captain(self) -> Optional[PlayerDomain]:
        return self._player(self.captain_id)

    @property
    def vice_captain(self) -> Optional[PlayerDomain]:
        return self._player(self.vice_captain_id)

    @property
    def active_players(self) -> List[PlayerDomain]:
        return [p for p in self.players if p.is_active]

    @property
    def batsmen(self) -> List[PlayerDomain]:
        return [p for p in self.players if p.bats]

    @property
    def bowlers(self) -> List[PlayerDomain]:
        return [p for p in self.players if p.bowls]

    @property
    def all_rounders(self) -> List[PlayerDomain]:
        return [p for p in self.players if p.role == PlayerRole.ALL_ROUNDER]

    @property
    def wicket_keepers(self) -> List[PlayerDomain]:
        return [p for p in self.players if p.is_wicket_keeper]

    @property
    def has_minimum_players(self) -> bool:
        return len(self.active_players) >= self.min_players

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    @property
    def available_spots(self) -> int:
        return max(self.max_players - len(self.players), 0)

    def strength(self) -> TeamStrength:
        """
        Rate squad balance against an ideal XI.

        All-rounders count towards both batting and bowling.
        """
        return TeamStrength(
            batting=TeamStrength.rating(len(self.batsmen), IDEAL_BATSMEN),
            bowling=TeamStrength.rating(len(self.bowlers), IDEAL_BOWLERS),
            fielding=TeamStrength.rating(len(self.players), IDEAL_FIELDERS),
            wicket_keeping=TeamStrength.rating(len(self.wicket_keepers), IDEAL_KEEPERS),
        )
