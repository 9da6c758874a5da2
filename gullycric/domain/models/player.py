"""Player domain model and career statistics."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .enums import BattingStyle, BowlingStyle, PlayerRole


class PlayerStats(BaseModel):
    """
    Batting, bowling and fielding statistics for a player.

    Stored averages may be stale; the calculated_* properties derive them from
    the raw counters.
    """

    matches_played: int = Field(default=0, ge=0)
    innings: int = Field(default=0, ge=0)
    not_outs: int = Field(default=0, ge=0)
    runs_scored: int = Field(default=0, ge=0)
    highest_score: int = Field(default=0, ge=0)
    balls_faced: int = Field(default=0, ge=0)
    centuries: int = Field(default=0, ge=0)
    half_centuries: int = Field(default=0, ge=0)
    fours: int = Field(default=0, ge=0)
    sixes: int = Field(default=0, ge=0)

    overs_bowled: int = Field(default=0, ge=0)
    balls_bowled: int = Field(default=0, ge=0)
    wickets_taken: int = Field(default=0, ge=0)
    runs_conceded: int = Field(default=0, ge=0)
    maiden_overs: int = Field(default=0, ge=0)
    five_wickets: int = Field(default=0, ge=0)

    catches: int = Field(default=0, ge=0)
    stumpings: int = Field(default=0, ge=0)
    run_outs: int = Field(default=0, ge=0)

    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    man_of_the_match_awards: int = Field(default=0, ge=0)

    @property
    def batting_average(self) -> float:
        dismissals = self.innings - self.not_outs
        if self.innings == 0 or dismissals <= 0:
            return 0.0
        return self.runs_scored / dismissals

    @property
    def strike_rate(self) -> float:
        if self.balls_faced == 0:
            return 0.0
        return self.runs_scored / self.balls_faced * 100

    @property
    def bowling_average(self) -> float:
        if self.wickets_taken == 0:
            return 0.0
        return self.runs_conceded / self.wickets_taken

    @property
    def economy_rate(self) -> float:
        if self.overs_bowled == 0:
            return 0.0
        return self.runs_conceded / self.overs_bowled

    @property
    def bowling_strike_rate(self) -> float:
        if self.wickets_taken == 0:
            return 0.0
        return self.balls_bowled / self.wickets_taken

    @property
    def total_dismissals(self) -> int:
        """Dismissals effected as a fielder or keeper."""
        return self.catches + self.stumpings


class PlayerDomain(BaseModel):
    """Domain model for a cricketer."""

    id: str = Field(..., min_length=1, description="Unique player ID")
    name: str = Field(..., min_length=1, max_length=80, description="Display name")
    nickname: Optional[str] = Field(None, max_length=40)
    date_of_birth: Optional[date] = Field(None, description="Date of birth")
    email: Optional[str] = None
    phone_number: Optional[str] = None
    team_id: Optional[str] = Field(None, description="Current team")
    role: PlayerRole = Field(default=PlayerRole.BATSMAN)
    batting_style: BattingStyle = Field(default=BattingStyle.RIGHT_HANDED)
    bowling_style: BowlingStyle = Field(default=BowlingStyle.NONE)
    jersey_number: Optional[int] = Field(None, ge=0, le=999)
    is_wicket_keeper: bool = False
    is_captain: bool = False
    is_vice_captain: bool = False
    career_stats: PlayerStats = Field(default_factory=PlayerStats)
    season_stats: PlayerStats = Field(default_factory=PlayerStats)
    achievements: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        trimmed = v.strip()
        if not trimmed:
            raise ValueError("Player name cannot be blank")
        return trimmed

    @property
    def age(self) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        today = date.today()
        years = today.year - self.date_of_birth.year
        if (today.month, today.day) < (self.date_of_birth.month, self.date_of_birth.day):
            years -= 1
        return years

    @property
    def is_all_rounder(self) -> bool:
        if self.role == PlayerRole.ALL_ROUNDER:
            return True
        stats = self.career_stats
        return (
            stats.wickets_taken > 0
            and stats.batting_average > 20
            and stats.bowling_average < 35
        )

    @property
    def primary_skill(self) -> str:
        return {
            PlayerRole.BATSMAN: "Batting",
            PlayerRole.BOWLER: "Bowling",
            PlayerRole.ALL_ROUNDER: "All-rounder",
            PlayerRole.WICKET_KEEPER: "Wicket Keeping",
            PlayerRole.SPECIALIST: "Specialist",
        }[self.role]

    @property
    def bats(self) -> bool:
        return self.role in (PlayerRole.BATSMAN, PlayerRole.ALL_ROUNDER)

    @property
    def bowls(self) -> bool:
        return self.role in (PlayerRole.BOWLER, PlayerRole.ALL_ROUNDER)
