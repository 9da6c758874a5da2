"""Match domain model, playing conditions and result."""

from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .enums import (
    InningStatus,
    MatchFormat,
    MatchStatus,
    MatchType,
    ResultType,
    TossDecision,
)
from .score import InningDomain
from .team import TeamDomain


def naive_local(value: Optional[datetime]) -> Optional[datetime]:
    """Aware datetimes become naive local time; naive ones pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class MatchRules(BaseModel):
    """Playing conditions for a match."""

    max_overs_per_bowler: int = Field(default=4, ge=1)
    powerplay_overs: int = Field(default=6, ge=0)
    allow_wide_deliveries: bool = True
    allow_no_balls: bool = True
    allow_byes: bool = True
    allow_leg_byes: bool = True
    max_extras_per_over: int = Field(default=10, ge=0)
    is_dls_enabled: bool = False
    is_timer_enabled: bool = False
    time_per_over: Optional[int] = Field(None, ge=1, description="Seconds per over")
    allow_substitutions: bool = False
    max_substitutions: int = Field(default=0, ge=0)

    @classmethod
    def t20(cls) -> "MatchRules":
        return cls(
            max_overs_per_bowler=4,
            powerplay_overs=6,
            is_dls_enabled=False,
            is_timer_enabled=True,
            time_per_over=90,
            allow_substitutions=False,
            max_substitutions=0,
        )

    @classmethod
    def odi(cls) -> "MatchRules":
        return cls(
            max_overs_per_bowler=10,
            powerplay_overs=10,
            is_dls_enabled=True,
            is_timer_enabled=False,
            allow_substitutions=True,
            max_substitutions=2,
        )

    @classmethod
    def for_overs(cls, total_overs: int) -> "MatchRules":
        """Default rules for an arbitrary match length (bowler quota is a fifth)."""
        return cls(
            max_overs_per_bowler=max(1, -(-total_overs // 5)),
            powerplay_overs=min(6, total_overs),
        )


class MatchOutcome(BaseModel):
    """Result of a completed match."""

    winner_team_id: Optional[str] = None
    result_type: ResultType
    win_margin: Optional[int] = Field(None, ge=0)
    win_margin_type: Optional[str] = Field(None, description="runs or wickets")
    man_of_the_match: Optional[str] = None
    summary: str = ""


class MatchDomain(BaseModel):
    """
    Domain model for a cricket match.

    A match moves scheduled -> in_progress -> completed. Innings are stored in
    order; current_inning is 0 until the match starts.
    """

    id: str = Field(..., min_length=1, description="Unique match ID")
    title: str = Field(..., description="Match title")
    description: str = ""
    match_type: MatchType = Field(default=MatchType.FRIENDLY)
    match_format: MatchFormat = Field(default=MatchFormat.T20)
    status: MatchStatus = Field(default=MatchStatus.SCHEDULED)
    created_at: datetime = Field(default_factory=datetime.now)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    venue: Optional[str] = None
    created_by: str = Field(default="system")
    team1: TeamDomain
    team2: TeamDomain
    toss_winner: Optional[str] = None
    toss_decision: Optional[TossDecision] = None
    total_overs: int = Field(default=20, description="Overs per side")
    players_per_team: int = Field(default=11, description="Players per side")
    rules: MatchRules = Field(default_factory=MatchRules.t20)
    current_inning: int = Field(default=0, ge=0, le=2)
    batting_team_id: Optional[str] = None
    bowling_team_id: Optional[str] = None
    innings: List[InningDomain] = Field(default_factory=list)
    outcome: Optional[MatchOutcome] = None

    @field_validator("created_at", "start_time", "end_time")
    @classmethod
    def to_naive_local(cls, v):
        return naive_local(v)

    @property
    def is_live(self) -> bool:
        return self.status == MatchStatus.IN_PROGRESS

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED

    @property
    def is_upcoming(self) -> bool:
        return self.status == MatchStatus.SCHEDULED

    @property
    def can_start(self) -> bool:
        return (
            self.status == MatchStatus.SCHEDULED
            and len(self.team1.players) >= self.players_per_team
            and len(self.team2.players) >= self.players_per_team
        )

    @property
    def team_ids(self) -> List[str]:
        return [self.team1.id, self.team2.id]

    def team(self, team_id: Optional[str]) -> Optional[TeamDomain]:
        if team_id == self.team1.id:
            return self.team1
        if team_id == self.team2.id:
            return self.team2
        return None

    @property
    def batting_team(self) -> Optional[TeamDomain]:
        return self.team(self.batting_team_id)

    @property
    def bowling_team(self) -> Optional[TeamDomain]:
        return self.team(self.bowling_team_id)

    @property
    def current_inning_entity(self) -> Optional[InningDomain]:
        if self.current_inning == 0 or len(self.innings) < self.current_inning:
            return None
        return self.innings[self.current_inning - 1]

    @property
    def all_out_wickets(self) -> int:
        return max(self.players_per_team - 1, 1)

    @property
    def duration(self) -> Optional[timedelta]:
        if self.start_time is None:
            return None
        end = self.end_time or datetime.now(self.start_time.tzinfo)
        return end - self.start_time

    def started(
        self,
        batting_team_id: str,
        bowling_team_id: str,
        toss_winner: Optional[str] = None,
        toss_decision: Optional[TossDecision] = None,
        at: Optional[datetime] = None,
    ) -> "MatchDomain":
        """Return the match in progress with its first inning open."""
        at = naive_local(at) or datetime.now()
        first = InningDomain(
            id=f"inning_{self.id}_1",
            match_id=self.id,
            inning_number=1,
            batting_team_id=batting_team_id,
            bowling_team_id=bowling_team_id,
            status=InningStatus.IN_PROGRESS,
            start_time=at,
        )
        return self.model_copy(
            update={
                "status": MatchStatus.IN_PROGRESS,
                "start_time": at,
                "toss_winner": toss_winner,
                "toss_decision": toss_decision,
                "current_inning": 1,
                "batting_team_id": batting_team_id,
                "bowling_team_id": bowling_team_id,
                "innings": [first],
            }
        )

    def with_inning(self, inning: InningDomain) -> "MatchDomain":
        """
        Return the match with the current inning replaced.

        A completed first inning opens the second with the sides swapped and
        a target of first-inning runs plus one. A completed second inning
        finishes the match.
        """
        innings = list(self.innings)
        innings[inning.inning_number - 1] = inning
        match = self.model_copy(update={"innings": innings})
        if not inning.is_complete:
            return match

        if inning.inning_number == 1:
            second = InningDomain(
                id=f"inning_{self.id}_2",
                match_id=self.id,
                inning_number=2,
                batting_team_id=inning.bowling_team_id,
                bowling_team_id=inning.batting_team_id,
                target=inning.runs + 1,
                status=InningStatus.IN_PROGRESS,
                start_time=inning.end_time or datetime.now(),
            )
            return match.model_copy(
                update={
                    "innings": innings + [second],
                    "current_inning": 2,
                    "batting_team_id": second.batting_team_id,
                    "bowling_team_id": second.bowling_team_id,
                }
            )
        return match.finished(at=inning.end_time)

    def finished(
        self, outcome: Optional[MatchOutcome] = None, at: Optional[datetime] = None
    ) -> "MatchDomain":
        """Return the completed match, closing any open inning."""
        at = naive_local(at) or datetime.now()
        innings = [i if i.is_complete else i.completed(at) for i in self.innings]
        match = self.model_copy(update={"innings": innings})
        if outcome is None:
            if len(innings) == 2:
                outcome = match.decide_outcome()
            else:
                outcome = MatchOutcome(result_type=ResultType.NO_RESULT, summary="No result")
        return match.model_copy(
            update={"status": MatchStatus.COMPLETED, "end_time": at, "outcome": outcome}
        )

    def decide_outcome(self) -> MatchOutcome:
        """
        Work out the result from two completed innings.

        The chasing side wins by wickets in hand once it reaches the target;
        otherwise the side batting first wins by the run difference.
        """
        first, second = self.innings[0], self.innings[1]
        if second.runs > first.runs:
            margin = max(self.all_out_wickets - second.wickets, 0)
            winner = second.batting_team_id
            margin_type = "wickets"
        elif second.runs == first.runs:
            return MatchOutcome(result_type=ResultType.TIE, summary="Match tied")
        else:
            margin = first.runs - second.runs
            winner = first.batting_team_id
            margin_type = "runs"

        winner_team = self.team(winner)
        name = winner_team.name if winner_team else winner
        unit = margin_type if margin != 1 else margin_type[:-1]
        return MatchOutcome(
            winner_team_id=winner,
            result_type=ResultType.WIN,
            win_margin=margin,
            win_margin_type=margin_type,
            summary=f"{name} won by {margin} {unit}",
        )
