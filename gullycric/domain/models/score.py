"""Ball-by-ball scoring models: deliveries, overs, innings and score snapshots."""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from .enums import BallType, ExtraType, InningStatus, WicketType

BALLS_PER_OVER = 6

_EXTRA_FOR_BALL = {
    BallType.WIDE: ExtraType.WIDE,
    BallType.NO_BALL: ExtraType.NO_BALL,
    BallType.BYE: ExtraType.BYE,
    BallType.LEG_BYE: ExtraType.LEG_BYE,
}

_EXTRA_CODES = {
    ExtraType.WIDE: "WD",
    ExtraType.NO_BALL: "NB",
    ExtraType.BYE: "B",
    ExtraType.LEG_BYE: "LB",
    ExtraType.PENALTY: "P",
}


def format_overs(legal_balls: int) -> str:
    """Cricket overs notation: 15 legal balls -> "2.3"."""
    return f"{legal_balls // BALLS_PER_OVER}.{legal_balls % BALLS_PER_OVER}"


class BallDomain(BaseModel):
    """
    A single delivery.

    runs_scored are the runs taken off the delivery. A wide or no-ball adds
    one further extra run; runs off wides, byes and leg byes are extras
    rather than batsman runs.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    over_number: int = Field(default=0, ge=0, description="Zero-based over index")
    ball_number: int = Field(default=1, ge=1, description="Delivery within the over")
    bowler_id: str = Field(..., min_length=1)
    striker_id: str = Field(..., min_length=1)
    non_striker_id: Optional[str] = None
    runs_scored: int = Field(default=0, ge=0, le=7)
    ball_type: BallType = Field(default=BallType.NORMAL)
    is_wicket: bool = False
    wicket_type: Optional[WicketType] = None
    dismissed_player_id: Optional[str] = None
    fielder_id: Optional[str] = None
    commentary: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def validate_wicket(self):
        if self.is_wicket and self.wicket_type is None:
            raise ValueError("A wicket ball requires a wicket type")
        if not self.is_wicket and self.wicket_type is not None:
            raise ValueError("wicket_type given for a ball without a wicket")
        return self

    @property
    def extra_type(self) -> Optional[ExtraType]:
        return _EXTRA_FOR_BALL.get(self.ball_type)

    @property
    def is_extra(self) -> bool:
        return self.extra_type is not None

    @property
    def is_legal(self) -> bool:
        return self.ball_type not in (BallType.WIDE, BallType.NO_BALL)

    @property
    def batsman_runs(self) -> int:
        if self.ball_type in (BallType.NORMAL, BallType.NO_BALL):
            return self.runs_scored
        return 0

    @property
    def extra_runs(self) -> int:
        penalty = 0 if self.is_legal else 1
        return penalty + self.runs_scored - self.batsman_runs

    @property
    def total_runs(self) -> int:
        return self.batsman_runs + self.extra_runs

    @property
    def is_dot_ball(self) -> bool:
        return self.runs_scored == 0 and not self.is_extra and not self.is_wicket

    @property
    def is_boundary(self) -> bool:
        return self.batsman_runs in (4, 6)

    @property
    def description(self) -> str:
        if self.is_wicket:
            return "W"
        if self.batsman_runs == 6:
            return "6"
        if self.batsman_runs == 4:
            return "4"
        if self.is_extra:
            return _EXTRA_CODES[self.extra_type]
        return str(self.runs_scored)


class OverDomain(BaseModel):
    """A completed over."""

    over_number: int = Field(..., ge=0)
    bowler_id: str
    balls: List[BallDomain] = Field(default_factory=list)
    runs: int = Field(default=0, ge=0)
    wickets: int = Field(default=0, ge=0)
    extras: int = Field(default=0, ge=0)
    is_maiden: bool = False

    @classmethod
    def from_balls(cls, over_number: int, balls: List[BallDomain]) -> "OverDomain":
        runs = sum(b.total_runs for b in balls)
        return cls(
            over_number=over_number,
            bowler_id=balls[-1].bowler_id,
            balls=list(balls),
            runs=runs,
            wickets=sum(1 for b in balls if b.is_wicket),
            extras=sum(b.extra_runs for b in balls),
            is_maiden=runs == 0,
        )

    @property
    def summary(self) -> str:
        return " ".join(b.description for b in self.balls)


class InningDomain(BaseModel):
    """One side's batting innings."""

    id: str = Field(..., min_length=1)
    match_id: str = Field(..., min_length=1)
    inning_number: int = Field(..., ge=1, le=2)
    batting_team_id: str
    bowling_team_id: str
    runs: int = Field(default=0, ge=0)
    wickets: int = Field(default=0, ge=0)
    legal_balls: int = Field(default=0, ge=0)
    extras: int = Field(default=0, ge=0)
    target: Optional[int] = Field(None, ge=1, description="Runs needed to win")
    completed_overs: List[OverDomain] = Field(default_factory=list)
    current_over: List[BallDomain] = Field(default_factory=list)
    status: InningStatus = Field(default=InningStatus.IN_PROGRESS)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def overs(self) -> str:
        return format_overs(self.legal_balls)

    @property
    def run_rate(self) -> float:
        if self.legal_balls == 0:
            return 0.0
        return self.runs * BALLS_PER_OVER / self.legal_balls

    @property
    def is_complete(self) -> bool:
        return self.status == InningStatus.COMPLETED

    @property
    def balls(self) -> List[BallDomain]:
        completed = [b for over in self.completed_overs for b in over.balls]
        return completed + list(self.current_over)

    @property
    def last_ball(self) -> Optional[BallDomain]:
        balls = self.balls
        return balls[-1] if balls else None

    @property
    def current_over_summary(self) -> str:
        return " ".join(b.description for b in self.current_over)

    def with_ball(
        self, ball: BallDomain, total_overs: int, all_out_wickets: int
    ) -> "InningDomain":
        """
        Return a copy of the inning with a delivery applied.

        The ball is stamped with its over and ball number. An over closes
        after six legal deliveries. The inning completes when the batting
        side is all out, the overs are exhausted or the target is reached.
        """
        if self.is_complete:
            raise ValueError(f"Inning {self.inning_number} is already complete")

        ball = ball.model_copy(
            update={
                "over_number": self.legal_balls // BALLS_PER_OVER,
                "ball_number": len(self.current_over) + 1,
            }
        )
        legal_balls = self.legal_balls + (1 if ball.is_legal else 0)
        current_over = self.current_over + [ball]
        completed_overs = list(self.completed_overs)
        if ball.is_legal and legal_balls % BALLS_PER_OVER == 0:
            completed_overs.append(
                OverDomain.from_balls(ball.over_number, current_over)
            )
            current_over = []

        runs = self.runs + ball.total_runs
        wickets = self.wickets + (1 if ball.is_wicket else 0)
        finished = (
            wickets >= all_out_wickets
            or legal_balls >= total_overs * BALLS_PER_OVER
            or (self.target is not None and runs >= self.target)
        )

        return self.model_copy(
            update={
                "runs": runs,
                "wickets": wickets,
                "legal_balls": legal_balls,
                "extras": self.extras + ball.extra_runs,
                "completed_overs": completed_overs,
                "current_over": current_over,
                "status": InningStatus.COMPLETED if finished else self.status,
                "end_time": ball.timestamp if finished else self.end_time,
            }
        )

    def completed(self, at: Optional[datetime] = None) -> "InningDomain":
        return self.model_copy(
            update={
                "status": InningStatus.COMPLETED,
                "end_time": at or datetime.now(),
            }
        )


class ScoreDomain(BaseModel):
    """Live score snapshot for a match."""

    match_id: str
    inning_number: int = Field(..., ge=1, le=2)
    batting_team_id: str
    bowling_team_id: str
    runs: int = Field(default=0, ge=0)
    wickets: int = Field(default=0, ge=0)
    overs: str = "0.0"
    legal_balls: int = Field(default=0, ge=0)
    extras: int = Field(default=0, ge=0)
    run_rate: float = Field(default=0.0, ge=0.0)
    required_run_rate: Optional[float] = None
    target: Optional[int] = None
    runs_required: Optional[int] = None
    balls_remaining: int = Field(default=0, ge=0)
    current_over: str = ""
    is_inning_complete: bool = False
    is_match_complete: bool = False
    last_updated: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_inning(
        cls, inning: InningDomain, total_overs: int, match_complete: bool = False
    ) -> "ScoreDomain":
        balls_remaining = max(total_overs * BALLS_PER_OVER - inning.legal_balls, 0)
        runs_required = None
        required_run_rate = None
        if inning.target is not None:
            runs_required = max(inning.target - inning.runs, 0)
            required_run_rate = (
                runs_required * BALLS_PER_OVER / balls_remaining
                if balls_remaining
                else 0.0
            )
        return cls(
            match_id=inning.match_id,
            inning_number=inning.inning_number,
            batting_team_id=inning.batting_team_id,
            bowling_team_id=inning.bowling_team_id,
            runs=inning.runs,
            wickets=inning.wickets,
            overs=inning.overs,
            legal_balls=inning.legal_balls,
            extras=inning.extras,
            run_rate=round(inning.run_rate, 2),
            required_run_rate=(
                round(required_run_rate, 2) if required_run_rate is not None else None
            ),
            target=inning.target,
            runs_required=runs_required,
            balls_remaining=balls_remaining,
            current_over=inning.current_over_summary,
            is_inning_complete=inning.is_complete,
            is_match_complete=match_complete,
        )

    @property
    def score_display(self) -> str:
        return f"{self.runs}/{self.wickets}"
