"""Enumerations shared by the cricket and auth domain models."""

from enum import Enum


class MatchType(str, Enum):
    LOCAL = "local"
    FRIENDLY = "friendly"
    TOURNAMENT = "tournament"
    LEAGUE = "league"
    PRACTICE = "practice"


class MatchFormat(str, Enum):
    T20 = "t20"
    ODI = "odi"
    TEST = "test"
    T10 = "t10"
    CUSTOM = "custom"


class MatchStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"
    ABANDONED = "abandoned"


class TossDecision(str, Enum):
    BAT = "bat"
    BOWL = "bowl"


class ResultType(str, Enum):
    WIN = "win"
    TIE = "tie"
    DRAW = "draw"
    NO_RESULT = "no_result"
    ABANDONED = "abandoned"


class PlayerRole(str, Enum):
    BATSMAN = "batsman"
    BOWLER = "bowler"
    ALL_ROUNDER = "all_rounder"
    WICKET_KEEPER = "wicket_keeper"
    SPECIALIST = "specialist"


class BattingStyle(str, Enum):
    RIGHT_HANDED = "right_handed"
    LEFT_HANDED = "left_handed"


class BowlingStyle(str, Enum):
    RIGHT_ARM_FAST = "right_arm_fast"
    LEFT_ARM_FAST = "left_arm_fast"
    RIGHT_ARM_MEDIUM = "right_arm_medium"
    LEFT_ARM_MEDIUM = "left_arm_medium"
    RIGHT_ARM_SPIN = "right_arm_spin"
    LEFT_ARM_SPIN = "left_arm_spin"
    NONE = "none"


class TeamType(str, Enum):
    CLUB = "club"
    SCHOOL = "school"
    CORPORATE = "corporate"
    FRIENDS = "friends"
    COMMUNITY = "community"
    PROFESSIONAL = "professional"


class BallType(str, Enum):
    """Delivery type. Wides and no-balls are not legal deliveries."""

    NORMAL = "normal"
    WIDE = "wide"
    NO_BALL = "no_ball"
    BYE = "bye"
    LEG_BYE = "leg_bye"


class ExtraType(str, Enum):
    WIDE = "wide"
    NO_BALL = "no_ball"
    BYE = "bye"
    LEG_BYE = "leg_bye"
    PENALTY = "penalty"


class WicketType(str, Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    LBW = "lbw"
    RUN_OUT = "run_out"
    STUMPED = "stumped"
    HIT_WICKET = "hit_wicket"
    HANDLED_BALL = "handled_ball"
    OBSTRUCTING_FIELD = "obstructing_field"
    TIMED_OUT = "timed_out"
    RETIRED = "retired"


class InningStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"


class UserRole(str, Enum):
    USER = "user"
    PREMIUM = "premium"
    ORGANIZER = "organizer"
    MODERATOR = "moderator"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    BANNED = "banned"
