"""Application use cases: validate input, then delegate to a repository."""

from .auth_usecases import (
    ChangePasswordParams,
    ChangePasswordUseCase,
    CheckAuthStatusUseCase,
    CheckEmailAvailabilityUseCase,
    CheckPhoneAvailabilityUseCase,
    EmailParams,
    GetCurrentUserUseCase,
    LoginWithEmailParams,
    LoginWithEmailUseCase,
    LoginWithPhoneParams,
    LoginWithPhoneUseCase,
    LogoutUseCase,
    PasswordParams,
    RefreshTokenUseCase,
    ResetPasswordWithTokenParams,
    ResetPasswordWithTokenUseCase,
    SendOtpParams,
    SendOtpUseCase,
    SendPasswordResetEmailUseCase,
    SignUpWithEmailParams,
    SignUpWithEmailUseCase,
    ValidatePasswordStrengthUseCase,
    VerifyOtpParams,
    VerifyOtpUseCase,
)
from .base import NoParams, UseCase
from .match_usecases import (
    CreateMatchParams,
    CreateMatchUseCase,
    DeleteMatchUseCase,
    EndMatchParams,
    EndMatchUseCase,
    GetCompletedMatchesUseCase,
    GetLiveMatchesUseCase,
    GetMatchesParams,
    GetMatchesUseCase,
    GetMatchUseCase,
    GetUpcomingMatchesUseCase,
    MatchIdParams,
    StartMatchParams,
    StartMatchUseCase,
    UpdateMatchParams,
    UpdateMatchUseCase,
)
from .player_usecases import (
    CreatePlayerParams,
    CreatePlayerUseCase,
    GetPlayersParams,
    GetPlayersUseCase,
    GetPlayerUseCase,
    GetTopBatsmenUseCase,
    GetTopBowlersUseCase,
    PlayerIdParams,
    SearchPlayersUseCase,
    TopPlayersParams,
    UpdatePlayerStatsParams,
    UpdatePlayerStatsUseCase,
)
from .score_usecases import (
    CompleteInningUseCase,
    GetInningParams,
    GetInningUseCase,
    GetMatchScoreUseCase,
    RecordBallParams,
    RecordBallUseCase,
)
from .team_usecases import (
    AddPlayerToTeamUseCase,
    CreateTeamParams,
    CreateTeamUseCase,
    GetTeamsParams,
    GetTeamsUseCase,
    GetTeamUseCase,
    RemovePlayerFromTeamUseCase,
    SearchParams,
    SearchTeamsUseCase,
    TeamIdParams,
    TeamPlayerParams,
    UpdateTeamCaptainParams,
    UpdateTeamCaptainUseCase,
)

__all__ = [
    "UseCase",
    "NoParams",
    # Matches
    "CreateMatchParams",
    "CreateMatchUseCase",
    "GetMatchesParams",
    "GetMatchesUseCase",
    "MatchIdParams",
    "GetMatchUseCase",
    "GetLiveMatchesUseCase",
    "GetUpcomingMatchesUseCase",
    "GetCompletedMatchesUseCase",
    "UpdateMatchParams",
    "UpdateMatchUseCase",
    "DeleteMatchUseCase",
    "StartMatchParams",
    "StartMatchUseCase",
    "EndMatchParams",
    "EndMatchUseCase",
    # Teams
    "CreateTeamParams",
    "CreateTeamUseCase",
    "GetTeamsParams",
    "GetTeamsUseCase",
    "TeamIdParams",
    "GetTeamUseCase",
    "TeamPlayerParams",
    "AddPlayerToTeamUseCase",
    "RemovePlayerFromTeamUseCase",
    "UpdateTeamCaptainParams",
    "UpdateTeamCaptainUseCase",
    "SearchParams",
    "SearchTeamsUseCase",
    # Players
    "CreatePlayerParams",
    "CreatePlayerUseCase",
    "GetPlayersParams",
    "GetPlayersUseCase",
    "PlayerIdParams",
    "GetPlayerUseCase",
    "UpdatePlayerStatsParams",
    "UpdatePlayerStatsUseCase",
    "SearchPlayersUseCase",
    "TopPlayersParams",
    "GetTopBatsmenUseCase",
    "GetTopBowlersUseCase",
    # Scoring
    "RecordBallParams",
    "RecordBallUseCase",
    "GetMatchScoreUseCase",
    "GetInningParams",
    "GetInningUseCase",
    "CompleteInningUseCase",
    # Auth
    "LoginWithEmailParams",
    "LoginWithEmailUseCase",
    "LoginWithPhoneParams",
    "LoginWithPhoneUseCase",
    "SendOtpParams",
    "SendOtpUseCase",
    "VerifyOtpParams",
    "VerifyOtpUseCase",
    "SignUpWithEmailParams",
    "SignUpWithEmailUseCase",
    "EmailParams",
    "CheckEmailAvailabilityUseCase",
    "CheckPhoneAvailabilityUseCase",
    "SendPasswordResetEmailUseCase",
    "ResetPasswordWithTokenParams",
    "ResetPasswordWithTokenUseCase",
    "ChangePasswordParams",
    "ChangePasswordUseCase",
    "PasswordParams",
    "ValidatePasswordStrengthUseCase",
    "GetCurrentUserUseCase",
    "CheckAuthStatusUseCase",
    "LogoutUseCase",
    "RefreshTokenUseCase",
]
