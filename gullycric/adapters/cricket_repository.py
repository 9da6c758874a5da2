"""
Cricket repository implementation

Local storage is the source of truth. When it is empty and the mock backend
is reachable, matches (with their teams and players) are fetched from the
backend once and cached locally. Data source exceptions are translated into
Failures here and never reach the use cases.
"""

from typing import Callable, Dict, List, Optional, TypeVar

from loguru import logger

from ..domain.common.exceptions import (
    CacheException,
    NetworkException,
    NotFoundException,
    ServerException,
)
from ..domain.common.result import Failure, Result
from ..domain.models.enums import MatchStatus, PlayerRole, TeamType, TossDecision
from ..domain.models.match import MatchDomain, MatchOutcome
from ..domain.models.player import PlayerDomain, PlayerStats
from ..domain.models.score import BallDomain, InningDomain, ScoreDomain
from ..domain.models.team import TeamDomain
from ..domain.repositories.match_repository import MatchRepository
from ..domain.repositories.player_repository import PlayerRepository
from ..domain.repositories.score_repository import ScoreRepository
from ..domain.repositories.team_repository import TeamRepository
from .cricket_local_datasource import CricketLocalDataSource
from .cricket_mock_datasource import CricketMockDataSource
from .network_info import NetworkInfo

T = TypeVar("T")


def translate_exception(operation: str, error: Exception) -> Failure:
    """Map a data source exception to the matching Failure."""
    if isinstance(error, CacheException):
        return Failure.cache(error.message)
    if isinstance(error, NotFoundException):
        return Failure.not_found(error.message)
    if isinstance(error, ServerException):
        return Failure.server(error.message, status_code=error.status_code, code=error.code)
    if isinstance(error, NetworkException):
        return Failure.network(error.message)
    return Failure.server(f"Failed to {operation}: {error}")


def _page(items: List[T], limit: int, offset: int) -> List[T]:
    return items[offset : offset + limit]


class CricketRepositoryImpl(
    MatchRepository, TeamRepository, PlayerRepository, ScoreRepository
):
    """Match, team, player and score repository over local and mock data."""

    def __init__(
        self,
        local: CricketLocalDataSource,
        mock: CricketMockDataSource,
        network_info: NetworkInfo,
        seed_count: int = 5,
        seed_mock_data: bool = True,
    ):
        self.local = local
        self.mock = mock
        self.network_info = network_info
        self.seed_count = seed_count
        self.seed_mock_data = seed_mock_data

    def _guard(self, operation: str, action: Callable[[], Result[T]]) -> Result[T]:
        try:
            return action()
        except Exception as e:
            failure = translate_exception(operation, e)
            logger.error(f"❌ Failed to {operation}: {failure.message}")
            return Result.failure(failure)

    def _ensure_seeded(self) -> None:
        if not self.seed_mock_data or self.local.is_seeded() or self.local.get_matches():
            return
        if not self.network_info.is_connected():
            logger.info("📴 Offline and no local matches, nothing to load")
            return

        matches = self.mock.fetch_matches(self.seed_count)
        teams: Dict[str, TeamDomain] = {}
        for match in matches:
            teams[match.team1.id] = match.team1
            teams[match.team2.id] = match.team2

        self.local.save_matches(matches)
        for team in teams.values():
            self.local.save_team(team)
        self.local.save_players([p for team in teams.values() for p in team.players])
        self.local.mark_seeded()
        logger.info(f"🌱 Cached {len(matches)} matches and {len(teams)} teams from backend")

    def _require_match(self, match_id: str) -> MatchDomain:
        self._ensure_seeded()
        match = self.local.get_match(match_id)
        if match is None:
            raise NotFoundException(f"Match {match_id} not found")
        return match

    def _require_team(self, team_id: str) -> TeamDomain:
        self._ensure_seeded()
        team = self.local.get_team(team_id)
        if team is None:
            raise NotFoundException(f"Team {team_id} not found")
        return team

    def _require_player(self, player_id: str) -> PlayerDomain:
        self._ensure_seeded()
        player = self.local.get_player(player_id)
        if player is None:
            raise NotFoundException(f"Player {player_id} not found")
        return player

    # Matches

    def get_matches(
        self,
        status: Optional[MatchStatus] = None,
        user_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[List[MatchDomain]]:
        def action():
            self._ensure_seeded()
            matches = self.local.get_matches()
            if status is not None:
                matches = [m for m in matches if m.status == status]
            if user_id is not None:
                matches = [m for m in matches if m.created_by == user_id]
            matches.sort(key=lambda m: m.created_at, reverse=True)
            return Result.success(_page(matches, limit, offset))

        return self._guard("get matches", action)

    def get_match_by_id(self, match_id: str) -> Result[MatchDomain]:
        return self._guard(
            "get match", lambda: Result.success(self._require_match(match_id))
        )

    def create_match(self, match: MatchDomain) -> Result[MatchDomain]:
        def action():
            self._ensure_seeded()
            if self.local.get_match(match.id) is not None:
                return Result.failure(Failure.duplicate(f"Match {match.id} already exists"))
            self.local.save_match(match)
            for team in (match.team1, match.team2):
                if self.local.get_team(team.id) is None:
                    self.local.save_team(team)
            logger.info(f"🏏 Created match {match.id}: {match.title}")
            return Result.success(match)

        return self._guard("create match", action)

    def update_match(self, match: MatchDomain) -> Result[MatchDomain]:
        def action():
            self._require_match(match.id)
            self.local.update_match(match)
            return Result.success(match)

        return self._guard("update match", action)

    def delete_match(self, match_id: str) -> Result[None]:
        def action():
            self._require_match(match_id)
            self.local.delete_match(match_id)
            logger.info(f"🗑️ Deleted match {match_id}")
            return Result.success(None)

        return self._guard("delete match", action)

    def start_match(
        self,
        match_id: str,
        batting_team_id: str,
        bowling_team_id: str,
        toss_winner: Optional[str] = None,
        toss_decision: Optional[TossDecision] = None,
    ) -> Result[MatchDomain]:
        def action():
            match = self._require_match(match_id)
            if match.status != MatchStatus.SCHEDULED:
                return Result.failure(
                    Failure.invalid_match_state(match.status.value, MatchStatus.SCHEDULED.value)
                )
            started = match.started(
                batting_team_id, bowling_team_id, toss_winner, toss_decision
            )
            self.local.update_match(started)
            logger.info(f"▶️ Started match {match_id}, {batting_team_id} batting")
            return Result.success(started)

        return self._guard("start match", action)

    def end_match(
        self, match_id: str, outcome: Optional[MatchOutcome] = None
    ) -> Result[MatchDomain]:
        def action():
            match = self._require_match(match_id)
            if match.status != MatchStatus.IN_PROGRESS:
                return Result.failure(
                    Failure.invalid_match_state(
                        match.status.value, MatchStatus.IN_PROGRESS.value
                    )
                )
            finished = match.finished(outcome)
            self.local.update_match(finished)
            logger.info(f"🏁 Match {match_id} ended: {finished.outcome.summary}")
            return Result.success(finished)

        return self._guard("end match", action)

    def get_live_matches(self) -> Result[List[MatchDomain]]:
        return self._by_status("get live matches", MatchStatus.IN_PROGRESS)

    def get_upcoming_matches(self) -> Result[List[MatchDomain]]:
        def action():
            self._ensure_seeded()
            matches = [m for m in self.local.get_matches() if m.is_upcoming]
            matches.sort(key=lambda m: (m.start_time is None, m.start_time or m.created_at))
            return Result.success(matches)

        return self._guard("get upcoming matches", action)

    def get_completed_matches(self) -> Result[List[MatchDomain]]:
        return self._by_status("get completed matches", MatchStatus.COMPLETED)

    def _by_status(self, operation: str, status: MatchStatus) -> Result[List[MatchDomain]]:
        def action():
            self._ensure_seeded()
            matches = [m for m in self.local.get_matches() if m.status == status]
            matches.sort(key=lambda m: m.start_time or m.created_at, reverse=True)
            return Result.success(matches)

        return self._guard(operation, action)

    # Scoring

    def get_match_score(self, match_id: str) -> Result[ScoreDomain]:
        def action():
            match = self._require_match(match_id)
            inning = match.current_inning_entity
            if inning is None:
                return Result.failure(Failure.match("Match has not started"))
            return Result.success(
                ScoreDomain.from_inning(inning, match.total_overs, match.is_completed)
            )

        return self._guard("get match score", action)

    def record_ball(self, match_id: str, ball: BallDomain) -> Result[ScoreDomain]:
        def action():
            match = self._require_match(match_id)
            if match.status != MatchStatus.IN_PROGRESS:
                return Result.failure(
                    Failure.invalid_match_state(
                        match.status.value, MatchStatus.IN_PROGRESS.value
                    )
                )
            inning = match.current_inning_entity
            if inning is None or inning.is_complete:
                return Result.failure(Failure.score_update("No inning in progress"))

            updated = inning.with_ball(ball, match.total_overs, match.all_out_wickets)
            match = match.with_inning(updated)
            self.local.update_match(match)
            if updated.is_complete:
                logger.info(
                    f"📋 Inning {updated.inning_number} of {match_id} complete: "
                    f"{updated.runs}/{updated.wickets} ({updated.overs})"
                )
            return Result.success(
                ScoreDomain.from_inning(updated, match.total_overs, match.is_completed)
            )

        return self._guard("record ball", action)

    def get_inning(self, match_id: str, inning_number: int) -> Result[InningDomain]:
        def action():
            match = self._require_match(match_id)
            if inning_number < 1 or inning_number > len(match.innings):
                return Result.failure(
                    Failure.not_found(
                        f"Inning {inning_number} not found",
                        resource_type="inning",
                        resource_id=f"{match_id}:{inning_number}",
                    )
                )
            return Result.success(match.innings[inning_number - 1])

        return self._guard("get inning", action)

    def complete_inning(self, match_id: str) -> Result[MatchDomain]:
        def action():
            match = self._require_match(match_id)
            inning = match.current_inning_entity
            if match.status != MatchStatus.IN_PROGRESS or inning is None:
                return Result.failure(
                    Failure.invalid_match_state(
                        match.status.value, MatchStatus.IN_PROGRESS.value
                    )
                )
            if inning.is_complete:
                return Result.failure(Failure.score_update("Inning is already complete"))
            match = match.with_inning(inning.completed())
            self.local.update_match(match)
            logger.info(f"📋 Closed inning {inning.inning_number} of {match_id}")
            return Result.success(match)

        return self._guard("complete inning", action)

    # Teams

    def get_teams(
        self, team_type: Optional[TeamType] = None, limit: int = 20, offset: int = 0
    ) -> Result[List[TeamDomain]]:
        def action():
            self._ensure_seeded()
            teams = self.local.get_teams()
            if team_type is not None:
                teams = [t for t in teams if t.team_type == team_type]
            teams.sort(key=lambda t: t.name.lower())
            return Result.success(_page(teams, limit, offset))

        return self._guard("get teams", action)

    def get_team_by_id(self, team_id: str) -> Result[TeamDomain]:
        return self._guard("get team", lambda: Result.success(self._require_team(team_id)))

    def create_team(self, team: TeamDomain) -> Result[TeamDomain]:
        def action():
            self._ensure_seeded()
            if self.local.get_team(team.id) is not None:
                return Result.failure(Failure.duplicate(f"Team {team.id} already exists"))
            self.local.save_team(team)
            logger.info(f"👥 Created team {team.name}")
            return Result.success(team)

        return self._guard("create team", action)

    def update_team(self, team: TeamDomain) -> Result[TeamDomain]:
        def action():
            self._require_team(team.id)
            self.local.update_team(team)
            return Result.success(team)

        return self._guard("update team", action)

    def delete_team(self, team_id: str) -> Result[None]:
        def action():
            self._require_team(team_id)
            self.local.delete_team(team_id)
            return Result.success(None)

        return self._guard("delete team", action)

    def add_player_to_team(self, team_id: str, player_id: str) -> Result[TeamDomain]:
        def action():
            team = self._require_team(team_id)
            player = self._require_player(player_id)
            if team.has_player(player_id):
                return Result.failure(Failure.duplicate("Player is already in the team"))
            if team.is_full:
                return Result.failure(
                    Failure.team(f"Team is full ({team.max_players} players)")
                )
            player = player.model_copy(update={"team_id": team_id})
            team = team.model_copy(update={"players": team.players + [player]})
            self.local.update_player(player)
            self.local.update_team(team)
            return Result.success(team)

        return self._guard("add player to team", action)

    def remove_player_from_team(
        self, team_id: str, player_id: str
    ) -> Result[TeamDomain]:
        def action():
            team = self._require_team(team_id)
            if not team.has_player(player_id):
                return Result.failure(
                    Failure.not_found(
                        f"Player {player_id} is not in team {team_id}",
                        resource_type="player",
                        resource_id=player_id,
                    )
                )
            update = {"players": [p for p in team.players if p.id != player_id]}
            if team.captain_id == player_id:
                update["captain_id"] = None
            if team.vice_captain_id == player_id:
                update["vice_captain_id"] = None
            team = team.model_copy(update=update)
            self.local.update_team(team)

            player = self.local.get_player(player_id)
            if player is not None and player.team_id == team_id:
                self.local.update_player(
                    player.model_copy(
                        update={"team_id": None, "is_captain": False, "is_vice_captain": False}
                    )
                )
            return Result.success(team)

        return self._guard("remove player from team", action)

    def update_team_captain(
        self, team_id: str, captain_id: str, vice_captain_id: Optional[str] = None
    ) -> Result[TeamDomain]:
        def action():
            team = self._require_team(team_id)
            for member in filter(None, (captain_id, vice_captain_id)):
                if not team.has_player(member):
                    return Result.failure(
                        Failure.team(f"Player {member} is not a member of {team.name}")
                    )
            players = [
                p.model_copy(
                    update={
                        "is_captain": p.id == captain_id,
                        "is_vice_captain": p.id == vice_captain_id,
                    }
                )
                for p in team.players
            ]
            team = team.model_copy(
                update={
                    "captain_id": captain_id,
                    "vice_captain_id": vice_captain_id,
                    "players": players,
                }
            )
            self.local.update_team(team)
            return Result.success(team)

        return self._guard("update team captain", action)

    def search_teams(self, query: str) -> Result[List[TeamDomain]]:
        def action():
            self._ensure_seeded()
            needle = query.strip().lower()
            return Result.success(
                [
                    t
                    for t in self.local.get_teams()
                    if needle in t.name.lower() or needle in (t.short_name or "").lower()
                ]
            )

        return self._guard("search teams", action)

    # Players

    def get_players(
        self,
        team_id: Optional[str] = None,
        role: Optional[PlayerRole] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[List[PlayerDomain]]:
        def action():
            self._ensure_seeded()
            players = self.local.get_players()
            if team_id is not None:
                players = [p for p in players if p.team_id == team_id]
            if role is not None:
                players = [p for p in players if p.role == role]
            return Result.success(_page(players, limit, offset))

        return self._guard("get players", action)

    def get_player_by_id(self, player_id: str) -> Result[PlayerDomain]:
        return self._guard(
            "get player", lambda: Result.success(self._require_player(player_id))
        )

    def create_player(self, player: PlayerDomain) -> Result[PlayerDomain]:
        def action():
            self._ensure_seeded()
            if self.local.get_player(player.id) is not None:
                return Result.failure(
                    Failure.duplicate(f"Player {player.id} already exists")
                )
            self.local.save_player(player)
            logger.info(f"🧢 Created player {player.name}")
            return Result.success(player)

        return self._guard("create player", action)

    def update_player(self, player: PlayerDomain) -> Result[PlayerDomain]:
        def action():
            self._require_player(player.id)
            self.local.update_player(player)
            return Result.success(player)

        return self._guard("update player", action)

    def delete_player(self, player_id: str) -> Result[None]:
        def action():
            player = self._require_player(player_id)
            if player.team_id:
                team = self.local.get_team(player.team_id)
                if team is not None and team.has_player(player_id):
                    self.local.update_team(
                        team.model_copy(
                            update={"players": [p for p in team.players if p.id != player_id]}
                        )
                    )
            self.local.delete_player(player_id)
            return Result.success(None)

        return self._guard("delete player", action)

    def update_player_stats(
        self, player_id: str, stats: PlayerStats
    ) -> Result[PlayerDomain]:
        def action():
            player = self._require_player(player_id)
            player = player.model_copy(update={"career_stats": stats})
            self.local.update_player(player)
            return Result.success(player)

        return self._guard("update player stats", action)

    def search_players(self, query: str) -> Result[List[PlayerDomain]]:
        def action():
            self._ensure_seeded()
            needle = query.strip().lower()
            return Result.success(
                [
                    p
                    for p in self.local.get_players()
                    if needle in p.name.lower() or needle in (p.nickname or "").lower()
                ]
            )

        return self._guard("search players", action)

    def get_top_batsmen(self, limit: int = 10) -> Result[List[PlayerDomain]]:
        def action():
            self._ensure_seeded()
            players = sorted(
                self.local.get_players(),
                key=lambda p: (p.career_stats.runs_scored, p.career_stats.batting_average),
                reverse=True,
            )
            return Result.success(players[:limit])

        return self._guard("get top batsmen", action)

    def get_top_bowlers(self, limit: int = 10) -> Result[List[PlayerDomain]]:
        def action():
            self._ensure_seeded()
            bowlers = [p for p in self.local.get_players() if p.career_stats.wickets_taken > 0]
            # Fewer runs conceded per wicket breaks ties
            bowlers.sort(
                key=lambda p: (-p.career_stats.wickets_taken, p.career_stats.bowling_average)
            )
            return Result.success(bowlers[:limit])

        return self._guard("get top bowlers", action)
